# extensions.py
from flask_socketio import SocketIO

# Threading mode: one process holds every room in memory, the reset
# timers are plain threading.Timer objects.
socketio = SocketIO(async_mode='threading')
