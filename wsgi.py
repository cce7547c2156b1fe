"""WSGI entry point: gunicorn -c gunicorn_config.py wsgi:app"""

from main import app, socketio
from config import Config

if __name__ == "__main__":
    socketio.run(app, host=Config.HOST, port=Config.PORT, allow_unsafe_werkzeug=True)
