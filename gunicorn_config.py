"""Gunicorn configuration for Flask-SocketIO"""

import os

# Threaded worker: the server runs Flask-SocketIO in 'threading' mode
# with simple-websocket, so no eventlet/gevent monkey patching.
worker_class = 'gthread'
threads = int(os.environ.get('GUNICORN_THREADS', '100'))

# Rooms, sessions and queues live in process memory
workers = 1

bind = f"{os.environ.get('HOST', '0.0.0.0')}:{os.environ.get('PORT', '5000')}"

# Logging
accesslog = '-'
errorlog = '-'
loglevel = 'info'

# Firestore calls can be slow
timeout = 300
graceful_timeout = 30
keepalive = 5

worker_tmp_dir = '/dev/shm'
reload = False
preload_app = False


def on_starting(server):
    print("🚀 Gunicorn master process starting...")


def when_ready(server):
    print("✅ Gunicorn server ready to accept connections")


def worker_abort(worker):
    """Called when a worker receives the SIGABRT signal (timeout)."""
    print(f"❌ WORKER TIMEOUT: Worker {worker.pid} aborted!")
    import traceback
    import sys
    traceback.print_stack(file=sys.stderr)


def on_exit(server):
    print("🛑 Gunicorn master process shutting down...")
