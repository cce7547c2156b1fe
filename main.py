# main.py
# Do NOT import gevent or eventlet.
# We are using 'threading' mode to ensure compatibility with Firebase (gRPC).

import os
# gRPC stability settings for Gunicorn/Linux
os.environ.setdefault("GRPC_ENABLE_FORK_SUPPORT", "0")
os.environ.setdefault("GRPC_POLL_STRATEGY", "poll")

from flask import Flask, jsonify, request

from config import Config
from errors import LedgerError
from extensions import socketio
from ledger import get_ledger, init_ledger
from trivia import get_oracle, init_oracle

# Importing these registers their @socketio.on handlers.
# They must be imported before init_app so every app instance picks them up.
import general_events  # noqa: F401
import lobby_events  # noqa: F401
import game_events  # noqa: F401


def create_app(config_class=Config):
    app = Flask(__name__)
    app.config.from_object(config_class)

    socketio.init_app(app, cors_allowed_origins=app.config["CORS_ALLOWED_ORIGINS"])
    init_ledger(config_class)
    init_oracle(app.config["DATA_DIR"])

    from health_check import health_bp
    app.register_blueprint(health_bp)

    @app.route("/players")
    def players():
        return jsonify(get_oracle().players)

    @app.route("/api/leaderboard")
    def leaderboard():
        limit = request.args.get("limit", 20, type=int)
        try:
            return jsonify(get_ledger().leaderboard(limit)), 200
        except LedgerError as e:
            print(f"❌ Leaderboard error: {e}")
            return jsonify({"error": "Leaderboard unavailable"}), 500

    return app


app = create_app()

if __name__ == "__main__":
    print(f"🚀 Server running (http://{Config.HOST}:{Config.PORT})")
    # allow_unsafe_werkzeug: the dev server is fine for local play
    socketio.run(app, host=Config.HOST, port=Config.PORT, debug=True,
                 allow_unsafe_werkzeug=True, use_reloader=False)
