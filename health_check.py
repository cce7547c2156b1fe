"""Health check endpoint for monitoring worker status"""

from flask import Blueprint, jsonify
import psutil
import os
from state import directory, matchmaking

health_bp = Blueprint('health', __name__)


@health_bp.route('/health', methods=['GET'])
def health_check():
    """
    Returns server status, memory usage, rooms and queue sizes.
    Used by load balancer health checks.
    """
    try:
        process = psutil.Process(os.getpid())
        memory_mb = process.memory_info().rss / 1024 / 1024

        rooms = directory.list_rooms()
        return jsonify({
            "status": "healthy",
            "pid": os.getpid(),
            "memory_mb": round(memory_mb, 2),
            "active_rooms": len(rooms),
            "total_players": sum(len(r.players) for r in rooms),
            "active_games": sum(1 for r in rooms if r.status == "playing"),
            "queues": matchmaking.counts(),
            "num_threads": process.num_threads()
        }), 200

    except Exception as e:
        return jsonify({
            "status": "unhealthy",
            "error": str(e)
        }), 500


@health_bp.route('/metrics', methods=['GET'])
def metrics():
    """Per-room breakdown for debugging"""
    try:
        process = psutil.Process(os.getpid())
        memory_info = process.memory_info()

        room_details = []
        for room in directory.list_rooms():
            room_details.append({
                "room_id": room.room_id,
                "players": [p.username for p in room.players],
                "status": room.status,
                "league": room.league,
                "current_turn": room.current_turn,
                "prize": room.prize,
                "reset_pending": room.reset_timer is not None
            })

        return jsonify({
            "process": {
                "pid": os.getpid(),
                "cpu_percent": process.cpu_percent(interval=0.1),
                "num_threads": process.num_threads(),
            },
            "memory": {
                "rss_mb": round(memory_info.rss / 1024 / 1024, 2),
                "vms_mb": round(memory_info.vms / 1024 / 1024, 2),
                "percent": process.memory_percent()
            },
            "rooms": {
                "total": len(room_details),
                "details": room_details
            },
            "sessions": len(directory.sessions)
        }), 200

    except Exception as e:
        return jsonify({
            "error": str(e)
        }), 500
