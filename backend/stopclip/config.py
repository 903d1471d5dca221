import os
from pathlib import Path


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev")

    # Server
    HOST = os.environ.get("HOST", "0.0.0.0")
    PORT = int(os.environ.get("PORT", "3000"))
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    # CORS
    CORS_ORIGINS = os.environ.get("CORS_ORIGINS", "*")

    # Reverse proxy / IP headers
    TRUST_PROXY_HEADERS = os.environ.get("TRUST_PROXY_HEADERS", "1") == "1"

    # Empty means auto-detect (see server.create_app)
    SOCKETIO_ASYNC_MODE = os.environ.get("SOCKETIO_ASYNC_MODE", "").strip()

    # Static landing page + clip assets
    STATIC_DIR = os.environ.get("STATIC_DIR", str(Path(__file__).resolve().parents[2] / "public"))
    CLIPS_FILE = os.environ.get("CLIPS_FILE", "")

    # Rooms
    ROOM_CODE_ALPHABET = os.environ.get("ROOM_CODE_ALPHABET", "ABCDEFGHJKLMNPQRSTUVWXYZ23456789")
    ROOM_CODE_LENGTH = int(os.environ.get("ROOM_CODE_LENGTH", "4"))

    # Game
    MAX_PREVIEWS = int(os.environ.get("MAX_PREVIEWS", "2"))
    MAX_ROUNDS = int(os.environ.get("MAX_ROUNDS", "50"))

    # Sweeper (0 disables)
    TURN_TIMEOUT_SEC = int(os.environ.get("TURN_TIMEOUT_SEC", "0"))
    ROOM_IDLE_TTL_SEC = int(os.environ.get("ROOM_IDLE_TTL_SEC", "0"))
    SWEEP_INTERVAL_SEC = float(os.environ.get("SWEEP_INTERVAL_SEC", "1"))
