from __future__ import annotations

import sys
from pathlib import Path

from flask import Flask, send_from_directory
from flask_cors import CORS
from flask_socketio import SocketIO
from werkzeug.middleware.proxy_fix import ProxyFix

from .config import Config
from .game.service import GameService
from .routes.health import bp as health_bp
from .routes.rooms import bp as rooms_bp
from .realtime.handlers import register_socketio_handlers


def create_app(config_class=Config) -> tuple[Flask, SocketIO]:
    static_dir = Path(config_class.STATIC_DIR)

    # The static folder is wired by hand below so "/" can fall back to index.html.
    app = Flask(__name__, static_folder=None)
    app.config.from_object(config_class)

    if app.config.get("TRUST_PROXY_HEADERS", False):
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_port=1)

    cors_origins = app.config.get("CORS_ORIGINS", "*")
    CORS(app, resources={r"/api/*": {"origins": cors_origins}})

    async_mode = app.config.get("SOCKETIO_ASYNC_MODE") or ""
    if not async_mode:
        # Default choice:
        # - Windows: threading (eventlet has known compatibility issues on newer Python)
        # - Python >= 3.13: threading (safer default)
        # - Otherwise: eventlet
        if sys.platform.startswith("win") or sys.version_info >= (3, 13):
            async_mode = "threading"
        else:
            async_mode = "eventlet"

    socketio = SocketIO(
        app,
        cors_allowed_origins=cors_origins,
        async_mode=async_mode,
    )

    service = GameService.from_config(app.config)
    app.extensions["stopclip"] = service

    app.register_blueprint(health_bp, url_prefix="/api")
    app.register_blueprint(rooms_bp, url_prefix="/api")

    register_socketio_handlers(
        socketio,
        service,
        sweep_interval=float(app.config.get("SWEEP_INTERVAL_SEC", 1)),
    )

    if static_dir.exists():
        @app.get("/")
        def index():
            return send_from_directory(static_dir, "index.html")

        @app.get("/<path:path>")
        def static_proxy(path: str):
            return send_from_directory(static_dir, path)
    else:
        app.logger.warning("Static directory %s not found; serving the API only", static_dir)

    app.logger.info(
        "stopclip ready: async_mode=%s clips=%d static=%s",
        async_mode,
        len(service.clips),
        static_dir,
    )
    return app, socketio
