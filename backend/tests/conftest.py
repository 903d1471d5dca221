import random

import pytest

from stopclip.config import Config
from stopclip.game.models import Clip
from stopclip.game.registry import RoomRegistry
from stopclip.game.service import GameService
from stopclip.server import create_app


TEST_CLIPS = [
    Clip(file="clipsite/a.mp4", label="Clip A", limit=4.5),
    Clip(file="clipsite/b.mp4", label="Clip B", limit=5.2),
]


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret"
    SOCKETIO_ASYNC_MODE = "threading"
    TRUST_PROXY_HEADERS = False
    STATIC_DIR = "/nonexistent/stopclip-static"
    CLIPS_FILE = ""
    TURN_TIMEOUT_SEC = 0
    ROOM_IDLE_TTL_SEC = 0


@pytest.fixture()
def service():
    rng = random.Random(1234)
    registry = RoomRegistry(alphabet=Config.ROOM_CODE_ALPHABET, length=4, rng=rng)
    return GameService(clips=TEST_CLIPS, registry=registry, rng=rng)


@pytest.fixture()
def app_and_socketio():
    return create_app(TestConfig)


@pytest.fixture()
def flask_app(app_and_socketio):
    return app_and_socketio[0]


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def connect(app_and_socketio):
    """Factory for Socket.IO test clients; all are disconnected on teardown."""
    app, socketio = app_and_socketio
    clients = []

    def _connect():
        c = socketio.test_client(app, flask_test_client=app.test_client())
        clients.append(c)
        return c

    yield _connect

    for c in clients:
        if c.is_connected():
            c.disconnect()
