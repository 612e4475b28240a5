import os
import random
import sys
import pytest

# Ensure the backend root (containing the `catfish` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from catfish import create_app, socketio
from catfish.services.games import GameCoordinator, GameSettings


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    CORS_ALLOWED_ORIGINS = '*'
    ASSIGNMENT_DURATION_SEC = 2
    PROFILE_CREATION_DURATION_SEC = 5
    SABOTAGE_DURATION_SEC = 5
    CHAT_DURATION_SEC = 5
    DECISION_DURATION_SEC = 5
    PEXELS_API_KEY = None


class RecordingEmitter:
    """Collects (event, payload, to) tuples emitted by the coordinator."""

    def __init__(self):
        self.events = []

    def __call__(self, event, payload=None, to=None):
        self.events.append((event, payload, to))

    def named(self, event, to=None):
        return [p for e, p, t in self.events if e == event and (to is None or t == to)]

    def clear(self):
        self.events.clear()


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    yield application


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_factory(flask_app):
    clients = []

    def _make():
        test_client = socketio.test_client(flask_app, namespace='/ws')
        clients.append(test_client)
        return test_client

    yield _make
    for test_client in clients:
        try:
            if test_client.is_connected('/ws'):
                test_client.disconnect(namespace='/ws')
        except Exception:
            pass


@pytest.fixture()
def settings():
    return GameSettings(
        assignment_sec=2,
        profile_creation_sec=5,
        sabotage_sec=5,
        chat_sec=5,
        decision_sec=5,
    )


@pytest.fixture()
def emitter():
    return RecordingEmitter()


@pytest.fixture()
def coordinator(settings, emitter):
    return GameCoordinator(settings, emit=emitter, rng=random.Random(7))
