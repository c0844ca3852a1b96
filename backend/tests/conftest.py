import os
import sys
import random
import pytest

# Ensure the backend root (containing the `typespeed` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from typespeed import create_app, db, socketio
from typespeed.services.game import GameEngine
from typespeed.services.history import LocalHistory


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    EASY_SECONDS = 5
    NORMAL_SECONDS = 3
    HARD_SECONDS = 2
    LOCAL_HISTORY_LIMIT = 50
    SCORES_DEFAULT_LIMIT = 50
    SCORES_MAX_LIMIT = 1000
    SCORE_SERVICE_URL = ''
    CORS_ORIGINS = '*'


@pytest.fixture()
def flask_app(tmp_path):
    class _Config(TestConfig):
        LOCAL_HISTORY_DIR = str(tmp_path / 'history')

    application = create_app(_Config)
    with application.app_context():
        # Ensure models are imported so tables are created
        import typespeed.models  # noqa: F401
        db.create_all()
        yield application
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_client(flask_app):
    test_client = socketio.test_client(
        flask_app,
        flask_test_client=flask_app.test_client(),
        namespace='/ws'
    )
    yield test_client
    try:
        test_client.disconnect(namespace='/ws')
    except Exception:
        pass


@pytest.fixture()
def history(tmp_path):
    return LocalHistory(str(tmp_path / 'local'))


class EventLog:
    def __init__(self):
        self.events = []

    def __call__(self, event, payload):
        self.events.append((event, payload))

    def names(self):
        return [name for name, _ in self.events]

    def last(self, name):
        for event, payload in reversed(self.events):
            if event == name:
                return payload
        return None


@pytest.fixture()
def events():
    return EventLog()


@pytest.fixture()
def make_engine(history, events):
    def _make(words=None, seconds=None, **kwargs):
        pools = {'Easy': words or ['alpha', 'bravo', 'charlie', 'delta']}
        kwargs.setdefault('history', history)
        return GameEngine(
            word_pools=pools,
            level_seconds={'Easy': seconds or 3},
            listener=events,
            rng=random.Random(7),
            **kwargs
        )
    return _make
