import os
import sys
import pytest

# Ensure the backend root (containing the `family_game` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from family_game import create_app, db, socketio
from family_game.services.games import GameEngine


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    CORS_ORIGINS = '*'
    MAX_PLAYERS = 10
    MIN_PLAYERS = 2
    MIN_NAME_LENGTH = 2
    MAX_NAME_LENGTH = 20
    MAX_WORD_LENGTH = 50
    HISTORY_DEFAULT_LIMIT = 20
    HISTORY_MAX_LIMIT = 50


def identity_random():
    """Random source under which the shuffle keeps the original order."""
    return 0.999999


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        # Ensure models are imported so tables are created
        import family_game.models  # noqa: F401
        db.create_all()
        yield application
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def engine():
    return GameEngine()


@pytest.fixture()
def ordered_engine():
    """Engine whose shuffles preserve join order."""
    return GameEngine(random_fn=identity_random)


@pytest.fixture()
def sio_client(flask_app):
    test_client = socketio.test_client(flask_app, flask_test_client=flask_app.test_client())
    yield test_client
    try:
        if test_client.is_connected():
            test_client.disconnect()
    except Exception:
        pass


@pytest.fixture()
def sio_factory(flask_app, sio_client):
    """Hands out ``sio_client`` first, then one extra connected client per call."""
    clients = []

    def _make():
        if not clients:
            clients.append(sio_client)
            return sio_client
        test_client = socketio.test_client(flask_app, flask_test_client=flask_app.test_client())
        clients.append(test_client)
        return test_client

    yield _make
    for c in clients[1:]:
        try:
            if c.is_connected():
                c.disconnect()
        except Exception:
            pass


def start_playing(engine, names_and_words):
    """Create a room, join everybody, submit words and enter PLAYING.

    ``names_and_words`` is a list of (session_id, name, word); the first
    entry becomes the host. Returns the room.
    """
    (host_sid, host_name, _), *rest = names_and_words
    room = engine.create_room(host_name, host_sid)
    for sid, name, _ in rest:
        engine.join_room(room.code, name, sid)
    engine.start_game(host_sid)
    for sid, _, word in names_and_words:
        engine.submit_word(sid, word)
    return engine.advance_from_reading(host_sid)


@pytest.fixture()
def setup_game():
    return start_playing
