import os
import sys
import pytest

# Ensure the backend root (containing the `pickup` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from pickup import create_app, db, relay, socketio


ALLOWED_ORIGIN = 'http://localhost:5173'


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    ALLOWED_ORIGINS = [ALLOWED_ORIGIN, 'https://game1-frontend.vercel.app']
    DEFAULT_MAX_PLAYERS = 6
    CHAT_HISTORY_LIMIT = 50
    SOCKETIO_NAMESPACE = '/'
    LOG_LEVEL = 'DEBUG'


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        # Ensure models are imported so tables are created
        import pickup.models  # noqa: F401
        db.create_all()
        yield application
        db.session.remove()
        db.drop_all()
    relay.shutdown()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


def _connect(flask_app):
    return socketio.test_client(flask_app, flask_test_client=flask_app.test_client())


@pytest.fixture()
def sio_client(flask_app):
    test_client = _connect(flask_app)
    yield test_client
    if test_client.is_connected():
        test_client.disconnect()


@pytest.fixture()
def sio_factory(flask_app):
    """Open extra Socket.IO clients; all are disconnected on teardown."""
    opened = []

    def make():
        test_client = _connect(flask_app)
        opened.append(test_client)
        return test_client

    yield make
    for test_client in opened:
        if test_client.is_connected():
            test_client.disconnect()
