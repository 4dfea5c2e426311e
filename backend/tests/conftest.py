import os
import sys
import pytest

# Ensure the backend root (containing the `playplatform` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from playplatform import create_app, db, socketio


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    CORS_ORIGINS = ['http://localhost:4000']
    LEADERBOARD_LIMIT = 3
    PLAYER_TOKEN_MAX_AGE_SEC = 3600
    # bcrypt at its cheapest so the suite stays fast
    BCRYPT_LOG_ROUNDS = 4


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        # Ensure models are imported so tables are created
        import playplatform.models  # noqa: F401
        db.create_all()
        yield application
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def platformer(flask_app):
    from playplatform.models import Game
    game = Game(title='Platformer', slug='platformer', featured=True)
    db.session.add(game)
    db.session.commit()
    return game


@pytest.fixture()
def player(flask_app):
    from playplatform.models import Player
    p = Player(username='bijan', display_name='Bijan')
    p.set_password('secret123')
    db.session.add(p)
    db.session.commit()
    return p


@pytest.fixture()
def sio_client(flask_app):
    test_client = socketio.test_client(
        flask_app,
        flask_test_client=flask_app.test_client(),
        namespace='/ws'
    )
    yield test_client
    if test_client.is_connected('/ws'):
        test_client.disconnect(namespace='/ws')
