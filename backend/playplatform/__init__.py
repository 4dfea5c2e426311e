from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_bcrypt import Bcrypt
from flask_login import LoginManager
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
import click
from playplatform.config import Config

db = SQLAlchemy()
bcrypt = Bcrypt()
login_manager = LoginManager()
migrate = Migrate()
socketio = SocketIO(async_mode=None)

def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    allowed_origins = flask_app.config.get('CORS_ORIGINS') or '*'

    db.init_app(flask_app)
    bcrypt.init_app(flask_app)
    login_manager.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, supports_credentials=True, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    from playplatform.auth import auth
    flask_app.register_blueprint(auth)

    from playplatform.api.players import players
    flask_app.register_blueprint(players, url_prefix='/api/players')

    from playplatform.api.games import games
    flask_app.register_blueprint(games, url_prefix='/api/games')

    from playplatform.api.gameplays import gameplays
    flask_app.register_blueprint(gameplays, url_prefix='/api/gameplays')

    from playplatform.socketio_events import register_socketio_handlers
    register_socketio_handlers(testing=flask_app.config.get('TESTING', False))

    # Flask-Login user loader
    from playplatform.models import Player

    @login_manager.user_loader
    def load_user(player_id):
        return db.session.get(Player, int(player_id))

    @login_manager.unauthorized_handler
    def unauthorized():
        return jsonify({'error': 'Login required'}), 401

    @click.command('db-reset')
    def db_reset_command():
        """Drops, recreates, and seeds the database."""
        from playplatform.models import Game
        with flask_app.app_context():
            db.drop_all()
            db.create_all()

            db.session.add(Game(
                title='Platformer',
                slug='platformer',
                description='Collect ten coins before the clock runs out.',
                thumbnail='/images/platformer.png',
                featured=True,
            ))
            # Seed players
            for username in ['player1', 'player2', 'player3']:
                player = Player(username=username, display_name=username.capitalize())
                player.set_password('password')
                db.session.add(player)

            db.session.commit()
            print('Database has been reset and seeded!')

    flask_app.cli.add_command(db_reset_command)

    return flask_app
