from flask import Flask, jsonify, request
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
import click
from config import Config

db = SQLAlchemy()
migrate = Migrate()
socketio = SocketIO(async_mode=None)

from pickup.services.chat.relay import RoomRelay  # noqa: E402

relay = RoomRelay()


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(flask_app.config.get('LOG_LEVEL', 'INFO'))

    allowed_origins = list(flask_app.config.get('ALLOWED_ORIGINS', []))

    db.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(
        flask_app,
        supports_credentials=True,
        origins=allowed_origins,
        methods=['GET', 'POST', 'PUT'],
    )

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)
    relay.init_app(flask_app, socketio)

    @flask_app.before_request
    def reject_unlisted_origin():
        origin = request.headers.get('Origin')
        if origin and origin not in allowed_origins:
            flask_app.logger.warning(f"[cors] rejected origin={origin} path={request.path}")
            return jsonify({'message': 'Not allowed by CORS'}), 403
        return None

    from pickup.exceptions import StoreUnavailable

    @flask_app.errorhandler(StoreUnavailable)
    def handle_store_unavailable(exc):
        return jsonify({'message': exc.message}), 500

    from pickup.main import main
    flask_app.register_blueprint(main)

    from pickup.api.games import games
    flask_app.register_blueprint(games, url_prefix='/api/games')

    from pickup.api.posts import posts
    flask_app.register_blueprint(posts, url_prefix='/api/posts')

    # Bind Socket.IO handlers and forward domain events to connected clients
    from pickup.socketio_events import register_socketio_handlers
    register_socketio_handlers(flask_app)

    @click.command('db-reset')
    def db_reset_command():
        """Drops, recreates, and seeds the database."""
        from pickup.models import Game, Post
        with flask_app.app_context():
            db.drop_all()
            db.create_all()

            db.session.add(Game(
                title='Sunday Pickup',
                sport='Basketball',
                time='Sunday 10:00',
                location='Riverside Courts',
            ))
            db.session.add(Post(
                title='Welcome!',
                caption='Find a game near you and jump in.',
                image='',
                author_id='system',
                author_name='Pickup',
            ))
            db.session.commit()
            print('Database has been reset and seeded!')

    flask_app.cli.add_command(db_reset_command)

    return flask_app
