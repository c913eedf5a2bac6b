from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
import click
from config import Config

db = SQLAlchemy()
migrate = Migrate()
socketio = SocketIO(async_mode=None)

def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    origins = flask_app.config.get('CORS_ORIGINS') or []
    db.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, origins=origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=origins)

    from cardflip.main import main
    flask_app.register_blueprint(main)

    from cardflip.api.scores import scores
    flask_app.register_blueprint(scores, url_prefix='/api/scores')

    from cardflip.api.hints import hints
    flask_app.register_blueprint(hints, url_prefix='/api/hint')

    # Importing here binds the handlers to the initialized socketio instance
    from cardflip.socketio_events import register_socketio_handlers
    register_socketio_handlers()

    @click.command('db-reset')
    def db_reset_command():
        """Drops and recreates the score table."""
        import cardflip.models  # noqa: F401
        with flask_app.app_context():
            db.drop_all()
            db.create_all()
            print('Database has been reset!')

    @click.command('check-config')
    def check_config_command():
        """Reports which optional features the environment enables."""
        from cardflip.main import feature_flags
        flags = feature_flags(flask_app.config)
        print(f"leaderboard: {'enabled' if flags['leaderboard'] else 'disabled (set SCORE_STORE_URL and SCORE_STORE_KEY)'}")
        print(f"hints: {'enabled' if flags['hints'] else 'disabled (set HINT_ENDPOINT_URL)'}")
        print(f"hint proxy: {'enabled' if flask_app.config.get('OPENAI_API_KEY') else 'disabled (set OPENAI_API_KEY)'}")

    flask_app.cli.add_command(db_reset_command)
    flask_app.cli.add_command(check_config_command)

    return flask_app
