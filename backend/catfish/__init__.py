from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
from config import Config

socketio = SocketIO(async_mode=None)


def _allowed_origins(raw):
    if not raw or raw.strip() == '*':
        return '*'
    return [o.strip() for o in raw.split(',') if o.strip()]


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    from catfish.services.games import GameCoordinator, GameSettings
    # Fail at startup on bad durations, before the server is bound to this app
    settings = GameSettings.from_config(flask_app.config)

    allowed_origins = _allowed_origins(flask_app.config.get('CORS_ALLOWED_ORIGINS'))
    CORS(flask_app, origins=allowed_origins)
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # One coordinator per app; handlers reach it via current_app.extensions
    from catfish.services.games.scheduler import make_clock_scheduler
    from catfish.socketio_events import emit_event, register_socketio_handlers

    flask_app.extensions['catfish'] = GameCoordinator(
        settings,
        emit=emit_event,
        schedule=make_clock_scheduler(flask_app),
    )

    from catfish.routes import main
    flask_app.register_blueprint(main)

    register_socketio_handlers()

    return flask_app
