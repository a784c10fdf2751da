"""
Connections Plus Server Application Package

A daily four-level word grouping puzzle: players find groups of four
related words while a hidden red herring from each level carries into the
next, and the final level reveals the red herrings as a group of their own.
"""

from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
from .config import Config


def create_app(config_class=Config):
    """
    Application factory pattern for creating Flask app instances.

    Services that need configuration of their own (store, admin auth, word
    generator, authoring) are initialized before this is called; the play
    service is created here because it runs its background work on the
    Socket.IO server.

    Args:
        config_class: Configuration class to use

    Returns:
        (app, socketio) with all extensions initialized
    """
    app = Flask(__name__)
    app.config.from_object(config_class)

    # Initialize extensions
    CORS(app)
    socketio = SocketIO(app, cors_allowed_origins="*", logger=False, engineio_logger=False)

    from .services.game_store import get_game_store
    from .services.play_service import initialize_play_service, run_inline

    game_store = get_game_store()
    if game_store:
        initialize_play_service(
            game_store,
            task_runner=socketio.start_background_task if app.config['BACKGROUND_TASKS'] else run_inline,
            sleep=socketio.sleep,
            final_reveal_delay=app.config['FINAL_REVEAL_DELAY_SECONDS'],
        )

    # Register blueprints
    from .controllers.game_controller import game_bp
    from .controllers.admin_controller import admin_bp
    from .controllers.authoring_controller import authoring_bp

    app.register_blueprint(game_bp, url_prefix='/api')
    app.register_blueprint(admin_bp, url_prefix='/api')
    app.register_blueprint(authoring_bp, url_prefix='/api')

    # Register WebSocket handlers
    from .websocket.handlers import register_websocket_handlers
    register_websocket_handlers(socketio)

    # Store socketio instance for use in other modules
    app.socketio = socketio

    return app, socketio
