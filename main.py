"""
Connections Plus Server - Main Entry Point

Initializes storage and services, then starts the Flask-SocketIO
application.
"""

from connections_plus import create_app
from connections_plus.config import Config
from connections_plus.services.admin_auth_service import initialize_admin_auth_service
from connections_plus.services.authoring_service import initialize_authoring_service
from connections_plus.services.game_store import initialize_game_store
from connections_plus.services.kv_store import create_store
from connections_plus.services.word_generator import initialize_word_generator
from connections_plus.utils.game_logger import game_logger


def main():
    """Main function to initialize services and start the server."""
    store = None
    try:
        print("Initializing services...")

        store = create_store(Config)
        print(f"✓ Storage initialized ({store.backend})")

        game_store = initialize_game_store(store)
        print("✓ Game store initialized successfully")

        admin_auth_service = initialize_admin_auth_service(
            Config.ADMIN_USERNAME,
            password=Config.ADMIN_PASSWORD,
            password_hash=Config.ADMIN_PASSWORD_HASH,
            jwt_secret=Config.JWT_SECRET,
            token_expiration_minutes=Config.ADMIN_TOKEN_EXPIRATION_MINUTES,
        )
        if admin_auth_service:
            print("✓ Admin authentication initialized successfully")
        else:
            print("✗ Admin credentials or JWT secret not configured - admin API disabled")

        word_generator = initialize_word_generator(
            Config.ANTHROPIC_API_KEY,
            model=Config.WORDGEN_MODEL,
            max_tokens=Config.WORDGEN_MAX_TOKENS,
        )
        if Config.ANTHROPIC_API_KEY:
            print("✓ Word generator initialized successfully")
        else:
            print("✗ ANTHROPIC_API_KEY not configured - word generation disabled")

        initialize_authoring_service(game_store, word_generator)
        print("✓ Authoring service initialized successfully")

        print("Creating Flask application...")
        app, socketio = create_app(Config)
        print("✓ Flask application created successfully")

        game_logger.logger.info("Connections Plus Server Starting")

        print(f"\nStarting Connections Plus Server on {Config.HOST}:{Config.PORT}")
        print(f"Debug mode: {Config.DEBUG}")
        print(f"Admin available: {admin_auth_service is not None}")
        print("=" * 50)

        socketio.run(app, host=Config.HOST, port=Config.PORT, debug=Config.DEBUG)

    except KeyboardInterrupt:
        print("\nServer shutting down...")
        game_logger.logger.info("Connections Plus Server shutting down (KeyboardInterrupt)")
    except Exception as e:
        print(f"Error starting server: {e}")
        game_logger.logger.error(f"Error starting server: {e}")
        raise
    finally:
        if store is not None:
            store.close()


if __name__ == '__main__':
    main()
