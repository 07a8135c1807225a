from flask import Flask
import atexit
import logging

from .database import ArticleStore
from .errors import ConfigurationError


def init_store(app):
    """Connect the content store; an unreachable store is fatal at startup."""
    try:
        store = ArticleStore.connect(
            app.config.get('MONGO_URI'),
            db_name=app.config.get('MONGO_DB_NAME', 'buenos_dias'),
        )
    except ConfigurationError as e:
        app.logger.error(f"Failed to initialize content store: {e}")
        raise
    atexit.register(store.close)
    return store


def create_app(config_object, store=None):
    """Create and configure the Flask application"""
    app = Flask(__name__)

    # Configure logging first
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(name)s - %(message)s")
    app.logger.setLevel(logging.INFO)

    # Load configuration
    try:
        app.config.from_object(config_object)
    except Exception as e:
        app.logger.error(f"Failed to load configuration: {e}")
        raise

    if store is None:
        store = init_store(app)
    app.extensions['article_store'] = store

    from .routes.main import main_bp
    app.register_blueprint(main_bp)

    @app.route('/')
    def index():
        return "Buenos Días curation backend is running!"

    return app


__all__ = ['create_app', 'init_store']
