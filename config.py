import os
from dotenv import load_dotenv

from buenos_dias.errors import ConfigurationError

# Load .env file only in development environment
if os.environ.get('FLASK_ENV') != 'production':
    load_dotenv()


def _csv(value):
    return [part.strip() for part in value.split(',') if part.strip()] if value else []


def _optional_int(value):
    return int(value) if value not in (None, '') else None


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY', 'a_very_secret_key_for_dev')
    MONGO_URI = os.environ.get('MONGODB_URI')
    MONGO_DB_NAME = os.environ.get('MONGODB_DB_NAME', 'buenos_dias')
    GOOGLE_API_KEY = os.environ.get('GOOGLE_API_KEY')
    GEMINI_MODEL = os.environ.get('GEMINI_MODEL', 'gemini-2.5-flash')
    # Empty leaves thinking to the model default; gemini-2.5-pro rejects 0
    GEMINI_THINKING_BUDGET = _optional_int(os.environ.get('GEMINI_THINKING_BUDGET', '0'))
    FLASK_ENV = os.environ.get('FLASK_ENV', 'development')
    FLASK_DEBUG = os.environ.get('FLASK_DEBUG', 'False').lower() == 'true'

    # Scraping
    SCRAPE_LIMIT = int(os.environ.get('SCRAPE_LIMIT', 50))
    SCRAPE_SOURCES = _csv(os.environ.get('SCRAPE_SOURCES'))
    SCRAPE_INTERVAL_HOURS = int(os.environ.get('SCRAPE_INTERVAL_HOURS', 6))
    FETCH_MAX_WORKERS = int(os.environ.get('FETCH_MAX_WORKERS', 5))
    REQUEST_TIMEOUT_SECONDS = float(os.environ.get('REQUEST_TIMEOUT_SECONDS', 15))

    # Curation
    TOP_K = int(os.environ.get('TOP_K', 10))
    RECENT_WINDOW_HOURS = int(os.environ.get('RECENT_WINDOW_HOURS', 24))
    CANDIDATE_LIMIT = int(os.environ.get('CANDIDATE_LIMIT', 50))
    ANALYSIS_MAX_WORKERS = int(os.environ.get('ANALYSIS_MAX_WORKERS', 3))
    CURATION_HOUR = int(os.environ.get('CURATION_HOUR', 7))

    @classmethod
    def validate(cls, require_collaborator=True):
        """Raise ConfigurationError when a required setting is missing."""
        if not cls.MONGO_URI:
            raise ConfigurationError("No MONGODB_URI provided in environment variables")
        if require_collaborator and not cls.GOOGLE_API_KEY:
            raise ConfigurationError("No GOOGLE_API_KEY provided in environment variables")


class DevelopmentConfig(Config):
    DEBUG = True


class ProductionConfig(Config):
    DEBUG = False
    FLASK_ENV = 'production'


def get_config():
    env = os.environ.get('FLASK_ENV', 'development')
    if env == 'development':
        return DevelopmentConfig
    return ProductionConfig
