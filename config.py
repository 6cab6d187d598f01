"""
Configuration for the school fee ledger
"""
import os

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


def database_url_from_env():
    """Read DATABASE_URL, correcting the legacy postgres:// scheme for SQLAlchemy"""
    database_url = os.environ.get('DATABASE_URL')
    if database_url and database_url.startswith("postgres://"):
        return database_url.replace("postgres://", "postgresql://", 1)
    return database_url


class Config:
    DEBUG = False
    TESTING = False

    SECRET_KEY = os.environ.get('SECRET_KEY', 'dev-secret-key')

    # Storage: relational backend when set, in-memory otherwise
    DATABASE_URL = database_url_from_env()
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # School
    CURRENT_ACADEMIC_YEAR = os.environ.get('CURRENT_ACADEMIC_YEAR', '2025-2026')
    SCHOOL_NAME = os.environ.get('SCHOOL_NAME', 'SRI SUDHA VIDYANIKETAN')
    SCHOOL_ADDRESS = os.environ.get('SCHOOL_ADDRESS', 'RAJAHMAHENDRAVARAM')

    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

    @staticmethod
    def init_app(app):
        pass


class DevelopmentConfig(Config):
    DEBUG = True
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'DEBUG')


class TestingConfig(Config):
    TESTING = True
    DATABASE_URL = None
    CURRENT_ACADEMIC_YEAR = '2025-2026'


class ProductionConfig(Config):
    PREFERRED_URL_SCHEME = 'https'

    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_size': 10,
        'pool_timeout': 30,
        'pool_recycle': 1800,  # Recycle connections after 30 minutes
        'max_overflow': 2,
        'pool_pre_ping': True,
    }

    @staticmethod
    def init_app(app):
        if app.config['SECRET_KEY'] == 'dev-secret-key':
            app.logger.warning("SECRET_KEY is not set; using the development default")
        if not app.config.get('DATABASE_URL'):
            app.logger.warning("DATABASE_URL is not set; records are kept in memory per worker")


config_by_name = {
    'development': DevelopmentConfig,
    'testing': TestingConfig,
    'production': ProductionConfig,
}
