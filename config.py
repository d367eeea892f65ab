import os
from datetime import timedelta

BASE_DIR = os.path.dirname(os.path.abspath(__file__))


def resolve_database_url():
    """DATABASE_URL, else one assembled from the PG* variables, else None"""
    url = os.environ.get('DATABASE_URL')
    if not url:
        parts = [os.environ.get(name) for name in ('PGUSER', 'PGPASSWORD', 'PGHOST', 'PGPORT', 'PGDATABASE')]
        if all(parts):
            url = "postgresql://{}:{}@{}:{}/{}".format(*parts)
    if url and url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql://", 1)
    return url


class Config:
    """Base configuration"""

    # Flask Settings
    SECRET_KEY = os.environ.get('SESSION_SECRET', 'CHANGE-THIS-SECRET-KEY-IN-PRODUCTION')
    PERMANENT_SESSION_LIFETIME = timedelta(days=7)
    REMEMBER_COOKIE_DURATION = timedelta(days=14)
    SESSION_COOKIE_SECURE = False
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')

    # Database Settings
    _database_url = resolve_database_url()
    SQLALCHEMY_DATABASE_URI = _database_url or 'sqlite:///portfolio.db'
    # Pool settings only make sense for a server database
    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_size': 10,
        'pool_recycle': 3600,
        'pool_pre_ping': True,
    } if _database_url else {}
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Storage buckets live under UPLOAD_FOLDER/<bucket>
    MAX_CONTENT_LENGTH = 16 * 1024 * 1024  # 16MB
    UPLOAD_FOLDER = os.environ.get('UPLOAD_FOLDER', os.path.join(BASE_DIR, 'uploads'))

    # Query cache for entity lists, invalidated on every mutation.
    # The backend must be shared by every worker and by the flask CLI, so the
    # default is a cache directory; set CACHE_TYPE=RedisCache for several hosts.
    QUERY_CACHE_ENABLED = os.environ.get('QUERY_CACHE_ENABLED', 'true').lower() != 'false'
    CACHE_TYPE = os.environ.get('CACHE_TYPE', 'FileSystemCache')
    CACHE_DIR = os.environ.get('CACHE_DIR', os.path.join(BASE_DIR, 'instance', 'cache'))
    CACHE_REDIS_URL = os.environ.get('CACHE_REDIS_URL')
    CACHE_DEFAULT_TIMEOUT = int(os.environ.get('CACHE_DEFAULT_TIMEOUT', '300'))
    CACHE_KEY_PREFIX = os.environ.get('CACHE_KEY_PREFIX', 'portfolio:')

    # Contact form rate limiting
    CONTACT_RATE_LIMIT = int(os.environ.get('CONTACT_RATE_LIMIT', '5'))
    CONTACT_RATE_WINDOW = int(os.environ.get('CONTACT_RATE_WINDOW', '60'))

    # Owner notifications for new contact messages
    ADMIN_TELEGRAM_BOT_TOKEN = os.environ.get('ADMIN_TELEGRAM_BOT_TOKEN')
    ADMIN_TELEGRAM_CHAT_ID = os.environ.get('ADMIN_TELEGRAM_CHAT_ID')
    ADMIN_SMTP_HOST = os.environ.get('ADMIN_SMTP_HOST')
    ADMIN_SMTP_PORT = os.environ.get('ADMIN_SMTP_PORT', '587')
    ADMIN_SMTP_EMAIL = os.environ.get('ADMIN_SMTP_EMAIL')
    ADMIN_SMTP_PASSWORD = os.environ.get('ADMIN_SMTP_PASSWORD')
    ADMIN_RECIPIENT_EMAIL = os.environ.get('ADMIN_RECIPIENT_EMAIL')


class DevelopmentConfig(Config):
    """Development configuration"""
    DEBUG = True
    TESTING = False
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'DEBUG')


class ProductionConfig(Config):
    """Production configuration"""
    DEBUG = False
    TESTING = False
    SESSION_COOKIE_SECURE = True
    REMEMBER_COOKIE_SECURE = True


class TestingConfig(Config):
    """Testing configuration"""
    DEBUG = True
    TESTING = True
    SECRET_KEY = 'testing-secret'
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    # In-memory SQLite uses StaticPool, which rejects pool_size and friends
    SQLALCHEMY_ENGINE_OPTIONS = {}
    # One in-process cache per test app
    CACHE_TYPE = 'SimpleCache'
    ADMIN_TELEGRAM_BOT_TOKEN = None
    ADMIN_TELEGRAM_CHAT_ID = None
    ADMIN_SMTP_HOST = None


config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}


def get_config(config_name=None):
    """Get configuration by name, falling back to FLASK_ENV"""
    env = config_name or os.environ.get('FLASK_ENV', 'development')
    return config.get(env, config['default'])
