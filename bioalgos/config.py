import os


def _env_flag(name, default='false'):
    return os.environ.get(name, default).lower() in ('true', '1', 'yes')


class BaseConfig:
    """Base configuration shared across all environments."""

    # Flask core
    SECRET_KEY = os.environ.get('SECRET_KEY', 'fallback-secret-key-change-me')
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Database
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        'SQLALCHEMY_DATABASE_URI', 'sqlite:///dev.db'
    )

    # Remote API used by the client data layer
    BIOALGOS_API_URL = os.environ.get(
        'BIOALGOS_API_URL', 'http://localhost:3001/api'
    )
    API_PROBE_TIMEOUT = float(os.environ.get('API_PROBE_TIMEOUT', '2.0'))
    API_REQUEST_TIMEOUT = float(os.environ.get('API_REQUEST_TIMEOUT', '5.0'))
    API_PROBE_ON_START = _env_flag('API_PROBE_ON_START', 'true')

    # Local fallback store (JSON file standing in for browser storage)
    LOCAL_STORE_PATH = os.environ.get(
        'LOCAL_STORE_PATH',
        os.path.join(os.path.expanduser('~'), '.bioalgos', 'local_store.json'),
    )

    # Identity
    IDENTITY_BACKEND = os.environ.get('IDENTITY_BACKEND', 'local')
    KEYCLOAK_URL = os.environ.get('KEYCLOAK_URL', 'http://localhost:8080')
    KEYCLOAK_REALM = os.environ.get('KEYCLOAK_REALM', 'bioalgos')
    KEYCLOAK_CLIENT_ID = os.environ.get('KEYCLOAK_CLIENT_ID', 'bioalgos-client')
    KEYCLOAK_TIMEOUT = float(os.environ.get('KEYCLOAK_TIMEOUT', '5.0'))
    ADMIN_SIGNUP_KEY = os.environ.get('ADMIN_SIGNUP_KEY', 'bioadmin123')

    # Logging
    LOG_FILE_MAX_BYTES = int(os.environ.get('LOG_FILE_MAX_BYTES', '0'))
    LOG_FILE_BACKUP_COUNT = int(os.environ.get('LOG_FILE_BACKUP_COUNT', '3'))
    LOG_FORMAT = os.environ.get(
        'LOG_FORMAT', '%(asctime)s [%(levelname)s] %(name)s: %(message)s'
    )


class DevelopmentConfig(BaseConfig):
    """Development environment configuration."""

    DEBUG = True
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        'SQLALCHEMY_DATABASE_URI', 'sqlite:///dev.db'
    )


class ProductionConfig(BaseConfig):
    """Production environment configuration."""

    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.environ.get(
        'SQLALCHEMY_DATABASE_URI', 'sqlite:///prod.db'
    )
    LOG_FILE_MAX_BYTES = int(os.environ.get('LOG_FILE_MAX_BYTES', str(5 * 1024 * 1024)))


class TestingConfig(BaseConfig):
    """Testing environment configuration."""

    TESTING = True
    DEBUG = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    SECRET_KEY = 'test-secret-key'
    SERVER_NAME = 'localhost'
    BIOALGOS_API_URL = 'http://api.test/api'
    API_PROBE_ON_START = False
    LOG_FILE_MAX_BYTES = 0
    IDENTITY_BACKEND = 'local'
    ADMIN_SIGNUP_KEY = 'test-admin-key'


config_map = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
}


def get_config(config_name=None):
    """Return the config class for *config_name* (defaults to FLASK_ENV)."""
    name = config_name or os.environ.get('FLASK_ENV', 'development')
    return config_map.get(name, config_map['development'])
