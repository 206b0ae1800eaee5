import os
from dotenv import load_dotenv

load_dotenv()

REQUIRED_ENV_VARS = ('SPOTIFY_CLIENT_ID', 'SPOTIFY_CLIENT_SECRET')


def validate_required_env_vars():
    """Raise ValueError naming every required variable that is unset."""
    missing = [name for name in REQUIRED_ENV_VARS if not os.getenv(name)]
    if missing:
        raise ValueError(
            f"Missing required environment variables: {', '.join(missing)}"
        )


class Config:
    """Base configuration."""
    SPOTIFY_CLIENT_ID = os.getenv('SPOTIFY_CLIENT_ID')
    SPOTIFY_CLIENT_SECRET = os.getenv('SPOTIFY_CLIENT_SECRET')
    SPOTIFY_REDIRECT_URI = os.getenv(
        'SPOTIFY_REDIRECT_URI', 'http://127.0.0.1:8888/callback'
    )

    # Loopback callback listener
    CALLBACK_HOST = os.getenv('CALLBACK_HOST', '127.0.0.1')
    CALLBACK_PORT = int(os.getenv('CALLBACK_PORT', 8888))
    CALLBACK_PATH = '/callback'

    # Where the listener sends the browser back to
    APP_SCHEME = os.getenv('APP_SCHEME', 'tauri')
    APP_HOST = os.getenv('APP_HOST', 'localhost')

    # Outbound requests
    REQUEST_TIMEOUT = float(os.getenv('REQUEST_TIMEOUT', 10))
    COMMAND_WORKERS = int(os.getenv('COMMAND_WORKERS', 8))

    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
    DEBUG = False
    TESTING = False


class ProductionConfig(Config):
    """Production configuration."""
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'WARNING')


class DevelopmentConfig(Config):
    """Development configuration."""
    DEBUG = True
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'DEBUG')


class TestingConfig(Config):
    """Testing configuration."""
    TESTING = True
    DEBUG = True
    SPOTIFY_CLIENT_ID = 'test_client_id'
    SPOTIFY_CLIENT_SECRET = 'test_client_secret'
    SPOTIFY_REDIRECT_URI = 'http://127.0.0.1:8888/callback'
    CALLBACK_PORT = 0
    REQUEST_TIMEOUT = 1.0


# Dictionary for easy config selection
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}
