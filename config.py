#!/usr/bin/env python
# config.py
import os
from typing import List
from urllib.parse import quote_plus

from dotenv import load_dotenv

load_dotenv()

# This assumes config.py is at the root of your project
basedir = os.path.abspath(os.path.dirname(__file__))


def _get_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _get_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _get_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "t", "yes", "y", "on"}


def _get_csv_list(name: str, default: str) -> List[str]:
    raw = os.getenv(name)
    source = raw if raw is not None else default
    return [token.strip() for token in source.split(",") if token and token.strip()]


def _database_url() -> str:
    explicit = os.environ.get('DATABASE_URL')
    if explicit:
        return explicit
    # MySQL deployments describe the connection piecewise
    db_name = os.environ.get('DB_NAME')
    if db_name:
        user = quote_plus(os.environ.get('DB_USER', 'root'))
        password = quote_plus(os.environ.get('DB_PASSWORD', ''))
        host = os.environ.get('DB_HOST', 'localhost')
        port = _get_int('DB_PORT', 3306)
        credentials = f"{user}:{password}" if password else user
        return f"mysql+pymysql://{credentials}@{host}:{port}/{db_name}"
    return 'sqlite:///' + os.path.join(basedir, 'src', 'database', 'instance', 'tunely.db')


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-change-me'

    # Bearer tokens
    JWT_SECRET = os.environ.get('JWT_SECRET') or SECRET_KEY
    JWT_ALGORITHM = 'HS256'
    JWT_EXPIRES_SECONDS = max(1, _get_int('JWT_EXPIRES_SECONDS', 3600))

    # Database
    SQLALCHEMY_DATABASE_URI = _database_url()
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Spotify API (music catalog)
    SPOTIPY_CLIENT_ID = os.environ.get('SPOTIPY_CLIENT_ID')
    SPOTIPY_CLIENT_SECRET = os.environ.get('SPOTIPY_CLIENT_SECRET')
    CATALOG_MARKET = os.getenv('CATALOG_MARKET', 'US')
    CATALOG_CACHE_TTL_SECONDS = _get_int('CATALOG_CACHE_TTL_SECONDS', 300)
    CATALOG_CACHE_MAXSIZE = max(1, _get_int('CATALOG_CACHE_MAXSIZE', 256))

    # HTTP
    CORS_ALLOWED_ORIGINS = _get_csv_list('CORS_ALLOWED_ORIGINS', 'http://localhost:8081,http://localhost:19006')
    PORT = _get_int('PORT', 5500)

    # Client library
    API_URL = os.getenv('API_URL', 'http://localhost:5500/api')
    API_TIMEOUT_SECONDS = _get_float('API_TIMEOUT_SECONDS', 10.0)
    MUSIC_DIR = os.getenv('MUSIC_DIR', os.path.join(os.path.expanduser('~'), 'Music'))
    LOCAL_STORE_PATH = os.getenv('LOCAL_STORE_PATH', os.path.join(basedir, 'instance', 'local_store.json'))

    # Song loader tunables
    SONGS_INITIAL_BATCH_SIZE = max(1, _get_int('SONGS_INITIAL_BATCH_SIZE', 20))
    SONGS_BATCH_SIZE = max(1, _get_int('SONGS_BATCH_SIZE', 50))
    SONGS_FALLBACK_TIMEOUT_SECONDS = _get_float('SONGS_FALLBACK_TIMEOUT_SECONDS', 5.0)
    SONGS_CACHE_TTL_SECONDS = _get_int('SONGS_CACHE_TTL_SECONDS', 30 * 60)
    SONGS_BACKGROUND_REFRESH_SECONDS = _get_int('SONGS_BACKGROUND_REFRESH_SECONDS', 5 * 60)
    SONGS_BACKGROUND_REFRESH_DELAY_SECONDS = _get_float('SONGS_BACKGROUND_REFRESH_DELAY_SECONDS', 2.0)
    SONGS_REVEAL_DELAY_SECONDS = _get_float('SONGS_REVEAL_DELAY_SECONDS', 0.3)
    SONGS_CACHE_WRITE_THRESHOLD = max(1, _get_int('SONGS_CACHE_WRITE_THRESHOLD', 100))

    # Runtime behavior
    # Turn Flask debug on/off from env; default off to avoid noisy console
    DEBUG = _get_bool('DEBUG', False)
    # Control console logging; when disabled, logs go only to file
    ENABLE_CONSOLE_LOGS = _get_bool('ENABLE_CONSOLE_LOGS', False)
    # JSON logs to stdout (request-scoped fields)
    STRUCTURED_LOGS = _get_bool('STRUCTURED_LOGS', True)
