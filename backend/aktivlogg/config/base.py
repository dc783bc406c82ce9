"""Base configuration shared by all environments."""
import os
from datetime import timedelta

class Config:
    """Base configuration."""
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev-secret-key-change-in-production'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ECHO = False

    # JWT Configuration (tokens are issued by the external auth service)
    JWT_SECRET_KEY = os.environ.get('JWT_SECRET_KEY') or 'jwt-secret-key-change-in-production'
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(hours=2)
    JWT_ALGORITHM = 'HS256'
    JWT_ORGANIZATION_CLAIM = 'organization_id'

    # CORS
    CORS_ORIGINS = ["http://localhost:*", "http://127.0.0.1:*"]

    # Rate Limiting
    RATELIMIT_STORAGE_URI = os.environ.get('REDIS_URL') or 'memory://'
    RATELIMIT_DEFAULT = "200 per day, 50 per hour"

    # Scan workflow timings (milliseconds)
    SCAN_COOLDOWN_MS = 3000
    ERROR_BANNER_MS = 3000
    DUPLICATE_MODAL_MS = 10000
    SUCCESS_REDIRECT_MS = 5000
    TRAINING_LOG_PATH = '/log'

    # QR codes
    SCANNER_BASE_URL = os.environ.get('SCANNER_BASE_URL') or 'http://localhost:5173'
    LOCATION_CODE_SUFFIX_LENGTH = 6
    DEFAULT_DISCIPLINE = 'NSF'

    # Camera used by the kiosk scanner
    CAMERA_INDEX = int(os.environ.get('CAMERA_INDEX', 0))

    # Localization
    DEFAULT_LANGUAGE = 'nb'
    SUPPORTED_LANGUAGES = ['nb', 'en']

    # Logging
    LOG_LEVEL = 'INFO'
    LOG_FILE = 'logs/app.log'
