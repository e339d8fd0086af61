"""
Base configuration module with common settings.
"""
import os
from datetime import date


class BaseConfig:
    """Base configuration class with common settings."""

    # Flask settings
    SECRET_KEY = os.getenv("SECRET_KEY", "default-dev-key-not-for-production")
    DEBUG = False
    TESTING = False
    # Let Flask-JWT-Extended errors reach their handlers instead of flask-restx's 500
    PROPAGATE_EXCEPTIONS = True

    # Database settings
    DB_ENGINE = os.getenv("DB_ENGINE", "mysql+pymysql")
    DB_USER = os.getenv("DB_USER", "user")
    DB_PASSWORD = os.getenv("DB_PASSWORD", "password")
    DB_HOST = os.getenv("DB_HOST", "localhost")
    DB_PORT = os.getenv("DB_PORT", "3306")
    DB_NAME = os.getenv("DB_NAME", "gym_db")

    SQLALCHEMY_DATABASE_URI = f"{DB_ENGINE}://{DB_USER}:{DB_PASSWORD}@{DB_HOST}:{DB_PORT}/{DB_NAME}"
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # JWT settings
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "default-jwt-key-not-for-production")
    JWT_ACCESS_TOKEN_EXPIRES = int(os.getenv("JWT_ACCESS_TOKEN_EXPIRES", 3600))  # 1 hour
    JWT_ERROR_MESSAGE_KEY = "message"

    # API settings
    API_TITLE = "Gym Club Management API"
    API_VERSION = "1.0"
    API_DESCRIPTION = "A RESTful API for managing gym members, memberships and subscriptions"
    API_PREFIX = "/api"
    PER_PAGE = 15

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Subscription lifecycle settings
    EXPIRING_SOON_DAYS = 7
    UPCOMING_RENEWAL_DAYS = 30
    # Callable returning today's date; services take it as their clock
    CLOCK = staticmethod(date.today)
