import os
from datetime import timedelta
from dotenv import load_dotenv


load_dotenv()


def _env_flag(name, default):
    return os.getenv(name, str(default)).lower() in ("true", "on", "1", "yes")


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key-change-in-production")
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "fallback-jwt")
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(hours=int(os.getenv("JWT_EXPIRES_HOURS", 24)))
    JWT_TOKEN_LOCATION = ["headers"]
    SQLALCHEMY_DATABASE_URI = os.getenv("SQLALCHEMY_DATABASE_URI", "sqlite:///schoolhub.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    REDIS_URL = os.getenv("REDIS_URL")
    RATELIMIT_STORAGE_URI = REDIS_URL or "memory://"
    RATELIMIT_ENABLED = True
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",")

    # Twilio; leaving any of these unset switches SMS to fallback logging
    TWILIO_ACCOUNT_SID = os.getenv("TWILIO_ACCOUNT_SID")
    TWILIO_AUTH_TOKEN = os.getenv("TWILIO_AUTH_TOKEN")
    TWILIO_PHONE_NUMBER = os.getenv("TWILIO_PHONE_NUMBER")
    SMS_FALLBACK_ON_ERROR = _env_flag("SMS_FALLBACK_ON_ERROR", True)

    RAPIDAPI_KEY = os.getenv("RAPIDAPI_KEY")
    RAPIDAPI_HOST = os.getenv("RAPIDAPI_HOST", "deep-translate1.p.rapidapi.com")
    RAPIDAPI_URL = os.getenv(
        "RAPIDAPI_URL", "https://deep-translate1.p.rapidapi.com/language/translate/v2"
    )
    TRANSLATION_TIMEOUT = int(os.getenv("TRANSLATION_TIMEOUT", 10))
    TRANSLATION_FALLBACK_ON_ERROR = _env_flag("TRANSLATION_FALLBACK_ON_ERROR", True)

    NOTIFICATION_WORKERS = int(os.getenv("NOTIFICATION_WORKERS", 4))
    NOTIFICATIONS_SYNC = False

    SUPERADMIN_SECRET = os.getenv("SUPERADMIN_SECRET")
    DEFAULT_USER_PASSWORD = os.getenv("DEFAULT_USER_PASSWORD", "Pass@123")

    AUDIT_LOG_FILE = os.getenv("AUDIT_LOG_FILE", os.path.join("logs", "audit.log"))
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


class DevelopmentConfig(Config):
    DEBUG = True


class ProductionConfig(Config):
    DEBUG = False


class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    RATELIMIT_ENABLED = False
    NOTIFICATIONS_SYNC = True
    SUPERADMIN_SECRET = "test-secret"
    JWT_SECRET_KEY = "test-jwt-secret-key-with-enough-length"
    TWILIO_ACCOUNT_SID = None
    TWILIO_AUTH_TOKEN = None
    TWILIO_PHONE_NUMBER = None
    RAPIDAPI_KEY = None


config = {
    "development": DevelopmentConfig,
    "production": ProductionConfig,
    "testing": TestingConfig,
    "default": DevelopmentConfig,
}
