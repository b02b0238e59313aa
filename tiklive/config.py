# tiklive/config.py
import os
from dotenv import load_dotenv

load_dotenv()

def _as_bool(val: str | None, default=False) -> bool:
    if val is None:
        return default
    return str(val).strip().lower() in {"1", "true", "yes", "on"}

_DATABASE_URL = os.getenv("SQLALCHEMY_DATABASE_URI") or os.getenv("DATABASE_URL")


class Config:
    # --- Core ---
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-change-me")
    APP_VERSION = os.getenv("APP_VERSION")

    # i18n
    BABEL_DEFAULT_LOCALE = os.getenv("BABEL_DEFAULT_LOCALE", "en")
    BABEL_DEFAULT_TIMEZONE = os.getenv("BABEL_DEFAULT_TIMEZONE", "UTC")
    LANGUAGES = ["en", "zh"]

    # DB
    # Without an explicit URL the public endpoints answer with demo payloads.
    DATABASE_CONFIGURED = bool(_DATABASE_URL)
    SQLALCHEMY_DATABASE_URI = _DATABASE_URL or "sqlite:///tiklive.db"
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {"pool_pre_ping": True}

    # CSRF (the SPA reads the token from /auth/csrf and sends X-CSRFToken)
    WTF_CSRF_TIME_LIMIT = None

    # --- Uploads / object storage ---
    UPLOAD_FOLDER = os.getenv("UPLOAD_FOLDER")  # defaults to <instance>/uploads
    MAX_CONTENT_LENGTH = int(os.getenv("MAX_CONTENT_LENGTH", str(10 * 1024 * 1024)))  # 10MB
    ALLOWED_IMAGE_EXTENSIONS = {"png", "jpg", "jpeg", "gif", "webp"}

    # --- Image host (PICUI) ---
    PICUI_API_URL = os.getenv("PICUI_API_URL", "https://picui.cn/api/v1/upload")
    PICUI_API_KEY = os.getenv("PICUI_API_KEY") or os.getenv("VITE_PICUI_API_KEY")

    # --- Verification gateways ---
    AOKSEND_API_URL = os.getenv("AOKSEND_API_URL", "https://www.aoksend.com/index/api/send_email")
    AOKSEND_API_KEY = os.getenv("AOKSEND_API_KEY") or os.getenv("VITE_AOKSEND_API_KEY")
    AOKSEND_TEMPLATE_ID = os.getenv("AOKSEND_TEMPLATE_ID", "E_125139060306")
    SMSBAO_API_URL = os.getenv("SMSBAO_API_URL", "https://api.smsbao.com/sms")
    SMSBAO_USERNAME = os.getenv("SMSBAO_USERNAME")
    SMSBAO_PASSWORD = os.getenv("SMSBAO_PASSWORD")
    GATEWAY_TIMEOUT = int(os.getenv("GATEWAY_TIMEOUT", "20"))
    VERIFICATION_CODE_TTL_SECONDS = int(os.getenv("VERIFICATION_CODE_TTL_SECONDS", "600"))
    VERIFICATION_MAX_ATTEMPTS = int(os.getenv("VERIFICATION_MAX_ATTEMPTS", "5"))
    VERIFICATION_TICKET_MAX_AGE = int(os.getenv("VERIFICATION_TICKET_MAX_AGE", "1800"))
    VERIFICATION_SUPPRESS_SEND = _as_bool(os.getenv("VERIFICATION_SUPPRESS_SEND", "0"))
    REQUIRE_EMAIL_VERIFICATION = _as_bool(os.getenv("REQUIRE_EMAIL_VERIFICATION", "1"))

    # --- Mail (notifications) ---
    MAIL_SERVER = os.getenv("MAIL_SERVER", "smtp.gmail.com")
    MAIL_PORT = int(os.getenv("MAIL_PORT", "587"))
    MAIL_USE_TLS = _as_bool(os.getenv("MAIL_USE_TLS", "1"))
    MAIL_USE_SSL = _as_bool(os.getenv("MAIL_USE_SSL", "0"))  # don't enable together with TLS
    MAIL_USERNAME = os.getenv("MAIL_USERNAME")
    MAIL_PASSWORD = os.getenv("MAIL_PASSWORD")
    MAIL_DEFAULT_SENDER = os.getenv("MAIL_DEFAULT_SENDER", MAIL_USERNAME)
    MAIL_SUPPRESS_SEND = _as_bool(os.getenv("MAIL_SUPPRESS_SEND", "0"))

    # --- Logging ---
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    LOG_DIR = os.getenv("LOG_DIR", "logs")
    LOG_FILENAME = os.getenv("LOG_FILENAME", "tiklive.log")
    LOG_JSON = _as_bool(os.getenv("LOG_JSON", "0"))

    # --- Sentry ---
    SENTRY_DSN = os.getenv("SENTRY_DSN", "")
    SENTRY_TRACES_SAMPLE_RATE = float(os.getenv("SENTRY_TRACES_SAMPLE_RATE", "0.0"))

    # --- Security cookies (recommended for prod) ---
    SESSION_COOKIE_SECURE = _as_bool(os.getenv("SESSION_COOKIE_SECURE", "1"))
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = os.getenv("SESSION_COOKIE_SAMESITE", "Lax")


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret"
    DATABASE_CONFIGURED = True
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    SQLALCHEMY_ENGINE_OPTIONS = {}
    WTF_CSRF_ENABLED = False
    MAIL_SUPPRESS_SEND = True
    VERIFICATION_SUPPRESS_SEND = False
    REQUIRE_EMAIL_VERIFICATION = False
    SESSION_COOKIE_SECURE = False
    PICUI_API_KEY = None
    LOG_DIR = os.getenv("TEST_LOG_DIR", "logs")
