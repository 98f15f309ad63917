# fertilizer_ordering/app_config.py

import logging
import os
from datetime import timedelta

logger = logging.getLogger(__name__)

DEV_JWT_SECRET = "change-me"


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def load_config(app):
    """
    Load all Flask configuration in a clean centralized way.
    Every value can be overridden from the environment.
    """
    app_env = os.getenv("APP_ENV", "development").strip().lower()
    app.config["APP_ENV"] = app_env

    # ------------------------------
    # Mongo
    # ------------------------------
    app.config["MONGO_URI"] = os.getenv(
        "MONGO_URI",
        "mongodb://localhost:27017/farmer-ordering"
    )
    app.config["DISABLE_MONGO"] = _env_flag("DISABLE_MONGO", False)

    # ------------------------------
    # Security Keys / JWT
    # ------------------------------
    app.config["SECRET_KEY"] = os.getenv("SECRET_KEY", os.urandom(24))
    jwt_secret = os.getenv("JWT_SECRET_KEY", "")
    if not jwt_secret:
        if app_env == "production":
            raise RuntimeError("JWT_SECRET_KEY must be set when APP_ENV=production")
        logger.warning("JWT_SECRET_KEY not set, using the development key")
        jwt_secret = DEV_JWT_SECRET
    app.config["JWT_SECRET_KEY"] = jwt_secret
    app.config["JWT_ACCESS_TOKEN_EXPIRES"] = timedelta(days=7)
    app.config["JWT_TOKEN_LOCATION"] = ["headers"]
    app.config["JWT_HEADER_TYPE"] = "Bearer"
    app.config["BCRYPT_LOG_ROUNDS"] = int(os.getenv("BCRYPT_LOG_ROUNDS", "12"))

    # ------------------------------
    # Admin credentials (no defaults: unset means admin login is closed)
    # ------------------------------
    app.config["ADMIN_PHONE"] = os.getenv("ADMIN_PHONE", "")
    app.config["ADMIN_OTP"] = os.getenv("ADMIN_OTP", "")

    # ------------------------------
    # OTP
    # ------------------------------
    app.config["OTP_TTL_SECONDS"] = int(os.getenv("OTP_TTL_SECONDS", "300"))
    app.config["OTP_MAX_ATTEMPTS"] = int(os.getenv("OTP_MAX_ATTEMPTS", "3"))
    # codes are echoed back to the caller only outside production
    app.config["OTP_IN_RESPONSE"] = _env_flag("OTP_IN_RESPONSE", app_env != "production")

    # ------------------------------
    # Server / frontend
    # ------------------------------
    app.config["PORT"] = int(os.getenv("PORT", "5000"))
    app.config["FRONTEND_DIST"] = os.getenv("FRONTEND_DIST", "")
    app.config["LOG_LEVEL"] = os.getenv("LOG_LEVEL", "INFO").upper()
