# fertilizer_ordering/factory.py

import logging

from flask import Flask
from flask_cors import CORS

from fertilizer_ordering.app_config import load_config
from fertilizer_ordering.errors import register_error_handlers
from fertilizer_ordering.logging_setup import configure_logging
from fertilizer_ordering.mongo import init_mongo
from fertilizer_ordering.register_blueprints import register_all_blueprints
from fertilizer_ordering.security import init_security

logger = logging.getLogger(__name__)


def create_app(overrides=None):
    app = Flask(__name__, static_folder=None)

    # -------------------------
    # Config & logging
    # -------------------------
    load_config(app)
    if overrides:
        app.config.update(overrides)
    configure_logging(app)

    CORS(app, resources={r"/*": {"origins": "*"}})

    # -------------------------
    # Mongo
    # -------------------------
    init_mongo(app)

    # -------------------------
    # JWT + bcrypt
    # -------------------------
    init_security(app)

    # -------------------------
    # Errors & blueprints
    # -------------------------
    register_error_handlers(app)
    register_all_blueprints(app)

    logger.info("App created (env=%s)", app.config["APP_ENV"])
    return app
