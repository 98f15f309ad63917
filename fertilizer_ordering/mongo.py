# fertilizer_ordering/mongo.py
from __future__ import annotations

import logging

from bson import ObjectId
from bson.errors import InvalidId
from flask_pymongo import PyMongo
from pymongo import ASCENDING, DESCENDING

from fertilizer_ordering.errors import AppError

logger = logging.getLogger(__name__)

mongo = PyMongo()


def init_mongo(app):
    """
    Initializes Flask-PyMongo from app.config["MONGO_URI"] and makes sure
    the unique indexes exist. Call this during app startup (create_app).
    """
    if app.config.get("DISABLE_MONGO"):
        logger.warning("Mongo disabled by DISABLE_MONGO=1")
        return mongo

    if not app.config.get("MONGO_URI"):
        logger.warning("MONGO_URI not set. Mongo will not be initialized.")
        return mongo

    mongo.init_app(app, tz_aware=True)
    try:
        ensure_indexes(mongo.db)
        logger.info("Mongo initialized")
    except Exception:
        # keep the app booting; requests will fail loudly through get_db users
        logger.exception("Mongo index creation failed")

    return mongo


def ensure_indexes(db):
    db.users.create_index([("phoneNumber", ASCENDING)], unique=True)
    db.fertilizers.create_index([("name", ASCENDING)], unique=True)
    db.orders.create_index([("farmerId", ASCENDING), ("createdAt", DESCENDING)])
    db.orders.create_index([("status", ASCENDING)])
    db.orders.create_index([("createdAt", DESCENDING)])


def get_db():
    """
    Returns mongo.db, or raises when init_mongo(app) never attached a database.
    """
    db = getattr(mongo, "db", None)
    if db is None:
        raise AppError("Database is not initialized")
    return db


def to_object_id(value) -> ObjectId | None:
    """Parse a path/body id; malformed ids are treated as missing records."""
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(str(value))
    except (InvalidId, TypeError):
        return None
