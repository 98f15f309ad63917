# fertilizer_ordering/security.py
"""
Session tokens and role guards.

Tokens are HS256 JWTs issued by flask-jwt-extended. The subject is the
Mongo user id; phoneNumber and userType travel as extra claims so route
guards never need a database round trip.
"""
from __future__ import annotations

from functools import wraps

from flask import g, jsonify
from flask_bcrypt import Bcrypt
from flask_jwt_extended import (
    JWTManager,
    create_access_token,
    get_jwt,
    get_jwt_identity,
    verify_jwt_in_request,
)

from fertilizer_ordering.errors import ForbiddenError

jwt = JWTManager()
bcrypt = Bcrypt()


def init_security(app):
    jwt.init_app(app)
    bcrypt.init_app(app)

    @jwt.unauthorized_loader
    def _missing_token(reason: str):
        return jsonify(message="No token, authorization denied", error=reason), 401

    @jwt.invalid_token_loader
    def _invalid_token(reason: str):
        return jsonify(message="Token is not valid", error=reason), 401

    @jwt.expired_token_loader
    def _expired_token(_header, _payload):
        return jsonify(message="Token has expired"), 401


# -------------------------------------------------------------------
# Session issuer
# -------------------------------------------------------------------
def issue_session_token(user: dict) -> str:
    """Sign {userId, phoneNumber, userType} for JWT_ACCESS_TOKEN_EXPIRES (7 days)."""
    return create_access_token(
        identity=str(user["_id"]),
        additional_claims={
            "phoneNumber": user.get("phoneNumber"),
            "userType": user.get("userType"),
        },
    )


# -------------------------------------------------------------------
# Route guards
# -------------------------------------------------------------------
def role_required(role: str):
    """Require a valid bearer token whose userType claim equals `role`."""

    def wrapper(fn):
        @wraps(fn)
        def decorator(*args, **kwargs):
            verify_jwt_in_request()
            claims = get_jwt()
            if claims.get("userType") != role:
                raise ForbiddenError(f"Access denied. {role.capitalize()}s only.")
            g.current_user = {
                "userId": get_jwt_identity(),
                "phoneNumber": claims.get("phoneNumber"),
                "userType": claims.get("userType"),
            }
            return fn(*args, **kwargs)

        return decorator

    return wrapper


def current_user() -> dict:
    return g.current_user
