# fertilizer_ordering/routes/auth/auth_routes.py

from __future__ import annotations

import hmac

from flask import Blueprint, current_app, jsonify, request

from fertilizer_ordering.errors import UnauthorizedError
from fertilizer_ordering.models.user_models import (
    AdminLoginRequest,
    RegisterFarmerRequest,
    RequestOtpRequest,
    VerifyOtpRequest,
)
from fertilizer_ordering.security import issue_session_token
from fertilizer_ordering.services.otp_service import IssuedOtp, OtpService
from fertilizer_ordering.services.user_service import UserService
from fertilizer_ordering.timeutil import iso

# -------------------------------------------------------------------
# Blueprint
# -------------------------------------------------------------------
auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")


def _otp_fields(issued: IssuedOtp) -> dict:
    """The code itself is echoed only when OTP_IN_RESPONSE is on (dev/test)."""
    out = {"otpExpiry": iso(issued.expires_at)}
    if current_app.config.get("OTP_IN_RESPONSE"):
        out["otp"] = issued.code
    return out


def _same(a: str, b: str) -> bool:
    return hmac.compare_digest(a.encode("utf-8"), b.encode("utf-8"))


# -------------------------------------------------------------------
# JSON: /api/auth/register-farmer
# -------------------------------------------------------------------
@auth_bp.post("/register-farmer")
def register_farmer():
    """
    Body: { phoneNumber, fullName, landArea, email? }
    Creates the farmer with a fresh OTP envelope and logs them in right away.
    """
    payload = RegisterFarmerRequest.model_validate(request.get_json(silent=True) or {})

    issued, envelope = OtpService.new_envelope()
    user = UserService.create_farmer(payload, envelope)
    OtpService.deliver(user["phoneNumber"], issued)

    return jsonify(
        message="Registration successful. Verify the OTP sent to your phone.",
        userId=str(user["_id"]),
        token=issue_session_token(user),
        user=UserService.public(user),
        **_otp_fields(issued),
    ), 201


# -------------------------------------------------------------------
# JSON: /api/auth/verify-otp
# -------------------------------------------------------------------
@auth_bp.post("/verify-otp")
def verify_otp():
    payload = VerifyOtpRequest.model_validate(request.get_json(silent=True) or {})

    user = OtpService.verify(payload.phoneNumber, payload.otp)

    return jsonify(
        message="Login successful",
        token=issue_session_token(user),
        user=UserService.public(user),
    ), 200


# -------------------------------------------------------------------
# JSON: /api/auth/request-otp
# -------------------------------------------------------------------
@auth_bp.post("/request-otp")
def request_otp():
    payload = RequestOtpRequest.model_validate(request.get_json(silent=True) or {})

    issued = OtpService.issue(payload.phoneNumber)

    return jsonify(message="New OTP sent to your phone", **_otp_fields(issued)), 200


# -------------------------------------------------------------------
# JSON: /api/auth/admin-login
# -------------------------------------------------------------------
@auth_bp.post("/admin-login")
def admin_login():
    """Checks the configured ADMIN_PHONE / ADMIN_OTP pair."""
    payload = AdminLoginRequest.model_validate(request.get_json(silent=True) or {})

    admin_phone = current_app.config.get("ADMIN_PHONE") or ""
    admin_otp = current_app.config.get("ADMIN_OTP") or ""
    if not (admin_phone and admin_otp):
        raise UnauthorizedError("Invalid credentials", "admin login is not configured")

    # evaluate both comparisons so timing does not reveal which one failed
    phone_ok = _same(payload.phoneNumber, admin_phone)
    otp_ok = _same(payload.otp, admin_otp)
    if not (phone_ok and otp_ok):
        raise UnauthorizedError("Invalid credentials")

    admin = UserService.ensure_admin(admin_phone)

    return jsonify(
        message="Admin login successful",
        token=issue_session_token(admin),
        user=UserService.public(admin),
    ), 200
