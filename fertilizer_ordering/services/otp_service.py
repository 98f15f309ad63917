# fertilizer_ordering/services/otp_service.py
"""
One-time code lifecycle: issue -> verify -> consume.

The envelope lives on the user document as
    otp: {code: <bcrypt hash or "">, expiresAt: <datetime>, attempts: <int>}

Codes are never stored in clear. Delivery goes through `otp_sender`; the
default sender only writes the code to the log, which is the development
stand-in for an SMS gateway.
"""
from __future__ import annotations

import logging
import re
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any, Dict, Tuple

from flask import current_app

from fertilizer_ordering.errors import (
    NotFoundError,
    OtpAttemptsExhausted,
    OtpExpired,
    OtpMismatch,
)
from fertilizer_ordering.security import bcrypt
from fertilizer_ordering.services.user_service import UserService, empty_otp_envelope
from fertilizer_ordering.timeutil import as_utc, utcnow

logger = logging.getLogger(__name__)

CODE_RE = re.compile(r"^[0-9]{4}$")


@dataclass
class IssuedOtp:
    code: str
    expires_at: datetime


class LoggingOtpSender:
    def send(self, phone_number: str, code: str) -> None:
        logger.info("[OTP SENT] phone=%s otp=%s", phone_number, code)


otp_sender = LoggingOtpSender()


def generate_code() -> str:
    # 1000-9999, always four digits
    return str(1000 + secrets.randbelow(9000))


class OtpService:

    @staticmethod
    def new_envelope() -> Tuple[IssuedOtp, Dict[str, Any]]:
        code = generate_code()
        expires_at = utcnow() + timedelta(seconds=current_app.config["OTP_TTL_SECONDS"])
        envelope = {
            "code": bcrypt.generate_password_hash(code).decode("utf-8"),
            "expiresAt": expires_at,
            "attempts": 0,
        }
        return IssuedOtp(code=code, expires_at=expires_at), envelope

    @staticmethod
    def deliver(phone_number: str, issued: IssuedOtp) -> None:
        otp_sender.send(phone_number, issued.code)

    @staticmethod
    def issue(phone_number: str) -> IssuedOtp:
        """Replace the envelope of a registered user with a fresh code."""
        user = UserService.find_by_phone(phone_number)
        if not user:
            raise NotFoundError("Phone number not registered")

        issued, envelope = OtpService.new_envelope()
        UserService.compare_and_set(user, {"otp": envelope})
        OtpService.deliver(phone_number, issued)
        return issued

    @staticmethod
    def verify(phone_number: str, submitted_code: str) -> Dict[str, Any]:
        user = UserService.find_by_phone(phone_number)
        if not user:
            raise NotFoundError("User not found")

        otp = user.get("otp") or {}
        expires_at = as_utc(otp.get("expiresAt"))
        now = utcnow()

        if not otp.get("code") or expires_at is None or now >= expires_at:
            raise OtpExpired("OTP expired. Please request a new one.")

        if int(otp.get("attempts") or 0) >= current_app.config["OTP_MAX_ATTEMPTS"]:
            raise OtpAttemptsExhausted("Too many failed attempts. Please request a new OTP.")

        # anything that is not a well-formed code is a miss; bcrypt rejects inputs over 72 bytes
        well_formed = CODE_RE.match(submitted_code or "") is not None
        if not well_formed or not bcrypt.check_password_hash(otp["code"], submitted_code):
            UserService.compare_and_set(user, {}, inc={"otp.attempts": 1})
            raise OtpMismatch("Invalid OTP")

        verified = UserService.compare_and_set(
            user,
            {"isVerified": True, "otp": empty_otp_envelope(now)},
        )
        logger.info("OTP verified for user %s", verified["_id"])
        return verified
