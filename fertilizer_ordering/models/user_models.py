# fertilizer_ordering/models/user_models.py
from __future__ import annotations

import re
from typing import Optional

from pydantic import BaseModel, Field, field_validator

PHONE_RE = re.compile(r"^\+?[0-9]{7,15}$")


def _clean_phone(v: str) -> str:
    v = (v or "").strip()
    if not PHONE_RE.match(v):
        raise ValueError("phone number must be 7-15 digits, optionally prefixed with +")
    return v


class RegisterFarmerRequest(BaseModel):
    phoneNumber: str
    fullName: str = Field(..., min_length=1)
    landArea: float = Field(..., gt=0, allow_inf_nan=False)
    email: Optional[str] = None

    @field_validator("phoneNumber")
    @classmethod
    def check_phone(cls, v: str) -> str:
        return _clean_phone(v)

    @field_validator("fullName")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("full name is required")
        return v

    @field_validator("email")
    @classmethod
    def loose_email(cls, v: Optional[str]) -> Optional[str]:
        v = (v or "").strip().lower()
        if not v:
            return None
        if "@" not in v or " " in v:
            raise ValueError("invalid email format (expected something like user@host)")
        return v


class VerifyOtpRequest(BaseModel):
    phoneNumber: str = Field(..., min_length=1)
    otp: str = Field(..., min_length=1)

    @field_validator("phoneNumber", "otp")
    @classmethod
    def strip_value(cls, v: str) -> str:
        return v.strip()


class RequestOtpRequest(BaseModel):
    phoneNumber: str = Field(..., min_length=1)

    @field_validator("phoneNumber")
    @classmethod
    def strip_value(cls, v: str) -> str:
        return v.strip()


class AdminLoginRequest(BaseModel):
    # blanks fall through to the credential check and fail there with 401
    phoneNumber: str = ""
    otp: str = ""

    @field_validator("phoneNumber", "otp")
    @classmethod
    def strip_value(cls, v: str) -> str:
        return v.strip()
