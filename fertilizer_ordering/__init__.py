"""Fertilizer ordering backend: farmer OTP login, rate catalog and order approvals."""

from fertilizer_ordering.factory import create_app

__all__ = ["create_app"]
