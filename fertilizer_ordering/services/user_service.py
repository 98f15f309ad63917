# fertilizer_ordering/services/user_service.py
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from fertilizer_ordering.errors import ConflictError
from fertilizer_ordering.models.user_models import RegisterFarmerRequest
from fertilizer_ordering.mongo import get_db, to_object_id
from fertilizer_ordering.timeutil import iso, utcnow

logger = logging.getLogger(__name__)


def empty_otp_envelope(now) -> Dict[str, Any]:
    return {"code": "", "expiresAt": now, "attempts": 0}


class UserService:
    """
    Credential store over the `users` collection.

    Every write after creation goes through `compare_and_set`, which matches
    on the document `version` and bumps it, so two requests racing on the
    same user cannot silently overwrite each other.
    """

    @staticmethod
    def find_by_phone(phone_number: str) -> Optional[Dict[str, Any]]:
        return get_db().users.find_one({"phoneNumber": phone_number})

    @staticmethod
    def find_by_id(user_id) -> Optional[Dict[str, Any]]:
        oid = to_object_id(user_id)
        if oid is None:
            return None
        return get_db().users.find_one({"_id": oid})

    @staticmethod
    def create_farmer(payload: RegisterFarmerRequest, otp_envelope: Dict[str, Any]) -> Dict[str, Any]:
        now = utcnow()
        doc = {
            "phoneNumber": payload.phoneNumber,
            "fullName": payload.fullName,
            "userType": "farmer",
            "landArea": payload.landArea,
            "isVerified": False,
            "otp": otp_envelope,
            "version": 0,
            "createdAt": now,
            "updatedAt": now,
        }
        if payload.email:
            doc["email"] = payload.email

        try:
            res = get_db().users.insert_one(doc)
        except DuplicateKeyError:
            raise ConflictError("Phone number already registered")

        doc["_id"] = res.inserted_id
        logger.info("Registered farmer %s", res.inserted_id)
        return doc

    @staticmethod
    def ensure_admin(phone_number: str) -> Dict[str, Any]:
        """Return the admin record for `phone_number`, creating it on first login."""
        users = get_db().users
        now = utcnow()
        try:
            admin = users.find_one_and_update(
                {"phoneNumber": phone_number},
                {
                    "$setOnInsert": {
                        "phoneNumber": phone_number,
                        "fullName": "System Admin",
                        "userType": "admin",
                        "isVerified": True,
                        "otp": empty_otp_envelope(now),
                        "version": 0,
                        "createdAt": now,
                        "updatedAt": now,
                    }
                },
                upsert=True,
                return_document=ReturnDocument.AFTER,
            )
        except DuplicateKeyError:
            # lost the insert race to a concurrent first login
            admin = users.find_one({"phoneNumber": phone_number})

        if admin.get("userType") != "admin":
            raise ConflictError("Phone number is registered to a non-admin account")
        return admin

    @staticmethod
    def compare_and_set(user: Dict[str, Any], changes: Dict[str, Any], inc: Optional[Dict[str, int]] = None) -> Dict[str, Any]:
        """
        Apply `$set: changes` only if the stored version still equals
        user["version"]. Returns the updated document.
        """
        update: Dict[str, Any] = {
            "$set": {**changes, "updatedAt": utcnow()},
            "$inc": {"version": 1, **(inc or {})},
        }
        updated = get_db().users.find_one_and_update(
            {"_id": user["_id"], "version": user.get("version", 0)},
            update,
            return_document=ReturnDocument.AFTER,
        )
        if updated is None:
            raise ConflictError("User record was modified by another request, please retry")
        return updated

    # -------------------------------------------------------------------
    # Response shaping
    # -------------------------------------------------------------------
    @staticmethod
    def public(user: Dict[str, Any]) -> Dict[str, Any]:
        out = {
            "id": str(user["_id"]),
            "phoneNumber": user.get("phoneNumber"),
            "fullName": user.get("fullName"),
            "userType": user.get("userType"),
        }
        if user.get("userType") == "farmer":
            out["landArea"] = user.get("landArea")
        return out

    @staticmethod
    def profile(user: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "id": str(user["_id"]),
            "phoneNumber": user.get("phoneNumber"),
            "fullName": user.get("fullName"),
            "landArea": user.get("landArea"),
            "email": user.get("email"),
            "isVerified": bool(user.get("isVerified")),
            "createdAt": iso(user.get("createdAt")),
        }
