# fertilizer_ordering/services/fertilizer_service.py
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from fertilizer_ordering.errors import ConflictError, NotFoundError
from fertilizer_ordering.models.fertilizer_models import (
    FertilizerCreateRequest,
    FertilizerUpdateRequest,
)
from fertilizer_ordering.mongo import get_db, to_object_id
from fertilizer_ordering.timeutil import iso, utcnow

logger = logging.getLogger(__name__)


class FertilizerService:
    """Rate catalog. Records are soft-deactivated through isActive, never removed."""

    @staticmethod
    def find_by_id(fertilizer_id) -> Optional[Dict[str, Any]]:
        oid = to_object_id(fertilizer_id)
        if oid is None:
            return None
        return get_db().fertilizers.find_one({"_id": oid})

    @staticmethod
    def list_active() -> List[Dict[str, Any]]:
        cur = get_db().fertilizers.find({"isActive": True}).sort([("name", 1)])
        return [FertilizerService.public(f) for f in cur]

    @staticmethod
    def list_all() -> List[Dict[str, Any]]:
        cur = get_db().fertilizers.find({}).sort([("createdAt", -1)])
        return [FertilizerService.public(f, admin=True) for f in cur]

    @staticmethod
    def create(payload: FertilizerCreateRequest, admin_id: str) -> Dict[str, Any]:
        now = utcnow()
        doc = {
            "name": payload.name.strip(),
            "ratePerHectare": payload.ratePerHectare,
            "unit": (payload.unit or "kg").strip() or "kg",
            "description": payload.description or "",
            "isActive": True,
            "updatedByAdmin": to_object_id(admin_id),
            "createdAt": now,
            "updatedAt": now,
        }
        try:
            res = get_db().fertilizers.insert_one(doc)
        except DuplicateKeyError:
            raise ConflictError("Fertilizer already exists")

        doc["_id"] = res.inserted_id
        logger.info("Fertilizer %s created by admin %s", doc["name"], admin_id)
        return doc

    @staticmethod
    def update(fertilizer_id: str, payload: FertilizerUpdateRequest, admin_id: str) -> Dict[str, Any]:
        oid = to_object_id(fertilizer_id)
        if oid is None:
            raise NotFoundError("Fertilizer not found")

        patch: Dict[str, Any] = {
            "updatedByAdmin": to_object_id(admin_id),
            "updatedAt": utcnow(),
        }
        if payload.ratePerHectare is not None:
            patch["ratePerHectare"] = payload.ratePerHectare
        if payload.description is not None:
            patch["description"] = payload.description
        if payload.isActive is not None:
            patch["isActive"] = payload.isActive

        updated = get_db().fertilizers.find_one_and_update(
            {"_id": oid},
            {"$set": patch},
            return_document=ReturnDocument.AFTER,
        )
        if updated is None:
            raise NotFoundError("Fertilizer not found")

        logger.info("Fertilizer %s updated by admin %s", oid, admin_id)
        return updated

    @staticmethod
    def public(f: Dict[str, Any], admin: bool = False) -> Dict[str, Any]:
        out = {
            "id": str(f["_id"]),
            "name": f.get("name"),
            "ratePerHectare": f.get("ratePerHectare"),
            "unit": f.get("unit", "kg"),
            "description": f.get("description", ""),
        }
        if admin:
            out["isActive"] = bool(f.get("isActive"))
            out["updatedAt"] = iso(f.get("updatedAt"))
        return out
