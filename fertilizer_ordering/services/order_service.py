# fertilizer_ordering/services/order_service.py
from __future__ import annotations

import logging
import math
from datetime import timedelta
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Dict, List

from pymongo import ReturnDocument

from fertilizer_ordering.errors import ConflictError, NotFoundError, ValidationError
from fertilizer_ordering.models.order_models import ORDER_STATUSES, OrderListQuery
from fertilizer_ordering.mongo import get_db, to_object_id
from fertilizer_ordering.services.fertilizer_service import FertilizerService
from fertilizer_ordering.services.user_service import UserService
from fertilizer_ordering.timeutil import iso, utcnow

logger = logging.getLogger(__name__)

QUANTITY_STEP = Decimal("0.01")


def compute_quantity(land_area, rate_per_hectare) -> float:
    """landArea * ratePerHectare, rounded half-up to 2 decimal places."""
    try:
        product = Decimal(str(land_area)) * Decimal(str(rate_per_hectare))
        quantity = float(product.quantize(QUANTITY_STEP, rounding=ROUND_HALF_UP))
    except InvalidOperation:
        raise ValidationError("Order quantity is out of range")
    if not math.isfinite(quantity):
        raise ValidationError("Order quantity is out of range")
    return quantity


def percentage(part: int, total: int) -> str:
    if total <= 0:
        return "0.00"
    return f"{round(part / total * 100, 2):.2f}"


class OrderService:

    # =========================
    # FARMER: SUBMIT
    # =========================
    @staticmethod
    def submit_order(farmer_id: str, fertilizer_id: str) -> Dict[str, Any]:
        farmer = UserService.find_by_id(farmer_id)
        if not farmer:
            raise NotFoundError("Farmer not found")

        fertilizer = FertilizerService.find_by_id(fertilizer_id)
        if not fertilizer:
            raise NotFoundError("Fertilizer not found")

        now = utcnow()
        # snapshot: later edits to the farmer or fertilizer never touch this order
        doc = {
            "farmerId": farmer["_id"],
            "farmerName": farmer.get("fullName"),
            "landArea": farmer.get("landArea"),
            "fertilizerId": fertilizer["_id"],
            "fertilizerName": fertilizer.get("name"),
            "fertilizerUnit": fertilizer.get("unit", "kg"),
            "ratePerUnit": fertilizer.get("ratePerHectare"),
            "quantityRequired": compute_quantity(farmer.get("landArea"), fertilizer.get("ratePerHectare")),
            "status": "pending",
            "remarks": "",
            "approvedBy": None,
            "approvedAt": None,
            "createdAt": now,
            "updatedAt": now,
        }
        res = get_db().orders.insert_one(doc)
        doc["_id"] = res.inserted_id

        logger.info(
            "Order %s submitted by farmer %s: %s %s of %s",
            res.inserted_id, farmer_id, doc["quantityRequired"], doc["fertilizerUnit"], doc["fertilizerName"],
        )
        return doc

    # =========================
    # ADMIN: APPROVE / DECLINE
    # =========================
    @staticmethod
    def transition(order_id: str, new_status: str, remarks: str, admin_id: str) -> Dict[str, Any]:
        """
        Move a pending order to approved or declined. Both targets are
        terminal; the update only matches while status is still pending.
        """
        if new_status not in ("approved", "declined"):
            raise ValidationError(f"Invalid target status: {new_status}")

        remarks = (remarks or "").strip()
        if new_status == "declined" and not remarks:
            raise ValidationError("Remarks are required for declining an order")

        oid = to_object_id(order_id)
        if oid is None:
            raise NotFoundError("Order not found")

        now = utcnow()
        orders = get_db().orders
        updated = orders.find_one_and_update(
            {"_id": oid, "status": "pending"},
            {
                "$set": {
                    "status": new_status,
                    "remarks": remarks,
                    "approvedBy": to_object_id(admin_id),
                    "approvedAt": now,
                    "updatedAt": now,
                }
            },
            return_document=ReturnDocument.AFTER,
        )
        if updated is not None:
            logger.info("Order %s %s by admin %s", oid, new_status, admin_id)
            return updated

        existing = orders.find_one({"_id": oid}, {"status": 1})
        if not existing:
            raise NotFoundError("Order not found")
        raise ConflictError(f"Order is already {existing.get('status')}")

    # =========================
    # READ
    # =========================
    @staticmethod
    def list_for_farmer(farmer_id: str) -> List[Dict[str, Any]]:
        oid = to_object_id(farmer_id)
        if oid is None:
            return []
        cur = get_db().orders.find({"farmerId": oid}).sort([("createdAt", -1)])
        return [OrderService.farmer_view(o) for o in cur]

    @staticmethod
    def list_orders(query: OrderListQuery) -> Dict[str, Any]:
        db = get_db()
        filt: Dict[str, Any] = {"status": query.status} if query.status else {}

        total = db.orders.count_documents(filt)
        docs = list(
            db.orders.find(filt)
            .sort([("createdAt", -1)])
            .skip((query.page - 1) * query.limit)
            .limit(query.limit)
        )

        farmer_ids = list({d["farmerId"] for d in docs if d.get("farmerId")})
        phones = {
            u["_id"]: u.get("phoneNumber")
            for u in db.users.find({"_id": {"$in": farmer_ids}}, {"phoneNumber": 1})
        } if farmer_ids else {}

        return {
            "orders": [OrderService.admin_view(d, phones.get(d.get("farmerId"))) for d in docs],
            "pagination": {
                "totalOrders": total,
                "totalPages": math.ceil(total / query.limit),
                "currentPage": query.page,
            },
        }

    # =========================
    # METRICS
    # =========================
    @staticmethod
    def metrics() -> Dict[str, Any]:
        orders = get_db().orders
        total = orders.count_documents({})
        counts = {s: orders.count_documents({"status": s}) for s in ORDER_STATUSES}
        week_ago = utcnow() - timedelta(days=7)
        weekly = orders.count_documents({"createdAt": {"$gte": week_ago}})

        return {
            "totalOrders": total,
            "approvedOrders": counts["approved"],
            "declinedOrders": counts["declined"],
            "pendingOrders": counts["pending"],
            "weeklyOrders": weekly,
            "approvalRate": percentage(counts["approved"], total),
            "declinedRate": percentage(counts["declined"], total),
            "pendingRate": percentage(counts["pending"], total),
        }

    # =========================
    # RESPONSE SHAPES
    # =========================
    @staticmethod
    def farmer_view(o: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "id": str(o["_id"]),
            "fertilizer": o.get("fertilizerName"),
            "quantity": o.get("quantityRequired"),
            "unit": o.get("fertilizerUnit", "kg"),
            "ratePerUnit": o.get("ratePerUnit"),
            "status": o.get("status"),
            "remarks": o.get("remarks", ""),
            "createdAt": iso(o.get("createdAt")),
            "approvedAt": iso(o.get("approvedAt")),
        }

    @staticmethod
    def admin_view(o: Dict[str, Any], farmer_phone: str | None = None) -> Dict[str, Any]:
        return {
            "id": str(o["_id"]),
            "farmerName": o.get("farmerName"),
            "farmerPhone": farmer_phone,
            "landArea": o.get("landArea"),
            "fertilizer": o.get("fertilizerName"),
            "quantity": o.get("quantityRequired"),
            "unit": o.get("fertilizerUnit", "kg"),
            "ratePerUnit": o.get("ratePerUnit"),
            "status": o.get("status"),
            "remarks": o.get("remarks", ""),
            "createdAt": iso(o.get("createdAt")),
            "approvedAt": iso(o.get("approvedAt")),
        }
