# fertilizer_ordering/routes/admin/admin_routes.py

from flask import Blueprint, jsonify, request

from fertilizer_ordering.models.fertilizer_models import (
    FertilizerCreateRequest,
    FertilizerUpdateRequest,
)
from fertilizer_ordering.models.order_models import OrderListQuery, ReviewOrderRequest
from fertilizer_ordering.security import current_user, role_required
from fertilizer_ordering.services.fertilizer_service import FertilizerService
from fertilizer_ordering.services.order_service import OrderService
from fertilizer_ordering.timeutil import iso

admin_bp = Blueprint("admin", __name__, url_prefix="/api/admin")


# ======================================================
# ORDERS
# ======================================================
@admin_bp.get("/orders")
@role_required("admin")
def list_orders():
    """GET /api/admin/orders?page=1&limit=10&status=pending"""
    query = OrderListQuery.model_validate(request.args.to_dict())
    return jsonify(OrderService.list_orders(query))


@admin_bp.post("/approve-order/<order_id>")
@role_required("admin")
def approve_order(order_id: str):
    payload = ReviewOrderRequest.model_validate(request.get_json(silent=True) or {})

    order = OrderService.transition(order_id, "approved", payload.remarks, current_user()["userId"])

    return jsonify(
        message="Order approved successfully",
        order={
            "id": str(order["_id"]),
            "status": order["status"],
            "remarks": order["remarks"],
            "approvedAt": iso(order["approvedAt"]),
        },
    )


@admin_bp.post("/decline-order/<order_id>")
@role_required("admin")
def decline_order(order_id: str):
    payload = ReviewOrderRequest.model_validate(request.get_json(silent=True) or {})

    order = OrderService.transition(order_id, "declined", payload.remarks, current_user()["userId"])

    return jsonify(
        message="Order declined successfully",
        order={
            "id": str(order["_id"]),
            "status": order["status"],
            "remarks": order["remarks"],
        },
    )


# ======================================================
# METRICS
# ======================================================
@admin_bp.get("/metrics")
@role_required("admin")
def metrics():
    return jsonify(metrics=OrderService.metrics())


# ======================================================
# FERTILIZER RATES
# ======================================================
@admin_bp.get("/fertilizers")
@role_required("admin")
def list_fertilizers():
    return jsonify(fertilizers=FertilizerService.list_all())


@admin_bp.post("/fertilizers")
@role_required("admin")
def add_fertilizer():
    payload = FertilizerCreateRequest.model_validate(request.get_json(silent=True) or {})

    fertilizer = FertilizerService.create(payload, current_user()["userId"])

    return jsonify(
        message="Fertilizer added successfully",
        fertilizer=FertilizerService.public(fertilizer, admin=True),
    ), 201


@admin_bp.put("/fertilizers/<fertilizer_id>")
@role_required("admin")
def update_fertilizer(fertilizer_id: str):
    payload = FertilizerUpdateRequest.model_validate(request.get_json(silent=True) or {})

    fertilizer = FertilizerService.update(fertilizer_id, payload, current_user()["userId"])

    return jsonify(
        message="Fertilizer updated successfully",
        fertilizer=FertilizerService.public(fertilizer, admin=True),
    )
