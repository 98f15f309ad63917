# fertilizer_ordering/routes/farmer/farmer_routes.py

from flask import Blueprint, jsonify, request

from fertilizer_ordering.errors import NotFoundError
from fertilizer_ordering.models.order_models import SubmitOrderRequest
from fertilizer_ordering.security import current_user, role_required
from fertilizer_ordering.services.fertilizer_service import FertilizerService
from fertilizer_ordering.services.order_service import OrderService
from fertilizer_ordering.services.user_service import UserService

farmer_bp = Blueprint("farmer", __name__, url_prefix="/api/farmer")


# ---------------------------------------------------------
# POST /api/farmer/submit-order
# ---------------------------------------------------------
@farmer_bp.post("/submit-order")
@role_required("farmer")
def submit_order():
    payload = SubmitOrderRequest.model_validate(request.get_json(silent=True) or {})

    order = OrderService.submit_order(current_user()["userId"], payload.fertilizerId)

    return jsonify(
        message="Order submitted successfully",
        order={
            "id": str(order["_id"]),
            "fertilizer": order["fertilizerName"],
            "quantity": order["quantityRequired"],
            "unit": order["fertilizerUnit"],
            "status": order["status"],
        },
    ), 201


# ---------------------------------------------------------
# GET /api/farmer/my-orders
# ---------------------------------------------------------
@farmer_bp.get("/my-orders")
@role_required("farmer")
def my_orders():
    return jsonify(orders=OrderService.list_for_farmer(current_user()["userId"]))


# ---------------------------------------------------------
# GET /api/farmer/fertilizers   (active only, for the order form)
# ---------------------------------------------------------
@farmer_bp.get("/fertilizers")
@role_required("farmer")
def fertilizers():
    return jsonify(fertilizers=FertilizerService.list_active())


# ---------------------------------------------------------
# GET /api/farmer/profile
# ---------------------------------------------------------
@farmer_bp.get("/profile")
@role_required("farmer")
def profile():
    farmer = UserService.find_by_id(current_user()["userId"])
    if not farmer:
        raise NotFoundError("Farmer not found")
    return jsonify(farmer=UserService.profile(farmer))
