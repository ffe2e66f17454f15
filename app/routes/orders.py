from flask import Blueprint, request, g, current_app
from flask_limiter.util import get_remote_address
from app.version import API_PREFIX
from extensions import limiter
from app.schemas.orders import CreateOrderRequest, PaymentMethodRequest
from app.services import orders as order_service
from app.utils import ok, auth_required, validate_schema

order_bp = Blueprint("orders", __name__, url_prefix=f"{API_PREFIX}/orders")


@order_bp.route("", methods=["GET"])
@auth_required
def list_orders():
    return ok([o.to_dict() for o in order_service.list_orders(g.identity)])


@order_bp.route("", methods=["POST"])
@limiter.limit(
    lambda: current_app.config["ORDER_LIMIT_PER_IP"],
    key_func=get_remote_address,
    error_message="Too many orders from this IP",
)
@auth_required
@validate_schema(CreateOrderRequest)
def create_order():
    data: CreateOrderRequest = request.validated_data
    order = order_service.create_order(
        g.identity,
        [line.model_dump() for line in data.line_items],
        payment_method=data.payment_method,
    )
    return ok(order.to_dict(), message="Order placed successfully", status=201)


@order_bp.route("/<int:order_id>", methods=["GET"])
@auth_required
def get_order(order_id):
    return ok(order_service.get_order(g.identity, order_id).to_dict())


@order_bp.route("/<int:order_id>/history", methods=["GET"])
@auth_required
def order_history(order_id):
    logs = order_service.status_history(g.identity, order_id)
    return ok([log.to_dict() for log in logs])


@order_bp.route("/<int:order_id>/cancel", methods=["PUT"])
@auth_required
def cancel_order(order_id):
    order = order_service.cancel_order(g.identity, order_id)
    return ok(order.to_dict(), message="Order cancelled")


@order_bp.route("/<int:order_id>/pay", methods=["PUT"])
@auth_required
def pay_order(order_id):
    order = order_service.mark_paid(g.identity, order_id)
    return ok(order.to_dict(), message="Order paid")


@order_bp.route("/<int:order_id>/deliver", methods=["PUT"])
@auth_required
def deliver_order(order_id):
    order = order_service.mark_delivered(g.identity, order_id)
    return ok(order.to_dict(), message="Order delivered")


@order_bp.route("/<int:order_id>/payment", methods=["PUT"])
@auth_required
@validate_schema(PaymentMethodRequest)
def update_payment_method(order_id):
    data: PaymentMethodRequest = request.validated_data
    order = order_service.set_payment_method(g.identity, order_id, data.payment_method)
    return ok(order.to_dict(), message="Payment method updated")
