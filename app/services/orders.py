"""
Order creation and the order status state machine.

Creation validates every line before anything is written: the role gate comes
first, then input shape, then each line in input order (resolve the catalog
entry, check its region). The first failing line stops the request and no
order row is written.

The order region is the caller's own region, except for admins, whose orders
are filed under the region of their *first* line even when later lines come
from other regions.

Status writes are compare-and-set on ``(status, version)`` so two concurrent
transitions of the same order cannot both succeed. Payment method changes
are compare-and-set on ``version`` alone, so every committed write bumps it.
"""
import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Iterable, List, Optional
from flask import current_app
from models import Order, OrderLineItem, OrderStatusLog
from app import repositories as repo
from app.auth.identity import Identity, ADMIN, MANAGER, is_elevated
from app.auth.permissions import list_filter, require_role, require_region
from app.exceptions import Conflict, FieldError, ValidationFailed
from app.metrics import ORDERS_CREATED, ORDER_TRANSITIONS
from app.utils.db import transactional

logger = logging.getLogger(__name__)

TWOPLACES = Decimal("0.01")

PENDING_PAYMENT = "pending_payment"
PAID = "paid"
CANCELLED = "cancelled"
DELIVERED = "delivered"

TRANSITIONS = {
    PENDING_PAYMENT: {PAID, CANCELLED},
    PAID: {CANCELLED, DELIVERED},
    CANCELLED: set(),
    DELIVERED: set(),
}

ORDER_ROLES = {ADMIN, MANAGER}


def _to_money(value) -> Decimal:
    return Decimal(str(value)).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def _validate_lines(line_items) -> None:
    if not line_items:
        raise ValidationFailed.single("line_items", "At least one line item is required")
    problems = []
    for index, line in enumerate(line_items):
        entry_id = line.get("catalog_entry_id")
        quantity = line.get("quantity")
        if entry_id is None:
            problems.append(FieldError(f"line_items.{index}.catalog_entry_id", "Catalog entry id is required"))
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            problems.append(FieldError(f"line_items.{index}.quantity", "Quantity must be an integer of at least 1"))
    if problems:
        raise ValidationFailed(problems)


def create_order(identity: Identity, line_items: Iterable[Dict], payment_method: Optional[str] = None) -> Order:
    require_role(identity, ORDER_ROLES, "create orders")
    line_items = list(line_items or [])
    _validate_lines(line_items)

    total = Decimal("0")
    captured = []
    for position, line in enumerate(line_items, start=1):
        entry = repo.catalog_entries.find_by_id(line["catalog_entry_id"])
        require_region(identity, entry.region, f"catalog entry {entry.id} ({entry.name})")
        unit_price = _to_money(entry.price)
        total += unit_price * line["quantity"]
        captured.append(
            OrderLineItem(
                position=position,
                catalog_entry_id=entry.id,
                quantity=line["quantity"],
                captured_region=entry.region,
                captured_unit_price=unit_price,
            )
        )

    region = captured[0].captured_region if is_elevated(identity) else identity.region
    order = Order(
        owner_account_id=identity.subject_id,
        status=PENDING_PAYMENT,
        payment_method=payment_method or current_app.config["DEFAULT_PAYMENT_METHOD"],
        region=region,
        total_amount=_to_money(total),
        version=1,
        line_items=captured,
    )
    with transactional("Order creation failed"):
        repo.orders.insert(order)
        repo.status_logs.insert(
            OrderStatusLog(order_id=order.id, status=PENDING_PAYMENT, updated_by=identity.subject_id)
        )
    ORDERS_CREATED.labels(region=region).inc()
    logger.info("Order %s created in %s with %d lines, total %s", order.id, region, len(captured), order.total_amount)
    return order


def order_total_from_lines(order: Order) -> Decimal:
    return _to_money(sum((li.captured_unit_price * li.quantity for li in order.line_items), Decimal("0")))


def get_order(identity: Identity, order_id: int) -> Order:
    order = repo.orders.find_by_id(order_id)
    require_region(identity, order.region, f"order {order.id}")
    return order


def list_orders(identity: Identity) -> List[Order]:
    return repo.orders.find(list_filter(identity))


def _transition(identity: Identity, order_id: int, target: str, action: str) -> Order:
    require_role(identity, ORDER_ROLES, f"{action} orders")
    order = repo.orders.find_by_id(order_id)
    require_region(identity, order.region, f"order {order.id}")

    current = order.status
    if target not in TRANSITIONS.get(current, set()):
        raise Conflict(current, action)

    with transactional(f"Failed to {action} order"):
        applied = repo.orders.compare_and_set(
            order.id,
            expected={"status": current, "version": order.version},
            changes={"status": target, "version": order.version + 1},
        )
        if not applied:
            raise Conflict(
                _reload_status(order),
                action,
                message=f"Order {order_id} changed while trying to {action} it",
            )
        repo.status_logs.insert(
            OrderStatusLog(order_id=order.id, status=target, updated_by=identity.subject_id)
        )
    ORDER_TRANSITIONS.labels(transition=action).inc()
    logger.info("Order %s moved %s -> %s", order_id, current, target)
    return repo.orders.find_by_id(order_id)


def _reload_status(order: Order) -> str:
    repo.orders.refresh(order)
    return order.status


def cancel_order(identity: Identity, order_id: int) -> Order:
    return _transition(identity, order_id, CANCELLED, "cancel")


def mark_paid(identity: Identity, order_id: int) -> Order:
    return _transition(identity, order_id, PAID, "pay")


def mark_delivered(identity: Identity, order_id: int) -> Order:
    return _transition(identity, order_id, DELIVERED, "deliver")


def set_payment_method(identity: Identity, order_id: int, method: str) -> Order:
    """Admin only, any state, terminal ones included."""
    require_role(identity, {ADMIN}, "change payment methods")
    if not method:
        raise ValidationFailed.single("payment_method", "Payment method is required")
    order = repo.orders.find_by_id(order_id)
    with transactional("Failed to update payment method"):
        applied = repo.orders.compare_and_set(
            order.id,
            expected={"version": order.version},
            changes={"payment_method": method, "version": order.version + 1},
        )
        if not applied:
            raise Conflict(
                _reload_status(order),
                "change payment method",
                message=f"Order {order_id} changed while updating its payment method",
            )
    logger.info("Order %s payment method set to %s", order_id, method)
    return repo.orders.find_by_id(order_id)


def status_history(identity: Identity, order_id: int) -> List[OrderStatusLog]:
    get_order(identity, order_id)
    return repo.status_logs.find(order_id=order_id)


__all__ = [
    "PENDING_PAYMENT",
    "PAID",
    "CANCELLED",
    "DELIVERED",
    "TRANSITIONS",
    "create_order",
    "order_total_from_lines",
    "get_order",
    "list_orders",
    "cancel_order",
    "mark_paid",
    "mark_delivered",
    "set_payment_method",
    "status_history",
]
