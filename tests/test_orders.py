from decimal import Decimal
import pytest
from sqlalchemy import update
from models import db, Order, OrderStatusLog
from app import repositories as repo
from app.exceptions import Conflict, Forbidden, NotFound, ValidationFailed
from app.services import orders as order_service
from conftest import make_vendor, make_entry


@pytest.fixture
def menu(app):
    india = make_vendor("Spice Hut", "India")
    america = make_vendor("Diner", "America")
    return {
        "dosa": make_entry(india, "Masala Dosa", "4.50"),
        "chai": make_entry(india, "Chai", "1.25"),
        "burger": make_entry(america, "Burger", "8.00"),
    }


def _line(entry, quantity=1):
    return {"catalog_entry_id": entry.id, "quantity": quantity}


def test_total_is_sum_of_price_times_quantity(menu, india_manager):
    order = order_service.create_order(india_manager, [_line(menu["dosa"], 2), _line(menu["chai"], 3)])
    assert order.total_amount == Decimal("12.75")
    assert order_service.order_total_from_lines(order) == order.total_amount
    assert order.status == "pending_payment"
    assert order.payment_method == "credit_card"
    assert order.region == "India"
    assert [li.position for li in order.line_items] == [1, 2]
    assert order.line_items[0].captured_unit_price == Decimal("4.50")


def test_initial_status_logged(menu, india_manager):
    order = order_service.create_order(india_manager, [_line(menu["dosa"])])
    logs = OrderStatusLog.query.filter_by(order_id=order.id).all()
    assert [(log.status, log.updated_by) for log in logs] == [("pending_payment", "2")]


def test_explicit_payment_method_kept(menu, india_manager):
    order = order_service.create_order(india_manager, [_line(menu["chai"])], payment_method="cash")
    assert order.payment_method == "cash"


def test_admin_order_filed_under_first_line_region(menu, admin):
    order = order_service.create_order(admin, [_line(menu["burger"]), _line(menu["dosa"])])
    assert order.region == "America"
    assert [li.captured_region for li in order.line_items] == ["America", "India"]


def test_captured_price_survives_catalog_change(menu, india_manager):
    order = order_service.create_order(india_manager, [_line(menu["dosa"], 2)])
    entry = repo.catalog_entries.find_by_id(menu["dosa"].id)
    entry.price = Decimal("9.99")
    db.session.commit()
    stored = repo.orders.find_by_id(order.id)
    assert stored.total_amount == Decimal("9.00")
    assert order_service.order_total_from_lines(stored) == Decimal("9.00")


def test_manager_with_foreign_line_fails_whole_order(menu, india_manager):
    burger_id = menu["burger"].id
    with pytest.raises(Forbidden) as exc:
        order_service.create_order(india_manager, [_line(menu["dosa"]), _line(menu["burger"])])
    assert exc.value.check == "region"
    assert str(burger_id) in exc.value.message
    assert Order.query.count() == 0


def test_member_refused_before_lines_resolved(menu, india_member):
    with pytest.raises(Forbidden) as exc:
        order_service.create_order(india_member, [{"catalog_entry_id": 999999, "quantity": 1}])
    assert exc.value.check == "role"


def test_unknown_entry_is_not_found(menu, india_manager):
    with pytest.raises(NotFound) as exc:
        order_service.create_order(india_manager, [_line(menu["dosa"]), {"catalog_entry_id": 4242, "quantity": 1}])
    assert exc.value.entity_id == 4242
    assert Order.query.count() == 0


def test_empty_order_rejected(menu, india_manager):
    with pytest.raises(ValidationFailed) as exc:
        order_service.create_order(india_manager, [])
    assert exc.value.errors[0].field == "line_items"


def test_bad_quantities_reported_together(menu, india_manager):
    with pytest.raises(ValidationFailed) as exc:
        order_service.create_order(
            india_manager,
            [_line(menu["dosa"], 0), _line(menu["chai"], -2), _line(menu["chai"], 1)],
        )
    assert [e.field for e in exc.value.errors] == ["line_items.0.quantity", "line_items.1.quantity"]


def test_state_machine_happy_path(menu, india_manager):
    order = order_service.create_order(india_manager, [_line(menu["dosa"])])
    paid = order_service.mark_paid(india_manager, order.id)
    assert (paid.status, paid.version) == ("paid", 2)
    delivered = order_service.mark_delivered(india_manager, order.id)
    assert (delivered.status, delivered.version) == ("delivered", 3)
    history = order_service.status_history(india_manager, order.id)
    assert [h.status for h in history] == ["pending_payment", "paid", "delivered"]


def test_paid_order_can_be_cancelled(menu, india_manager):
    order = order_service.create_order(india_manager, [_line(menu["dosa"])])
    order_service.mark_paid(india_manager, order.id)
    assert order_service.cancel_order(india_manager, order.id).status == "cancelled"


@pytest.mark.parametrize("terminal", ["cancelled", "delivered"])
def test_cancel_terminal_order_conflicts_without_mutation(menu, india_manager, terminal):
    order = order_service.create_order(india_manager, [_line(menu["dosa"])])
    order_service.mark_paid(india_manager, order.id)
    if terminal == "delivered":
        order_service.mark_delivered(india_manager, order.id)
    else:
        order_service.cancel_order(india_manager, order.id)
    before = repo.orders.find_by_id(order.id).version

    with pytest.raises(Conflict) as exc:
        order_service.cancel_order(india_manager, order.id)
    assert exc.value.current_state == terminal
    assert exc.value.attempted_transition == "cancel"

    stored = repo.orders.find_by_id(order.id)
    assert (stored.status, stored.version) == (terminal, before)


def test_deliver_requires_payment(menu, india_manager):
    order = order_service.create_order(india_manager, [_line(menu["dosa"])])
    with pytest.raises(Conflict):
        order_service.mark_delivered(india_manager, order.id)


def test_lost_race_reports_winning_state(menu, india_manager, monkeypatch):
    order = order_service.create_order(india_manager, [_line(menu["dosa"])])
    real_cas = repo.orders.compare_and_set

    def cas_after_concurrent_cancel(record_id, expected, changes):
        db.session.execute(
            update(Order)
            .where(Order.id == record_id)
            .values(status="cancelled", version=Order.version + 1)
            .execution_options(synchronize_session=False)
        )
        return real_cas(record_id, expected, changes)

    monkeypatch.setattr(repo.orders, "compare_and_set", cas_after_concurrent_cancel)
    with pytest.raises(Conflict) as exc:
        order_service.mark_paid(india_manager, order.id)
    assert exc.value.current_state == "cancelled"


def test_transitions_check_region(menu, india_manager, america_manager):
    order = order_service.create_order(india_manager, [_line(menu["dosa"])])
    with pytest.raises(Forbidden) as exc:
        order_service.cancel_order(america_manager, order.id)
    assert exc.value.check == "region"


def test_member_cannot_cancel(menu, india_manager, india_member):
    order = order_service.create_order(india_manager, [_line(menu["dosa"])])
    with pytest.raises(Forbidden) as exc:
        order_service.cancel_order(india_member, order.id)
    assert exc.value.check == "role"


def test_admin_sets_payment_method_in_terminal_state(menu, admin, india_manager):
    order = order_service.create_order(india_manager, [_line(menu["dosa"])])
    order_service.cancel_order(india_manager, order.id)
    updated = order_service.set_payment_method(admin, order.id, "upi")
    assert (updated.payment_method, updated.status) == ("upi", "cancelled")
    assert updated.version == 3


def test_payment_method_change_loses_to_concurrent_write(menu, admin, india_manager, monkeypatch):
    order = order_service.create_order(india_manager, [_line(menu["dosa"])])
    real_cas = repo.orders.compare_and_set

    def cas_after_concurrent_cancel(record_id, expected, changes):
        db.session.execute(
            update(Order)
            .where(Order.id == record_id)
            .values(status="cancelled", version=Order.version + 1)
            .execution_options(synchronize_session=False)
        )
        return real_cas(record_id, expected, changes)

    monkeypatch.setattr(repo.orders, "compare_and_set", cas_after_concurrent_cancel)
    with pytest.raises(Conflict) as exc:
        order_service.set_payment_method(admin, order.id, "upi")
    assert exc.value.current_state == "cancelled"
    assert exc.value.attempted_transition == "change payment method"


def test_manager_cannot_set_payment_method(menu, india_manager):
    order = order_service.create_order(india_manager, [_line(menu["dosa"])])
    with pytest.raises(Forbidden):
        order_service.set_payment_method(india_manager, order.id, "upi")


def test_list_orders_scoped(menu, admin, india_manager, america_manager):
    order_service.create_order(india_manager, [_line(menu["dosa"])])
    order_service.create_order(america_manager, [_line(menu["burger"])])
    assert [o.region for o in order_service.list_orders(india_manager)] == ["India"]
    assert {o.region for o in order_service.list_orders(admin)} == {"India", "America"}


def test_get_order_rechecks_region(menu, india_manager, america_manager):
    order = order_service.create_order(india_manager, [_line(menu["dosa"])])
    assert order_service.get_order(india_manager, order.id).id == order.id
    with pytest.raises(Forbidden):
        order_service.get_order(america_manager, order.id)
