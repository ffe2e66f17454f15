import pytest
from models import VendorMenuItem
from app import repositories as repo
from app.exceptions import Forbidden, NotFound, ValidationFailed
from app.services import catalog as catalog_service
from conftest import make_vendor, make_entry


def test_entry_region_copied_from_vendor(app, india_member):
    vendor = make_vendor(region="India")
    result = catalog_service.create_catalog_entry(
        india_member, vendor.id, {"name": "Vada", "price": 2.5, "region": "America"}
    )
    assert result.entry.region == "India"
    assert result.menu_linked
    assert repo.vendors.find_by_id(vendor.id).menu == [result.entry.id]


def test_admin_creates_under_any_vendor(app, admin):
    vendor = make_vendor(region="Europe")
    result = catalog_service.create_catalog_entry(admin, vendor.id, {"name": "Crepe", "price": 6})
    assert result.entry.region == "Europe"


def test_menu_positions_follow_creation_order(app, india_manager):
    vendor = make_vendor()
    ids = [
        catalog_service.create_catalog_entry(india_manager, vendor.id, {"name": n, "price": 1}).entry.id
        for n in ("A", "B", "C")
    ]
    assert repo.vendors.find_by_id(vendor.id).menu == ids


def test_foreign_vendor_is_forbidden(app, america_manager):
    vendor = make_vendor(region="India")
    with pytest.raises(Forbidden) as exc:
        catalog_service.create_catalog_entry(america_manager, vendor.id, {"name": "X", "price": 1})
    assert exc.value.check == "region"
    assert repo.catalog_entries.find() == []


def test_missing_vendor_wins_over_region(app, america_manager):
    with pytest.raises(NotFound) as exc:
        catalog_service.create_catalog_entry(america_manager, 12345, {"name": "X", "price": 1})
    assert exc.value.entity_id == 12345


def test_invalid_fields_reported_together(app, india_member):
    vendor = make_vendor()
    with pytest.raises(ValidationFailed) as exc:
        catalog_service.create_catalog_entry(india_member, vendor.id, {"price": -1})
    assert {e.field for e in exc.value.errors} == {"name", "price"}


def test_menu_append_failure_keeps_entry_and_warns(app, india_member, monkeypatch):
    vendor = make_vendor()

    def broken_append(vendor_id, entry_id):
        raise RuntimeError("menu store unavailable")

    monkeypatch.setattr(catalog_service, "_append_to_menu", broken_append)
    result = catalog_service.create_catalog_entry(india_member, vendor.id, {"name": "Upma", "price": 3})

    assert not result.menu_linked
    warning = result.warnings[0]
    assert warning["code"] == "menu_append_failed"
    assert warning["catalog_entry_id"] == result.entry.id
    assert repo.catalog_entries.find_by_id(result.entry.id).name == "Upma"
    assert repo.vendors.find_by_id(vendor.id).menu == []


def test_retry_menu_append_is_idempotent(app, india_member):
    vendor = make_vendor()
    entry = make_entry(vendor)

    catalog_service.retry_menu_append(india_member, entry.id)
    catalog_service.retry_menu_append(india_member, entry.id)

    assert VendorMenuItem.query.filter_by(vendor_id=vendor.id).count() == 1
    assert repo.vendors.find_by_id(vendor.id).menu == [entry.id]


def test_update_cannot_move_entry(app, india_manager):
    vendor = make_vendor()
    other = make_vendor("Other", "India")
    entry = make_entry(vendor)
    with pytest.raises(ValidationFailed) as exc:
        catalog_service.update_catalog_entry(
            india_manager, entry.id, {"vendor_id": other.id, "region": "America"}
        )
    assert {e.field for e in exc.value.errors} == {"vendor_id", "region"}


def test_update_changes_name_and_price(app, india_manager):
    entry = make_entry(make_vendor())
    updated = catalog_service.update_catalog_entry(india_manager, entry.id, {"name": "Rava Dosa", "price": 5})
    assert updated.name == "Rava Dosa"
    assert float(updated.price) == 5.0
    assert updated.region == "India"


def test_update_checks_existing_region(app, america_manager):
    entry = make_entry(make_vendor(region="India"))
    with pytest.raises(Forbidden):
        catalog_service.update_catalog_entry(america_manager, entry.id, {"name": "Mine now"})


def test_delete_removes_entry_from_menu(app, india_member):
    vendor = make_vendor()
    result = catalog_service.create_catalog_entry(india_member, vendor.id, {"name": "Poha", "price": 2})
    catalog_service.delete_catalog_entry(india_member, result.entry.id)
    assert repo.catalog_entries.find() == []
    assert repo.vendors.find_by_id(vendor.id).menu == []


def test_list_scoped_to_caller_region(app, admin, america_manager):
    make_entry(make_vendor("A", "India"), "Dosa")
    burger_vendor = make_vendor("B", "America")
    make_entry(burger_vendor, "Burger")

    assert [e.name for e in catalog_service.list_catalog_entries(america_manager)] == ["Burger"]
    assert len(catalog_service.list_catalog_entries(admin)) == 2
    assert len(catalog_service.list_catalog_entries(admin, vendor_id=burger_vendor.id)) == 1


def test_get_rechecks_region(app, america_manager):
    entry = make_entry(make_vendor(region="India"))
    with pytest.raises(Forbidden):
        catalog_service.get_catalog_entry(america_manager, entry.id)


@pytest.mark.parametrize("price", [float("nan"), float("inf"), 100000000, -0.01])
def test_create_rejects_unstorable_price(app, india_member, price):
    vendor = make_vendor()
    with pytest.raises(ValidationFailed) as exc:
        catalog_service.create_catalog_entry(india_member, vendor.id, {"name": "Vada", "price": price})
    assert [e.field for e in exc.value.errors] == ["price"]
    assert repo.catalog_entries.find() == []


@pytest.mark.parametrize("price", [float("nan"), float("-inf"), 123456789.5])
def test_update_rejects_unstorable_price(app, india_manager, price):
    entry = make_entry(make_vendor(), price="4.50")
    with pytest.raises(ValidationFailed) as exc:
        catalog_service.update_catalog_entry(india_manager, entry.id, {"price": price})
    assert [e.field for e in exc.value.errors] == ["price"]
    assert str(repo.catalog_entries.find_by_id(entry.id).price) == "4.50"


def test_largest_storable_price_accepted(app, india_member):
    vendor = make_vendor()
    result = catalog_service.create_catalog_entry(india_member, vendor.id, {"name": "Feast", "price": 99999999.99})
    assert str(result.entry.price) == "99999999.99"
