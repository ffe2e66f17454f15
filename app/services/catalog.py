"""
Catalog entries and the vendor menu that lists them.

An entry's region is copied from its vendor when the entry is created and is
never written again. Creating an entry is two commits: the entry itself, then
the append to the vendor's menu. When the second one fails the entry still
exists and the result carries a ``menu_append_failed`` warning; the caller can
repeat just that step with ``retry_menu_append``.
"""
import logging
from decimal import Decimal, InvalidOperation
from typing import Dict, List, Optional
from sqlalchemy import func
from models import db, CatalogEntry, VendorMenuItem
from app import repositories as repo
from app.auth.identity import Identity, ROLES
from app.auth.permissions import list_filter, require_role, require_region
from app.exceptions import FieldError, ValidationFailed
from app.metrics import MENU_APPEND_FAILURES
from app.utils.db import transactional

logger = logging.getLogger(__name__)

IMMUTABLE_FIELDS = ("vendor_id", "region")

# largest value a Numeric(10, 2) column holds
MAX_PRICE = Decimal("99999999.99")


class CatalogEntryCreated:
    """Outcome of ``create_catalog_entry``: the entry plus any secondary failure."""

    def __init__(self, entry: CatalogEntry, warnings: Optional[List[Dict]] = None):
        self.entry = entry
        self.warnings = warnings or []

    @property
    def menu_linked(self) -> bool:
        return not self.warnings


def _check_price(price) -> Optional[FieldError]:
    if price is None:
        return FieldError("price", "Price is required")
    try:
        value = Decimal(str(price))
    except InvalidOperation:
        return FieldError("price", "Price must be a number")
    if not value.is_finite():
        return FieldError("price", "Price must be a finite number")
    if value < 0:
        return FieldError("price", "Price must not be negative")
    if value > MAX_PRICE:
        return FieldError("price", f"Price must not exceed {MAX_PRICE}")
    return None


def _append_to_menu(vendor_id: int, entry_id: int) -> None:
    existing = repo.menu_items.find(vendor_id=vendor_id, catalog_entry_id=entry_id)
    if existing:
        return
    last = (
        db.session.query(func.max(VendorMenuItem.position))
        .filter(VendorMenuItem.vendor_id == vendor_id)
        .scalar()
    )
    repo.menu_items.insert(
        VendorMenuItem(
            vendor_id=vendor_id,
            catalog_entry_id=entry_id,
            position=(last or 0) + 1,
        )
    )


def _remove_from_menu(vendor_id: int, entry_id: int) -> None:
    for item in repo.menu_items.find(vendor_id=vendor_id, catalog_entry_id=entry_id):
        repo.menu_items.delete(item.id)


def create_catalog_entry(identity: Identity, vendor_id: int, fields: Dict) -> CatalogEntryCreated:
    require_role(identity, ROLES, "create catalog entries")
    vendor = repo.vendors.find_by_id(vendor_id)
    require_region(identity, vendor.region, f"vendor {vendor.name}")

    problems = []
    if not fields.get("name"):
        problems.append(FieldError("name", "Name is required"))
    price_problem = _check_price(fields.get("price"))
    if price_problem:
        problems.append(price_problem)
    if problems:
        raise ValidationFailed(problems)

    entry = CatalogEntry(
        vendor_id=vendor.id,
        name=fields["name"],
        description=fields.get("description"),
        price=Decimal(str(fields["price"])),
        region=vendor.region,
    )
    with transactional("Failed to create catalog entry"):
        repo.catalog_entries.insert(entry)
    entry_id, vendor_id = entry.id, vendor.id
    logger.info("Catalog entry %s created under vendor %s (%s)", entry_id, vendor_id, entry.region)

    warnings = []
    try:
        with transactional("Failed to append entry to vendor menu"):
            _append_to_menu(vendor_id, entry_id)
    except Exception as e:
        MENU_APPEND_FAILURES.inc()
        logger.warning("Menu append failed for entry %s on vendor %s: %s", entry_id, vendor_id, e)
        warnings.append({
            "code": "menu_append_failed",
            "message": f"Entry {entry_id} was created but could not be added to the menu of vendor {vendor_id}",
            "vendor_id": vendor_id,
            "catalog_entry_id": entry_id,
        })
    return CatalogEntryCreated(entry, warnings)


def retry_menu_append(identity: Identity, entry_id: int) -> CatalogEntry:
    require_role(identity, ROLES, "link catalog entries")
    entry = repo.catalog_entries.find_by_id(entry_id)
    require_region(identity, entry.region, f"catalog entry {entry.name}")
    with transactional("Failed to append entry to vendor menu"):
        _append_to_menu(entry.vendor_id, entry.id)
    return entry


def get_catalog_entry(identity: Identity, entry_id: int) -> CatalogEntry:
    entry = repo.catalog_entries.find_by_id(entry_id)
    require_region(identity, entry.region, f"catalog entry {entry.id}")
    return entry


def list_catalog_entries(identity: Identity, vendor_id: Optional[int] = None) -> List[CatalogEntry]:
    criteria = {"vendor_id": vendor_id} if vendor_id is not None else {}
    return repo.catalog_entries.find(list_filter(identity), **criteria)


def update_catalog_entry(identity: Identity, entry_id: int, fields: Dict) -> CatalogEntry:
    require_role(identity, ROLES, "update catalog entries")
    entry = repo.catalog_entries.find_by_id(entry_id)
    require_region(identity, entry.region, f"catalog entry {entry.name}")

    problems = [
        FieldError(name, f"{name} cannot be changed")
        for name in IMMUTABLE_FIELDS
        if fields.get(name) is not None and fields[name] != getattr(entry, name)
    ]
    if "price" in fields and fields["price"] is not None:
        price_problem = _check_price(fields["price"])
        if price_problem:
            problems.append(price_problem)
    if problems:
        raise ValidationFailed(problems)

    if fields.get("name"):
        entry.name = fields["name"]
    if fields.get("description") is not None:
        entry.description = fields["description"]
    if fields.get("price") is not None:
        entry.price = Decimal(str(fields["price"]))
    with transactional("Failed to update catalog entry"):
        repo.catalog_entries.update(entry)
    return entry


def delete_catalog_entry(identity: Identity, entry_id: int) -> None:
    require_role(identity, ROLES, "delete catalog entries")
    entry = repo.catalog_entries.find_by_id(entry_id)
    require_region(identity, entry.region, f"catalog entry {entry.name}")
    vendor_id = entry.vendor_id
    with transactional("Failed to delete catalog entry"):
        _remove_from_menu(vendor_id, entry.id)
        repo.catalog_entries.delete(entry.id)
    logger.info("Catalog entry %s deleted from vendor %s", entry_id, vendor_id)


__all__ = [
    "CatalogEntryCreated",
    "create_catalog_entry",
    "retry_menu_append",
    "get_catalog_entry",
    "list_catalog_entries",
    "update_catalog_entry",
    "delete_catalog_entry",
]
