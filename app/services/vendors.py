import logging
from typing import Dict, List
from models import Vendor
from app import repositories as repo
from app.auth.identity import Identity, ADMIN
from app.auth.permissions import list_filter, require_role, require_region
from app.exceptions import FieldError, ValidationFailed
from app.utils.db import transactional
from app.utils.regions import region_error

logger = logging.getLogger(__name__)


def list_vendors(identity: Identity) -> List[Vendor]:
    return repo.vendors.find(list_filter(identity))


def get_vendor(identity: Identity, vendor_id: int) -> Vendor:
    vendor = repo.vendors.find_by_id(vendor_id)
    require_region(identity, vendor.region, f"vendor {vendor.id}")
    return vendor


def create_vendor(identity: Identity, fields: Dict) -> Vendor:
    require_role(identity, {ADMIN}, "create vendors")
    problems = []
    for name in ("name", "address"):
        if not fields.get(name):
            problems.append(FieldError(name, f"{name.capitalize()} is required"))
    bad_region = region_error(fields.get("region"))
    if bad_region:
        problems.append(bad_region)
    if problems:
        raise ValidationFailed(problems)

    vendor = Vendor(name=fields["name"], address=fields["address"], region=fields["region"])
    with transactional("Failed to create vendor"):
        repo.vendors.insert(vendor)
    logger.info("Vendor %s created in %s", vendor.id, vendor.region)
    return vendor


def update_vendor(identity: Identity, vendor_id: int, fields: Dict) -> Vendor:
    require_role(identity, {ADMIN}, "update vendors")
    vendor = repo.vendors.find_by_id(vendor_id)
    if fields.get("region") is not None and fields["region"] != vendor.region:
        raise ValidationFailed.single("region", "Region cannot be changed after creation")
    if fields.get("name"):
        vendor.name = fields["name"]
    if fields.get("address"):
        vendor.address = fields["address"]
    with transactional("Failed to update vendor"):
        repo.vendors.update(vendor)
    return vendor


def delete_vendor(identity: Identity, vendor_id: int) -> None:
    """Delete a vendor together with its catalog entries and menu."""
    require_role(identity, {ADMIN}, "delete vendors")
    vendor = repo.vendors.find_by_id(vendor_id)
    with transactional("Failed to delete vendor"):
        entries = repo.catalog_entries.find(vendor_id=vendor.id)
        for entry in entries:
            repo.catalog_entries.delete(entry.id)
        repo.vendors.delete(vendor.id)
    logger.info("Vendor %s deleted with %d catalog entries", vendor_id, len(entries))
