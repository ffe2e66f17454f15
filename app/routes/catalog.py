from flask import Blueprint, request, g
from app.version import API_PREFIX
from app.schemas.catalog import CreateCatalogEntryRequest, UpdateCatalogEntryRequest
from app.services import catalog as catalog_service
from app.utils import ok, auth_required, validate_schema

catalog_bp = Blueprint("catalog", __name__, url_prefix=f"{API_PREFIX}/catalog")


@catalog_bp.route("", methods=["GET"])
@auth_required
def list_entries():
    vendor_id = request.args.get("vendor_id", type=int)
    entries = catalog_service.list_catalog_entries(g.identity, vendor_id=vendor_id)
    return ok([e.to_dict() for e in entries])


@catalog_bp.route("", methods=["POST"])
@auth_required
@validate_schema(CreateCatalogEntryRequest)
def create_entry():
    data: CreateCatalogEntryRequest = request.validated_data
    fields = data.model_dump()
    result = catalog_service.create_catalog_entry(g.identity, fields.pop("vendor_id"), fields)
    message = "Catalog entry created" if result.menu_linked else "Catalog entry created; menu update pending"
    return ok(result.entry.to_dict(), message=message, status=201, warnings=result.warnings)


@catalog_bp.route("/<int:entry_id>", methods=["GET"])
@auth_required
def get_entry(entry_id):
    return ok(catalog_service.get_catalog_entry(g.identity, entry_id).to_dict())


@catalog_bp.route("/<int:entry_id>", methods=["PUT"])
@auth_required
@validate_schema(UpdateCatalogEntryRequest)
def update_entry(entry_id):
    data: UpdateCatalogEntryRequest = request.validated_data
    entry = catalog_service.update_catalog_entry(g.identity, entry_id, data.model_dump(exclude_unset=True))
    return ok(entry.to_dict(), message="Catalog entry updated")


@catalog_bp.route("/<int:entry_id>", methods=["DELETE"])
@auth_required
def delete_entry(entry_id):
    catalog_service.delete_catalog_entry(g.identity, entry_id)
    return ok(message="Catalog entry deleted")


@catalog_bp.route("/<int:entry_id>/menu-link", methods=["POST"])
@auth_required
def link_entry(entry_id):
    entry = catalog_service.retry_menu_append(g.identity, entry_id)
    return ok(entry.to_dict(), message="Catalog entry linked to vendor menu")
