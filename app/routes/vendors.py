from flask import Blueprint, request, g
from app.version import API_PREFIX
from app.schemas.vendor import CreateVendorRequest, UpdateVendorRequest
from app.services import vendors as vendor_service
from app.utils import ok, auth_required, validate_schema

vendor_bp = Blueprint("vendors", __name__, url_prefix=f"{API_PREFIX}/vendors")


@vendor_bp.route("", methods=["GET"])
@auth_required
def list_vendors():
    return ok([v.to_dict() for v in vendor_service.list_vendors(g.identity)])


@vendor_bp.route("", methods=["POST"])
@auth_required
@validate_schema(CreateVendorRequest)
def create_vendor():
    data: CreateVendorRequest = request.validated_data
    vendor = vendor_service.create_vendor(g.identity, data.model_dump())
    return ok(vendor.to_dict(), message="Vendor created", status=201)


@vendor_bp.route("/<int:vendor_id>", methods=["GET"])
@auth_required
def get_vendor(vendor_id):
    return ok(vendor_service.get_vendor(g.identity, vendor_id).to_dict())


@vendor_bp.route("/<int:vendor_id>", methods=["PUT"])
@auth_required
@validate_schema(UpdateVendorRequest)
def update_vendor(vendor_id):
    data: UpdateVendorRequest = request.validated_data
    vendor = vendor_service.update_vendor(g.identity, vendor_id, data.model_dump(exclude_unset=True))
    return ok(vendor.to_dict(), message="Vendor updated")


@vendor_bp.route("/<int:vendor_id>", methods=["DELETE"])
@auth_required
def delete_vendor(vendor_id):
    vendor_service.delete_vendor(g.identity, vendor_id)
    return ok(message="Vendor deleted")
