import logging

from flask import Blueprint, request

from app.schemas.catalog import CategoryNearestQuery
from app.services import vendors as vendor_service
from app.services.products import map_basic_product
from app.utils import error, internal_error_response, not_found, ok, validate_query
from app.version import API_PREFIX
from models import db
from models.product import VendorProduct
from models.vendor import VendorCategory

vendors_bp = Blueprint("vendors", __name__, url_prefix=f"{API_PREFIX}/vendors")


@vendors_bp.route("/categories/<category_id>", methods=["GET"])
def category_by_id(category_id):
    category = db.session.get(VendorCategory, category_id)
    if category is None:
        return not_found("Category not found")
    return ok(category.to_dict())


@vendors_bp.route("/products/<product_id>", methods=["GET"])
def product_by_id(product_id):
    product = db.session.get(VendorProduct, product_id)
    if product is None:
        return not_found("Product not found")
    return ok(map_basic_product(product))


@vendors_bp.route("/<vendor_id>/offers", methods=["GET"])
def offers(vendor_id):
    try:
        data = vendor_service.offers_for_vendor(vendor_id)
    except Exception as e:
        logging.error("Offers lookup failed for %s: %s", vendor_id, e, exc_info=True)
        return internal_error_response(e, message="Failed to fetch offers")
    return ok(data)


# ------------------- Nearest restaurants by category -------------------
@vendors_bp.route("/categories/<category_id>/nearest", methods=["GET"])
@validate_query(CategoryNearestQuery)
def nearest_by_category(category_id):
    """Open restaurants serving a category near a point.
    ---
    tags:
      - Vendors
    parameters:
      - {name: category_id, in: path, type: string, required: true}
      - {name: latitude, in: query, type: number, required: true}
      - {name: longitude, in: query, type: number, required: true}
      - {name: radius, in: query, type: number}
      - {name: filter, in: query, type: string, enum: [distance, rating]}
    responses:
      200:
        description: Up to 50 vendors with actualIsOpen
    """
    q = request.validated_query
    try:
        data = vendor_service.nearest_by_category(category_id, q.latitude, q.longitude, q.radius, q.filter)
    except Exception as e:
        logging.error("Nearest by category failed: %s", e, exc_info=True)
        return internal_error_response(e, message="Failed to fetch restaurants")
    return ok(data, count=len(data))


# ------------------- Mart vendors -------------------
@vendors_bp.route("/mart/default", methods=["GET"])
def default_mart():
    try:
        vendor = vendor_service.default_mart_vendor()
    except Exception as e:
        logging.error("Default mart vendor lookup failed: %s", e, exc_info=True)
        return internal_error_response(e, message="Failed to fetch default mart vendor")
    if vendor is None:
        return not_found("No mart vendors available")
    return ok(vendor)


@vendors_bp.route("/mart/zone/", defaults={"zone_id": ""}, methods=["GET"])
@vendors_bp.route("/mart/zone/<zone_id>", methods=["GET"])
def mart_by_zone(zone_id):
    zone_id = (zone_id or "").strip()
    if not zone_id:
        return error("Zone ID is required", status=400)
    try:
        data = vendor_service.mart_vendors_by_zone(zone_id)
    except Exception as e:
        logging.error("Mart vendors by zone failed for %s: %s", zone_id, e, exc_info=True)
        return internal_error_response(e, message="Failed to fetch mart vendors by zone")
    return ok(data, count=len(data), zone_id=zone_id)


@vendors_bp.route("/mart/<vendor_id>", methods=["GET"])
def mart_by_id(vendor_id):
    try:
        vendor = vendor_service.mart_vendor(vendor_id)
    except Exception as e:
        logging.error("Mart vendor lookup failed for %s: %s", vendor_id, e, exc_info=True)
        return internal_error_response(e, message="Failed to fetch mart vendor")
    if vendor is None:
        return not_found("Mart vendor not found")
    return ok(vendor)
