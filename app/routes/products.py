import logging

from flask import Blueprint, current_app, jsonify, request

from app.cache import cached_response, refresh_requested
from app.cache.keys import product_feed_key, vendor_products_key
from app.schemas.catalog import ProductListQuery
from app.services import products as product_service
from app.utils import error, internal_error_response, not_found, ok, validate_query
from app.version import API_PREFIX

products_bp = Blueprint("products", __name__, url_prefix=f"{API_PREFIX}/products")


def _page_url(page, per_page):
    return f"{request.base_url}?page={page}&per_page={per_page}"


@products_bp.route("", methods=["GET"])
@validate_query(ProductListQuery)
def all_products():
    """Published, available products, paginated.
    ---
    tags:
      - Products
    parameters:
      - {name: page, in: query, type: integer}
      - {name: per_page, in: query, type: integer}
    responses:
      200:
        description: Products with meta and links
    """
    q = request.validated_query
    try:
        items, meta = product_service.all_published_products(q.page, q.per_page)
    except Exception as e:
        logging.error("Listing products failed: %s", e, exc_info=True)
        return internal_error_response(e, message="Failed to fetch products")

    per_page, page, last = meta["per_page"], meta["current_page"], meta["last_page"]
    links = {
        "first": _page_url(1, per_page),
        "last": _page_url(last, per_page),
        "prev": _page_url(page - 1, per_page) if page > 1 else None,
        "next": _page_url(page + 1, per_page) if page < last else None,
    }
    message = "Products retrieved successfully" if items else "No available products found"
    return ok(items, message=message, meta=meta, links=links)


@products_bp.route("/vendor/<vendor_id>", methods=["GET"])
def vendor_products(vendor_id):
    vendor_id = (vendor_id or "").strip()
    if not vendor_id:
        return error("Invalid vendor ID provided.", status=400)
    try:
        payload = cached_response(
            vendor_products_key(vendor_id),
            current_app.config["CATALOG_CACHE_TTL"],
            lambda: product_service.vendor_products(vendor_id),
            refresh=refresh_requested(),
        )
    except Exception as e:
        logging.error("Vendor products failed for %s: %s", vendor_id, e, exc_info=True)
        return internal_error_response(e, message="Failed to fetch vendor products")
    return jsonify(payload), 200


# ------------------- Restaurant product feed -------------------
@products_bp.route("/feed/<vendor_id>", methods=["GET"])
def product_feed(vendor_id):
    """Menu of one restaurant with promotions and category summaries.
    ---
    tags:
      - Products
    parameters:
      - {name: vendor_id, in: path, type: string, required: true}
      - {name: search, in: query, type: string}
      - {name: is_veg, in: query, type: boolean}
      - {name: is_nonveg, in: query, type: boolean}
      - {name: offer_only, in: query, type: boolean}
      - {name: refresh, in: query, type: boolean}
    responses:
      200:
        description: Feed with filters, meta, categories and products
    """
    filters = product_service.parse_feed_filters(request.args)
    try:
        payload = cached_response(
            product_feed_key(vendor_id, filters),
            current_app.config["CATALOG_CACHE_TTL"],
            lambda: product_service.product_feed(vendor_id, filters),
            refresh=refresh_requested(),
        )
    except Exception as e:
        logging.error("Product feed failed for %s: %s", vendor_id, e, exc_info=True)
        return internal_error_response(e, message="Unable to load restaurant products at the moment.")
    return jsonify(payload), 200


@products_bp.route("/<product_id>", methods=["GET"])
def product_detail(product_id):
    try:
        product = product_service.product_detail(product_id)
    except Exception as e:
        logging.error("Product lookup failed for %s: %s", product_id, e, exc_info=True)
        return internal_error_response(e, message="Failed to fetch product")
    if product is None:
        return not_found("Product not found")
    return ok(product)
