import logging

from flask import Blueprint, current_app, jsonify, request
from flask_limiter.util import get_remote_address

from app.cache import get_cache, invalidation
from app.schemas.cache import MenuItemsCacheFlush, ProductCacheFlush, RestaurantCacheFlush
from app.utils import internal_error_response, ok, validate_params
from app.version import API_PREFIX
from extensions import limiter

cache_bp = Blueprint("cache", __name__, url_prefix=f"{API_PREFIX}/cache")

# every cache endpoint shares one per-IP budget
limiter.limit(
    lambda: current_app.config["CACHE_FLUSH_LIMIT_PER_IP"],
    key_func=get_remote_address,
    error_message="Too many cache requests from this IP",
)(cache_bp)


def _run(operation, failure_message, *args, **kwargs):
    try:
        payload = operation(get_cache(), *args, **kwargs)
    except Exception as e:
        logging.error("%s: %s", failure_message, e, exc_info=True)
        return internal_error_response(e, message=failure_message)
    return jsonify(payload), 200


@cache_bp.route("/flush/products", methods=["POST"])
@validate_params(ProductCacheFlush)
def flush_products():
    """Drop cached product feeds, for one vendor or all.
    ---
    tags:
      - Cache
    parameters:
      - {name: vendor_id, in: query, type: string}
      - {name: all, in: query, type: boolean}
    responses:
      200:
        description: Flush outcome with cleared_count (-1 for a full flush)
    """
    data = request.validated_data
    return _run(invalidation.flush_products, "Failed to flush product cache",
                vendor_id=data.vendor_id, flush_all=data.flush_all)


@cache_bp.route("/flush/restaurants", methods=["POST"])
@validate_params(RestaurantCacheFlush)
def flush_restaurants():
    data = request.validated_data
    return _run(invalidation.flush_restaurants, "Failed to flush restaurant cache",
                zone_id=data.zone_id, flush_all=data.flush_all)


@cache_bp.route("/flush/all", methods=["POST"])
def flush_all():
    return _run(invalidation.flush_all, "Failed to flush cache")


@cache_bp.route("/flush/settings", methods=["POST"])
def flush_settings():
    return _run(invalidation.flush_settings, "Failed to flush settings cache")


@cache_bp.route("/flush/categories", methods=["POST"])
def flush_categories():
    return _run(invalidation.flush_categories, "Failed to flush category cache")


@cache_bp.route("/flush/menu-items", methods=["POST"])
@validate_params(MenuItemsCacheFlush)
def flush_menu_items():
    data = request.validated_data
    return _run(invalidation.flush_menu_items, "Failed to flush menu items cache",
                position=data.position, zone_id=data.zone_id, flush_everything=data.flush_all)


@cache_bp.route("/stats", methods=["GET"])
def stats():
    store = get_cache()
    return ok({
        "cache_driver": store.driver,
        "cache_prefix": store.prefix,
        "note": "Cache statistics may vary by driver",
    })
