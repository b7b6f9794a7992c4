import logging

from flask import Blueprint, current_app, jsonify, request

from app.cache import cached_response, refresh_requested
from app.cache.keys import CATEGORIES_ALL_KEY, CATEGORIES_HOME_KEY, menu_items_key
from app.schemas.catalog import BannerQuery
from app.services import catalog
from app.utils import internal_error_response, not_found, ok, validate_query
from app.version import API_PREFIX

categories_bp = Blueprint("categories", __name__, url_prefix=f"{API_PREFIX}/categories")
banners_bp = Blueprint("banners", __name__, url_prefix=f"{API_PREFIX}/menu-items/banners")


def _cached(key, build, failure_message):
    try:
        payload = cached_response(
            key,
            current_app.config["CATALOG_CACHE_TTL"],
            build,
            refresh=refresh_requested(),
        )
    except Exception as e:
        logging.error("%s: %s", failure_message, e, exc_info=True)
        return internal_error_response(e, message=failure_message)
    return jsonify(payload), 200


# ------------------- Categories -------------------
@categories_bp.route("/home", methods=["GET"])
def home_categories():
    return _cached(CATEGORIES_HOME_KEY, catalog.home_categories, "Failed to fetch home categories")


@categories_bp.route("", methods=["GET"])
def all_categories():
    return _cached(CATEGORIES_ALL_KEY, catalog.all_categories, "Failed to fetch categories")


# ------------------- Menu item banners -------------------
def _position_banners(position):
    zone_id = request.validated_query.zone_id
    return _cached(
        menu_items_key(position, zone_id),
        lambda: catalog.banners(position=position, zone_id=zone_id),
        f"Failed to fetch {position} menu item banners",
    )


@banners_bp.route("/top", methods=["GET"])
@validate_query(BannerQuery)
def top_banners():
    return _position_banners("top")


@banners_bp.route("/middle", methods=["GET"])
@validate_query(BannerQuery)
def middle_banners():
    return _position_banners("middle")


@banners_bp.route("/bottom", methods=["GET"])
@validate_query(BannerQuery)
def bottom_banners():
    return _position_banners("bottom")


@banners_bp.route("", methods=["GET"])
@validate_query(BannerQuery)
def all_banners():
    """Published banners, optionally narrowed to a position and zone.
    ---
    tags:
      - Banners
    parameters:
      - {name: zone_id, in: query, type: string}
      - {name: position, in: query, type: string, enum: [top, middle, bottom]}
    responses:
      200:
        description: Banners ordered by set_order
    """
    q = request.validated_query
    return _cached(
        menu_items_key("all", q.zone_id, q.position),
        lambda: catalog.banners(position=q.position, zone_id=q.zone_id, with_count=True),
        "Failed to fetch menu item banners",
    )


@banners_bp.route("/<banner_id>", methods=["GET"])
def banner_detail(banner_id):
    try:
        banner = catalog.banner_by_id(banner_id)
    except Exception as e:
        logging.error("Menu item banner lookup failed for %s: %s", banner_id, e, exc_info=True)
        return internal_error_response(e, message="Failed to fetch menu item banner")
    if banner is None:
        return not_found("Menu item banner not found")
    return ok(banner)
