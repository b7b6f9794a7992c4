import logging

from flask import Blueprint, current_app, jsonify

from app.cache import cached_response, refresh_requested
from app.cache.keys import DELIVERY_CHARGE_SETTINGS_KEY, MOBILE_SETTINGS_KEY
from app.services import settings_store
from app.services.settings_store import get_settings_store
from app.utils import internal_error_response, ok
from app.version import API_PREFIX

settings_bp = Blueprint("settings", __name__, url_prefix=f"{API_PREFIX}/settings")


def _document(name):
    try:
        data = get_settings_store().document(name)
    except Exception as e:
        logging.error("Error fetching %s settings: %s", name, e, exc_info=True)
        return internal_error_response(e, message="Error fetching settings")
    return jsonify(data), 200


@settings_bp.route("/all", methods=["GET"])
def all_settings():
    try:
        data = settings_store.all_settings()
    except Exception as e:
        logging.error("Error fetching all settings: %s", e, exc_info=True)
        return internal_error_response(e, message="Error fetching settings")
    return ok(data)


@settings_bp.route("/global", methods=["GET"])
def global_settings():
    return _document("globalSettings")


@settings_bp.route("/restaurant", methods=["GET"])
def restaurant_settings():
    return _document("RestaurantNearBy")


@settings_bp.route("/admin-commission", methods=["GET"])
def admin_commission():
    return _document("AdminCommission")


@settings_bp.route("/driver", methods=["GET"])
def driver_settings():
    return _document("DriverNearBy")


@settings_bp.route("/currency", methods=["GET"])
def currency():
    try:
        data = settings_store.resolve_currency()
    except Exception as e:
        logging.error("Error fetching currency settings: %s", e, exc_info=True)
        return internal_error_response(e, message="Error fetching settings")
    return jsonify(data), 200


# ------------------- Mobile bootstrap -------------------
@settings_bp.route("/mobile", methods=["GET"])
def mobile_settings():
    """Every document the mobile apps need, plus derived flags.
    ---
    tags:
      - Settings
    parameters:
      - {name: refresh, in: query, type: boolean}
    responses:
      200:
        description: documents and derived settings
    """
    try:
        payload = cached_response(
            MOBILE_SETTINGS_KEY,
            current_app.config["CATALOG_CACHE_TTL"],
            settings_store.mobile_settings,
            refresh=refresh_requested(),
        )
    except Exception as e:
        logging.error("Error in mobile settings: %s", e, exc_info=True)
        return internal_error_response(e, message="Unable to fetch settings right now.")
    return jsonify(payload), 200


@settings_bp.route("/delivery-charge", methods=["GET"])
def delivery_charge():
    try:
        payload = cached_response(
            DELIVERY_CHARGE_SETTINGS_KEY,
            current_app.config["CATALOG_CACHE_TTL"],
            settings_store.delivery_charge_settings,
            refresh=refresh_requested(),
        )
    except Exception as e:
        logging.error("Error fetching delivery charge settings: %s", e, exc_info=True)
        return internal_error_response(e, message="Unable to fetch delivery charge settings.")
    return jsonify(payload), 200


@settings_bp.route("/vendor-attributes", methods=["GET"])
def vendor_attributes():
    try:
        data = settings_store.vendor_attributes()
    except Exception as e:
        logging.error("Error fetching vendor attributes: %s", e, exc_info=True)
        return internal_error_response(e, message="Unable to fetch vendor attributes.")
    return ok(data)
