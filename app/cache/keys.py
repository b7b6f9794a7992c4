"""Deterministic cache keys for the read-heavy catalogue endpoints."""
import hashlib
import json

MOBILE_SETTINGS_KEY = "mobile_settings_v1"
DELIVERY_CHARGE_SETTINGS_KEY = "delivery_charge_settings_v1"
CATEGORIES_HOME_KEY = "categories_home_v1"
CATEGORIES_ALL_KEY = "categories_all_v1"

SETTINGS_KEYS = (MOBILE_SETTINGS_KEY, DELIVERY_CHARGE_SETTINGS_KEY)
CATEGORY_KEYS = (CATEGORIES_HOME_KEY, CATEGORIES_ALL_KEY)

PRODUCT_FEED_PREFIX = "product_feed_"
VENDOR_PRODUCTS_PREFIX = "vendor_products_v1_"
NEAREST_RESTAURANTS_PREFIX = "nearest_restaurants_"
MENU_ITEMS_PREFIX = "menu_items_"


def _md5(value: str) -> str:
    return hashlib.md5(value.encode("utf-8")).hexdigest()


def params_hash(params: dict) -> str:
    """MD5 of the compact JSON rendering; key order is significant."""
    return _md5(json.dumps(params, separators=(",", ":")))


def product_feed_key(vendor_id: str, filters: dict) -> str:
    digest = params_hash({
        "search": filters.get("search"),
        "is_veg": filters.get("is_veg"),
        "is_nonveg": filters.get("is_nonveg"),
        "offer_only": filters.get("offer_only"),
    })
    return f"product_feed_vendor_{vendor_id}_filters_{digest}"


def product_feed_vendor_prefix(vendor_id: str) -> str:
    return f"product_feed_vendor_{vendor_id}_"


def vendor_products_key(vendor_id: str) -> str:
    return f"{VENDOR_PRODUCTS_PREFIX}{_md5(str(vendor_id))}"


def nearest_restaurants_key(zone_id, latitude, longitude, radius, is_dining, filter_by) -> str:
    # ~111 m of coordinate precision keeps nearby requests on one entry
    digest = params_hash({
        "zone_id": zone_id,
        "lat": round(float(latitude), 3),
        "lon": round(float(longitude), 3),
        "radius": round(float(radius), 1) if radius is not None else "null",
        "is_dining": bool(is_dining),
        "filter": filter_by,
    })
    return f"{nearest_restaurants_zone_prefix(zone_id)}{digest}"


def nearest_restaurants_zone_prefix(zone_id) -> str:
    return f"{NEAREST_RESTAURANTS_PREFIX}{zone_id}_"


def menu_items_key(position: str, zone_id=None, filter_position=None) -> str:
    digest = params_hash({
        "position": position,
        "zone_id": zone_id if zone_id is not None else "all",
        "filter_position": filter_position,
    })
    return f"{MENU_ITEMS_PREFIX}{position}_{digest}"
