"""Best-effort invalidation of response-cache entries.

Every operation returns a plain dict that the cache endpoints render
as-is. ``cleared_count`` of -1 means the whole store was flushed.
"""
import logging

from app.cache import keys

logger = logging.getLogger(__name__)

EXPIRE_NOTE = "For immediate refresh, use ?refresh=true parameter in API calls"


def _full_flush(store) -> bool:
    try:
        return bool(store.flush())
    except Exception as e:
        logger.warning("Cache flush failed on %s store: %s", store.driver, e)
        return False


def _flush_prefixes(store, *prefixes) -> int:
    cleared = 0
    for prefix in prefixes:
        try:
            removed = store.flush_by_prefix(prefix)
        except Exception as e:
            logger.error("Failed to delete cache entries with prefix %s: %s", prefix, e)
            continue
        cleared += removed or 0
    return cleared


def flush_products(store, vendor_id=None, flush_all=None) -> dict:
    if flush_all is None:
        flush_all = not vendor_id
    cleared = 0

    if flush_all or not vendor_id:
        if _full_flush(store):
            cleared = -1
            logger.info("All product cache flushed (%s)", store.driver)
        else:
            cleared = _flush_prefixes(store, keys.PRODUCT_FEED_PREFIX, keys.VENDOR_PRODUCTS_PREFIX)
            if cleared == 0:
                return {
                    "success": True,
                    "message": "Product feed cache will expire naturally (24 hours). "
                               "Use ?refresh=true in API calls for immediate refresh.",
                    "note": EXPIRE_NOTE,
                    "cache_driver": store.driver,
                }
    else:
        cleared += _flush_prefixes(store, keys.product_feed_vendor_prefix(vendor_id))
        if store.forget(keys.vendor_products_key(vendor_id)):
            cleared += 1
        logger.info("Product cache cleared for vendor %s (%d keys)", vendor_id, cleared)

    if cleared == -1:
        message = "All product cache cleared successfully"
    elif cleared > 0:
        message = (
            f"Product feed cache cleared for vendor: {vendor_id}"
            if vendor_id else "Product feed cache cleared successfully"
        )
    else:
        message = "No cache entries found to clear"
    return {
        "success": True,
        "message": message,
        "cleared_count": cleared,
        "vendor_id": vendor_id or "all",
    }


def flush_restaurants(store, zone_id=None, flush_all=None) -> dict:
    if flush_all is None:
        flush_all = not zone_id
    cleared = 0

    if flush_all or not zone_id:
        if _full_flush(store):
            cleared = -1
        else:
            cleared = _flush_prefixes(store, keys.NEAREST_RESTAURANTS_PREFIX)
    else:
        try:
            removed = store.flush_by_prefix(keys.nearest_restaurants_zone_prefix(zone_id))
        except Exception as e:
            logger.error("Failed to clear restaurant cache for zone %s: %s", zone_id, e)
            removed = 0
        if removed is None:
            logger.info("Restaurant cache for zone %s left to expire naturally", zone_id)
            removed = 0
        cleared = removed

    if cleared == 0:
        return {
            "success": True,
            "message": "Restaurant cache will expire naturally. "
                       "Use ?refresh=true in API calls for immediate refresh.",
            "note": EXPIRE_NOTE,
            "cache_driver": store.driver,
            "cleared_count": 0,
            "zone_id": zone_id or "all",
        }
    if cleared == -1:
        message = "All restaurant cache cleared successfully"
    else:
        message = (
            f"Restaurant cache cleared for zone: {zone_id}"
            if zone_id else "Restaurant cache cleared successfully"
        )
    return {
        "success": True,
        "message": message,
        "cleared_count": cleared,
        "zone_id": zone_id or "all",
    }


def forget_keys(store, cache_keys) -> int:
    return sum(1 for key in cache_keys if store.forget(key))


def flush_all(store) -> dict:
    cleared = _full_flush(store)
    if not cleared:
        cleared = _flush_prefixes(store, "") > 0

    if not cleared:
        return {
            "success": True,
            "message": "Cache flush attempted. For immediate refresh, use ?refresh=true in API calls.",
            "note": "Cache will expire naturally after 24 hours. " + EXPIRE_NOTE,
            "cache_driver": store.driver,
        }

    forget_keys(store, keys.SETTINGS_KEYS + keys.CATEGORY_KEYS)
    _flush_prefixes(store, keys.MENU_ITEMS_PREFIX)
    return {
        "success": True,
        "message": "All cache cleared successfully",
        "cleared": ["products", "restaurants", "settings", "categories", "menu_items", "all_other_cache"],
        "cache_driver": store.driver,
    }


def flush_settings(store) -> dict:
    cleared = forget_keys(store, keys.SETTINGS_KEYS)
    return {
        "success": True,
        "message": (
            f"Settings cache cleared successfully ({cleared} keys)"
            if cleared else "No settings cache entries found to clear"
        ),
        "cleared_count": cleared,
        "cleared_keys": list(keys.SETTINGS_KEYS),
    }


def flush_categories(store) -> dict:
    cleared = forget_keys(store, keys.CATEGORY_KEYS)
    return {
        "success": True,
        "message": (
            f"Category cache cleared successfully ({cleared} keys)"
            if cleared else "No category cache entries found to clear"
        ),
        "cleared_count": cleared,
        "cleared_keys": list(keys.CATEGORY_KEYS),
    }


def flush_menu_items(store, position="all", zone_id=None, flush_everything=None) -> dict:
    position = position or "all"
    if flush_everything is None:
        flush_everything = False
    cleared = 0

    if flush_everything or (position == "all" and not zone_id):
        try:
            removed = store.flush_by_prefix(keys.MENU_ITEMS_PREFIX)
        except Exception as e:
            logger.error("Error clearing menu items cache: %s", e)
            removed = 0
        if removed is None:
            cleared = -1 if _full_flush(store) else 0
        else:
            cleared = removed
    elif store.forget(keys.menu_items_key(position, zone_id)):
        cleared = 1

    if cleared == -1:
        message = "All menu items cache cleared successfully"
    elif cleared > 0:
        message = f"Menu items cache cleared successfully ({cleared} keys)"
    else:
        message = "No menu items cache entries found to clear"
    return {
        "success": True,
        "message": message,
        "cleared_count": cleared,
        "position": position,
        "zone_id": zone_id or "all",
    }


def flush_settings_documents(store) -> int:
    """Drop cached payloads derived from settings documents."""
    return forget_keys(store, keys.SETTINGS_KEYS)
