import logging
from datetime import datetime

from app.services.geo import bounding_box, haversine_km
from app.services.opening_hours import is_restaurant_open
from app.utils.coerce import safe_decode
from models import db
from models.product import Coupon
from models.vendor import Vendor

logger = logging.getLogger(__name__)

DEFAULT_CATEGORY_RADIUS_KM = 10.0
CATEGORY_RESULT_LIMIT = 50


def vendor_record(vendor: Vendor) -> dict:
    """Full vendor row with its JSON text columns decoded."""
    return {
        "id": vendor.id,
        "title": vendor.title,
        "description": vendor.description,
        "author": vendor.author,
        "zoneId": vendor.zone_id,
        "latitude": vendor.latitude,
        "longitude": vendor.longitude,
        "location": vendor.location,
        "phonenumber": vendor.phonenumber,
        "photo": vendor.photo,
        "photos": safe_decode(vendor.photos),
        "vType": vendor.v_type,
        "publish": vendor.publish,
        "isOpen": vendor.manual_open_flag,
        "workingHours": safe_decode(vendor.working_hours),
        "categoryID": safe_decode(vendor.category_ids),
        "categoryTitle": safe_decode(vendor.category_title),
        "cuisineTitle": vendor.cuisine_title,
        "restaurant_slug": vendor.restaurant_slug,
        "zone_slug": vendor.zone_slug,
        "reviewsCount": int(vendor.reviews_count or 0),
        "reviewsSum": float(vendor.reviews_sum or 0),
        "restaurantCost": vendor.restaurant_cost,
        "adminCommission": safe_decode(vendor.admin_commission),
        "enabledDiveInFuture": bool(vendor.enabled_dive_in_future),
        "specialDiscountEnable": bool(vendor.special_discount_enable),
        "dine_in_active": bool(vendor.dine_in_active),
        "createdAt": vendor.created_at.isoformat() if vendor.created_at else None,
    }


def offers_for_vendor(vendor_id, now=None) -> list:
    now = now or datetime.utcnow()
    coupons = Coupon.query.filter(
        Coupon.restaurant_id == vendor_id,
        Coupon.is_enabled.is_(True),
        Coupon.is_public.is_(True),
        Coupon.expires_at >= now,
    ).all()
    return [c.to_dict() for c in coupons]


def _rating(vendor) -> float:
    count = vendor.reviews_count or 0
    return (vendor.reviews_sum or 0) / count if count > 0 else 0


def nearest_by_category(category_id, latitude, longitude, radius_km=None, filter_by="distance", now=None) -> list:
    radius_km = DEFAULT_CATEGORY_RADIUS_KM if radius_km is None else float(radius_km)
    min_lat, max_lat, min_lon, max_lon = bounding_box(latitude, longitude, radius_km)
    candidates = Vendor.query.filter(
        Vendor.publish.is_(True),
        Vendor.latitude.between(min_lat, max_lat),
        Vendor.longitude.between(min_lon, max_lon),
    ).all()

    matches = []
    for vendor in candidates:
        if not vendor.manual_open_flag or category_id not in vendor.category_id_list:
            continue
        distance = haversine_km(latitude, longitude, vendor.latitude, vendor.longitude)
        if distance <= radius_km:
            matches.append((vendor, distance))

    if filter_by == "rating":
        matches.sort(key=lambda pair: -_rating(pair[0]))
    else:
        matches.sort(key=lambda pair: pair[1])

    results = []
    for vendor, distance in matches[:CATEGORY_RESULT_LIMIT]:
        record = vendor_record(vendor)
        record["distance"] = distance
        record["actualIsOpen"] = is_restaurant_open(True, vendor.working_hours_list, now=now)
        results.append(record)
    return results


def expand_mart_vendor_ids(vendor_id: str) -> list:
    """Mart ids are stored with or without a ``mart_`` prefix in either case."""
    base_id = vendor_id
    if vendor_id.lower().startswith("mart_"):
        base_id = vendor_id.split("_", 1)[1]
    candidates = [vendor_id, base_id, f"mart_{base_id}", f"MART_{base_id}"]
    return [c for c in dict.fromkeys(candidates) if c]


def _mart_query():
    return Vendor.query.filter(Vendor.v_type.ilike("%mart%"))


def mart_vendor(vendor_id):
    vendor = _mart_query().filter(Vendor.id.in_(expand_mart_vendor_ids(vendor_id))).first()
    return vendor_record(vendor) if vendor else None


def default_mart_vendor():
    """Newest published mart that is not manually closed."""
    vendors = _mart_query().filter(Vendor.publish.is_(True)).order_by(Vendor.created_at.desc()).all()
    for vendor in vendors:
        if vendor.manual_open_flag:
            return vendor_record(vendor)
    return None


def mart_vendors_by_zone(zone_id) -> list:
    vendors = (
        Vendor.query
        .filter(db.func.lower(Vendor.v_type) == "mart")
        .filter(Vendor.zone_id == zone_id)
        .order_by(Vendor.title.asc())
        .all()
    )
    vendors.sort(key=lambda v: not v.manual_open_flag)
    return [vendor_record(v) for v in vendors]


def vendor_details(vendor_id):
    vendor = db.session.get(Vendor, vendor_id)
    if vendor is None:
        return None
    return {
        "id": vendor.id,
        "title": vendor.title,
        "author": vendor.author,
        "dine_in_active": bool(vendor.dine_in_active),
    }
