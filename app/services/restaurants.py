"""Restaurant listing: nearest-by-distance/rating, by zone, lookup and search."""
import logging
from datetime import datetime

from app.services.geo import bounding_box, haversine_km
from app.services.opening_hours import vendor_is_open
from app.services.subscription import is_subscription_valid, latest_subscriptions
from app.telemetry import get_tracer
from app.utils.coerce import safe_decode
from models import db
from models.vendor import Vendor

logger = logging.getLogger(__name__)
tracer = get_tracer(__name__)

AVAILABLE_FILTERS = ["distance", "rating"]
RESTAURANT_TYPES = ("restaurant", "food")


def published_filter():
    """Only an explicit False unpublishes a vendor."""
    return db.or_(Vendor.publish.is_(True), Vendor.publish.is_(None))


def restaurant_type_filter():
    return db.or_(Vendor.v_type.in_(RESTAURANT_TYPES), Vendor.v_type.is_(None))


def reviews_average(vendor) -> float:
    count = vendor.reviews_count or 0
    if count > 0 and vendor.reviews_sum is not None:
        return round(vendor.reviews_sum / count, 1)
    return 0


def format_restaurant(vendor, subscriptions=None, distance=None, now=None) -> dict:
    subscription = (subscriptions or {}).get(vendor.id) or {}
    created_at = vendor.created_at or datetime.utcnow()
    return {
        "id": vendor.id,
        "title": vendor.title or "",
        "zoneId": vendor.zone_id or "",
        "latitude": float(vendor.latitude or 0),
        "longitude": float(vendor.longitude or 0),
        "distance": float(distance or 0),
        "vType": vendor.v_type or "restaurant",
        "isActive": vendor.publish is not False,
        "isOpen": vendor_is_open(vendor, now=now),
        "subscriptionPlan": subscription.get("plan"),
        "author": vendor.author,
        "subscriptionTotalOrders": subscription.get("totalOrders"),
        "subscriptionExpiryDate": subscription.get("expiryDate"),
        "reviewsCount": int(vendor.reviews_count or 0),
        "reviewsSum": float(vendor.reviews_sum or 0),
        "reviewsAverage": reviews_average(vendor),
        "workingHours": vendor.working_hours_list,
        "restaurantCost": vendor.restaurant_cost or "0",
        "createdAt": created_at.isoformat(),
        "photo": vendor.photo or vendor.photos or "",
        "location": vendor.location or "",
        "enabledDiveInFuture": bool(vendor.enabled_dive_in_future),
        "description": vendor.description or "",
        "phonenumber": vendor.phonenumber or "",
        "adminCommission": safe_decode(vendor.admin_commission) or 0,
        "specialDiscountEnable": bool(vendor.special_discount_enable),
    }


def has_valid_subscription(record: dict, now=None) -> bool:
    return is_subscription_valid(
        record.get("subscriptionPlan"),
        record.get("subscriptionTotalOrders"),
        record.get("subscriptionExpiryDate"),
        now=now,
    )


def open_first(records):
    """Stable partition: open restaurants keep their order ahead of closed ones."""
    return [r for r in records if r["isOpen"]] + [r for r in records if not r["isOpen"]]


def open_count(records) -> int:
    return sum(1 for r in records if r.get("isOpen") is True)


def nearest_restaurants(zone_id, latitude, longitude, radius_km=None, is_dining=False,
                        filter_by="distance", now=None) -> dict:
    with tracer.start_as_current_span("restaurants.nearest") as span:
        span.set_attribute("zone_id", str(zone_id))
        span.set_attribute("filter", filter_by)

        query = (
            Vendor.query
            .filter(Vendor.zone_id == zone_id)
            .filter(published_filter())
            .filter(Vendor.latitude.isnot(None), Vendor.longitude.isnot(None))
            .filter(restaurant_type_filter())
        )
        if is_dining:
            query = query.filter(Vendor.enabled_dive_in_future.is_(True))
        if radius_km is not None:
            min_lat, max_lat, min_lon, max_lon = bounding_box(latitude, longitude, radius_km)
            query = query.filter(
                Vendor.latitude.between(min_lat, max_lat),
                Vendor.longitude.between(min_lon, max_lon),
            )

        candidates = []
        for vendor in query.all():
            distance = haversine_km(latitude, longitude, vendor.latitude, vendor.longitude)
            if radius_km is not None and distance > radius_km:
                continue
            candidates.append((vendor, distance))

        if filter_by == "rating":
            candidates.sort(key=lambda pair: (
                -reviews_average(pair[0]),
                -_exact_rating(pair[0]),
                -(pair[0].reviews_count or 0),
            ))
        else:
            candidates.sort(key=lambda pair: pair[1])

        subscriptions = latest_subscriptions([v.id for v, _ in candidates], now=now)
        records = [
            format_restaurant(vendor, subscriptions, distance=distance, now=now)
            for vendor, distance in candidates
        ]
        records = [r for r in records if has_valid_subscription(r, now)]
        records = open_first(records)
        span.set_attribute("result_count", len(records))

    return {
        "success": True,
        "filter": filter_by,
        "availableFilters": AVAILABLE_FILTERS,
        "count": len(records),
        "openCount": open_count(records),
        "data": records,
    }


def _exact_rating(vendor) -> float:
    count = vendor.reviews_count or 0
    return (vendor.reviews_sum or 0) / count if count > 0 else 0


def get_restaurant(restaurant_id, now=None):
    vendor = db.session.get(Vendor, restaurant_id)
    if vendor is None:
        return None
    return format_restaurant(vendor, latest_subscriptions([vendor.id]), now=now)


def restaurants_by_zone(zone_id, now=None) -> dict:
    vendors = Vendor.query.filter(Vendor.zone_id == zone_id).filter(published_filter()).all()
    subscriptions = latest_subscriptions([v.id for v in vendors])
    records = [format_restaurant(v, subscriptions, now=now) for v in vendors]
    return {"data": records, "count": len(records), "openCount": open_count(records)}


def search_restaurants(term, zone_id=None, latitude=None, longitude=None, now=None) -> dict:
    pattern = f"%{term}%"
    query = Vendor.query.filter(published_filter()).filter(db.or_(
        Vendor.title.ilike(pattern),
        Vendor.description.ilike(pattern),
        Vendor.location.ilike(pattern),
    ))
    if zone_id:
        query = query.filter(Vendor.zone_id == zone_id)

    if latitude is not None and longitude is not None:
        pairs = []
        for vendor in query.all():
            if vendor.latitude is None or vendor.longitude is None:
                pairs.append((vendor, None))
            else:
                pairs.append((vendor, haversine_km(latitude, longitude, vendor.latitude, vendor.longitude)))
        pairs.sort(key=lambda pair: (pair[1] is None, pair[1] or 0))
    else:
        pairs = [(vendor, None) for vendor in query.order_by(Vendor.title.asc()).all()]

    subscriptions = latest_subscriptions([v.id for v, _ in pairs])
    records = [format_restaurant(v, subscriptions, distance=d, now=now) for v, d in pairs]
    return {"data": records, "count": len(records), "openCount": open_count(records)}
