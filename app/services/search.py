"""Unified marketplace search and mart catalogue search."""
import logging
import math

from sqlalchemy import case, text
from sqlalchemy.exc import SQLAlchemyError

from app.services.geo import haversine_km
from app.services.opening_hours import vendor_is_open
from app.services.restaurants import published_filter
from app.utils.coerce import safe_decode
from app.utils.db import reset_session
from models import db
from models.mart import MartCategory, MartItem
from models.product import VendorProduct
from models.vendor import Vendor, VendorCategory

logger = logging.getLogger(__name__)

FALLBACK_CATEGORIES = [
    {"id": "fallback_1", "title": "Groceries"},
    {"id": "fallback_2", "title": "Medicine"},
    {"id": "fallback_3", "title": "Pet Care"},
]

FEATURED_TYPES = {
    "best_seller": MartItem.is_best_seller,
    "trending": MartItem.is_trending,
    "featured": MartItem.is_feature,
    "new": MartItem.is_new,
    "spotlight": MartItem.is_spotlight,
}

MART_FLAG_FILTERS = {
    "veg": MartItem.veg,
    "isAvailable": MartItem.is_available,
    "isBestSeller": MartItem.is_best_seller,
    "isFeature": MartItem.is_feature,
}


def format_search_restaurant(vendor, distance=None, now=None) -> dict:
    return {
        "id": vendor.id,
        "title": vendor.title or "",
        "description": vendor.description or "",
        "location": vendor.location or "",
        "latitude": vendor.latitude,
        "longitude": vendor.longitude,
        "zoneId": vendor.zone_id or "",
        "photo": vendor.photo or "",
        "phonenumber": vendor.phonenumber or "",
        "publish": vendor.publish is not False,
        "vType": vendor.v_type or "",
        "categoryTitle": safe_decode(vendor.category_title) or [],
        "workingHours": vendor.working_hours_list,
        "rating": round(vendor.reviews_sum / vendor.reviews_count, 1)
        if vendor.reviews_count and vendor.reviews_sum is not None else 0,
        "total_rating": int(vendor.reviews_count or 0),
        "is_open": vendor_is_open(vendor, now=now),
        "distance": distance,
        "created_at": vendor.created_at.isoformat() if vendor.created_at else None,
    }


def format_search_product(product) -> dict:
    return {
        "id": product.id,
        "name": product.name,
        "description": product.description,
        "price": product.price,
        "disPrice": product.dis_price,
        "photo": product.photo,
        "categoryID": product.category_id,
        "vendorID": product.vendor_id,
        "veg": bool(product.veg),
        "nonveg": bool(product.nonveg),
    }


def format_search_category(category) -> dict:
    return {
        "id": category.id,
        "title": category.title,
        "photo": category.photo,
        "publish": bool(category.publish),
        "description": category.description,
        "vType": category.v_type,
    }


def _search_restaurants(term, zone_id, latitude, longitude, limit, offset, now=None):
    pattern = f"%{term}%"
    query = (
        Vendor.query
        .filter(published_filter())
        .filter(Vendor.zone_id == zone_id)
        .filter(db.or_(
            Vendor.title.ilike(pattern),
            Vendor.description.ilike(pattern),
            Vendor.location.ilike(pattern),
            Vendor.v_type.ilike(pattern),
            Vendor.cuisine_title.ilike(pattern),
            Vendor.category_title.ilike(pattern),
            Vendor.restaurant_slug.ilike(pattern),
            Vendor.zone_slug.ilike(pattern),
        ))
    )
    if latitude is not None and longitude is not None:
        pairs = []
        for vendor in query.all():
            distance = None
            if vendor.latitude is not None and vendor.longitude is not None:
                distance = haversine_km(latitude, longitude, vendor.latitude, vendor.longitude)
            pairs.append((vendor, distance))
        pairs.sort(key=lambda pair: (pair[1] is None, pair[1] or 0))
        pairs = pairs[offset:offset + limit]
    else:
        vendors = query.order_by(Vendor.title.asc()).offset(offset).limit(limit).all()
        pairs = [(vendor, None) for vendor in vendors]
    return [format_search_restaurant(v, d, now=now) for v, d in pairs]


def _search_products(term, zone_id, limit, offset):
    pattern = f"%{term}%"
    products = (
        VendorProduct.query
        .join(Vendor, VendorProduct.vendor_id == Vendor.id)
        .filter(VendorProduct.publish.is_(True))
        .filter(db.or_(
            VendorProduct.name.ilike(pattern),
            VendorProduct.description.ilike(pattern),
            VendorProduct.category_id.ilike(pattern),
        ))
        .filter(Vendor.zone_id == zone_id)
        .filter(published_filter())
        .order_by(VendorProduct.name.asc())
        .offset(offset)
        .limit(limit)
        .all()
    )
    return [format_search_product(p) for p in products]


def _search_categories(term, limit, offset):
    pattern = f"%{term}%"
    categories = (
        VendorCategory.query
        .filter(VendorCategory.publish.is_(True))
        .filter(db.or_(VendorCategory.title.ilike(pattern), VendorCategory.description.ilike(pattern)))
        .order_by(VendorCategory.title.asc())
        .offset(offset)
        .limit(limit)
        .all()
    )
    return [format_search_category(c) for c in categories]


def unified_search(term, zone_id, latitude=None, longitude=None, limit=20, page=1, now=None) -> dict:
    offset = (page - 1) * limit
    restaurants = _search_restaurants(term, zone_id, latitude, longitude, limit, offset, now=now)
    products = _search_products(term, zone_id, limit, offset)
    categories = _search_categories(term, limit, offset)
    total = len(restaurants) + len(products) + len(categories)
    return {
        "success": True,
        "data": {
            "restaurants": restaurants,
            "products": products,
            "categories": categories,
            "total_results": total,
        },
        "meta": {
            "page": page,
            "limit": limit,
            "query": term,
            "zone_id": zone_id,
            "has_more": total >= limit,
            "openCount": sum(1 for r in restaurants if r["is_open"] is True),
        },
    }


def search_mart_categories(term="", page=1, limit=20) -> dict:
    offset = (page - 1) * limit
    try:
        query = MartCategory.query
        if term:
            pattern = f"%{term}%"
            query = query.filter(db.or_(MartCategory.title.ilike(pattern), MartCategory.description.ilike(pattern)))
        total = query.count()
        rows = query.order_by(MartCategory.category_order).offset(offset).limit(limit).all()
    except SQLAlchemyError as e:
        logger.error("Category SQL search error: %s", e)
        reset_session(e)
        return {
            "success": True,
            "message": "Categories retrieved with fallback",
            "data": FALLBACK_CATEGORIES[offset:offset + limit],
            "fallback": True,
        }
    return {
        "success": True,
        "message": "Categories retrieved successfully",
        "data": [c.to_dict() for c in rows],
        "pagination": {
            "current_page": page,
            "per_page": limit,
            "total": total,
            "has_more": offset + limit < total,
        },
        "search_term": term,
    }


def search_words(term: str) -> list:
    return term.split()


def relevance_score(term: str):
    """SQL expression ranking a mart item's name and description against the term."""
    words = search_words(term)
    whens = [
        (MartItem.name == term, 10),
        (MartItem.name.like(f"{term}%"), 9),
        (MartItem.name.like(f"%{term}%"), 8),
    ]
    if len(words) > 1:
        whens.append((db.and_(*[MartItem.name.like(f"%{w}%") for w in words]), 7))
    whens.extend((MartItem.name.like(f"%{w}%"), 5) for w in words if len(w) >= 2)
    whens.append((MartItem.description.like(f"%{term}%"), 3))
    return case(*whens, else_=1)


def _mart_term_filter(term):
    conditions = [
        MartItem.name.ilike(f"%{term}%"),
        MartItem.description.ilike(f"%{term}%"),
        MartItem.keywords.ilike(f"%{term}%"),
    ]
    for word in search_words(term):
        if len(word) >= 2:
            conditions.extend([
                MartItem.name.ilike(f"%{word}%"),
                MartItem.description.ilike(f"%{word}%"),
                MartItem.keywords.ilike(f"%{word}%"),
            ])
    return db.or_(*conditions)


def search_mart_items(filters: dict, page=1, limit=20) -> dict:
    offset = (page - 1) * limit
    query = MartItem.query.filter(MartItem.publish.is_(True))
    term = (filters.get("search") or "").strip()
    if term:
        query = query.filter(_mart_term_filter(term))
    if filters.get("category"):
        query = query.filter(MartItem.category_title.ilike(f"%{filters['category']}%"))
    if filters.get("subcategory"):
        query = query.filter(MartItem.subcategory_title.ilike(f"%{filters['subcategory']}%"))
    if filters.get("vendor"):
        query = query.filter(MartItem.vendor_title.ilike(f"%{filters['vendor']}%"))
    if filters.get("min_price") is not None:
        query = query.filter(MartItem.price >= filters["min_price"])
    if filters.get("max_price") is not None:
        query = query.filter(MartItem.price <= filters["max_price"])
    for name, column in MART_FLAG_FILTERS.items():
        if filters.get(name) is not None:
            query = query.filter(column.is_(bool(filters[name])))

    total = query.count()
    ordering = [relevance_score(term).desc()] if term else []
    ordering += [
        MartItem.is_best_seller.desc(),
        MartItem.is_feature.desc(),
        MartItem.is_available.desc(),
        MartItem.name.asc(),
    ]
    rows = query.order_by(*ordering).offset(offset).limit(limit).all()
    return {
        "success": True,
        "message": "Mart items retrieved successfully",
        "data": [item.to_dict() for item in rows],
        "pagination": {
            "current_page": page,
            "per_page": limit,
            "total": total,
            "total_pages": math.ceil(total / limit),
            "has_more": offset + limit < total,
        },
        "filters_applied": {k: v for k, v in filters.items() if v is not None},
    }


def featured_mart_items(item_type="featured", limit=20) -> dict:
    query = MartItem.query.filter(MartItem.is_available.is_(True))
    if item_type in FEATURED_TYPES:
        query = query.filter(FEATURED_TYPES[item_type].is_(True))
    data = [item.to_dict() for item in query.limit(limit).all()]
    return {
        "success": True,
        "message": f"{item_type.capitalize()} items retrieved successfully",
        "data": data,
        "type": item_type,
        "count": len(data),
    }


def database_healthy() -> bool:
    try:
        db.session.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.warning("Search health check failed: %s", e)
        return False
    return True
