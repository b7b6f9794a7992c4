import logging
from datetime import datetime

from app.utils.coerce import (
    coerce_boolean,
    format_datetime,
    is_valid_discount,
    numeric_string,
    safe_decode,
    string_or_null,
    nullable_bool,
    to_float,
)
from models import db
from models.product import Promotion, VendorProduct
from models.vendor import Vendor, VendorCategory

logger = logging.getLogger(__name__)

DEFAULT_PER_PAGE = 50
MAX_PER_PAGE = 200


def parse_feed_filters(args) -> dict:
    return {
        "search": string_or_null(args.get("search")),
        "is_veg": nullable_bool(args.get("is_veg")),
        "is_nonveg": nullable_bool(args.get("is_nonveg")),
        "offer_only": nullable_bool(args.get("offer_only")),
    }


def map_basic_product(item: VendorProduct) -> dict:
    return {
        "id": item.id,
        "name": item.name,
        "description": item.description,
        "vendor_id": item.vendor_id,
        "vendor_title": item.vendor_title,
        "category_id": item.category_id,
        "category_title": item.category_title,
        "is_available": coerce_boolean(item.is_available) or False,
        "publish": coerce_boolean(item.publish) or False,
        "veg": coerce_boolean(item.veg),
        "nonveg": coerce_boolean(item.nonveg),
        "quantity": item.quantity,
        "price": item.price,
        "discount_price": item.dis_price,
        "takeaway_option": coerce_boolean(item.takeaway_option),
        "photo": item.photo,
        "photos": safe_decode(item.photos),
        "created_at": format_datetime(item.created_at),
    }


def _published_available():
    return VendorProduct.query.filter(
        VendorProduct.publish.is_(True),
        VendorProduct.is_available.is_(True),
    ).order_by(VendorProduct.name)


def vendor_products(vendor_id: str) -> dict:
    products = [
        map_basic_product(p)
        for p in _published_available().filter(VendorProduct.vendor_id == vendor_id).all()
    ]
    return {
        "success": True,
        "data": products,
        "message": "Products retrieved successfully" if products
        else "No available products found for this vendor",
    }


def clamp_per_page(value) -> int:
    try:
        per_page = int(value)
    except (TypeError, ValueError):
        per_page = DEFAULT_PER_PAGE
    if per_page <= 0:
        per_page = DEFAULT_PER_PAGE
    return min(per_page, MAX_PER_PAGE)


def all_published_products(page=1, per_page=DEFAULT_PER_PAGE):
    """Return (items, meta) for one page of published, available products."""
    per_page = clamp_per_page(per_page)
    page = max(int(page or 1), 1)
    pagination = _published_available().paginate(page=page, per_page=per_page, error_out=False)
    items = [map_basic_product(p) for p in pagination.items]
    meta = {
        "total": pagination.total,
        "per_page": per_page,
        "current_page": page,
        "last_page": max(pagination.pages, 1),
    }
    return items, meta


def active_promotions(restaurant_keys, now=None) -> dict:
    """Available promotions inside their window, grouped by product id."""
    now = now or datetime.utcnow()
    rows = (
        Promotion.query
        .filter(Promotion.restaurant_id.in_(restaurant_keys))
        .filter(Promotion.is_available.is_(True))
        .filter(db.or_(Promotion.start_time.is_(None), Promotion.start_time <= now))
        .filter(db.or_(Promotion.end_time.is_(None), Promotion.end_time >= now))
        .all()
    )
    grouped = {}
    for promo in rows:
        grouped.setdefault(promo.product_id, []).append(promo)
    return grouped


def transform_product(product: VendorProduct, promotions: dict, category=None) -> dict:
    promotion = (promotions.get(product.id) or [None])[0]
    original_price = numeric_string(product.price)
    discount_price = numeric_string(product.dis_price)
    has_promotion = promotion is not None

    if has_promotion:
        final_price = numeric_string(promotion.special_price)
    elif is_valid_discount(original_price, discount_price):
        final_price = discount_price
    else:
        final_price = original_price

    return {
        "id": product.id,
        "name": product.name,
        "description": product.description,
        "category_id": product.category_id,
        "category_title": category.title if category is not None else product.category_title,
        "is_available": coerce_boolean(product.is_available),
        "nonveg": coerce_boolean(product.nonveg),
        "veg": coerce_boolean(product.veg),
        "photo": product.photo,
        "photos": safe_decode(product.photos),
        "add_ons_title": safe_decode(product.add_ons_title),
        "add_ons_price": safe_decode(product.add_ons_price),
        "item_attribute": safe_decode(product.item_attribute),
        "product_specification": safe_decode(product.product_specification),
        "reviews_count": int(product.reviews_count or 0),
        "reviews_sum": float(product.reviews_sum or 0),
        "quantity": product.quantity,
        "original_price": original_price,
        "discount_price": discount_price,
        "final_price": final_price,
        "has_active_promotion": has_promotion,
        "promotion": {
            "id": promotion.id,
            "special_price": numeric_string(promotion.special_price),
            "item_limit": promotion.item_limit,
            "start_time": format_datetime(promotion.start_time),
            "end_time": format_datetime(promotion.end_time),
        } if has_promotion else None,
    }


def _is_offer(product: dict) -> bool:
    if product["has_active_promotion"]:
        return True
    discount = product["discount_price"]
    original = product["original_price"]
    return bool(discount and original and 0 < to_float(discount) < to_float(original))


def build_category_summaries(products, categories: dict) -> list:
    counts = {}
    for p in products:
        counts[p["category_id"]] = counts.get(p["category_id"], 0) + 1
    if not any(counts) or not categories:
        return []

    summaries = []
    for category_id, count in counts.items():
        category = categories.get(category_id)
        first = next((p for p in products if p["category_id"] == category_id), {})
        summaries.append({
            "id": category_id,
            "title": category.title if category is not None else first.get("category_title"),
            "description": category.description if category is not None else None,
            "photo": category.photo if category is not None else None,
            "product_count": count,
        })
    return summaries


def _feed_query(vendor_id, filters):
    query = VendorProduct.query.filter(
        VendorProduct.vendor_id == vendor_id,
        VendorProduct.is_available.is_(True),
        db.or_(VendorProduct.publish.is_(None), VendorProduct.publish.is_(True)),
    )
    if filters["search"] is not None:
        pattern = f"%{filters['search']}%"
        query = query.filter(db.or_(
            VendorProduct.name.ilike(pattern),
            VendorProduct.description.ilike(pattern),
        ))

    is_veg, is_nonveg = filters["is_veg"], filters["is_nonveg"]
    if is_veg is True and is_nonveg is not True:
        query = query.filter(VendorProduct.veg.is_(True))
    elif is_nonveg is True and is_veg is not True:
        query = query.filter(VendorProduct.nonveg.is_(True))
    if is_veg is False:
        query = query.filter(VendorProduct.veg.is_(False))
    if is_nonveg is False:
        query = query.filter(VendorProduct.nonveg.is_(False))
    return query.order_by(VendorProduct.name)


def _feed_categories(category_ids, restaurant_keys) -> dict:
    if not category_ids:
        return {}
    rows = VendorCategory.query.filter(
        VendorCategory.id.in_(category_ids),
        VendorCategory.restaurant_id.in_(restaurant_keys),
    ).all()
    if not rows:
        rows = VendorCategory.query.filter(VendorCategory.id.in_(category_ids)).all()
    return {c.id: c for c in rows}


def product_feed(vendor_id: str, filters: dict, now=None) -> dict:
    products = _feed_query(vendor_id, filters).all()
    vendor = db.session.get(Vendor, vendor_id)

    promo_keys = [vendor.id, vendor.title] if vendor else [vendor_id]
    promotions = active_promotions([k for k in promo_keys if k], now=now)

    category_ids = list(dict.fromkeys(p.category_id for p in products if p.category_id))
    restaurant_keys = [k for k in (vendor.title if vendor else None, vendor_id) if k]
    categories = _feed_categories(category_ids, restaurant_keys)

    transformed = []
    for product in products:
        data = transform_product(product, promotions, categories.get(product.category_id))
        data["vendorID"] = vendor_id
        transformed.append(data)

    if filters["offer_only"] is True:
        transformed = [p for p in transformed if _is_offer(p)]

    summaries = build_category_summaries(transformed, categories)
    return {
        "success": True,
        "data": {
            "filters": filters,
            "meta": {
                "total_products": len(transformed),
                "offer_products": sum(1 for p in transformed if p["has_active_promotion"]),
                "categories": len(summaries),
            },
            "categories": summaries,
            "products": transformed,
        },
    }


def product_detail(product_id: str):
    product = db.session.get(VendorProduct, product_id)
    if product is None:
        return None
    promotions = {}
    for promo in Promotion.query.filter(
        Promotion.product_id == product.id,
        Promotion.is_available.is_(True),
    ).all():
        promotions.setdefault(promo.product_id, []).append(promo)

    category = None
    if product.category_id:
        category = db.session.get(VendorCategory, product.category_id)
    return transform_product(product, promotions, category)
