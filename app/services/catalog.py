"""Vendor categories and menu item banners."""
from models import db
from models.banner import MenuItemBanner
from models.vendor import VendorCategory

BANNER_POSITIONS = ("top", "middle", "bottom")


def home_categories() -> dict:
    categories = (
        VendorCategory.query
        .filter(VendorCategory.show_in_homepage.is_(True), VendorCategory.publish.is_(True))
        .order_by(VendorCategory.title.asc())
        .all()
    )
    return {"success": True, "data": [c.to_dict() for c in categories]}


def all_categories() -> dict:
    categories = (
        VendorCategory.query
        .filter(VendorCategory.publish.is_(True))
        .order_by(VendorCategory.title.asc())
        .all()
    )
    data = [c.to_dict() for c in categories]
    return {"success": True, "data": data, "count": len(data)}


def _zone_filter(zone_id):
    """Banners of the zone plus the ones not bound to any zone."""
    return db.or_(
        MenuItemBanner.zone_id == zone_id,
        MenuItemBanner.zone_id.is_(None),
        MenuItemBanner.zone_id == "",
    )


def banners(position=None, zone_id=None, with_count=False) -> dict:
    query = MenuItemBanner.query.filter(MenuItemBanner.is_publish.is_(True))
    if position:
        query = query.filter(MenuItemBanner.position == position)
    if zone_id:
        query = query.filter(_zone_filter(zone_id))
    data = [b.to_dict() for b in query.order_by(MenuItemBanner.set_order.asc()).all()]
    response = {"success": True, "data": data}
    if with_count:
        response["count"] = len(data)
    return response


def banner_by_id(banner_id):
    banner = db.session.get(MenuItemBanner, banner_id)
    return banner.to_dict() if banner else None
