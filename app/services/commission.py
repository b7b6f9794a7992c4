"""Admin commission for restaurant orders.

Legacy orders may carry a stored ``adminCommission`` that is either a rate
or an already computed amount; ``resolve_commission`` keeps the historical
heuristic for telling them apart in one place.
"""
import json
import logging
import math

from app.utils.coerce import coerce_boolean, is_numeric, to_float
from app.utils.db import transactional
from models import db
from models.order import RestaurantOrder
from models.setting import Setting
from models.vendor import Vendor

logger = logging.getLogger(__name__)

COMPLETED_STATUS = "Order Completed"
AMOUNT_FIELDS = ("ToPay", "toPayAmount", "grandTotal", "total", "amount", "totalAmount")
CHARGE_FIELDS = ("total", "grandTotal", "toPayAmount", "amount", "totalAmount", "ToPay")
RATE_RANGE = (10, 30)
PLAUSIBLE_SHARE = (1, 50)


def _decode(raw):
    if not isinstance(raw, str):
        return raw
    try:
        return json.loads(raw)
    except ValueError:
        return None


def order_amount(order: dict) -> float:
    for field in AMOUNT_FIELDS:
        value = order.get(field)
        if value is None or value == "" or value == "null":
            continue
        if is_numeric(value):
            return float(value)
        decoded = _decode(value)
        if is_numeric(decoded):
            return float(decoded)

    charges = _decode(order.get("calculatedCharges")) if order.get("calculatedCharges") else None
    if isinstance(charges, dict):
        for field in CHARGE_FIELDS:
            if is_numeric(charges.get(field)):
                return float(charges[field])

    products = _decode(order.get("products")) if order.get("products") else None
    if isinstance(products, dict) and is_numeric(products.get("total")):
        return float(products["total"])
    return 0.0


def stored_commission(order: dict) -> float:
    value = order.get("adminCommission")
    if value in (None, "", "null", "0", 0):
        return 0.0
    return to_float(value)


def _settings_dict(raw):
    if not raw or raw == "null":
        return None
    decoded = _decode(raw) if isinstance(raw, str) else raw
    return decoded if isinstance(decoded, dict) else None


def select_commission_settings(vendor_json, global_json):
    """Vendor settings win whenever they declare ``isEnabled``, even as false."""
    vendor_settings = _settings_dict(vendor_json)
    if vendor_settings is not None and "isEnabled" in vendor_settings:
        return vendor_settings
    return _settings_dict(global_json)


def calculate_from_settings(amount: float, settings) -> float:
    if amount <= 0 or not settings:
        return 0.0
    if coerce_boolean(settings.get("isEnabled")) is not True:
        return 0.0
    rate = to_float(settings.get("fix_commission"))
    if settings.get("commissionType", "Percent") == "Fixed":
        return rate
    return amount * rate / 100


def resolve_commission(order: dict, vendor_settings_json=None, global_settings_json=None) -> float:
    amount = order_amount(order)
    stored = stored_commission(order)
    if amount <= 0:
        return stored

    low, high = RATE_RANGE
    if stored > 0 and low <= stored <= high and stored == math.floor(stored):
        # a whole number in the usual rate band is a percentage, not an amount
        return amount * stored / 100

    if stored > 0:
        share = stored / amount * 100
        if PLAUSIBLE_SHARE[0] <= share <= PLAUSIBLE_SHARE[1]:
            return stored

    settings = select_commission_settings(vendor_settings_json, global_settings_json)
    return calculate_from_settings(amount, settings)


def _global_settings_json():
    record = Setting.find("AdminCommission")
    return record.fields if record else None


def _vendor_settings_json(vendor_id):
    if not vendor_id or vendor_id == "null":
        return None
    vendor = db.session.get(Vendor, vendor_id)
    return vendor.admin_commission if vendor else None


def _settings_for(vendor_id, global_json):
    return select_commission_settings(_vendor_settings_json(vendor_id), global_json)


def total_admin_commission() -> float:
    global_json = _global_settings_json()
    total = 0.0
    orders = RestaurantOrder.query.filter_by(status=COMPLETED_STATUS).all()
    for order in orders:
        total += resolve_commission(
            order.to_legacy_dict(), _vendor_settings_json(order.vendor_id), global_json
        )
    return round(total, 2)


def _recalculate(order, global_json):
    settings = _settings_for(order.vendor_id, global_json)
    commission = calculate_from_settings(order_amount(order.to_legacy_dict()), settings)
    order.admin_commission = str(round(commission, 2))
    order.admin_commission_type = (settings or {}).get("commissionType", "Percent")
    return commission


def update_order_commission(order_id):
    """Recompute and persist one order's commission; None when the order is unknown."""
    order = db.session.get(RestaurantOrder, order_id)
    if order is None:
        return None
    with transactional("Failed to update order commission"):
        commission = _recalculate(order, _global_settings_json())
    return commission


def recalculate_all_commissions(limit=None) -> int:
    query = RestaurantOrder.query.filter_by(status=COMPLETED_STATUS).order_by(RestaurantOrder.id)
    if limit:
        query = query.limit(limit)
    global_json = _global_settings_json()
    updated = 0
    with transactional("Failed to recalculate commissions"):
        for order in query.all():
            _recalculate(order, global_json)
            updated += 1
    logger.info("Recalculated commission for %d completed orders", updated)
    return updated
