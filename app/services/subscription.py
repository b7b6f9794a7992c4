import json
import logging
from datetime import datetime, timezone

from models import db
from models.vendor import SubscriptionHistory

logger = logging.getLogger(__name__)


def _parse_expiry(value):
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value).strip().replace("Z", "+00:00"))


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def is_subscription_valid(plan, total_orders, expiry_date, now=None) -> bool:
    """Whether a vendor's paid plan still allows orders.

    No plan means the free/commission model and is always valid; an order
    limit of -1 is unlimited. An unparsable expiry counts as not expired.
    """
    if not plan:
        return True
    if total_orders is None or total_orders == "":
        total_orders = "0"
    if str(total_orders).strip() == "-1":
        return True
    try:
        remaining = int(float(total_orders))
    except (TypeError, ValueError, OverflowError):
        remaining = 0
    if remaining == -1:
        return True

    not_expired = True
    if expiry_date is not None:
        try:
            expiry = _parse_expiry(expiry_date)
        except (TypeError, ValueError) as e:
            logger.warning("Unparsable subscription expiry %r: %s", expiry_date, e)
        else:
            current = now or datetime.now(timezone.utc)
            not_expired = _as_utc(expiry) >= _as_utc(current)

    return not_expired and remaining > 0


def _decode_plan(raw):
    if not raw:
        return None
    try:
        plan = json.loads(raw)
    except ValueError:
        logger.warning("Invalid subscription plan JSON: %s", raw)
        return None
    return plan if isinstance(plan, dict) and plan else None


def _isoformat(value):
    return value.isoformat() if isinstance(value, datetime) else value


def latest_subscriptions(vendor_ids, now=None) -> dict:
    """Map vendor id to its current subscription, fetched in one query.

    Only rows expiring in the future (or never) count; the one with the
    latest expiry wins and a NULL expiry outranks any date.
    """
    vendor_ids = [vid for vid in vendor_ids if vid]
    if not vendor_ids:
        return {}
    current = now or datetime.utcnow()
    if current.tzinfo is not None:
        current = current.astimezone(timezone.utc).replace(tzinfo=None)

    rows = (
        SubscriptionHistory.query
        .filter(SubscriptionHistory.user_id.in_(vendor_ids))
        .filter(db.or_(
            SubscriptionHistory.expiry_date >= current,
            SubscriptionHistory.expiry_date.is_(None),
        ))
        .all()
    )

    latest = {}
    for row in rows:
        chosen = latest.get(row.user_id)
        if chosen is None or _outranks(row, chosen):
            latest[row.user_id] = row

    result = {}
    for vendor_id, row in latest.items():
        plan = _decode_plan(row.subscription_plan)
        if not plan:
            continue
        expiry = _isoformat(row.expiry_date)
        result[vendor_id] = {
            "plan": {
                "id": plan.get("id"),
                "expiryDay": plan.get("expiryDay"),
                "expiryDate": expiry,
            },
            "totalOrders": plan.get("orderLimit"),
            "expiryDate": expiry,
        }
    return result


def _outranks(candidate, current) -> bool:
    if current.expiry_date is None:
        return False
    if candidate.expiry_date is None:
        return True
    return candidate.expiry_date > current.expiry_date
