"""DataTables listings for restaurant payouts, driver payouts and wallet transactions."""
import logging
from dataclasses import dataclass

from app.services.users import find_user
from app.utils.coerce import is_numeric
from models import db
from models.vendor import Vendor
from models.wallet import DriverPayout, Payout, WalletTransaction

logger = logging.getLogger(__name__)

SUCCESS_STATUS = "Success"
UNKNOWN_NAME = "Unknown"


@dataclass
class TableParams:
    draw: int = 0
    start: int = 0
    length: int = 10
    search: str = ""
    order_column: int = 0
    order_dir: str = "desc"

    @classmethod
    def from_args(cls, args) -> "TableParams":
        def as_int(name, default):
            try:
                return int(args.get(name, default))
            except (TypeError, ValueError):
                return default

        return cls(
            draw=as_int("draw", 0),
            start=max(as_int("start", 0), 0),
            length=as_int("length", 10),
            search=(args.get("search[value]") or "").strip().lower(),
            order_column=as_int("order[0][column]", 0),
            order_dir=(args.get("order[0][dir]") or "desc").lower(),
        )


def format_table_date(value) -> str:
    """``Mon Jan 05 2025 3:04:05 PM``"""
    if value is None:
        return ""
    hour = value.hour % 12 or 12
    return f"{value:%a %b %d %Y} {hour}:{value:%M:%S %p}"


def _sort_value(record, field, raw_dates):
    if field == "amount":
        amount = record.get("amount")
        return float(amount) if is_numeric(amount) else 0.0
    if field == "date":
        moment = raw_dates.get(record["id"])
        return moment.timestamp() if moment else 0
    return str(record.get(field) or "").lower()


def build_table(records, raw_dates, params: TableParams, orderable, default_field, searchable) -> dict:
    if params.search:
        records = [
            r for r in records
            if any(params.search in str(r.get(f) or "").lower() for f in searchable)
        ]

    field = orderable[params.order_column] if 0 <= params.order_column < len(orderable) else default_field
    if field:
        records = sorted(
            records,
            key=lambda r: _sort_value(r, field, raw_dates),
            reverse=params.order_dir != "asc",
        )

    total = len(records)
    page = records[params.start:] if params.length < 0 else records[params.start:params.start + params.length]
    return {
        "draw": params.draw,
        "recordsTotal": total,
        "recordsFiltered": total,
        "data": page,
    }


def _vendor_title(vendor_id, cache):
    if vendor_id not in cache:
        vendor = db.session.get(Vendor, vendor_id) if vendor_id else None
        cache[vendor_id] = vendor.title if vendor else UNKNOWN_NAME
    return cache[vendor_id]


def _user_name(user_id, cache):
    if user_id not in cache:
        user = find_user(user_id) if user_id else None
        cache[user_id] = user.full_name if user else UNKNOWN_NAME
    return cache[user_id]


def restaurant_payouts(params: TableParams, vendor_id=None) -> dict:
    query = Payout.query.filter(Payout.payment_status == SUCCESS_STATUS)
    if vendor_id:
        query = query.filter(Payout.vendor_id == vendor_id)
        orderable = ["", "amount", "date", "note", "adminNote"]
    else:
        orderable = ["", "restaurantName", "amount", "date", "note", "adminNote"]

    names, records, raw_dates = {}, [], {}
    for payout in query.order_by(Payout.paid_date.desc()).all():
        record = payout.to_dict()
        record["restaurantName"] = _vendor_title(payout.vendor_id, names)
        record["formattedDate"] = format_table_date(payout.paid_date)
        raw_dates[payout.id] = payout.paid_date
        records.append(record)

    return build_table(
        records, raw_dates, params, orderable, "date",
        searchable=("restaurantName", "amount", "formattedDate", "note", "adminNote"),
    )


def driver_payouts(params: TableParams, driver_id=None) -> dict:
    query = DriverPayout.query.filter(DriverPayout.payment_status == SUCCESS_STATUS)
    if driver_id:
        query = query.filter(DriverPayout.driver_id == driver_id)
        orderable = ["", "amount", "date", "note", "adminNote"]
    else:
        orderable = ["", "driverName", "amount", "date", "note", "adminNote"]

    names, records, raw_dates = {}, [], {}
    for payout in query.order_by(DriverPayout.paid_date.desc()).all():
        record = payout.to_dict()
        record["driverName"] = _user_name(payout.driver_id, names)
        record["formattedDate"] = format_table_date(payout.paid_date)
        raw_dates[payout.id] = payout.paid_date
        records.append(record)

    return build_table(
        records, raw_dates, params, orderable, "date",
        searchable=("driverName", "amount", "formattedDate", "note", "adminNote"),
    )


def wallet_transactions(params: TableParams, user_id=None) -> dict:
    query = WalletTransaction.query
    if user_id:
        query = query.filter(WalletTransaction.user_id == user_id)
        orderable = ["", "amount", "date", "note"]
    else:
        orderable = ["", "userName", "amount", "date", "note"]

    names, records, raw_dates = {}, [], {}
    for transaction in query.order_by(WalletTransaction.date.desc()).all():
        record = transaction.to_dict()
        record["userName"] = _user_name(transaction.user_id, names)
        record["userType"] = transaction.transaction_user or "user"
        record["formattedDate"] = format_table_date(transaction.date)
        raw_dates[transaction.id] = transaction.date
        records.append(record)

    return build_table(
        records, raw_dates, params, orderable, "date",
        searchable=("userName", "amount", "formattedDate", "note"),
    )
