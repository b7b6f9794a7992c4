"""Admin management of app users."""
import io
import logging
import re
from datetime import datetime, time, timedelta
from zoneinfo import ZoneInfo

from werkzeug.security import generate_password_hash

from app.services.clock import reference_now
from app.utils.coerce import coerce_boolean, decode_json_list
from models import db
from models.setting import Zone
from models.user import AppUser

logger = logging.getLogger(__name__)

FIREBASE_ID_PREFIX = "user_"
CREATED_AT_FORMAT = "%b %d, %Y %I:%M %p"
CSV_COLUMNS = ["Name", "Email", "Phone", "Zone", "Active", "Created At"]
ALL_RANGES = ("all_orders", "all_users")


class ValidationError(Exception):
    pass


def next_firebase_id() -> str:
    numbers = []
    for (firebase_id,) in db.session.query(AppUser.firebase_id).filter(
        AppUser.firebase_id.like(f"{FIREBASE_ID_PREFIX}%")
    ):
        match = re.match(r"user_(\d+)$", firebase_id or "")
        if match:
            numbers.append(int(match.group(1)))
    number = max(numbers, default=0) + 1
    while AppUser.query.filter_by(firebase_id=f"{FIREBASE_ID_PREFIX}{number}").first():
        number += 1
    return f"{FIREBASE_ID_PREFIX}{number}"


def create_user(data, now=None) -> AppUser:
    """``data`` is a validated CreateUserRequest. The caller commits."""
    if AppUser.query.filter_by(email=data.email).first():
        raise ValidationError("The email has already been taken.")

    user = AppUser(
        firebase_id=next_firebase_id(),
        first_name=data.firstName,
        last_name=data.lastName,
        email=data.email,
        password=generate_password_hash(data.password),
        country_code=data.countryCode,
        phone_number=data.phoneNumber,
        role=data.role or "customer",
        active=bool(coerce_boolean(data.active)),
        zone_id=data.zoneId,
        provider="email",
        app_identifier="web",
        wallet_amount=0,
        created_at=now or datetime.utcnow(),
    )
    db.session.add(user)
    return user


def _utc_naive(value: datetime) -> datetime:
    return value.astimezone(ZoneInfo("UTC")).replace(tzinfo=None)


def _start_of_day(value: datetime) -> datetime:
    return datetime.combine(value.date(), time.min, tzinfo=value.tzinfo)


def _end_of_day(value: datetime) -> datetime:
    return datetime.combine(value.date(), time.max, tzinfo=value.tzinfo)


def _parse_day(value, tz):
    try:
        return datetime.fromisoformat(str(value).strip()[:10]).replace(tzinfo=tz)
    except ValueError:
        raise ValidationError(f"Invalid date: {value}")


def created_window(date_range=None, date_from=None, date_to=None, now=None):
    """(start, end) in naive UTC for the created-at filter; None bounds are open."""
    local_now = reference_now(now)
    tz = local_now.tzinfo

    if date_range == "last_24_hours":
        start, end = local_now - timedelta(days=1), local_now
    elif date_range == "last_week":
        start, end = _start_of_day(local_now - timedelta(weeks=1)), _end_of_day(local_now)
    elif date_range == "last_month":
        start, end = _start_of_day(_minus_month(local_now)), _end_of_day(local_now)
    elif date_range in ALL_RANGES:
        return None, None
    elif date_from or date_to:
        start = _start_of_day(_parse_day(date_from, tz)) if date_from else None
        end = _end_of_day(_parse_day(date_to, tz)) if date_to else None
    else:
        start, end = _start_of_day(local_now), _end_of_day(local_now)

    return (
        _utc_naive(start) if start is not None else None,
        _utc_naive(end) if end is not None else None,
    )


def _minus_month(value: datetime) -> datetime:
    year, month = (value.year, value.month - 1) if value.month > 1 else (value.year - 1, 12)
    day = value.day
    while True:
        try:
            return value.replace(year=year, month=month, day=day)
        except ValueError:
            day -= 1


def filtered_users(filters: dict, now=None):
    query = AppUser.query
    role = filters.get("role", "customer")
    if role:
        query = query.filter(AppUser.role == role)

    start, end = created_window(filters.get("date_range"), filters.get("from"), filters.get("to"), now=now)
    if start is not None:
        query = query.filter(AppUser.created_at >= start)
    if end is not None:
        query = query.filter(AppUser.created_at <= end)

    if filters.get("active") not in (None, ""):
        query = query.filter(AppUser.active.is_(bool(coerce_boolean(filters["active"]))))

    zone_id = filters.get("zoneId")
    if zone_id:
        query = query.filter(db.or_(
            AppUser.zone_id == zone_id,
            AppUser.shipping_address.like(f'%"zoneId":"{zone_id}"%'),
            AppUser.shipping_address.like(f'%"zoneId": "{zone_id}"%'),
        ))

    search = (filters.get("search") or "").strip()
    if search:
        pattern = f"%{search}%"
        query = query.filter(db.or_(
            AppUser.first_name.ilike(pattern),
            AppUser.last_name.ilike(pattern),
            AppUser.email.ilike(pattern),
            AppUser.phone_number.ilike(pattern),
        ))
    return query.order_by(AppUser.id.desc())


def zone_of(user) -> str:
    """First address zone, else the zone stored on the user."""
    for address in decode_json_list(user.shipping_address):
        if isinstance(address, dict) and address.get("zoneId"):
            return str(address["zoneId"])
    return user.zone_id or ""


def format_created_at(value, tz=None) -> str:
    if value is None:
        return ""
    return reference_now(value, tz).strftime(CREATED_AT_FORMAT)


def format_user(user) -> dict:
    return {
        "id": str(user.firebase_id or user.id),
        "firstName": user.first_name,
        "lastName": user.last_name,
        "fullName": user.full_name,
        "email": user.email or "",
        "phoneNumber": user.phone_number or "",
        "zoneId": zone_of(user),
        "createdAt": format_created_at(user.created_at),
        "active": 1 if user.active else 0,
        "profilePictureURL": user.profile_picture_url,
    }


def list_users(filters: dict, page=1, limit=10, now=None) -> dict:
    query = filtered_users(filters, now=now)
    total = query.count()
    rows = query.offset((page - 1) * limit).limit(limit).all()
    return {
        "data": [format_user(u) for u in rows],
        "meta": {
            "page": page,
            "limit": limit,
            "total": total,
            "has_more": page * limit < total,
        },
    }


def find_user(identifier):
    """Look a user up by firebase id, or by numeric id."""
    condition = AppUser.firebase_id == identifier
    if str(identifier).isdigit():
        condition = db.or_(condition, AppUser.id == int(identifier))
    return AppUser.query.filter(condition).first()


def delete_user(identifier) -> bool:
    user = find_user(identifier)
    if user is None:
        return False
    db.session.delete(user)
    return True


def set_active(identifier, active) -> bool:
    user = find_user(identifier)
    if user is None:
        return False
    user.active = bool(coerce_boolean(active))
    return True


def user_details(identifier):
    user = find_user(identifier)
    if user is None:
        return None
    return {
        "id": str(user.firebase_id or user.id),
        "firstName": user.first_name,
        "lastName": user.last_name,
        "fullName": user.full_name,
        "role": user.role,
    }


def export_users_csv(filters: dict, now=None) -> str:
    import pandas as pd  # Imported lazily, only the export needs it

    users = filtered_users(filters, now=now).all()
    zone_ids = {zone_of(u) for u in users} - {""}
    zones = {}
    if zone_ids:
        zones = {z.id: z.name for z in Zone.query.filter(Zone.id.in_(zone_ids)).all()}

    rows = [
        [
            user.full_name,
            user.email or "",
            user.phone_number or "",
            zones.get(zone_of(user), "Not Assigned"),
            "Active" if user.active else "Inactive",
            format_created_at(user.created_at),
        ]
        for user in users
    ]
    buffer = io.StringIO()
    pd.DataFrame(rows, columns=CSV_COLUMNS).to_csv(buffer, index=False)
    return buffer.getvalue()
