from datetime import datetime
from zoneinfo import ZoneInfo

from flask import current_app, has_app_context

DEFAULT_TIMEZONE = "Asia/Kolkata"


def reference_timezone(name=None) -> ZoneInfo:
    if name is None and has_app_context():
        name = current_app.config.get("REFERENCE_TIMEZONE")
    return ZoneInfo(name or DEFAULT_TIMEZONE)


def reference_now(now=None, tz=None) -> datetime:
    """Current time in the marketplace's reference timezone.

    ``now`` may be naive (taken as UTC) or aware; it is converted, not replaced.
    """
    zone = tz if isinstance(tz, ZoneInfo) else reference_timezone(tz)
    if now is None:
        return datetime.now(zone)
    if now.tzinfo is None:
        now = now.replace(tzinfo=ZoneInfo("UTC"))
    return now.astimezone(zone)
