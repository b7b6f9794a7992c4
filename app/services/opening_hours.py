"""Real-time open/closed status from a manual override and a weekly schedule."""
import json
import logging
import re
from datetime import datetime

from app.services.clock import reference_now

logger = logging.getLogger(__name__)

_HH_MM = re.compile(r"^(\d{1,2}):(\d{2})$")
_TIME_FORMATS = ("%H:%M", "%I:%M %p", "%I:%M%p", "%H:%M:%S", "%I:%M:%S %p")
_CLOSED_VALUES = ("false", "0")


def normalize_manual_flag(raw) -> bool:
    """Return False only when the vendor was manually closed.

    NULL means "not manually closed"; false, 0, "0" and "false" (any case,
    surrounding blanks ignored) mean closed; anything else means open.
    """
    if raw is None:
        return True
    if raw is False:
        return False
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        return raw != 0
    if isinstance(raw, str):
        return raw.strip().lower() not in _CLOSED_VALUES
    return True


def parse_time_to_minutes(value):
    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None

    match = _HH_MM.match(text)
    if match:
        hours, minutes = int(match.group(1)), int(match.group(2))
        if 0 <= hours <= 23 and 0 <= minutes <= 59:
            return hours * 60 + minutes

    for fmt in _TIME_FORMATS:
        try:
            parsed = datetime.strptime(text.upper(), fmt)
        except ValueError:
            continue
        return parsed.hour * 60 + parsed.minute
    return None


def decode_working_hours(raw):
    if not raw:
        return None
    if isinstance(raw, list):
        return raw
    if isinstance(raw, str):
        try:
            decoded = json.loads(raw)
        except ValueError:
            return None
        if isinstance(decoded, list):
            return decoded
    return None


def _slot_bounds(slot):
    if not isinstance(slot, dict):
        return "", ""
    start = slot.get("from")
    end = slot.get("to")
    return (
        str(start).strip() if start is not None else "",
        str(end).strip() if end is not None else "",
    )


def _timeslots(day_schedule):
    if not isinstance(day_schedule, dict):
        return []
    slots = day_schedule.get("timeslot")
    return slots if isinstance(slots, list) else []


def has_valid_working_hours(hours) -> bool:
    """True when at least one slot on any day has both ends filled in."""
    if not hours or not isinstance(hours, list):
        return False
    for day_schedule in hours:
        for slot in _timeslots(day_schedule):
            start, end = _slot_bounds(slot)
            if start and end:
                return True
    return False


def _slot_contains(current, start, end) -> bool:
    if end >= start:
        return start <= current <= end
    # crosses midnight, e.g. 22:00 to 02:00
    return current >= start or current <= end


def is_restaurant_open(manual_flag, working_hours, now=None, tz=None) -> bool:
    if not manual_flag:
        return False
    if not has_valid_working_hours(working_hours):
        return False

    local_now = reference_now(now, tz)
    today = local_now.strftime("%A")
    current = local_now.hour * 60 + local_now.minute

    for day_schedule in working_hours:
        if not isinstance(day_schedule, dict):
            continue
        day_name = day_schedule.get("day")
        if day_name is None or str(day_name).strip() != today:
            continue
        for slot in _timeslots(day_schedule):
            start_raw, end_raw = _slot_bounds(slot)
            if not start_raw or not end_raw:
                continue
            start = parse_time_to_minutes(start_raw)
            end = parse_time_to_minutes(end_raw)
            if start is None or end is None:
                logger.warning(
                    "Invalid time format in timeslot day=%s from=%s to=%s",
                    day_name, start_raw, end_raw,
                )
                continue
            if _slot_contains(current, start, end):
                return True
    return False


def vendor_is_open(vendor, now=None, tz=None) -> bool:
    return is_restaurant_open(vendor.manual_open_flag, vendor.working_hours_list, now=now, tz=tz)
