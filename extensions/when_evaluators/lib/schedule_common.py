# SPDX-FileCopyrightText: 2025 Eric Löffler <eric.loeffler@opalia.systems>
# SPDX-License-Identifier: GPL-3.0-or-later

import json
import re
from datetime import datetime, timezone, tzinfo
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dateutil import parser as dt_parser

from lib_helpers.update_schedule import DateParseError, TimeZoneResolutionError

# two distinct fill-in dates; a field dateutil takes from them was missing from the input
_FILL_A = datetime(2000, 1, 1)
_FILL_B = datetime(2001, 2, 2)

_DATE_ORDERS = {
    "dmy": True,
    "mdy": False,
    "us": False,
}


def resolve_tz(tz_name: Optional[str]) -> tzinfo:
    if not tz_name or tz_name == "null":
        return timezone.utc

    try:
        return ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError, OSError) as e:
        raise TimeZoneResolutionError(f"Unknown time zone \"{tz_name}\"") from e


def parse_date_order(spec: str) -> bool:
    """Return True for day-first input (``dmy``), False for month-first (``mdy``)."""
    try:
        return _DATE_ORDERS[spec.strip().lower()]
    except KeyError:
        raise DateParseError(f"Unknown date order \"{spec}\", expected dmy or mdy") from None


def _parse_dt(dt_str: str, dayfirst: bool) -> datetime:
    # datetime.fromisoformat does not accept 'Z', so mapping to '+00:00' is needed
    try:
        return datetime.fromisoformat(re.sub(r'Z$', '+00:00', dt_str.strip()))
    except ValueError:
        pass

    try:
        dt = dt_parser.parse(dt_str, dayfirst=dayfirst, default=_FILL_A)
        check = dt_parser.parse(dt_str, dayfirst=dayfirst, default=_FILL_B)
    except (dt_parser.ParserError, OverflowError) as e:
        raise DateParseError(f"Cannot parse date/time \"{dt_str}\"") from e

    if dt.date() != check.date():
        raise DateParseError(f"Date/time \"{dt_str}\" needs a full year, month and day")
    return dt


def parse_dt_with_tz(dt_str: str, tz_name: Optional[str], dayfirst: bool = False) -> datetime:
    target_tz = resolve_tz(tz_name)
    dt = _parse_dt(dt_str, dayfirst)

    # if no offset is present, the wall clock belongs to target_tz
    if dt.tzinfo is None:
        return dt.replace(tzinfo=target_tz)

    # convert to desired time zone
    return dt.astimezone(target_tz)


def format_wakeup_message(seconds: float) -> str:
    return f"R output expires in {round(seconds)} seconds with wakeup"


def finalize_result(base_local: datetime, next_local: datetime) -> str:
    base_utc = base_local.astimezone(timezone.utc)
    next_utc = next_local.astimezone(timezone.utc)
    wakeup_s = (next_utc - base_utc).total_seconds()

    result = {
        "base_epoch_s": int(base_utc.timestamp()),
        "next_epoch_s": int(next_utc.timestamp()),
        "wakeup_s": round(wakeup_s),
        "message": format_wakeup_message(wakeup_s),
    }

    return json.dumps(result, ensure_ascii=False, separators=(",", ":"))
