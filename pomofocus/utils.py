"""
Small formatting helpers shared by the domain, services and host.
"""

import datetime
from typing import Optional
from zoneinfo import ZoneInfo

# Month abbreviations are fixed so date keys never depend on the OS locale
MONTH_ABBREVIATIONS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun",
                       "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

DEFAULT_REPORTING_TIMEZONE = "Europe/Istanbul"


def format_duration(seconds: int) -> str:
    """Format seconds as HH:MM:SS (hours are not capped at 24)"""
    seconds = max(0, int(seconds))
    hours, remainder = divmod(seconds, 3600)
    minutes, seconds = divmod(remainder, 60)
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"


def format_timer_display(seconds: int) -> str:
    """Format seconds as MM:SS for the countdown"""
    minutes, seconds = divmod(max(0, int(seconds)), 60)
    return f"{minutes:02d}:{seconds:02d}"


def parse_duration(text: str) -> int:
    """
    Parse an HH:MM:SS string into seconds.

    Raises:
        ValueError: if the text is not three colon-separated integers
    """
    parts = text.strip().split(":")
    if len(parts) != 3:
        raise ValueError(f"Expected HH:MM:SS, got {text!r}")
    hours, minutes, seconds = (int(p) for p in parts)
    if hours < 0 or not 0 <= minutes < 60 or not 0 <= seconds < 60:
        raise ValueError(f"Duration out of range: {text!r}")
    return hours * 3600 + minutes * 60 + seconds


def day_key(moment: Optional[datetime.datetime] = None,
            timezone: str = DEFAULT_REPORTING_TIMEZONE) -> str:
    """
    Calendar-day key in the reporting timezone, e.g. '18Oct26'.

    Naive datetimes are taken as local time.
    """
    tz = ZoneInfo(timezone)
    if moment is None:
        moment = datetime.datetime.now(tz)
    else:
        moment = moment.astimezone(tz)
    month = MONTH_ABBREVIATIONS[moment.month - 1]
    return f"{moment.day:02d}{month}{moment.year % 100:02d}"
