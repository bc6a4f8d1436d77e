"""Helpers for dealing with timezone-aware dates."""
from __future__ import annotations

from datetime import date, datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


def get_timezone(tz_name: str) -> ZoneInfo:
    """Return ZoneInfo instance with graceful fallback to UTC."""

    try:
        return ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError):
        return ZoneInfo("UTC")


def get_today(tz: ZoneInfo) -> date:
    """Return today's date in the provided timezone."""

    return datetime.now(tz).date()


__all__ = ["get_timezone", "get_today"]
