"""Utility helpers for famdocs."""

from .datetime import ensure_utc, parse_iso_datetime, utc_now

__all__ = ["ensure_utc", "parse_iso_datetime", "utc_now"]
