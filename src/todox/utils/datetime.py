"""Utilities for date handling."""

from datetime import date

DATE_FORMAT = "%Y-%m-%d"


def today() -> date:
    """Get the current local date."""
    return date.today()


def to_iso(value: date) -> str:
    """Format a date as YYYY-MM-DD."""
    return value.strftime(DATE_FORMAT)
