"""Date manipulation utilities"""

from datetime import date


def add_years(from_date: date, years: int) -> date:
    """Same calendar day `years` later; Feb 29 falls back to Feb 28 in non-leap years"""
    try:
        return from_date.replace(year=from_date.year + years)
    except ValueError:
        return from_date.replace(year=from_date.year + years, day=28)
