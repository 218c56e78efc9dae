"""
NEIS School Meal Client

A Python package for retrieving and parsing school meal menus published by
the NEIS open-data meal service.
"""

from .parser import (
    fetch_meal_data,
    parse_meal_xml,
    clean_dishes,
    markup_lines,
    format_korean_date,
)
from .webpage import compact_date, neis_meal_service_url, relay_url
from .model import MealRecord
from .exceptions import (
    MealLookupError,
    MealValidationError,
    MealDateError,
    MealFetchError,
    MealParseError,
)


__version__ = "0.1.0"

__all__ = [
    "fetch_meal_data",
    "parse_meal_xml",
    "clean_dishes",
    "markup_lines",
    "format_korean_date",
    "compact_date",
    "neis_meal_service_url",
    "relay_url",
    "MealRecord",
    "MealLookupError",
    "MealValidationError",
    "MealDateError",
    "MealFetchError",
    "MealParseError",
]
