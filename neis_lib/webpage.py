from datetime import date
from typing import Union
from urllib.parse import quote, urlencode

from .exceptions import MealDateError

NEIS_MEAL_SERVICE_URL = "https://open.neis.go.kr/hub/mealServiceDietInfo"
NEIS_OFFICE_CODE = "J10"
NEIS_SCHOOL_CODE = "7530079"
NEIS_RELAY_URL = "https://api.allorigins.win/raw?url="


def compact_date(value: Union[str, date]) -> str:
    """
    Convert a calendar date into the YYYYMMDD form the meal service expects.

    Parameters:
        value (str | date): An ISO date string ("2024-03-15") or a date object.

    Returns:
        str: The compact date, e.g. "20240315".
    """
    if isinstance(value, date):
        return value.strftime('%Y%m%d')

    try:
        parsed = date.fromisoformat(value.strip())
    except (AttributeError, ValueError):
        raise MealDateError(f"Invalid date: {value!r}. Use YYYY-MM-DD", details={"date": value})
    return parsed.strftime('%Y%m%d')


def neis_meal_service_url(
    ymd: str,
    base_url: str = NEIS_MEAL_SERVICE_URL,
    office_code: str = NEIS_OFFICE_CODE,
    school_code: str = NEIS_SCHOOL_CODE,
) -> str:
    """
    Generate the NEIS meal service URL for a given compact date.

    Parameters:
        ymd (str): Date in YYYYMMDD form.
        base_url (str): Meal service endpoint.
        office_code (str): Education office code (ATPT_OFCDC_SC_CODE).
        school_code (str): School code (SD_SCHUL_CODE).

    Returns:
        str: The full URL.
    """
    params = {
        "ATPT_OFCDC_SC_CODE": office_code,
        "SD_SCHUL_CODE": school_code,
        "MLSV_YMD": ymd,
    }
    return f"{base_url}?{urlencode(params)}"


def relay_url(target_url: str, relay: str = NEIS_RELAY_URL) -> str:
    """Wrap a URL in the pass-through relay; the target is percent-encoded."""
    return f"{relay}{quote(target_url, safe='')}"
