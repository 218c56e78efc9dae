import logging
import re
from datetime import date
from typing import List, Optional

import requests
from bs4 import BeautifulSoup
from lxml import etree

from .exceptions import MealDateError, MealFetchError, MealParseError
from .model import MealRecord
from .webpage import (
    NEIS_MEAL_SERVICE_URL,
    NEIS_OFFICE_CODE,
    NEIS_RELAY_URL,
    NEIS_SCHOOL_CODE,
    neis_meal_service_url,
    relay_url,
)

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 15
DEFAULT_MEAL_NAME = "급식"
WEEKDAY_NAMES = ['일', '월', '화', '수', '목', '금', '토']

# Reusable HTTP session; the relay forwards the upstream body verbatim
_HTTP_SESSION = None


def _get_http_session() -> requests.Session:
    global _HTTP_SESSION
    if _HTTP_SESSION is None:
        session = requests.Session()
        session.headers.update({
            'User-Agent': 'Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/127.0.0.0 Safari/537.36',
            'Accept': 'application/xml,text/xml;q=0.9,*/*;q=0.8',
            'Accept-Language': 'ko-KR,ko;q=0.9,en-US;q=0.8',
            'Connection': 'keep-alive',
        })
        _HTTP_SESSION = session
    return _HTTP_SESSION


# =============================================================================
# MEAL SERVICE RETRIEVAL
# =============================================================================

def fetch_meal_data(
    ymd: str,
    base_url: str = NEIS_MEAL_SERVICE_URL,
    office_code: str = NEIS_OFFICE_CODE,
    school_code: str = NEIS_SCHOOL_CODE,
    relay: str = NEIS_RELAY_URL,
    timeout: float = DEFAULT_TIMEOUT,
) -> str:
    """
    Retrieve the raw meal service XML for one day through the relay.

    Parameters:
        ymd (str): Date in YYYYMMDD form.
        base_url, office_code, school_code: Meal service endpoint and codes.
        relay (str): Relay prefix the percent-encoded target URL is appended to.
        timeout (float): Network timeout in seconds.

    Returns:
        str: The response body, unparsed.

    Raises:
        MealFetchError: On a transport failure or a non-success status.
    """
    target = neis_meal_service_url(ymd, base_url=base_url, office_code=office_code, school_code=school_code)
    url = relay_url(target, relay=relay)
    logger.debug(f"Fetching meal data: {target}")

    session = _get_http_session()
    try:
        response = session.get(url, timeout=timeout, allow_redirects=True)
    except requests.RequestException as e:
        raise MealFetchError(f"Failed to fetch URL: {e}", details={"url": target}) from e

    if not response.ok:
        raise MealFetchError(
            f"HTTP error! status: {response.status_code}",
            details={"url": target, "status_code": response.status_code},
        )

    # The upstream document is UTF-8; the relay does not always say so
    response.encoding = 'utf-8'
    return response.text


# =============================================================================
# XML PARSER
# =============================================================================

def parse_meal_xml(xml_text: str) -> Optional[List[MealRecord]]:
    """
    Parse a meal service XML document into meal records.

    Returns None when the document holds no ``row`` elements, which is how
    the service reports a day without meals (weekends, holidays).

    Raises:
        MealParseError: If the document is not well-formed XML.
    """
    if not xml_text or not xml_text.strip():
        raise MealParseError("XML 파싱 에러: empty document")

    parser = etree.XMLParser(resolve_entities=False, no_network=True)
    try:
        root = etree.fromstring(xml_text.strip().encode('utf-8'), parser)
    except (etree.XMLSyntaxError, ValueError) as e:
        raise MealParseError(f"XML 파싱 에러: {e}") from e

    rows = list(root.iter('row'))
    if not rows:
        result_code = _element_text(root, 'CODE')
        if result_code:
            logger.info(f"No meal rows in response (result code {result_code})")
        return None

    return [_extract_meal_record(row) for row in rows]


def _extract_meal_record(row: etree._Element) -> MealRecord:
    """Build a record from one row, defaulting absent fields"""
    return MealRecord(
        meal_name=_element_text(row, 'MMEAL_SC_NM') or DEFAULT_MEAL_NAME,
        dishes=_element_text(row, 'DDISH_NM'),
        calories=_element_text(row, 'CAL_INFO'),
        nutrition=_element_text(row, 'NTR_INFO'),
        origin=_element_text(row, 'ORPLC_INFO'),
    )


def _element_text(parent: etree._Element, tag: str) -> str:
    """Full text of the first descendant with the given tag, or ''"""
    element = parent.find(f'.//{tag}')
    if element is None:
        return ''
    return ''.join(element.itertext())


# =============================================================================
# TEXT CLEANUP
# =============================================================================

def _markup_to_text(text: str) -> str:
    """
    Turn <br> variants into newlines and drop every other tag.

    HTML entities are decoded ("&amp;" becomes "&"); callers rendering
    HTML escape the text again.
    """
    soup = BeautifulSoup(text, 'html.parser')
    for br in soup.find_all('br'):
        br.replace_with('\n')
    return soup.get_text()


def _split_lines(text: str) -> List[str]:
    return [line.strip() for line in text.split('\n') if line.strip()]


def clean_dishes(dishes: str) -> List[str]:
    """
    Clean a raw dish list into display items.

    Line-break markup separates dishes; other markup is dropped and
    parenthesized allergen codes are removed. Order is preserved.

    >>> clean_dishes("백미밥<br/>김치(돈육)<br/>된장국")
    ['백미밥', '김치', '된장국']
    """
    if not dishes:
        return []

    text = _markup_to_text(dishes)
    # Allergen codes, e.g. "(1.5.6.)"
    text = re.sub(r'\([^)]*\)', '', text)
    return _split_lines(text)


def markup_lines(text: str) -> List[str]:
    """Split nutrition/origin text on line-break markup, keeping parentheses"""
    if not text:
        return []
    return _split_lines(_markup_to_text(text))


# =============================================================================
# DATE FORMATTING
# =============================================================================

def format_korean_date(value) -> str:
    """
    Format a date as a Korean long-form heading.

    >>> format_korean_date("2024-03-15")
    '2024년 3월 15일 (금)'
    """
    if isinstance(value, date):
        dt = value
    else:
        try:
            dt = date.fromisoformat(str(value).strip())
        except ValueError:
            raise MealDateError(f"Invalid date: {value!r}. Use YYYY-MM-DD", details={"date": value})

    # date.weekday() counts from Monday; the table starts on Sunday
    day_of_week = WEEKDAY_NAMES[(dt.weekday() + 1) % 7]
    return f"{dt.year}년 {dt.month}월 {dt.day}일 ({day_of_week})"
