"""
Tests for meal service retrieval, XML parsing and text cleanup.
"""

from datetime import date
from unittest.mock import Mock

import pytest
import requests

from conftest import make_response
from neis_lib.exceptions import MealDateError, MealFetchError, MealParseError
from neis_lib.model import MealRecord
from neis_lib.parser import (
    clean_dishes,
    fetch_meal_data,
    format_korean_date,
    markup_lines,
    parse_meal_xml,
)


# =============================================================================
# RETRIEVAL
# =============================================================================


def test_fetch_meal_data_returns_body_unparsed(http_session, meal_xml):
    body = fetch_meal_data("20240315")

    assert body == meal_xml
    url = http_session.get.call_args.args[0]
    assert url.startswith("https://api.allorigins.win/raw?url=")
    assert "MLSV_YMD%3D20240315" in url


def test_fetch_meal_data_passes_timeout(http_session):
    fetch_meal_data("20240315", timeout=3)

    assert http_session.get.call_args.kwargs["timeout"] == 3


def test_fetch_meal_data_uses_configured_codes(http_session):
    fetch_meal_data("20240315", office_code="B10", school_code="1234567", relay="https://relay.test/?u=")

    url = http_session.get.call_args.args[0]
    assert url.startswith("https://relay.test/?u=")
    assert "ATPT_OFCDC_SC_CODE%3DB10" in url
    assert "SD_SCHUL_CODE%3D1234567" in url


def test_fetch_meal_data_raises_on_http_error(http_session):
    http_session.get.return_value = make_response("oops", status_code=500)

    with pytest.raises(MealFetchError) as exc_info:
        fetch_meal_data("20240315")

    assert "500" in str(exc_info.value)
    assert exc_info.value.details["status_code"] == 500
    assert exc_info.value.to_dict()["code"] == "NETWORK_ERROR"


def test_fetch_meal_data_raises_on_transport_failure(http_session):
    http_session.get.side_effect = requests.ConnectionError("connection refused")

    with pytest.raises(MealFetchError):
        fetch_meal_data("20240315")


# =============================================================================
# XML PARSER
# =============================================================================


def test_parse_meal_xml_extracts_rows_in_order(meal_xml):
    records = parse_meal_xml(meal_xml)

    assert [r.meal_name for r in records] == ["중식", "석식"]
    lunch = records[0]
    assert lunch.dishes == "백미밥<br/>김치(돈육)<br/>된장국 (5.6.)"
    assert lunch.calories == "812.3 Kcal"
    assert lunch.nutrition == "탄수화물(g) : 120.5<br/>단백질(g) : 30.1"
    assert lunch.origin == "쌀 : 국내산<br/>김치류 : 국내산"


def test_parse_meal_xml_defaults_missing_fields(meal_xml):
    dinner = parse_meal_xml(meal_xml)[1]

    assert dinner.nutrition == ""
    assert dinner.origin == ""


def test_parse_meal_xml_row_with_only_meal_name():
    records = parse_meal_xml("<root><row><MMEAL_SC_NM>중식</MMEAL_SC_NM></row></root>")

    assert records == [MealRecord(meal_name="중식", dishes="", calories="", nutrition="", origin="")]


def test_parse_meal_xml_row_without_fields():
    records = parse_meal_xml("<root><row/><row><MLSV_YMD>20240315</MLSV_YMD></row></root>")

    assert records == [
        MealRecord(meal_name="급식", dishes="", calories="", nutrition="", origin=""),
        MealRecord(meal_name="급식", dishes="", calories="", nutrition="", origin=""),
    ]


def test_clean_dishes_decodes_entities():
    assert clean_dishes("떡&amp;김밥<br/>우유") == ["떡&김밥", "우유"]


def test_parse_meal_xml_defaults_meal_name():
    records = parse_meal_xml("<root><row><DDISH_NM>밥</DDISH_NM></row><row><MMEAL_SC_NM></MMEAL_SC_NM></row></root>")

    assert [r.meal_name for r in records] == ["급식", "급식"]


def test_parse_meal_xml_returns_none_without_rows(no_data_xml):
    assert parse_meal_xml(no_data_xml) is None


@pytest.mark.parametrize("text", ["", "   ", "<row><MMEAL_SC_NM>중식</row>", "not xml at all", "<a></b>"])
def test_parse_meal_xml_rejects_malformed_documents(text):
    with pytest.raises(MealParseError):
        parse_meal_xml(text)


# =============================================================================
# TEXT CLEANUP
# =============================================================================


def test_clean_dishes_example():
    assert clean_dishes("백미밥<br/>김치(돈육)<br/>된장국") == ["백미밥", "김치", "된장국"]


def test_clean_dishes_handles_br_variants_and_other_tags():
    assert clean_dishes("<b>백미밥</b><br>김치<BR />된장국 (1.5.)<br/>") == ["백미밥", "김치", "된장국"]


def test_clean_dishes_drops_empty_items():
    assert clean_dishes("<br/>  <br/>(1.2.)<br/>우유") == ["우유"]


def test_clean_dishes_is_idempotent_on_clean_input():
    items = ["백미밥", "김치", "된장국"]

    assert clean_dishes("\n".join(items)) == items
    assert clean_dishes("\n".join(clean_dishes("\n".join(items)))) == items


def test_clean_dishes_empty():
    assert clean_dishes("") == []


def test_markup_lines_keeps_parentheses():
    assert markup_lines("탄수화물(g) : 120.5<br/>단백질(g) : 30.1") == ["탄수화물(g) : 120.5", "단백질(g) : 30.1"]


# =============================================================================
# DATE FORMATTING
# =============================================================================


def test_format_korean_date_friday():
    assert format_korean_date("2024-03-15") == "2024년 3월 15일 (금)"


@pytest.mark.parametrize("value, expected", [
    ("2024-03-17", "2024년 3월 17일 (일)"),
    ("2024-03-18", "2024년 3월 18일 (월)"),
    ("2024-03-16", "2024년 3월 16일 (토)"),
    (date(2025, 1, 1), "2025년 1월 1일 (수)"),
])
def test_format_korean_date_weekdays(value, expected):
    assert format_korean_date(value) == expected


def test_format_korean_date_rejects_invalid():
    with pytest.raises(MealDateError):
        format_korean_date("2024-02-30")
