"""
Pytest configuration and shared fixtures.
Configures Django and provides sample meal service documents.
"""

import os
import sys
from pathlib import Path
from unittest.mock import Mock

import django
import pytest

project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")
django.setup()


MEAL_XML = """<?xml version="1.0" encoding="UTF-8"?>
<mealServiceDietInfo>
  <head>
    <list_total_count>2</list_total_count>
    <RESULT>
      <CODE>INFO-000</CODE>
      <MESSAGE>정상 처리되었습니다.</MESSAGE>
    </RESULT>
  </head>
  <row>
    <ATPT_OFCDC_SC_CODE>J10</ATPT_OFCDC_SC_CODE>
    <SD_SCHUL_CODE>7530079</SD_SCHUL_CODE>
    <MMEAL_SC_NM>중식</MMEAL_SC_NM>
    <MLSV_YMD>20240315</MLSV_YMD>
    <DDISH_NM><![CDATA[백미밥<br/>김치(돈육)<br/>된장국 (5.6.)]]></DDISH_NM>
    <ORPLC_INFO><![CDATA[쌀 : 국내산<br/>김치류 : 국내산]]></ORPLC_INFO>
    <CAL_INFO>812.3 Kcal</CAL_INFO>
    <NTR_INFO><![CDATA[탄수화물(g) : 120.5<br/>단백질(g) : 30.1]]></NTR_INFO>
  </row>
  <row>
    <MMEAL_SC_NM>석식</MMEAL_SC_NM>
    <DDISH_NM><![CDATA[카레라이스<br/>요구르트(2)]]></DDISH_NM>
    <CAL_INFO>701.0 Kcal</CAL_INFO>
  </row>
</mealServiceDietInfo>
"""

NO_DATA_XML = """<?xml version="1.0" encoding="UTF-8"?>
<RESULT>
  <CODE>INFO-200</CODE>
  <MESSAGE>해당하는 데이터가 없습니다.</MESSAGE>
</RESULT>
"""


@pytest.fixture
def meal_xml():
    return MEAL_XML


@pytest.fixture
def no_data_xml():
    return NO_DATA_XML


def make_response(text: str = "", status_code: int = 200) -> Mock:
    """Build a stand-in for a requests.Response"""
    response = Mock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 400
    response.text = text
    return response


@pytest.fixture
def http_session(monkeypatch):
    """Replace the shared HTTP session with a mock and return it"""
    from neis_lib import parser

    session = Mock()
    session.get.return_value = make_response(MEAL_XML)
    monkeypatch.setattr(parser, "_get_http_session", lambda: session)
    return session
