"""
Meal lookup widget: the page's UI state machine.

The widget owns handles to the page regions it drives and moves them between
the idle, loading and error states around a single search.
"""
import logging
import threading
from datetime import date
from enum import Enum
from typing import Callable, List, Optional, Tuple

from django.template.loader import render_to_string

from neis_lib.exceptions import MealValidationError
from neis_lib.model import MealRecord
from neis_lib.parser import clean_dishes, fetch_meal_data, format_korean_date, markup_lines, parse_meal_xml
from neis_lib.webpage import compact_date

logger = logging.getLogger(__name__)

NO_DATE_NOTICE = '날짜를 선택해주세요.'
ERROR_MESSAGE = '급식 정보를 불러오는데 실패했습니다.'


class DisplayState(Enum):
    IDLE = 'idle'
    LOADING = 'loading'
    ERROR = 'error'


class PageRegion:
    """A block of the page whose visibility and content the widget controls."""

    def __init__(self, element_id: str, visible: bool = True, html: str = ''):
        self.element_id = element_id
        self.visible = visible
        self.html = html

    def show(self):
        self.visible = True

    def hide(self):
        self.visible = False

    def set_html(self, html: str):
        self.html = html

    def clear(self):
        self.html = ''

    @property
    def display(self) -> str:
        """CSS display value for templates"""
        return 'block' if self.visible else 'none'

    def __repr__(self):
        return f"PageRegion({self.element_id!r}, visible={self.visible})"


class DateInput:
    """The date field; its value is read fresh on every search."""

    def __init__(self, element_id: str = 'dateInput', value: str = ''):
        self.element_id = element_id
        self.value = value


class MealLookupWidget:
    """
    Looks up a school's meals for the date in the date input and renders
    them into the results region.

    Args:
        date_input: handle to the date field
        search_button: handle to the search control; the widget never
            toggles it, the page renders it from this handle
        meal_info: results region
        loading: loading indicator region
        error: error panel region
        fetch: callable taking a YYYYMMDD date and returning the raw XML
        today: date the input defaults to (current local date if omitted)
        notify: callable receiving user-facing notices
    """

    def __init__(
        self,
        date_input: DateInput,
        search_button: PageRegion,
        meal_info: PageRegion,
        loading: PageRegion,
        error: PageRegion,
        fetch: Callable[[str], str] = fetch_meal_data,
        today: Optional[date] = None,
        notify: Optional[Callable[[str], None]] = None,
    ):
        self.date_input = date_input
        self.search_button = search_button
        self.meal_info = meal_info
        self.loading = loading
        self.error = error
        self._fetch = fetch
        self.notices: List[str] = []
        self._notify = notify or self.notices.append
        self.state = DisplayState.IDLE
        self._generation = 0
        self._committed: Optional[Tuple[DisplayState, str]] = None
        self._lock = threading.RLock()

        self.date_input.value = (today or date.today()).isoformat()
        self.meal_info.show()
        self.loading.hide()
        self.error.hide()

    def read_selected_date(self) -> str:
        """Current date input value; raises MealValidationError when empty."""
        selected_date = (self.date_input.value or '').strip()
        if not selected_date:
            raise MealValidationError(NO_DATE_NOTICE)
        return selected_date

    def trigger_search(self) -> DisplayState:
        """
        Search meals for the selected date and render the outcome.

        Always leaves the widget idle or in error; failures are logged and
        shown as the error panel, never raised. Only the newest search
        renders: an older search finishing late is dropped.
        """
        try:
            selected_date = self.read_selected_date()
        except MealValidationError as e:
            self._notify(e.message)
            return self.state

        generation = self._start_search()
        logger.debug(f"Search #{generation} for {selected_date}")

        try:
            records = self._lookup(selected_date)
            html = self.render_html(records, selected_date)
        except Exception as e:
            # Fetch, parse and render failures all end in the error panel
            if self._commit(generation, DisplayState.ERROR):
                logger.error(f"급식 정보 조회 실패: {e}", exc_info=True)
            else:
                logger.info(f"Discarding failed search #{generation} for {selected_date}: superseded")
            return self.state

        if not self._commit(generation, DisplayState.IDLE, html):
            logger.info(f"Discarding search #{generation} for {selected_date}: superseded")
        return self.state

    def _lookup(self, selected_date: str) -> Optional[List[MealRecord]]:
        xml_text = self._fetch(compact_date(selected_date))
        return parse_meal_xml(xml_text)

    def render(self, records: Optional[List[MealRecord]], selected_date: str):
        """Render records for a date into the results region."""
        self.meal_info.set_html(self.render_html(records, selected_date))

    def render_html(self, records: Optional[List[MealRecord]], selected_date: str) -> str:
        heading = format_korean_date(selected_date)
        if not records:
            return render_to_string('menu/no_meals.html', {'heading': heading})

        meals = [
            {
                'name': record.meal_name,
                'dishes': clean_dishes(record.dishes),
                'calories': record.calories,
                'nutrition': markup_lines(record.nutrition),
                'origin': markup_lines(record.origin),
            }
            for record in records
        ]
        return render_to_string('menu/meal_info.html', {'heading': heading, 'meals': meals})

    # -------------------------------------------------------------------------
    # state transitions
    # -------------------------------------------------------------------------

    def _start_search(self) -> int:
        with self._lock:
            self._generation += 1
            generation = self._generation
            self.state = DisplayState.LOADING
            self.loading.show()
            self.meal_info.hide()
            self.error.hide()
        return generation

    def _commit(self, generation: int, state: DisplayState, html: str = '') -> bool:
        """
        Apply a finished search's outcome if it is still the newest search.

        The check and the region writes happen under one hold of the lock.
        The lock is reentrant, so a search started from inside a region write
        on the same thread still runs; its committed view is restored once
        the older write returns.
        """
        with self._lock:
            if generation != self._generation:
                return False
            self._apply(state, html)
            if generation != self._generation:
                if self._committed is not None:
                    self._apply(*self._committed)
                return False
            self._committed = (state, html)
            return True

    def _apply(self, state: DisplayState, html: str):
        self.state = state
        self.loading.hide()
        if state is DisplayState.ERROR:
            self.meal_info.hide()
            self.meal_info.clear()
            self.error.set_html(ERROR_MESSAGE)
            self.error.show()
        else:
            self.meal_info.set_html(html)
            self.error.hide()
            self.meal_info.show()
