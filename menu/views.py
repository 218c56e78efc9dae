"""
Views for the meal lookup page.
"""
from functools import partial

from django.conf import settings
from django.contrib import messages
from django.shortcuts import render
from django.utils import timezone
from django.views.decorators.http import require_GET

from neis_lib.parser import fetch_meal_data
from .widget import DateInput, MealLookupWidget, PageRegion


def build_widget(request) -> MealLookupWidget:
    """Create the page widget with its regions and the configured meal service"""
    fetch = partial(
        fetch_meal_data,
        base_url=settings.NEIS_MEAL_SERVICE_URL,
        office_code=settings.NEIS_OFFICE_CODE,
        school_code=settings.NEIS_SCHOOL_CODE,
        relay=settings.NEIS_RELAY_URL,
        timeout=settings.NEIS_REQUEST_TIMEOUT,
    )
    return MealLookupWidget(
        date_input=DateInput('dateInput'),
        search_button=PageRegion('searchBtn'),
        meal_info=PageRegion('mealInfo'),
        loading=PageRegion('loading', visible=False),
        error=PageRegion('error', visible=False),
        fetch=fetch,
        today=timezone.localdate(),
        notify=lambda notice: messages.warning(request, notice),
    )


@require_GET
def index(request):
    """Show the lookup page; with a ``date`` parameter, search that date first"""
    widget = build_widget(request)
    if 'date' in request.GET:
        widget.date_input.value = request.GET['date']
        widget.trigger_search()
    return render(request, 'menu/index.html', {'widget': widget})
