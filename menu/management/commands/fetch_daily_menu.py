"""
Management command to print a day's school meals from the NEIS meal service.
"""
from datetime import date

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError
from django.utils import timezone

from neis_lib.exceptions import MealLookupError
from neis_lib.parser import clean_dishes, fetch_meal_data, format_korean_date, parse_meal_xml
from neis_lib.webpage import compact_date


class Command(BaseCommand):
    help = 'Fetch a day\'s meal menu from the NEIS meal service and print it'

    def add_arguments(self, parser):
        parser.add_argument(
            '--date',
            type=str,
            help='Date to fetch (YYYY-MM-DD), defaults to today',
        )

    def handle(self, *args, **options):
        if options['date']:
            try:
                target_date = date.fromisoformat(options['date'])
            except ValueError:
                raise CommandError(f'Invalid date format: {options["date"]}. Use YYYY-MM-DD')
        else:
            target_date = timezone.localdate()

        self.stdout.write(f'Fetching meals for {target_date}...')

        try:
            xml_text = fetch_meal_data(
                compact_date(target_date),
                base_url=settings.NEIS_MEAL_SERVICE_URL,
                office_code=settings.NEIS_OFFICE_CODE,
                school_code=settings.NEIS_SCHOOL_CODE,
                relay=settings.NEIS_RELAY_URL,
                timeout=settings.NEIS_REQUEST_TIMEOUT,
            )
            records = parse_meal_xml(xml_text)
        except MealLookupError as e:
            raise CommandError(f'급식 정보 조회 실패: {e}')

        heading = format_korean_date(target_date)
        if not records:
            self.stdout.write(self.style.WARNING(f'{heading}: 급식 정보 없음'))
            return

        self.stdout.write(self.style.SUCCESS(f'{heading} 급식 정보'))
        for record in records:
            self.stdout.write(f'\n{"="*40}')
            self.stdout.write(record.meal_name)
            self.stdout.write(f'{"="*40}')

            dishes = clean_dishes(record.dishes)
            if dishes:
                for dish in dishes:
                    self.stdout.write(f'  • {dish}')
            else:
                self.stdout.write('  메뉴 정보가 없습니다.')
            self.stdout.write(f'  칼로리: {record.calories or "정보 없음"}')
