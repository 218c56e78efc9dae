"""
Django settings for the school meal lookup project.

Values are read from environment variables; defaults suit local development.
"""
import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent

SECRET_KEY = os.getenv('DJANGO_SECRET_KEY', 'django-insecure-meal-lookup-dev-key')
DEBUG = os.getenv('DJANGO_DEBUG', 'False').lower() in ('true', '1', 'yes')
ALLOWED_HOSTS = [h for h in os.getenv('DJANGO_ALLOWED_HOSTS', 'localhost,127.0.0.1,testserver').split(',') if h]

INSTALLED_APPS = [
    'django.contrib.messages',
    'django.contrib.staticfiles',
    'menu',
]

MIDDLEWARE = [
    'django.middleware.security.SecurityMiddleware',
    'django.middleware.common.CommonMiddleware',
    'django.middleware.csrf.CsrfViewMiddleware',
    'django.contrib.messages.middleware.MessageMiddleware',
    'django.middleware.clickjacking.XFrameOptionsMiddleware',
]

ROOT_URLCONF = 'config.urls'

TEMPLATES = [
    {
        'BACKEND': 'django.template.backends.django.DjangoTemplates',
        'DIRS': [],
        'APP_DIRS': True,
        'OPTIONS': {
            'context_processors': [
                'django.template.context_processors.request',
                'django.contrib.messages.context_processors.messages',
            ],
        },
    },
]

WSGI_APPLICATION = 'config.wsgi.application'

# No queries are persisted
DATABASES = {}

# Cookie storage keeps messages working without sessions
MESSAGE_STORAGE = 'django.contrib.messages.storage.cookie.CookieStorage'

LANGUAGE_CODE = 'ko-kr'
TIME_ZONE = os.getenv('TIME_ZONE', 'Asia/Seoul')
USE_I18N = False
USE_TZ = True

STATIC_URL = 'static/'

# NEIS meal service
NEIS_MEAL_SERVICE_URL = os.getenv('NEIS_MEAL_SERVICE_URL', 'https://open.neis.go.kr/hub/mealServiceDietInfo')
NEIS_OFFICE_CODE = os.getenv('NEIS_OFFICE_CODE', 'J10')
NEIS_SCHOOL_CODE = os.getenv('NEIS_SCHOOL_CODE', '7530079')
NEIS_RELAY_URL = os.getenv('NEIS_RELAY_URL', 'https://api.allorigins.win/raw?url=')
NEIS_REQUEST_TIMEOUT = float(os.getenv('NEIS_REQUEST_TIMEOUT', '15'))

LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()

LOGGING = {
    'version': 1,
    'disable_existing_loggers': False,
    'formatters': {
        'standard': {
            'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        },
    },
    'handlers': {
        'console': {
            'class': 'logging.StreamHandler',
            'formatter': 'standard',
        },
    },
    'loggers': {
        'menu': {'handlers': ['console'], 'level': LOG_LEVEL, 'propagate': False},
        'neis_lib': {'handlers': ['console'], 'level': LOG_LEVEL, 'propagate': False},
    },
    'root': {'handlers': ['console'], 'level': 'WARNING'},
}
