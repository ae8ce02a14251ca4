"""
Celery application.
Worker: celery -A core worker -l info
Scheduler: celery -A core beat -l info
"""

import os

from celery import Celery

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "core.settings")

app = Celery("core")
app.config_from_object("django.conf:settings", namespace="CELERY")

# Tasks live in the application layer of each bounded context
app.autodiscover_tasks(["apps.pricing.application"])
