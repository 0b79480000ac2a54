"""
Celery configuration for background tasks.

Used for webhook delivery and the scheduled expired license cleanup.
"""
import os

from celery import Celery

# Set default Django settings module
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "LicenseExpiryService.settings.dev")

app = Celery("LicenseExpiryService")

# Load configuration from Django settings
app.config_from_object("django.conf:settings", namespace="CELERY")

# Auto-discover tasks from all installed apps
app.autodiscover_tasks()
