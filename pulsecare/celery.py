# pulsecare/celery.py
"""
Celery configuration for emergency alert broadcasts
"""
import os
from celery import Celery

# Set default Django settings
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'pulsecare.settings')

# Create Celery app
app = Celery('pulsecare')

# Load config from Django settings (prefix: CELERY_)
app.config_from_object('django.conf:settings', namespace='CELERY')

# Auto-discover tasks in all installed apps
app.autodiscover_tasks()
