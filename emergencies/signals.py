# emergencies/signals.py
"""
Signals to broadcast alerts when an emergency request is created
"""
import logging

from django.db import transaction
from django.db.models.signals import post_save
from django.dispatch import receiver

from emergencies.models import EmergencyRequest
from emergencies.tasks import broadcast_emergency_alert

logger = logging.getLogger(__name__)


@receiver(post_save, sender=EmergencyRequest)
def auto_broadcast_emergency_alert(sender, instance, created, **kwargs):
    if created and instance.status == 'open':
        # Wait for the row to be committed before a worker looks it up
        transaction.on_commit(lambda: broadcast_emergency_alert.delay(instance.id))
        logger.info(f"Alert broadcast queued for EmergencyRequest #{instance.id}")
