# emergencies/tasks.py
"""
Celery tasks for emergency alert broadcasts
"""
import logging

from celery import shared_task
from django.conf import settings
from django.core.mail import send_mail
from django.db import transaction
from django.utils import timezone

from algorithms.blood_compatibility import get_compatible_donors
from algorithms.matching import match_donors
from donors.models import DonorProfile
from donors.utils import to_donor_record
from emergencies.models import DonorAlert, EmergencyRequest

logger = logging.getLogger(__name__)


def candidate_pool(emergency_request):
    """Available donors whose blood group can serve the request"""
    groups = [group.value for group in get_compatible_donors(emergency_request.blood_group)]
    return DonorProfile.objects.filter(blood_group__in=groups, is_available=True).select_related('user')


@shared_task
def broadcast_emergency_alert(emergency_request_id):
    """
    Rank donors for an open emergency request and alert them in order.
    Donors that already hold an alert for the request are skipped, so
    re-running the task only reaches new matches.
    """
    with transaction.atomic():
        # Row lock serializes broadcasts of the same request
        try:
            emergency_request = EmergencyRequest.objects.select_for_update().get(id=emergency_request_id)
        except EmergencyRequest.DoesNotExist:
            logger.warning(f"Emergency request {emergency_request_id} not found")
            return f"Emergency request {emergency_request_id} not found"

        if emergency_request.status != 'open':
            return f"Request {emergency_request_id} is {emergency_request.status}"

        profiles = {profile.pk: profile for profile in candidate_pool(emergency_request)}
        already_alerted = set(emergency_request.alerts.values_list('donor_id', flat=True))

        matches = match_donors(
            emergency_request.to_descriptor(),
            [to_donor_record(p) for pk, p in profiles.items() if pk not in already_alerted],
            limit=settings.PULSECARE_ALERT_LIMIT,
            reference_date=timezone.localdate(),
        )
        if not matches:
            logger.info(f"No eligible donors found for emergency request {emergency_request.id}")
            return f"No donors available for request {emergency_request_id}"

        next_order = emergency_request.alerts.count() + 1
        alerts = []
        for match in matches:
            alert, created = DonorAlert.objects.get_or_create(
                donor=profiles[match.donor.id],
                emergency_request=emergency_request,
                defaults={
                    'match_score': match.score,
                    'distance': round(match.distance_km, 2) if match.distance_km is not None else None,
                    'priority_order': next_order,
                },
            )
            if not created:
                logger.info(f"Donor {alert.donor.donor_code} already alerted for request {emergency_request.id}")
                continue
            alerts.append(alert)
            next_order += 1

    for alert in alerts:
        send_alert_email(alert)

    logger.info(f"{len(alerts)} donors alerted for emergency request {emergency_request.id}")
    return f"Alerted {len(alerts)} donors for request {emergency_request_id}"


def send_alert_email(alert):
    """Send email notification to an alerted donor"""
    donor = alert.donor
    emergency_request = alert.emergency_request

    if not donor.user.email:
        return

    distance = f"{alert.distance:.2f}km from you" if alert.distance is not None else "Distance unknown"
    message = f"""
URGENT BLOOD NEEDED

Hospital: {emergency_request.hospital_name}
District: {emergency_request.district or 'N/A'}
Blood Group: {emergency_request.blood_group}
Units: {emergency_request.units_required}
Urgency: {emergency_request.urgency.upper()}
Distance: {distance}

Match Score: {alert.match_percent}%
You are Priority #{alert.priority_order}

Respond here: {settings.SITE_URL}/api/alerts/{alert.id}/respond/

Thank you for being a lifesaver!
PulseCare
    """.strip()

    try:
        send_mail(
            subject=f"URGENT: {emergency_request.blood_group} blood needed at {emergency_request.hospital_name}",
            message=message,
            from_email=settings.DEFAULT_FROM_EMAIL,
            recipient_list=[donor.user.email],
            fail_silently=False,
        )
    except Exception as e:
        logger.error(f"Alert email to {donor.donor_code} failed: {e}")
