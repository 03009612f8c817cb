from datetime import timedelta
from unittest import mock

from django.contrib.auth.models import User
from django.core import mail
from django.test import TestCase, override_settings
from django.utils import timezone

from donors.models import DonorProfile
from emergencies import tasks
from emergencies.models import DonorAlert, EmergencyRequest
from emergencies.tasks import broadcast_emergency_alert

DHAKA = (23.8103, 90.4125)


def make_donor(username, group, email=True, lat=None, lon=None, verified=False, rating=0,
               available=True, last_donation_date=None):
    user = User.objects.create(username=username, email=f'{username}@example.com' if email else '')
    return DonorProfile.objects.create(
        user=user,
        full_name=username.title(),
        blood_group=group,
        district='Dhaka',
        latitude=lat,
        longitude=lon,
        is_verified=verified,
        rating=rating,
        is_available=available,
        last_donation_date=last_donation_date,
    )


class BroadcastEmergencyAlertTests(TestCase):
    def setUp(self):
        today = timezone.localdate()
        self.near = make_donor('near', 'A+', lat=23.8193, lon=90.4125, rating=30)
        self.universal = make_donor('universal', 'O-', verified=True, rating=45)
        self.no_email = make_donor('quiet', 'A-', email=False, rating=10)
        make_donor('incompatible', 'B+', verified=True, rating=50)
        make_donor('cooling', 'A+', last_donation_date=today - timedelta(days=30))
        make_donor('away', 'A+', available=False)

        self.emergency = EmergencyRequest.objects.create(
            patient_name='Patient X',
            blood_group='A+',
            units_required=2,
            urgency='high',
            hospital_name='Dhaka Medical College Hospital',
            district='Dhaka',
            latitude=DHAKA[0],
            longitude=DHAKA[1],
        )

    def test_alerts_created_in_rank_order(self):
        result = broadcast_emergency_alert(self.emergency.id)

        alerts = list(self.emergency.alerts.order_by('priority_order'))
        self.assertEqual([a.donor for a in alerts], [self.near, self.universal, self.no_email])
        self.assertEqual([a.priority_order for a in alerts], [1, 2, 3])
        self.assertAlmostEqual(alerts[0].distance, 1.0, places=1)
        self.assertIsNone(alerts[1].distance)
        self.assertGreater(alerts[0].match_score, alerts[1].match_score)
        self.assertIn('Alerted 3 donors', result)

        # Donors without an email address are alerted but not mailed
        self.assertEqual(len(mail.outbox), 2)
        self.assertIn('A+ blood needed', mail.outbox[0].subject)
        self.assertIn('Priority #1', mail.outbox[0].body)

    def test_rerun_does_not_duplicate(self):
        broadcast_emergency_alert(self.emergency.id)
        result = broadcast_emergency_alert(self.emergency.id)
        self.assertEqual(self.emergency.alerts.count(), 3)
        self.assertIn('No donors available', result)

    def test_donor_alerted_by_overlapping_broadcast_is_skipped(self):
        rank = tasks.match_donors

        def rank_then_alert_near(*args, **kwargs):
            results = rank(*args, **kwargs)
            # Another broadcast alerts the nearest donor in between
            DonorAlert.objects.create(donor=self.near, emergency_request=self.emergency,
                                      match_score=0.9, priority_order=1)
            return results

        with mock.patch('emergencies.tasks.match_donors', side_effect=rank_then_alert_near):
            result = broadcast_emergency_alert(self.emergency.id)

        alerts = list(self.emergency.alerts.order_by('priority_order'))
        self.assertEqual([(a.donor, a.priority_order) for a in alerts],
                         [(self.near, 1), (self.universal, 2), (self.no_email, 3)])
        self.assertEqual(alerts[0].match_score, 0.9)
        self.assertIn('Alerted 2 donors', result)
        self.assertEqual(len(mail.outbox), 1)

    @override_settings(PULSECARE_ALERT_LIMIT=1)
    def test_next_batch_continues_priority_order(self):
        broadcast_emergency_alert(self.emergency.id)
        broadcast_emergency_alert(self.emergency.id)

        alerts = list(self.emergency.alerts.order_by('priority_order'))
        self.assertEqual([(a.donor, a.priority_order) for a in alerts],
                         [(self.near, 1), (self.universal, 2)])

    def test_closed_request_is_skipped(self):
        self.emergency.status = 'fulfilled'
        self.emergency.save()
        broadcast_emergency_alert(self.emergency.id)
        self.assertFalse(DonorAlert.objects.exists())

    def test_missing_request(self):
        self.assertIn('not found', broadcast_emergency_alert(999999))


class EmergencyRequestSignalTests(TestCase):
    def test_new_open_request_queues_broadcast(self):
        with mock.patch('emergencies.signals.broadcast_emergency_alert') as task:
            with self.captureOnCommitCallbacks(execute=True):
                emergency = EmergencyRequest.objects.create(
                    patient_name='P', blood_group='O-', hospital_name='H',
                )
        task.delay.assert_called_once_with(emergency.id)

    def test_updates_do_not_queue_broadcast(self):
        with mock.patch('emergencies.signals.broadcast_emergency_alert') as task:
            emergency = EmergencyRequest.objects.create(
                patient_name='P', blood_group='O-', hospital_name='H',
            )
            with self.captureOnCommitCallbacks(execute=True):
                emergency.urgency = 'critical'
                emergency.save()
        task.delay.assert_not_called()


class DonorAlertModelTests(TestCase):
    def test_respond(self):
        donor = make_donor('ayesha', 'O+')
        emergency = EmergencyRequest.objects.create(patient_name='P', blood_group='O+', hospital_name='H')
        alert = DonorAlert.objects.create(donor=donor, emergency_request=emergency, match_score=0.734)

        self.assertEqual(alert.match_percent, 73)
        alert.respond(accepted=False)
        alert.refresh_from_db()
        self.assertEqual(alert.status, 'declined')
        self.assertIsNotNone(alert.responded_at)

    def test_descriptor(self):
        emergency = EmergencyRequest(patient_name='P', blood_group='AB-', units_required=3,
                                     urgency='critical', hospital_name='H', district='Sylhet')
        descriptor = emergency.to_descriptor()
        self.assertEqual(descriptor.required_group.value, 'AB-')
        self.assertEqual(descriptor.units_required, 3)
        self.assertEqual(descriptor.urgency.value, 'critical')
        self.assertIsNone(descriptor.location.coordinates)
