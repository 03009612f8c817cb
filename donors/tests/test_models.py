from datetime import timedelta

from django.contrib.auth.models import User
from django.test import SimpleTestCase, TestCase
from django.utils import timezone

from algorithms.records import BloodGroup
from donors.models import DonorProfile
from donors.utils import format_rating, generate_donor_code, to_donor_record


class DonorUtilsTests(SimpleTestCase):
    def test_donor_code(self):
        self.assertEqual(generate_donor_code(7, year=2026), 'PULSECARE-2026-0007')
        self.assertEqual(generate_donor_code(12345, year=2026), 'PULSECARE-2026-12345')

    def test_format_rating(self):
        self.assertEqual(format_rating(45), '4.5')
        self.assertEqual(format_rating(50), '5.0')
        self.assertEqual(format_rating(None), '0.0')


class DonorProfileTests(TestCase):
    def setUp(self):
        self.user = User.objects.create(username='rahim', email='rahim@example.com')
        self.donor = DonorProfile.objects.create(
            user=self.user,
            full_name='Rahim Uddin',
            blood_group='B+',
            district='Dhaka',
            latitude=23.81,
            longitude=90.41,
            is_verified=True,
            rating=42,
        )
        self.today = timezone.localdate()

    def test_donor_code_generated_on_create(self):
        year = timezone.localdate().year
        self.assertEqual(self.donor.donor_code, f'PULSECARE-{year}-{self.user.id:04d}')

    def test_to_donor_record(self):
        record = to_donor_record(self.donor)
        self.assertEqual(record.id, self.donor.pk)
        self.assertIs(record.blood_group, BloodGroup.B_POS)
        self.assertTrue(record.is_verified)
        self.assertEqual(record.rating, 42)
        self.assertEqual(record.location.district, 'Dhaka')
        self.assertEqual(record.location.coordinates, (23.81, 90.41))

    def test_partial_coordinates_are_dropped(self):
        self.donor.longitude = None
        self.assertIsNone(to_donor_record(self.donor).location.coordinates)

    def test_record_donation_starts_cooldown(self):
        self.assertTrue(self.donor.can_donate)
        self.donor.record_donation(self.today - timedelta(days=10))
        self.donor.refresh_from_db()

        self.assertEqual(self.donor.donation_count, 1)
        self.assertEqual(self.donor.last_donation_date, self.today - timedelta(days=10))
        status = self.donor.eligibility(self.today)
        self.assertFalse(status.eligible)
        self.assertEqual(status.days_until_eligible, 110)

    def test_backdated_donation_keeps_latest_date(self):
        self.donor.record_donation(self.today - timedelta(days=5))
        self.donor.record_donation(self.today - timedelta(days=300), notes='paper record')
        self.donor.refresh_from_db()

        self.assertEqual(self.donor.donation_count, 2)
        self.assertEqual(self.donor.last_donation_date, self.today - timedelta(days=5))
        self.assertEqual(self.donor.donation_history.count(), 2)

    def test_unavailable_donor(self):
        self.donor.is_available = False
        self.assertEqual(self.donor.eligibility(self.today).reason, 'unavailable')
