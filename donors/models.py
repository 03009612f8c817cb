from django.db import models, transaction
from django.conf import settings
from django.core.validators import MinValueValidator, MaxValueValidator

from algorithms.eligibility import check_eligibility
from donors.utils import generate_donor_code, to_donor_record

BLOOD_GROUP_CHOICES = [
    ('A+', 'A+'), ('A-', 'A-'),
    ('B+', 'B+'), ('B-', 'B-'),
    ('O+', 'O+'), ('O-', 'O-'),
    ('AB+', 'AB+'), ('AB-', 'AB-'),
]


# ---------------------------
# Donor Profile
# ---------------------------
class DonorProfile(models.Model):
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='donor_profile'
    )

    donor_code = models.CharField(max_length=32, unique=True, blank=True)
    full_name = models.CharField(max_length=200)
    phone = models.CharField(max_length=20, db_index=True, blank=True)
    blood_group = models.CharField(max_length=3, choices=BLOOD_GROUP_CHOICES, db_index=True)

    # Location
    district = models.CharField(max_length=100, blank=True, db_index=True)
    upazila = models.CharField(max_length=100, blank=True)
    latitude = models.FloatField(null=True, blank=True)
    longitude = models.FloatField(null=True, blank=True)

    # Matching signals
    is_available = models.BooleanField(default=True)
    is_verified = models.BooleanField(default=False)
    rating = models.PositiveSmallIntegerField(
        default=0,
        validators=[MaxValueValidator(50)],
        help_text="Tenths of a star (45 = 4.5)"
    )

    # Donation tracking
    donation_count = models.PositiveIntegerField(default=0)
    last_donation_date = models.DateField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def save(self, *args, **kwargs):
        if not self.donor_code and self.user_id:
            self.donor_code = generate_donor_code(self.user_id)
        super().save(*args, **kwargs)

    def eligibility(self, reference_date=None):
        """Eligibility status (cooldown / availability) for this donor"""
        return check_eligibility(to_donor_record(self), reference_date)

    @property
    def can_donate(self) -> bool:
        return self.eligibility().eligible

    @transaction.atomic
    def record_donation(self, date_donated, units=1, emergency_request=None, notes=''):
        """
        Log a donation and move last_donation_date forward.
        Back-dated entries are kept in history but never reset the cooldown.
        """
        entry = DonationHistory.objects.create(
            donor=self,
            emergency_request=emergency_request,
            date_donated=date_donated,
            units_donated=units,
            notes=notes,
        )
        self.donation_count += 1
        if self.last_donation_date is None or date_donated > self.last_donation_date:
            self.last_donation_date = date_donated
        self.save(update_fields=['donation_count', 'last_donation_date', 'updated_at'])
        return entry

    def __str__(self):
        return f"{self.full_name} ({self.blood_group})"

    class Meta:
        verbose_name = "Donor Profile"
        verbose_name_plural = "Donor Profiles"
        ordering = ['-created_at']


class DonationHistory(models.Model):
    donor = models.ForeignKey(
        DonorProfile,
        on_delete=models.CASCADE,
        related_name='donation_history'
    )
    emergency_request = models.ForeignKey(
        'emergencies.EmergencyRequest',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='donations'
    )

    date_donated = models.DateField()
    units_donated = models.PositiveIntegerField(default=1, validators=[MinValueValidator(1)])
    notes = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.donor.full_name} | {self.date_donated}"

    class Meta:
        ordering = ['-date_donated']
        verbose_name = "Donation History"
        verbose_name_plural = "Donation Histories"
