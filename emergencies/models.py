# emergencies/models.py
from django.db import models
from django.core.validators import MinValueValidator
from django.utils import timezone

from algorithms.records import RequestDescriptor
from donors.models import BLOOD_GROUP_CHOICES
from donors.utils import profile_location


class EmergencyRequest(models.Model):
    URGENCY_CHOICES = [
        ('critical', 'Critical - Life Threatening'),
        ('high', 'High - Within 6 Hours'),
        ('medium', 'Medium - Within 24 Hours'),
        ('low', 'Low - Within 48 Hours'),
    ]

    STATUS_CHOICES = [
        ('open', 'Open'),
        ('fulfilled', 'Fulfilled'),
        ('cancelled', 'Cancelled'),
    ]

    patient_name = models.CharField(max_length=200)
    blood_group = models.CharField(max_length=3, choices=BLOOD_GROUP_CHOICES)
    units_required = models.PositiveIntegerField(default=1, validators=[MinValueValidator(1)])
    urgency = models.CharField(max_length=10, choices=URGENCY_CHOICES, default='medium')

    hospital_name = models.CharField(max_length=200)
    hospital_address = models.TextField(blank=True)
    contact_phone = models.CharField(max_length=20, blank=True)
    district = models.CharField(max_length=100, blank=True)
    latitude = models.FloatField(null=True, blank=True)
    longitude = models.FloatField(null=True, blank=True)
    description = models.TextField(blank=True)

    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default='open')

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    expires_at = models.DateTimeField(null=True, blank=True)

    def __str__(self):
        return f"{self.hospital_name} - {self.blood_group} ({self.urgency})"

    def to_descriptor(self) -> RequestDescriptor:
        """Request shape the matching engine consumes"""
        return RequestDescriptor(
            required_group=self.blood_group,
            units_required=self.units_required,
            urgency=self.urgency,
            location=profile_location(self.district, self.latitude, self.longitude),
        )

    @property
    def hours_waiting(self):
        """How many hours this request has been open"""
        delta = timezone.now() - self.created_at
        return delta.total_seconds() / 3600

    class Meta:
        ordering = ['-created_at']
        verbose_name = 'Emergency Request'
        verbose_name_plural = 'Emergency Requests'


class DonorAlert(models.Model):
    """One ranked donor alerted for an emergency request"""
    STATUS_CHOICES = [
        ('pending',  'Pending'),
        ('accepted', 'Accepted'),
        ('declined', 'Declined'),
    ]

    donor = models.ForeignKey('donors.DonorProfile', on_delete=models.CASCADE, related_name='alerts')
    emergency_request = models.ForeignKey(EmergencyRequest, on_delete=models.CASCADE, related_name='alerts')

    match_score = models.FloatField(help_text="Composite match score (0-1)")
    distance = models.FloatField(null=True, blank=True, help_text="Distance in km, empty when unknown")
    priority_order = models.PositiveIntegerField(default=0)

    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default='pending')
    is_read = models.BooleanField(default=False)
    sent_at = models.DateTimeField(auto_now_add=True)
    responded_at = models.DateTimeField(null=True, blank=True)

    def __str__(self):
        return f"Alert -> {self.donor.full_name} | Request #{self.emergency_request_id} (Priority: {self.priority_order})"

    @property
    def match_percent(self):
        return int(round(self.match_score * 100))

    def respond(self, accepted):
        self.status = 'accepted' if accepted else 'declined'
        self.is_read = True
        self.responded_at = timezone.now()
        self.save(update_fields=['status', 'is_read', 'responded_at'])

    class Meta:
        ordering = ['priority_order', '-sent_at']
        constraints = [
            models.UniqueConstraint(fields=['donor', 'emergency_request'], name='unique_alert_per_donor_request'),
        ]
        indexes = [
            models.Index(fields=['emergency_request', 'status'], name='alert_request_status_idx'),
            models.Index(fields=['donor', '-sent_at'], name='alert_donor_sent_idx'),
        ]
