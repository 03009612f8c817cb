# donors/serializers.py
from django.utils import timezone
from rest_framework import serializers

from .models import DonorProfile, DonationHistory
from .utils import format_rating


class DonorSerializer(serializers.ModelSerializer):
    email = serializers.SerializerMethodField()
    rating_display = serializers.SerializerMethodField()
    eligibility = serializers.SerializerMethodField()

    class Meta:
        model = DonorProfile
        fields = [
            'id', 'donor_code', 'full_name', 'email', 'phone', 'blood_group',
            'district', 'upazila', 'latitude', 'longitude',
            'is_available', 'is_verified', 'rating', 'rating_display',
            'donation_count', 'last_donation_date', 'eligibility',
            'created_at', 'updated_at',
        ]

    def get_email(self, obj):
        return obj.user.email if obj.user else "N/A"

    def get_rating_display(self, obj):
        return format_rating(obj.rating)

    def get_eligibility(self, obj):
        reference_date = self.context.get('reference_date') or timezone.localdate()
        status = obj.eligibility(reference_date)
        return {
            'eligible': status.eligible,
            'reason': status.reason,
            'days_until_eligible': status.days_until_eligible,
            'next_eligible_date': status.next_eligible_date,
        }


class DonationHistorySerializer(serializers.ModelSerializer):
    donor_name = serializers.CharField(source='donor.full_name', read_only=True)

    class Meta:
        model = DonationHistory
        fields = '__all__'
