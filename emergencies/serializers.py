# emergencies/serializers.py
from rest_framework import serializers

from .models import DonorAlert, EmergencyRequest


class EmergencyRequestSerializer(serializers.ModelSerializer):
    alert_count = serializers.SerializerMethodField()

    class Meta:
        model = EmergencyRequest
        fields = '__all__'
        read_only_fields = ['status', 'created_at', 'updated_at']

    def get_alert_count(self, obj):
        return obj.alerts.count()


class DonorAlertSerializer(serializers.ModelSerializer):
    blood_group = serializers.CharField(source='emergency_request.blood_group', read_only=True)
    urgency = serializers.CharField(source='emergency_request.urgency', read_only=True)
    units_required = serializers.IntegerField(source='emergency_request.units_required', read_only=True)
    hospital_name = serializers.CharField(source='emergency_request.hospital_name', read_only=True)
    hospital_address = serializers.CharField(source='emergency_request.hospital_address', read_only=True)
    contact_phone = serializers.CharField(source='emergency_request.contact_phone', read_only=True)
    match_percent = serializers.IntegerField(read_only=True)

    class Meta:
        model = DonorAlert
        fields = [
            'id', 'emergency_request', 'blood_group', 'urgency', 'units_required',
            'hospital_name', 'hospital_address', 'contact_phone',
            'match_score', 'match_percent', 'distance', 'priority_order',
            'status', 'is_read', 'sent_at', 'responded_at',
        ]
        read_only_fields = fields


class AlertResponseSerializer(serializers.Serializer):
    response = serializers.ChoiceField(choices=['accept', 'decline'])
