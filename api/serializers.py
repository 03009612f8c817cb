# api/serializers.py
from rest_framework import serializers

from algorithms.records import Location, RequestDescriptor


class MatchRequestSerializer(serializers.Serializer):
    """
    Payload for POST /api/match/.
    Blood group, units and urgency are checked by the matching engine itself
    so that its errors reach the client unchanged.
    """
    blood_group = serializers.CharField()
    units_required = serializers.IntegerField(default=1)
    urgency = serializers.CharField(default='medium')
    district = serializers.CharField(required=False, allow_blank=True, default='')
    latitude = serializers.FloatField(required=False, allow_null=True, default=None)
    longitude = serializers.FloatField(required=False, allow_null=True, default=None)
    limit = serializers.IntegerField(required=False, allow_null=True, default=None)
    reference_date = serializers.DateField(required=False, allow_null=True, default=None)

    def validate(self, attrs):
        if (attrs['latitude'] is None) != (attrs['longitude'] is None):
            raise serializers.ValidationError("latitude and longitude must be given together")
        return attrs

    def to_descriptor(self):
        data = self.validated_data
        coordinates = None
        if data['latitude'] is not None:
            coordinates = (data['latitude'], data['longitude'])
        return RequestDescriptor(
            required_group=data['blood_group'],
            units_required=data['units_required'],
            urgency=data['urgency'],
            location=Location(district=data['district'], coordinates=coordinates),
        )


class MatchQuerySerializer(serializers.Serializer):
    """Query string for GET /api/emergency-requests/<id>/matches/"""
    limit = serializers.IntegerField(required=False, min_value=0, default=None, allow_null=True)


class MatchResultSerializer(serializers.Serializer):
    """
    Serializes algorithms.records.MatchResult.
    Expects context['profiles']: {donor id: DonorProfile}
    """
    donor_id = serializers.SerializerMethodField()
    donor_code = serializers.SerializerMethodField()
    full_name = serializers.SerializerMethodField()
    blood_group = serializers.SerializerMethodField()
    district = serializers.CharField(source='donor.location.district')
    is_verified = serializers.BooleanField(source='donor.is_verified')
    rating = serializers.IntegerField(source='donor.rating')
    distance_km = serializers.SerializerMethodField()
    score = serializers.SerializerMethodField()
    match_percent = serializers.IntegerField()
    exact_match = serializers.BooleanField()

    def _profile(self, obj):
        return self.context.get('profiles', {}).get(obj.donor.id)

    def get_donor_id(self, obj):
        return obj.donor.id

    def get_donor_code(self, obj):
        profile = self._profile(obj)
        return profile.donor_code if profile else None

    def get_full_name(self, obj):
        profile = self._profile(obj)
        return profile.full_name if profile else None

    def get_blood_group(self, obj):
        return obj.donor.blood_group.value

    def get_distance_km(self, obj):
        return round(obj.distance_km, 2) if obj.distance_km is not None else None

    def get_score(self, obj):
        return round(obj.score, 4)
