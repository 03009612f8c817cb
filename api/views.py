# api/views.py
import logging

from django.conf import settings
from django.utils import timezone
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action, api_view
from rest_framework.exceptions import NotFound
from rest_framework.permissions import IsAdminUser, IsAuthenticated
from rest_framework.response import Response

from algorithms.blood_compatibility import get_compatible_donors
from algorithms.matching import match_donors
from algorithms.priority import run_priority_algorithm
from donors.models import DonorProfile
from donors.serializers import DonorSerializer
from donors.utils import to_donor_record
from emergencies.models import DonorAlert, EmergencyRequest
from emergencies.serializers import (
    AlertResponseSerializer,
    DonorAlertSerializer,
    EmergencyRequestSerializer,
)
from emergencies.tasks import broadcast_emergency_alert

from .serializers import MatchQuerySerializer, MatchRequestSerializer, MatchResultSerializer

logger = logging.getLogger(__name__)


def ranked_matches(descriptor, limit=None, reference_date=None):
    """
    Run the matching engine over donors stored in the database.
    Returns (results, {donor id: DonorProfile}).
    """
    groups = [group.value for group in get_compatible_donors(descriptor.required_group)]
    profiles = {
        profile.pk: profile
        for profile in DonorProfile.objects.filter(blood_group__in=groups).select_related('user')
    }
    results = match_donors(
        descriptor,
        [to_donor_record(profile) for profile in profiles.values()],
        limit=limit,
        reference_date=reference_date or timezone.localdate(),
    )
    return results, profiles


@api_view(['POST'])
def match(request):
    """Rank compatible, eligible donors for an ad hoc blood request"""
    serializer = MatchRequestSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    results, profiles = ranked_matches(
        serializer.to_descriptor(),
        limit=serializer.validated_data['limit'],
        reference_date=serializer.validated_data['reference_date'],
    )
    data = MatchResultSerializer(results, many=True, context={'profiles': profiles}).data
    return Response({'count': len(data), 'results': data})


class DonorViewSet(viewsets.ReadOnlyModelViewSet):
    """Donor directory for the back office"""
    queryset = DonorProfile.objects.select_related('user').order_by('-created_at')
    serializer_class = DonorSerializer
    permission_classes = [IsAuthenticated, IsAdminUser]

    def get_queryset(self):
        queryset = super().get_queryset()
        blood_group = self.request.query_params.get('blood_group')
        if blood_group and blood_group != 'all':
            queryset = queryset.filter(blood_group=blood_group)
        district = self.request.query_params.get('district')
        if district:
            queryset = queryset.filter(district__iexact=district)
        return queryset


class EmergencyRequestViewSet(viewsets.ModelViewSet):
    """API endpoint for managing emergency requests"""
    queryset = EmergencyRequest.objects.all().order_by('-created_at')
    serializer_class = EmergencyRequestSerializer

    def get_permissions(self):
        if self.action in ('update', 'partial_update', 'destroy', 'broadcast', 'queue'):
            return [IsAuthenticated(), IsAdminUser()]
        return [IsAuthenticated()]

    def get_queryset(self):
        queryset = super().get_queryset()
        status_filter = self.request.query_params.get('status')
        if status_filter and status_filter != 'all':
            queryset = queryset.filter(status=status_filter)
        return queryset

    @action(detail=True, methods=['get'])
    def matches(self, request, pk=None):
        """Ranked donors for this request, without alerting anyone"""
        emergency_request = self.get_object()
        query = MatchQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        results, profiles = ranked_matches(
            emergency_request.to_descriptor(),
            limit=query.validated_data['limit'],
        )
        data = MatchResultSerializer(results, many=True, context={'profiles': profiles}).data
        return Response({'count': len(data), 'results': data})

    @action(detail=True, methods=['post'])
    def broadcast(self, request, pk=None):
        """Alert the next batch of ranked donors"""
        emergency_request = self.get_object()
        if emergency_request.status != 'open':
            return Response(
                {'detail': f'Request is {emergency_request.status}'},
                status=status.HTTP_409_CONFLICT,
            )
        broadcast_emergency_alert.delay(emergency_request.id)
        return Response(
            {'detail': 'Alert broadcast queued', 'limit': settings.PULSECARE_ALERT_LIMIT},
            status=status.HTTP_202_ACCEPTED,
        )

    @action(detail=False, methods=['get'])
    def queue(self, request):
        """Open requests ordered by priority"""
        ranked = run_priority_algorithm(EmergencyRequest.objects.filter(status='open'))
        return Response([
            {
                'request': EmergencyRequestSerializer(entry['request']).data,
                'priority_score': entry['priority_score'],
                'priority_level': entry['priority_level'],
            }
            for entry in ranked
        ])


class DonorAlertViewSet(mixins.ListModelMixin, mixins.RetrieveModelMixin, viewsets.GenericViewSet):
    """Emergency alerts addressed to the signed-in donor"""
    serializer_class = DonorAlertSerializer

    def get_queryset(self):
        profile = DonorProfile.objects.filter(user=self.request.user).first()
        if profile is None:
            return DonorAlert.objects.none()
        queryset = DonorAlert.objects.filter(donor=profile).select_related('emergency_request')
        status_filter = self.request.query_params.get('status')
        if status_filter and status_filter != 'all':
            queryset = queryset.filter(status=status_filter)
        return queryset.order_by('-sent_at')

    @action(detail=True, methods=['post'])
    def respond(self, request, pk=None):
        alert = self.get_object()
        if alert.emergency_request.status != 'open':
            raise NotFound('This emergency request is no longer open')
        if alert.status != 'pending':
            return Response({'detail': f'Alert already {alert.status}'}, status=status.HTTP_409_CONFLICT)

        serializer = AlertResponseSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        alert.respond(accepted=serializer.validated_data['response'] == 'accept')

        logger.info(f"Donor {alert.donor.donor_code} {alert.status} alert {alert.id}")
        return Response(DonorAlertSerializer(alert).data)
