# api/urls.py
from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

router = DefaultRouter()
router.register(r'donors', views.DonorViewSet, basename='donor')
router.register(r'emergency-requests', views.EmergencyRequestViewSet, basename='emergency-request')
router.register(r'alerts', views.DonorAlertViewSet, basename='alert')

app_name = 'api'

urlpatterns = [
    path('', include(router.urls)),
    path('match/', views.match, name='match'),
]

# Available endpoints:
# POST /api/match/                                   - Rank donors for an ad hoc request
# GET  /api/donors/                                  - Donor directory with eligibility (staff)
# GET  /api/emergency-requests/                      - List emergency requests
# POST /api/emergency-requests/                      - Create request (alerts broadcast automatically)
# GET  /api/emergency-requests/{id}/matches/         - Ranked donors for a request
# POST /api/emergency-requests/{id}/broadcast/       - Alert the next batch of donors (staff)
# GET  /api/emergency-requests/queue/                - Open requests by priority (staff)
# GET  /api/alerts/                                  - Alerts for the signed-in donor
# POST /api/alerts/{id}/respond/                     - Accept or decline an alert
