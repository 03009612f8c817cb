# emergencies/admin.py
from django.contrib import admin
from django.utils.html import format_html

from .models import DonorAlert, EmergencyRequest
from .tasks import broadcast_emergency_alert


class DonorAlertInline(admin.TabularInline):
    model = DonorAlert
    extra = 0
    fields = ['priority_order', 'donor', 'match_score', 'distance', 'status', 'responded_at']
    readonly_fields = fields
    ordering = ['priority_order']
    can_delete = False


@admin.register(EmergencyRequest)
class EmergencyRequestAdmin(admin.ModelAdmin):
    list_display = [
        'id',
        'hospital_name',
        'patient_name',
        'blood_group',
        'units_required',
        'urgency',
        'status',
        'alert_summary',
    ]
    list_filter = ['status', 'urgency', 'blood_group', 'district', 'created_at']
    search_fields = ['patient_name', 'hospital_name', 'district']
    readonly_fields = ['created_at', 'updated_at']
    inlines = [DonorAlertInline]

    fieldsets = (
        ('Request Information', {
            'fields': ('patient_name', 'blood_group', 'units_required', 'urgency',
                       'description', 'status', 'expires_at')
        }),
        ('Hospital', {
            'fields': ('hospital_name', 'hospital_address', 'contact_phone',
                       'district', 'latitude', 'longitude')
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    @admin.display(description='Alerts')
    def alert_summary(self, obj):
        alerts = obj.alerts.all()
        return format_html(
            '<span style="color: blue;">Total: {}</span> | '
            '<span style="color: orange;">Pending: {}</span> | '
            '<span style="color: green;">Accepted: {}</span>',
            alerts.count(),
            alerts.filter(status='pending').count(),
            alerts.filter(status='accepted').count(),
        )

    actions = ['rebroadcast_alerts']

    @admin.action(description='Alert more donors for selected requests')
    def rebroadcast_alerts(self, request, queryset):
        queued = 0
        for emergency_request in queryset.filter(status='open'):
            broadcast_emergency_alert.delay(emergency_request.id)
            queued += 1
        self.message_user(request, f'Alert broadcast queued for {queued} request(s).')


@admin.register(DonorAlert)
class DonorAlertAdmin(admin.ModelAdmin):
    list_display  = ['donor', 'emergency_request', 'priority_order', 'match_score', 'distance', 'status', 'sent_at']
    list_filter   = ['status', 'is_read']
    search_fields = ['donor__full_name', 'donor__donor_code', 'emergency_request__hospital_name']
    ordering      = ['emergency_request', 'priority_order']
    readonly_fields = ['sent_at', 'responded_at']
