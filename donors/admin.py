from django.contrib import admin
from django.utils import timezone

from .models import DonorProfile, DonationHistory
from .utils import format_rating


class DonationHistoryInline(admin.TabularInline):
    model = DonationHistory
    extra = 0
    fields = ['date_donated', 'units_donated', 'emergency_request', 'notes']
    readonly_fields = ['emergency_request']


@admin.register(DonorProfile)
class DonorProfileAdmin(admin.ModelAdmin):
    list_display   = ['donor_code', 'full_name', 'blood_group', 'district', 'rating_display',
                      'is_verified', 'is_available', 'can_donate_display']
    list_filter    = ['blood_group', 'is_available', 'is_verified', 'district']
    search_fields  = ['donor_code', 'full_name', 'user__username', 'phone']
    ordering       = ['-created_at']
    readonly_fields = ['donor_code', 'donation_count', 'last_donation_date', 'created_at', 'updated_at']
    inlines = [DonationHistoryInline]

    fieldsets = (
        ('Personal Info', {
            'fields': ('user', 'donor_code', 'full_name', 'phone', 'blood_group')
        }),
        ('Location', {
            'fields': ('district', 'upazila', 'latitude', 'longitude')
        }),
        ('Matching', {
            'fields': ('is_available', 'is_verified', 'rating')
        }),
        ('Donation Stats', {
            'fields': ('donation_count', 'last_donation_date')
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',),
        }),
    )

    @admin.display(description='Rating')
    def rating_display(self, obj):
        return format_rating(obj.rating)

    @admin.display(boolean=True, description='Can Donate Now')
    def can_donate_display(self, obj):
        return obj.eligibility(timezone.localdate()).eligible

    actions = ['mark_verified']

    @admin.action(description='Mark selected donors as verified')
    def mark_verified(self, request, queryset):
        updated = queryset.update(is_verified=True)
        self.message_user(request, f'{updated} donor(s) marked as verified.')


@admin.register(DonationHistory)
class DonationHistoryAdmin(admin.ModelAdmin):
    list_display  = ['donor', 'emergency_request', 'date_donated', 'units_donated']
    list_filter   = ['date_donated']
    search_fields = ['donor__full_name', 'donor__donor_code']
    ordering      = ['-date_donated']
    readonly_fields = ['created_at']
