from django.contrib import admin
from .models import Profile, ProfileTag, Certification, PayrollSettings, WorkHistory, PayrollRecord


class ProfileTagInline(admin.TabularInline):
    model = ProfileTag
    extra = 0


@admin.register(Profile)
class ProfileAdmin(admin.ModelAdmin):
    list_display = ['id', 'first_name', 'last_name', 'role', 'total_flight_hours', 'is_available']
    list_filter = ['role', 'is_available']
    search_fields = ['first_name', 'last_name', 'email']
    readonly_fields = ['total_flight_hours']
    inlines = [ProfileTagInline]


@admin.register(Certification)
class CertificationAdmin(admin.ModelAdmin):
    list_display = ['name', 'profile', 'issue_date', 'expiry_date', 'verification_status']
    list_filter = ['verification_status']
    search_fields = ['name', 'certificate_number']


@admin.register(PayrollSettings)
class PayrollSettingsAdmin(admin.ModelAdmin):
    list_display = ['profile', 'payment_method', 'preferred_currency', 'payment_schedule']


@admin.register(WorkHistory)
class WorkHistoryAdmin(admin.ModelAdmin):
    list_display = ['profile', 'employer_name', 'position_title', 'start_date', 'end_date', 'flight_total_hours']
    search_fields = ['employer_name', 'position_title']
    readonly_fields = ['flight_total_hours']


@admin.register(PayrollRecord)
class PayrollRecordAdmin(admin.ModelAdmin):
    list_display = ['id', 'profile', 'start_date', 'end_date', 'net_amount', 'currency', 'status']
    list_filter = ['status', 'currency']
