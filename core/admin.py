"""
Django admin registrations for the core models.

Hooks accounts, profiles, blood requests and the audit trail into
Django's built‑in admin so that staff can inspect and correct data via
the ``/admin/`` URL.
"""

from django.contrib import admin

from .models import User, Profile, BloodRequest, AuditEvent


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ('email', 'username', 'is_staff', 'is_active', 'date_joined')
    exclude = ('password',)
    list_filter = ('is_staff', 'is_active')
    search_fields = ('email', 'username')
    ordering = ('email',)


@admin.register(Profile)
class ProfileAdmin(admin.ModelAdmin):
    list_display = ('name', 'type', 'blood_type', 'contact', 'user', 'created_at')
    list_filter = ('type', 'blood_type')
    search_fields = ('name', 'contact', 'address', 'user__email')
    raw_id_fields = ('user',)


@admin.register(BloodRequest)
class BloodRequestAdmin(admin.ModelAdmin):
    list_display = ('id', 'hospital', 'blood_type', 'units_needed', 'urgency_level', 'status', 'created_at')
    list_filter = ('status', 'urgency_level', 'blood_type')
    search_fields = ('hospital__name', 'description')
    raw_id_fields = ('hospital',)


@admin.register(AuditEvent)
class AuditEventAdmin(admin.ModelAdmin):
    list_display = ('action', 'user', 'object_type', 'object_id', 'created_at')
    list_filter = ('action', 'object_type')
    search_fields = ('user__email', 'action')
    readonly_fields = ('user', 'action', 'object_type', 'object_id', 'detail', 'created_at')
