"""
Admin interface for staff profiles.
"""

from django.contrib import admin
from .models import StaffProfile


@admin.register(StaffProfile)
class StaffProfileAdmin(admin.ModelAdmin):
    list_display = ['user', 'display_name', 'role', 'created_at']
    list_filter = ['role']
    search_fields = ['user__username', 'user__email', 'display_name']
    readonly_fields = ['id', 'created_at', 'updated_at']
    raw_id_fields = ['user']
