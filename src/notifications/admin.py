"""Admin configuration for the notifications app."""
from django.contrib import admin

from notifications.models import (
    Notification,
    NotificationLog,
    NotificationPreference,
    NotificationTemplate,
)


@admin.register(NotificationTemplate)
class NotificationTemplateAdmin(admin.ModelAdmin):
    list_display = ("name", "type", "urgency", "is_active", "updated_at")
    list_filter = ("type", "urgency", "is_active")
    search_fields = ("name", "subject")


@admin.register(NotificationLog)
class NotificationLogAdmin(admin.ModelAdmin):
    """Read-only view of the dispatch audit trail."""

    list_display = (
        "created_at",
        "employee_code",
        "urgency",
        "days_until_expiry",
        "email_sent",
        "manual_trigger",
        "template_used",
    )
    list_filter = ("urgency", "email_sent", "manual_trigger", "created_at")
    search_fields = ("employee_code", "employee__name")
    date_hierarchy = "created_at"
    ordering = ["-created_at"]
    list_select_related = ("employee",)

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(Notification)
class NotificationAdmin(admin.ModelAdmin):
    list_display = ("user", "type", "category", "read", "created_at")
    list_filter = ("type", "category", "read")
    search_fields = ("message", "user__email")
    list_select_related = ("user",)


@admin.register(NotificationPreference)
class NotificationPreferenceAdmin(admin.ModelAdmin):
    list_display = ("user", "email", "push", "in_app")
    list_filter = ("email", "push", "in_app")
