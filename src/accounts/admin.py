from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from .models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """Admin configuration for the profile (custom User) model."""

    # ------------------------------------------------------------------
    # List view
    # ------------------------------------------------------------------
    list_display = (
        "email",
        "full_name",
        "role",
        "approved_by",
        "is_active",
        "is_staff",
        "date_joined",
    )
    list_filter = ("role", "is_active", "is_staff", "is_superuser")
    search_fields = ("email", "full_name")
    ordering = ("full_name", "email")
    actions = ("approve_as_employee", "deactivate_users")

    # ------------------------------------------------------------------
    # Detail / edit view
    # ------------------------------------------------------------------
    fieldsets = (
        (None, {"fields": ("email", "password")}),
        ("Personal info", {"fields": ("full_name", "avatar_url")}),
        (
            "Role and permissions",
            {
                "fields": (
                    "role",
                    "approved_by",
                    "is_active",
                    "is_staff",
                    "is_superuser",
                    "groups",
                    "user_permissions",
                ),
            },
        ),
        ("Important dates", {"fields": ("last_login", "date_joined")}),
    )

    # ------------------------------------------------------------------
    # Add user view
    # ------------------------------------------------------------------
    add_fieldsets = (
        (
            None,
            {
                "classes": ("wide",),
                "fields": ("email", "full_name", "role", "password1", "password2"),
            },
        ),
    )

    readonly_fields = ("date_joined", "last_login")

    @admin.action(description="Approve selected public profiles as employees")
    def approve_as_employee(self, request, queryset):
        queryset.filter(role=User.Role.PUBLIC).update(
            role=User.Role.EMPLOYEE,
            approved_by=request.user,
        )

    @admin.action(description="Deactivate selected profiles")
    def deactivate_users(self, request, queryset):
        queryset.update(is_active=False)
