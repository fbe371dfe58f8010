"""Custom DRF permissions for the VisaTrack API."""
import hmac

from django.conf import settings
from rest_framework.permissions import SAFE_METHODS, BasePermission

SCHEDULER_TOKEN_HEADER = "X-Scheduler-Token"


def _is_admin(user):
    return bool(user and user.is_authenticated and getattr(user, "is_admin", False))


class IsAdmin(BasePermission):
    """Allow access only to profiles with the admin role (or superusers)."""

    message = "Admin role required."

    def has_permission(self, request, view):
        return _is_admin(request.user)


class IsApprovedProfile(BasePermission):
    """Allow admins and employees; public profiles are awaiting approval."""

    message = "Your profile has not been approved yet."

    def has_permission(self, request, view):
        user = request.user
        if not (user and user.is_authenticated):
            return False
        return _is_admin(user) or user.role == user.Role.EMPLOYEE


class IsAdminOrReadOnly(BasePermission):
    """Approved profiles may read, only admins may write."""

    def has_permission(self, request, view):
        if request.method in SAFE_METHODS:
            return IsApprovedProfile().has_permission(request, view)
        return _is_admin(request.user)


class HasSchedulerToken(BasePermission):
    """Allow machine callers presenting the shared scheduler token.

    The token is read from the ``X-Scheduler-Token`` header and compared
    in constant time with ``settings.VISA_SCHEDULER_TOKEN``.  An empty
    setting disables token access entirely.
    """

    def has_permission(self, request, view):
        expected = getattr(settings, "VISA_SCHEDULER_TOKEN", "") or ""
        presented = request.headers.get(SCHEDULER_TOKEN_HEADER, "")
        if not expected or not presented:
            return False
        return hmac.compare_digest(presented.encode(), expected.encode())


class IsAdminOrScheduler(BasePermission):
    """Admin profiles or the scheduler may trigger batch jobs."""

    message = "Admin role or scheduler token required."

    def has_permission(self, request, view):
        return _is_admin(request.user) or HasSchedulerToken().has_permission(request, view)
