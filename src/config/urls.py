"""URL configuration for VisaTrack."""
from django.conf import settings
from django.contrib import admin
from django.urls import include, path

from core.views import health
from notifications.views import SendVisaNotificationsView

urlpatterns = [
    path("health", health, name="health"),
    # Function-style triggers
    path("send-visa-notifications", SendVisaNotificationsView.as_view(), name="send-visa-notifications"),
    path("backblaze-handler/", include("storage.urls")),
    # API
    path("api/v1/", include("api.urls")),
]

if getattr(settings, "ENABLE_DJANGO_ADMIN", False):
    urlpatterns.insert(0, path("admin/", admin.site.urls))

if settings.DEBUG and "debug_toolbar" in settings.INSTALLED_APPS:
    urlpatterns += [path("__debug__/", include("debug_toolbar.urls"))]
