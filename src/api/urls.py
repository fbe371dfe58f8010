"""Main API URL router for /api/v1/."""
from django.urls import path, include
from rest_framework.routers import DefaultRouter

from api.v1 import views as v1_views
from api.auth_views import (
    CookieTokenObtainPairView,
    CookieTokenRefreshView,
    LogoutAPIView,
    CSRFTokenAPIView,
)

router = DefaultRouter()
router.register(r'employees', v1_views.EmployeeViewSet, basename='employee')
router.register(r'documents', v1_views.EmployeeDocumentViewSet, basename='document')
router.register(r'email-templates', v1_views.NotificationTemplateViewSet, basename='email-template')
router.register(r'notification-logs', v1_views.NotificationLogViewSet, basename='notification-log')
router.register(r'notifications', v1_views.NotificationViewSet, basename='notification')


app_name = 'api'
urlpatterns = [
    path('', include(router.urls)),
    path('notification-preferences/me/', v1_views.NotificationPreferenceView.as_view(), name='notification-preferences-me'),

    # Auth endpoints
    path('auth/csrf/', CSRFTokenAPIView.as_view(), name='auth-csrf'),
    path('auth/token/', CookieTokenObtainPairView.as_view(), name='token_obtain_pair'),
    path('auth/token/refresh/', CookieTokenRefreshView.as_view(), name='token_refresh'),
    path('auth/logout/', LogoutAPIView.as_view(), name='auth-logout'),
    path('auth/me/', v1_views.MeView.as_view(), name='auth-me'),
]
