import pytest

from notifications.models import Notification, NotificationPreference


@pytest.fixture
def own_notification(employee_user):
    return Notification.objects.create(user=employee_user, message="Passport copy missing", category="document_missing")


@pytest.mark.django_db
class TestNotificationsApi:
    def test_lists_only_own(self, employee_client, own_notification, admin_user):
        Notification.objects.create(user=admin_user, message="Not yours")

        response = employee_client.get("/api/v1/notifications/")

        assert response.status_code == 200
        assert [row["id"] for row in response.json()["results"]] == [str(own_notification.pk)]

    def test_mark_read(self, employee_client, own_notification):
        response = employee_client.post(f"/api/v1/notifications/{own_notification.pk}/mark-read/")

        assert response.status_code == 200
        assert response.json()["read"] is True
        own_notification.refresh_from_db()
        assert own_notification.read is True

    def test_cannot_mark_someone_elses(self, admin_client, own_notification):
        response = admin_client.post(f"/api/v1/notifications/{own_notification.pk}/mark-read/")
        assert response.status_code == 404

    def test_mark_all_read(self, employee_client, employee_user, own_notification):
        Notification.objects.create(user=employee_user, message="Second")

        response = employee_client.post("/api/v1/notifications/mark-all-read/")

        assert response.status_code == 200
        assert not Notification.objects.filter(user=employee_user, read=False).exists()


@pytest.mark.django_db
class TestNotificationPreferences:
    def test_created_with_defaults(self, employee_user):
        preference = NotificationPreference.objects.get(user=employee_user)
        assert preference.email and preference.push and preference.in_app
        assert preference.categories == ["visa_expiry", "document_missing", "system"]

    def test_update_own_preferences(self, employee_client, employee_user):
        response = employee_client.patch(
            "/api/v1/notification-preferences/me/",
            {"push": False, "categories": ["system"]},
            format="json",
        )

        assert response.status_code == 200
        preference = NotificationPreference.objects.get(user=employee_user)
        assert preference.push is False
        assert preference.categories == ["system"]

    def test_unknown_category_rejected(self, employee_client):
        response = employee_client.patch(
            "/api/v1/notification-preferences/me/",
            {"categories": ["weather"]},
            format="json",
        )
        assert response.status_code == 400


@pytest.mark.django_db
class TestEmailTemplatesApi:
    def test_admin_creates_template(self, admin_client):
        response = admin_client.post(
            "/api/v1/email-templates/",
            {
                "name": "Visa 7 days",
                "type": "visa_reminder",
                "urgency": "high",
                "subject": "Visa for {{employee_name}}",
                "html_body": "<p>{{days_remaining}} days</p>",
            },
            format="json",
        )
        assert response.status_code == 201

    def test_employee_forbidden(self, employee_client):
        assert employee_client.get("/api/v1/email-templates/").status_code == 403
