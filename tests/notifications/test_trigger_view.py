from unittest import mock

import pytest
from django.core import mail

from notifications.models import NotificationLog

TRIGGER_URL = "/send-visa-notifications"


@pytest.mark.django_db
class TestTriggerAccess:
    def test_anonymous_rejected(self, api_client):
        response = api_client.post(TRIGGER_URL, {}, format="json")
        assert response.status_code in (401, 403)

    def test_employee_rejected(self, employee_client):
        response = employee_client.post(TRIGGER_URL, {}, format="json")
        assert response.status_code == 403

    def test_wrong_scheduler_token_rejected(self, api_client):
        response = api_client.post(
            TRIGGER_URL, {}, format="json", HTTP_X_SCHEDULER_TOKEN="wrong",
        )
        assert response.status_code in (401, 403)

    def test_scheduler_token_accepted(self, api_client, settings):
        response = api_client.post(
            TRIGGER_URL, {}, format="json",
            HTTP_X_SCHEDULER_TOKEN=settings.VISA_SCHEDULER_TOKEN,
        )
        assert response.status_code == 200

    def test_empty_token_setting_disables_token_access(self, api_client, settings):
        settings.VISA_SCHEDULER_TOKEN = ""
        response = api_client.post(TRIGGER_URL, {}, format="json", HTTP_X_SCHEDULER_TOKEN="")
        assert response.status_code in (401, 403)


@pytest.mark.django_db
class TestTriggerRun:
    def test_nothing_to_send(self, admin_client, make_employee):
        make_employee(days=12)

        response = admin_client.post(TRIGGER_URL, {}, format="json")

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "No visa expiry notifications needed at this time"
        assert body["results"] == []

    def test_scheduled_run_summary(self, admin_client, make_employee):
        make_employee(days=1)
        make_employee(days=7)
        make_employee(days=9)

        response = admin_client.post(TRIGGER_URL, {}, format="json")

        body = response.json()
        assert body["summary"]["total"] == 2
        assert body["summary"]["successful"] == 2
        assert body["summary"]["manual_trigger"] is False
        assert body["summary"]["by_urgency"]["critical"] == {"sent": 1, "failed": 0}
        assert {r["urgency"] for r in body["results"]} == {"critical", "high"}
        assert NotificationLog.objects.count() == 2

    def test_interval_limits_to_one_day_count(self, admin_client, make_employee):
        make_employee(days=7)
        make_employee(days=30)

        response = admin_client.post(TRIGGER_URL, {"interval": 30}, format="json")

        results = response.json()["results"]
        assert [r["days_until_expiry"] for r in results] == [30]

    def test_manual_single_employee(self, admin_client, make_employee):
        target = make_employee(days=45)
        make_employee(days=7)

        response = admin_client.post(
            TRIGGER_URL,
            {"manual": True, "employeeId": target.employee_id},
            format="json",
        )

        results = response.json()["results"]
        assert [r["employee_id"] for r in results] == [target.employee_id]
        assert mail.outbox[0].subject.startswith("[MANUAL] ")
        assert NotificationLog.objects.get().manual_trigger is True

    def test_fatal_error_returns_500(self, admin_client):
        with mock.patch(
            "notifications.views.run_visa_notifications",
            side_effect=RuntimeError("database unavailable"),
        ):
            response = admin_client.post(TRIGGER_URL, {}, format="json")

        assert response.status_code == 500
        body = response.json()
        assert body["success"] is False
        assert body["error"] == "database unavailable"
        assert "timestamp" in body
