import pytest

from employees.models import Employee, VisaStatus

EMPLOYEES_URL = "/api/v1/employees/"


def _results(response):
    payload = response.json()
    return payload["results"] if isinstance(payload, dict) and "results" in payload else payload


@pytest.mark.django_db
class TestEmployeeAccess:
    def test_anonymous_is_rejected(self, api_client):
        response = api_client.get(EMPLOYEES_URL)
        assert response.status_code in (401, 403)

    def test_admin_lists_all(self, admin_client, make_employee):
        make_employee(days=10)
        make_employee(days=100)

        response = admin_client.get(EMPLOYEES_URL)
        assert response.status_code == 200
        assert len(_results(response)) == 2

    def test_employee_sees_only_own_record(self, employee_client, employee_user, make_employee):
        own = make_employee(days=10, email=employee_user.email.upper())
        make_employee(days=100)

        response = employee_client.get(EMPLOYEES_URL)
        assert response.status_code == 200
        rows = _results(response)
        assert [row["employee_id"] for row in rows] == [own.employee_id]

    def test_employee_cannot_read_other_record(self, employee_client, make_employee):
        other = make_employee(days=100)

        response = employee_client.get(f"{EMPLOYEES_URL}{other.pk}/")
        assert response.status_code == 404

    def test_employee_cannot_create(self, employee_client):
        response = employee_client.post(
            EMPLOYEES_URL,
            {"employee_id": "X1", "name": "X", "company_id": "C", "company_name": "C"},
            format="json",
        )
        assert response.status_code == 403

    def test_public_profile_is_denied(self, public_user, api_client):
        api_client.force_authenticate(user=public_user)
        response = api_client.get(EMPLOYEES_URL)
        assert response.status_code == 403


@pytest.mark.django_db
class TestEmployeeWrites:
    def test_create_computes_visa_status(self, admin_client, admin_user, today):
        response = admin_client.post(
            EMPLOYEES_URL,
            {
                "employee_id": "EMP100",
                "name": "New Hire",
                "company_id": "CUBS",
                "company_name": "CUBS Technical",
                "visa_expiry_date": today.isoformat(),
                "visa_status": VisaStatus.ACTIVE,
            },
            format="json",
        )

        assert response.status_code == 201
        assert response.json()["visa_status"] == VisaStatus.EXPIRY
        employee = Employee.objects.get(employee_id="EMP100")
        assert employee.created_by == admin_user

    def test_duplicate_employee_id_rejected(self, admin_client, make_employee):
        existing = make_employee(days=50)
        response = admin_client.post(
            EMPLOYEES_URL,
            {
                "employee_id": existing.employee_id,
                "name": "Dup",
                "company_id": "CUBS",
                "company_name": "CUBS Technical",
            },
            format="json",
        )
        assert response.status_code == 400

    def test_update_clears_expiry(self, admin_client, make_employee):
        employee = make_employee(days=50)

        response = admin_client.patch(
            f"{EMPLOYEES_URL}{employee.pk}/",
            {"visa_expiry_date": None},
            format="json",
        )
        assert response.status_code == 200
        assert response.json()["visa_status"] == VisaStatus.INACTIVE

    def test_filter_by_visa_status(self, admin_client, make_employee):
        make_employee(days=5)
        make_employee(days=200)

        response = admin_client.get(EMPLOYEES_URL, {"visa_status": VisaStatus.EXPIRY})
        rows = _results(response)
        assert len(rows) == 1
        assert rows[0]["visa_status"] == VisaStatus.EXPIRY
