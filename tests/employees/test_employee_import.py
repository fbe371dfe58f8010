from datetime import date, datetime, timedelta
from io import BytesIO

import openpyxl
import pytest
from django.core.exceptions import ValidationError
from django.core.files.uploadedfile import SimpleUploadedFile

from employees.models import Employee, VisaStatus
from employees.services import IMPORT_COLUMNS, build_import_template, import_employees_from_excel


def _row(employee_id="EMP100", **overrides):
    values = {
        "employee_id": employee_id,
        "name": "Ravi Kumar",
        "trade": "Electrician",
        "nationality": "Indian",
        "date_of_birth": "15-06-1990",
        "mobile_number": 971501234567,
        "home_phone_number": None,
        "email": "ravi@test.com",
        "company_id": "CUBS",
        "company_name": "CUBS Technical",
        "join_date": "01-02-2020",
        "visa_expiry_date": "31-12-2030",
        "passport_number": "P1234567",
    }
    values.update(overrides)
    return [values[column] for column in IMPORT_COLUMNS]


def _build_excel_file(rows):
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.append(IMPORT_COLUMNS)
    for row in rows:
        ws.append(row)
    content = BytesIO()
    wb.save(content)
    content.seek(0)
    return content


@pytest.mark.django_db
class TestImportEmployees:
    def test_import_creates_employee(self, admin_user):
        result = import_employees_from_excel(_build_excel_file([_row()]), user=admin_user)

        assert result == {"created": 1, "updated": 0, "errors": 0, "error_details": []}
        employee = Employee.objects.get(employee_id="EMP100")
        assert employee.name == "Ravi Kumar"
        assert employee.mobile_number == "971501234567"
        assert employee.date_of_birth == date(1990, 6, 15)
        assert employee.visa_expiry_date == date(2030, 12, 31)
        assert employee.visa_status == VisaStatus.ACTIVE
        assert employee.created_by == admin_user

    def test_bad_row_reported_and_others_imported(self):
        file = _build_excel_file([
            _row("EMP100"),
            _row("EMP101", email="not-an-email"),
            _row("EMP102", visa_expiry_date="2030/12/31"),
            _row("EMP103", passport_number=None),
            _row("EMP104"),
        ])

        result = import_employees_from_excel(file)

        assert result["created"] == 2
        assert result["errors"] == 3
        assert result["error_details"][0].startswith("Row 3:")
        assert "not-an-email" in result["error_details"][0]
        assert "visa_expiry_date" in result["error_details"][1]
        assert "passport_number" in result["error_details"][2]
        assert set(Employee.objects.values_list("employee_id", flat=True)) == {"EMP100", "EMP104"}

    def test_existing_employee_updated(self, make_employee, today):
        make_employee(employee_id="EMP100", name="Old Name", days=5)

        result = import_employees_from_excel(_build_excel_file([_row("EMP100")]))

        assert result["updated"] == 1
        employee = Employee.objects.get(employee_id="EMP100")
        assert employee.name == "Ravi Kumar"
        assert employee.visa_status == VisaStatus.ACTIVE

    def test_excel_date_cells_and_expiring_visa(self, today):
        expiry = datetime.combine(today + timedelta(days=10), datetime.min.time())

        import_employees_from_excel(_build_excel_file([_row(visa_expiry_date=expiry)]))

        employee = Employee.objects.get()
        assert employee.visa_expiry_date == expiry.date()
        assert employee.visa_status == VisaStatus.EXPIRY

    def test_duplicate_id_in_file(self):
        result = import_employees_from_excel(_build_excel_file([_row("EMP100"), _row("EMP100")]))

        assert result["created"] == 1
        assert result["errors"] == 1
        assert "Duplicate" in result["error_details"][0]

    def test_blank_rows_skipped(self):
        result = import_employees_from_excel(_build_excel_file([_row(), [None] * len(IMPORT_COLUMNS)]))

        assert result["created"] == 1
        assert result["errors"] == 0

    def test_unreadable_file(self):
        with pytest.raises(ValidationError):
            import_employees_from_excel(BytesIO(b"not a workbook"))

    def test_template_has_header_row(self):
        wb = openpyxl.load_workbook(BytesIO(build_import_template()))

        assert [cell.value for cell in wb.active[1]] == IMPORT_COLUMNS


def _upload(content, name="employees.xlsx"):
    return SimpleUploadedFile(
        name,
        content,
        content_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    )


@pytest.mark.django_db
class TestImportEndpoint:
    url = "/api/v1/employees/import/"

    def test_admin_imports(self, admin_client):
        upload = _upload(_build_excel_file([_row(), _row("EMP101", name=None)]).getvalue())

        response = admin_client.post(self.url, {"file": upload}, format="multipart")

        assert response.status_code == 200
        body = response.json()
        assert body["created"] == 1
        assert body["errors"] == 1
        assert body["error_details"][0].startswith("Row 3:")

    def test_employee_forbidden(self, employee_client):
        upload = _upload(_build_excel_file([_row()]).getvalue())

        response = employee_client.post(self.url, {"file": upload}, format="multipart")

        assert response.status_code == 403
        assert not Employee.objects.exists()

    def test_rejects_non_xlsx(self, admin_client):
        response = admin_client.post(
            self.url, {"file": _upload(b"a,b\n", name="employees.csv")}, format="multipart",
        )

        assert response.status_code == 400
        assert "file" in response.json()

    def test_rejects_corrupt_workbook(self, admin_client):
        response = admin_client.post(self.url, {"file": _upload(b"garbage")}, format="multipart")

        assert response.status_code == 400

    def test_template_download(self, admin_client, employee_client):
        response = admin_client.get("/api/v1/employees/import-template/")

        assert response.status_code == 200
        assert response["Content-Disposition"].endswith('employee_import_template.xlsx"')
        assert employee_client.get("/api/v1/employees/import-template/").status_code == 403
