from unittest import mock

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile

from employees.models import EmployeeDocument
from storage.b2 import StorageProviderError, UploadResult


def _upload(client, employee, name="passport.pdf", content=b"%PDF-1.4 data", **extra):
    data = {
        "file": SimpleUploadedFile(name, content, content_type="application/pdf"),
        "document_type": "passport",
        **extra,
    }
    return client.post(f"/api/v1/employees/{employee.pk}/documents/", data, format="multipart")


@pytest.fixture
def storage_client():
    client = mock.Mock()
    client.upload.side_effect = lambda name, data, mime=None: UploadResult(file_id="4_z123", file_name=name)
    client.get_download_link.return_value = "https://f000.example.com/file/bucket/x?Authorization=tok"
    with mock.patch("employees.services.get_storage_client", return_value=client), \
            mock.patch("api.v1.views.get_storage_client", return_value=client):
        yield client


@pytest.mark.django_db
class TestDocumentUpload:
    def test_admin_upload_records_metadata(self, admin_client, admin_user, make_employee, storage_client):
        employee = make_employee(days=60)

        response = _upload(admin_client, employee, document_number="P1234567")

        assert response.status_code == 201
        body = response.json()
        assert body["storage_id"] == "4_z123"
        assert body["file_name"].startswith(f"employees/{employee.employee_id}/passport/")
        assert body["file_name"].endswith("_passport.pdf")
        document = EmployeeDocument.objects.get()
        assert document.uploaded_by == admin_user
        assert document.file_size == len(b"%PDF-1.4 data")
        assert document.document_number == "P1234567"

    def test_blocked_extension_rejected_without_upload(self, admin_client, make_employee, storage_client):
        employee = make_employee(days=60)

        response = _upload(admin_client, employee, name="payload.exe")

        assert response.status_code == 400
        storage_client.upload.assert_not_called()
        assert EmployeeDocument.objects.count() == 0

    def test_provider_failure_is_bad_gateway(self, admin_client, make_employee, storage_client):
        employee = make_employee(days=60)
        storage_client.upload.side_effect = StorageProviderError("boom")

        response = _upload(admin_client, employee)

        assert response.status_code == 502
        assert EmployeeDocument.objects.count() == 0

    def test_employee_cannot_upload(self, employee_client, employee_user, make_employee, storage_client):
        employee = make_employee(days=60, email=employee_user.email)

        response = _upload(employee_client, employee)

        assert response.status_code == 403
        storage_client.upload.assert_not_called()


@pytest.mark.django_db
class TestDocumentAccess:
    def _document(self, employee):
        return EmployeeDocument.objects.create(
            employee=employee,
            document_type=EmployeeDocument.DocType.VISA,
            file_name=f"employees/{employee.employee_id}/visa/1_visa.pdf",
            storage_id="4_zabc",
        )

    def test_employee_lists_own_documents_only(self, employee_client, employee_user, make_employee):
        own = self._document(make_employee(days=60, email=employee_user.email))
        self._document(make_employee(days=60))

        response = employee_client.get("/api/v1/documents/")
        assert response.status_code == 200
        ids = [row["id"] for row in response.json()["results"]]
        assert ids == [str(own.pk)]

    def test_download_link(self, employee_client, employee_user, make_employee, storage_client):
        document = self._document(make_employee(days=60, email=employee_user.email))

        response = employee_client.get(f"/api/v1/documents/{document.pk}/download-link/")

        assert response.status_code == 200
        assert "Authorization=" in response.json()["url"]
        storage_client.get_download_link.assert_called_once_with(document.file_name)

    def test_admin_delete_removes_stored_object(self, admin_client, make_employee, storage_client):
        document = self._document(make_employee(days=60))

        response = admin_client.delete(f"/api/v1/documents/{document.pk}/")

        assert response.status_code == 204
        storage_client.delete.assert_called_once_with(document.file_name, "4_zabc")
        assert EmployeeDocument.objects.count() == 0
