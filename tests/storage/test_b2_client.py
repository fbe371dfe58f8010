from unittest import mock

import pytest
import requests

from storage.b2 import B2StorageClient, MissingFieldError, StorageProviderError, UploadResult

AUTH = {
    "apiUrl": "https://api005.backblazeb2.com",
    "downloadUrl": "https://f005.backblazeb2.com",
    "authorizationToken": "account-token",
}


def _response(payload, status_code=200):
    resp = mock.Mock()
    resp.status_code = status_code
    resp.json.return_value = payload
    if status_code >= 400:
        resp.raise_for_status.side_effect = requests.HTTPError(f"{status_code} Client Error")
    else:
        resp.raise_for_status.return_value = None
    return resp


@pytest.fixture
def session():
    return mock.Mock(spec=requests.Session)


@pytest.fixture
def client(session):
    return B2StorageClient(
        key_id="key-id-secret",
        application_key="application-key-secret",
        bucket_id="bucket-123",
        bucket_name="visatrack-docs",
        session=session,
    )


class TestUpload:
    def test_upload_flow(self, client, session):
        session.request.side_effect = [
            _response(AUTH),
            _response({"uploadUrl": "https://pod-000.backblaze.com/upload", "authorizationToken": "upload-token"}),
            _response({"fileId": "4_z_file", "fileName": "docs/a b.pdf"}),
        ]

        result = client.upload("docs/a b.pdf", b"hello", "application/pdf")

        assert result == UploadResult(file_id="4_z_file", file_name="docs/a b.pdf")
        auth_call, url_call, upload_call = session.request.call_args_list
        assert auth_call.args == ("GET", "https://api.backblazeb2.com/b2api/v2/b2_authorize_account")
        assert auth_call.kwargs["auth"] == ("key-id-secret", "application-key-secret")
        assert url_call.kwargs["json"] == {"bucketId": "bucket-123"}
        assert url_call.kwargs["headers"] == {"Authorization": "account-token"}
        headers = upload_call.kwargs["headers"]
        assert upload_call.args == ("POST", "https://pod-000.backblaze.com/upload")
        assert headers["Authorization"] == "upload-token"
        assert headers["X-Bz-File-Name"] == "docs/a%20b.pdf"
        assert headers["X-Bz-Content-Sha1"] == "do_not_verify"
        assert headers["Content-Type"] == "application/pdf"
        assert upload_call.kwargs["data"] == b"hello"

    def test_default_mime_type(self, client, session):
        session.request.side_effect = [
            _response(AUTH),
            _response({"uploadUrl": "https://pod/upload", "authorizationToken": "t"}),
            _response({"fileId": "id", "fileName": "x.bin"}),
        ]

        client.upload("x.bin", b"\x00")

        assert session.request.call_args_list[2].kwargs["headers"]["Content-Type"] == "application/octet-stream"

    @pytest.mark.parametrize("name,data,field", [("", b"x", "fileName"), ("a.pdf", b"", "fileData")])
    def test_missing_fields_fail_before_network(self, client, session, name, data, field):
        with pytest.raises(MissingFieldError) as excinfo:
            client.upload(name, data)

        assert excinfo.value.field == field
        session.request.assert_not_called()

    def test_provider_error(self, client, session):
        session.request.side_effect = [_response({"code": "unauthorized"}, status_code=401)]

        with pytest.raises(StorageProviderError):
            client.upload("a.pdf", b"x")

    def test_network_error(self, client, session):
        session.request.side_effect = requests.ConnectionError("unreachable")

        with pytest.raises(StorageProviderError):
            client.upload("a.pdf", b"x")


class TestDownloadLink:
    def test_link_contains_token_not_credentials(self, client, session):
        session.request.side_effect = [
            _response(AUTH),
            _response({"authorizationToken": "download-token"}),
        ]

        url = client.get_download_link("employees/EMP001/passport/1_p.pdf")

        assert url == (
            "https://f005.backblazeb2.com/file/visatrack-docs/employees/EMP001/passport/1_p.pdf"
            "?Authorization=download-token"
        )
        for secret in ("key-id-secret", "application-key-secret", "account-token"):
            assert secret not in url

    def test_authorization_scoped_to_file(self, client, session):
        session.request.side_effect = [
            _response(AUTH),
            _response({"authorizationToken": "download-token"}),
        ]

        client.get_download_link("a.pdf")

        grant_call = session.request.call_args_list[1]
        assert grant_call.args[1] == "https://api005.backblazeb2.com/b2api/v2/b2_get_download_authorization"
        assert grant_call.kwargs["json"] == {
            "bucketId": "bucket-123",
            "fileNamePrefix": "a.pdf",
            "validDurationInSeconds": 3600,
        }

    def test_missing_name(self, client, session):
        with pytest.raises(MissingFieldError):
            client.get_download_link("")
        session.request.assert_not_called()


class TestDelete:
    def test_delete_file_version(self, client, session):
        session.request.side_effect = [_response(AUTH), _response({"fileId": "id", "fileName": "a.pdf"})]

        client.delete("a.pdf", "id")

        call = session.request.call_args_list[1]
        assert call.args[1] == "https://api005.backblazeb2.com/b2api/v2/b2_delete_file_version"
        assert call.kwargs["json"] == {"fileName": "a.pdf", "fileId": "id"}
