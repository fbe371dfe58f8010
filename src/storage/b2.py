"""
Backblaze B2 client for the native (v2) API.

Operations:
- upload: b2_authorize_account -> b2_get_upload_url -> POST bytes
- get_download_link: b2_authorize_account -> b2_get_download_authorization
- delete: b2_authorize_account -> b2_delete_file_version

Credentials never leave this module: download links only carry the
short-lived, file-scoped download authorization token.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from urllib.parse import quote

import requests
from django.conf import settings

logger = logging.getLogger("visatrack")

DEFAULT_API_URL = "https://api.backblazeb2.com"
DEFAULT_MIME_TYPE = "application/octet-stream"
DOWNLOAD_LINK_TTL_SECONDS = 3600


class StorageError(Exception):
    """Base class for object storage errors."""


class MissingFieldError(StorageError):
    """A required input was empty; raised before any network call."""

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"Missing {field}")


class StorageProviderError(StorageError):
    """The provider rejected a request or could not be reached."""


@dataclass(frozen=True)
class UploadResult:
    file_id: str
    file_name: str


@dataclass(frozen=True)
class _Authorization:
    api_url: str
    download_url: str
    token: str


class B2StorageClient:
    """Thin wrapper over the B2 native API for a single bucket."""

    def __init__(
        self,
        key_id: str,
        application_key: str,
        bucket_id: str,
        bucket_name: str,
        *,
        api_url: str = DEFAULT_API_URL,
        timeout: int = 30,
        download_ttl: int = DOWNLOAD_LINK_TTL_SECONDS,
        session: requests.Session | None = None,
    ):
        self.key_id = key_id
        self.application_key = application_key
        self.bucket_id = bucket_id
        self.bucket_name = bucket_name
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.download_ttl = download_ttl
        self.session = session or requests.Session()

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    def upload(self, file_name: str, file_bytes: bytes, mime_type: str | None = None) -> UploadResult:
        """Store *file_bytes* under *file_name* in a single request."""
        if not file_name:
            raise MissingFieldError("fileName")
        if not file_bytes:
            raise MissingFieldError("fileData")

        auth = self._authorize()
        target = self._call(
            "POST",
            f"{auth.api_url}/b2api/v2/b2_get_upload_url",
            headers={"Authorization": auth.token},
            json={"bucketId": self.bucket_id},
        )
        uploaded = self._call(
            "POST",
            target["uploadUrl"],
            headers={
                "Authorization": target["authorizationToken"],
                "X-Bz-File-Name": quote(file_name, safe="/"),
                "Content-Type": mime_type or DEFAULT_MIME_TYPE,
                "Content-Length": str(len(file_bytes)),
                "X-Bz-Content-Sha1": "do_not_verify",
            },
            data=file_bytes,
        )
        logger.info("Uploaded %s to bucket %s (%d bytes)", file_name, self.bucket_name, len(file_bytes))
        return UploadResult(file_id=uploaded["fileId"], file_name=uploaded["fileName"])

    def get_download_link(self, file_name: str) -> str:
        """Return a time-limited URL granting read access to *file_name* only."""
        if not file_name:
            raise MissingFieldError("fileName")

        auth = self._authorize()
        grant = self._call(
            "POST",
            f"{auth.api_url}/b2api/v2/b2_get_download_authorization",
            headers={"Authorization": auth.token},
            json={
                "bucketId": self.bucket_id,
                "fileNamePrefix": file_name,
                "validDurationInSeconds": self.download_ttl,
            },
        )
        return (
            f"{auth.download_url}/file/{self.bucket_name}/{quote(file_name, safe='/')}"
            f"?Authorization={grant['authorizationToken']}"
        )

    def delete(self, file_name: str, file_id: str) -> None:
        """Delete one stored version of *file_name*."""
        if not file_name:
            raise MissingFieldError("fileName")
        if not file_id:
            raise MissingFieldError("fileId")

        auth = self._authorize()
        self._call(
            "POST",
            f"{auth.api_url}/b2api/v2/b2_delete_file_version",
            headers={"Authorization": auth.token},
            json={"fileName": file_name, "fileId": file_id},
        )
        logger.info("Deleted %s from bucket %s", file_name, self.bucket_name)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _authorize(self) -> _Authorization:
        data = self._call(
            "GET",
            f"{self.api_url}/b2api/v2/b2_authorize_account",
            auth=(self.key_id, self.application_key),
        )
        return _Authorization(
            api_url=data["apiUrl"],
            download_url=data["downloadUrl"],
            token=data["authorizationToken"],
        )

    def _call(self, method: str, url: str, **kwargs) -> dict:
        try:
            resp = self.session.request(method, url, timeout=self.timeout, **kwargs)
            resp.raise_for_status()
            return resp.json()
        except requests.RequestException as exc:
            logger.error("B2 request %s %s failed: %s", method, url.split("?")[0], exc)
            raise StorageProviderError(f"Storage provider request failed: {exc}") from exc
        except ValueError as exc:
            raise StorageProviderError("Storage provider returned an invalid response.") from exc


def get_storage_client(session: requests.Session | None = None) -> B2StorageClient:
    """Build a client from the ``B2_*`` settings."""
    return B2StorageClient(
        key_id=settings.B2_KEY_ID,
        application_key=settings.B2_APPLICATION_KEY,
        bucket_id=settings.B2_BUCKET_ID,
        bucket_name=settings.B2_BUCKET_NAME,
        api_url=getattr(settings, "B2_API_URL", DEFAULT_API_URL),
        timeout=getattr(settings, "B2_REQUEST_TIMEOUT", 30),
        download_ttl=getattr(settings, "B2_DOWNLOAD_LINK_TTL_SECONDS", DOWNLOAD_LINK_TTL_SECONDS),
        session=session,
    )
