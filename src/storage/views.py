"""HTTP proxy in front of the object store."""
import base64
import binascii
import logging

from rest_framework import serializers, status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from api.v1.permissions import IsAdmin, IsApprovedProfile
from employees.services import find_readable_document
from storage.b2 import StorageProviderError, get_storage_client

logger = logging.getLogger("visatrack")


class UploadRequestSerializer(serializers.Serializer):
    fileName = serializers.CharField(required=False, allow_blank=True, default="")
    fileData = serializers.CharField(required=False, allow_blank=True, default="")
    mimeType = serializers.CharField(required=False, allow_blank=True, default="")

    def validate(self, attrs):
        if not attrs["fileName"] or not attrs["fileData"]:
            raise serializers.ValidationError({"error": "Missing fileName or fileData"})
        try:
            attrs["file_bytes"] = base64.b64decode(attrs["fileData"], validate=True)
        except (binascii.Error, ValueError):
            raise serializers.ValidationError({"error": "fileData is not valid base64"})
        return attrs


class DownloadRequestSerializer(serializers.Serializer):
    fileName = serializers.CharField(required=False, allow_blank=True, default="")

    def validate(self, attrs):
        if not attrs["fileName"]:
            raise serializers.ValidationError({"error": "Missing fileName"})
        return attrs


def provider_error_response(exc):
    return Response({"error": str(exc)}, status=status.HTTP_502_BAD_GATEWAY)


class UploadView(APIView):
    """POST {fileName, fileData (base64), mimeType?} -> {fileId, fileName}."""

    permission_classes = [IsAuthenticated, IsAdmin]

    def post(self, request):
        serializer = UploadRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            result = get_storage_client().upload(
                data["fileName"],
                data["file_bytes"],
                data["mimeType"] or None,
            )
        except StorageProviderError as exc:
            return provider_error_response(exc)

        return Response({"fileId": result.file_id, "fileName": result.file_name})


class DownloadView(APIView):
    """POST {fileName} -> {url} valid for one hour.

    Admins may ask for any object.  Other profiles only get links for
    documents recorded against their own employee record; anything else,
    bare prefixes included, is a 404.
    """

    permission_classes = [IsAuthenticated, IsApprovedProfile]

    def post(self, request):
        serializer = DownloadRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        file_name = serializer.validated_data["fileName"]

        if not request.user.is_admin and find_readable_document(request.user, file_name) is None:
            logger.warning("Profile %s refused download of %s", request.user.pk, file_name)
            return Response({"error": "File not found"}, status=status.HTTP_404_NOT_FOUND)

        try:
            url = get_storage_client().get_download_link(file_name)
        except StorageProviderError as exc:
            return provider_error_response(exc)

        return Response({"url": url})
