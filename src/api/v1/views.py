"""ViewSets and views for the VisaTrack API v1."""
import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from django.http import HttpResponse
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import APIException, ValidationError
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from api.v1.permissions import IsAdmin, IsAdminOrReadOnly
from api.v1.serializers import (
    DocumentUploadSerializer,
    EmployeeDocumentSerializer,
    EmployeeImportSerializer,
    EmployeeListSerializer,
    EmployeeSerializer,
    MeSerializer,
    NotificationLogSerializer,
    NotificationPreferenceSerializer,
    NotificationSerializer,
    NotificationTemplateSerializer,
)
from employees.models import Employee, EmployeeDocument
from employees.services import (
    build_import_template,
    delete_employee_document,
    import_employees_from_excel,
    own_records_filter,
    upload_employee_document,
)
from notifications.models import (
    Notification,
    NotificationLog,
    NotificationPreference,
    NotificationTemplate,
)
from storage.b2 import StorageProviderError, get_storage_client

logger = logging.getLogger("visatrack")


class StorageUnavailable(APIException):
    status_code = status.HTTP_502_BAD_GATEWAY
    default_detail = "Storage provider request failed."
    default_code = "storage_unavailable"


# ---------------------------------------------------------------------------
# Employees
# ---------------------------------------------------------------------------

class EmployeeViewSet(viewsets.ModelViewSet):
    """
    Admins manage every employee record; an employee profile reads only
    its own record, matched by e-mail.
    """

    queryset = Employee.objects.all()
    permission_classes = [IsAuthenticated, IsAdminOrReadOnly]
    filterset_fields = ['visa_status', 'is_active', 'company_id', 'nationality', 'department']
    search_fields = ['employee_id', 'name', 'email', 'passport_number', 'company_name']
    ordering_fields = ['name', 'employee_id', 'visa_expiry_date', 'created_at']

    def get_serializer_class(self):
        if self.action == 'list':
            return EmployeeListSerializer
        return EmployeeSerializer

    def get_queryset(self):
        qs = super().get_queryset()
        user = self.request.user
        if not user.is_admin:
            qs = qs.filter(own_records_filter(user))
        return qs

    def perform_create(self, serializer):
        serializer.save(created_by=self.request.user, updated_by=self.request.user)

    def perform_update(self, serializer):
        serializer.save(updated_by=self.request.user)

    @action(
        detail=True,
        methods=['get', 'post'],
        url_path='documents',
        parser_classes=[MultiPartParser, FormParser, JSONParser],
    )
    def documents(self, request, pk=None):
        """GET lists the employee's documents; POST uploads a new one (admin)."""
        employee = self.get_object()

        if request.method == 'GET':
            docs = employee.documents.all()
            page = self.paginate_queryset(docs)
            if page is not None:
                return self.get_paginated_response(EmployeeDocumentSerializer(page, many=True).data)
            return Response(EmployeeDocumentSerializer(docs, many=True).data)

        serializer = DocumentUploadSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)
        upload = data.pop('file')

        try:
            document = upload_employee_document(
                employee,
                file_name=upload.name,
                file_bytes=upload.read(),
                mime_type=getattr(upload, 'content_type', '') or '',
                uploaded_by=request.user,
                **data,
            )
        except DjangoValidationError as exc:
            raise ValidationError({'file': exc.messages})
        except StorageProviderError as exc:
            raise StorageUnavailable(str(exc))

        return Response(EmployeeDocumentSerializer(document).data, status=status.HTTP_201_CREATED)

    @action(
        detail=False,
        methods=['post'],
        url_path='import',
        parser_classes=[MultiPartParser, FormParser],
        permission_classes=[IsAuthenticated, IsAdmin],
    )
    def import_excel(self, request):
        """Bulk create or update employees from an .xlsx sheet; reports errors per row."""
        serializer = EmployeeImportSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            result = import_employees_from_excel(serializer.validated_data['file'], user=request.user)
        except DjangoValidationError as exc:
            raise ValidationError({'file': exc.messages})
        return Response(result)

    @action(
        detail=False,
        methods=['get'],
        url_path='import-template',
        permission_classes=[IsAuthenticated, IsAdmin],
    )
    def import_template(self, request):
        response = HttpResponse(
            build_import_template(),
            content_type='application/vnd.openxmlformats-officedocument.spreadsheetml.sheet',
        )
        response['Content-Disposition'] = 'attachment; filename="employee_import_template.xlsx"'
        return response


# ---------------------------------------------------------------------------
# Documents
# ---------------------------------------------------------------------------

class EmployeeDocumentViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.UpdateModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    """
    Document metadata.  Uploads go through
    ``POST /employees/{id}/documents/``; deleting a document also removes
    the stored object.
    """

    serializer_class = EmployeeDocumentSerializer
    queryset = EmployeeDocument.objects.select_related('employee')
    permission_classes = [IsAuthenticated, IsAdminOrReadOnly]
    filterset_fields = ['employee', 'document_type']
    search_fields = ['file_name', 'document_number', 'employee__name', 'employee__employee_id']
    ordering_fields = ['created_at', 'expiry_date']

    def get_queryset(self):
        qs = super().get_queryset()
        user = self.request.user
        if not user.is_admin:
            qs = qs.filter(own_records_filter(user, prefix="employee__"))
        return qs

    def perform_destroy(self, instance):
        try:
            delete_employee_document(instance)
        except StorageProviderError as exc:
            raise StorageUnavailable(str(exc))

    @action(detail=True, methods=['get'], url_path='download-link')
    def download_link(self, request, pk=None):
        """Return a one-hour download URL for the document."""
        document = self.get_object()
        try:
            url = get_storage_client().get_download_link(document.file_name)
        except StorageProviderError as exc:
            raise StorageUnavailable(str(exc))
        return Response({'url': url})


# ---------------------------------------------------------------------------
# Notifications
# ---------------------------------------------------------------------------

class NotificationTemplateViewSet(viewsets.ModelViewSet):
    serializer_class = NotificationTemplateSerializer
    queryset = NotificationTemplate.objects.all()
    permission_classes = [IsAuthenticated, IsAdmin]
    filterset_fields = ['type', 'urgency', 'is_active']
    search_fields = ['name', 'subject']


class NotificationLogViewSet(viewsets.ReadOnlyModelViewSet):
    """Audit trail of dispatch attempts. Rows are created by the pipeline only."""

    serializer_class = NotificationLogSerializer
    queryset = NotificationLog.objects.select_related('employee')
    permission_classes = [IsAuthenticated, IsAdmin]
    filterset_fields = ['urgency', 'email_sent', 'manual_trigger', 'employee']
    search_fields = ['employee_code', 'employee__name']
    ordering_fields = ['created_at', 'days_until_expiry']


class NotificationViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet,
):
    """The caller's own in-app notifications."""

    serializer_class = NotificationSerializer
    queryset = Notification.objects.all()
    permission_classes = [IsAuthenticated]
    filterset_fields = ['read', 'category', 'type']
    ordering_fields = ['created_at']

    def get_queryset(self):
        return super().get_queryset().filter(user=self.request.user)

    @action(detail=True, methods=['post'], url_path='mark-read')
    def mark_read(self, request, pk=None):
        notification = self.get_object()
        notification.mark_as_read()
        return Response(NotificationSerializer(notification).data)

    @action(detail=False, methods=['post'], url_path='mark-all-read')
    def mark_all_read(self, request):
        updated = self.get_queryset().filter(read=False).update(read=True)
        return Response({'detail': f'{updated} notification(s) marked as read.'})


class NotificationPreferenceView(APIView):
    """
    GET /api/v1/notification-preferences/me/ - the caller's preferences.
    PATCH /api/v1/notification-preferences/me/ - update channels or categories.
    """

    permission_classes = [IsAuthenticated]

    def _preference(self, request):
        preference, _ = NotificationPreference.objects.get_or_create(user=request.user)
        return preference

    def get(self, request):
        return Response(NotificationPreferenceSerializer(self._preference(request)).data)

    def patch(self, request):
        serializer = NotificationPreferenceSerializer(
            self._preference(request), data=request.data, partial=True,
        )
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(serializer.data)


# ---------------------------------------------------------------------------
# Me
# ---------------------------------------------------------------------------

class MeView(APIView):
    """
    GET /api/v1/auth/me/ - return the authenticated user's profile.
    PATCH /api/v1/auth/me/ - update full_name, avatar_url.
    """

    permission_classes = [IsAuthenticated]

    def get(self, request):
        serializer = MeSerializer(request.user)
        return Response(serializer.data)

    def patch(self, request):
        serializer = MeSerializer(request.user, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(serializer.data)
