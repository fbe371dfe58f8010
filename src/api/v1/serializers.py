"""Serializers for the VisaTrack API v1."""
from django.contrib.auth import get_user_model
from rest_framework import serializers
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer

from employees.models import Employee, EmployeeDocument
from notifications.models import (
    Notification,
    NotificationLog,
    NotificationPreference,
    NotificationTemplate,
)

User = get_user_model()


# ---------------------------------------------------------------------------
# Profiles & auth
# ---------------------------------------------------------------------------

class MeSerializer(serializers.ModelSerializer):
    """Serializer for the authenticated user's own profile (GET/PATCH)."""

    class Meta:
        model = User
        fields = [
            'id', 'email', 'full_name', 'avatar_url',
            'role', 'is_active', 'is_superuser',
        ]
        read_only_fields = ['id', 'email', 'role', 'is_active', 'is_superuser']


class CustomTokenObtainPairSerializer(TokenObtainPairSerializer):
    """Extends JWT token response to include user profile data."""

    def validate(self, attrs):
        data = super().validate(attrs)
        data['user'] = MeSerializer(self.user).data
        return data


# ---------------------------------------------------------------------------
# Employees
# ---------------------------------------------------------------------------

class EmployeeListSerializer(serializers.ModelSerializer):
    """Light serializer for lists."""

    class Meta:
        model = Employee
        fields = [
            'id', 'employee_id', 'name', 'company_name', 'department',
            'nationality', 'email', 'visa_expiry_date', 'visa_status',
            'is_active',
        ]
        read_only_fields = fields


class EmployeeSerializer(serializers.ModelSerializer):
    days_until_visa_expiry = serializers.IntegerField(read_only=True)
    document_count = serializers.SerializerMethodField()

    class Meta:
        model = Employee
        fields = [
            'id', 'employee_id', 'name', 'trade', 'nationality',
            'date_of_birth', 'mobile_number', 'home_phone_number', 'email',
            'company_id', 'company_name', 'department', 'join_date',
            'visa_expiry_date', 'visa_status', 'days_until_visa_expiry',
            'passport_number', 'status', 'is_active', 'document_count',
            'created_by', 'updated_by', 'created_at', 'updated_at',
        ]
        read_only_fields = [
            'id', 'visa_status', 'created_by', 'updated_by',
            'created_at', 'updated_at',
        ]

    def get_document_count(self, obj):
        return obj.documents.count()


# ---------------------------------------------------------------------------
# Documents
# ---------------------------------------------------------------------------

class EmployeeDocumentSerializer(serializers.ModelSerializer):
    employee_code = serializers.CharField(source='employee.employee_id', read_only=True)
    employee_name = serializers.CharField(source='employee.name', read_only=True)

    class Meta:
        model = EmployeeDocument
        fields = [
            'id', 'employee', 'employee_code', 'employee_name',
            'document_type', 'file_name', 'storage_id', 'file_size',
            'mime_type', 'expiry_date', 'notes', 'document_number',
            'issuing_authority', 'uploaded_by', 'created_at', 'updated_at',
        ]
        read_only_fields = [
            'id', 'employee', 'file_name', 'storage_id', 'file_size',
            'mime_type', 'uploaded_by', 'created_at', 'updated_at',
        ]


class DocumentUploadSerializer(serializers.Serializer):
    """Multipart upload of one document for an employee."""

    file = serializers.FileField()
    document_type = serializers.ChoiceField(choices=EmployeeDocument.DocType.choices)
    expiry_date = serializers.DateField(required=False, allow_null=True)
    notes = serializers.CharField(required=False, allow_blank=True, default='')
    document_number = serializers.CharField(required=False, allow_blank=True, default='')
    issuing_authority = serializers.CharField(required=False, allow_blank=True, default='')


class EmployeeImportSerializer(serializers.Serializer):
    """Multipart upload of an .xlsx employee sheet."""

    file = serializers.FileField()

    def validate_file(self, value):
        if not value.name.lower().endswith('.xlsx'):
            raise serializers.ValidationError('Only .xlsx files are accepted.')
        return value


# ---------------------------------------------------------------------------
# Notifications
# ---------------------------------------------------------------------------

class NotificationTemplateSerializer(serializers.ModelSerializer):
    class Meta:
        model = NotificationTemplate
        fields = [
            'id', 'name', 'type', 'urgency', 'subject', 'html_body',
            'is_active', 'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']


class NotificationLogSerializer(serializers.ModelSerializer):
    employee_name = serializers.CharField(source='employee.name', read_only=True, default=None)

    class Meta:
        model = NotificationLog
        fields = [
            'id', 'type', 'employee', 'employee_code', 'employee_name',
            'days_until_expiry', 'urgency', 'sent_to', 'email_sent',
            'errors', 'manual_trigger', 'template_used', 'created_at',
        ]
        read_only_fields = fields


class NotificationSerializer(serializers.ModelSerializer):
    class Meta:
        model = Notification
        fields = ['id', 'type', 'message', 'read', 'category', 'metadata', 'created_at']
        read_only_fields = fields


class NotificationPreferenceSerializer(serializers.ModelSerializer):
    categories = serializers.ListField(
        child=serializers.ChoiceField(choices=Notification._meta.get_field('category').choices),
        required=False,
    )

    class Meta:
        model = NotificationPreference
        fields = ['email', 'push', 'in_app', 'categories', 'updated_at']
        read_only_fields = ['updated_at']
