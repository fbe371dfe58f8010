import uuid

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Employee",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                ("employee_id", models.CharField(max_length=50, unique=True, verbose_name="employee ID")),
                ("name", models.CharField(max_length=255, verbose_name="name")),
                ("trade", models.CharField(blank=True, default="", max_length=150, verbose_name="trade")),
                ("nationality", models.CharField(blank=True, default="", max_length=100, verbose_name="nationality")),
                ("date_of_birth", models.DateField(blank=True, null=True, verbose_name="date of birth")),
                ("mobile_number", models.CharField(blank=True, default="", max_length=30, verbose_name="mobile number")),
                ("home_phone_number", models.CharField(blank=True, default="", max_length=30, verbose_name="home phone number")),
                ("email", models.EmailField(blank=True, default="", max_length=254, verbose_name="e-mail")),
                ("company_id", models.CharField(db_index=True, max_length=50, verbose_name="company ID")),
                ("company_name", models.CharField(max_length=255, verbose_name="company name")),
                ("department", models.CharField(blank=True, default="", max_length=150, verbose_name="department")),
                ("join_date", models.DateField(blank=True, null=True, verbose_name="join date")),
                ("visa_expiry_date", models.DateField(blank=True, db_index=True, null=True, verbose_name="visa expiry date")),
                (
                    "visa_status",
                    models.CharField(
                        choices=[("ACTIVE", "Active"), ("EXPIRY", "Expiring soon"), ("INACTIVE", "Inactive")],
                        default="INACTIVE",
                        editable=False,
                        max_length=10,
                        verbose_name="visa status",
                    ),
                ),
                ("passport_number", models.CharField(blank=True, default="", max_length=50, verbose_name="passport number")),
                ("status", models.CharField(blank=True, default="Active", max_length=50, verbose_name="status")),
                ("is_active", models.BooleanField(default=True, verbose_name="active")),
                (
                    "created_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="created by",
                    ),
                ),
                (
                    "updated_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="updated by",
                    ),
                ),
            ],
            options={
                "verbose_name": "employee",
                "verbose_name_plural": "employees",
                "db_table": "employees",
                "ordering": ["name", "employee_id"],
                "indexes": [models.Index(fields=["is_active", "status"], name="idx_employees_status")],
            },
        ),
        migrations.CreateModel(
            name="EmployeeDocument",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                (
                    "document_type",
                    models.CharField(
                        choices=[
                            ("passport", "Passport"),
                            ("visa", "Visa"),
                            ("emirates_id", "Emirates ID"),
                            ("labour_card", "Labour card"),
                            ("contract", "Contract"),
                            ("certificate", "Certificate"),
                            ("other", "Other"),
                        ],
                        db_index=True,
                        default="other",
                        max_length=30,
                        verbose_name="document type",
                    ),
                ),
                ("file_name", models.CharField(max_length=512, verbose_name="file name")),
                ("storage_id", models.CharField(blank=True, default="", max_length=255, verbose_name="storage file ID")),
                ("file_size", models.PositiveIntegerField(blank=True, null=True, verbose_name="file size")),
                ("mime_type", models.CharField(blank=True, default="", max_length=100, verbose_name="MIME type")),
                ("expiry_date", models.DateField(blank=True, null=True, verbose_name="expiry date")),
                ("notes", models.TextField(blank=True, default="", verbose_name="notes")),
                ("document_number", models.CharField(blank=True, default="", max_length=100, verbose_name="document number")),
                ("issuing_authority", models.CharField(blank=True, default="", max_length=255, verbose_name="issuing authority")),
                (
                    "employee",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="documents",
                        to="employees.employee",
                        verbose_name="employee",
                    ),
                ),
                (
                    "uploaded_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="uploaded by",
                    ),
                ),
            ],
            options={
                "verbose_name": "employee document",
                "db_table": "employee_documents",
                "ordering": ["-created_at"],
            },
        ),
    ]
