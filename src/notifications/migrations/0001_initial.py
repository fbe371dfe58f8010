import uuid

import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models

import notifications.models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("employees", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="NotificationTemplate",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                ("name", models.CharField(max_length=150, unique=True, verbose_name="name")),
                (
                    "type",
                    models.CharField(
                        choices=[
                            ("visa_reminder", "Visa reminder"),
                            ("document_reminder", "Document reminder"),
                            ("general", "General"),
                        ],
                        db_index=True,
                        default="visa_reminder",
                        max_length=30,
                        verbose_name="type",
                    ),
                ),
                (
                    "urgency",
                    models.CharField(
                        blank=True,
                        choices=[("critical", "Critical"), ("high", "High"), ("normal", "Normal")],
                        default="",
                        max_length=10,
                        verbose_name="urgency",
                    ),
                ),
                ("subject", models.CharField(max_length=255, verbose_name="subject")),
                ("html_body", models.TextField(verbose_name="HTML body")),
                ("is_active", models.BooleanField(default=True, verbose_name="active")),
            ],
            options={
                "verbose_name": "e-mail template",
                "db_table": "email_templates",
                "ordering": ["type", "name"],
            },
        ),
        migrations.CreateModel(
            name="NotificationLog",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                (
                    "type",
                    models.CharField(
                        choices=[("visa_expiry", "Visa expiry")],
                        default="visa_expiry",
                        max_length=30,
                        verbose_name="type",
                    ),
                ),
                ("employee_code", models.CharField(blank=True, default="", max_length=50, verbose_name="employee ID")),
                ("days_until_expiry", models.IntegerField(blank=True, null=True, verbose_name="days until expiry")),
                (
                    "urgency",
                    models.CharField(
                        choices=[("critical", "Critical"), ("high", "High"), ("normal", "Normal")],
                        max_length=10,
                        verbose_name="urgency",
                    ),
                ),
                ("sent_to", models.JSONField(blank=True, default=list, verbose_name="sent to")),
                ("email_sent", models.BooleanField(db_index=True, default=False, verbose_name="e-mail sent")),
                ("errors", models.JSONField(blank=True, default=list, verbose_name="errors")),
                ("manual_trigger", models.BooleanField(default=False, verbose_name="manual trigger")),
                ("template_used", models.CharField(blank=True, default="", max_length=150, verbose_name="template used")),
                (
                    "employee",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="notification_logs",
                        to="employees.employee",
                        verbose_name="employee",
                    ),
                ),
            ],
            options={
                "verbose_name": "notification log",
                "db_table": "notification_logs",
                "ordering": ["-created_at"],
            },
        ),
        migrations.CreateModel(
            name="Notification",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
                (
                    "type",
                    models.CharField(
                        choices=[("info", "Info"), ("warning", "Warning"), ("error", "Error"), ("success", "Success")],
                        default="info",
                        max_length=20,
                        verbose_name="type",
                    ),
                ),
                ("message", models.TextField(verbose_name="message")),
                ("read", models.BooleanField(db_index=True, default=False, verbose_name="read")),
                (
                    "category",
                    models.CharField(
                        choices=[
                            ("visa_expiry", "Visa expiry"),
                            ("document_missing", "Document missing"),
                            ("system", "System"),
                            ("general", "General"),
                        ],
                        default="general",
                        max_length=30,
                        verbose_name="category",
                    ),
                ),
                ("metadata", models.JSONField(blank=True, default=dict, verbose_name="metadata")),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="notifications",
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="user",
                    ),
                ),
            ],
            options={
                "verbose_name": "notification",
                "db_table": "notifications",
                "ordering": ["-created_at"],
            },
        ),
        migrations.CreateModel(
            name="NotificationPreference",
            fields=[
                (
                    "user",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        primary_key=True,
                        related_name="notification_preference",
                        serialize=False,
                        to=settings.AUTH_USER_MODEL,
                        verbose_name="user",
                    ),
                ),
                ("email", models.BooleanField(default=True, verbose_name="e-mail")),
                ("push", models.BooleanField(default=True, verbose_name="push")),
                ("in_app", models.BooleanField(default=True, verbose_name="in-app")),
                (
                    "categories",
                    models.JSONField(
                        blank=True,
                        default=notifications.models.default_categories,
                        verbose_name="categories",
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="created at")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="updated at")),
            ],
            options={
                "verbose_name": "notification preference",
                "db_table": "notification_preferences",
            },
        ),
    ]
