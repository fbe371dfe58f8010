"""Models for the notifications app."""
from django.conf import settings
from django.db import models

from core.exceptions import ImmutableRecordError
from core.models import TimeStampedModel


class Urgency(models.TextChoices):
    CRITICAL = "critical", "Critical"
    HIGH = "high", "High"
    NORMAL = "normal", "Normal"


class Category(models.TextChoices):
    VISA_EXPIRY = "visa_expiry", "Visa expiry"
    DOCUMENT_MISSING = "document_missing", "Document missing"
    SYSTEM = "system", "System"
    GENERAL = "general", "General"


def default_categories():
    return [Category.VISA_EXPIRY, Category.DOCUMENT_MISSING, Category.SYSTEM]


# ---------------------------------------------------------------------------
# E-mail templates
# ---------------------------------------------------------------------------

class NotificationTemplate(TimeStampedModel):
    """Subject and HTML body with ``{{ placeholder }}`` fields.

    Updated in place; there is no version history.
    """

    class Type(models.TextChoices):
        VISA_REMINDER = "visa_reminder", "Visa reminder"
        DOCUMENT_REMINDER = "document_reminder", "Document reminder"
        GENERAL = "general", "General"

    name = models.CharField("name", max_length=150, unique=True)
    type = models.CharField(
        "type",
        max_length=30,
        choices=Type.choices,
        default=Type.VISA_REMINDER,
        db_index=True,
    )
    urgency = models.CharField(
        "urgency",
        max_length=10,
        choices=Urgency.choices,
        blank=True,
        default="",
    )
    subject = models.CharField("subject", max_length=255)
    html_body = models.TextField("HTML body")
    is_active = models.BooleanField("active", default=True)

    class Meta:
        db_table = "email_templates"
        verbose_name = "e-mail template"
        ordering = ["type", "name"]

    def __str__(self):
        return self.name


# ---------------------------------------------------------------------------
# Audit log
# ---------------------------------------------------------------------------

class NotificationLogQuerySet(models.QuerySet):
    """Bulk writes are refused like instance writes."""

    def update(self, **kwargs):
        raise ImmutableRecordError("Notification log entries cannot be modified.")

    def delete(self):
        raise ImmutableRecordError("Notification log entries cannot be deleted.")


class NotificationLog(TimeStampedModel):
    """One row per dispatch attempt. Rows are never modified once written.

    Clearing the employee link when an employee is deleted goes through the
    base manager and is the only write allowed after creation.
    """

    class Type(models.TextChoices):
        VISA_EXPIRY = "visa_expiry", "Visa expiry"

    type = models.CharField(
        "type",
        max_length=30,
        choices=Type.choices,
        default=Type.VISA_EXPIRY,
    )
    employee = models.ForeignKey(
        "employees.Employee",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="notification_logs",
        verbose_name="employee",
    )
    employee_code = models.CharField("employee ID", max_length=50, blank=True, default="")
    days_until_expiry = models.IntegerField("days until expiry", null=True, blank=True)
    urgency = models.CharField("urgency", max_length=10, choices=Urgency.choices)
    sent_to = models.JSONField("sent to", default=list, blank=True)
    email_sent = models.BooleanField("e-mail sent", default=False, db_index=True)
    errors = models.JSONField("errors", default=list, blank=True)
    manual_trigger = models.BooleanField("manual trigger", default=False)
    template_used = models.CharField("template used", max_length=150, blank=True, default="")

    objects = NotificationLogQuerySet.as_manager()

    class Meta:
        db_table = "notification_logs"
        verbose_name = "notification log"
        ordering = ["-created_at"]

    def __str__(self):
        outcome = "sent" if self.email_sent else "failed"
        return f"{self.employee_code} [{self.urgency}] {outcome}"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ImmutableRecordError("Notification log entries cannot be modified.")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ImmutableRecordError("Notification log entries cannot be deleted.")


# ---------------------------------------------------------------------------
# In-app notifications
# ---------------------------------------------------------------------------

class Notification(TimeStampedModel):
    """In-app notification addressed to one profile."""

    class Type(models.TextChoices):
        INFO = "info", "Info"
        WARNING = "warning", "Warning"
        ERROR = "error", "Error"
        SUCCESS = "success", "Success"

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="notifications",
        verbose_name="user",
    )
    type = models.CharField("type", max_length=20, choices=Type.choices, default=Type.INFO)
    message = models.TextField("message")
    read = models.BooleanField("read", default=False, db_index=True)
    category = models.CharField(
        "category",
        max_length=30,
        choices=Category.choices,
        default=Category.GENERAL,
    )
    metadata = models.JSONField("metadata", default=dict, blank=True)

    class Meta:
        db_table = "notifications"
        verbose_name = "notification"
        ordering = ["-created_at"]

    def __str__(self):
        return f"[{self.get_type_display()}] {self.message[:50]}"

    def mark_as_read(self):
        if not self.read:
            self.read = True
            self.save(update_fields=["read", "updated_at"])


class NotificationPreference(models.Model):
    """Per-profile delivery channels and subscribed categories."""

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        primary_key=True,
        related_name="notification_preference",
        verbose_name="user",
    )
    email = models.BooleanField("e-mail", default=True)
    push = models.BooleanField("push", default=True)
    in_app = models.BooleanField("in-app", default=True)
    categories = models.JSONField("categories", default=default_categories, blank=True)
    created_at = models.DateTimeField("created at", auto_now_add=True)
    updated_at = models.DateTimeField("updated at", auto_now=True)

    class Meta:
        db_table = "notification_preferences"
        verbose_name = "notification preference"

    def __str__(self):
        return f"Preferences for {self.user}"

    def allows(self, category, channel="in_app"):
        return bool(getattr(self, channel, False)) and category in (self.categories or [])
