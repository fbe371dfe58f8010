"""Employee and employee document models."""
from __future__ import annotations

from datetime import date, timedelta

from django.conf import settings
from django.db import models
from django.utils import timezone

from core.models import TimeStampedModel

# Visas expiring within this many days are flagged as EXPIRY.
VISA_EXPIRY_WINDOW_DAYS = 30


class VisaStatus(models.TextChoices):
    ACTIVE = "ACTIVE", "Active"
    EXPIRY = "EXPIRY", "Expiring soon"
    INACTIVE = "INACTIVE", "Inactive"


def calculate_visa_status(expiry_date: date | None, today: date | None = None) -> str:
    """Derive the visa status for an expiry date.

    A missing or past expiry date is INACTIVE, a date within the expiry
    window (inclusive) is EXPIRY, anything later is ACTIVE.  The result
    depends only on its arguments.
    """
    if today is None:
        today = timezone.localdate()
    window = getattr(settings, "VISA_EXPIRY_WINDOW_DAYS", VISA_EXPIRY_WINDOW_DAYS)

    if expiry_date is None or expiry_date < today:
        return VisaStatus.INACTIVE
    if expiry_date <= today + timedelta(days=window):
        return VisaStatus.EXPIRY
    return VisaStatus.ACTIVE


# ---------------------------------------------------------------------------
# Employee
# ---------------------------------------------------------------------------

class Employee(TimeStampedModel):
    """Employee record tracked for visa and document compliance."""

    employee_id = models.CharField("employee ID", max_length=50, unique=True)
    name = models.CharField("name", max_length=255)
    trade = models.CharField("trade", max_length=150, blank=True, default="")
    nationality = models.CharField("nationality", max_length=100, blank=True, default="")
    date_of_birth = models.DateField("date of birth", null=True, blank=True)
    mobile_number = models.CharField("mobile number", max_length=30, blank=True, default="")
    home_phone_number = models.CharField("home phone number", max_length=30, blank=True, default="")
    email = models.EmailField("e-mail", blank=True, default="")

    company_id = models.CharField("company ID", max_length=50, db_index=True)
    company_name = models.CharField("company name", max_length=255)
    department = models.CharField("department", max_length=150, blank=True, default="")
    join_date = models.DateField("join date", null=True, blank=True)

    visa_expiry_date = models.DateField("visa expiry date", null=True, blank=True, db_index=True)
    visa_status = models.CharField(
        "visa status",
        max_length=10,
        choices=VisaStatus.choices,
        default=VisaStatus.INACTIVE,
        editable=False,
    )
    passport_number = models.CharField("passport number", max_length=50, blank=True, default="")
    status = models.CharField("status", max_length=50, blank=True, default="Active")
    is_active = models.BooleanField("active", default=True)

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
        verbose_name="created by",
    )
    updated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
        verbose_name="updated by",
    )

    class Meta:
        db_table = "employees"
        verbose_name = "employee"
        verbose_name_plural = "employees"
        ordering = ["name", "employee_id"]
        indexes = [
            models.Index(fields=["is_active", "status"], name="idx_employees_status"),
        ]

    def __str__(self):
        return f"{self.name} ({self.employee_id})"

    def save(self, *args, **kwargs):
        self.visa_status = calculate_visa_status(self.visa_expiry_date)
        update_fields = kwargs.get("update_fields")
        if update_fields is not None and "visa_expiry_date" in update_fields:
            kwargs["update_fields"] = {*update_fields, "visa_status"}
        super().save(*args, **kwargs)

    @property
    def days_until_visa_expiry(self):
        if self.visa_expiry_date is None:
            return None
        return (self.visa_expiry_date - timezone.localdate()).days


# ---------------------------------------------------------------------------
# Documents
# ---------------------------------------------------------------------------

class EmployeeDocument(TimeStampedModel):
    """Metadata for a file stored in the object store on behalf of an employee.

    Only the object name and provider file id are kept; the bytes live in
    the bucket.
    """

    class DocType(models.TextChoices):
        PASSPORT = "passport", "Passport"
        VISA = "visa", "Visa"
        EMIRATES_ID = "emirates_id", "Emirates ID"
        LABOUR_CARD = "labour_card", "Labour card"
        CONTRACT = "contract", "Contract"
        CERTIFICATE = "certificate", "Certificate"
        OTHER = "other", "Other"

    employee = models.ForeignKey(
        Employee,
        on_delete=models.CASCADE,
        related_name="documents",
        verbose_name="employee",
    )
    document_type = models.CharField(
        "document type",
        max_length=30,
        choices=DocType.choices,
        default=DocType.OTHER,
        db_index=True,
    )
    file_name = models.CharField("file name", max_length=512)
    storage_id = models.CharField("storage file ID", max_length=255, blank=True, default="")
    file_size = models.PositiveIntegerField("file size", null=True, blank=True)
    mime_type = models.CharField("MIME type", max_length=100, blank=True, default="")
    expiry_date = models.DateField("expiry date", null=True, blank=True)
    notes = models.TextField("notes", blank=True, default="")
    document_number = models.CharField("document number", max_length=100, blank=True, default="")
    issuing_authority = models.CharField("issuing authority", max_length=255, blank=True, default="")
    uploaded_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
        verbose_name="uploaded by",
    )

    class Meta:
        db_table = "employee_documents"
        verbose_name = "employee document"
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.employee} - {self.get_document_type_display()}"
