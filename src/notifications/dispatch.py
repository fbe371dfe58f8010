"""
Send visa reminder e-mails and record every attempt.

``VisaNotificationService`` is built by its entry point (Celery task or
HTTP view) with an explicit :class:`NotificationConfig`.  Each match is
processed independently: a failure is recorded in the audit log and the
batch moves on.  There are no retries.
"""
from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from datetime import date
from typing import Callable, Sequence

from django.conf import settings
from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.core.validators import validate_email
from django.utils import timezone

from core.email import send_html_email
from notifications.models import (
    Category,
    Notification,
    NotificationLog,
    NotificationTemplate,
    Urgency,
)
from notifications.scan import DEFAULT_THRESHOLDS, VisaMatch
from notifications.templates import DEFAULT_TEMPLATES, VisaReminderContext, render_template

logger = logging.getLogger("visatrack")

MANUAL_SUBJECT_PREFIX = "[MANUAL] "


class InvalidRecipientError(ValueError):
    """A recipient address failed validation."""


@dataclass(frozen=True)
class NotificationConfig:
    thresholds: tuple[int, ...] = DEFAULT_THRESHOLDS
    recipients: tuple[str, ...] = ()
    company_name: str = ""
    from_email: str | None = None
    notify_employee: bool = True

    @classmethod
    def from_settings(cls) -> "NotificationConfig":
        return cls(
            thresholds=tuple(getattr(settings, "VISA_NOTIFICATION_THRESHOLDS", DEFAULT_THRESHOLDS)),
            recipients=tuple(getattr(settings, "VISA_NOTIFICATION_RECIPIENTS", ())),
            company_name=getattr(settings, "VISA_NOTIFICATION_COMPANY_NAME", ""),
            from_email=getattr(settings, "DEFAULT_FROM_EMAIL", None),
            notify_employee=getattr(settings, "VISA_NOTIFY_EMPLOYEE", True),
        )


@dataclass
class EmployeeResult:
    employee_id: str
    employee_name: str
    days_until_expiry: int
    urgency: str
    success: bool
    recipients: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    error: str | None = None

    def as_dict(self) -> dict:
        return {
            "employee_id": self.employee_id,
            "employee_name": self.employee_name,
            "days_until_expiry": self.days_until_expiry,
            "urgency": self.urgency,
            "success": self.success,
            "error": self.error,
            "skipped_recipients": list(self.skipped),
        }


@dataclass
class DispatchSummary:
    manual: bool = False
    sent: Counter = field(default_factory=Counter)
    failed: Counter = field(default_factory=Counter)
    results: list[EmployeeResult] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def successful(self) -> int:
        return sum(self.sent.values())

    @property
    def failures(self) -> int:
        return sum(self.failed.values())

    def record(self, result: EmployeeResult) -> None:
        self.results.append(result)
        if result.success:
            self.sent[result.urgency] += 1
        else:
            self.failed[result.urgency] += 1

    def by_urgency(self) -> dict:
        return {
            tier.value: {"sent": self.sent[tier.value], "failed": self.failed[tier.value]}
            for tier in Urgency
        }

    def as_dict(self) -> dict:
        return {
            "total": self.total,
            "successful": self.successful,
            "failed": self.failures,
            "manual_trigger": self.manual,
            "by_urgency": self.by_urgency(),
        }


class VisaNotificationService:
    """Render, send and log one reminder per :class:`VisaMatch`."""

    def __init__(self, config: NotificationConfig, sender: Callable[..., int] = send_html_email):
        self.config = config
        self.sender = sender

    def dispatch(self, matches: Sequence[VisaMatch], manual: bool = False, today: date | None = None) -> DispatchSummary:
        today = today or timezone.localdate()
        summary = DispatchSummary(manual=manual)
        templates = self._load_templates()

        for match in matches:
            summary.record(self._process(match, templates, manual=manual, today=today))

        logger.info(
            "Visa notifications processed: %d sent, %d failed (manual=%s)",
            summary.successful, summary.failures, manual,
        )
        if summary.total:
            self._notify_admins(summary)
        return summary

    # ------------------------------------------------------------------
    # Per-employee processing
    # ------------------------------------------------------------------

    def _process(self, match, templates, *, manual, today) -> EmployeeResult:
        employee = match.employee
        template = templates.get(match.urgency) or DEFAULT_TEMPLATES[Urgency(match.urgency)]
        result = EmployeeResult(
            employee_id=employee.employee_id,
            employee_name=employee.name,
            days_until_expiry=match.days_remaining,
            urgency=match.urgency,
            success=False,
        )

        try:
            result.recipients, result.skipped = self._recipients_for(employee)
            context = VisaReminderContext.for_employee(
                employee,
                days_remaining=match.days_remaining,
                urgency=match.urgency,
                company_name=self.config.company_name,
                today=today,
            )
            subject = render_template(template.subject, context, html=False)
            if manual:
                subject = MANUAL_SUBJECT_PREFIX + subject
            html_body = render_template(template.html_body, context)
            sent = self.sender(
                subject=subject,
                html_body=html_body,
                recipient_list=result.recipients,
                from_email=self.config.from_email,
            )
            result.success = bool(sent)
            if not result.success:
                result.error = "Mail backend reported no message sent."
        except Exception as exc:
            logger.exception("Visa notification failed for employee %s", employee.employee_id)
            result.error = str(exc) or exc.__class__.__name__

        errors = [f"Invalid e-mail address: {address}" for address in result.skipped]
        if result.error:
            errors.append(result.error)

        NotificationLog.objects.create(
            type=NotificationLog.Type.VISA_EXPIRY,
            employee=employee,
            employee_code=employee.employee_id,
            days_until_expiry=match.days_remaining,
            urgency=match.urgency,
            sent_to=result.recipients,
            email_sent=result.success,
            errors=errors,
            manual_trigger=manual,
            template_used=template.name,
        )
        return result

    def _recipients_for(self, employee) -> tuple[list[str], list[str]]:
        """Return ``(valid, skipped)`` addresses for *employee*'s reminder.

        Invalid addresses are skipped so HR still hears about the expiry;
        the attempt only fails when nothing valid is left.
        """
        addresses = list(self.config.recipients)
        if self.config.notify_employee and employee.email:
            addresses.insert(0, employee.email)

        recipients, skipped = [], []
        for address in addresses:
            try:
                validate_email(address)
            except ValidationError:
                logger.warning("Skipping invalid recipient %s for employee %s", address, employee.employee_id)
                skipped.append(address)
                continue
            if address not in recipients:
                recipients.append(address)
        if not recipients:
            raise InvalidRecipientError(
                "No valid recipients." + (f" Invalid: {', '.join(skipped)}" if skipped else "")
            )
        return recipients, skipped

    @staticmethod
    def _load_templates() -> dict:
        templates = {}
        active = NotificationTemplate.objects.filter(
            type=NotificationTemplate.Type.VISA_REMINDER,
            is_active=True,
        ).exclude(urgency="").order_by("-updated_at")
        for template in active:
            templates.setdefault(template.urgency, template)
        return templates

    # ------------------------------------------------------------------
    # Admin summary
    # ------------------------------------------------------------------

    def _notify_admins(self, summary: DispatchSummary) -> int:
        User = get_user_model()
        admins = User.objects.filter(
            role=User.Role.ADMIN,
            is_active=True,
        ).select_related("notification_preference")

        message = (
            f"Visa expiry reminders: {summary.successful} sent, "
            f"{summary.failures} failed out of {summary.total}."
        )
        created = 0
        for admin in admins:
            preference = getattr(admin, "notification_preference", None)
            if preference is not None and not preference.allows(Category.VISA_EXPIRY):
                continue
            Notification.objects.create(
                user=admin,
                type=Notification.Type.WARNING if summary.failures else Notification.Type.INFO,
                message=message,
                category=Category.VISA_EXPIRY,
                metadata=summary.as_dict(),
            )
            created += 1
        return created
