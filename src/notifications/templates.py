"""Placeholder rendering for visa reminder e-mails.

Templates use ``{{ field }}`` placeholders.  Only the fields of
:class:`VisaReminderContext` are substituted; any other placeholder is
left in the output untouched.
"""
from __future__ import annotations

import re
from dataclasses import asdict, dataclass
from datetime import date

from django.utils import timezone
from django.utils.html import escape

from notifications.models import Urgency

PLACEHOLDER_RE = re.compile(r"\{\{\s*([A-Za-z_][A-Za-z0-9_]*)\s*\}\}")
DATE_FORMAT = "%d %b %Y"


@dataclass(frozen=True)
class VisaReminderContext:
    employee_name: str
    employee_id: str
    department: str
    nationality: str
    email: str
    company_name: str
    visa_expiry_date: date
    days_remaining: int
    current_date: date
    urgency: str

    @classmethod
    def for_employee(cls, employee, *, days_remaining, urgency, company_name="", today=None):
        return cls(
            employee_name=employee.name,
            employee_id=employee.employee_id,
            department=employee.department or "",
            nationality=employee.nationality or "",
            email=employee.email or "",
            company_name=employee.company_name or company_name,
            visa_expiry_date=employee.visa_expiry_date,
            days_remaining=days_remaining,
            current_date=today or timezone.localdate(),
            urgency=urgency,
        )

    def as_strings(self) -> dict[str, str]:
        values = {}
        for key, value in asdict(self).items():
            if isinstance(value, date):
                value = value.strftime(DATE_FORMAT)
            values[key] = "" if value is None else str(value)
        return values


def render_template(text: str, context: VisaReminderContext, *, html: bool = True) -> str:
    """Substitute known placeholders in *text*.

    Values are HTML-escaped when *html* is true (bodies); subjects are
    rendered with ``html=False``.
    """
    values = context.as_strings()

    def replace(match):
        key = match.group(1)
        if key not in values:
            return match.group(0)
        return escape(values[key]) if html else values[key]

    return PLACEHOLDER_RE.sub(replace, text)


@dataclass(frozen=True)
class DefaultTemplate:
    name: str
    subject: str
    html_body: str


_DETAILS = """
        <div style="background: {background}; padding: 20px; border-radius: 8px; margin: 20px 0; border-left: 4px solid {color};">
            <p><strong>Employee:</strong> {{{{employee_name}}}}</p>
            <p><strong>Employee ID:</strong> {{{{employee_id}}}}</p>
            <p><strong>Department:</strong> {{{{department}}}}</p>
            <p><strong>Nationality:</strong> {{{{nationality}}}}</p>
            <p><strong>Company:</strong> {{{{company_name}}}}</p>
            <p><strong>Visa Expiry Date:</strong> {{{{visa_expiry_date}}}}</p>
            <p><strong>Days Remaining:</strong> {{{{days_remaining}}}}</p>
        </div>"""

_LAYOUT = """<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px;">
        <h2 style="color: {color};">{heading}</h2>{details}
        <p{message_style}>{message}</p>
        <p style="font-size: 12px; color: #999;">Generated on {{{{current_date}}}}. This is an automated notification, please do not reply.</p>
    </div>"""


def _body(*, color, background, heading, message, emphasise=False):
    details = _DETAILS.format(color=color, background=background)
    message_style = f' style="color: {color}; font-weight: bold;"' if emphasise else ""
    return _LAYOUT.format(
        color=color,
        heading=heading,
        details=details,
        message_style=message_style,
        message=message,
    )


DEFAULT_TEMPLATES = {
    Urgency.CRITICAL: DefaultTemplate(
        name="Visa Expiry - Critical",
        subject="CRITICAL: Visa Expiry Alert - {{employee_name}} ({{days_remaining}} days remaining)",
        html_body=_body(
            color="#dc2626",
            background="#fef2f2",
            heading="CRITICAL: Visa Expiry Alert",
            message="CRITICAL: The visa expires in {{days_remaining}} day(s). Renewal must be completed immediately.",
            emphasise=True,
        ),
    ),
    Urgency.HIGH: DefaultTemplate(
        name="Visa Expiry - Urgent",
        subject="URGENT: Visa Expiry Alert - {{employee_name}} ({{days_remaining}} days remaining)",
        html_body=_body(
            color="#ea580c",
            background="#fff7ed",
            heading="URGENT: Visa Expiry Alert",
            message="URGENT: The visa expires in {{days_remaining}} days. Immediate action required.",
            emphasise=True,
        ),
    ),
    Urgency.NORMAL: DefaultTemplate(
        name="Visa Expiry - Warning",
        subject="Visa Expiry Warning - {{employee_name}} ({{days_remaining}} days remaining)",
        html_body=_body(
            color="#d97706",
            background="#fffbeb",
            heading="Visa Expiry Warning",
            message="The visa will expire in {{days_remaining}} days. Please start the renewal process.",
        ),
    ),
}
