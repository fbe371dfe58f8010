"""Email utilities for sending HTML emails with plain-text fallback."""

from __future__ import annotations

import logging
from typing import Sequence

from django.conf import settings
from django.core.mail import EmailMultiAlternatives
from django.utils.html import strip_tags

logger = logging.getLogger("visatrack")


def send_html_email(
    *,
    subject: str,
    html_body: str,
    recipient_list: Sequence[str],
    text_body: str | None = None,
    from_email: str | None = None,
    headers: dict | None = None,
    fail_silently: bool = False,
) -> int:
    """Send an already-rendered HTML email with a plain-text fallback.

    When *text_body* is omitted, the plain-text part is derived from
    *html_body* by stripping its tags.

    Returns the number of emails successfully sent (0 or 1).
    """
    sender = from_email or getattr(settings, "DEFAULT_FROM_EMAIL", None)
    if text_body is None:
        text_body = strip_tags(html_body).strip()

    msg = EmailMultiAlternatives(
        subject=subject,
        body=text_body,
        from_email=sender,
        to=list(recipient_list),
        headers=headers or {},
    )
    msg.attach_alternative(html_body, "text/html")
    sent = msg.send(fail_silently=fail_silently)
    logger.debug("Email '%s' sent to %s (sent=%d)", subject, ", ".join(recipient_list), sent)
    return sent
