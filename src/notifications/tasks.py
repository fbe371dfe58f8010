"""Celery tasks for the notifications app."""
import logging

from celery import shared_task

logger = logging.getLogger("visatrack")


def run_visa_notifications(*, manual=False, employee_ids=None, days=None, today=None):
    """Scan for expiring visas and dispatch reminders in one pass.

    Shared by the scheduled task and the HTTP trigger.  Returns the
    :class:`~notifications.dispatch.DispatchSummary`.
    """
    from notifications.dispatch import NotificationConfig, VisaNotificationService
    from notifications.scan import scan_expiring_visas

    config = NotificationConfig.from_settings()
    matches = scan_expiring_visas(
        thresholds=config.thresholds,
        today=today,
        employee_ids=employee_ids,
        days=days,
    )
    logger.info("Found %d visa(s) requiring notification", len(matches))
    service = VisaNotificationService(config)
    return service.dispatch(matches, manual=manual, today=today)


@shared_task(name="notifications.tasks.send_visa_notifications")
def send_visa_notifications():
    """Daily visa expiry reminders, run via Celery Beat."""
    summary = run_visa_notifications()
    logger.info(
        "send_visa_notifications completed: %d sent, %d failed.",
        summary.successful, summary.failures,
    )
    return f"{summary.successful} sent, {summary.failures} failed"
