"""Celery tasks for the employees app."""
import logging

from celery import shared_task

logger = logging.getLogger("visatrack")


@shared_task(name="employees.tasks.refresh_visa_statuses")
def refresh_visa_statuses():
    """Keep stored visa statuses in step with the calendar.

    Runs daily via Celery Beat, shortly after midnight.
    """
    from employees.services import refresh_visa_statuses as refresh

    count = refresh()
    logger.info("refresh_visa_statuses completed: %d employee(s) updated.", count)
    return f"{count} employee(s) updated"
