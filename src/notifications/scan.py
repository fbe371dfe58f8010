"""Find employees whose visa expiry calls for a reminder."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable, Sequence

from django.utils import timezone

from employees.models import Employee
from notifications.models import Urgency

DEFAULT_THRESHOLDS = (1, 7, 30)


@dataclass(frozen=True)
class VisaMatch:
    employee: Employee
    urgency: str
    days_remaining: int


def urgency_for(days_remaining: int, thresholds: Sequence[int]) -> str:
    """Map a day count onto a tier using the sorted thresholds.

    ``<= t0`` is critical, ``<= t1`` is high, anything else is normal.
    """
    ordered = sorted(set(thresholds))
    if days_remaining <= ordered[0]:
        return Urgency.CRITICAL
    if len(ordered) > 1 and days_remaining <= ordered[1]:
        return Urgency.HIGH
    return Urgency.NORMAL


def scan_expiring_visas(
    thresholds: Iterable[int] = DEFAULT_THRESHOLDS,
    today: date | None = None,
    employee_ids: Iterable[str] | None = None,
    days: Iterable[int] | None = None,
) -> list[VisaMatch]:
    """Return active employees due a visa reminder today.

    An employee is reported when the number of days left equals one of
    *thresholds* (or only *days*, when given), or is below the smallest
    threshold without having expired.  Employees without an expiry date
    and visas that already expired are never reported.

    With *employee_ids* the candidates are limited to those business ids
    and every non-expired visa among them is reported, whatever its day
    count.  Results are ordered by expiry date, then employee id.
    """
    thresholds = sorted(set(thresholds))
    if not thresholds:
        raise ValueError("At least one threshold is required.")
    if today is None:
        today = timezone.localdate()
    match_days = set(days) if days is not None else set(thresholds)

    candidates = Employee.objects.filter(
        is_active=True,
        visa_expiry_date__isnull=False,
        visa_expiry_date__gte=today,
    )
    if employee_ids is not None:
        candidates = candidates.filter(employee_id__in=list(employee_ids))

    matches = []
    for employee in candidates.order_by("visa_expiry_date", "employee_id"):
        days_remaining = (employee.visa_expiry_date - today).days
        if employee_ids is None:
            already_critical = days is None and days_remaining < thresholds[0]
            if days_remaining not in match_days and not already_critical:
                continue
        matches.append(
            VisaMatch(
                employee=employee,
                urgency=urgency_for(days_remaining, thresholds),
                days_remaining=days_remaining,
            )
        )
    return matches
