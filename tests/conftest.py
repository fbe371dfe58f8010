from datetime import timedelta

import pytest
from django.core.cache import cache
from django.utils import timezone
from rest_framework.test import APIClient

from accounts.models import User
from employees.models import Employee


@pytest.fixture(autouse=True)
def _clear_cache():
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def today():
    return timezone.localdate()


@pytest.fixture
def admin_user(db):
    return User.objects.create_user(
        email="admin@test.com",
        password="testpass123",
        full_name="Admin User",
        role=User.Role.ADMIN,
    )


@pytest.fixture
def employee_user(db):
    return User.objects.create_user(
        email="worker@test.com",
        password="testpass123",
        full_name="Worker User",
        role=User.Role.EMPLOYEE,
    )


@pytest.fixture
def public_user(db):
    return User.objects.create_user(
        email="visitor@test.com",
        password="testpass123",
        full_name="Visitor User",
        role=User.Role.PUBLIC,
    )


@pytest.fixture
def admin_client(admin_user):
    client = APIClient()
    client.force_authenticate(user=admin_user)
    return client


@pytest.fixture
def employee_client(employee_user):
    client = APIClient()
    client.force_authenticate(user=employee_user)
    return client


@pytest.fixture
def make_employee(db, today):
    """Create an employee; ``days`` sets the visa expiry relative to today."""
    counter = {"n": 0}

    def _make(days=None, **kwargs):
        counter["n"] += 1
        defaults = {
            "employee_id": f"EMP{counter['n']:03d}",
            "name": f"Employee {counter['n']}",
            "email": f"employee{counter['n']}@test.com",
            "company_id": "CUBS",
            "company_name": "CUBS Technical",
            "department": "Operations",
            "nationality": "Indian",
        }
        if days is not None:
            defaults["visa_expiry_date"] = today + timedelta(days=days)
        defaults.update(kwargs)
        return Employee.objects.create(**defaults)

    return _make
