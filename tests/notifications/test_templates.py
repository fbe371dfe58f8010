from datetime import date
from unittest import mock

from notifications.models import Urgency
from notifications.templates import DEFAULT_TEMPLATES, VisaReminderContext, render_template


def _context(**overrides):
    values = {
        "employee_name": "Ravi Kumar",
        "employee_id": "EMP001",
        "department": "Operations",
        "nationality": "Indian",
        "email": "ravi@test.com",
        "company_name": "CUBS Technical",
        "visa_expiry_date": date(2026, 4, 1),
        "days_remaining": 7,
        "current_date": date(2026, 3, 25),
        "urgency": Urgency.HIGH,
    }
    values.update(overrides)
    return VisaReminderContext(**values)


class TestRenderTemplate:
    def test_known_fields_substituted(self):
        text = "{{employee_name}} ({{ employee_id }}) expires {{visa_expiry_date}} in {{days_remaining}} days"
        assert render_template(text, _context(), html=False) == (
            "Ravi Kumar (EMP001) expires 01 Apr 2026 in 7 days"
        )

    def test_unknown_placeholder_left_untouched(self):
        assert render_template("Hi {{manager_name}} / {{employee_name}}", _context()) == (
            "Hi {{manager_name}} / Ravi Kumar"
        )

    def test_body_values_are_escaped(self):
        rendered = render_template("<p>{{employee_name}}</p>", _context(employee_name="<b>Eve</b>"))
        assert rendered == "<p>&lt;b&gt;Eve&lt;/b&gt;</p>"

    def test_subject_values_are_not_escaped(self):
        rendered = render_template("{{company_name}}", _context(company_name="A & B"), html=False)
        assert rendered == "A & B"


class TestDefaultTemplates:
    def test_one_per_tier(self):
        assert set(DEFAULT_TEMPLATES) == {Urgency.CRITICAL, Urgency.HIGH, Urgency.NORMAL}

    def test_defaults_render_every_placeholder(self):
        for template in DEFAULT_TEMPLATES.values():
            body = render_template(template.html_body, _context())
            subject = render_template(template.subject, _context(), html=False)
            assert "{{" not in body
            assert "{{" not in subject
            assert "Ravi Kumar" in body
            assert "Operations" in body


class TestContextForEmployee:
    def test_current_date_defaults_to_local_date(self, make_employee):
        employee = make_employee(days=7)
        with mock.patch("notifications.templates.timezone.localdate", return_value=date(2026, 3, 25)):
            context = VisaReminderContext.for_employee(employee, days_remaining=7, urgency=Urgency.HIGH)

        assert context.current_date == date(2026, 3, 25)
        assert context.as_strings()["current_date"] == "25 Mar 2026"

    def test_company_name_falls_back_to_config(self, make_employee, today):
        employee = make_employee(days=7, company_name="")
        context = VisaReminderContext.for_employee(
            employee, days_remaining=7, urgency=Urgency.HIGH, company_name="VisaTrack", today=today,
        )

        assert context.company_name == "VisaTrack"
        assert context.current_date == today
