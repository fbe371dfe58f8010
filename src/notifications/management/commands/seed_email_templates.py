"""Write the built-in visa reminder templates into the database."""
from django.core.management.base import BaseCommand
from django.db import transaction

from notifications.models import NotificationTemplate
from notifications.templates import DEFAULT_TEMPLATES


class Command(BaseCommand):
    help = "Create the default visa reminder e-mail templates (one per urgency tier)."

    def add_arguments(self, parser):
        parser.add_argument(
            "--force",
            action="store_true",
            help="Overwrite subject and body of templates that already exist.",
        )

    @transaction.atomic
    def handle(self, *args, **options):
        created = updated = 0
        for urgency, default in DEFAULT_TEMPLATES.items():
            template, was_created = NotificationTemplate.objects.get_or_create(
                name=default.name,
                defaults={
                    "type": NotificationTemplate.Type.VISA_REMINDER,
                    "urgency": urgency,
                    "subject": default.subject,
                    "html_body": default.html_body,
                    "is_active": True,
                },
            )
            if was_created:
                created += 1
            elif options["force"]:
                template.type = NotificationTemplate.Type.VISA_REMINDER
                template.urgency = urgency
                template.subject = default.subject
                template.html_body = default.html_body
                template.save()
                updated += 1

        self.stdout.write(self.style.SUCCESS(f"{created} template(s) created, {updated} updated."))
