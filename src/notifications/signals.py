"""Signals for the notifications app."""
from django.conf import settings
from django.db.models.signals import post_save
from django.dispatch import receiver

from notifications.models import NotificationPreference


@receiver(post_save, sender=settings.AUTH_USER_MODEL)
def create_notification_preference(sender, instance, created, **kwargs):
    """Give every new profile the default notification preferences."""
    if created:
        NotificationPreference.objects.get_or_create(user=instance)
