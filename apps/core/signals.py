"""
Signal receivers for core models.
"""

from django.conf import settings
from django.db.models.signals import post_save
from django.dispatch import receiver

from .models import StaffProfile


@receiver(post_save, sender=settings.AUTH_USER_MODEL)
def create_staff_profile(sender, instance, created, **kwargs):
    """Auto-create StaffProfile when a new User is created."""
    if created:
        StaffProfile.objects.get_or_create(
            user=instance,
            defaults={'display_name': instance.get_full_name() or instance.username},
        )
