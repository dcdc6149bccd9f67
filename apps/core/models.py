"""
Core models for Newsdesk project.
Base classes and shared functionality.
"""

import uuid
from django.conf import settings
from django.db import models
from django.utils import timezone


class BaseModel(models.Model):
    """
    Abstract base model with common fields for all Newsdesk models.
    Provides UUID primary key and timestamp tracking.
    """
    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        verbose_name='ID',
        help_text='Unique identifier (UUID)'
    )

    created_at = models.DateTimeField(
        default=timezone.now,
        editable=False,
        db_index=True,
        verbose_name='Created At',
        help_text='Timestamp when record was created'
    )

    updated_at = models.DateTimeField(
        auto_now=True,
        verbose_name='Updated At',
        help_text='Timestamp when record was last updated'
    )

    class Meta:
        abstract = True
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.__class__.__name__} ({self.id})"


class StaffProfile(BaseModel):
    """
    Newsroom role for a dashboard user.
    Linked 1:1 with Django User model.
    """

    class Role(models.TextChoices):
        ADMIN = 'admin', 'Administrator'
        EDITOR = 'editor', 'Editor'
        VIEWER = 'viewer', 'Viewer'

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='staff_profile',
        verbose_name='User',
        help_text='The associated Django user account'
    )

    role = models.CharField(
        max_length=20,
        choices=Role.choices,
        default=Role.EDITOR,
        db_index=True,
        verbose_name='Role',
        help_text='Role determining dashboard permissions'
    )

    display_name = models.CharField(
        max_length=150,
        blank=True,
        verbose_name='Display Name',
        help_text='Byline shown on published articles'
    )

    class Meta:
        db_table = 'staff_profiles'
        verbose_name = 'Staff Profile'
        verbose_name_plural = 'Staff Profiles'

    def __str__(self):
        return f"{self.user.username} ({self.role})"

    @property
    def is_admin(self):
        return self.role == self.Role.ADMIN

    @property
    def can_edit(self):
        return self.role in (self.Role.ADMIN, self.Role.EDITOR)

