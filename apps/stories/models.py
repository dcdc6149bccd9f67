"""
Web story models for Newsdesk project.
"""

from django.conf import settings
from django.db import models
from apps.core.models import BaseModel


class WebStory(BaseModel):
    """
    A tap-through visual story shown on the public web-stories page.
    """

    title = models.CharField(
        max_length=300,
        verbose_name='Title',
    )

    cover_image = models.URLField(
        max_length=1000,
        verbose_name='Cover Image',
        help_text='Image shown in the stories grid'
    )

    author = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='web_stories',
        verbose_name='Author',
    )

    class Meta:
        db_table = 'web_stories'
        verbose_name = 'Web Story'
        verbose_name_plural = 'Web Stories'
        ordering = ['-created_at']

    def __str__(self):
        return self.title

    def get_absolute_url(self):
        return f"/web-stories/{self.id}"


class StorySlide(BaseModel):
    """
    One slide of a web story. Slides play in creation order.
    """

    story = models.ForeignKey(
        WebStory,
        on_delete=models.CASCADE,
        related_name='slides',
        verbose_name='Story',
    )

    image_url = models.URLField(
        max_length=1000,
        verbose_name='Image URL',
    )

    caption = models.TextField(
        null=True,
        blank=True,
        verbose_name='Caption',
    )

    class Meta:
        db_table = 'story_slides'
        verbose_name = 'Story Slide'
        verbose_name_plural = 'Story Slides'
        ordering = ['created_at']

    def __str__(self):
        return f"Slide of {self.story_id} ({self.id})"
