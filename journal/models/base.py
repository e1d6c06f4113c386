"""
Base models and mixins for the journal app.
"""

from django.db import models


class TimeStampedModel(models.Model):
    """Abstract base model that adds created_at and updated_at timestamps."""

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class UniqueSlugMixin:
    """
    Mixin that provides a method to generate a unique value for a slug-like field.

    Expects the model to have the field named by ``field`` (default 'slug').
    """

    def _unique_slug(self, base: str, field: str = "slug", separator: str = "-") -> str:
        """Generate a unique value, appending a counter if needed."""
        slug = base
        counter = 2

        while self.__class__._default_manager.filter(**{field: slug}).exclude(pk=self.pk).exists():
            slug = f"{base}{separator}{counter}"
            counter += 1

        return slug
