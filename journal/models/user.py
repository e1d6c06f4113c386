"""
User model with profile fields and the follower graph.
"""

import re

from django.contrib.auth.models import AbstractUser, BaseUserManager
from django.core.validators import MaxLengthValidator, MinLengthValidator, RegexValidator
from django.db import models

from .base import TimeStampedModel, UniqueSlugMixin

USERNAME_VALIDATORS = [
    MinLengthValidator(3),
    RegexValidator(
        r"^[a-z0-9_-]+$",
        "Username can only contain lowercase letters, numbers, hyphens, and underscores",
    ),
]


class UserManager(BaseUserManager):
    use_in_migrations = True

    def _create_user(self, email, password, **extra_fields):
        if not email:
            raise ValueError("Email is required")
        email = self.normalize_email(email).lower()
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_user(self, email, password=None, **extra_fields):
        extra_fields.setdefault("is_staff", False)
        extra_fields.setdefault("is_superuser", False)
        return self._create_user(email, password, **extra_fields)

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)
        extra_fields.setdefault("role", User.Role.ADMIN)
        return self._create_user(email, password, **extra_fields)


class User(TimeStampedModel, AbstractUser, UniqueSlugMixin):
    """
    Authors and readers. Users sign in with their email address; the
    username is the public handle and is derived from the display name when
    not supplied.
    """

    class Role(models.TextChoices):
        USER = "user", "User"
        ADMIN = "admin", "Admin"

    username = models.CharField(
        max_length=30,
        unique=True,
        blank=True,
        validators=USERNAME_VALIDATORS,
        help_text="Public handle. Generated from the name if blank.",
    )
    email = models.EmailField(unique=True)
    name = models.CharField(
        max_length=50, validators=[MinLengthValidator(2)], help_text="Display name."
    )
    bio = models.TextField(blank=True, validators=[MaxLengthValidator(500)])
    avatar = models.URLField(blank=True)
    role = models.CharField(max_length=10, choices=Role.choices, default=Role.USER)
    is_verified = models.BooleanField(default=False)

    # --- Social links ---
    twitter = models.URLField(blank=True)
    linkedin = models.URLField(blank=True)
    website = models.URLField(blank=True)

    following = models.ManyToManyField(
        "self", symmetrical=False, blank=True, related_name="followers"
    )

    objects = UserManager()

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = ["name"]

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["name"], name="journal_user_name_idx"),
        ]

    def __str__(self) -> str:
        return self.username or self.email

    def save(self, *args, **kwargs):
        if self.email:
            self.email = self.email.strip().lower()
        if self.username:
            self.username = self.username.strip().lower()
        elif self._state.adding:
            self.username = self._unique_slug(
                self._username_base(self.name), field="username", separator=""
            )
        super().save(*args, **kwargs)

    @staticmethod
    def _username_base(name: str) -> str:
        base = re.sub(r"[^a-z0-9]", "", (name or "").lower())[:20]
        if not base:
            return "user"
        return base if len(base) >= 3 else f"{base}user"

    @property
    def is_admin(self) -> bool:
        return self.role == self.Role.ADMIN or self.is_superuser

    @property
    def social_links(self) -> dict:
        return {
            "twitter": self.twitter,
            "linkedin": self.linkedin,
            "website": self.website,
        }

    def is_following(self, other) -> bool:
        return self.following.filter(pk=other.pk).exists()
