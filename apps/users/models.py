"""User domain models for VenueMenu.

The marketplace distinguishes two roles, artists and venues. Each role
owns a profile (see `apps.profiles`) and sees a different side of the
booking flows. Login is by email; repeated failed logins lock the account
for a short period.
"""

from __future__ import annotations

from typing import Any

from django.conf import settings  # type: ignore
from django.contrib.auth.models import AbstractUser, BaseUserManager  # type: ignore
from django.db import models  # type: ignore
from django.utils import timezone  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore


class CustomUserManager(BaseUserManager):
    """User manager that uses email as the login."""

    use_in_migrations = True

    def _create_user(self, email: str, password: str | None, **extra_fields: Any):
        if not email:
            raise ValueError("Email is required to create a user.")
        email = self.normalize_email(email)

        user = self.model(email=email, **extra_fields)
        if password:
            user.set_password(password)
        else:
            user.set_unusable_password()
        user.save(using=self._db)
        return user

    def create_user(self, email: str, password: str | None = None, **extra_fields: Any):
        extra_fields.setdefault("is_staff", False)
        extra_fields.setdefault("is_superuser", False)
        return self._create_user(email, password, **extra_fields)

    def create_superuser(self, email: str, password: str | None = None, **extra_fields: Any):
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)
        extra_fields.setdefault("role", "")

        if extra_fields.get("is_staff") is not True:
            raise ValueError("Superuser must have is_staff=True.")
        if extra_fields.get("is_superuser") is not True:
            raise ValueError("Superuser must have is_superuser=True.")

        return self._create_user(email, password, **extra_fields)


class User(AbstractUser):
    """Marketplace account with a role and login lockout state."""

    class Role(models.TextChoices):
        ARTIST = "artist", _("Artist")
        VENUE = "venue", _("Venue")

    username = models.CharField(
        _("Display name"),
        max_length=150,
        blank=True,
        help_text=_("Optional, shown in conversations and notifications."),
    )
    email = models.EmailField(_("Email"), unique=True)
    role = models.CharField(
        _("Role"),
        max_length=20,
        choices=Role.choices,
        blank=True,
    )
    failed_login_attempts = models.PositiveIntegerField(default=0)
    locked_until = models.DateTimeField(_("Locked until"), null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = CustomUserManager()

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS: list[str] = []

    class Meta:
        verbose_name = _("User")
        verbose_name_plural = _("Users")
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"{self.email} ({self.role or 'staff'})"

    # --- Domain helpers -----------------------------------------------------
    @property
    def is_artist(self) -> bool:
        return self.role == self.Role.ARTIST

    @property
    def is_venue(self) -> bool:
        return self.role == self.Role.VENUE

    @property
    def display_name(self) -> str:
        """Profile name when there is one, then display name, then the email's local part."""
        if self.is_artist and hasattr(self, "artist_profile"):
            return self.artist_profile.stage_name
        if self.is_venue and hasattr(self, "venue_profile"):
            return self.venue_profile.venue_name
        return self.username or self.email.split("@")[0]

    @property
    def is_locked(self) -> bool:
        return bool(self.locked_until and self.locked_until > timezone.now())

    def lock(self, minutes: int | None = None) -> None:
        minutes = minutes or getattr(settings, "LOGIN_LOCK_MINUTES", 15)
        self.locked_until = timezone.now() + timezone.timedelta(minutes=minutes)
        self.failed_login_attempts = 0
        self.save(update_fields=["locked_until", "failed_login_attempts"])

    def unlock(self) -> None:
        self.locked_until = None
        self.failed_login_attempts = 0
        self.save(update_fields=["locked_until", "failed_login_attempts"])

    def register_failed_attempt(self, threshold: int | None = None) -> None:
        threshold = threshold or getattr(settings, "LOGIN_MAX_FAILED_ATTEMPTS", 5)
        self.failed_login_attempts += 1
        if self.failed_login_attempts >= threshold:
            self.lock()
            return
        self.save(update_fields=["failed_login_attempts"])
