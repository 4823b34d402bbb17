from django.contrib.auth.models import AbstractUser
from django.db import models
from django.utils.translation import gettext_lazy as _
from guardian.mixins import GuardianUserMixin


class User(GuardianUserMixin, AbstractUser):
    """
    Custom User model with a platform role and Guardian permissions.
    """

    class Role(models.TextChoices):
        ADMIN = "admin", _("Admin")
        ORGANIZER = "organizer", _("Organizer")
        EXHIBITOR = "exhibitor", _("Exhibitor")
        ATTENDEE = "attendee", _("Attendee")

    email = models.EmailField(
        _("email address"),
        unique=True,
        error_messages={"unique": _("A user with that email already exists.")},
    )
    role = models.CharField(
        _("role"),
        max_length=20,
        choices=Role.choices,
        default=Role.ATTENDEE,
        help_text=_("Platform role used by the access policy."),
    )
    company = models.CharField(_("company"), max_length=200, blank=True)
    phone_number = models.CharField(
        _("phone number"),
        max_length=15,
        blank=True,
        help_text=_(
            "Optional phone number in international format (e.g., +1234567890)."
        ),
    )

    class Meta:
        verbose_name = _("user")
        verbose_name_plural = _("users")
        ordering = ["username"]

    def __str__(self):
        return self.username

    def save(self, *args, **kwargs):
        """Ensure email is stored in lowercase."""
        if self.email:
            self.email = self.email.lower()
        super().save(*args, **kwargs)

    def get_full_name(self):
        """Return the first_name plus the last_name, with a space in between."""
        full_name = f"{self.first_name} {self.last_name}".strip()
        return full_name or self.username

    def has_role(self, *roles):
        return self.role in roles

    @property
    def is_platform_admin(self):
        return self.is_superuser or self.role == self.Role.ADMIN
