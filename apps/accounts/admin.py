from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.utils.translation import gettext_lazy as _

from .models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """Admin interface for the User model with platform roles."""

    model = User
    list_display = (
        "username",
        "email",
        "full_name",
        "role",
        "is_active",
        "is_staff",
        "date_joined",
    )
    list_filter = ("role", "is_active", "is_staff", "is_superuser", "date_joined")
    search_fields = ("username", "email", "first_name", "last_name", "company")
    ordering = ("-date_joined",)
    readonly_fields = ("last_login", "date_joined", "id")

    fieldsets = (
        (None, {"fields": ("username", "password", "email")}),
        (
            _("Personal info"),
            {"fields": ("first_name", "last_name", "company", "phone_number")},
        ),
        (
            _("Role and status"),
            {"fields": ("role", "is_active", "is_staff", "is_superuser")},
        ),
        (
            _("Permissions"),
            {
                "fields": ("groups", "user_permissions"),
                "classes": ("collapse",),
            },
        ),
        (_("Important dates"), {"fields": ("last_login", "date_joined")}),
    )
    add_fieldsets = (
        (
            None,
            {
                "classes": ("wide",),
                "fields": ("username", "email", "role", "password1", "password2"),
            },
        ),
    )

    @admin.display(description=_("Full name"))
    def full_name(self, obj):
        return obj.get_full_name()
