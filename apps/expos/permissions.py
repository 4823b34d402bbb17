"""
Permissions for the expos app.
"""

from rest_framework import permissions

from apps.accounts.models import User
from apps.common.exceptions import AccessDeniedError

from .models import Expo


def get_expo(obj):
    """Resolve the expo an expo-scoped object belongs to."""
    if isinstance(obj, Expo):
        return obj
    return obj.expo


def can_manage_expo(user, expo):
    """
    Admins, the expo's organizer and users holding an explicit
    ``expos.change_expo`` object permission may manage an expo.
    """
    if user is None or not user.is_authenticated:
        return False
    if user.is_platform_admin:
        return True
    if expo.organizer_id == user.pk:
        return True
    return user.has_perm("expos.change_expo", expo)


def authorize_expo_management(user, expo):
    if not can_manage_expo(user, expo):
        raise AccessDeniedError("You do not have permission to manage this expo.")


class IsOrganizerOrAdmin(permissions.BasePermission):
    """
    Permission for organizer-level actions such as creating expos.
    """

    message = "Only organizers and admins can perform this action."

    def has_permission(self, request, view):
        user = request.user
        return bool(
            user
            and user.is_authenticated
            and (user.is_platform_admin or user.role == User.Role.ORGANIZER)
        )


class IsExhibitorOrHigher(permissions.BasePermission):
    """
    Permission for exhibitor-level actions such as booking booths.
    """

    message = "Only exhibitors, organizers and admins can perform this action."

    def has_permission(self, request, view):
        user = request.user
        return bool(
            user
            and user.is_authenticated
            and (
                user.is_platform_admin
                or user.role in [User.Role.EXHIBITOR, User.Role.ORGANIZER]
            )
        )


class CanManageExpo(permissions.BasePermission):
    """
    Object permission for managing an expo or anything scoped to one.
    """

    message = "You do not have permission to manage this expo."

    def has_object_permission(self, request, view, obj):
        return can_manage_expo(request.user, get_expo(obj))


class IsOwnerOrExpoManager(permissions.BasePermission):
    """
    Object permission for exhibitor applications and attendee registrations:
    the owning user or a manager of the expo.
    """

    message = "You can only access your own records."

    def has_object_permission(self, request, view, obj):
        if obj.user_id == request.user.pk:
            return True
        return can_manage_expo(request.user, get_expo(obj))


class IsOwner(permissions.BasePermission):
    """
    Object permission for actions only the owning user may take.
    """

    message = "You can only access your own records."

    def has_object_permission(self, request, view, obj):
        return obj.user_id == request.user.pk


class CanHandleFeedback(permissions.BasePermission):
    """
    Object permission for answering and resolving feedback: expo managers
    and the users the feedback was assigned or escalated to.
    """

    message = "You are not handling this feedback."

    def has_object_permission(self, request, view, obj):
        if request.user.pk in [obj.assigned_to_id, obj.escalated_to_id]:
            return True
        return can_manage_expo(request.user, obj.expo)
