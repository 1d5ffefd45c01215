# common/permissions.py

from rest_framework.permissions import SAFE_METHODS, BasePermission


class IsAdminRole(BasePermission):
    """Authenticated account whose role is 'admin'."""
    message = 'Access denied. Admin privileges required.'

    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and getattr(user, 'role', None) == 'admin')


class IsAdminRoleOrReadOnly(IsAdminRole):
    """Anyone may read; writes need an admin account."""

    def has_permission(self, request, view):
        if request.method in SAFE_METHODS:
            return True
        return super().has_permission(request, view)
