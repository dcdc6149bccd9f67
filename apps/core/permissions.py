"""
Role-based permissions for Newsdesk.

Maps StaffProfile.role to DRF permission classes.

Roles:
- viewer: read-only access to the dashboard
- editor: create and edit articles and stories, promote articles,
  send notifications
- admin: everything, including deletes

Usage:
    from apps.core.permissions import IsEditor

    class MyView(APIView):
        permission_classes = [IsAuthenticated, IsEditor]
"""

from rest_framework.permissions import BasePermission, SAFE_METHODS
import logging

logger = logging.getLogger(__name__)

ROLE_LEVELS = {
    'viewer': 1,
    'editor': 2,
    'admin': 3,
}


def get_user_role(user):
    """
    Return 'viewer', 'editor' or 'admin' for an authenticated user.

    Superusers are always admins. Users without a profile are viewers.
    """
    if not user or not user.is_authenticated:
        return None

    if user.is_superuser:
        return 'admin'

    from apps.core.models import StaffProfile
    try:
        return StaffProfile.objects.values_list('role', flat=True).get(user=user)
    except StaffProfile.DoesNotExist:
        return 'viewer'


def has_role(user, required_role):
    """Check if user has at least the required role level."""
    user_role = get_user_role(user)
    if not user_role:
        return False
    return ROLE_LEVELS.get(user_role, 0) >= ROLE_LEVELS.get(required_role, 0)


class RolePermission(BasePermission):
    """Base class for role-based permissions."""

    required_role = 'viewer'

    def has_permission(self, request, view):
        return has_role(request.user, self.required_role)


class IsEditor(RolePermission):
    required_role = 'editor'
    message = "Editor access required."


class NewsroomPermission(BasePermission):
    """
    Default permission for dashboard resources.

    - safe methods: any staff role
    - DELETE: admin
    - everything else: editor or admin
    """
    message = "Your role does not allow this action."

    def has_permission(self, request, view):
        if request.method in SAFE_METHODS:
            return has_role(request.user, 'viewer')
        if request.method == 'DELETE':
            return has_role(request.user, 'admin')
        return has_role(request.user, 'editor')
