"""
Django REST framework permissions.
"""

from rest_framework.permissions import BasePermission

from clinical_rotations.compat import is_school_administrator


class IsCohortAdministrator(BasePermission):
    """
    Permission to allow only administrators of the cohort's school.

    The object checked is the Cohort (or anything with a ``cohort`` attribute),
    so views call ``check_object_permissions`` once they have resolved it.
    """

    message = "Only administrators of this cohort's school can manage its rotations."

    def has_object_permission(self, request, view, obj):
        cohort = getattr(obj, "cohort", obj)
        return is_school_administrator(request.user, cohort)
