"""
Django REST framework filters for rotation listings.
"""

from rest_framework.filters import BaseFilterBackend


class AdminOrSelfFilterBackend(BaseFilterBackend):
    """
    Scope rotations to the requesting user.

    Staff see every student's rotations. Anyone else only sees the rotations
    generated for them, whatever ``student`` query parameter they send.
    """

    def filter_queryset(self, request, queryset, view):
        if request.user.is_staff:
            return queryset
        return queryset.filter(student=request.user)
