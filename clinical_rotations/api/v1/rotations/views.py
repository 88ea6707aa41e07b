"""
Views for generated rotations.
"""

from rest_framework import generics
from rest_framework.exceptions import ParseError
from rest_framework.permissions import IsAuthenticated

from clinical_rotations.models import Rotation

from ..filters import AdminOrSelfFilterBackend
from .serializers import RotationSerializer


class RotationListView(generics.ListAPIView):
    """
    List rotations.

    Staff see every rotation; students see only their own.

    Query params:
        student (optional): Filter by student id.
        cohort_rotation_assignment (optional): Filter by assignment id.
        status (optional): Filter by rotation status.
    """

    serializer_class = RotationSerializer
    permission_classes = [IsAuthenticated]
    filter_backends = [AdminOrSelfFilterBackend]

    def get_queryset(self):
        queryset = Rotation.objects.select_related("clinical_site").order_by("start_date", "id")

        for param in ("student", "cohort_rotation_assignment"):
            if value := self.request.query_params.get(param):
                if not value.isdigit():
                    raise ParseError(f"{param} must be an integer.")
                queryset = queryset.filter(**{f"{param}_id": value})

        if status := self.request.query_params.get("status"):
            queryset = queryset.filter(status=status)

        return queryset
