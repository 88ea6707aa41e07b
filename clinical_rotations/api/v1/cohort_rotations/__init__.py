"""
Cohort rotation assignment views and serializers.
"""

from .views import (
    CancelCohortRotationAssignmentView,
    CohortRotationAssignmentView,
    CompleteCohortRotationAssignmentView,
    GenerateCohortRotationsView,
)
from .serializers import CohortRotationAssignmentSerializer

__all__ = [
    # Views
    "CohortRotationAssignmentView",
    "GenerateCohortRotationsView",
    "CompleteCohortRotationAssignmentView",
    "CancelCohortRotationAssignmentView",
    # Serializers
    "CohortRotationAssignmentSerializer",
]
