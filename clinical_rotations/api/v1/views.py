"""
Views for clinical rotations.

This module re-exports all views from the feature-based view modules.
"""

# Cohort rotation assignments
from .cohort_rotations import (
    CancelCohortRotationAssignmentView,
    CohortRotationAssignmentView,
    CompleteCohortRotationAssignmentView,
    GenerateCohortRotationsView,
)

# Generated rotations
from .rotations import RotationListView

__all__ = [
    # Cohort rotation assignments
    "CohortRotationAssignmentView",
    "GenerateCohortRotationsView",
    "CompleteCohortRotationAssignmentView",
    "CancelCohortRotationAssignmentView",
    # Rotations
    "RotationListView",
]
