"""
Models package for clinical_rotations.

Models are organized by feature and re-exported here.
"""

from .programs import ClinicalSite, Program, RotationTemplate
from .cohorts import Cohort, CohortMembership
from .assignments import (
    CohortRotationAssignment,
    CohortRotationAssignmentAudit,
    CohortRotationAssignmentManager,
)
from .rotations import Rotation, RotationGenerationAudit, RotationManager
from ..transitions import AssignmentStatus

__all__ = [
    # Catalog
    "Program",
    "ClinicalSite",
    "RotationTemplate",
    # Cohorts
    "Cohort",
    "CohortMembership",
    # Assignments
    "AssignmentStatus",
    "CohortRotationAssignment",
    "CohortRotationAssignmentAudit",
    "CohortRotationAssignmentManager",
    # Rotations
    "Rotation",
    "RotationGenerationAudit",
    "RotationManager",
]
