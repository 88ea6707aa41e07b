"""
Django Admin for clinical_rotations.
"""

from .assignments import (
    CohortRotationAssignmentAdmin,
    CohortRotationAssignmentAuditAdmin,
    RotationAdmin,
    RotationGenerationAuditAdmin,
)
from .catalog import ClinicalSiteAdmin, CohortAdmin, ProgramAdmin, RotationTemplateAdmin

__all__ = [
    "ClinicalSiteAdmin",
    "CohortAdmin",
    "CohortRotationAssignmentAdmin",
    "CohortRotationAssignmentAuditAdmin",
    "ProgramAdmin",
    "RotationAdmin",
    "RotationGenerationAuditAdmin",
    "RotationTemplateAdmin",
]
