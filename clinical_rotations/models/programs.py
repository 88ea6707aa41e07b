"""
Reference data read by rotation generation: programs, clinical sites and rotation templates.
"""

from django.core.validators import MinValueValidator
from django.db import models
from django.utils.translation import gettext_lazy as _
from model_utils.models import TimeStampedModel


class Program(TimeStampedModel):
    """
    An academic program offered by a school.

    .. no_pii:
    """

    name = models.CharField(max_length=255)
    school = models.CharField(
        max_length=255,
        db_index=True,
        help_text=_("Identifier of the school that owns this program."),
    )
    is_active = models.BooleanField(default=True)

    def __str__(self):
        """User-friendly string representation of this model."""
        return f"{self.name} ({self.school})"


class ClinicalSite(TimeStampedModel):
    """
    A location where students complete clinical rotations.

    .. no_pii:
    """

    HOSPITAL = "HOSPITAL"
    CLINIC = "CLINIC"
    NURSING_HOME = "NURSING_HOME"
    OUTPATIENT = "OUTPATIENT"
    OTHER = "OTHER"

    SITE_TYPE_CHOICES = (
        (HOSPITAL, _("Hospital")),
        (CLINIC, _("Clinic")),
        (NURSING_HOME, _("Nursing home")),
        (OUTPATIENT, _("Outpatient")),
        (OTHER, _("Other")),
    )

    name = models.CharField(max_length=255)
    site_type = models.CharField(max_length=50, choices=SITE_TYPE_CHOICES, default=HOSPITAL)
    capacity = models.PositiveIntegerField(
        default=0,
        help_text=_("Number of students the site can host at the same time."),
    )
    is_active = models.BooleanField(default=True, db_index=True)

    def __str__(self):
        """User-friendly string representation of this model."""
        return self.name


class RotationTemplate(TimeStampedModel):
    """
    A reusable rotation definition for a program.

    Cohort rotation assignments copy the specialty and objectives from here when
    rotations are generated.

    .. no_pii:
    """

    class Meta:
        """Model options."""

        ordering = ("sort_order", "name")

    program = models.ForeignKey(Program, related_name="rotation_templates", on_delete=models.CASCADE)
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True)
    specialty = models.CharField(max_length=255)
    default_duration_weeks = models.PositiveIntegerField(
        default=4,
        validators=[MinValueValidator(1)],
    )
    default_required_hours = models.PositiveIntegerField(
        default=160,
        validators=[MinValueValidator(1)],
        help_text=_("Hours a student must log; cohort assignments may override this."),
    )
    default_clinical_site = models.ForeignKey(
        ClinicalSite,
        related_name="+",
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        help_text=_("Site used when an assignment does not name one."),
    )
    objectives = models.JSONField(default=list, blank=True)
    is_active = models.BooleanField(default=True, db_index=True)
    sort_order = models.PositiveIntegerField(default=0)

    def __str__(self):
        """User-friendly string representation of this model."""
        return f"{self.name} ({self.specialty})"
