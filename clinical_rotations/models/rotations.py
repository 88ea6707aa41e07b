"""
Per-student rotations and the audit trail of the generation runs that created them.
"""

from django.contrib import auth
from django.db import IntegrityError, models, transaction
from django.utils.translation import gettext_lazy as _
from model_utils.models import TimeStampedModel

from ..exceptions import ConflictError
from .assignments import CohortRotationAssignment
from .programs import ClinicalSite, RotationTemplate

User = auth.get_user_model()


class RotationManager(models.Manager):
    """Manager for Rotation."""

    def create_for_assignment(
        self,
        *,
        assignment: CohortRotationAssignment,
        student_id,
        clinical_site: ClinicalSite,
    ) -> "Rotation":
        """
        Create the rotation of one student for a cohort rotation assignment.

        The write runs in its own savepoint so a failure leaves the caller's
        transaction usable.

        :raises: ConflictError if the student already has a rotation for the assignment.
        """
        template = assignment.rotation_template
        try:
            with transaction.atomic():
                return self.create(
                    student_id=student_id,
                    cohort_rotation_assignment=assignment,
                    rotation_template=template,
                    clinical_site=clinical_site,
                    specialty=template.specialty,
                    start_date=assignment.start_date,
                    end_date=assignment.end_date,
                    required_hours=assignment.required_hours,
                    objectives=list(template.objectives or []),
                )
        except IntegrityError as exc:
            if self.filter(student_id=student_id, cohort_rotation_assignment=assignment).exists():
                raise ConflictError(
                    f"Student {student_id} already has a rotation for assignment {assignment.pk}."
                ) from exc
            raise


class Rotation(TimeStampedModel):
    """
    A single student's clinical placement.

    Rotations generated from a cohort rotation assignment keep a link to it; at
    most one rotation exists per student and assignment.

    .. no_pii:
    """

    SCHEDULED = "SCHEDULED"
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"

    STATUS_CHOICES = (
        (SCHEDULED, _("Scheduled")),
        (ACTIVE, _("Active")),
        (COMPLETED, _("Completed")),
        (CANCELLED, _("Cancelled")),
    )

    class Meta:
        """Model options."""

        unique_together = ("student", "cohort_rotation_assignment")
        ordering = ("start_date", "id")

    student = models.ForeignKey(User, related_name="clinical_rotations", on_delete=models.CASCADE)
    cohort_rotation_assignment = models.ForeignKey(
        CohortRotationAssignment,
        related_name="rotations",
        null=True,
        blank=True,
        on_delete=models.PROTECT,
        help_text=_("The cohort assignment this rotation was generated from, if any."),
    )
    rotation_template = models.ForeignKey(
        RotationTemplate,
        related_name="rotations",
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
    )
    clinical_site = models.ForeignKey(ClinicalSite, related_name="rotations", on_delete=models.PROTECT)
    specialty = models.CharField(max_length=255)
    start_date = models.DateTimeField()
    end_date = models.DateTimeField()
    required_hours = models.PositiveIntegerField()
    completed_hours = models.PositiveIntegerField(default=0)
    objectives = models.JSONField(default=list, blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=SCHEDULED, db_index=True)

    objects = RotationManager()

    def __str__(self):
        """User-friendly string representation of this model."""
        return f"{self.student}: {self.specialty} at {self.clinical_site} ({self.status})"


class RotationGenerationAudit(TimeStampedModel):
    """
    The outcome for one student in one generation run.

    .. no_pii:
    """

    CREATED = "created"
    SKIPPED = "skipped"
    FAILED = "failed"

    STATUS_CHOICES = (
        (CREATED, _("Created")),
        (SKIPPED, _("Skipped")),
        (FAILED, _("Failed")),
    )

    class Meta:
        """Model options."""

        verbose_name = _("Rotation Generation Audit")
        verbose_name_plural = _("Rotation Generation Audits")
        indexes = [
            models.Index(fields=["created"], name="clinical_ro_created_8b2f70_idx"),
            models.Index(fields=["status", "created"], name="clinical_ro_status_e51c07_idx"),
        ]

    assignment = models.ForeignKey(
        CohortRotationAssignment,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="generation_audits",
        help_text=_("The assignment that was generated (null if it was deleted)."),
    )
    student = models.ForeignKey(
        User,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="rotation_generation_audits",
        help_text=_("Null when the roster named a user that does not exist."),
    )
    student_ref = models.BigIntegerField(help_text=_("The student id as given by the roster."))
    run_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="rotation_generations_performed",
        help_text=_("The administrator who triggered the run (null for system runs)."),
    )
    rotation = models.ForeignKey(Rotation, on_delete=models.SET_NULL, null=True, blank=True, related_name="+")
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, db_index=True)
    reason = models.TextField(blank=True)

    def __str__(self):
        """User-friendly string representation of this model."""
        return f"{self.student or self.student_ref} → assignment {self.assignment_id} ({self.status})"
