"""
Cohort rotation assignments: a rotation template bound to a cohort for a date window.
"""

import logging

from django.contrib import auth
from django.db import models, transaction
from django.db.models.deletion import ProtectedError
from django.utils import timezone
from django.utils.translation import gettext_lazy as _
from model_utils.models import TimeStampedModel

from ..exceptions import ConflictError, InvalidStateError, NotFoundError, ValidationError
from ..transitions import (
    INITIAL_STATUS,
    TERMINAL_STATUSES,
    AssignmentStatus,
    ensure_mutable,
    ensure_transition,
)
from .cohorts import Cohort
from .programs import ClinicalSite, RotationTemplate

logger = logging.getLogger(__name__)

User = auth.get_user_model()

# Request field names are used as error keys, so callers can map errors back to their input.
EDITABLE_FIELDS = {
    "clinical_site_id": "clinicalSiteId",
    "start_date": "startDate",
    "end_date": "endDate",
    "required_hours": "requiredHours",
    "max_students": "maxStudents",
    "notes": "notes",
}


def _get_or_not_found(model, pk, field: str):
    """Fetch ``model`` by primary key or raise :class:`NotFoundError` naming ``field``."""
    try:
        return model.objects.get(pk=pk)
    except (model.DoesNotExist, ValueError, TypeError) as exc:
        raise NotFoundError({field: [f"{model._meta.verbose_name.capitalize()} {pk} not found."]}) from exc


def validate_assignment_values(start_date, end_date, required_hours, max_students) -> None:
    """
    Check the invariants shared by assignment creation and update.

    :raises: ValidationError describing every offending field.
    """
    errors = {}
    if start_date >= end_date:
        errors["endDate"] = ["Start date must be before end date."]
    if required_hours is None or required_hours <= 0:
        errors["requiredHours"] = ["Required hours must be greater than zero."]
    if max_students is not None and max_students < 1:
        errors["maxStudents"] = ["Max students must be at least 1, or empty for no limit."]
    if errors:
        raise ValidationError(errors)


class CohortRotationAssignmentManager(models.Manager):
    """Manager for CohortRotationAssignment that owns creation and status changes."""

    def create_assignment(
        self,
        *,
        cohort_id,
        rotation_template_id,
        start_date,
        end_date,
        required_hours,
        clinical_site_id=None,
        max_students=None,
        notes="",
        created_by=None,
    ) -> "CohortRotationAssignment":
        """
        Create a DRAFT assignment of a rotation template to a cohort.

        :raises: NotFoundError if the cohort, template or clinical site does not exist.
        :raises: ValidationError if the dates, hours or cap are inconsistent, or the
            template belongs to a different program than the cohort.
        """
        cohort = _get_or_not_found(Cohort, cohort_id, "cohortId")
        template = _get_or_not_found(RotationTemplate, rotation_template_id, "rotationTemplateId")
        clinical_site = None
        if clinical_site_id is not None:
            clinical_site = _get_or_not_found(ClinicalSite, clinical_site_id, "clinicalSiteId")

        validate_assignment_values(start_date, end_date, required_hours, max_students)

        if template.program_id != cohort.program_id:
            raise ValidationError.for_field(
                "rotationTemplateId",
                "Rotation template belongs to a different program than the cohort.",
            )
        if not template.is_active:
            raise ValidationError.for_field("rotationTemplateId", "Rotation template is not active.")

        with transaction.atomic():
            assignment = self.create(
                cohort=cohort,
                rotation_template=template,
                clinical_site=clinical_site,
                start_date=start_date,
                end_date=end_date,
                required_hours=required_hours,
                max_students=max_students,
                notes=notes or "",
                status=INITIAL_STATUS,
                created_by=created_by,
            )
            assignment.audit.create(
                state_transition=f"created as {INITIAL_STATUS}",
                changed_by=created_by,
            )

        logger.info(
            "[CohortRotations] Created assignment %s: template %s -> cohort %s.",
            assignment.pk,
            template.pk,
            cohort.pk,
        )
        return assignment

    def transition(self, assignment_id, current: str, target: str, *, changed_by=None, reason: str = "") -> bool:
        """
        Move an assignment from ``current`` to ``target`` with a conditional update.

        The row only changes if its status is still ``current``, so two
        administrators racing on the same assignment cannot both win.

        :raises: InvalidStateError if the transition is not legal.
        :returns: True if this call changed the status, False if it lost a race.
        """
        ensure_transition(current, target)

        with transaction.atomic():
            updated = self.filter(pk=assignment_id, status=current).update(status=target, modified=timezone.now())
            if updated:
                CohortRotationAssignmentAudit.objects.create(
                    assignment_id=assignment_id,
                    state_transition=f"from {current} to {target}",
                    changed_by=changed_by,
                    reason=reason,
                )

        if updated:
            logger.info("[CohortRotations] Assignment %s moved from %s to %s.", assignment_id, current, target)
        else:
            logger.warning(
                "[CohortRotations] Assignment %s was no longer %s; %s not applied.",
                assignment_id,
                current,
                target,
            )
        return bool(updated)


class CohortRotationAssignment(TimeStampedModel):
    """
    A rotation template assigned to a cohort for a concrete date window.

    Generating the assignment creates one Rotation per student on the cohort roster.

    .. no_pii:
    """

    class Meta:
        """Model options."""

        ordering = ("start_date", "id")
        indexes = [
            models.Index(fields=["status", "end_date"], name="clinical_ro_status_3c9d41_idx"),
        ]

    cohort = models.ForeignKey(Cohort, related_name="rotation_assignments", on_delete=models.CASCADE)
    rotation_template = models.ForeignKey(
        RotationTemplate,
        related_name="cohort_assignments",
        on_delete=models.PROTECT,
    )
    clinical_site = models.ForeignKey(
        ClinicalSite,
        related_name="cohort_assignments",
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        help_text=_("Overrides the template's default clinical site."),
    )
    start_date = models.DateTimeField()
    end_date = models.DateTimeField()
    required_hours = models.PositiveIntegerField(help_text=_("Overrides the template's default required hours."))
    max_students = models.PositiveIntegerField(
        null=True,
        blank=True,
        help_text=_("Maximum number of rotations to generate. Leave empty for no limit."),
    )
    status = models.CharField(
        max_length=20,
        choices=AssignmentStatus.choices,
        default=INITIAL_STATUS,
        db_index=True,
    )
    notes = models.TextField(blank=True)
    created_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="cohort_rotation_assignments",
    )

    objects = CohortRotationAssignmentManager()

    rotations: "models.Manager"
    audit: "models.Manager[CohortRotationAssignmentAudit]"

    def __str__(self):
        """User-friendly string representation of this model."""
        return f"{self.rotation_template.name} → {self.cohort.name} ({self.status})"

    @property
    def program_id(self):
        """Program shared by the cohort and the rotation template."""
        return self.cohort.program_id

    def apply_changes(self, *, changed_by=None, status=None, reason: str = "", **changes):
        """
        Update editable fields and optionally the status.

        Editing is allowed while the assignment is DRAFT or PUBLISHED. Rotations
        that were already generated are left as they are.

        :raises: InvalidStateError if the assignment is COMPLETED or CANCELLED, the
            status change is not allowed, or the status changed concurrently.
        :raises: ValidationError if the merged values break an invariant.
        :raises: NotFoundError if a new clinical site does not exist.
        """
        unknown = set(changes) - set(EDITABLE_FIELDS)
        if unknown:
            raise TypeError(f"Fields cannot be changed: {', '.join(sorted(unknown))}")

        ensure_mutable(self.status)

        if changes.get("clinical_site_id") is not None:
            _get_or_not_found(ClinicalSite, changes["clinical_site_id"], "clinicalSiteId")

        validate_assignment_values(
            changes.get("start_date", self.start_date),
            changes.get("end_date", self.end_date),
            changes.get("required_hours", self.required_hours),
            changes.get("max_students", self.max_students),
        )

        if status is not None and status != self.status:
            if status == AssignmentStatus.PUBLISHED:
                raise InvalidStateError("Assignments are published by generating their rotations.")
            ensure_transition(self.status, status)

        with transaction.atomic():
            if changes:
                updated = (
                    type(self)
                    .objects.filter(pk=self.pk)
                    .exclude(status__in=TERMINAL_STATUSES)
                    .update(modified=timezone.now(), **changes)
                )
                if not updated:
                    raise InvalidStateError("Assignment status changed while it was being edited.")

            if status is not None and status != self.status:
                if not type(self).objects.transition(
                    self.pk, self.status, status, changed_by=changed_by, reason=reason
                ):
                    raise InvalidStateError("Assignment status changed while it was being edited.")

        self.refresh_from_db()
        return self

    def complete(self, *, changed_by=None, reason: str = ""):
        """Mark a published assignment as completed."""
        return self._change_status(AssignmentStatus.COMPLETED, changed_by=changed_by, reason=reason)

    def cancel(self, *, changed_by=None, reason: str = ""):
        """Cancel a draft or published assignment. Generated rotations are kept."""
        return self._change_status(AssignmentStatus.CANCELLED, changed_by=changed_by, reason=reason)

    def _change_status(self, target: str, *, changed_by=None, reason: str = ""):
        if not type(self).objects.transition(self.pk, self.status, target, changed_by=changed_by, reason=reason):
            self.refresh_from_db()
            raise InvalidStateError(f"Assignment is now {self.status}; cannot change it to {target}.")
        self.refresh_from_db()
        return self

    def delete(self, *args, **kwargs):
        """
        Delete the assignment if no rotations were generated from it.

        :raises: ConflictError if rotations reference the assignment or it is
            already COMPLETED or CANCELLED.
        """
        if self.status not in (AssignmentStatus.DRAFT, AssignmentStatus.PUBLISHED):
            raise ConflictError(f"Cannot delete an assignment that is {self.status}.")
        if self.rotations.exists():
            raise ConflictError("Rotations were already generated from this assignment.")

        assignment_id = self.pk
        try:
            result = super().delete(*args, **kwargs)
        except ProtectedError as exc:
            raise ConflictError("Rotations were already generated from this assignment.") from exc

        logger.info("[CohortRotations] Deleted assignment %s.", assignment_id)
        return result


class CohortRotationAssignmentAudit(TimeStampedModel):
    """
    A status change of a cohort rotation assignment.

    .. no_pii:
    """

    class Meta:
        """Model options."""

        ordering = ("created", "id")

    assignment = models.ForeignKey(CohortRotationAssignment, related_name="audit", on_delete=models.CASCADE)
    state_transition = models.CharField(max_length=255)
    changed_by = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="cohort_rotation_assignment_audit",
    )
    reason = models.TextField(blank=True)

    def __str__(self):
        """User-friendly string representation of this model."""
        return f"{self.state_transition} for assignment {self.assignment_id}"
