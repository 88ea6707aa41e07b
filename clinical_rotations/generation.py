"""
Generation of per-student rotations from a cohort rotation assignment.

Generation expands one assignment into one Rotation per student on the cohort
roster. It is safe to run again at any time:

- students who already have a rotation for the assignment are skipped,
- each student's rotation is written in its own transaction, so a failure for
  one student never undoes or blocks the others,
- an existing rotation is never modified or deleted.
"""

import logging

from django.contrib import auth
from django.db import DatabaseError, transaction

from .compat import get_roster_for_cohort
from .exceptions import ConflictError, NotFoundError, ValidationError
from .models import (
    AssignmentStatus,
    ClinicalSite,
    CohortRotationAssignment,
    Rotation,
    RotationGenerationAudit,
)
from .transitions import ensure_generatable

logger = logging.getLogger(__name__)

User = auth.get_user_model()

ALREADY_GENERATED = "already generated"
CAPACITY_REACHED = "capacity reached"


class GenerationResult:
    """
    Accumulates the outcome of each student in a generation run.
    """

    def __init__(self, assignment: CohortRotationAssignment, total_students: int = 0):
        self.assignment = assignment
        self.total_students = total_students
        self.rotations = []
        self.skipped = []
        self.errors = []

    @property
    def created(self) -> int:
        """Number of rotations created by this run."""
        return len(self.rotations)

    def record_created(self, rotation: Rotation):
        self.rotations.append(rotation)

    def record_skipped(self, student_id, reason: str):
        self.skipped.append({"studentId": student_id, "reason": reason})

    def record_error(self, student_id, reason: str):
        self.errors.append({"studentId": student_id, "reason": reason})

    @property
    def message(self) -> str:
        """Summary line for operators."""
        cohort_name = self.assignment.cohort.name
        if self.total_students == 0:
            return f'No students found in cohort "{cohort_name}"; nothing was generated.'
        if self.created == 0 and not self.errors:
            return f'No new rotations generated for cohort "{cohort_name}".'
        message = f'Generated {self.created} rotations for cohort "{cohort_name}".'
        if self.errors:
            message += f" {len(self.errors)} students need manual follow-up."
        return message

    def as_dict(self) -> dict:
        """Serialize the result for API responses and task results."""
        return {
            "created": self.created,
            "skipped": len(self.skipped),
            "errors": list(self.errors),
            "skippedStudents": list(self.skipped),
            "totalStudents": self.total_students,
            "rotationIds": [rotation.pk for rotation in self.rotations],
            "status": self.assignment.status,
            "message": self.message,
        }


def resolve_clinical_site(assignment: CohortRotationAssignment, clinical_site_id=None) -> ClinicalSite:
    """
    Pick the site for generated rotations.

    An explicit ``clinical_site_id`` wins over the assignment's site, which wins
    over the template's default site.

    :raises: ValidationError if no site is configured anywhere.
    :raises: NotFoundError if the explicit site does not exist.
    """
    if clinical_site_id is not None:
        try:
            return ClinicalSite.objects.get(pk=clinical_site_id)
        except (ClinicalSite.DoesNotExist, ValueError, TypeError) as exc:
            raise NotFoundError({"clinicalSiteId": [f"Clinical site {clinical_site_id} not found."]}) from exc

    site = assignment.clinical_site or assignment.rotation_template.default_clinical_site
    if site is None:
        raise ValidationError.for_field("clinicalSiteId", "No clinical site specified for this rotation.")
    return site


def generate_rotations(assignment_id, *, run_by=None, clinical_site_id=None) -> GenerationResult:
    """
    Create the missing rotations of a cohort rotation assignment.

    Students are processed in roster order. When ``max_students`` is set, the cap
    counts every rotation of the assignment, including those created by earlier
    runs, and students beyond it are skipped. A draft assignment is published
    once it has at least one rotation.

    Args:
        assignment_id: Primary key of the CohortRotationAssignment.
        run_by: The user who triggered the run, recorded in the audit trail.
        clinical_site_id: Optional site overriding the assignment and template sites.

    Returns:
        GenerationResult: created rotations, skipped students and per-student errors.

    Raises:
        NotFoundError: If the assignment does not exist.
        InvalidStateError: If the assignment is COMPLETED or CANCELLED.
        ValidationError: If no clinical site can be resolved.
    """
    try:
        assignment = CohortRotationAssignment.objects.select_related(
            "cohort",
            "cohort__program",
            "rotation_template",
            "rotation_template__default_clinical_site",
            "clinical_site",
        ).get(pk=assignment_id)
    except (CohortRotationAssignment.DoesNotExist, ValueError, TypeError) as exc:
        raise NotFoundError(f"Cohort rotation assignment {assignment_id} not found.") from exc

    ensure_generatable(assignment.status)
    clinical_site = resolve_clinical_site(assignment, clinical_site_id)

    roster = get_roster_for_cohort(assignment.cohort)
    result = GenerationResult(assignment, total_students=len(roster))

    existing_student_ids = _generated_student_ids(assignment)
    known_student_ids = _known_student_ids(roster)
    generated_count = len(existing_student_ids)

    logger.info(
        "[RotationGeneration] Generating assignment %s: %d students on roster, %d rotations already exist.",
        assignment.pk,
        len(roster),
        generated_count,
    )

    for student_id in roster:
        student_exists = student_id in known_student_ids

        if student_id in existing_student_ids:
            result.record_skipped(student_id, ALREADY_GENERATED)
            logger.debug("[RotationGeneration] Student %s already has a rotation; skipping.", student_id)
            _record_audit(assignment, student_id, run_by, RotationGenerationAudit.SKIPPED, ALREADY_GENERATED)
            continue

        if assignment.max_students is not None and generated_count >= assignment.max_students:
            result.record_skipped(student_id, CAPACITY_REACHED)
            logger.debug(
                "[RotationGeneration] Capacity of %d reached; skipping student %s.",
                assignment.max_students,
                student_id,
            )
            _record_audit(
                assignment,
                student_id,
                run_by,
                RotationGenerationAudit.SKIPPED,
                CAPACITY_REACHED,
                student_exists=student_exists,
            )
            continue

        if not student_exists:
            reason = f"Student {student_id} does not exist."
            logger.warning("[RotationGeneration] %s Assignment %s.", reason, assignment.pk)
            result.record_error(student_id, reason)
            _record_audit(
                assignment, student_id, run_by, RotationGenerationAudit.FAILED, reason, student_exists=False
            )
            continue

        try:
            rotation = Rotation.objects.create_for_assignment(
                assignment=assignment,
                student_id=student_id,
                clinical_site=clinical_site,
            )
        except ConflictError as exc:
            # A concurrent run created this student's rotation first.
            logger.info("[RotationGeneration] %s", exc.detail)
            result.record_error(student_id, str(exc.detail))
            _record_audit(assignment, student_id, run_by, RotationGenerationAudit.FAILED, str(exc.detail))
        except Exception as exc:  # pylint: disable=broad-except
            logger.exception(
                "[RotationGeneration] Failed to create rotation for student %s in assignment %s",
                student_id,
                assignment.pk,
            )
            result.record_error(student_id, str(exc))
            _record_audit(assignment, student_id, run_by, RotationGenerationAudit.FAILED, str(exc))
        else:
            generated_count += 1
            result.record_created(rotation)
            _record_audit(assignment, student_id, run_by, RotationGenerationAudit.CREATED, "", rotation=rotation)

    if (
        assignment.status == AssignmentStatus.DRAFT
        and Rotation.objects.filter(cohort_rotation_assignment=assignment).exists()
    ):
        CohortRotationAssignment.objects.transition(
            assignment.pk,
            AssignmentStatus.DRAFT,
            AssignmentStatus.PUBLISHED,
            changed_by=run_by,
            reason="Rotations generated",
        )
        assignment.refresh_from_db(fields=["status", "modified"])

    logger.info(
        "[RotationGeneration] Assignment %s complete. Created: %d, Skipped: %d, Failed: %d",
        assignment.pk,
        result.created,
        len(result.skipped),
        len(result.errors),
    )
    return result


def _generated_student_ids(assignment) -> set:
    return set(
        Rotation.objects.filter(cohort_rotation_assignment=assignment).values_list("student_id", flat=True)
    )


def _known_student_ids(roster) -> set:
    return set(User.objects.filter(pk__in=roster).values_list("pk", flat=True))


def _record_audit(assignment, student_id, run_by, status, reason, *, student_exists=True, rotation=None):
    """
    Write the audit row of one student in its own savepoint.

    A failed audit write is logged and never stops the run.
    """
    try:
        with transaction.atomic():
            RotationGenerationAudit.objects.create(
                assignment=assignment,
                student_id=student_id if student_exists else None,
                student_ref=student_id,
                run_by=run_by,
                status=status,
                reason=reason,
                rotation=rotation,
            )
    except DatabaseError:
        logger.exception(
            "[RotationGeneration] Could not write %s audit for student %s in assignment %s",
            status,
            student_id,
            assignment.pk,
        )
