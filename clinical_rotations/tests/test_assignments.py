"""Tests for creating, editing and deleting cohort rotation assignments."""

# pylint: disable=redefined-outer-name

from datetime import timedelta

import pytest
from django.utils import timezone

from clinical_rotations.exceptions import ConflictError, InvalidStateError, NotFoundError, ValidationError
from clinical_rotations.models import AssignmentStatus, CohortRotationAssignment, CohortRotationAssignmentAudit

from .factories import (
    ClinicalSiteFactory,
    CohortFactory,
    CohortRotationAssignmentFactory,
    RotationFactory,
    RotationTemplateFactory,
)


@pytest.fixture
def window():
    """A four week window starting next week."""
    start = timezone.now() + timedelta(days=7)
    return start, start + timedelta(weeks=4)


@pytest.mark.django_db
class TestCreateAssignment:
    """Tests for CohortRotationAssignmentManager.create_assignment."""

    def test_creates_draft(self, cohort, rotation_template, clinical_site, window, user):
        """
        GIVEN a cohort and a template of the same program
        WHEN an assignment is created
        THEN it is persisted as DRAFT with the given values
        AND its creation is audited
        """
        start, end = window

        assignment = CohortRotationAssignment.objects.create_assignment(
            cohort_id=cohort.pk,
            rotation_template_id=rotation_template.pk,
            clinical_site_id=clinical_site.pk,
            start_date=start,
            end_date=end,
            required_hours=120,
            max_students=10,
            notes="Day shifts",
            created_by=user,
        )

        assignment.refresh_from_db()
        assert assignment.status == AssignmentStatus.DRAFT
        assert assignment.cohort == cohort
        assert assignment.rotation_template == rotation_template
        assert assignment.clinical_site == clinical_site
        assert assignment.required_hours == 120
        assert assignment.max_students == 10
        assert assignment.notes == "Day shifts"
        assert assignment.created_by == user
        assert assignment.program_id == cohort.program_id

        audit = CohortRotationAssignmentAudit.objects.get(assignment=assignment)
        assert audit.state_transition == "created as DRAFT"
        assert audit.changed_by == user

    def test_optional_fields_default_to_empty(self, cohort, rotation_template, window):
        start, end = window

        assignment = CohortRotationAssignment.objects.create_assignment(
            cohort_id=cohort.pk,
            rotation_template_id=rotation_template.pk,
            start_date=start,
            end_date=end,
            required_hours=160,
        )

        assert assignment.clinical_site is None
        assert assignment.max_students is None
        assert assignment.notes == ""

    @pytest.mark.parametrize("days", [0, -1])
    def test_start_not_before_end(self, cohort, rotation_template, window, days):
        """
        GIVEN an end date equal to or before the start date
        WHEN an assignment is created
        THEN a ValidationError names endDate
        AND nothing is persisted
        """
        start, _ = window

        with pytest.raises(ValidationError) as exc_info:
            CohortRotationAssignment.objects.create_assignment(
                cohort_id=cohort.pk,
                rotation_template_id=rotation_template.pk,
                start_date=start,
                end_date=start + timedelta(days=days),
                required_hours=160,
            )

        assert "endDate" in exc_info.value.detail
        assert not CohortRotationAssignment.objects.exists()

    def test_reports_every_invalid_field(self, cohort, rotation_template, window):
        start, end = window

        with pytest.raises(ValidationError) as exc_info:
            CohortRotationAssignment.objects.create_assignment(
                cohort_id=cohort.pk,
                rotation_template_id=rotation_template.pk,
                start_date=start,
                end_date=end,
                required_hours=0,
                max_students=0,
            )

        assert set(exc_info.value.detail) == {"requiredHours", "maxStudents"}

    def test_template_from_other_program(self, cohort, window):
        """
        GIVEN a template that belongs to another program
        WHEN it is assigned to the cohort
        THEN a ValidationError names rotationTemplateId
        """
        start, end = window
        other_template = RotationTemplateFactory()

        with pytest.raises(ValidationError) as exc_info:
            CohortRotationAssignment.objects.create_assignment(
                cohort_id=cohort.pk,
                rotation_template_id=other_template.pk,
                start_date=start,
                end_date=end,
                required_hours=160,
            )

        assert "rotationTemplateId" in exc_info.value.detail

    def test_inactive_template(self, cohort, program, window):
        start, end = window
        template = RotationTemplateFactory(program=program, is_active=False)

        with pytest.raises(ValidationError):
            CohortRotationAssignment.objects.create_assignment(
                cohort_id=cohort.pk,
                rotation_template_id=template.pk,
                start_date=start,
                end_date=end,
                required_hours=160,
            )

    @pytest.mark.parametrize("missing", ["cohortId", "rotationTemplateId", "clinicalSiteId"])
    def test_unknown_reference(self, cohort, rotation_template, clinical_site, window, missing):
        start, end = window
        ids = {
            "cohortId": cohort.pk,
            "rotationTemplateId": rotation_template.pk,
            "clinicalSiteId": clinical_site.pk,
        }
        ids[missing] = 999999

        with pytest.raises(NotFoundError) as exc_info:
            CohortRotationAssignment.objects.create_assignment(
                cohort_id=ids["cohortId"],
                rotation_template_id=ids["rotationTemplateId"],
                clinical_site_id=ids["clinicalSiteId"],
                start_date=start,
                end_date=end,
                required_hours=160,
            )

        assert missing in exc_info.value.detail


@pytest.mark.django_db
class TestTransition:
    """Tests for CohortRotationAssignmentManager.transition."""

    def test_moves_status_and_audits(self, assignment, user):
        changed = CohortRotationAssignment.objects.transition(
            assignment.pk,
            AssignmentStatus.DRAFT,
            AssignmentStatus.CANCELLED,
            changed_by=user,
            reason="Site closed",
        )

        assignment.refresh_from_db()
        assert changed is True
        assert assignment.status == AssignmentStatus.CANCELLED
        audit = assignment.audit.get()
        assert audit.state_transition == "from DRAFT to CANCELLED"
        assert audit.changed_by == user
        assert audit.reason == "Site closed"

    def test_loses_race(self, assignment):
        """
        GIVEN an assignment that another request already published
        WHEN a stale DRAFT -> CANCELLED transition is applied
        THEN nothing changes and no audit row is written
        """
        CohortRotationAssignment.objects.filter(pk=assignment.pk).update(status=AssignmentStatus.PUBLISHED)

        changed = CohortRotationAssignment.objects.transition(
            assignment.pk, AssignmentStatus.DRAFT, AssignmentStatus.CANCELLED
        )

        assignment.refresh_from_db()
        assert changed is False
        assert assignment.status == AssignmentStatus.PUBLISHED
        assert not assignment.audit.exists()

    def test_illegal_transition(self, assignment):
        with pytest.raises(InvalidStateError):
            CohortRotationAssignment.objects.transition(
                assignment.pk, AssignmentStatus.DRAFT, AssignmentStatus.COMPLETED
            )


@pytest.mark.django_db
class TestApplyChanges:
    """Tests for CohortRotationAssignment.apply_changes."""

    def test_updates_supplied_fields_only(self, assignment):
        original_start = assignment.start_date

        assignment.apply_changes(required_hours=100, notes="Bring badge")

        assert assignment.required_hours == 100
        assert assignment.notes == "Bring badge"
        assert assignment.start_date == original_start

    def test_validates_merged_dates(self, assignment):
        """
        GIVEN an assignment
        WHEN only its end date is moved before its start date
        THEN the update is rejected
        """
        with pytest.raises(ValidationError) as exc_info:
            assignment.apply_changes(end_date=assignment.start_date - timedelta(days=1))

        assert "endDate" in exc_info.value.detail

    def test_new_clinical_site(self, assignment):
        site = ClinicalSiteFactory()

        assignment.apply_changes(clinical_site_id=site.pk)

        assert assignment.clinical_site == site

    def test_unknown_clinical_site(self, assignment):
        with pytest.raises(NotFoundError):
            assignment.apply_changes(clinical_site_id=999999)

    def test_unknown_field(self, assignment):
        with pytest.raises(TypeError):
            assignment.apply_changes(cohort_id=1)

    def test_cancel_through_update(self, assignment, user):
        assignment.apply_changes(status=AssignmentStatus.CANCELLED, changed_by=user, reason="No preceptors")

        assert assignment.status == AssignmentStatus.CANCELLED
        assert assignment.audit.get().reason == "No preceptors"

    def test_cannot_publish_through_update(self, assignment):
        with pytest.raises(InvalidStateError):
            assignment.apply_changes(status=AssignmentStatus.PUBLISHED)

        assignment.refresh_from_db()
        assert assignment.status == AssignmentStatus.DRAFT

    def test_cannot_complete_draft(self, assignment):
        with pytest.raises(InvalidStateError):
            assignment.apply_changes(status=AssignmentStatus.COMPLETED)

    @pytest.mark.parametrize("status", [AssignmentStatus.COMPLETED, AssignmentStatus.CANCELLED])
    def test_terminal_assignment_is_read_only(self, status):
        """
        GIVEN a completed or cancelled assignment
        WHEN any field is edited
        THEN an InvalidStateError is raised and the row is unchanged
        """
        assignment = CohortRotationAssignmentFactory(status=status, required_hours=160)

        with pytest.raises(InvalidStateError):
            assignment.apply_changes(required_hours=80)

        assignment.refresh_from_db()
        assert assignment.required_hours == 160

    def test_lowering_cap_keeps_generated_rotations(self, assignment):
        RotationFactory.create_batch(3, cohort_rotation_assignment=assignment)
        CohortRotationAssignment.objects.filter(pk=assignment.pk).update(status=AssignmentStatus.PUBLISHED)
        assignment.refresh_from_db()

        assignment.apply_changes(max_students=1)

        assert assignment.max_students == 1
        assert assignment.rotations.count() == 3


@pytest.mark.django_db
class TestCompleteAndCancel:
    """Tests for CohortRotationAssignment.complete and cancel."""

    def test_complete_published(self):
        assignment = CohortRotationAssignmentFactory(status=AssignmentStatus.PUBLISHED)

        assignment.complete()

        assert assignment.status == AssignmentStatus.COMPLETED

    def test_complete_draft(self, assignment):
        with pytest.raises(InvalidStateError):
            assignment.complete()

    def test_cancel_keeps_rotations(self):
        assignment = CohortRotationAssignmentFactory(status=AssignmentStatus.PUBLISHED)
        RotationFactory(cohort_rotation_assignment=assignment)

        assignment.cancel(reason="Accreditation review")

        assert assignment.status == AssignmentStatus.CANCELLED
        assert assignment.rotations.count() == 1

    def test_stale_instance(self, assignment):
        """
        GIVEN an in-memory DRAFT instance whose row was cancelled meanwhile
        WHEN it is cancelled again
        THEN an InvalidStateError reports the current status
        """
        CohortRotationAssignment.objects.filter(pk=assignment.pk).update(status=AssignmentStatus.CANCELLED)

        with pytest.raises(InvalidStateError):
            assignment.cancel()

        assert assignment.status == AssignmentStatus.CANCELLED


@pytest.mark.django_db
class TestDeleteAssignment:
    """Tests for CohortRotationAssignment.delete."""

    @pytest.mark.parametrize("status", [AssignmentStatus.DRAFT, AssignmentStatus.PUBLISHED])
    def test_delete_without_rotations(self, status):
        assignment = CohortRotationAssignmentFactory(status=status)

        assignment.delete()

        assert not CohortRotationAssignment.objects.exists()

    def test_delete_with_rotations(self, assignment):
        RotationFactory(cohort_rotation_assignment=assignment)

        with pytest.raises(ConflictError):
            assignment.delete()

        assert CohortRotationAssignment.objects.filter(pk=assignment.pk).exists()

    @pytest.mark.parametrize("status", [AssignmentStatus.COMPLETED, AssignmentStatus.CANCELLED])
    def test_delete_terminal(self, status):
        assignment = CohortRotationAssignmentFactory(status=status)

        with pytest.raises(ConflictError):
            assignment.delete()


@pytest.mark.django_db
class TestModelStrings:
    """Tests for the string representations."""

    def test_assignment_str(self):
        cohort = CohortFactory(name="Class of 2026")
        assignment = CohortRotationAssignmentFactory(
            cohort=cohort,
            rotation_template__name="Pediatrics",
        )

        assert str(assignment) == "Pediatrics → Class of 2026 (DRAFT)"

    def test_cohort_str(self):
        assert str(CohortFactory(name="Class of 2026", graduation_year=2026)) == "Class of 2026 (2026)"
        assert str(CohortFactory(name="Evening", graduation_year=None)) == "Evening"

