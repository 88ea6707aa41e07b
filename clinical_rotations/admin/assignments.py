"""
Admin for cohort rotation assignments, generated rotations and their audit trails.
"""

from django import forms
from django.conf import settings
from django.contrib import admin, messages
from django.core.exceptions import ValidationError
from django_object_actions import DjangoObjectActions, action

from ..exceptions import CohortRotationError
from ..generation import generate_rotations
from ..models import (
    AssignmentStatus,
    CohortRotationAssignment,
    CohortRotationAssignmentAudit,
    Rotation,
    RotationGenerationAudit,
)
from ..models.assignments import validate_assignment_values
from ..transitions import TERMINAL_STATUSES


class CohortRotationAssignmentForm(forms.ModelForm):
    """Form for Cohort Rotation Assignment that checks the same rules as the API."""

    class Meta:
        """Form options."""

        model = CohortRotationAssignment
        fields = "__all__"

    def clean(self):
        """Apply the API's assignment rules to admin edits."""
        cleaned_data = super().clean()
        if self.instance.pk and self.instance.status in TERMINAL_STATUSES:
            raise ValidationError(f"Assignment is {self.instance.status} and can no longer be edited.")

        start_date = cleaned_data.get("start_date")
        end_date = cleaned_data.get("end_date")
        if start_date and end_date:
            try:
                validate_assignment_values(
                    start_date,
                    end_date,
                    cleaned_data.get("required_hours"),
                    cleaned_data.get("max_students"),
                )
            except CohortRotationError as e:
                raise ValidationError([str(reason) for reasons in e.detail.values() for reason in reasons]) from e

        cohort = cleaned_data.get("cohort")
        template = cleaned_data.get("rotation_template")
        if self.instance.pk and (
            (cohort and cohort.pk != self.instance.cohort_id)
            or (template and template.pk != self.instance.rotation_template_id)
        ):
            raise ValidationError("Cohort and rotation template cannot change once the assignment exists.")
        if cohort and template and cohort.program_id != template.program_id:
            raise ValidationError("Rotation template belongs to a different program than the cohort.")
        if not self.instance.pk and template and not template.is_active:
            raise ValidationError("Rotation template is not active.")
        return cleaned_data


class CohortRotationAssignmentAuditInline(admin.TabularInline):
    """Inline admin for CohortRotationAssignmentAudit records."""

    model = CohortRotationAssignmentAudit
    fk_name = "assignment"
    extra = 0
    readonly_fields = ["state_transition", "changed_by", "reason", "created"]
    fields = readonly_fields

    def has_add_permission(self, request, obj=None):
        """Disable manual creation of audit records."""
        return False

    def has_delete_permission(self, request, obj=None):
        """Disable deletion of audit records."""
        return False


class RotationGenerationAuditInline(admin.TabularInline):
    """Inline admin for RotationGenerationAudit records."""

    model = RotationGenerationAudit
    fk_name = "assignment"
    extra = 0
    readonly_fields = ["student", "student_ref", "status", "reason", "rotation", "run_by", "created"]
    fields = readonly_fields

    def has_add_permission(self, request, obj=None):
        """Disable manual creation of audit records."""
        return False

    def has_delete_permission(self, request, obj=None):
        """Disable deletion of audit records."""
        return False


@admin.register(CohortRotationAssignment)
class CohortRotationAssignmentAdmin(DjangoObjectActions, admin.ModelAdmin):
    """Admin for Cohort Rotation Assignment."""

    model = CohortRotationAssignment
    form = CohortRotationAssignmentForm

    list_display = [
        "id",
        "rotation_template",
        "cohort",
        "clinical_site",
        "start_date",
        "end_date",
        "max_students",
        "status",
        "get_rotation_count",
    ]
    list_filter = ["status", "cohort__program", "rotation_template__specialty"]
    search_fields = ["cohort__name", "rotation_template__name", "clinical_site__name"]

    # Status moves through the actions below so every change is audited.
    readonly_fields = ["status", "created_by", "created", "modified"]

    inlines = [CohortRotationAssignmentAuditInline, RotationGenerationAuditInline]

    change_actions = ("generate_rotations", "complete_assignment", "cancel_assignment")
    actions = ["generate_selected"]

    def get_rotation_count(self, obj):
        """Get the number of rotations generated from the assignment."""
        return obj.rotations.count()

    get_rotation_count.short_description = "Rotations"

    def get_readonly_fields(self, request, obj=None):
        """Lock the cohort and template once the assignment exists."""
        readonly_fields = list(super().get_readonly_fields(request, obj))
        if obj is not None:
            readonly_fields += ["cohort", "rotation_template"]
        return readonly_fields

    def save_model(self, request, obj, form, change):
        """Create new assignments through the manager so they start audited as DRAFT."""
        if change:
            super().save_model(request, obj, form, change)
            return

        created = CohortRotationAssignment.objects.create_assignment(
            cohort_id=obj.cohort_id,
            rotation_template_id=obj.rotation_template_id,
            start_date=obj.start_date,
            end_date=obj.end_date,
            required_hours=obj.required_hours,
            clinical_site_id=obj.clinical_site_id,
            max_students=obj.max_students,
            notes=obj.notes,
            created_by=request.user,
        )
        obj.pk = created.pk
        obj.refresh_from_db()

    def delete_model(self, request, obj):
        """Delete through the model so assignments with rotations are kept."""
        try:
            obj.delete()
        except CohortRotationError as e:
            messages.error(request, f"Cannot delete {obj}: {e.detail}")

    def delete_queryset(self, request, queryset):
        """Delete each assignment individually, keeping those with rotations."""
        for obj in queryset:
            self.delete_model(request, obj)

    @action(label="Generate Rotations", description="Create a rotation for every student on the cohort roster")
    def generate_rotations(self, request, obj: CohortRotationAssignment):
        """Generate the missing rotations of this assignment."""
        try:
            result = generate_rotations(obj.pk, run_by=request.user)
        except CohortRotationError as e:
            messages.error(request, f"Cannot generate rotations: {e.detail}")
            return

        if result.errors:
            messages.warning(request, result.message)
        else:
            messages.success(request, result.message)

    @action(label="Complete", description="Mark this assignment as completed")
    def complete_assignment(self, request, obj: CohortRotationAssignment):
        """Move a published assignment to COMPLETED."""
        try:
            obj.complete(changed_by=request.user, reason="Completed via admin action")
        except CohortRotationError as e:
            messages.error(request, f"Cannot complete assignment: {e.detail}")
            return
        messages.success(request, f"Assignment {obj.pk} completed.")

    @action(label="Cancel", description="Cancel this assignment; generated rotations are kept")
    def cancel_assignment(self, request, obj: CohortRotationAssignment):
        """Move a draft or published assignment to CANCELLED."""
        try:
            obj.cancel(changed_by=request.user, reason="Cancelled via admin action")
        except CohortRotationError as e:
            messages.error(request, f"Cannot cancel assignment: {e.detail}")
            return
        messages.success(request, f"Assignment {obj.pk} cancelled.")

    def generate_selected(self, request, queryset):
        """
        Bulk action to generate rotations for the selected assignments.

        Runs inline or queues one task per assignment, depending on
        CLINICAL_ROTATIONS_GENERATION_MODE.
        """
        assignments = queryset.exclude(status__in=[AssignmentStatus.COMPLETED, AssignmentStatus.CANCELLED])
        skipped_count = queryset.count() - assignments.count()

        if settings.CLINICAL_ROTATIONS_GENERATION_MODE == "async":
            # pylint: disable=import-outside-toplevel
            from clinical_rotations.tasks import generate_cohort_rotations_task

            queued_count = 0
            for assignment in assignments:
                generate_cohort_rotations_task.delay(assignment.pk, run_by_id=request.user.pk)
                queued_count += 1
            if queued_count > 0:
                messages.success(request, f"Queued rotation generation for {queued_count} assignment(s)")
        else:
            created_count = 0
            failed_count = 0
            for assignment in assignments:
                try:
                    result = generate_rotations(assignment.pk, run_by=request.user)
                except CohortRotationError as e:
                    messages.error(request, f"Assignment {assignment.pk}: {e.detail}")
                    failed_count += 1
                    continue
                created_count += result.created
                failed_count += len(result.errors)
            messages.success(request, f"Generated {created_count} rotation(s)")
            if failed_count > 0:
                messages.warning(request, f"{failed_count} student(s) or assignment(s) need manual follow-up")

        if skipped_count > 0:
            messages.warning(request, f"Skipped {skipped_count} completed or cancelled assignment(s)")

    generate_selected.short_description = "Generate rotations for selected assignments"


@admin.register(Rotation)
class RotationAdmin(admin.ModelAdmin):
    """Admin for Rotation."""

    list_display = [
        "id",
        "student",
        "specialty",
        "clinical_site",
        "start_date",
        "end_date",
        "required_hours",
        "completed_hours",
        "status",
    ]
    list_filter = ["status", "specialty", "clinical_site"]
    search_fields = ["student__username", "specialty", "clinical_site__name"]
    raw_id_fields = ("student", "cohort_rotation_assignment")


@admin.register(RotationGenerationAudit)
class RotationGenerationAuditAdmin(admin.ModelAdmin):
    """Admin configuration for RotationGenerationAudit model."""

    list_display = ["id", "assignment", "student", "student_ref", "status", "reason", "run_by", "created"]
    list_filter = ["status", "created"]
    search_fields = ["student__username", "assignment__cohort__name", "reason"]
    readonly_fields = [
        "assignment",
        "student",
        "student_ref",
        "run_by",
        "rotation",
        "status",
        "reason",
        "created",
        "modified",
    ]

    def has_add_permission(self, request):
        """Disable manual creation of audit records."""
        return False


@admin.register(CohortRotationAssignmentAudit)
class CohortRotationAssignmentAuditAdmin(admin.ModelAdmin):
    """Admin configuration for CohortRotationAssignmentAudit model."""

    list_display = ["id", "assignment", "state_transition", "changed_by", "reason", "created"]
    list_filter = ["created"]
    search_fields = ["assignment__cohort__name", "changed_by__username", "reason"]
    readonly_fields = ["assignment", "state_transition", "changed_by", "reason", "created", "modified"]

    def has_add_permission(self, request):
        """Disable manual creation of audit records."""
        return False
