"""
Serializers for cohort rotation assignments.

Field names are camelCase to match the payloads used by the school admin dashboard.
"""

# pylint: disable=invalid-name,abstract-method

from rest_framework import serializers

from clinical_rotations.models import AssignmentStatus, CohortRotationAssignment


class CohortRotationAssignmentSerializer(serializers.ModelSerializer):
    """
    Serializer for CohortRotationAssignment model.
    """

    cohortId = serializers.IntegerField(source="cohort_id", read_only=True)
    cohortName = serializers.CharField(source="cohort.name", read_only=True)
    cohortGraduationYear = serializers.IntegerField(source="cohort.graduation_year", read_only=True)
    programId = serializers.IntegerField(source="cohort.program_id", read_only=True)
    rotationTemplateId = serializers.IntegerField(source="rotation_template_id", read_only=True)
    templateName = serializers.CharField(source="rotation_template.name", read_only=True)
    templateSpecialty = serializers.CharField(source="rotation_template.specialty", read_only=True)
    clinicalSiteId = serializers.IntegerField(source="clinical_site_id", read_only=True, allow_null=True)
    clinicalSiteName = serializers.CharField(source="clinical_site.name", read_only=True, allow_null=True)
    startDate = serializers.DateTimeField(source="start_date", read_only=True)
    endDate = serializers.DateTimeField(source="end_date", read_only=True)
    requiredHours = serializers.IntegerField(source="required_hours", read_only=True)
    maxStudents = serializers.IntegerField(source="max_students", read_only=True, allow_null=True)
    createdBy = serializers.IntegerField(source="created_by_id", read_only=True, allow_null=True)
    createdAt = serializers.DateTimeField(source="created", read_only=True)
    updatedAt = serializers.DateTimeField(source="modified", read_only=True)
    rotationCount = serializers.SerializerMethodField()

    class Meta:
        model = CohortRotationAssignment
        fields = (
            "id",
            "cohortId",
            "cohortName",
            "cohortGraduationYear",
            "programId",
            "rotationTemplateId",
            "templateName",
            "templateSpecialty",
            "clinicalSiteId",
            "clinicalSiteName",
            "startDate",
            "endDate",
            "requiredHours",
            "maxStudents",
            "status",
            "notes",
            "createdBy",
            "createdAt",
            "updatedAt",
            "rotationCount",
        )
        read_only_fields = fields

    def get_rotationCount(self, obj):
        """Get the number of rotations generated from the assignment."""
        if hasattr(obj, "rotation_count"):
            return obj.rotation_count
        return obj.rotations.count()


class CreateCohortRotationAssignmentSerializer(serializers.Serializer):
    """Payload for creating a cohort rotation assignment."""

    cohortId = serializers.IntegerField()
    rotationTemplateId = serializers.IntegerField()
    clinicalSiteId = serializers.IntegerField(required=False, allow_null=True)
    startDate = serializers.DateTimeField()
    endDate = serializers.DateTimeField()
    requiredHours = serializers.IntegerField()
    maxStudents = serializers.IntegerField(required=False, allow_null=True)
    notes = serializers.CharField(required=False, allow_blank=True, default="")


class UpdateCohortRotationAssignmentSerializer(serializers.Serializer):
    """Payload for updating a cohort rotation assignment. Only supplied fields change."""

    FIELD_MAP = {
        "clinicalSiteId": "clinical_site_id",
        "startDate": "start_date",
        "endDate": "end_date",
        "requiredHours": "required_hours",
        "maxStudents": "max_students",
        "notes": "notes",
    }

    id = serializers.IntegerField()
    clinicalSiteId = serializers.IntegerField(required=False, allow_null=True)
    startDate = serializers.DateTimeField(required=False)
    endDate = serializers.DateTimeField(required=False)
    requiredHours = serializers.IntegerField(required=False)
    maxStudents = serializers.IntegerField(required=False, allow_null=True)
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    status = serializers.ChoiceField(choices=AssignmentStatus.choices, required=False)
    reason = serializers.CharField(required=False, allow_blank=True, default="")

    def validate_notes(self, value):
        """Treat null notes as cleared."""
        return value or ""

    def get_changes(self) -> dict:
        """Return the supplied editable fields keyed by model field name."""
        return {
            model_field: self.validated_data[field]
            for field, model_field in self.FIELD_MAP.items()
            if field in self.validated_data
        }


class GenerateRotationsSerializer(serializers.Serializer):
    """Payload for generating the rotations of an assignment."""

    cohortRotationAssignmentId = serializers.IntegerField()
    clinicalSiteId = serializers.IntegerField(required=False, allow_null=True)


class AssignmentStatusChangeSerializer(serializers.Serializer):
    """Payload for completing or cancelling an assignment."""

    cohortRotationAssignmentId = serializers.IntegerField()
    reason = serializers.CharField(required=False, allow_blank=True, default="")
