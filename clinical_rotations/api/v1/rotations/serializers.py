"""
Serializers for generated rotations.
"""

# pylint: disable=invalid-name

from rest_framework import serializers

from clinical_rotations.models import Rotation


class RotationSerializer(serializers.ModelSerializer):
    """
    Serializer for Rotation model.
    """

    studentId = serializers.IntegerField(source="student_id", read_only=True)
    cohortRotationAssignmentId = serializers.IntegerField(
        source="cohort_rotation_assignment_id", read_only=True, allow_null=True
    )
    rotationTemplateId = serializers.IntegerField(source="rotation_template_id", read_only=True, allow_null=True)
    clinicalSiteId = serializers.IntegerField(source="clinical_site_id", read_only=True)
    clinicalSiteName = serializers.CharField(source="clinical_site.name", read_only=True)
    startDate = serializers.DateTimeField(source="start_date", read_only=True)
    endDate = serializers.DateTimeField(source="end_date", read_only=True)
    requiredHours = serializers.IntegerField(source="required_hours", read_only=True)
    completedHours = serializers.IntegerField(source="completed_hours", read_only=True)

    class Meta:
        model = Rotation
        fields = (
            "id",
            "studentId",
            "cohortRotationAssignmentId",
            "rotationTemplateId",
            "clinicalSiteId",
            "clinicalSiteName",
            "specialty",
            "startDate",
            "endDate",
            "requiredHours",
            "completedHours",
            "objectives",
            "status",
        )
        read_only_fields = fields
