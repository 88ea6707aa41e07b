"""
Views for cohort rotation assignments.
"""

from django.db.models import Count
from rest_framework import status
from rest_framework.exceptions import ParseError
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from clinical_rotations.compat import is_school_administrator
from clinical_rotations.exceptions import NotFoundError
from clinical_rotations.generation import generate_rotations
from clinical_rotations.models import AssignmentStatus, Cohort, CohortRotationAssignment

from ..permissions import IsCohortAdministrator
from .serializers import (
    AssignmentStatusChangeSerializer,
    CohortRotationAssignmentSerializer,
    CreateCohortRotationAssignmentSerializer,
    GenerateRotationsSerializer,
    UpdateCohortRotationAssignmentSerializer,
)


def _assignments():
    return CohortRotationAssignment.objects.select_related(
        "cohort",
        "cohort__program",
        "rotation_template",
        "clinical_site",
    ).annotate(rotation_count=Count("rotations"))


def get_assignment(assignment_id) -> CohortRotationAssignment:
    """
    Get a cohort rotation assignment by id.

    :raises: NotFoundError if the assignment does not exist.
    """
    try:
        return _assignments().get(pk=assignment_id)
    except (CohortRotationAssignment.DoesNotExist, ValueError, TypeError) as exc:
        raise NotFoundError(f"Cohort rotation assignment {assignment_id} not found.") from exc


class CohortRotationAssignmentView(APIView):
    """
    API View to manage the rotation assignments of cohorts.

    Only administrators of the school that owns a cohort can manage its assignments.
    """

    permission_classes = [IsAuthenticated, IsCohortAdministrator]

    def get(self, request):
        """List the assignments of the cohorts the user administers.

        Query params:
            cohortId (optional): Only return assignments of this cohort.
            status (optional): Only return assignments in this status.
        """
        assignments = _assignments()

        if cohort_id := request.query_params.get("cohortId"):
            if not cohort_id.isdigit():
                raise ParseError("cohortId must be an integer.")
            assignments = assignments.filter(cohort_id=cohort_id)

        if status_filter := request.query_params.get("status"):
            if status_filter not in AssignmentStatus.values:
                raise ParseError(f"Unknown status: {status_filter}.")
            assignments = assignments.filter(status=status_filter)

        allowed_cohorts = {}
        visible = []
        for assignment in assignments:
            if assignment.cohort_id not in allowed_cohorts:
                allowed_cohorts[assignment.cohort_id] = is_school_administrator(request.user, assignment.cohort)
            if allowed_cohorts[assignment.cohort_id]:
                visible.append(assignment)

        return Response({"assignments": CohortRotationAssignmentSerializer(visible, many=True).data})

    def post(self, request):
        """Assign a rotation template to a cohort.

        Example payload::

            {
                "cohortId": 1,
                "rotationTemplateId": 2,
                "clinicalSiteId": 3,
                "startDate": "2025-01-06T00:00:00Z",
                "endDate": "2025-02-03T00:00:00Z",
                "requiredHours": 160,
                "maxStudents": 20,
                "notes": "Morning shifts only"
            }

        """
        serializer = CreateCohortRotationAssignmentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            cohort = Cohort.objects.select_related("program").get(pk=data["cohortId"])
        except Cohort.DoesNotExist as exc:
            raise NotFoundError({"cohortId": [f"Cohort {data['cohortId']} not found."]}) from exc
        self.check_object_permissions(request, cohort)

        assignment = CohortRotationAssignment.objects.create_assignment(
            cohort_id=cohort.pk,
            rotation_template_id=data["rotationTemplateId"],
            clinical_site_id=data.get("clinicalSiteId"),
            start_date=data["startDate"],
            end_date=data["endDate"],
            required_hours=data["requiredHours"],
            max_students=data.get("maxStudents"),
            notes=data.get("notes", ""),
            created_by=request.user,
        )
        return Response(
            CohortRotationAssignmentSerializer(get_assignment(assignment.pk)).data,
            status=status.HTTP_201_CREATED,
        )

    def put(self, request):
        """Update an assignment. Only the supplied fields change.

        Example payload::

            {
                "id": 5,
                "requiredHours": 120,
                "status": "CANCELLED",
                "reason": "Site closed for renovation"
            }

        """
        serializer = UpdateCohortRotationAssignmentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        assignment = get_assignment(serializer.validated_data["id"])
        self.check_object_permissions(request, assignment)

        assignment.apply_changes(
            changed_by=request.user,
            status=serializer.validated_data.get("status"),
            reason=serializer.validated_data.get("reason", ""),
            **serializer.get_changes(),
        )
        return Response(CohortRotationAssignmentSerializer(get_assignment(assignment.pk)).data)

    def delete(self, request):
        """Delete an assignment that has no generated rotations.

        Query params:
            id (required): The assignment to delete.
        """
        assignment_id = request.query_params.get("id")
        if not assignment_id:
            raise ParseError("Missing id parameter.")

        assignment = get_assignment(assignment_id)
        self.check_object_permissions(request, assignment)

        assignment.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


class GenerateCohortRotationsView(APIView):
    """
    Generate the per-student rotations of a cohort rotation assignment.

    The response is the generation summary. It is returned with status 200 even
    when some students failed; those are listed under ``errors``.
    """

    permission_classes = [IsAuthenticated, IsCohortAdministrator]

    def post(self, request):
        """Generate rotations.

        Example payload::

            {
                "cohortRotationAssignmentId": 5,
                "clinicalSiteId": 3
            }

        """
        serializer = GenerateRotationsSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        assignment = get_assignment(serializer.validated_data["cohortRotationAssignmentId"])
        self.check_object_permissions(request, assignment)

        result = generate_rotations(
            assignment.pk,
            run_by=request.user,
            clinical_site_id=serializer.validated_data.get("clinicalSiteId"),
        )
        return Response(result.as_dict())


class AssignmentStatusChangeView(APIView):
    """
    Base view moving an assignment to another status.
    """

    permission_classes = [IsAuthenticated, IsCohortAdministrator]
    status_action = None

    def post(self, request):
        """Change the status of the assignment given in the payload."""
        serializer = AssignmentStatusChangeSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        assignment = get_assignment(serializer.validated_data["cohortRotationAssignmentId"])
        self.check_object_permissions(request, assignment)

        getattr(assignment, self.status_action)(changed_by=request.user, reason=serializer.validated_data["reason"])
        return Response(CohortRotationAssignmentSerializer(get_assignment(assignment.pk)).data)


class CompleteCohortRotationAssignmentView(AssignmentStatusChangeView):
    """Mark a published assignment as completed."""

    status_action = "complete"


class CancelCohortRotationAssignmentView(AssignmentStatusChangeView):
    """Cancel a draft or published assignment."""

    status_action = "cancel"
