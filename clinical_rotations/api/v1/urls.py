"""API v1 URLs."""

from django.urls import path

from clinical_rotations.api.v1.views import (
    CancelCohortRotationAssignmentView,
    CohortRotationAssignmentView,
    CompleteCohortRotationAssignmentView,
    GenerateCohortRotationsView,
    RotationListView,
)

urlpatterns = [
    path(
        "cohort-rotations/",
        CohortRotationAssignmentView.as_view(),
        name="cohort-rotations",
    ),
    path(
        "cohort-rotations/generate/",
        GenerateCohortRotationsView.as_view(),
        name="cohort-rotations-generate",
    ),
    path(
        "cohort-rotations/complete/",
        CompleteCohortRotationAssignmentView.as_view(),
        name="cohort-rotations-complete",
    ),
    path(
        "cohort-rotations/cancel/",
        CancelCohortRotationAssignmentView.as_view(),
        name="cohort-rotations-cancel",
    ),
    path(
        "rotations/",
        RotationListView.as_view(),
        name="rotations-list",
    ),
]
