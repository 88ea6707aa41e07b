"""
Celery tasks for the clinical rotations app.
"""

import logging
from datetime import timedelta

from celery import shared_task
from django.conf import settings
from django.contrib.auth import get_user_model
from django.db import OperationalError
from django.utils import timezone

from .generation import generate_rotations
from .models import AssignmentStatus, CohortRotationAssignment

logger = logging.getLogger(__name__)


@shared_task(
    bind=True,
    autoretry_for=(OperationalError,),
    retry_kwargs={'max_retries': 3, 'countdown': 60},
    retry_backoff=True,
)
def generate_cohort_rotations_task(self, assignment_id, run_by_id=None):
    """
    Celery task wrapper for rotation generation.

    Retrying is safe because generation skips students who already have a
    rotation for the assignment.

    Args:
        assignment_id: The ID of the CohortRotationAssignment to generate
        run_by_id: The ID of the user who queued the generation, if any

    Returns:
        dict: The generation summary (created, skipped, errors, ...)
    """
    run_by = None
    if run_by_id is not None:
        run_by = get_user_model().objects.filter(pk=run_by_id).first()

    try:
        result = generate_rotations(assignment_id, run_by=run_by)
    except OperationalError as e:
        logger.error(
            "[Rotations Task] Generation failed for assignment %s: %s (attempt %s/%s)",
            assignment_id,
            str(e),
            self.request.retries + 1,
            self.max_retries,
        )
        raise

    summary = result.as_dict()
    logger.info(
        "[Rotations Task] Assignment %s generated: created=%d skipped=%d errors=%d",
        assignment_id,
        summary['created'],
        summary['skipped'],
        len(summary['errors']),
    )
    return summary


def complete_elapsed_assignments(now=None):
    """
    Complete every published assignment whose date window has ended.

    The window is considered over ``CLINICAL_ROTATIONS_AUTO_COMPLETE_GRACE_DAYS``
    days after the assignment's end date.

    Returns:
        int: Number of assignments moved to COMPLETED
    """
    now = now or timezone.now()
    cutoff = now - timedelta(days=settings.CLINICAL_ROTATIONS_AUTO_COMPLETE_GRACE_DAYS)

    elapsed_ids = CohortRotationAssignment.objects.filter(
        status=AssignmentStatus.PUBLISHED,
        end_date__lt=cutoff,
    ).values_list('id', flat=True)

    completed = 0
    for assignment_id in list(elapsed_ids):
        if CohortRotationAssignment.objects.transition(
            assignment_id,
            AssignmentStatus.PUBLISHED,
            AssignmentStatus.COMPLETED,
            reason="Rotation window ended",
        ):
            completed += 1

    logger.info("[Rotations Task] Completed %d elapsed cohort rotation assignments.", completed)
    return completed


@shared_task
def complete_elapsed_assignments_task():
    """
    Periodic task closing out assignments whose rotation window has ended.
    """
    return complete_elapsed_assignments()
