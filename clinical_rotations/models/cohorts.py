"""
Cohorts and their rosters.
"""

from django.contrib import auth
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _
from model_utils.models import TimeStampedModel

from .programs import Program

User = auth.get_user_model()


class Cohort(TimeStampedModel):
    """
    A named group of students in the same program and graduation year.

    .. no_pii:
    """

    program = models.ForeignKey(Program, related_name="cohorts", on_delete=models.CASCADE)
    name = models.CharField(max_length=255)
    graduation_year = models.PositiveIntegerField(null=True, blank=True)
    start_date = models.DateField()
    end_date = models.DateField()
    capacity = models.PositiveIntegerField(default=0)
    is_active = models.BooleanField(default=True, db_index=True)
    students = models.ManyToManyField(User, through="CohortMembership", related_name="clinical_cohorts")

    memberships: "models.Manager[CohortMembership]"

    def __str__(self):
        """User-friendly string representation of this model."""
        if self.graduation_year:
            return f"{self.name} ({self.graduation_year})"
        return self.name


class CohortMembership(TimeStampedModel):
    """
    A student on a cohort's roster.

    .. no_pii:
    """

    class Meta:
        """Model options."""

        unique_together = ("cohort", "user")
        indexes = [
            models.Index(fields=["cohort", "enrolled_at"], name="clinical_ro_cohort__6f1e2a_idx"),
        ]

    cohort = models.ForeignKey(Cohort, related_name="memberships", on_delete=models.CASCADE)
    user = models.ForeignKey(User, related_name="cohort_memberships", on_delete=models.CASCADE)
    enrolled_at = models.DateTimeField(
        default=timezone.now,
        help_text=_("When the student joined the cohort. Determines generation order."),
    )
    is_active = models.BooleanField(default=True)

    def __str__(self):
        """User-friendly string representation of this model."""
        return f"{self.user}: {self.cohort}"
