"""
Collaborator hooks for identity and cohort rosters.

The defaults work with the models of this app. A host platform can replace
either hook through the ``CLINICAL_ROTATIONS_ROSTER_PROVIDER`` and
``CLINICAL_ROTATIONS_ADMIN_CHECK`` settings.
"""

import logging

from django.conf import settings
from django.contrib.auth.models import AbstractBaseUser
from django.utils.module_loading import import_string

log = logging.getLogger(__name__)


def get_cohort_membership_roster(cohort) -> list[int]:
    """
    Return the ids of the active students on a cohort's roster.

    Students are ordered by the date they joined the cohort, then by id, so
    capacity-limited generation always picks the same students.
    """
    # pylint: disable=import-outside-toplevel
    from .models import CohortMembership

    return list(
        CohortMembership.objects.filter(cohort=cohort, is_active=True, user__is_active=True)
        .order_by("enrolled_at", "user_id")
        .values_list("user_id", flat=True)
    )


def get_roster_for_cohort(cohort) -> list[int]:
    """
    Return the ordered, de-duplicated student ids of a cohort via the configured provider.
    """
    provider = import_string(settings.CLINICAL_ROTATIONS_ROSTER_PROVIDER)
    # dict.fromkeys keeps the first occurrence and the provider's order.
    return list(dict.fromkeys(provider(cohort)))


def user_administers_school(user: AbstractBaseUser, cohort) -> bool:
    """
    Check whether a user administers the school that owns a cohort.

    Superusers administer every school. Other users must belong to the auth
    group named by ``CLINICAL_ROTATIONS_SCHOOL_ADMIN_GROUP``.
    """
    if not user or not user.is_authenticated or not user.is_active:
        return False
    if user.is_superuser:
        return True

    group_name = settings.CLINICAL_ROTATIONS_SCHOOL_ADMIN_GROUP.format(school=cohort.program.school)
    return user.groups.filter(name=group_name).exists()


def is_school_administrator(user: AbstractBaseUser, cohort) -> bool:
    """Run the configured administrator check for ``cohort``."""
    check = import_string(settings.CLINICAL_ROTATIONS_ADMIN_CHECK)
    allowed = bool(check(user, cohort))
    if not allowed:
        log.debug("User %s is not an administrator for cohort %s", user, getattr(cohort, "pk", cohort))
    return allowed
