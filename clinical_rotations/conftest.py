"""Pytest fixtures."""

# pylint: disable=redefined-outer-name

from datetime import timedelta

import pytest
from django.utils import timezone
from rest_framework.test import APIClient

from clinical_rotations.tests.factories import (
    ClinicalSiteFactory,
    CohortFactory,
    CohortMembershipFactory,
    CohortRotationAssignmentFactory,
    GroupFactory,
    ProgramFactory,
    RotationTemplateFactory,
    UserFactory,
)


@pytest.fixture
def user():
    """Create a single user for testing."""
    return UserFactory()


@pytest.fixture
def program():
    """Create a program owned by the "westbrook" school."""
    return ProgramFactory(school="westbrook")


@pytest.fixture
def clinical_site():
    """Create a clinical site."""
    return ClinicalSiteFactory()


@pytest.fixture
def rotation_template(program, clinical_site):
    """Create an active rotation template with a default site."""
    return RotationTemplateFactory(program=program, default_clinical_site=clinical_site)


@pytest.fixture
def cohort(program):
    """Create a cohort in the program."""
    return CohortFactory(program=program)


@pytest.fixture
def students(cohort):
    """Enroll three students in the cohort, one day apart."""
    now = timezone.now()
    memberships = [
        CohortMembershipFactory(cohort=cohort, enrolled_at=now - timedelta(days=3 - i))
        for i in range(3)
    ]
    return [membership.user for membership in memberships]


@pytest.fixture
def assignment(cohort, rotation_template):
    """Create a DRAFT assignment of the template to the cohort without a site of its own."""
    return CohortRotationAssignmentFactory(cohort=cohort, rotation_template=rotation_template)


@pytest.fixture
def school_admin(program):
    """Create a user that administers the program's school."""
    admin_user = UserFactory()
    admin_user.groups.add(GroupFactory(name=f"{program.school} administrators"))
    return admin_user


@pytest.fixture
def api_client():
    """Return a DRF API client."""
    return APIClient()


@pytest.fixture
def school_admin_client(api_client, school_admin):
    """Return an API client authenticated as a school administrator."""
    api_client.force_authenticate(user=school_admin)
    return api_client
