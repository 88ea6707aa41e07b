# pylint: disable=missing-module-docstring,missing-class-docstring
from datetime import timedelta

import factory
from django.contrib import auth
from django.contrib.auth.models import Group
from django.utils import timezone
from factory.fuzzy import FuzzyText

from clinical_rotations.models import (
    AssignmentStatus,
    ClinicalSite,
    Cohort,
    CohortMembership,
    CohortRotationAssignment,
    Program,
    Rotation,
    RotationTemplate,
)

User = auth.get_user_model()

USER_PASSWORD = "password"


class UserFactory(factory.django.DjangoModelFactory):
    username = factory.Sequence(lambda n: "user_%d" % n)
    password = factory.PostGenerationMethodCall("set_password", USER_PASSWORD)
    is_active = True
    is_superuser = False
    is_staff = False
    email = factory.Faker("email")
    first_name = factory.Faker("first_name")
    last_name = factory.Faker("last_name")

    class Meta:
        model = User
        skip_postgeneration_save = True


class GroupFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = Group
        django_get_or_create = ("name",)

    name = factory.Sequence(lambda n: "group_%d" % n)


class ProgramFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = Program

    name = factory.Sequence(lambda n: "Nursing BSN %d" % n)
    school = "westbrook"


class ClinicalSiteFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = ClinicalSite

    name = factory.Sequence(lambda n: "General Hospital %d" % n)
    site_type = ClinicalSite.HOSPITAL
    capacity = 30


class RotationTemplateFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = RotationTemplate

    program = factory.SubFactory(ProgramFactory)
    name = FuzzyText(prefix="Rotation ")
    specialty = "Medical-Surgical"
    default_clinical_site = factory.SubFactory(ClinicalSiteFactory)
    objectives = factory.LazyFunction(lambda: ["Perform head-to-toe assessments", "Administer medications"])


class CohortFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = Cohort

    program = factory.SubFactory(ProgramFactory)
    name = factory.Sequence(lambda n: "Class of %d" % (2025 + n))
    graduation_year = 2026
    start_date = factory.LazyFunction(lambda: timezone.now().date())
    end_date = factory.LazyFunction(lambda: (timezone.now() + timedelta(days=730)).date())


class CohortMembershipFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = CohortMembership

    cohort = factory.SubFactory(CohortFactory)
    user = factory.SubFactory(UserFactory)


class CohortRotationAssignmentFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = CohortRotationAssignment

    cohort = factory.SubFactory(CohortFactory)
    rotation_template = factory.SubFactory(RotationTemplateFactory, program=factory.SelfAttribute("..cohort.program"))
    start_date = factory.LazyFunction(lambda: timezone.now() + timedelta(days=7))
    end_date = factory.LazyAttribute(lambda o: o.start_date + timedelta(weeks=4))
    required_hours = 160
    status = AssignmentStatus.DRAFT


class RotationFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = Rotation

    student = factory.SubFactory(UserFactory)
    cohort_rotation_assignment = factory.SubFactory(CohortRotationAssignmentFactory)
    rotation_template = factory.SelfAttribute("cohort_rotation_assignment.rotation_template")
    clinical_site = factory.SubFactory(ClinicalSiteFactory)
    specialty = "Medical-Surgical"
    start_date = factory.SelfAttribute("cohort_rotation_assignment.start_date")
    end_date = factory.SelfAttribute("cohort_rotation_assignment.end_date")
    required_hours = 160
