# Generated manually for the initial clinical rotations schema

from django.conf import settings
import django.core.validators
from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone
import model_utils.fields


def _timestamps():
    return [
        ("id", models.AutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
        (
            "created",
            model_utils.fields.AutoCreatedField(
                default=django.utils.timezone.now, editable=False, verbose_name="created"
            ),
        ),
        (
            "modified",
            model_utils.fields.AutoLastModifiedField(
                default=django.utils.timezone.now, editable=False, verbose_name="modified"
            ),
        ),
    ]


ASSIGNMENT_STATUS_CHOICES = [
    ("DRAFT", "Draft"),
    ("PUBLISHED", "Published"),
    ("COMPLETED", "Completed"),
    ("CANCELLED", "Cancelled"),
]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Program",
            fields=_timestamps() + [
                ("name", models.CharField(max_length=255)),
                (
                    "school",
                    models.CharField(
                        db_index=True,
                        help_text="Identifier of the school that owns this program.",
                        max_length=255,
                    ),
                ),
                ("is_active", models.BooleanField(default=True)),
            ],
            options={
                "abstract": False,
            },
        ),
        migrations.CreateModel(
            name="ClinicalSite",
            fields=_timestamps() + [
                ("name", models.CharField(max_length=255)),
                (
                    "site_type",
                    models.CharField(
                        choices=[
                            ("HOSPITAL", "Hospital"),
                            ("CLINIC", "Clinic"),
                            ("NURSING_HOME", "Nursing home"),
                            ("OUTPATIENT", "Outpatient"),
                            ("OTHER", "Other"),
                        ],
                        default="HOSPITAL",
                        max_length=50,
                    ),
                ),
                (
                    "capacity",
                    models.PositiveIntegerField(
                        default=0,
                        help_text="Number of students the site can host at the same time.",
                    ),
                ),
                ("is_active", models.BooleanField(db_index=True, default=True)),
            ],
            options={
                "abstract": False,
            },
        ),
        migrations.CreateModel(
            name="RotationTemplate",
            fields=_timestamps() + [
                ("name", models.CharField(max_length=255)),
                ("description", models.TextField(blank=True)),
                ("specialty", models.CharField(max_length=255)),
                (
                    "default_duration_weeks",
                    models.PositiveIntegerField(
                        default=4, validators=[django.core.validators.MinValueValidator(1)]
                    ),
                ),
                (
                    "default_required_hours",
                    models.PositiveIntegerField(
                        default=160,
                        help_text="Hours a student must log; cohort assignments may override this.",
                        validators=[django.core.validators.MinValueValidator(1)],
                    ),
                ),
                ("objectives", models.JSONField(blank=True, default=list)),
                ("is_active", models.BooleanField(db_index=True, default=True)),
                ("sort_order", models.PositiveIntegerField(default=0)),
                (
                    "default_clinical_site",
                    models.ForeignKey(
                        blank=True,
                        help_text="Site used when an assignment does not name one.",
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to="clinical_rotations.clinicalsite",
                    ),
                ),
                (
                    "program",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="rotation_templates",
                        to="clinical_rotations.program",
                    ),
                ),
            ],
            options={
                "ordering": ("sort_order", "name"),
            },
        ),
        migrations.CreateModel(
            name="Cohort",
            fields=_timestamps() + [
                ("name", models.CharField(max_length=255)),
                ("graduation_year", models.PositiveIntegerField(blank=True, null=True)),
                ("start_date", models.DateField()),
                ("end_date", models.DateField()),
                ("capacity", models.PositiveIntegerField(default=0)),
                ("is_active", models.BooleanField(db_index=True, default=True)),
                (
                    "program",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="cohorts",
                        to="clinical_rotations.program",
                    ),
                ),
            ],
            options={
                "abstract": False,
            },
        ),
        migrations.CreateModel(
            name="CohortMembership",
            fields=_timestamps() + [
                (
                    "enrolled_at",
                    models.DateTimeField(
                        default=django.utils.timezone.now,
                        help_text="When the student joined the cohort. Determines generation order.",
                    ),
                ),
                ("is_active", models.BooleanField(default=True)),
                (
                    "cohort",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="memberships",
                        to="clinical_rotations.cohort",
                    ),
                ),
                (
                    "user",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="cohort_memberships",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "unique_together": {("cohort", "user")},
                "indexes": [models.Index(fields=["cohort", "enrolled_at"], name="clinical_ro_cohort__6f1e2a_idx")],
            },
        ),
        migrations.AddField(
            model_name="cohort",
            name="students",
            field=models.ManyToManyField(
                related_name="clinical_cohorts",
                through="clinical_rotations.CohortMembership",
                to=settings.AUTH_USER_MODEL,
            ),
        ),
        migrations.CreateModel(
            name="CohortRotationAssignment",
            fields=_timestamps() + [
                ("start_date", models.DateTimeField()),
                ("end_date", models.DateTimeField()),
                (
                    "required_hours",
                    models.PositiveIntegerField(help_text="Overrides the template's default required hours."),
                ),
                (
                    "max_students",
                    models.PositiveIntegerField(
                        blank=True,
                        help_text="Maximum number of rotations to generate. Leave empty for no limit.",
                        null=True,
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=ASSIGNMENT_STATUS_CHOICES,
                        db_index=True,
                        default="DRAFT",
                        max_length=20,
                    ),
                ),
                ("notes", models.TextField(blank=True)),
                (
                    "clinical_site",
                    models.ForeignKey(
                        blank=True,
                        help_text="Overrides the template's default clinical site.",
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="cohort_assignments",
                        to="clinical_rotations.clinicalsite",
                    ),
                ),
                (
                    "cohort",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="rotation_assignments",
                        to="clinical_rotations.cohort",
                    ),
                ),
                (
                    "created_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="cohort_rotation_assignments",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "rotation_template",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="cohort_assignments",
                        to="clinical_rotations.rotationtemplate",
                    ),
                ),
            ],
            options={
                "ordering": ("start_date", "id"),
                "indexes": [models.Index(fields=["status", "end_date"], name="clinical_ro_status_3c9d41_idx")],
            },
        ),
        migrations.CreateModel(
            name="CohortRotationAssignmentAudit",
            fields=_timestamps() + [
                ("state_transition", models.CharField(max_length=255)),
                ("reason", models.TextField(blank=True)),
                (
                    "assignment",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="audit",
                        to="clinical_rotations.cohortrotationassignment",
                    ),
                ),
                (
                    "changed_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="cohort_rotation_assignment_audit",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ("created", "id"),
            },
        ),
        migrations.CreateModel(
            name="Rotation",
            fields=_timestamps() + [
                ("specialty", models.CharField(max_length=255)),
                ("start_date", models.DateTimeField()),
                ("end_date", models.DateTimeField()),
                ("required_hours", models.PositiveIntegerField()),
                ("completed_hours", models.PositiveIntegerField(default=0)),
                ("objectives", models.JSONField(blank=True, default=list)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("SCHEDULED", "Scheduled"),
                            ("ACTIVE", "Active"),
                            ("COMPLETED", "Completed"),
                            ("CANCELLED", "Cancelled"),
                        ],
                        db_index=True,
                        default="SCHEDULED",
                        max_length=20,
                    ),
                ),
                (
                    "clinical_site",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="rotations",
                        to="clinical_rotations.clinicalsite",
                    ),
                ),
                (
                    "cohort_rotation_assignment",
                    models.ForeignKey(
                        blank=True,
                        help_text="The cohort assignment this rotation was generated from, if any.",
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="rotations",
                        to="clinical_rotations.cohortrotationassignment",
                    ),
                ),
                (
                    "rotation_template",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="rotations",
                        to="clinical_rotations.rotationtemplate",
                    ),
                ),
                (
                    "student",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="clinical_rotations",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ("start_date", "id"),
                "unique_together": {("student", "cohort_rotation_assignment")},
            },
        ),
        migrations.CreateModel(
            name="RotationGenerationAudit",
            fields=_timestamps() + [
                (
                    "status",
                    models.CharField(
                        choices=[("created", "Created"), ("skipped", "Skipped"), ("failed", "Failed")],
                        db_index=True,
                        max_length=20,
                    ),
                ),
                ("reason", models.TextField(blank=True)),
                ("student_ref", models.BigIntegerField(help_text="The student id as given by the roster.")),
                (
                    "assignment",
                    models.ForeignKey(
                        blank=True,
                        help_text="The assignment that was generated (null if it was deleted).",
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="generation_audits",
                        to="clinical_rotations.cohortrotationassignment",
                    ),
                ),
                (
                    "rotation",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to="clinical_rotations.rotation",
                    ),
                ),
                (
                    "run_by",
                    models.ForeignKey(
                        blank=True,
                        help_text="The administrator who triggered the run (null for system runs).",
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="rotation_generations_performed",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "student",
                    models.ForeignKey(
                        blank=True,
                        help_text="Null when the roster named a user that does not exist.",
                        null=True,
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="rotation_generation_audits",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "Rotation Generation Audit",
                "verbose_name_plural": "Rotation Generation Audits",
                "indexes": [
                    models.Index(fields=["created"], name="clinical_ro_created_8b2f70_idx"),
                    models.Index(fields=["status", "created"], name="clinical_ro_status_e51c07_idx"),
                ],
            },
        ),
    ]
