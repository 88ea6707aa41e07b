"""Django settings for the clinical_rotations app."""

from django.conf import Settings


def plugin_settings(settings: Settings):
    """
    Define app settings, keeping any value the project has already set.

    Call this from the project settings module after the project's own values,
    e.g. ``plugin_settings(sys.modules[__name__])``.
    """
    # Rotation generation execution mode for the admin bulk action
    # - 'sync': Generate inline in the Django process
    # - 'async': Queue one Celery task per assignment (recommended for large cohorts)
    settings.CLINICAL_ROTATIONS_GENERATION_MODE = getattr(
        settings,
        'CLINICAL_ROTATIONS_GENERATION_MODE',
        'sync'
    )

    # Dotted path of the callable returning the ordered student ids of a cohort.
    # Point this at an external cohort registry if the roster lives elsewhere.
    settings.CLINICAL_ROTATIONS_ROSTER_PROVIDER = getattr(
        settings,
        'CLINICAL_ROTATIONS_ROSTER_PROVIDER',
        'clinical_rotations.compat.get_cohort_membership_roster'
    )

    # Dotted path of the callable deciding whether a user administers the
    # school that owns a cohort. Signature: (user, cohort) -> bool
    settings.CLINICAL_ROTATIONS_ADMIN_CHECK = getattr(
        settings,
        'CLINICAL_ROTATIONS_ADMIN_CHECK',
        'clinical_rotations.compat.user_administers_school'
    )

    # Name of the auth Group whose members administer a school.
    # Used by the default administrator check.
    settings.CLINICAL_ROTATIONS_SCHOOL_ADMIN_GROUP = getattr(
        settings,
        'CLINICAL_ROTATIONS_SCHOOL_ADMIN_GROUP',
        '{school} administrators'
    )

    # Days after an assignment's end date before the batch task marks it completed.
    settings.CLINICAL_ROTATIONS_AUTO_COMPLETE_GRACE_DAYS = getattr(
        settings,
        'CLINICAL_ROTATIONS_AUTO_COMPLETE_GRACE_DAYS',
        0
    )
