"""
clinical_rotations Django application initialization.
"""

from django.apps import AppConfig


class ClinicalRotationsConfig(AppConfig):
    """
    Configuration for the clinical_rotations Django application.
    """

    name = "clinical_rotations"
    verbose_name = "Clinical Rotations"
    default_auto_field = "django.db.models.AutoField"
