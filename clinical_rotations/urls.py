"""
URLs for clinical_rotations.
"""

from django.urls import include, path

urlpatterns = [
    path("api/clinical_rotations/", include("clinical_rotations.api.urls")),
]
