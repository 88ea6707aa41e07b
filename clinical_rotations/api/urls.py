"""
URLs for the clinical rotations API.
"""

from django.urls import include, path

urlpatterns = [
    path("v1/", include("clinical_rotations.api.v1.urls")),
]
