"""
Rotation views and serializers.
"""

from .serializers import RotationSerializer
from .views import RotationListView

__all__ = [
    "RotationListView",
    "RotationSerializer",
]
