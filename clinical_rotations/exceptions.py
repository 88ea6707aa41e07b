"""
Errors raised by cohort rotation operations.

All of them are DRF ``APIException`` subclasses, so API views can let them
propagate and the framework renders the status code and detail. Validation
details are ``{field: [reason]}`` mappings so callers can correct the request.
"""

from django.utils.translation import gettext_lazy as _
from rest_framework import status
from rest_framework.exceptions import APIException


class CohortRotationError(APIException):
    """Base class for cohort rotation errors."""


class ValidationError(CohortRotationError):
    """Malformed or inconsistent input, e.g. an inverted date range."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = _("Invalid input.")
    default_code = "invalid"

    @classmethod
    def for_field(cls, field: str, reason: str) -> "ValidationError":
        """Build an error whose detail points at a single request field."""
        return cls({field: [reason]})


class NotFoundError(CohortRotationError):
    """An unknown cohort, template, clinical site or assignment id."""

    status_code = status.HTTP_404_NOT_FOUND
    default_detail = _("Not found.")
    default_code = "not_found"


class InvalidStateError(CohortRotationError):
    """The operation is not legal in the assignment's current lifecycle state."""

    status_code = status.HTTP_409_CONFLICT
    default_detail = _("Operation not allowed in the current state.")
    default_code = "invalid_state"


class ConflictError(CohortRotationError):
    """The operation would violate a uniqueness or referential invariant."""

    status_code = status.HTTP_409_CONFLICT
    default_detail = _("Conflict.")
    default_code = "conflict"
