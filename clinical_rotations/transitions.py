"""
Lifecycle of a cohort rotation assignment.

``ALLOWED_TRANSITIONS`` is the only place that decides which status changes are
legal. Everything that moves an assignment between states goes through
:func:`ensure_transition`.
"""

from django.db import models
from django.utils.translation import gettext_lazy as _

from .exceptions import InvalidStateError


class AssignmentStatus(models.TextChoices):
    """Status of a cohort rotation assignment."""

    DRAFT = "DRAFT", _("Draft")
    PUBLISHED = "PUBLISHED", _("Published")
    COMPLETED = "COMPLETED", _("Completed")
    CANCELLED = "CANCELLED", _("Cancelled")


ALLOWED_TRANSITIONS = {
    AssignmentStatus.DRAFT: frozenset({AssignmentStatus.PUBLISHED, AssignmentStatus.CANCELLED}),
    AssignmentStatus.PUBLISHED: frozenset({AssignmentStatus.COMPLETED, AssignmentStatus.CANCELLED}),
    AssignmentStatus.COMPLETED: frozenset(),
    AssignmentStatus.CANCELLED: frozenset(),
}

INITIAL_STATUS = AssignmentStatus.DRAFT

TERMINAL_STATUSES = frozenset(status for status, targets in ALLOWED_TRANSITIONS.items() if not targets)


def can_transition(current: str, target: str) -> bool:
    """Return whether an assignment may move from ``current`` to ``target``."""
    try:
        current, target = AssignmentStatus(current), AssignmentStatus(target)
    except ValueError:
        return False
    return target in ALLOWED_TRANSITIONS[current]


def is_terminal(status: str) -> bool:
    """Return whether no further transition is possible from ``status``."""
    return status in TERMINAL_STATUSES


def ensure_transition(current: str, target: str) -> None:
    """
    Raise :class:`InvalidStateError` unless ``current`` -> ``target`` is legal.
    """
    if can_transition(current, target):
        return
    if is_terminal(current):
        raise InvalidStateError(f"Assignment is {current}; no further status changes are allowed.")
    raise InvalidStateError(f"Cannot change assignment status from {current} to {target}.")


def ensure_mutable(status: str) -> None:
    """Raise :class:`InvalidStateError` if an assignment in ``status`` can no longer be edited."""
    if is_terminal(status):
        raise InvalidStateError(f"Assignment is {status} and can no longer be changed.")


def ensure_generatable(status: str) -> None:
    """
    Raise :class:`InvalidStateError` unless rotations may be generated in ``status``.

    Generation publishes a draft, and re-running it on a published assignment is
    the supported retry path.
    """
    if status == AssignmentStatus.PUBLISHED or can_transition(status, AssignmentStatus.PUBLISHED):
        return
    raise InvalidStateError(f"Cannot generate rotations for an assignment that is {status}.")
