"""Exceptions raised by the PulseMind services."""

from __future__ import annotations


class PulseMindError(Exception):
    """Base class for all PulseMind domain errors."""


class UserNotFoundError(PulseMindError, LookupError):
    """No user (or trust record) exists for the given id."""

    def __init__(self, user_id: str) -> None:
        super().__init__(f"User '{user_id}' not found")
        self.user_id = user_id


class InvalidSubmissionError(PulseMindError, ValueError):
    """Submitted content or event payload is malformed (empty, too long, missing
    required fields, or a non-numeric mood score)."""


class FeatureLockedError(PulseMindError, PermissionError):
    """The user's trust phase does not unlock the requested action."""

    def __init__(self, message: str, phase: str = "") -> None:
        super().__init__(message)
        self.phase = phase
