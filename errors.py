"""
errors.py
Exception types shared by the store, repositories, services and controllers.
"""

from __future__ import annotations


class SwimClubError(Exception):
    """Base class for every error raised by the club ledger."""


class InvalidInput(SwimClubError, ValueError):
    """Input rejected by validation. Nothing has been mutated."""


class NotFound(SwimClubError, LookupError):
    """Unknown member or payment id."""


class IOFailure(SwimClubError, OSError):
    """A store could not be read or written."""


class IntegrityError(SwimClubError):
    """A stored record refers to something that does not exist."""
