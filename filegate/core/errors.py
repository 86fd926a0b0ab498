"""
Access errors.

Deliberately coarse: a decision is either allowed, forbidden (with a
human-readable reason) or not found. Anything else that goes wrong while
resolving a file is reported as not found so storage and network details
never reach the caller.
"""

from __future__ import annotations


class AccessError(Exception):
    """Base class for classified access decisions."""

    status_code: int = 400

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.detail!r})"


class ForbiddenError(AccessError):
    """The caller is known but policy denies access."""

    status_code = 403


class NotFoundError(AccessError):
    """The file, or an entity needed to resolve it, does not exist."""

    status_code = 404


class RegistryError(Exception):
    """Raised when the strategy registry is wired incorrectly."""
    pass
