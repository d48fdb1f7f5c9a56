"""Exception hierarchy shared by the resolution engine and the session."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:  # pragma: no cover - import cycle guard
    from .path import ReferencePath


class SketchError(Exception):
    """Base class for every error raised by :mod:`refsketch`."""


class ResolutionError(SketchError):
    """Raised when a reference cannot be turned into a concrete value."""

    kind = "resolution"

    def __init__(self, message: str, path: Optional["ReferencePath"] = None):
        super().__init__(message)
        self.path = path

    def __str__(self) -> str:
        message = super().__str__()
        if self.path is None:
            return message
        return f"{message} (while resolving {self.path.describe()})"


class UnknownId(ResolutionError):
    """The referenced step or data id does not exist (any more)."""

    kind = "unknown-id"


class InvalidProperty(ResolutionError):
    """The referenced property is not exposed by the target's kind."""

    kind = "invalid-property"


class UnresolvedCycle(ResolutionError):
    """Reference chain revisits a path or exceeds the depth bound."""

    kind = "cycle"


class MalformedPath(ResolutionError):
    """Path is too short (or too long) for the value that was requested."""

    kind = "malformed-path"


class SessionError(SketchError):
    """Raised for invalid session operations (unknown slot, missing entity)."""


__all__ = [
    "SketchError",
    "ResolutionError",
    "UnknownId",
    "InvalidProperty",
    "UnresolvedCycle",
    "MalformedPath",
    "SessionError",
]
