"""Exception hierarchy for kepgen.

All kepgen-specific exceptions inherit from KepGenError so the command
line (or any other front end) can report them uniformly.

Exception Hierarchy:
    KepGenError (base)
    ├── InvalidTargetError - operation on the wrong node kind or on the root
    ├── InvalidNameError - blank folder/tag name
    ├── NodeNotFoundError - unknown node id or path
    ├── NoTagsError - CSV export of a hierarchy without tags
    └── LoadError - malformed hierarchy document

File system failures are not wrapped: OSError reaches the caller as-is.
"""

from typing import Any, Dict, Optional


class KepGenError(Exception):
    """Base exception for all kepgen errors.

    Attributes:
        message: Human-readable error message.
        details: Optional additional context about the error.
    """

    default_message = "An error occurred"

    def __init__(self, message: Optional[str] = None, *, details: Optional[Dict[str, Any]] = None):
        self.message = message or self.default_message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        if self.details:
            return f"{self.__class__.__name__}({self.message!r}, details={self.details!r})"
        return f"{self.__class__.__name__}({self.message!r})"


class InvalidTargetError(KepGenError, ValueError):
    """Structural operation attempted on the wrong node kind or on the root."""

    default_message = "Invalid target node"


class InvalidNameError(KepGenError, ValueError):
    """Folder or tag name is blank after trimming."""

    default_message = "Name must not be blank"


class NodeNotFoundError(KepGenError, KeyError):
    """No node with the given id or path."""

    default_message = "Node not found"

    # KeyError quotes its argument in str(); keep the plain message
    __str__ = KepGenError.__str__


class NoTagsError(KepGenError):
    """Export attempted on a hierarchy that holds no tags."""

    default_message = "No tags found. Add tags before exporting."


class LoadError(KepGenError):
    """Hierarchy document could not be decoded.

    Attributes:
        path: JSON path of the offending node (e.g. "$.children[1]"), if known.
    """

    default_message = "Invalid hierarchy document"

    def __init__(self, message: Optional[str] = None, *, path: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        self.path = path
        if path and message:
            message = f"{message} (at {path})"
        super().__init__(message, details=details)


__all__ = [
    "KepGenError",
    "InvalidTargetError",
    "InvalidNameError",
    "NodeNotFoundError",
    "NoTagsError",
    "LoadError",
]
