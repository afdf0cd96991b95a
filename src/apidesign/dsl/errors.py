"""
Error types for design build passes.

A `DesignError` is both the record stored by the build context and an
exception a callback may raise to reject its own declaration. Either way the
error ends up in the context's collector; the build pass keeps going.
"""

from __future__ import annotations

from enum import Enum
from typing import Iterable


class ErrorKind(str, Enum):
    CONTEXT = "context"              # operation used outside its block
    CONFLICT = "conflict"            # duplicate wildcard in resource/route paths
    REFERENCE = "reference"          # unknown type or media type name
    REDECLARATION = "redeclaration"  # e.g. headers set twice on a response
    CALL_SHAPE = "call_shape"        # bad argument combination
    VALIDATION = "validation"        # attribute-level misuse


class DesignError(Exception):
    """A single configuration error found while building a design."""

    def __init__(self, message: str, kind: ErrorKind = ErrorKind.VALIDATION, location: str = ""):
        self.message = message
        self.kind = kind
        self.location = location
        super().__init__(message)

    def __str__(self) -> str:
        if self.location:
            return f"{self.location}: {self.message}"
        return self.message

    def __repr__(self) -> str:
        return f"DesignError({self.kind.value!r}, {str(self)!r})"


class MultiDesignError(Exception):
    """Raised after a build pass that collected one or more errors."""

    def __init__(self, errors: Iterable[DesignError]):
        self.errors = list(errors)
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        lines = [f"{len(self.errors)} design error(s):"]
        lines.extend(f"  - {e}" for e in self.errors)
        return "\n".join(lines)
