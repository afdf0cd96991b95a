from __future__ import annotations

import logging
from typing import Callable, Optional, TypeVar

from apidesign.design.model import Design
from apidesign.dsl.errors import DesignError, ErrorKind, MultiDesignError

logger = logging.getLogger(__name__)

T = TypeVar("T")

Callback = Callable[[], None]


class BuildContext:
    """
    State of one build pass: the design being built, the stack of definitions
    whose callbacks are currently running, and the errors found so far.

    Every DSL function takes the context explicitly. A context is meant for a
    single pass on a single thread.
    """

    def __init__(self, design: Optional[Design] = None) -> None:
        self.design = design if design is not None else Design()
        self.errors: list[DesignError] = []
        self._stack: list[object] = []

    # ----------------------------
    # Stack
    # ----------------------------

    def current(self) -> Optional[object]:
        return self._stack[-1] if self._stack else None

    @property
    def depth(self) -> int:
        return len(self._stack)

    def location(self) -> str:
        return " > ".join(frame.context() for frame in self._stack)

    def resolve(
        self,
        kind: type[T],
        op: str,
        required: bool = True,
        expected: Optional[str] = None,
    ) -> Optional[T]:
        """
        Innermost definition if it is a `kind`, else None.

        With `required` a mismatch is reported as a context error. Only the
        innermost frame counts: an attribute block nested in an action is not
        an action block.
        """
        frame = self.current()
        if isinstance(frame, kind):
            return frame
        if required:
            self.report(
                f"{op} must be used inside {expected or _article(kind.kind)} definition",
                ErrorKind.CONTEXT,
            )
        return None

    def require_top_level(self, op: str) -> bool:
        if self._stack:
            self.report(f"{op} must be declared at the top level", ErrorKind.CONTEXT)
            return False
        return True

    # ----------------------------
    # Errors
    # ----------------------------

    def report(self, message: str, kind: ErrorKind = ErrorKind.VALIDATION) -> DesignError:
        err = DesignError(message, kind=kind, location=self.location())
        self.errors.append(err)
        logger.debug("design error: %s", err)
        return err

    @property
    def ok(self) -> bool:
        return not self.errors

    def raise_for_errors(self) -> None:
        if self.errors:
            raise MultiDesignError(self.errors)

    # ----------------------------
    # Execution
    # ----------------------------

    def execute(self, callback: Optional[Callback], target: object) -> bool:
        """
        Run `callback` with `target` as the innermost definition.

        Returns True when no error was recorded while it ran. A DesignError
        raised by the callback is recorded rather than propagated.
        """
        if callback is None:
            return True
        before = len(self.errors)
        self._stack.append(target)
        logger.debug("enter %s", self.location())
        try:
            callback()
        except DesignError as err:
            if not err.location:
                err.location = self.location()
            self.errors.append(err)
            logger.debug("design error: %s", err)
        finally:
            logger.debug("leave %s", self.location())
            self._stack.pop()
        return len(self.errors) == before


def _article(word: str) -> str:
    return f"an {word}" if word[:1] in "aeiou" else f"a {word}"
