from __future__ import annotations

import importlib.util
import logging
import sys
from dataclasses import dataclass
from pathlib import Path

from apidesign.design.model import Design
from apidesign.dsl.context import BuildContext
from apidesign.dsl.errors import DesignError

logger = logging.getLogger(__name__)

ENTRYPOINT = "design"


class DesignLoadError(Exception):
    """The design file could not be loaded (missing, unimportable, no entrypoint)."""


@dataclass(frozen=True)
class BuildResult:
    design: Design
    errors: list[DesignError]
    path: str

    @property
    def ok(self) -> bool:
        return not self.errors


def run_build(path: Path) -> BuildResult:
    """
    Import a Python design file and run one build pass over it.

    The file must define `design(ctx)`, which declares types, media types and
    resources through the DSL functions. All configuration errors of the pass
    are collected in the result; none are raised.
    """
    path = path.expanduser().resolve()
    if not path.is_file():
        raise DesignLoadError(f"Design file does not exist: {path}")

    spec = importlib.util.spec_from_file_location(f"_apidesign_{path.stem}", path)
    if spec is None or spec.loader is None:
        raise DesignLoadError(f"Cannot import design file: {path}")
    module = importlib.util.module_from_spec(spec)
    sys.modules[spec.name] = module
    try:
        spec.loader.exec_module(module)
    except Exception as e:
        sys.modules.pop(spec.name, None)
        raise DesignLoadError(f"Cannot import design file: {path}: {e}") from e

    entry = getattr(module, ENTRYPOINT, None)
    if not callable(entry):
        raise DesignLoadError(f"{path} does not define {ENTRYPOINT}(ctx)")

    ctx = BuildContext()
    entry(ctx)
    logger.info(
        "built design %s: %d resources, %d errors",
        path.name,
        len(ctx.design.resources),
        len(ctx.errors),
    )
    return BuildResult(design=ctx.design, errors=list(ctx.errors), path=str(path))
