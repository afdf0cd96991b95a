from __future__ import annotations

from typing import Optional

from apidesign.design.model import Design, ResourceDefinition
from apidesign.dsl.context import BuildContext, Callback
from apidesign.dsl.errors import ErrorKind


def api(ctx: BuildContext, name: str, callback: Optional[Callback] = None) -> Optional[Design]:
    if not ctx.require_top_level("api"):
        return None
    ctx.design.name = name
    if not ctx.execute(callback, ctx.design):
        return None
    return ctx.design


def resource(
    ctx: BuildContext, name: str, callback: Optional[Callback] = None
) -> Optional[ResourceDefinition]:
    """
    Declare (or augment) a resource. Resources are top-level declarations and
    are stored in the design once their callback succeeds.
    """
    if not ctx.require_top_level("resource"):
        return None
    r = ctx.design.resources.get(name)
    if r is None:
        r = ResourceDefinition(name=name, design=ctx.design)
    if not ctx.execute(callback, r):
        return None
    ctx.design.resources[name] = r
    return r


def base_path(ctx: BuildContext, path: str) -> None:
    """Base path of the API or of a resource. Paths starting with "//" ignore any prefix."""
    frame = ctx.current()
    if isinstance(frame, (Design, ResourceDefinition)):
        frame.base_path = path
        return
    ctx.report("base_path must be used inside an api or resource definition", ErrorKind.CONTEXT)


def parent(ctx: BuildContext, name: str) -> None:
    r = ctx.resolve(ResourceDefinition, "parent")
    if r is None:
        return
    if name == r.name:
        ctx.report(f'resource "{name}" cannot be its own parent', ErrorKind.VALIDATION)
        return
    r.parent_name = name


def default_media(ctx: BuildContext, identifier: str) -> None:
    """Media type whose members are inherited by the resource's headers, params and payloads."""
    r = ctx.resolve(ResourceDefinition, "default_media")
    if r is None:
        return
    if identifier not in ctx.design.media_types:
        ctx.report(f'unknown media type "{identifier}"', ErrorKind.REFERENCE)
        return
    r.media_type = identifier


def description(ctx: BuildContext, text: str) -> None:
    frame = ctx.current()
    if frame is None or not hasattr(frame, "description"):
        ctx.report("description must be used inside a definition", ErrorKind.CONTEXT)
        return
    frame.description = text
