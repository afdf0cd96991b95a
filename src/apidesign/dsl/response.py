from __future__ import annotations

from typing import Optional

from apidesign.design.model import ActionDefinition, ResourceDefinition, ResponseDefinition
from apidesign.dsl.context import BuildContext, Callback
from apidesign.dsl.errors import ErrorKind


def response(
    ctx: BuildContext, name: str, callback: Optional[Callback] = None
) -> Optional[ResponseDefinition]:
    """
    Declare a possible response of an action, or a response shared by all
    actions of a resource. Declaring the same name again augments it.
    """
    owner = ctx.resolve(ActionDefinition, "response", required=False)
    if owner is None:
        owner = ctx.resolve(ResourceDefinition, "response", expected="an action or resource")
    if owner is None:
        return None
    resp = owner.responses.get(name)
    if resp is None:
        resp = ResponseDefinition(name=name, parent=owner)
    if not ctx.execute(callback, resp):
        return None
    owner.responses[name] = resp
    return resp


def status(ctx: BuildContext, code: int) -> None:
    resp = ctx.resolve(ResponseDefinition, "status")
    if resp is None:
        return
    if not isinstance(code, int) or isinstance(code, bool):
        ctx.report(f"HTTP status must be an integer, got {code!r}", ErrorKind.CALL_SHAPE)
        return
    if not 100 <= code <= 599:
        ctx.report(f"invalid HTTP status {code}")
        return
    resp.status = code


def media(ctx: BuildContext, identifier: str) -> None:
    resp = ctx.resolve(ResponseDefinition, "media")
    if resp is None:
        return
    if identifier not in ctx.design.media_types:
        ctx.report(f'unknown media type "{identifier}"', ErrorKind.REFERENCE)
        return
    resp.media_type = identifier
