from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Literal, Optional

import inflection

from apidesign.design.model import (
    ActionDefinition,
    AttributeDefinition,
    Design,
    Object,
    ResourceDefinition,
    ResponseDefinition,
    RouteDefinition,
    UserTypeDefinition,
)
from apidesign.design.paths import extract_wildcards
from apidesign.dsl.context import BuildContext, Callback
from apidesign.dsl.errors import ErrorKind


def action(ctx: BuildContext, name: str, callback: Optional[Callback] = None) -> Optional[ActionDefinition]:
    """
    Declare (or augment) the action `name` on the enclosing resource.

    Declarations are cumulative: a second `action` with the same name runs its
    callback against the existing definition. The action is only stored once
    its callback succeeds.
    """
    r = ctx.resolve(ResourceDefinition, "action")
    if r is None:
        return None
    a = r.actions.get(name)
    if a is None:
        a = ActionDefinition(name=name, parent=r)
    if not ctx.execute(callback, a):
        return None
    r.actions[name] = a
    return a


# ----------------------------
# Routes
# ----------------------------


def routing(ctx: BuildContext, *routes: RouteDefinition) -> list[RouteDefinition]:
    """
    Attach routes to the enclosing action, in order.

    A wildcard name used both in the resource base path and in a route path is
    reported, but the route is attached regardless.
    """
    a = ctx.resolve(ActionDefinition, "routing")
    if a is None:
        return []
    resource_path = a.parent.full_path()
    resource_wcs = extract_wildcards(resource_path)
    for r in routes:
        for wc in extract_wildcards(r.path):
            if wc in resource_wcs:
                ctx.report(
                    f'duplicate wildcard "{wc}" in resource base path "{resource_path}" '
                    f'and action route "{r.path}"',
                    ErrorKind.CONFLICT,
                )
        r.parent = a
        a.routes.append(r)
    return list(a.routes)


def route(verb: str, path: str) -> RouteDefinition:
    return RouteDefinition(verb=verb.upper(), path=path)


def get(path: str) -> RouteDefinition:
    return route("GET", path)


def head(path: str) -> RouteDefinition:
    return route("HEAD", path)


def post(path: str) -> RouteDefinition:
    return route("POST", path)


def put(path: str) -> RouteDefinition:
    return route("PUT", path)


def delete(path: str) -> RouteDefinition:
    return route("DELETE", path)


def options(path: str) -> RouteDefinition:
    return route("OPTIONS", path)


def trace(path: str) -> RouteDefinition:
    return route("TRACE", path)


def connect(path: str) -> RouteDefinition:
    return route("CONNECT", path)


def patch(path: str) -> RouteDefinition:
    return route("PATCH", path)


# ----------------------------
# Headers / params
# ----------------------------


def new_attribute(design: Design, media_type: str) -> AttributeDefinition:
    """Empty attribute whose members default to those of the given media type."""
    mt = design.media_types.get(media_type) if media_type else None
    return AttributeDefinition(reference=mt.attribute.type if mt is not None else None)


def headers(ctx: BuildContext, callback: Callback) -> Optional[AttributeDefinition]:
    """
    Describe request headers of an action, common headers of a resource, or
    the headers of a response. A response accepts a single headers block.
    """
    a = ctx.resolve(ActionDefinition, "headers", required=False)
    if a is not None:
        h = new_attribute(ctx.design, a.parent.media_type)
        if not ctx.execute(callback, h):
            return None
        a.headers = h
        return h

    r = ctx.resolve(ResourceDefinition, "headers", required=False)
    if r is not None:
        h = new_attribute(ctx.design, r.media_type)
        if not ctx.execute(callback, h):
            return None
        r.headers = h
        return h

    resp = ctx.resolve(
        ResponseDefinition, "headers", expected="an action, resource or response"
    )
    if resp is None:
        return None
    if resp.headers is not None:
        ctx.report("headers already defined", ErrorKind.REDECLARATION)
        return None
    h = new_attribute(ctx.design, resp.resource().media_type)
    if not ctx.execute(callback, h):
        return None
    resp.headers = h
    return h


def params(ctx: BuildContext, callback: Callback) -> Optional[AttributeDefinition]:
    """Describe path and query string parameters of an action or of all actions of a resource."""
    a = ctx.resolve(ActionDefinition, "params", required=False)
    if a is not None:
        p = new_attribute(ctx.design, a.parent.media_type)
        if not ctx.execute(callback, p):
            return None
        a.params = p
        return p

    r = ctx.resolve(ResourceDefinition, "params", expected="an action or resource")
    if r is None:
        return None
    p = new_attribute(ctx.design, r.media_type)
    if not ctx.execute(callback, p):
        return None
    r.params = p
    return p


# ----------------------------
# Payload
# ----------------------------

SourceKind = Literal["callback", "attribute", "typed", "name"]
_SEPARATORS = re.compile(r"[\s-]+")


def _camelize(name: str) -> str:
    return inflection.camelize(inflection.underscore(_SEPARATORS.sub("_", name.strip())))


def payload_type_name(action_name: str, resource_name: str) -> str:
    return f"{_camelize(action_name)}{_camelize(resource_name)}Payload"


@dataclass(frozen=True)
class PayloadSource:
    """What `payload` was given as its first argument."""

    kind: SourceKind
    value: Any

    @classmethod
    def of(cls, value: Any) -> Optional[PayloadSource]:
        if isinstance(value, str):
            return cls("name", value)
        if isinstance(value, AttributeDefinition):
            return cls("attribute", value)
        if callable(getattr(value, "definition", None)):
            return cls("typed", value)
        if callable(value):
            return cls("callback", value)
        return None


def payload(
    ctx: BuildContext, source: Any, *overrides: Callback
) -> Optional[UserTypeDefinition]:
    """
    Describe the request body of the enclosing action.

    `source` is a callback declaring members inline, an AttributeDefinition, a
    value with a `definition()` method (e.g. a UserTypeDefinition) or the name
    of a registered type. A single override callback may follow a non-callback
    source; it runs against a copy of the source attribute so named types are
    left untouched.

    A second payload on the same action is layered over the first one.
    """
    if len(overrides) > 1:
        ctx.report("too many arguments given to payload", ErrorKind.CALL_SHAPE)
        return None
    if overrides and not callable(overrides[0]):
        ctx.report(
            f"payload override must be a callable, got {type(overrides[0]).__name__}",
            ErrorKind.CALL_SHAPE,
        )
        return None
    a = ctx.resolve(ActionDefinition, "payload")
    if a is None:
        return None

    src = PayloadSource.of(source)
    if src is None:
        ctx.report(
            f"invalid payload source of type {type(source).__name__}", ErrorKind.CALL_SHAPE
        )
        return None

    callback: Optional[Callback] = None
    if src.kind == "callback":
        if overrides:
            ctx.report(
                "invalid arguments in payload call, must be (type), (dsl) or (type, dsl)",
                ErrorKind.CALL_SHAPE,
            )
            return None
        callback = src.value
        att = new_attribute(ctx.design, a.parent.media_type)
        att.type = Object()
    else:
        att = _source_attribute(ctx, src)
        if att is None:
            return None
        if overrides:
            callback = overrides[0]
            att = att.clone()

    if not ctx.execute(callback, att):
        return None

    if a.payload is not None:
        att = a.payload.attribute.merge(att)
    a.payload = UserTypeDefinition(
        type_name=payload_type_name(a.name, a.parent.name),
        attribute=att,
    )
    return a.payload


def _source_attribute(ctx: BuildContext, src: PayloadSource) -> Optional[AttributeDefinition]:
    if src.kind == "attribute":
        return src.value
    if src.kind == "typed":
        return src.value.definition()
    ut = ctx.design.types.get(src.value)
    if ut is None:
        ctx.report(f'unknown payload type "{src.value}"', ErrorKind.REFERENCE)
        return None
    return ut.attribute
