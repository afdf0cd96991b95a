from __future__ import annotations

from typing import Optional

from apidesign.design.model import AttributeDefinition, MediaTypeDefinition, Object, UserTypeDefinition
from apidesign.dsl.context import BuildContext, Callback
from apidesign.dsl.errors import ErrorKind


def user_type(ctx: BuildContext, name: str, callback: Optional[Callback] = None) -> Optional[UserTypeDefinition]:
    """Register a named object type that payloads and members can refer to by name."""
    if not ctx.require_top_level("user_type"):
        return None
    if name in ctx.design.types:
        ctx.report(f'type "{name}" already defined', ErrorKind.REDECLARATION)
        return None
    att = AttributeDefinition(type=Object())
    if not ctx.execute(callback, att):
        return None
    ut = UserTypeDefinition(type_name=name, attribute=att)
    ctx.design.types[name] = ut
    return ut


def media_type(
    ctx: BuildContext,
    identifier: str,
    callback: Optional[Callback] = None,
    type_name: str = "",
) -> Optional[MediaTypeDefinition]:
    """Register a media type, e.g. "application/vnd.account+json"."""
    if not ctx.require_top_level("media_type"):
        return None
    if identifier in ctx.design.media_types:
        ctx.report(f'media type "{identifier}" already defined', ErrorKind.REDECLARATION)
        return None
    att = AttributeDefinition(type=Object())
    if not ctx.execute(callback, att):
        return None
    mt = MediaTypeDefinition(type_name=type_name or identifier, attribute=att, identifier=identifier)
    ctx.design.media_types[identifier] = mt
    return mt
