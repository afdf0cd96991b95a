from __future__ import annotations

import re
from typing import Any, Optional, Union

from apidesign.design.model import (
    Array,
    AttributeDefinition,
    DataType,
    Object,
    Primitive,
    String,
    UserTypeDefinition,
    object_members,
)
from apidesign.dsl.context import BuildContext, Callback
from apidesign.dsl.errors import ErrorKind

TypeRef = Union[DataType, str]


def attribute(
    ctx: BuildContext,
    name: str,
    type: Optional[TypeRef] = None,
    callback: Optional[Callback] = None,
    description: str = "",
) -> Optional[AttributeDefinition]:
    """
    Add member `name` to the enclosing attribute, making it an object if it has
    no type yet.

    Without an explicit `type` the member takes the type (and description) of
    the member with the same name in the enclosing attribute's reference, so
    a block seeded from a media type only needs to list names and validations.
    Members not found there default to String, or to an object when the
    callback declares nested members.
    """
    owner = ctx.resolve(AttributeDefinition, "attribute")
    if owner is None:
        return None
    if owner.type is None:
        owner.type = Object()
    if not isinstance(owner.type, Object):
        ctx.report(
            f'cannot define member "{name}" on attribute of type {owner.type.name}',
            ErrorKind.VALIDATION,
        )
        return None

    inherited = (object_members(owner.reference) or {}).get(name)
    child = AttributeDefinition(description=description)
    if type is not None:
        data_type = _resolve_type(ctx, type)
        if data_type is None:
            return None
        child.type = data_type
    elif inherited is not None:
        child.reference = inherited.type
        child.description = description or inherited.description
        if object_members(inherited.type) is None:
            child.type = inherited.type

    if not ctx.execute(callback, child):
        return None
    if child.type is None:
        child.type = inherited.type if inherited is not None else String
    owner.type.members[name] = child
    return child


member = attribute
header = attribute
param = attribute


def _resolve_type(ctx: BuildContext, ref: TypeRef) -> Optional[DataType]:
    if isinstance(ref, (Primitive, Object, Array, UserTypeDefinition)):
        return ref
    if not isinstance(ref, str):
        ctx.report(f"invalid type {ref!r}", ErrorKind.CALL_SHAPE)
        return None
    ut = ctx.design.types.get(ref) or ctx.design.media_types.get(ref)
    if ut is None:
        ctx.report(f'unknown type "{ref}"', ErrorKind.REFERENCE)
    return ut


def array_of(ctx: BuildContext, element: TypeRef) -> Optional[Array]:
    data_type = _resolve_type(ctx, element)
    if data_type is None:
        return None
    return Array(element=AttributeDefinition(type=data_type))


# ----------------------------
# Validations
# ----------------------------


def required(ctx: BuildContext, *names: str) -> None:
    att = ctx.resolve(AttributeDefinition, "required")
    if att is None:
        return
    if att.type is not None and object_members(att.type) is None:
        ctx.report(f"required only applies to object attributes, not {att.type.name}")
        return
    for n in names:
        if n not in att.required:
            att.required.append(n)


def enum(ctx: BuildContext, *values: Any) -> None:
    att = ctx.resolve(AttributeDefinition, "enum")
    if att is not None:
        att.enum.extend(values)


def minimum(ctx: BuildContext, value: float) -> None:
    att = ctx.resolve(AttributeDefinition, "minimum")
    if att is not None:
        att.minimum = value


def maximum(ctx: BuildContext, value: float) -> None:
    att = ctx.resolve(AttributeDefinition, "maximum")
    if att is not None:
        att.maximum = value


def pattern(ctx: BuildContext, regex: str) -> None:
    att = ctx.resolve(AttributeDefinition, "pattern")
    if att is None:
        return
    try:
        re.compile(regex)
    except re.error as e:
        ctx.report(f'invalid pattern "{regex}": {e}')
        return
    att.pattern = regex


def default(ctx: BuildContext, value: Any) -> None:
    att = ctx.resolve(AttributeDefinition, "default")
    if att is not None:
        att.default = value
