from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, Union

from apidesign.design.paths import clean_path, join_path


@dataclass(frozen=True)
class Primitive:
    kind: str

    @property
    def name(self) -> str:
        return self.kind


String = Primitive("string")
Integer = Primitive("integer")
Number = Primitive("number")
Boolean = Primitive("boolean")
AnyValue = Primitive("any")


@dataclass
class Object:
    members: dict[str, "AttributeDefinition"] = field(default_factory=dict)

    @property
    def name(self) -> str:
        return "object"


@dataclass
class Array:
    element: "AttributeDefinition"

    @property
    def name(self) -> str:
        return f"array<{type_name(self.element.type)}>"


DataType = Union[Primitive, Object, Array, "UserTypeDefinition"]


def type_name(data_type: Optional[DataType]) -> str:
    if data_type is None:
        return "unknown"
    if isinstance(data_type, UserTypeDefinition):
        return data_type.type_name
    return data_type.name


def object_members(data_type: Optional[DataType]) -> Optional[dict[str, "AttributeDefinition"]]:
    """Members of an object-shaped type, following named types. None if not an object."""
    if isinstance(data_type, Object):
        return data_type.members
    if isinstance(data_type, UserTypeDefinition):
        return object_members(data_type.attribute.type)
    return None


@dataclass(eq=False)
class AttributeDefinition:
    """
    Structural description of a piece of data (headers, params or a body).

    `reference` is the base type whose members are inherited when a member is
    declared without an explicit type.
    """

    kind = "attribute"

    type: Optional[DataType] = None
    reference: Optional[DataType] = None
    description: str = ""
    required: list[str] = field(default_factory=list)
    enum: list[Any] = field(default_factory=list)
    minimum: Optional[float] = None
    maximum: Optional[float] = None
    pattern: Optional[str] = None
    default: Any = None

    def context(self) -> str:
        return "attribute"

    def clone(self) -> AttributeDefinition:
        """Copy members recursively; named types and the reference stay shared."""
        data_type = self.type
        if isinstance(data_type, Object):
            data_type = Object(members={k: v.clone() for k, v in data_type.members.items()})
        elif isinstance(data_type, Array):
            data_type = Array(element=data_type.element.clone())
        return AttributeDefinition(
            type=data_type,
            reference=self.reference,
            description=self.description,
            required=list(self.required),
            enum=list(self.enum),
            minimum=self.minimum,
            maximum=self.maximum,
            pattern=self.pattern,
            default=self.default,
        )

    def merge(self, other: AttributeDefinition) -> AttributeDefinition:
        """Return a new attribute with `other` layered over a copy of this one."""
        if not isinstance(self.type, Object) or not isinstance(other.type, Object):
            return other
        merged = self.clone()
        for name, member in other.type.members.items():
            merged.type.members[name] = member
        for name in other.required:
            if name not in merged.required:
                merged.required.append(name)
        if other.description:
            merged.description = other.description
        if other.reference is not None:
            merged.reference = other.reference
        return merged


@dataclass(eq=False)
class UserTypeDefinition:
    kind = "type"

    type_name: str
    attribute: AttributeDefinition

    def definition(self) -> AttributeDefinition:
        return self.attribute

    def context(self) -> str:
        return f'type "{self.type_name}"'


@dataclass(eq=False)
class MediaTypeDefinition(UserTypeDefinition):
    kind = "media type"

    identifier: str = ""

    def context(self) -> str:
        return f'media type "{self.identifier}"'


@dataclass(eq=False)
class RouteDefinition:
    kind = "route"

    verb: str
    path: str
    parent: Optional["ActionDefinition"] = field(default=None, repr=False)

    def full_path(self) -> str:
        if self.path.startswith("//"):
            return clean_path(self.path)
        base = ""
        if self.parent is not None:
            base = self.parent.parent.full_path()
        return join_path(base, self.path)

    def context(self) -> str:
        return f'route {self.verb} "{self.path}"'


@dataclass(eq=False)
class ResponseDefinition:
    kind = "response"

    name: str
    parent: Union["ResourceDefinition", "ActionDefinition"] = field(repr=False)
    status: Optional[int] = None
    media_type: str = ""
    description: str = ""
    headers: Optional[AttributeDefinition] = None

    def resource(self) -> "ResourceDefinition":
        if isinstance(self.parent, ActionDefinition):
            return self.parent.parent
        return self.parent

    def context(self) -> str:
        return f'response "{self.name}"'


@dataclass(eq=False)
class ActionDefinition:
    kind = "action"

    name: str
    parent: "ResourceDefinition" = field(repr=False)
    description: str = ""
    routes: list[RouteDefinition] = field(default_factory=list)
    headers: Optional[AttributeDefinition] = None
    params: Optional[AttributeDefinition] = None
    payload: Optional[UserTypeDefinition] = None
    responses: dict[str, ResponseDefinition] = field(default_factory=dict)

    def context(self) -> str:
        return f'action "{self.name}"'


@dataclass(eq=False)
class ResourceDefinition:
    kind = "resource"

    name: str
    design: Optional["Design"] = field(default=None, repr=False)
    description: str = ""
    base_path: str = ""
    parent_name: str = ""
    media_type: str = ""
    headers: Optional[AttributeDefinition] = None
    params: Optional[AttributeDefinition] = None
    actions: dict[str, ActionDefinition] = field(default_factory=dict)
    responses: dict[str, ResponseDefinition] = field(default_factory=dict)

    def parent(self) -> Optional[ResourceDefinition]:
        if not self.parent_name or self.design is None:
            return None
        return self.design.resources.get(self.parent_name)

    def full_path(self, _seen: Optional[set[str]] = None) -> str:
        """
        Base path prefixed with the parent resource's full path (or the API
        base path). A base path starting with "//" is absolute.
        """
        if self.base_path.startswith("//"):
            return clean_path(self.base_path)
        seen = (_seen or set()) | {self.name}
        base = ""
        p = self.parent()
        if p is not None and p.name not in seen:
            base = p.full_path(seen)
        elif self.design is not None:
            base = self.design.base_path
        return join_path(base, self.base_path)

    def context(self) -> str:
        return f'resource "{self.name}"'


@dataclass(eq=False)
class Design:
    """Design registry: resources plus the named types and media types they read."""

    kind = "api"

    name: str = ""
    description: str = ""
    base_path: str = ""
    resources: dict[str, ResourceDefinition] = field(default_factory=dict)
    types: dict[str, UserTypeDefinition] = field(default_factory=dict)
    media_types: dict[str, MediaTypeDefinition] = field(default_factory=dict)

    def context(self) -> str:
        return f'api "{self.name}"' if self.name else "api"
