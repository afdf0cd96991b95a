from __future__ import annotations

from typing import Iterable, List, Optional

from apidesign.design.model import (
    ActionDefinition,
    AttributeDefinition,
    Design,
    ResponseDefinition,
    object_members,
    type_name,
)
from apidesign.design.paths import extract_wildcards
from apidesign.domain.models import (
    ActionSpec,
    MemberSpec,
    ResourceSpec,
    ResponseSpec,
    RouteSpec,
)


def _members(att: Optional[AttributeDefinition]) -> list[MemberSpec]:
    if att is None:
        return []
    members = object_members(att.type) or {}
    return [
        MemberSpec(
            name=name,
            type=type_name(m.type),
            required=name in att.required,
            description=m.description,
            enum=list(m.enum),
        )
        for name, m in members.items()
    ]


def _responses(responses: Iterable[ResponseDefinition]) -> list[ResponseSpec]:
    return [
        ResponseSpec(
            name=r.name,
            status=r.status,
            media_type=r.media_type,
            headers=_members(r.headers),
        )
        for r in responses
    ]


def _action_spec(a: ActionDefinition) -> ActionSpec:
    # resource-level headers/params apply to every action that does not override them
    headers = a.headers if a.headers is not None else a.parent.headers
    params = a.params if a.params is not None else a.parent.params
    return ActionSpec(
        name=a.name,
        resource=a.parent.name,
        description=a.description,
        routes=[
            RouteSpec(
                method=r.verb,
                path=r.path,
                full_path=r.full_path(),
                wildcards=extract_wildcards(r.full_path()),
            )
            for r in a.routes
        ],
        headers=_members(headers),
        params=_members(params),
        payload=a.payload.type_name if a.payload is not None else None,
        payload_members=_members(a.payload.attribute) if a.payload is not None else [],
        responses=_responses(a.responses.values()),
    )


def summarize(design: Design) -> List[ResourceSpec]:
    """
    Flatten a built design into serializable specs.

    Resources, actions and routes keep declaration order: route order is the
    order in which a router must register them.
    """
    return [
        ResourceSpec(
            name=r.name,
            base_path=r.base_path,
            full_path=r.full_path(),
            media_type=r.media_type,
            description=r.description,
            actions=[_action_spec(a) for a in r.actions.values()],
        )
        for r in design.resources.values()
    ]
