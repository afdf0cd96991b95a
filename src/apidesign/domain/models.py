from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, Field


class MemberSpec(BaseModel):
    name: str
    type: str = "unknown"
    required: bool = False
    description: str = ""
    enum: list[Any] = Field(default_factory=list)


class RouteSpec(BaseModel):
    method: str
    path: str
    full_path: str
    wildcards: list[str] = Field(default_factory=list)


class ResponseSpec(BaseModel):
    name: str
    status: Optional[int] = None
    media_type: str = ""
    headers: list[MemberSpec] = Field(default_factory=list)


class ActionSpec(BaseModel):
    name: str
    resource: str
    description: str = ""
    routes: list[RouteSpec] = Field(default_factory=list)
    headers: list[MemberSpec] = Field(default_factory=list)
    params: list[MemberSpec] = Field(default_factory=list)
    payload: Optional[str] = None  # payload type name, e.g. UpdateAccountPayload
    payload_members: list[MemberSpec] = Field(default_factory=list)
    responses: list[ResponseSpec] = Field(default_factory=list)


class ResourceSpec(BaseModel):
    name: str
    base_path: str = ""
    full_path: str = "/"
    media_type: str = ""
    description: str = ""
    actions: list[ActionSpec] = Field(default_factory=list)
