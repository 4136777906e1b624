from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class OAuthAccessToken(BaseModel):
    access_token: str
    expires: Optional[int] = None
    token_type: Optional[str] = None

    model_config = ConfigDict(extra="allow")


class GraphObject(BaseModel):
    id: Optional[str] = None
    name: Optional[str] = None

    model_config = ConfigDict(extra="allow")


class GraphCursors(BaseModel):
    before: Optional[str] = None
    after: Optional[str] = None


class GraphPaging(BaseModel):
    previous: Optional[str] = None
    next: Optional[str] = None
    cursors: Optional[GraphCursors] = None

    model_config = ConfigDict(extra="allow")


class GraphCollection(BaseModel):
    data: List[Dict[str, Any]] = Field(default_factory=list)
    paging: Optional[GraphPaging] = None

    model_config = ConfigDict(extra="allow")


__all__ = [
    "GraphCollection",
    "GraphCursors",
    "GraphObject",
    "GraphPaging",
    "OAuthAccessToken",
]
