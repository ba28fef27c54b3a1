"""Pydantic schemas for JSON:API v1.1 documents."""

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict


class JSONAPIResourceIdentifier(BaseModel):
    """Resource identifier object: type + id."""

    model_config = ConfigDict(extra="allow")

    type: str
    id: str


class JSONAPIRelationship(BaseModel):
    """Relationship object holding linkage data."""

    model_config = ConfigDict(extra="allow")

    data: Union[List[JSONAPIResourceIdentifier], JSONAPIResourceIdentifier, None] = None
    links: Optional[Dict[str, Any]] = None
    meta: Optional[Dict[str, Any]] = None


class JSONAPIResource(BaseModel):
    """Resource object with attributes and relationships."""

    model_config = ConfigDict(extra="allow")

    type: str
    id: str
    attributes: Optional[Dict[str, Any]] = None
    relationships: Optional[Dict[str, JSONAPIRelationship]] = None
    links: Optional[Dict[str, Any]] = None


class JSONAPIDocument(BaseModel):
    """Top-level JSON:API document."""

    model_config = ConfigDict(extra="forbid")

    data: Union[List[JSONAPIResource], JSONAPIResource, None] = None
    included: Optional[List[JSONAPIResource]] = None
    meta: Optional[Dict[str, Any]] = None
    links: Optional[Dict[str, Any]] = None


class JSONAPIErrorDocument(BaseModel):
    """Top-level JSON:API error document."""

    errors: List[Dict[str, Any]]
