"""Pydantic models for API requests and responses."""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field


# Request Models
class ExportBundleIn(BaseModel):
    """A Contentful export as written by the export command."""
    contentTypes: List[Dict[str, Any]] = Field(default_factory=list)
    entries: List[Dict[str, Any]] = Field(default_factory=list)
    assets: List[Dict[str, Any]] = Field(default_factory=list)
    editorInterfaces: List[Dict[str, Any]] = Field(default_factory=list)
    locales: List[Dict[str, Any]] = Field(default_factory=list)
    tags: List[Dict[str, Any]] = Field(default_factory=list)
    webhooks: List[Dict[str, Any]] = Field(default_factory=list)
    roles: List[Dict[str, Any]] = Field(default_factory=list)


class SchemaConvertRequest(BaseModel):
    export: ExportBundleIn
    keep_markdown: bool = False
    weak_refs: bool = False


class DatasetConvertRequest(BaseModel):
    export: ExportBundleIn
    locale: Optional[str] = None
    keep_markdown: bool = False
    weak_refs: bool = False
    include_drafts: bool = False


# Response Models
class SchemaConvertResponse(BaseModel):
    types: List[Dict[str, Any]]
    total: int


class DatasetConvertResponse(BaseModel):
    documents: List[Dict[str, Any]]
    total: int
    warnings: List[str] = Field(default_factory=list)
