"""Data models for the migration."""

from .contentful import (
    FieldKind,
    LinkType,
    FieldItems,
    ContentfulField,
    ContentfulContentType,
    AssetFile,
    ContentfulAsset,
    ExportBundle,
    local_asset_path,
)
from .sanity import (
    SanityType,
    SanityFieldDefinition,
    SanityDocumentDefinition,
)
from .migration import (
    ExportConfig,
    SchemaOptions,
    DatasetOptions,
    MigrationRun,
    MigrationStep,
    MigrationStatus,
)

__all__ = [
    "FieldKind",
    "LinkType",
    "FieldItems",
    "ContentfulField",
    "ContentfulContentType",
    "AssetFile",
    "ContentfulAsset",
    "ExportBundle",
    "local_asset_path",
    "SanityType",
    "SanityFieldDefinition",
    "SanityDocumentDefinition",
    "ExportConfig",
    "SchemaOptions",
    "DatasetOptions",
    "MigrationRun",
    "MigrationStep",
    "MigrationStatus",
]
