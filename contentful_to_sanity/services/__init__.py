"""Service layer for the migration."""

from .schema_mapper import SchemaMapper, map_content_type, map_bundle, classify_asset_link
from .dataset_converter import DatasetConverter, convert_entries, write_ndjson
from .rich_text import RichTextConverter, markdown_to_blocks
from .schema_writer import write_schemas, read_schemas

__all__ = [
    "SchemaMapper",
    "map_content_type",
    "map_bundle",
    "classify_asset_link",
    "DatasetConverter",
    "convert_entries",
    "write_ndjson",
    "RichTextConverter",
    "markdown_to_blocks",
    "write_schemas",
    "read_schemas",
]
