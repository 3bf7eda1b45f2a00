"""Conversion of Contentful entries into Sanity documents."""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from dateutil import parser as date_parser

from ..models.contentful import (
    ContentfulAsset,
    ContentfulContentType,
    ContentfulField,
    ExportBundle,
    FieldKind,
    LinkType,
    local_asset_path,
)
from ..models.migration import DatasetOptions
from ..models.sanity import SanityType
from .rich_text import RichTextConverter, make_key, markdown_to_blocks
from .schema_mapper import classify_asset_link, is_date_only_field, is_markdown_field

logger = logging.getLogger(__name__)


class DatasetConverter:
    """
    Converts the entries of an export into Sanity documents.

    Documents keep the Contentful entry ID as `_id` and the content type ID
    as `_type`, so they match the schemas produced by the schema mapper.
    Asset links become `_sanityAsset` references that `sanity dataset
    import` uploads, either from the Contentful CDN or from downloaded
    files.
    """

    def __init__(self, bundle: ExportBundle, options: Optional[DatasetOptions] = None):
        """
        Initialize the converter.

        Args:
            bundle: Export to convert
            options: Conversion options
        """
        self.bundle = bundle
        self.options = options or DatasetOptions()
        self.locale = self.options.locale or bundle.default_locale
        self._assets: Dict[str, ContentfulAsset] = bundle.get_assets()
        self._content_types: Dict[str, ContentfulContentType] = {
            ct.id: ct for ct in bundle.get_content_types()
        }
        self._rich_text = RichTextConverter(
            link_entry=self._rich_text_entry,
            link_asset=self._rich_text_asset,
        )
        self._warnings: List[str] = []

    @property
    def warnings(self) -> List[str]:
        return list(self._warnings)

    def convert(self) -> List[Dict[str, Any]]:
        """
        Convert all entries, in export order.

        Returns:
            List of Sanity documents
        """
        documents = []
        for entry in self.bundle.entries:
            document = self.convert_entry(entry)
            if document is not None:
                documents.append(document)

        logger.info(f"Converted {len(documents)} of {len(self.bundle.entries)} entries")
        return documents

    def convert_entry(self, entry: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Convert a single entry, or return None if it is skipped."""
        sys = entry.get("sys", {})
        entry_id = sys.get("id", "")
        content_type_id = sys.get("contentType", {}).get("sys", {}).get("id", "")

        if not self.options.include_drafts and self._is_draft(sys):
            logger.debug(f"Skipping draft entry {entry_id}")
            return None

        content_type = self._content_types.get(content_type_id)
        if content_type is None:
            self._add_warning(f"Entry {entry_id} has unknown content type '{content_type_id}'")
            return None

        controls = self.bundle.get_editor_controls(content_type_id)
        document: Dict[str, Any] = {"_id": entry_id, "_type": content_type_id}

        if sys.get("createdAt"):
            document["_createdAt"] = sys["createdAt"]
        if sys.get("updatedAt"):
            document["_updatedAt"] = sys["updatedAt"]

        fields = entry.get("fields", {})
        for cf_field in content_type.fields:
            value = self._localized_value(fields.get(cf_field.id))
            if value is None:
                continue
            converted = self._convert_value(
                cf_field, value, controls.get(cf_field.id), key_prefix=f"{entry_id}.{cf_field.id}",
            )
            if converted is not None:
                document[cf_field.id] = converted

        return document

    def _is_draft(self, sys: Dict[str, Any]) -> bool:
        # Entries from the Management API carry version info; Delivery API entries are published
        if "version" not in sys:
            return False
        return not sys.get("publishedVersion")

    def _localized_value(self, raw: Any) -> Any:
        """Pick the value for the configured locale, falling back to the default one."""
        if not isinstance(raw, dict):
            return raw
        if self.locale in raw:
            return raw[self.locale]
        if self.bundle.default_locale in raw:
            return raw[self.bundle.default_locale]
        return None

    def _convert_value(
        self,
        cf_field: ContentfulField,
        value: Any,
        control: Optional[Dict[str, Any]],
        key_prefix: str,
    ) -> Any:
        kind = cf_field.type

        if kind == FieldKind.LINK:
            return self._convert_link(cf_field, value)

        if kind == FieldKind.ARRAY:
            if not isinstance(value, list):
                self._add_warning(f"Expected a list for field {key_prefix}")
                return None
            if cf_field.items and cf_field.items.type == FieldKind.LINK:
                members = []
                for index, item in enumerate(value):
                    member = self._convert_link(cf_field, item)
                    if member is not None:
                        members.append(dict(member, _key=make_key(key_prefix, index)))
                return members
            return list(value)

        if kind == FieldKind.RICH_TEXT:
            return self._rich_text.convert(value, key_prefix=key_prefix)

        if kind == FieldKind.TEXT and is_markdown_field(cf_field, control) and not self.options.keep_markdown:
            return markdown_to_blocks(value, key_prefix=key_prefix)

        if kind == FieldKind.SYMBOL and control and control.get("widgetId") == "slugEditor":
            return {"_type": "slug", "current": value}

        if kind == FieldKind.DATE:
            return self._convert_date(value, date_only=is_date_only_field(cf_field, control))

        if kind == FieldKind.LOCATION and isinstance(value, dict):
            return {"_type": "geopoint", "lat": value.get("lat"), "lng": value.get("lon")}

        return value

    def _convert_date(self, value: str, date_only: bool) -> Optional[str]:
        try:
            parsed = date_parser.isoparse(value)
        except (ValueError, TypeError):
            self._add_warning(f"Invalid date value: {value!r}")
            return None
        if date_only:
            return parsed.date().isoformat()
        return parsed.isoformat()

    def _convert_link(self, cf_field: ContentfulField, value: Any) -> Optional[Dict[str, Any]]:
        sys = value.get("sys", {}) if isinstance(value, dict) else {}
        link_type = sys.get("linkType")
        target_id = sys.get("id")

        if not target_id:
            return None

        if link_type == LinkType.ASSET.value:
            return self._asset_member(target_id, classify_asset_link(cf_field.mimetype_groups()))

        if link_type == LinkType.ENTRY.value:
            return self._reference(target_id)

        self._add_warning(f"Unsupported link type '{link_type}' in field {cf_field.id}")
        return None

    def _reference(self, target_id: str) -> Dict[str, Any]:
        reference = {"_type": "reference", "_ref": target_id}
        if self.options.weak_refs:
            reference["_weak"] = True
        return reference

    def _asset_member(self, asset_id: str, asset_type: SanityType) -> Optional[Dict[str, Any]]:
        asset = self._assets.get(asset_id)
        if asset is None:
            self._add_warning(f"Linked asset {asset_id} is missing from the export")
            return None

        asset_file = asset.get_file(self.locale) or asset.get_file(self.bundle.default_locale)
        if asset_file is None or not asset_file.url:
            self._add_warning(f"Asset {asset_id} has no file")
            return None

        return {
            "_type": asset_type.value,
            "asset": {"_sanityAsset": f"{asset_type.value}@{self._asset_source(asset_file.absolute_url)}"},
        }

    def _asset_source(self, url: str) -> str:
        """Location sanity import reads an asset from."""
        if not self.options.assets_dir:
            return url
        local_path = local_asset_path(self.options.assets_dir, url)
        if local_path is None:
            self._add_warning(f"Asset URL {url} points outside {self.options.assets_dir}, keeping the remote URL")
            return url
        return local_path.as_uri()

    def _rich_text_entry(self, target: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        target_id = target.get("sys", {}).get("id")
        return self._reference(target_id) if target_id else None

    def _rich_text_asset(self, target: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        target_id = target.get("sys", {}).get("id")
        if not target_id:
            return None
        asset = self._assets.get(target_id)
        asset_file = asset.get_file(self.locale) if asset else None
        asset_type = SanityType.IMAGE if asset_file is None or asset_file.is_image else SanityType.FILE
        return self._asset_member(target_id, asset_type)

    def _add_warning(self, message: str) -> None:
        self._warnings.append(message)
        logger.warning(f"Conversion warning: {message}")


def convert_entries(bundle: ExportBundle, options: Optional[DatasetOptions] = None) -> List[Dict[str, Any]]:
    """Convert every entry of an export into a Sanity document."""
    return DatasetConverter(bundle, options).convert()


def write_ndjson(documents: Iterable[Dict[str, Any]], file_path: str) -> int:
    """
    Write documents as newline-delimited JSON.

    Returns:
        Number of documents written
    """
    path = Path(file_path)
    path.parent.mkdir(parents=True, exist_ok=True)

    count = 0
    with open(path, 'w', encoding="utf-8") as f:
        for document in documents:
            f.write(json.dumps(document, ensure_ascii=False))
            f.write("\n")
            count += 1

    logger.info(f"Wrote {count} documents to {path}")
    return count
