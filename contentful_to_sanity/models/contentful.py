"""Models for data exported from a Contentful space."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union
from enum import Enum
from pathlib import Path
from urllib.parse import urlparse
import json


class FieldKind(str, Enum):
    """Contentful field type tags."""
    SYMBOL = "Symbol"
    TEXT = "Text"
    RICH_TEXT = "RichText"
    INTEGER = "Integer"
    NUMBER = "Number"
    DATE = "Date"
    BOOLEAN = "Boolean"
    LOCATION = "Location"
    OBJECT = "Object"
    LINK = "Link"
    ARRAY = "Array"


class LinkType(str, Enum):
    """Targets of a Contentful Link field."""
    ASSET = "Asset"
    ENTRY = "Entry"


def _parse_kind(value: Optional[str]) -> Union[FieldKind, str, None]:
    """Parse a type tag, keeping unknown tags as raw strings."""
    if not value:
        return None
    try:
        return FieldKind(value)
    except ValueError:
        return value


def _parse_link_type(value: Optional[str]) -> Union[LinkType, str, None]:
    if not value:
        return None
    try:
        return LinkType(value)
    except ValueError:
        return value


def _find_validation(validations: List[Dict[str, Any]], key: str) -> Optional[Any]:
    """Return the value of the first validation carrying `key`."""
    for validation in validations:
        if key in validation:
            return validation[key]
    return None


@dataclass
class FieldItems:
    """Item definition of a Contentful Array field."""
    type: Union[FieldKind, str, None]
    link_type: Union[LinkType, str, None] = None
    validations: List[Dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        result = {
            "type": self.type.value if isinstance(self.type, FieldKind) else self.type,
            "validations": self.validations,
        }
        if self.link_type:
            result["linkType"] = (
                self.link_type.value if isinstance(self.link_type, LinkType) else self.link_type
            )
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FieldItems":
        """Create from dictionary representation."""
        return cls(
            type=_parse_kind(data.get("type")),
            link_type=_parse_link_type(data.get("linkType")),
            validations=data.get("validations", []),
        )


@dataclass
class ContentfulField:
    """A field of a Contentful content type."""
    id: str
    name: str
    type: Union[FieldKind, str, None]
    link_type: Union[LinkType, str, None] = None
    items: Optional[FieldItems] = None
    validations: List[Dict[str, Any]] = field(default_factory=list)
    required: bool = False
    localized: bool = False
    disabled: bool = False
    omitted: bool = False

    @property
    def is_asset_link(self) -> bool:
        """Check if the field links to assets, directly or through an array."""
        if self.type == FieldKind.LINK:
            return self.link_type == LinkType.ASSET
        if self.type == FieldKind.ARRAY and self.items:
            return self.items.type == FieldKind.LINK and self.items.link_type == LinkType.ASSET
        return False

    @property
    def link_validations(self) -> List[Dict[str, Any]]:
        """Validations that apply to the linked targets."""
        if self.type == FieldKind.ARRAY and self.items:
            return self.items.validations
        return self.validations

    def mimetype_groups(self) -> Optional[List[str]]:
        """Mime type groups of the first linkMimetypeGroup restriction."""
        groups = _find_validation(self.link_validations, "linkMimetypeGroup")
        if groups is None:
            return None
        if isinstance(groups, str):
            return [groups]
        return list(groups)

    def linked_content_types(self) -> List[str]:
        """Content type ids allowed by linkContentType validations, in order."""
        result: List[str] = []
        for validation in self.link_validations:
            allowed = validation.get("linkContentType")
            if allowed is None:
                continue
            if isinstance(allowed, str):
                allowed = [allowed]
            for content_type_id in allowed:
                if content_type_id not in result:
                    result.append(content_type_id)
        return result

    def allowed_values(self) -> Optional[List[Any]]:
        """Values allowed by an `in` validation."""
        validations = self.validations
        if self.type == FieldKind.ARRAY and self.items:
            validations = self.items.validations
        return _find_validation(validations, "in")

    def get_validation(self, key: str) -> Optional[Any]:
        """Get the value of the first validation of the given kind."""
        return _find_validation(self.validations, key)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        result = {
            "id": self.id,
            "name": self.name,
            "type": self.type.value if isinstance(self.type, FieldKind) else self.type,
            "localized": self.localized,
            "required": self.required,
            "validations": self.validations,
            "disabled": self.disabled,
            "omitted": self.omitted,
        }
        if self.link_type:
            result["linkType"] = (
                self.link_type.value if isinstance(self.link_type, LinkType) else self.link_type
            )
        if self.items:
            result["items"] = self.items.to_dict()
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ContentfulField":
        """Create from dictionary representation."""
        items = None
        if data.get("items"):
            items = FieldItems.from_dict(data["items"])

        return cls(
            id=data.get("id", ""),
            name=data.get("name", data.get("id", "")),
            type=_parse_kind(data.get("type")),
            link_type=_parse_link_type(data.get("linkType")),
            items=items,
            validations=data.get("validations", []),
            required=data.get("required", False),
            localized=data.get("localized", False),
            disabled=data.get("disabled", False),
            omitted=data.get("omitted", False),
        )


@dataclass
class ContentfulContentType:
    """A Contentful content type definition."""
    id: str
    name: str
    description: str = ""
    display_field: Optional[str] = None
    fields: List[ContentfulField] = field(default_factory=list)

    def get_field(self, field_id: str) -> Optional[ContentfulField]:
        """Get a field by ID."""
        for cf_field in self.fields:
            if cf_field.id == field_id:
                return cf_field
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the Contentful export representation."""
        return {
            "sys": {"id": self.id, "type": "ContentType"},
            "name": self.name,
            "description": self.description,
            "displayField": self.display_field,
            "fields": [f.to_dict() for f in self.fields],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ContentfulContentType":
        """Create from the Contentful export representation."""
        sys = data.get("sys", {})
        return cls(
            id=sys.get("id", data.get("id", "")),
            name=data.get("name", ""),
            description=data.get("description") or "",
            display_field=data.get("displayField"),
            fields=[ContentfulField.from_dict(f) for f in data.get("fields", [])],
        )


@dataclass
class AssetFile:
    """File metadata of an asset in one locale."""
    url: str
    file_name: str = ""
    content_type: str = ""

    @property
    def absolute_url(self) -> str:
        """URL with a scheme; Contentful serves protocol-relative URLs."""
        if self.url.startswith("//"):
            return f"https:{self.url}"
        return self.url

    @property
    def is_image(self) -> bool:
        return self.content_type.startswith("image/")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AssetFile":
        """Create from dictionary representation."""
        return cls(
            url=data.get("url", ""),
            file_name=data.get("fileName", ""),
            content_type=data.get("contentType", ""),
        )



def local_asset_path(assets_dir: Union[str, Path], url: str) -> Optional[Path]:
    """
    Local path of a downloaded asset file, mirroring the URL host and path.

    Returns None when the URL would resolve outside `assets_dir`.
    """
    root = Path(assets_dir).resolve()
    parsed = urlparse(url)
    target = (root / parsed.netloc / parsed.path.lstrip("/")).resolve()
    if root not in target.parents:
        return None
    return target


@dataclass
class ContentfulAsset:
    """A Contentful asset with its per-locale metadata."""
    id: str
    title: Dict[str, str] = field(default_factory=dict)
    description: Dict[str, str] = field(default_factory=dict)
    files: Dict[str, AssetFile] = field(default_factory=dict)

    def get_file(self, locale: Optional[str] = None) -> Optional[AssetFile]:
        """Get the file for a locale, falling back to the first one available."""
        if locale and locale in self.files:
            return self.files[locale]
        for asset_file in self.files.values():
            return asset_file
        return None

    def get_title(self, locale: Optional[str] = None) -> str:
        if locale and locale in self.title:
            return self.title[locale]
        return next(iter(self.title.values()), "")

    @classmethod
    def from_dict(cls, data: Dict[str, Any], default_locale: str = "en-US") -> "ContentfulAsset":
        """
        Create from the Contentful export representation.

        Asset fields are usually keyed by locale. Exports made through the
        Delivery API with a single locale hold bare values instead; those
        are stored under `default_locale`.
        """
        fields = data.get("fields", {})

        def localized(value: Any) -> Dict[str, Any]:
            if isinstance(value, dict):
                return value
            if value is None:
                return {}
            return {default_locale: value}

        files = {}
        raw_file = fields.get("file") or {}
        if "url" in raw_file:
            raw_file = {default_locale: raw_file}
        for locale, file_data in raw_file.items():
            if isinstance(file_data, dict):
                files[locale] = AssetFile.from_dict(file_data)

        return cls(
            id=data.get("sys", {}).get("id", ""),
            title=localized(fields.get("title")),
            description=localized(fields.get("description")),
            files=files,
        )


# Collections of a Contentful space export, keyed as in the export file
EXPORT_FIELDS = (
    "tags",
    "entries",
    "contentTypes",
    "assets",
    "editorInterfaces",
    "webhooks",
    "roles",
    "locales",
)


@dataclass
class ExportBundle:
    """
    Full snapshot of a Contentful space.

    Collections are kept in their export representation and API order;
    typed views are built on demand.
    """
    tags: List[Dict[str, Any]] = field(default_factory=list)
    entries: List[Dict[str, Any]] = field(default_factory=list)
    content_types: List[Dict[str, Any]] = field(default_factory=list)
    assets: List[Dict[str, Any]] = field(default_factory=list)
    editor_interfaces: List[Dict[str, Any]] = field(default_factory=list)
    webhooks: List[Dict[str, Any]] = field(default_factory=list)
    roles: List[Dict[str, Any]] = field(default_factory=list)
    locales: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def default_locale(self) -> str:
        """Code of the default locale of the space."""
        for locale in self.locales:
            if locale.get("default"):
                return locale.get("code", "en-US")
        if self.locales:
            return self.locales[0].get("code", "en-US")
        return "en-US"

    def get_content_types(self) -> List[ContentfulContentType]:
        """Typed content types, in export order."""
        return [ContentfulContentType.from_dict(ct) for ct in self.content_types]

    def get_content_type(self, content_type_id: str) -> Optional[ContentfulContentType]:
        """Get a content type by ID."""
        for data in self.content_types:
            if data.get("sys", {}).get("id") == content_type_id:
                return ContentfulContentType.from_dict(data)
        return None

    def content_type_ids(self) -> List[str]:
        return [ct.get("sys", {}).get("id", "") for ct in self.content_types]

    def get_assets(self) -> Dict[str, ContentfulAsset]:
        """Typed assets keyed by ID."""
        default_locale = self.default_locale
        assets = {}
        for data in self.assets:
            asset = ContentfulAsset.from_dict(data, default_locale=default_locale)
            assets[asset.id] = asset
        return assets

    def get_editor_controls(self, content_type_id: str) -> Dict[str, Dict[str, Any]]:
        """Editor interface controls of a content type, keyed by field ID."""
        for interface in self.editor_interfaces:
            linked = interface.get("sys", {}).get("contentType", {}).get("sys", {}).get("id")
            if linked == content_type_id:
                return {
                    control["fieldId"]: control
                    for control in interface.get("controls", [])
                    if "fieldId" in control
                }
        return {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the Contentful export representation."""
        return {
            "tags": self.tags,
            "entries": self.entries,
            "contentTypes": self.content_types,
            "assets": self.assets,
            "editorInterfaces": self.editor_interfaces,
            "webhooks": self.webhooks,
            "roles": self.roles,
            "locales": self.locales,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ExportBundle":
        """Create from the Contentful export representation."""
        return cls(
            tags=data.get("tags") or [],
            entries=data.get("entries") or [],
            content_types=data.get("contentTypes") or [],
            assets=data.get("assets") or [],
            editor_interfaces=data.get("editorInterfaces") or [],
            webhooks=data.get("webhooks") or [],
            roles=data.get("roles") or [],
            locales=data.get("locales") or [],
        )

    @classmethod
    def from_json_file(cls, file_path: str) -> "ExportBundle":
        """Load an export from a JSON file."""
        with open(file_path, 'r', encoding="utf-8") as f:
            data = json.load(f)
        return cls.from_dict(data)

    def save_to_json(self, file_path: str) -> None:
        """Save the export to a JSON file."""
        with open(file_path, 'w', encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2, ensure_ascii=False)
