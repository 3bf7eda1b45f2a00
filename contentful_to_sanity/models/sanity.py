"""Sanity schema definitions produced from Contentful content types."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from enum import Enum
import json


class SanityType(str, Enum):
    """Sanity schema types emitted by the mapper."""
    DOCUMENT = "document"
    STRING = "string"
    TEXT = "text"
    SLUG = "slug"
    URL = "url"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "date"
    DATETIME = "datetime"
    GEOPOINT = "geopoint"
    OBJECT = "object"
    ARRAY = "array"
    BLOCK = "block"
    REFERENCE = "reference"
    IMAGE = "image"
    FILE = "file"
    MARKDOWN = "markdown"


@dataclass
class SanityFieldDefinition:
    """
    A Sanity field, or an array member when `name` is empty.

    Validation rules are kept as serialisable descriptors such as
    ``{"rule": "max", "value": 256}`` since Sanity's rule builders are
    JavaScript functions.
    """
    name: str
    type: SanityType
    title: str = ""
    description: str = ""
    to: Optional[List[str]] = None  # For reference types
    of: Optional[List["SanityFieldDefinition"]] = None  # For array types
    fields: Optional[List["SanityFieldDefinition"]] = None  # For object types
    options: Dict[str, Any] = field(default_factory=dict)
    validation: List[Dict[str, Any]] = field(default_factory=list)
    weak: bool = False
    hidden: bool = False
    read_only: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the Sanity schema representation."""
        result: Dict[str, Any] = {}
        if self.name:
            result["name"] = self.name
        if self.title:
            result["title"] = self.title
        result["type"] = self.type.value if isinstance(self.type, SanityType) else self.type
        if self.description:
            result["description"] = self.description
        if self.to is not None:
            result["to"] = [{"type": target} for target in self.to]
        if self.weak:
            result["weak"] = True
        if self.of is not None:
            result["of"] = [member.to_dict() for member in self.of]
        if self.fields is not None:
            result["fields"] = [f.to_dict() for f in self.fields]
        if self.options:
            result["options"] = self.options
        if self.validation:
            result["validation"] = self.validation
        if self.hidden:
            result["hidden"] = True
        if self.read_only:
            result["readOnly"] = True
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SanityFieldDefinition":
        """Create from the Sanity schema representation."""
        field_type = data.get("type", "string")
        try:
            field_type = SanityType(field_type)
        except ValueError:
            pass

        to = None
        if "to" in data:
            to = [target["type"] for target in data["to"]]

        of = None
        if "of" in data:
            of = [cls.from_dict(member) for member in data["of"]]

        fields = None
        if "fields" in data:
            fields = [cls.from_dict(f) for f in data["fields"]]

        return cls(
            name=data.get("name", ""),
            type=field_type,
            title=data.get("title", ""),
            description=data.get("description", ""),
            to=to,
            of=of,
            fields=fields,
            options=data.get("options", {}),
            validation=data.get("validation", []),
            weak=data.get("weak", False),
            hidden=data.get("hidden", False),
            read_only=data.get("readOnly", False),
        )


@dataclass
class SanityDocumentDefinition:
    """A Sanity document type."""
    name: str
    title: str = ""
    description: str = ""
    fields: List[SanityFieldDefinition] = field(default_factory=list)
    preview: Optional[Dict[str, Any]] = None

    @property
    def type(self) -> SanityType:
        return SanityType.DOCUMENT

    def get_field(self, name: str) -> Optional[SanityFieldDefinition]:
        """Get a field by name."""
        for sanity_field in self.fields:
            if sanity_field.name == name:
                return sanity_field
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the Sanity schema representation."""
        result = {
            "name": self.name,
            "title": self.title,
            "type": self.type.value,
            "fields": [f.to_dict() for f in self.fields],
        }
        if self.description:
            result["description"] = self.description
        if self.preview:
            result["preview"] = self.preview
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SanityDocumentDefinition":
        """Create from the Sanity schema representation."""
        return cls(
            name=data.get("name", ""),
            title=data.get("title", ""),
            description=data.get("description", ""),
            fields=[SanityFieldDefinition.from_dict(f) for f in data.get("fields", [])],
            preview=data.get("preview"),
        )

    def save_to_json(self, file_path: str) -> None:
        """Save the definition to a JSON file."""
        with open(file_path, 'w', encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2, ensure_ascii=False)

    @classmethod
    def from_json_file(cls, file_path: str) -> "SanityDocumentDefinition":
        """Load a definition from a JSON file."""
        with open(file_path, 'r', encoding="utf-8") as f:
            data = json.load(f)
        return cls.from_dict(data)
