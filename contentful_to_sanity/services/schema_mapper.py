"""Mapping of Contentful content types to Sanity document definitions."""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from ..errors import MappingError
from ..models.contentful import (
    ContentfulContentType,
    ContentfulField,
    ExportBundle,
    FieldKind,
    LinkType,
)
from ..models.migration import SchemaOptions
from ..models.sanity import (
    SanityDocumentDefinition,
    SanityFieldDefinition,
    SanityType,
)

logger = logging.getLogger(__name__)

# Widgets that edit a Text field as markdown; Contentful defaults Text to markdown
MARKDOWN_WIDGETS = {"markdown"}
DATE_ONLY_FORMATS = {"dateonly"}


def classify_asset_link(mimetype_groups: Optional[List[str]]) -> SanityType:
    """
    Classify an asset link as an image or a file.

    Only a restriction to the `image` group yields an image. Links without
    a restriction, or allowing any other group, may hold any file.
    """
    if mimetype_groups and all(group == "image" for group in mimetype_groups):
        return SanityType.IMAGE
    return SanityType.FILE


def is_markdown_field(cf_field: ContentfulField, control: Optional[Dict[str, Any]]) -> bool:
    """Check if a Text field is edited as markdown."""
    if cf_field.type != FieldKind.TEXT:
        return False
    if not control or not control.get("widgetId"):
        return True
    return control["widgetId"] in MARKDOWN_WIDGETS


def is_date_only_field(cf_field: ContentfulField, control: Optional[Dict[str, Any]]) -> bool:
    """Check if a Date field stores dates without a time."""
    if cf_field.type != FieldKind.DATE or not control:
        return False
    settings = control.get("settings") or {}
    return settings.get("format") in DATE_ONLY_FORMATS


@dataclass
class MappingContext:
    """State shared by the field mappers of one content type."""
    content_type: ContentfulContentType
    bundle: ExportBundle
    options: SchemaOptions
    controls: Dict[str, Dict[str, Any]] = field(default_factory=dict)

    def control_for(self, cf_field: ContentfulField) -> Optional[Dict[str, Any]]:
        return self.controls.get(cf_field.id)

    def widget_for(self, cf_field: ContentfulField) -> Optional[str]:
        control = self.control_for(cf_field)
        return control.get("widgetId") if control else None


class SchemaMapper:
    """
    Maps Contentful content types to Sanity document definitions.

    Every Contentful field kind has a mapper function. A content type maps
    to a document with exactly one field per Contentful field, in the same
    order; disabled and omitted fields are kept as read-only and hidden.
    """

    def __init__(self, options: Optional[SchemaOptions] = None):
        """
        Initialize the schema mapper.

        Args:
            options: Mapping options
        """
        self.options = options or SchemaOptions()
        self._mappers: Dict[FieldKind, Callable[[ContentfulField, MappingContext], SanityFieldDefinition]] = {
            FieldKind.SYMBOL: self._map_symbol,
            FieldKind.TEXT: self._map_text,
            FieldKind.RICH_TEXT: self._map_rich_text,
            FieldKind.INTEGER: self._map_integer,
            FieldKind.NUMBER: self._map_number,
            FieldKind.DATE: self._map_date,
            FieldKind.BOOLEAN: self._map_boolean,
            FieldKind.LOCATION: self._map_location,
            FieldKind.OBJECT: self._map_object,
            FieldKind.LINK: self._map_link,
            FieldKind.ARRAY: self._map_array,
        }

    def map_content_type(
        self,
        content_type: ContentfulContentType,
        bundle: Optional[ExportBundle] = None,
    ) -> SanityDocumentDefinition:
        """
        Map a content type to a Sanity document definition.

        Args:
            content_type: Content type to map
            bundle: Export the content type belongs to, used to resolve
                reference targets and editor widgets

        Returns:
            Sanity document definition

        Raises:
            MappingError: If a field has a missing or unknown type
        """
        bundle = bundle or ExportBundle(content_types=[content_type.to_dict()])
        context = MappingContext(
            content_type=content_type,
            bundle=bundle,
            options=self.options,
            controls=bundle.get_editor_controls(content_type.id),
        )

        fields = [self.map_field(cf_field, context) for cf_field in content_type.fields]

        preview = None
        if content_type.display_field:
            preview = {"select": {"title": content_type.display_field}}

        logger.debug(f"Mapped content type {content_type.id} with {len(fields)} fields")

        return SanityDocumentDefinition(
            name=content_type.id,
            title=content_type.name or content_type.id,
            description=content_type.description,
            fields=fields,
            preview=preview,
        )

    def map_field(self, cf_field: ContentfulField, context: MappingContext) -> SanityFieldDefinition:
        """Map a single Contentful field."""
        field_id = cf_field.id or cf_field.name or "<unnamed>"

        if not cf_field.id:
            raise MappingError(field_id, "field has no id", context.content_type.id)

        if cf_field.type is None:
            raise MappingError(field_id, "field has no type", context.content_type.id)

        if not isinstance(cf_field.type, FieldKind):
            raise MappingError(field_id, f"unknown field type '{cf_field.type}'", context.content_type.id)

        sanity_field = self._mappers[cf_field.type](cf_field, context)
        sanity_field.name = cf_field.id
        sanity_field.title = cf_field.name or cf_field.id
        sanity_field.hidden = cf_field.omitted
        sanity_field.read_only = cf_field.disabled
        sanity_field.validation = self._build_validation(cf_field) + sanity_field.validation

        return sanity_field

    def _build_validation(self, cf_field: ContentfulField) -> List[Dict[str, Any]]:
        """Translate Contentful validations into Sanity rule descriptors."""
        rules: List[Dict[str, Any]] = []

        if cf_field.required:
            rules.append({"rule": "required"})

        size = cf_field.get_validation("size")
        if size:
            if size.get("min") is not None:
                rules.append({"rule": "min", "value": size["min"]})
            if size.get("max") is not None:
                rules.append({"rule": "max", "value": size["max"]})

        value_range = cf_field.get_validation("range")
        if value_range:
            if value_range.get("min") is not None:
                rules.append({"rule": "min", "value": value_range["min"]})
            if value_range.get("max") is not None:
                rules.append({"rule": "max", "value": value_range["max"]})

        regexp = cf_field.get_validation("regexp")
        if regexp and regexp.get("pattern"):
            rule = {"rule": "regex", "value": regexp["pattern"]}
            if regexp.get("flags"):
                rule["flags"] = regexp["flags"]
            rules.append(rule)

        if cf_field.get_validation("unique"):
            rules.append({"rule": "unique"})

        return rules

    def _map_symbol(self, cf_field: ContentfulField, context: MappingContext) -> SanityFieldDefinition:
        widget = context.widget_for(cf_field)

        if widget == "slugEditor":
            options = {}
            display_field = context.content_type.display_field
            if display_field and display_field != cf_field.id:
                options["source"] = display_field
            return SanityFieldDefinition(name=cf_field.id, type=SanityType.SLUG, options=options)

        if widget == "urlEditor":
            return SanityFieldDefinition(name=cf_field.id, type=SanityType.URL)

        return SanityFieldDefinition(
            name=cf_field.id,
            type=SanityType.STRING,
            options=self._list_options(cf_field, widget),
        )

    def _map_text(self, cf_field: ContentfulField, context: MappingContext) -> SanityFieldDefinition:
        if not is_markdown_field(cf_field, context.control_for(cf_field)):
            return SanityFieldDefinition(name=cf_field.id, type=SanityType.TEXT)

        if self.options.keep_markdown:
            return SanityFieldDefinition(name=cf_field.id, type=SanityType.MARKDOWN)

        return SanityFieldDefinition(
            name=cf_field.id,
            type=SanityType.ARRAY,
            of=[
                SanityFieldDefinition(name="", type=SanityType.BLOCK),
                SanityFieldDefinition(name="", type=SanityType.IMAGE),
            ],
        )

    def _map_rich_text(self, cf_field: ContentfulField, context: MappingContext) -> SanityFieldDefinition:
        members = [SanityFieldDefinition(name="", type=SanityType.BLOCK)]

        enabled_nodes = cf_field.get_validation("enabledNodeTypes")
        node_rules = cf_field.get_validation("nodes") or {}

        def enabled(node_type: str) -> bool:
            return enabled_nodes is None or node_type in enabled_nodes

        if enabled("embedded-asset-block"):
            # Embedded assets are typed by their file, not by a field restriction
            members.append(SanityFieldDefinition(name="", type=SanityType.IMAGE))
            members.append(SanityFieldDefinition(name="", type=SanityType.FILE))

        if enabled("embedded-entry-block") or enabled("embedded-entry-inline"):
            targets: List[str] = []
            for node_type in ("embedded-entry-block", "embedded-entry-inline"):
                for validation in node_rules.get(node_type, []):
                    for content_type_id in validation.get("linkContentType", []):
                        if content_type_id not in targets:
                            targets.append(content_type_id)
            members.append(SanityFieldDefinition(
                name="",
                type=SanityType.REFERENCE,
                to=targets or context.bundle.content_type_ids(),
                weak=self.options.weak_refs,
            ))

        return SanityFieldDefinition(name=cf_field.id, type=SanityType.ARRAY, of=members)

    def _map_integer(self, cf_field: ContentfulField, context: MappingContext) -> SanityFieldDefinition:
        return SanityFieldDefinition(
            name=cf_field.id,
            type=SanityType.NUMBER,
            options=self._list_options(cf_field, context.widget_for(cf_field)),
            validation=[{"rule": "integer"}],
        )

    def _map_number(self, cf_field: ContentfulField, context: MappingContext) -> SanityFieldDefinition:
        return SanityFieldDefinition(
            name=cf_field.id,
            type=SanityType.NUMBER,
            options=self._list_options(cf_field, context.widget_for(cf_field)),
        )

    def _map_date(self, cf_field: ContentfulField, context: MappingContext) -> SanityFieldDefinition:
        if is_date_only_field(cf_field, context.control_for(cf_field)):
            return SanityFieldDefinition(name=cf_field.id, type=SanityType.DATE)
        return SanityFieldDefinition(name=cf_field.id, type=SanityType.DATETIME)

    def _map_boolean(self, cf_field: ContentfulField, context: MappingContext) -> SanityFieldDefinition:
        return SanityFieldDefinition(name=cf_field.id, type=SanityType.BOOLEAN)

    def _map_location(self, cf_field: ContentfulField, context: MappingContext) -> SanityFieldDefinition:
        return SanityFieldDefinition(name=cf_field.id, type=SanityType.GEOPOINT)

    def _map_object(self, cf_field: ContentfulField, context: MappingContext) -> SanityFieldDefinition:
        return SanityFieldDefinition(
            name=cf_field.id,
            type=SanityType.OBJECT,
            fields=[],
            options={"json": True},
        )

    def _map_link(self, cf_field: ContentfulField, context: MappingContext) -> SanityFieldDefinition:
        member = self._link_member(cf_field, cf_field.link_type, context)
        member.name = cf_field.id
        return member

    def _map_array(self, cf_field: ContentfulField, context: MappingContext) -> SanityFieldDefinition:
        items = cf_field.items
        if items is None or items.type is None:
            raise MappingError(cf_field.id, "array field has no item type", context.content_type.id)

        if items.type == FieldKind.LINK:
            member = self._link_member(cf_field, items.link_type, context)
            return SanityFieldDefinition(name=cf_field.id, type=SanityType.ARRAY, of=[member])

        if items.type == FieldKind.SYMBOL:
            widget = context.widget_for(cf_field)
            options = self._list_options(cf_field, widget)
            if widget in (None, "tagEditor", "listInput"):
                options["layout"] = "tags"
            elif widget == "checkbox":
                options["layout"] = "grid"
            return SanityFieldDefinition(
                name=cf_field.id,
                type=SanityType.ARRAY,
                of=[SanityFieldDefinition(name="", type=SanityType.STRING)],
                options=options,
            )

        raise MappingError(
            cf_field.id,
            f"unsupported array item type '{getattr(items.type, 'value', items.type)}'",
            context.content_type.id,
        )

    def _link_member(
        self,
        cf_field: ContentfulField,
        link_type: Any,
        context: MappingContext,
    ) -> SanityFieldDefinition:
        """Build the Sanity member for a link to an asset or an entry."""
        if link_type == LinkType.ASSET:
            return SanityFieldDefinition(
                name="",
                type=classify_asset_link(cf_field.mimetype_groups()),
            )

        if link_type == LinkType.ENTRY:
            targets = cf_field.linked_content_types() or context.bundle.content_type_ids()
            return SanityFieldDefinition(
                name="",
                type=SanityType.REFERENCE,
                to=targets,
                weak=self.options.weak_refs,
            )

        if not link_type:
            raise MappingError(cf_field.id, "link field has no link type", context.content_type.id)
        raise MappingError(
            cf_field.id,
            f"unknown link type '{getattr(link_type, 'value', link_type)}'",
            context.content_type.id,
        )

    def _list_options(self, cf_field: ContentfulField, widget: Optional[str]) -> Dict[str, Any]:
        """Options for fields restricted to predefined values."""
        allowed = cf_field.allowed_values()
        if not allowed:
            return {}

        options: Dict[str, Any] = {"list": [{"title": str(value), "value": value} for value in allowed]}
        if widget == "radio":
            options["layout"] = "radio"
        elif widget == "dropdown":
            options["layout"] = "dropdown"
        return options


def map_content_type(
    content_type: ContentfulContentType,
    bundle: Optional[ExportBundle] = None,
    options: Optional[SchemaOptions] = None,
) -> SanityDocumentDefinition:
    """Map one content type to a Sanity document definition."""
    return SchemaMapper(options).map_content_type(content_type, bundle)


def map_bundle(
    bundle: ExportBundle,
    options: Optional[SchemaOptions] = None,
) -> List[SanityDocumentDefinition]:
    """Map every content type of an export, in export order."""
    mapper = SchemaMapper(options)
    return [mapper.map_content_type(ct, bundle) for ct in bundle.get_content_types()]
