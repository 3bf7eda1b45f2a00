import pytest

from contentful_to_sanity.errors import MappingError
from contentful_to_sanity.models.contentful import ContentfulContentType, ExportBundle
from contentful_to_sanity.models.migration import SchemaOptions
from contentful_to_sanity.models.sanity import SanityType
from contentful_to_sanity.services.schema_mapper import (
    SchemaMapper,
    classify_asset_link,
    map_bundle,
    map_content_type,
)


def _content_type(fields, ct_id="article", display_field=None):
    return ContentfulContentType.from_dict({
        "sys": {"id": ct_id},
        "name": ct_id.title(),
        "displayField": display_field,
        "fields": fields,
    })


@pytest.fixture
def schemas(bundle):
    return map_bundle(bundle, SchemaOptions(keep_markdown=True))


def test_fields_keep_count_and_order(schemas, bundle):
    doc = schemas[0]
    source = bundle.get_content_types()[0]

    assert doc.name == "mediaPage"
    assert doc.title == "Media Page"
    assert [f.name for f in doc.fields] == [f.id for f in source.fields]


def test_image_field(schemas):
    assert schemas[0].get_field("image").type == SanityType.IMAGE


def test_asset_field_without_restriction_is_file(schemas):
    assert schemas[0].get_field("asset").type == SanityType.FILE


def test_pdf_field(schemas):
    assert schemas[0].get_field("pdf").type == SanityType.FILE


def test_entry_link_references_allowed_content_types(schemas):
    author = schemas[0].get_field("author")

    assert author.type == SanityType.REFERENCE
    assert author.to == ["person"]
    assert author.to_dict()["to"] == [{"type": "person"}]


def test_asset_array_members(schemas):
    gallery = schemas[0].get_field("gallery")

    assert gallery.type == SanityType.ARRAY
    assert [m.type for m in gallery.of] == [SanityType.IMAGE]
    assert {"rule": "max", "value": 10} in gallery.validation


def test_markdown_kept_with_option(schemas):
    assert schemas[0].get_field("body").type == SanityType.MARKDOWN


def test_markdown_converted_to_blocks_by_default(bundle):
    doc = map_bundle(bundle)[0]
    body = doc.get_field("body")

    assert body.type == SanityType.ARRAY
    assert [m.type for m in body.of] == [SanityType.BLOCK, SanityType.IMAGE]


def test_date_only_widget(schemas):
    assert schemas[0].get_field("publishDate").type == SanityType.DATE


def test_validations_and_preview(schemas):
    doc = schemas[0]
    title = doc.get_field("title")

    assert title.type == SanityType.STRING
    assert title.validation == [{"rule": "required"}, {"rule": "max", "value": 120}]
    assert doc.preview == {"select": {"title": "title"}}


def test_slug_field(schemas):
    person = schemas[1]
    slug = person.get_field("slug")

    assert slug.type == SanityType.SLUG
    assert slug.options == {"source": "name"}
    assert slug.validation == [{"rule": "unique"}]


def test_weak_references(bundle):
    doc = map_bundle(bundle, SchemaOptions(weak_refs=True))[0]

    assert doc.get_field("author").weak is True
    assert doc.get_field("author").to_dict()["weak"] is True


def test_entry_link_without_restriction_targets_all_types(bundle):
    content_type = _content_type([
        {"id": "related", "name": "Related", "type": "Link", "linkType": "Entry"},
    ])

    doc = map_content_type(content_type, bundle)

    assert doc.get_field("related").to == ["mediaPage", "person"]


@pytest.mark.parametrize("groups,expected", [
    (["image"], SanityType.IMAGE),
    (["image", "image"], SanityType.IMAGE),
    (["image", "video"], SanityType.FILE),
    (["pdfdocument"], SanityType.FILE),
    ([], SanityType.FILE),
    (None, SanityType.FILE),
])
def test_classify_asset_link(groups, expected):
    assert classify_asset_link(groups) == expected


def test_mimetype_group_as_string():
    content_type = _content_type([
        {
            "id": "cover",
            "name": "Cover",
            "type": "Link",
            "linkType": "Asset",
            "validations": [{"linkMimetypeGroup": "image"}],
        },
    ])

    assert map_content_type(content_type).get_field("cover").type == SanityType.IMAGE


def test_first_mimetype_restriction_wins():
    content_type = _content_type([
        {
            "id": "cover",
            "name": "Cover",
            "type": "Link",
            "linkType": "Asset",
            "validations": [{"linkMimetypeGroup": ["image"]}, {"linkMimetypeGroup": ["video"]}],
        },
    ])

    assert map_content_type(content_type).get_field("cover").type == SanityType.IMAGE


def test_field_without_type_names_field():
    content_type = _content_type([
        {"id": "title", "name": "Title", "type": "Symbol"},
        {"id": "broken", "name": "Broken"},
    ])

    with pytest.raises(MappingError) as exc_info:
        map_content_type(content_type)

    assert exc_info.value.field_id == "broken"
    assert exc_info.value.content_type_id == "article"
    assert "broken" in str(exc_info.value)


def test_unknown_field_type():
    content_type = _content_type([{"id": "widget", "name": "Widget", "type": "Hologram"}])

    with pytest.raises(MappingError) as exc_info:
        map_content_type(content_type)

    assert exc_info.value.field_id == "widget"
    assert "Hologram" in exc_info.value.reason


def test_link_without_link_type():
    content_type = _content_type([{"id": "target", "name": "Target", "type": "Link"}])

    with pytest.raises(MappingError) as exc_info:
        map_content_type(content_type)

    assert exc_info.value.field_id == "target"


def test_array_without_items():
    content_type = _content_type([{"id": "list", "name": "List", "type": "Array"}])

    with pytest.raises(MappingError):
        map_content_type(content_type)


def test_symbol_array_with_allowed_values():
    content_type = _content_type([
        {
            "id": "tags",
            "name": "Tags",
            "type": "Array",
            "items": {"type": "Symbol", "validations": [{"in": ["news", "blog"]}]},
        },
    ])

    tags = map_content_type(content_type).get_field("tags")

    assert [m.type for m in tags.of] == [SanityType.STRING]
    assert tags.options["layout"] == "tags"
    assert tags.options["list"] == [
        {"title": "news", "value": "news"},
        {"title": "blog", "value": "blog"},
    ]


def test_scalar_fields():
    content_type = _content_type([
        {"id": "count", "name": "Count", "type": "Integer", "validations": [{"range": {"min": 0}}]},
        {"id": "price", "name": "Price", "type": "Number"},
        {"id": "active", "name": "Active", "type": "Boolean"},
        {"id": "where", "name": "Where", "type": "Location"},
        {"id": "meta", "name": "Meta", "type": "Object"},
        {"id": "summary", "name": "Summary", "type": "Text"},
    ])
    bundle = ExportBundle(
        content_types=[content_type.to_dict()],
        editor_interfaces=[{
            "sys": {"contentType": {"sys": {"id": "article"}}},
            "controls": [{"fieldId": "summary", "widgetId": "multipleLine"}],
        }],
    )

    doc = SchemaMapper().map_content_type(content_type, bundle)

    assert doc.get_field("count").type == SanityType.NUMBER
    assert doc.get_field("count").validation == [{"rule": "min", "value": 0}, {"rule": "integer"}]
    assert doc.get_field("price").type == SanityType.NUMBER
    assert doc.get_field("active").type == SanityType.BOOLEAN
    assert doc.get_field("where").type == SanityType.GEOPOINT
    assert doc.get_field("meta").type == SanityType.OBJECT
    assert doc.get_field("summary").type == SanityType.TEXT


def test_disabled_and_omitted_fields_are_kept():
    content_type = _content_type([
        {"id": "legacy", "name": "Legacy", "type": "Symbol", "disabled": True, "omitted": True},
    ])

    legacy = map_content_type(content_type).get_field("legacy").to_dict()

    assert legacy["readOnly"] is True
    assert legacy["hidden"] is True


def test_rich_text_members():
    content_type = _content_type([
        {
            "id": "content",
            "name": "Content",
            "type": "RichText",
            "validations": [
                {"enabledNodeTypes": ["heading-1", "embedded-entry-block"]},
                {"nodes": {"embedded-entry-block": [{"linkContentType": ["person"]}]}},
            ],
        },
    ])

    content = map_content_type(content_type).get_field("content")

    assert [m.type for m in content.of] == [SanityType.BLOCK, SanityType.REFERENCE]
    assert content.of[1].to == ["person"]
