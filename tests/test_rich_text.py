from contentful_to_sanity.services.rich_text import RichTextConverter, make_key, markdown_to_blocks


def _text(value, *marks):
    return {"nodeType": "text", "value": value, "marks": [{"type": m} for m in marks], "data": {}}


def _converter():
    return RichTextConverter(
        link_entry=lambda target: {"_type": "reference", "_ref": target["sys"]["id"]},
        link_asset=lambda target: {"_type": "image", "asset": {"_ref": target["sys"]["id"]}},
    )


def test_paragraphs_and_marks():
    document = {
        "nodeType": "document",
        "content": [
            {"nodeType": "heading-2", "content": [_text("Title")]},
            {"nodeType": "paragraph", "content": [_text("plain "), _text("bold", "bold", "italic")]},
        ],
    }

    blocks = _converter().convert(document, key_prefix="entry.body")

    assert [b["style"] for b in blocks] == ["h2", "normal"]
    assert blocks[0]["_key"] == make_key("entry.body", 0)
    assert blocks[1]["children"][1]["marks"] == ["strong", "em"]


def test_hyperlinks_become_mark_defs():
    document = {
        "nodeType": "document",
        "content": [{
            "nodeType": "paragraph",
            "content": [{
                "nodeType": "hyperlink",
                "data": {"uri": "https://example.com"},
                "content": [_text("link")],
            }],
        }],
    }

    block = _converter().convert(document)[0]

    assert block["markDefs"][0]["href"] == "https://example.com"
    assert block["children"][0]["marks"] == [block["markDefs"][0]["_key"]]


def test_lists():
    document = {
        "nodeType": "document",
        "content": [{
            "nodeType": "ordered-list",
            "content": [
                {"nodeType": "list-item", "content": [{"nodeType": "paragraph", "content": [_text("one")]}]},
                {"nodeType": "list-item", "content": [{"nodeType": "paragraph", "content": [_text("two")]}]},
            ],
        }],
    }

    blocks = _converter().convert(document)

    assert [b["listItem"] for b in blocks] == ["number", "number"]
    assert [b["level"] for b in blocks] == [1, 1]


def test_embedded_blocks():
    document = {
        "nodeType": "document",
        "content": [
            {"nodeType": "embedded-entry-block", "data": {"target": {"sys": {"id": "e1"}}}, "content": []},
            {"nodeType": "embedded-asset-block", "data": {"target": {"sys": {"id": "a1"}}}, "content": []},
        ],
    }

    blocks = _converter().convert(document, key_prefix="x")

    assert blocks[0]["_ref"] == "e1"
    assert blocks[1]["asset"] == {"_ref": "a1"}
    assert blocks[1]["_key"] == make_key("x", 1)


def test_non_document_value():
    assert _converter().convert("plain text") == []


def test_markdown_to_blocks():
    blocks = markdown_to_blocks("## Intro\n\n1. first\n2. second\n\nclosing line")

    assert [b["style"] for b in blocks] == ["h2", "normal", "normal", "normal"]
    assert [b.get("listItem") for b in blocks] == [None, "number", "number", None]
    assert blocks[-1]["children"][0]["text"] == "closing line"


def test_make_key_is_deterministic():
    assert make_key("a", 1) == make_key("a", 1)
    assert make_key("a", 1) != make_key("a", 2)
    assert len(make_key("a")) == 12
