"""Tests for headers, documents and field mapping."""

from vellum.core.meta import Header
from vellum.core.model import ContentIdentity, Document
from vellum.import_migrate.fields import FieldMapping, convert_header, render_alias


def test_header_helpers():
    header = Header({"title": "T", "draft": False, "tags": ["a"], "alias": "/x/", "blank": "  "})

    assert header.get_str("title") == "T"
    assert header.get_str("draft") is None
    assert header.get_list("tags") == ["a"]
    assert header.get_list("alias") == ["/x/"]
    assert header.get_list("blank") == []
    assert header.first_present(["missing", "blank", "title"]) == "T"
    assert header.first_present(["missing"]) is None


def test_header_keeps_order():
    header = Header()
    header["b"] = "1"
    header["a"] = "2"
    assert list(header) == ["b", "a"]


def test_content_identity_dirname():
    identity = ContentIdentity(identifier="01HZX3K9QW8E2M4N6P7R8S9T0A", slug="post")
    assert identity.dirname == "01HZX3K9QW8E2M4N6P7R8S9T0A--post"


def test_add_alias():
    doc = Document(header=Header({"aliases": ["", "/old/"]}))

    assert doc.add_alias("/new/") is True
    assert doc.aliases == ["/old/", "/new/"]
    assert doc.add_alias("/new/") is False
    assert doc.aliases == ["/old/", "/new/"]


def test_add_alias_without_existing_list():
    doc = Document(header=Header({"aliases": "/only/"}))

    doc.add_alias("/blog/x/")

    assert doc.header["aliases"] == ["/only/", "/blog/x/"]


def test_field_mapping_first_match_wins():
    mapping = FieldMapping()
    legacy = Header({"title": "Plain", "seoTitle": "", "page-title": "Page"})

    assert mapping.lookup(legacy, "title") == "Page"
    assert mapping.lookup(Header({"title": "Plain", "seoTitle": ""}), "title") == "Plain"


def test_render_alias():
    assert render_alias("/blog/{slug}/", "post") == "/blog/post/"
    assert render_alias("/{id}/{slug}", "post", "ID") == "/ID/post"


def test_convert_header_disabled_toggles():
    header = convert_header(
        Header({"title": "Hi", "tags": ["a"], "category": "news"}),
        "hi.md",
        "01HZX3K9QW8E2M4N6P7R8S9T0A",
        FieldMapping(),
        default_author="Author",
        now="2024-01-01T00:00:00.000Z",
        add_category_to_tags=False,
        create_aliases=False,
    )

    assert header["tags"] == ["a"]
    assert header["aliases"] == []
    assert "category" not in header


def test_header_get_text():
    header = Header({"slug": True, "draft": False, "title": "T", "tags": ["a"]})

    assert header.get_text("slug") == "true"
    assert header.get_text("draft") == "false"
    assert header.get_text("title") == "T"
    assert header.get_text("tags") is None
    assert header.get_text("missing") is None
