"""Tests for OutlineDocument catalog access."""
import pytest

from pdf_outlines.core.document import OutlineDocument
from pdf_outlines.core.exceptions import StructuralIntegrityError
from pdf_outlines.core.models.outline import Destination, OutlineFormat
from pdf_outlines.core.outline import OutlineRoot


class TestGetOutlines:
    def test_no_outlines_by_default(self, store):
        document = OutlineDocument(store)
        assert document.get_outlines() is None

    def test_create_registers_root_in_catalog(self, store):
        document = OutlineDocument(store)
        outlines = document.get_outlines(create=True)

        assert isinstance(outlines, OutlineRoot)
        assert store.get_field(document.catalog_ref, "Outlines") == outlines.ref
        assert document.get_outlines() is outlines

    def test_reopening_loads_existing_tree(self, store):
        document = OutlineDocument(store)
        outlines = document.get_outlines(create=True)
        outlines.create_root("Chapter 1").create_child("Section 1.1")

        reopened = OutlineDocument(store, document.catalog_ref)
        loaded = reopened.get_outlines()

        assert loaded is not outlines
        assert [item.title for item in loaded] == ["Chapter 1", "Section 1.1"]

    def test_load_options_are_forwarded(self, store):
        document = OutlineDocument(store)
        outlines = document.get_outlines(create=True)
        outlines.create_root("1").create_child("2")

        with pytest.raises(StructuralIntegrityError):
            OutlineDocument(store, document.catalog_ref).get_outlines(max_depth=1)

    def test_erased_root_is_dropped_from_catalog(self, store):
        document = OutlineDocument(store)
        outlines = document.get_outlines(create=True)
        outlines.create_root("Gone")
        outlines.erase()

        assert document.get_outlines() is None
        assert store.get_field(document.catalog_ref, "Outlines") is None

    def test_root_erase_unlinks_catalog_immediately(self, store):
        """Another view of the catalog sees no outline right after the erase."""
        document = OutlineDocument(store)
        outlines = document.get_outlines(create=True)
        outlines.create_root("Gone")
        outlines.erase()

        assert store.get_field(document.catalog_ref, "Outlines") is None
        assert OutlineDocument(store, document.catalog_ref).get_outlines() is None

    def test_loaded_root_erase_unlinks_catalog(self, store):
        document = OutlineDocument(store)
        document.get_outlines(create=True).create_root("Chapter")

        reopened = OutlineDocument(store, document.catalog_ref)
        reopened.get_outlines().erase()

        assert store.get_field(document.catalog_ref, "Outlines") is None
        assert OutlineDocument(store, document.catalog_ref).get_outlines() is None

    def test_erase_outlines(self, store):
        document = OutlineDocument(store)
        outlines = document.get_outlines(create=True)
        outlines.create_root("Chapter").create_child("Section")

        assert document.erase_outlines() is True
        assert not outlines.is_alive
        assert store.get_field(document.catalog_ref, "Outlines") is None
        assert len(store) == 1
        assert document.erase_outlines() is False

    def test_unknown_catalog_rejected(self, store):
        with pytest.raises(StructuralIntegrityError):
            OutlineDocument(store, 55)


class TestToDict:
    def test_nested_view(self, store):
        document = OutlineDocument(store)
        outlines = document.get_outlines(create=True)
        chapter = outlines.create_root("Chapter")
        chapter.text_format = OutlineFormat.BOLD
        chapter.create_child("Section", Destination(page=2))
        outlines.create_child("Appendix")

        view = document.to_dict()["outlines"]

        assert view["count"] == 3
        assert [item["title"] for item in view["items"]] == ["Chapter", "Appendix"]
        assert view["items"][0]["format"] == "BOLD"
        section = view["items"][0]["children"][0]
        assert section["title"] == "Section"
        assert section["destination"] == {"page": 2}

    def test_empty_document(self, store):
        assert OutlineDocument(store).to_dict() == {"outlines": None}
