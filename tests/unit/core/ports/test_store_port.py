"""Tests for object store port interface."""
import pytest
from pdf_outlines.core.ports.store import ObjectStorePort
from pdf_outlines.core.ports.pdf import OutlinePDFPort


class TestStorePortInterface:
    def test_cannot_instantiate_abstract_port(self):
        with pytest.raises(TypeError):
            ObjectStorePort()

    def test_cannot_instantiate_pdf_port(self):
        with pytest.raises(TypeError):
            OutlinePDFPort()

    def test_concrete_implementation_works(self):
        class MockStore(ObjectStorePort):
            def __init__(self):
                self._data = {}

            def create_record(self, fields=None):
                ref = len(self._data) + 1
                self._data[ref] = dict(fields or {})
                return ref

            def delete_record(self, ref):
                self._data.pop(ref, None)

            def has_record(self, ref):
                return ref in self._data

            def get_field(self, ref, key, default=None):
                return self._data[ref].get(key, default)

            def set_field(self, ref, key, value):
                self._data[ref][key] = value

            def delete_field(self, ref, key):
                self._data[ref].pop(key, None)

        mock = MockStore()
        ref = mock.create_record({"Title": "A"})
        assert mock.get_field(ref, "Title") == "A"
