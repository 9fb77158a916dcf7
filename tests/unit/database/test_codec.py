"""
test_codec.py
-------------
Unit tests for JSON record encoding.
"""
import json

import pytest

from catalog.core.exceptions import DatabaseError, SerializationError
from catalog.database.codec import decode_record, encode_record


class TestEncodeRecord:
    """Test encode_record."""

    def test_drops_none_values(self):
        encoded = encode_record({"id": "1", "name": "Yui", "alias": None})
        assert json.loads(encoded) == {"id": "1", "name": "Yui"}

    def test_keeps_non_ascii_text(self):
        assert "波多野結衣" in encode_record({"jpname": "波多野結衣"})

    def test_rejects_non_dict(self):
        with pytest.raises(SerializationError):
            encode_record(["not", "a", "record"])

    def test_rejects_unserializable_values(self):
        with pytest.raises(SerializationError):
            encode_record({"value": object()})


class TestDecodeRecord:
    """Test decode_record."""

    def test_decodes_object(self):
        assert decode_record('{"id": "1"}') == {"id": "1"}

    def test_malformed_json(self):
        with pytest.raises(SerializationError, match="Malformed JSON"):
            decode_record("{not json")

    def test_non_object_json(self):
        with pytest.raises(SerializationError):
            decode_record("[1, 2]")

    def test_non_text_value(self):
        with pytest.raises(SerializationError):
            decode_record(None)

    def test_serialization_error_is_database_error(self):
        with pytest.raises(DatabaseError):
            decode_record("null")
