"""
CFG JSON Codec Tests
====================

Tests for sprite_cfg.codec.cfgjson, including equivalence with the text
codec.
"""

import base64
import json

import pytest

from sprite_cfg.codec import (
    from_json,
    from_text,
    read_json_file,
    record_from_dict,
    record_to_dict,
    to_json,
    to_text,
    write_json_file,
)
from sprite_cfg.codec.cfgjson import FIELD_LABELS, REGISTER_KEYS
from sprite_cfg.config import CfgConfig, set_config
from sprite_cfg.errors import DuplicateEntryError, FormatError
from sprite_cfg.model import REGISTER_FIELDS, CfgRecord, DisplayEntry


@pytest.fixture
def minimal_document() -> dict:
    """Smallest document with every required member."""
    document = {key: 0 for key in REGISTER_KEYS.values()}
    document.update({
        "AsmFile": "",
        "ActLike": 0,
        "Type": 0,
        "Extra Property Byte 1": 0,
        "Extra Property Byte 2": 0,
    })
    return document


# =============================================================================
# Encoding
# =============================================================================

class TestEncoding:
    """Tests for record_to_dict() and to_json()."""

    def test_member_names(self, sample_record):
        document = record_to_dict(sample_record)
        for key in ("$1656", "$1662", "$166E", "$167A", "$1686", "$190F",
                    "AsmFile", "ActLike", "Type", "Extra Property Byte 1",
                    "Extra Property Byte 2", "Additional Byte Count (extra bit clear)",
                    "Additional Byte Count (extra bit set)", "Map16", "Displays",
                    "Collection"):
            assert key in document

    def test_registers_as_named_bits(self, sample_record):
        document = record_to_dict(sample_record)
        assert document["$1656"]["Object Clipping"] == 0
        assert document["$1656"]["Can be jumped on"] is True
        assert document["$166E"]["Palette"] == 0
        assert document["$166E"]["Use second graphics page"] is True

    def test_every_field_labelled(self):
        assert set(FIELD_LABELS) == {spec.name for spec in REGISTER_FIELDS}

    def test_scalars(self, sample_record):
        document = record_to_dict(sample_record)
        assert document["ActLike"] == 0x36
        assert document["Type"] == 1
        assert document["AsmFile"] == "thwomp_custom.asm"
        assert document["Additional Byte Count (extra bit set)"] == 3

    def test_entries(self, sample_record):
        document = record_to_dict(sample_record)
        assert document["Displays"][1] == {
            "Description": "Angry\nThwomp",
            "ExtraBit": True,
            "X": 5,
            "Y": 3,
            "UseText": True,
        }
        assert document["Collection"][0]["Extra Property Byte 4"] == 0xFF

    def test_map16_base64(self, sample_record):
        data = base64.b64decode(record_to_dict(sample_record)["Map16"])
        assert data == sample_record.map16.significant_data()

    def test_configured_indent(self, sample_record):
        set_config(CfgConfig(json_indent=None))
        assert "\n" not in to_json(sample_record)
        assert "\n" in to_json(sample_record, indent=2)

    def test_valid_json(self, sample_record):
        assert json.loads(to_json(sample_record))["Type"] == 1


# =============================================================================
# Decoding
# =============================================================================

class TestDecoding:
    """Tests for record_from_dict() and from_json()."""

    def test_minimal_document(self, minimal_document):
        assert record_from_dict(minimal_document) == CfgRecord()

    def test_register_as_integer(self, minimal_document):
        minimal_document["$1656"] = 0x19
        record = record_from_dict(minimal_document)
        assert record.object_clipping == 9
        assert record.can_be_jumped_on is True

    def test_unknown_members_ignored(self, minimal_document):
        minimal_document["Future Member"] = [1, 2, 3]
        assert record_from_dict(minimal_document) == CfgRecord()

    def test_missing_required_member(self, minimal_document):
        del minimal_document["ActLike"]
        with pytest.raises(FormatError) as exc_info:
            record_from_dict(minimal_document)
        assert exc_info.value.member == "ActLike"

    def test_missing_register(self, minimal_document):
        del minimal_document["$190F"]
        with pytest.raises(FormatError) as exc_info:
            record_from_dict(minimal_document)
        assert exc_info.value.member == "$190F"

    def test_wrong_type(self, minimal_document):
        minimal_document["Type"] = "1"
        with pytest.raises(FormatError) as exc_info:
            record_from_dict(minimal_document)
        assert "expected integer" in str(exc_info.value)

    def test_bool_is_not_a_number(self, minimal_document):
        minimal_document["ActLike"] = True
        with pytest.raises(FormatError):
            record_from_dict(minimal_document)

    def test_out_of_range(self, minimal_document):
        minimal_document["ActLike"] = 256
        with pytest.raises(FormatError):
            record_from_dict(minimal_document)

    def test_nested_field_out_of_range(self, sample_record):
        document = record_to_dict(sample_record)
        document["$166E"]["Palette"] = 8
        with pytest.raises(FormatError) as exc_info:
            record_from_dict(document)
        assert exc_info.value.member == "$166E.Palette"

    def test_entry_member_path(self, sample_record):
        document = record_to_dict(sample_record)
        del document["Displays"][1]["X"]
        with pytest.raises(FormatError) as exc_info:
            record_from_dict(document)
        assert exc_info.value.member == "Displays[1].X"

    def test_entry_not_an_object(self, sample_record):
        document = record_to_dict(sample_record)
        document["Collection"] = [7]
        with pytest.raises(FormatError) as exc_info:
            record_from_dict(document)
        assert exc_info.value.member == "Collection[0]"

    def test_bad_base64(self, minimal_document):
        minimal_document["Map16"] = "not base64!"
        with pytest.raises(FormatError) as exc_info:
            record_from_dict(minimal_document)
        assert exc_info.value.member == "Map16"

    def test_root_not_object(self):
        with pytest.raises(FormatError):
            from_json("[]")

    def test_syntax_error_line(self):
        with pytest.raises(FormatError) as exc_info:
            from_json('{\n  "Type": 1,\n  oops\n}')
        assert exc_info.value.line == 3

    def test_huge_integer_literal(self, minimal_document):
        text = json.dumps(minimal_document).replace('"ActLike": 0', '"ActLike": ' + "1" * 5000)
        assert "1" * 5000 in text
        with pytest.raises(FormatError):
            from_json(text)

    def test_deep_nesting(self):
        with pytest.raises(FormatError):
            from_json("[" * 100000 + "]" * 100000)

    def test_bytes_input(self, sample_record):
        assert from_json(to_json(sample_record).encode("utf-8")) == sample_record


# =============================================================================
# Round-Trip and Equivalence
# =============================================================================

class TestRoundTrip:
    """Tests for JSON round-trips and agreement with the text codec."""

    def test_default_record(self):
        assert from_json(to_json(CfgRecord())) == CfgRecord()

    def test_sample_record(self, sample_record):
        assert from_json(to_json(sample_record)) == sample_record

    def test_compact(self, sample_record):
        assert from_json(to_json(sample_record, indent=None)) == sample_record

    def test_cross_format(self, sample_record):
        assert from_json(to_json(sample_record)) == from_text(to_text(sample_record))

    def test_text_to_json_to_text(self, sample_record):
        text = to_text(sample_record)
        assert to_text(from_json(to_json(from_text(text)))) == text

    def test_every_register_value(self):
        record = CfgRecord()
        for value in range(256):
            record.addr_167a = value
            assert from_json(to_json(record)).addr_167a == value


# =============================================================================
# File Helpers
# =============================================================================

class TestFiles:
    """Tests for read_json_file() / write_json_file()."""

    def test_write_and_read(self, tmp_path, sample_record):
        path = tmp_path / "sprite.json"
        write_json_file(sample_record, path)
        assert read_json_file(path) == sample_record

    def test_duplicate_not_written(self, tmp_path):
        record = CfgRecord()
        record.display_entries.extend([DisplayEntry(x=5, y=3, extra_bit=True)] * 2)
        path = tmp_path / "sprite.json"
        with pytest.raises(DuplicateEntryError):
            write_json_file(record, path)
        assert not path.exists()
