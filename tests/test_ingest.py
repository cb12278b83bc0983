"""
Tests for Contact Snapshot Ingestion
"""

import json

import pytest

from src.pipeline.ingest import (
    ContactSnapshot,
    _clean_value,
    _split_connections,
    load_contacts,
)


class TestCleanValueFunction:
    """Tests for cell value cleaning."""

    def test_clean_normal_value(self):
        assert _clean_value("Acme Corp") == "Acme Corp"

    def test_clean_with_whitespace(self):
        assert _clean_value("  Acme Corp  ") == "Acme Corp"

    def test_clean_empty(self):
        assert _clean_value("   ") is None
        assert _clean_value(None) is None

    def test_clean_nan(self):
        assert _clean_value(float("nan")) is None


class TestSplitConnections:
    """Tests for connection cell parsing."""

    def test_semicolon_separated(self):
        assert _split_connections("a; b ;c") == ["a", "b", "c"]

    def test_pipe_separated(self):
        assert _split_connections("a|b") == ["a", "b"]

    def test_json_list(self):
        assert _split_connections('["x", 2]') == ["x", "2"]

    def test_json_list_drops_nulls(self):
        """Test null entries are not turned into the id "None"."""
        assert _split_connections('["a", null, 3]') == ["a", "3"]

    def test_empty_cell(self):
        assert _split_connections(None) == []
        assert _split_connections("") == []

    def test_single_id(self):
        assert _split_connections("solo") == ["solo"]


class TestLoadJson:
    """Tests for JSON snapshot loading."""

    def test_load_list(self, snapshot_json):
        """Test loading a plain list of contacts."""
        snapshot = load_contacts(snapshot_json)

        assert isinstance(snapshot, ContactSnapshot)
        assert snapshot.has_contacts
        assert snapshot.contact_ids == ["A", "B", "C", "D"]
        assert snapshot.contacts[1].connections == ["A", "C", "D"]
        assert snapshot.source_file == str(snapshot_json)
        assert snapshot.skipped_rows == 0

    def test_load_wrapped_object(self, tmp_path):
        """Test loading {"contacts": [...]} with store field names."""
        filepath = tmp_path / "export.json"
        filepath.write_text(json.dumps({
            "contacts": [
                {"id": "1", "name": "Alice", "linkedinConnections": ["2"]},
                {"id": "2", "name": "Bob", "linkedinConnections": None},
            ]
        }))

        snapshot = load_contacts(filepath)

        assert snapshot.contact_ids == ["1", "2"]
        assert snapshot.contacts[0].connections == ["2"]
        assert snapshot.contacts[1].connections == []

    def test_malformed_entries_skipped(self, tmp_path, caplog):
        """Test entries without an id are skipped with a warning."""
        filepath = tmp_path / "contacts.json"
        filepath.write_text(json.dumps([
            {"id": "1", "name": "Alice"},
            {"name": "No Id"},
            "not a contact",
        ]))

        snapshot = load_contacts(filepath)

        assert snapshot.contact_ids == ["1"]
        assert snapshot.skipped_rows == 2
        assert "Skipping malformed contact" in caplog.text

    def test_non_list_payload(self, tmp_path):
        filepath = tmp_path / "contacts.json"
        filepath.write_text(json.dumps({"contacts": "nope"}))

        with pytest.raises(ValueError):
            load_contacts(filepath)


class TestLoadCsv:
    """Tests for CSV snapshot loading."""

    def test_load_csv(self, tmp_path):
        """Test column variations and connection splitting."""
        filepath = tmp_path / "contacts.csv"
        filepath.write_text(
            "Contact ID,Full Name,Company,Position,Connections\n"
            "c1,Alice Chen,Acme,CEO,c2;c3\n"
            "c2,Bob Diaz,,,c1\n"
            "c3,Carol Ng,Initech,Designer,\n"
        )

        snapshot = load_contacts(filepath)

        assert snapshot.contact_ids == ["c1", "c2", "c3"]
        alice = snapshot.contacts[0]
        assert alice.name == "Alice Chen"
        assert alice.company == "Acme"
        assert alice.connections == ["c2", "c3"]
        assert snapshot.contacts[1].company is None
        assert snapshot.contacts[2].connections == []

    def test_rows_without_id_skipped(self, tmp_path):
        filepath = tmp_path / "contacts.csv"
        filepath.write_text(
            "id,name,connections\n"
            "1,Alice,2\n"
            ",Ghost,1\n"
            "2,Bob,1\n"
        )

        snapshot = load_contacts(filepath)

        assert snapshot.contact_ids == ["1", "2"]
        assert snapshot.skipped_rows == 1

    def test_numeric_ids_kept_as_text(self, tmp_path):
        """Test ids with leading zeros survive the read."""
        filepath = tmp_path / "contacts.csv"
        filepath.write_text("id,name,connections\n007,Bond,008\n008,Q,007\n")

        snapshot = load_contacts(filepath)

        assert snapshot.contact_ids == ["007", "008"]
        assert snapshot.contacts[0].connections == ["008"]


class TestLoadContactsErrors:
    """Tests for load_contacts failure modes."""

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_contacts(tmp_path / "missing.json")

    def test_unsupported_format(self, tmp_path):
        filepath = tmp_path / "contacts.xml"
        filepath.write_text("<contacts/>")

        with pytest.raises(ValueError, match="Unsupported"):
            load_contacts(filepath)

    def test_empty_snapshot(self, tmp_path):
        filepath = tmp_path / "contacts.json"
        filepath.write_text("[]")

        with pytest.raises(ValueError, match="No contacts"):
            load_contacts(filepath)
