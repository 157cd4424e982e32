"""Unit tests for the JSON document reader."""

import json
import logging
from decimal import Decimal

import pytest
from pydantic import ValidationError

from eph_billing.models import AuthorRole, BillingConfig, BillingMethod
from eph_billing.models.billing_config import DEFAULT_DOCUMENT
from eph_billing.readers.json_reader import (
    load_document,
    parse_raw_entries,
    read_billing_config,
    read_raw_entries,
)


class TestLoadDocument:
    """Test raw JSON loading."""

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_document(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")

        with pytest.raises(ValueError, match="is not valid JSON"):
            load_document(path)


class TestParseRawEntries:
    """Test validating entry documents."""

    def test_camel_case_documents(self, sample_entry_documents):
        entries = parse_raw_entries(sample_entry_documents)

        assert [e.id for e in entries] == ["op-1", "pm-1", "op-2", "op-3", "sub-1"]
        assert entries[1].author_role == AuthorRole.PLANT_MANAGER
        assert entries[1].has_original_entry is True
        assert entries[3].total_hours == Decimal("0.5")

    def test_invalid_document_logged(self, caplog):
        documents = [
            {"date": "2024-03-04", "subjectKey": "EX-01", "authorRole": "admin"},
            {"date": "2024-03-04", "subjectKey": "EX-01", "authorRole": "foreman"},
        ]

        with caplog.at_level(logging.ERROR):
            with pytest.raises(ValidationError):
                parse_raw_entries(documents)

        assert "Entry document #1 failed validation" in caplog.text


class TestReadRawEntries:
    """Test reading entry files."""

    def test_object_with_entries_list(self, entries_file):
        assert len(read_raw_entries(entries_file)) == 5

    def test_bare_list(self, tmp_path, sample_entry_documents):
        path = tmp_path / "entries.json"
        path.write_text(json.dumps(sample_entry_documents[:2]))

        assert [e.id for e in read_raw_entries(path)] == ["op-1", "pm-1"]

    def test_object_without_entries(self, tmp_path):
        path = tmp_path / "entries.json"
        path.write_text("{}")

        assert read_raw_entries(path) == []

    def test_scalar_rejected(self, tmp_path):
        path = tmp_path / "entries.json"
        path.write_text("42")

        with pytest.raises(ValueError, match="must contain a list of entries"):
            read_raw_entries(path)


class TestReadBillingConfig:
    """Test reading configuration files."""

    def test_stored_document(self, config_file):
        config = read_billing_config(config_file)

        assert config.saturday.min_hours == Decimal("5")
        assert config.saturday.rate_multiplier == Decimal("2")
        assert config.breakdown.enabled is False
        assert config.sunday == BillingConfig.default().sunday

    def test_missing_sections_are_not_filled_in(self, tmp_path):
        path = tmp_path / "billing.json"
        path.write_text(json.dumps({"saturday": {"minHours": 5}}))

        config = read_billing_config(path)

        assert config.saturday.min_hours == Decimal("5")
        assert config.saturday.billing_method == BillingMethod.PER_HOUR
        assert config.weekdays is None
        assert config.sunday is None
        assert config.public_holidays is None
        assert config.breakdown.enabled is True

    def test_null_min_hours_kept(self, tmp_path):
        path = tmp_path / "billing.json"
        sunday = {"billingMethod": "MINIMUM_BILLING", "minHours": None}
        path.write_text(json.dumps({**DEFAULT_DOCUMENT, "sunday": sunday}))

        config = read_billing_config(path)

        assert config.sunday.min_hours is None
        assert config.saturday == BillingConfig.default().saturday

    def test_list_rejected(self, tmp_path):
        path = tmp_path / "billing.json"
        path.write_text("[]")

        with pytest.raises(ValueError, match="billing configuration object"):
            read_billing_config(path)
