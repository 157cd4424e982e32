"""Unit tests for the calculate command."""

import json

import pandas as pd
import pytest
from click.testing import CliRunner

from eph_billing.cli.commands.calculate import calculate_hours, load_rates
from eph_billing.models.billing_config import DEFAULT_DOCUMENT


@pytest.fixture
def runner():
    """Create a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def rates_file(tmp_path):
    path = tmp_path / "rates.json"
    path.write_text(json.dumps({"EX-01": 100, "DT-07": "200"}))
    return path


class TestCalculateCommand:
    """Test suite for the calculate command."""

    def test_requires_entries(self, runner):
        result = runner.invoke(calculate_hours, [])
        assert result.exit_code == 2
        assert "--entries" in result.output

    def test_default_configuration(self, runner, entries_file):
        result = runner.invoke(calculate_hours, ["--entries", str(entries_file)])

        assert result.exit_code == 0, result.output
        assert "Billing configuration: built-in defaults" in result.output
        assert "5 raw entries → 3 effective (1 superseded)" in result.output
        assert "Total actual hours:   11.5" in result.output
        assert "Total billable hours: 24.5" in result.output
        assert "Total cost" not in result.output
        assert "Billed 3 entries" in result.output

    def test_reference_only_warning(self, runner, entries_file):
        result = runner.invoke(calculate_hours, ["--entries", str(entries_file)])

        assert "CR-02 on 2024-03-06: subcontractor entries only" in result.output

    def test_entry_table(self, runner, entries_file):
        result = runner.invoke(calculate_hours, ["--entries", str(entries_file)])

        assert "Rain Day" in result.output
        assert "plant_manager" in result.output

    def test_with_rate(self, runner, entries_file):
        result = runner.invoke(
            calculate_hours, ["--entries", str(entries_file), "--rate", "100"]
        )

        assert result.exit_code == 0, result.output
        assert "Total cost:           2450.00" in result.output

    def test_with_rates_file(self, runner, entries_file, rates_file):
        result = runner.invoke(
            calculate_hours,
            ["--entries", str(entries_file), "--rates", str(rates_file)],
        )

        assert result.exit_code == 0, result.output
        # (8 + 12) x 100 + 4.5 x 200
        assert "Total cost:           2900.00" in result.output

    def test_missing_rate_is_configuration_error(
        self, runner, entries_file, tmp_path
    ):
        rates = tmp_path / "rates.json"
        rates.write_text(json.dumps({"EX-01": 100}))

        result = runner.invoke(
            calculate_hours, ["--entries", str(entries_file), "--rates", str(rates)]
        )

        assert result.exit_code == 1
        assert "No rate found for 'DT-07'" in result.output

    def test_invalid_rate(self, runner, entries_file):
        result = runner.invoke(
            calculate_hours, ["--entries", str(entries_file), "--rate=-5"]
        )

        assert result.exit_code == 2
        assert "non-negative" in result.output

    def test_with_config_file(self, runner, entries_file, config_file):
        result = runner.invoke(
            calculate_hours,
            ["--entries", str(entries_file), "--config", str(config_file)],
        )

        assert result.exit_code == 0, result.output
        assert f"Billing configuration: {config_file}" in result.output
        assert "Total billable hours: 22.5" in result.output

    def test_custom_rate_cost_shown_without_rate_option(
        self, runner, entries_file, tmp_path
    ):
        path = tmp_path / "billing.json"
        saturday = {**DEFAULT_DOCUMENT["saturday"], "customRate": 300}
        path.write_text(json.dumps({**DEFAULT_DOCUMENT, "saturday": saturday}))

        result = runner.invoke(
            calculate_hours, ["--entries", str(entries_file), "--config", str(path)]
        )

        assert result.exit_code == 0, result.output
        # Only the Saturday entry has a rate: 12 x 300
        assert "Total cost:           3600.00" in result.output

    def test_stored_config_missing_weekdays(self, runner, entries_file, tmp_path):
        path = tmp_path / "billing.json"
        document = {k: v for k, v in DEFAULT_DOCUMENT.items() if k != "weekdays"}
        path.write_text(json.dumps(document))

        result = runner.invoke(
            calculate_hours, ["--entries", str(entries_file), "--config", str(path)]
        )

        assert result.exit_code == 1
        assert "No billing configuration for Normal entries" in result.output

    def test_config_from_settings(self, runner, entries_file, config_file, monkeypatch):
        monkeypatch.setenv("BILLING_CONFIG_FILE", str(config_file))

        result = runner.invoke(calculate_hours, ["--entries", str(entries_file)])

        assert "Total billable hours: 22.5" in result.output

    def test_date_range(self, runner, entries_file):
        result = runner.invoke(
            calculate_hours,
            [
                "--entries",
                str(entries_file),
                "--from",
                "2024-03-05",
                "--to",
                "2024-03-08",
            ],
        )

        assert result.exit_code == 0, result.output
        assert "Total billable hours: 4.5" in result.output
        assert "Billed 1 entries" in result.output

    def test_empty_period(self, runner, entries_file):
        result = runner.invoke(
            calculate_hours, ["--entries", str(entries_file), "--from", "2024-04-01"]
        )

        assert result.exit_code == 0, result.output
        assert "No entries to bill in the selected period" in result.output
        assert "Total billable hours" not in result.output

    def test_public_holiday(self, runner, entries_file):
        result = runner.invoke(
            calculate_hours,
            ["--entries", str(entries_file), "--public-holiday", "2024-03-04"],
        )

        # Monday billed as public holiday: 8h minimum x 2.0
        assert "Total billable hours: 32.5" in result.output
        assert "Public Holiday" in result.output

    def test_group_by_asset(self, runner, entries_file):
        result = runner.invoke(
            calculate_hours,
            ["--entries", str(entries_file), "--group-by", "asset"],
        )

        assert result.exit_code == 0, result.output
        assert "| asset" in result.output
        assert "DT-07" in result.output

    def test_csv_export(self, runner, entries_file, tmp_path):
        csv_path = tmp_path / "totals.csv"

        result = runner.invoke(
            calculate_hours,
            [
                "--entries",
                str(entries_file),
                "--group-by",
                "asset",
                "--csv",
                str(csv_path),
            ],
        )

        assert result.exit_code == 0, result.output
        assert f"Totals written to {csv_path}" in result.output
        frame = pd.read_csv(csv_path, index_col="group")
        assert sorted(frame.index) == ["DT-07", "EX-01"]
        assert frame.loc["EX-01", "total_billable_hours"] == 20.0

    def test_csv_export_without_grouping(self, runner, entries_file, tmp_path):
        csv_path = tmp_path / "totals.csv"

        runner.invoke(
            calculate_hours, ["--entries", str(entries_file), "--csv", str(csv_path)]
        )

        frame = pd.read_csv(csv_path, index_col="group")
        assert list(frame.index) == ["all"]
        assert frame.loc["all", "total_billable_hours"] == 24.5

    def test_missing_entries_file(self, runner, tmp_path):
        result = runner.invoke(
            calculate_hours, ["--entries", str(tmp_path / "missing.json")]
        )

        assert result.exit_code == 5
        assert "File Not Found" in result.output

    def test_invalid_entry_document(self, runner, tmp_path):
        path = tmp_path / "entries.json"
        path.write_text(
            json.dumps([{"date": "2024-03-04", "subjectKey": "EX-01"}])
        )

        result = runner.invoke(calculate_hours, ["--entries", str(path)])

        assert result.exit_code == 4
        assert "Data Validation Error" in result.output

    def test_ambiguous_entries(self, runner, tmp_path):
        document = {"date": "2024-03-04", "subjectKey": "EX-01", "authorRole": "admin"}
        path = tmp_path / "entries.json"
        path.write_text(
            json.dumps([{**document, "id": "a"}, {**document, "id": "b"}])
        )

        result = runner.invoke(calculate_hours, ["--entries", str(path)])

        assert result.exit_code == 2
        assert "Ambiguous Entries" in result.output
        assert "  - a submitted no timestamp" in result.output

    def test_invalid_time_range(self, runner, tmp_path):
        path = tmp_path / "entries.json"
        path.write_text(
            json.dumps(
                [
                    {
                        "date": "2024-03-04",
                        "subjectKey": "EX-01",
                        "authorRole": "operator",
                        "startTime": "07:00",
                    }
                ]
            )
        )

        result = runner.invoke(calculate_hours, ["--entries", str(path)])

        assert result.exit_code == 3
        assert "Invalid Time Range" in result.output


class TestLoadRates:
    """Test reading rate tables."""

    def test_rates_as_decimals(self, rates_file):
        rates = load_rates(str(rates_file))
        assert {k: str(v) for k, v in rates.items()} == {"EX-01": "100", "DT-07": "200"}

    def test_list_rejected(self, tmp_path):
        path = tmp_path / "rates.json"
        path.write_text("[100]")

        with pytest.raises(ValueError, match="must map subject keys to rates"):
            load_rates(str(path))
