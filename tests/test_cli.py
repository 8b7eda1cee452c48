"""Tests for the junkcar command line interface."""

import json
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from junkcar.cli import app

runner = CliRunner()


@pytest.fixture
def cli_settings(mock_settings):
    with patch("junkcar.cli.get_settings", return_value=mock_settings):
        yield mock_settings


class TestInventoryCommand:
    """Tests for `junkcar inventory`."""

    @pytest.mark.unit
    def test_lists_all_vehicles(self, cli_settings, vehicles_file):
        result = runner.invoke(app, ["inventory", "--source", str(vehicles_file)])

        assert result.exit_code == 0
        assert "Vehicles: 4 of 4" in result.output

    @pytest.mark.unit
    def test_filters_by_status_and_search(self, cli_settings, vehicles_file):
        result = runner.invoke(
            app,
            ["inventory", "--source", str(vehicles_file), "--search", "honda", "--status", "yard"],
        )

        assert result.exit_code == 0
        assert "Vehicles: 1 of 4" in result.output
        assert "Accord" in result.output
        assert "Civic" not in result.output

    @pytest.mark.unit
    def test_no_matches(self, cli_settings, vehicles_file):
        result = runner.invoke(
            app, ["inventory", "--source", str(vehicles_file), "--min-price", "5000"]
        )

        assert result.exit_code == 0
        assert "No vehicles found" in result.output

    @pytest.mark.unit
    def test_invalid_status(self, cli_settings, vehicles_file):
        result = runner.invoke(
            app, ["inventory", "--source", str(vehicles_file), "--status", "crushed"]
        )

        assert result.exit_code == 1
        assert "Invalid filter status" in result.output

    @pytest.mark.unit
    def test_unknown_saved_search(self, cli_settings, vehicles_file):
        result = runner.invoke(
            app, ["inventory", "--source", str(vehicles_file), "--saved", "nope"]
        )

        assert result.exit_code == 1
        assert "Saved search not found" in result.output


class TestStatsCommand:
    """Tests for `junkcar stats`."""

    @pytest.mark.unit
    def test_stats_for_filtered_view(self, cli_settings, vehicles_file):
        result = runner.invoke(
            app, ["stats", "--source", str(vehicles_file), "--status", "sold"]
        )

        assert result.exit_code == 0
        assert "$1,000.00" in result.output
        assert "status=sold" in result.output


class TestSavedCommands:
    """Tests for `junkcar saved ...`."""

    @pytest.mark.unit
    def test_list_empty(self, cli_settings):
        result = runner.invoke(app, ["saved", "list"])

        assert result.exit_code == 0
        assert "No saved searches" in result.output

    @pytest.mark.unit
    def test_save_then_use(self, cli_settings, vehicles_file):
        """A saved search should be listed and usable by inventory."""
        result = runner.invoke(
            app, ["saved", "save", "No title", "--paperwork", "no-title", "--status", "yard"]
        )
        assert result.exit_code == 0
        assert "Search saved: No title" in result.output

        stored = json.loads(cli_settings.saved_searches_file.read_text())
        search_id = stored[0]["id"]
        assert stored[0]["filters"]["paperwork"] == "no-title"

        listed = runner.invoke(app, ["saved", "list"])
        assert "Saved Searches (1)" in listed.output

        inventory = runner.invoke(
            app, ["inventory", "--source", str(vehicles_file), "--saved", search_id]
        )
        assert inventory.exit_code == 0
        assert "Vehicles: 1 of 4" in inventory.output

    @pytest.mark.unit
    def test_save_without_filters_fails(self, cli_settings):
        result = runner.invoke(app, ["saved", "save", "Everything"])

        assert result.exit_code == 1
        assert "No filters given" in result.output
        assert not cli_settings.saved_searches_file.exists()

    @pytest.mark.unit
    def test_save_blank_name_fails(self, cli_settings):
        result = runner.invoke(app, ["saved", "save", "  ", "--status", "sold"])

        assert result.exit_code == 1
        assert "Please enter a name" in result.output

    @pytest.mark.unit
    def test_show_and_delete(self, cli_settings):
        runner.invoke(app, ["saved", "save", "Trucks", "--search", "ford"])
        search_id = json.loads(cli_settings.saved_searches_file.read_text())[0]["id"]

        shown = runner.invoke(app, ["saved", "show", search_id])
        assert shown.exit_code == 0
        assert "ford" in shown.output

        deleted = runner.invoke(app, ["saved", "delete", search_id])
        assert deleted.exit_code == 0
        assert "Search deleted" in deleted.output
        assert json.loads(cli_settings.saved_searches_file.read_text()) == []

    @pytest.mark.unit
    def test_delete_unknown_is_harmless(self, cli_settings):
        result = runner.invoke(app, ["saved", "delete", "nope"])

        assert result.exit_code == 0
        assert "No saved search with ID nope" in result.output
