"""Tests for the yachtme command line."""

from __future__ import annotations

from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from yachtme.cli import app

runner = CliRunner()


@pytest.fixture
def patched_gateway(seeded_gateway):
    with patch("yachtme.cli.SupabaseGateway", return_value=seeded_gateway):
        yield seeded_gateway


@pytest.mark.unit
class TestCli:
    def test_slug(self):
        result = runner.invoke(app, ["slug", "Caicco Blu 20m"])
        assert result.exit_code == 0
        assert "caicco-blu-20m" in result.stdout

    def test_version(self):
        result = runner.invoke(app, ["version"])
        assert result.exit_code == 0
        assert "YachtMe" in result.stdout

    def test_fleet(self, patched_gateway):
        result = runner.invoke(app, ["fleet", "--search", "gommone"])
        assert result.exit_code == 0
        assert "Gommone" in result.stdout
        assert "Azimut" not in result.stdout

    def test_calendar_bad_month(self):
        result = runner.invoke(app, ["calendar", "luglio"])
        assert result.exit_code == 1

    def test_calendar(self, patched_gateway):
        result = runner.invoke(app, ["calendar", "2025-07"])
        assert result.exit_code == 0
        assert "Luglio 2025" in result.stdout

    def test_load_failure_exits(self, patched_gateway):
        patched_gateway.fail_on = {"list_bookings"}
        result = runner.invoke(app, ["bookings"])
        assert result.exit_code == 1

    def test_set_setting(self, patched_gateway):
        result = runner.invoke(app, ["set-setting", "site_tagline", "Mare"])
        assert result.exit_code == 0
        assert patched_gateway.settings["site_tagline"] == "Mare"
