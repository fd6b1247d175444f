"""
Hedge Layer CLI - Terminal Output Tests
"""

import io
import json
from datetime import datetime, timezone

import pytest
from rich.console import Console

from hedgelayer.cli import output as out
from hedgelayer.models import HedgeBundle


@pytest.fixture
def captured(monkeypatch):
    """Route both consoles into buffers."""
    stdout, stderr = io.StringIO(), io.StringIO()
    monkeypatch.setattr(out, "console", Console(file=stdout, width=120, no_color=True, highlight=False))
    monkeypatch.setattr(out, "err_console", Console(file=stderr, width=120, no_color=True, highlight=False))
    return stdout, stderr


class TestFormatting:
    """Tests for value formatters."""

    def test_currency(self):
        assert out.currency(1234.5) == "$1,234.50"

    def test_percent(self):
        assert out.percent(0.057) == "5.7%"

    def test_truncate(self):
        assert out.truncate("short", 10) == "short"
        assert out.truncate("a very long question", 10) == "a very lo…"

    @pytest.mark.parametrize("volume, expected", [
        ("1300000", "$1.3M"),
        ("5400", "$5.4K"),
        ("12", "$12"),
        ("n/a", "n/a"),
    ])
    def test_format_volume(self, volume, expected):
        assert out.format_volume(volume) == expected

    @pytest.mark.parametrize("value, expected", [
        ("2024-06-01T11:59:40Z", "just now"),
        ("2024-06-01T11:45:00Z", "15m ago"),
        ("2024-06-01T09:00:00Z", "3h ago"),
        ("2024-05-29T12:00:00Z", "3d ago"),
        ("", "—"),
        ("yesterday", "—"),
    ])
    def test_relative_time(self, value, expected):
        now = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)
        assert out.relative_time(value, now=now) == expected

    def test_format_date(self):
        assert out.format_date("2024-01-05T10:30:00Z") == "Jan 5, 2024"
        assert out.format_date("") == "—"

    def test_format_datetime(self):
        assert out.format_datetime("2024-01-05T10:30:00+00:00") == "2024-01-05 10:30 UTC"

    def test_format_status_escapes_unknown(self):
        assert out.format_status("completed") == "[green]completed[/green]"
        assert out.format_status("[weird]") == "\\[weird]"


class TestRendering:
    """Tests for console helpers."""

    def test_print_json(self, captured):
        stdout, _ = captured
        out.print_json({"a": [1, 2]})

        assert json.loads(stdout.getvalue()) == {"a": [1, 2]}

    def test_error_goes_to_stderr(self, captured):
        stdout, stderr = captured
        out.error("bad [thing]")

        assert stdout.getvalue() == ""
        assert "✗ bad [thing]" in stderr.getvalue()

    def test_table(self, captured):
        stdout, _ = captured
        out.table([["Handle", "alice"], ["User ID", "u1"]])

        text = stdout.getvalue()
        assert "Handle" in text
        assert "alice" in text

    def test_table_with_headers(self, captured):
        stdout, _ = captured
        out.table([["0.36", "800"]], ["Price", "Size"])

        text = stdout.getvalue()
        assert "Price" in text
        assert "800" in text

    def test_display_hedge_bundle(self, captured, bundle):
        stdout, _ = captured
        out.display_hedge_bundle(HedgeBundle.from_dict(bundle))

        text = stdout.getvalue()
        assert "Hedge Bundle" in text
        assert "$120.00" in text
        assert "833.0%" in text
        assert "(capped)" in text
        assert "Will a Cat 4 hurricane hit Miami" in text

    def test_display_empty_bundle(self, captured):
        stdout, _ = captured
        out.display_hedge_bundle(HedgeBundle.from_dict({"positions": [], "totalCost": 0}))

        assert "Positions" not in stdout.getvalue()

    def test_configure_no_color(self):
        out.configure(no_color=True)
        try:
            assert out.console.no_color
            assert out.err_console.stderr
        finally:
            out.configure()
