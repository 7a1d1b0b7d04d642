"""Tests for diagnostic coloring."""

import pytest

from stache.environment import terminal
from stache.environment.exceptions import UnresolvableScopeError


class TestColorDetection:
    """Test terminal color detection logic."""

    def test_force_color_wins(self, monkeypatch):
        monkeypatch.setenv("NO_COLOR", "1")
        monkeypatch.setenv("FORCE_COLOR", "1")
        assert terminal._should_use_colors()

    def test_no_color_disables(self, monkeypatch):
        monkeypatch.delenv("FORCE_COLOR", raising=False)
        monkeypatch.setenv("NO_COLOR", "1")
        assert not terminal._should_use_colors()

    def test_supports_color_reads_cached_value(self, monkeypatch):
        # Patch cached value (re-eval would need import before setenv; patch is reliable)
        monkeypatch.setattr(terminal, "_USE_COLORS", False)
        assert not terminal.supports_color()
        monkeypatch.setattr(terminal, "_USE_COLORS", True)
        assert terminal.supports_color()

    def test_colorize_returns_plain_when_disabled(self, monkeypatch):
        monkeypatch.setattr(terminal, "_USE_COLORS", False)
        result = terminal.colorize("Error", "bright_red", "bold")
        assert result == "Error"

    def test_colorize_adds_codes_when_enabled(self, monkeypatch):
        monkeypatch.setattr(terminal, "_USE_COLORS", True)
        result = terminal.colorize("Error", "bright_red", "bold")
        assert "\033[91m" in result
        assert "\033[1m" in result
        assert result.endswith("\033[0m")

    def test_strip_colors_removes_ansi_codes(self):
        colored = "\033[91m\033[1mError\033[0m"
        assert terminal.strip_colors(colored) == "Error"


class TestSemanticHelpers:
    @pytest.mark.parametrize(
        ("helper", "code"),
        [
            (terminal.error_code, "\033[91m"),
            (terminal.location, "\033[36m"),
            (terminal.line_number, "\033[33m"),
            (terminal.error_line, "\033[91m"),
            (terminal.dim_text, "\033[2m"),
        ],
    )
    def test_helper_colors(self, monkeypatch, helper, code):
        monkeypatch.setattr(terminal, "_USE_COLORS", True)
        result = helper("text")
        assert "text" in result
        assert code in result

    def test_plain_when_disabled(self, monkeypatch):
        monkeypatch.setattr(terminal, "_USE_COLORS", False)
        assert terminal.error_code("S-SCN-001") == "S-SCN-001"
        assert terminal.location("page.hbs:1:0") == "page.hbs:1:0"


class TestErrorFormatting:
    def test_format_error_header_with_code(self, monkeypatch):
        monkeypatch.setattr(terminal, "_USE_COLORS", True)
        result = terminal.format_error_header("S-SCN-001", "Unclosed block")
        assert "S-SCN-001" in result
        assert "Unclosed block" in result
        assert "\033[" in result

    def test_format_error_header_without_code(self, monkeypatch):
        monkeypatch.setattr(terminal, "_USE_COLORS", True)
        assert terminal.format_error_header(None, "Something went wrong") == "Something went wrong"

    def test_format_source_line_normal(self, monkeypatch):
        monkeypatch.setattr(terminal, "_USE_COLORS", False)
        assert terminal.format_source_line(42, "{{ user }}") == "  42 | {{ user }}"

    def test_format_source_line_error(self, monkeypatch):
        monkeypatch.setattr(terminal, "_USE_COLORS", True)
        result = terminal.format_source_line(7, "{{#each}}", is_error=True)
        assert terminal.strip_colors(result) == ">  7 | {{#each}}"
        assert "\033[91m" in result

    def test_exception_messages_readable_without_colors(self, monkeypatch):
        monkeypatch.setattr(terminal, "_USE_COLORS", False)
        error = UnresolvableScopeError("unable to resolve scope for ../x", source="{{../x}}", offset=0)
        assert "\033[" not in error.format_compact()


class TestColorization:
    def test_colorize_empty_colors(self, monkeypatch):
        monkeypatch.setattr(terminal, "_USE_COLORS", True)
        assert terminal.colorize("text") == "text"

    def test_colorize_unknown_color(self, monkeypatch):
        monkeypatch.setattr(terminal, "_USE_COLORS", True)
        assert terminal.colorize("text", "unknown_color") == "text"
