"""Tests for error formatting."""

from __future__ import annotations

from pathlib import Path

from quickcss.errors import ConfigError, QuickCssError, RuleCreationError, RuleLookupError


class TestRuleCreationError:
    def test_format(self) -> None:
        exc = RuleCreationError("cannot open stylesheet", ".modal", "css/site.css")
        assert exc.format() == (
            "error: cannot open stylesheet\n"
            "  --> css/site.css\n"
            "   |\n"
            "   = selector: .modal"
        )

    def test_str_is_format(self) -> None:
        exc = RuleCreationError("boom", "p", "a.css")
        assert str(exc) == exc.format()


class TestOtherErrors:
    def test_lookup_error(self) -> None:
        exc = RuleLookupError("search failed", "#main")
        assert str(exc) == "error: search failed\n  = selector: #main"

    def test_config_error_with_path(self) -> None:
        exc = ConfigError("expected a boolean", "editor.use_tabs", Path("q.toml"))
        assert str(exc) == "error: expected a boolean\n  --> q.toml: editor.use_tabs"

    def test_config_error_without_path(self) -> None:
        assert "<config>" in str(ConfigError("bad", "x"))

    def test_hierarchy(self) -> None:
        for exc in (
            RuleLookupError("m", "s"),
            RuleCreationError("m", "s", "p"),
            ConfigError("m", "k"),
        ):
            assert isinstance(exc, QuickCssError)
