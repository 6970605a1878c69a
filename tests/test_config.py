"""
Tests for TypewriterOptions and environment overrides.

Run with: pytest tests/test_config.py -v
"""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from typewriter_tui import ConfigurationError, TypewriterOptions, options_from_env
from typewriter_tui.config import resolve_options


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """No TYPEWRITER_* variables leak in from the developer's shell."""
    for name in ("TYPEWRITER_DEBUG", "TYPEWRITER_DELAY", "TYPEWRITER_FLUCTUATION"):
        monkeypatch.delenv(name, raising=False)


class TestDefaults:

    def test_defaults(self):
        options = TypewriterOptions()
        assert options.debug is False
        assert options.delay == 100
        assert options.fluctuation == 50
        assert options.repeat is False
        assert options.sleep == 0
        assert options.sleep_rewrite == 0
        assert options.sleep_before_repeat == 0

    def test_frozen(self):
        options = TypewriterOptions()
        with pytest.raises(AttributeError):
            options.delay = 5


class TestMerge:

    def test_merged_overrides(self):
        options = TypewriterOptions().merged(delay=20, repeat=True)
        assert options.delay == 20
        assert options.repeat is True
        assert options.fluctuation == 50

    def test_merged_ignores_none(self):
        base = TypewriterOptions(delay=20)
        assert base.merged(delay=None) is base

    def test_unknown_option(self):
        with pytest.raises(ConfigurationError, match="colour"):
            TypewriterOptions().merged(colour="red")

    def test_negative_rejected(self):
        with pytest.raises(ConfigurationError, match="fluctuation"):
            TypewriterOptions().merged(fluctuation=-1)


class TestEnvironment:

    def test_no_env_gives_defaults(self):
        assert options_from_env() == TypewriterOptions()

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("TYPEWRITER_DEBUG", "1")
        monkeypatch.setenv("TYPEWRITER_DELAY", "80")
        monkeypatch.setenv("TYPEWRITER_FLUCTUATION", "12.5")
        options = options_from_env()
        assert options.debug is True
        assert options.delay == 80
        assert options.fluctuation == 12.5

    def test_bad_env_number(self, monkeypatch):
        monkeypatch.setenv("TYPEWRITER_DELAY", "fast")
        with pytest.raises(ConfigurationError, match="TYPEWRITER_DELAY"):
            options_from_env()


class TestResolve:
    """Merge order: defaults < env < constructor < keywords."""

    def test_dict_over_env(self, monkeypatch):
        monkeypatch.setenv("TYPEWRITER_DELAY", "80")
        assert resolve_options({"delay": 10}).delay == 10
        assert resolve_options({"repeat": True}).delay == 80

    def test_keywords_over_dict(self):
        assert resolve_options({"delay": 10}, delay=5).delay == 5

    def test_record_used_as_is(self, monkeypatch):
        monkeypatch.setenv("TYPEWRITER_DELAY", "80")
        record = TypewriterOptions(delay=7)
        assert resolve_options(record) is record

    def test_record_replaces_env_but_keywords_still_win(self, monkeypatch):
        """A whole record skips the environment layer, keywords apply on top."""
        monkeypatch.setenv("TYPEWRITER_FLUCTUATION", "3")
        options = resolve_options(TypewriterOptions(delay=7), delay=5)
        assert options.delay == 5
        assert options.fluctuation == 50
