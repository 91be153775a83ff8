"""Tests for settings resolution (config.py)."""

from __future__ import annotations

from pathlib import Path

import pytest

from tubeport.config import (
    DEFAULT_INVIDIOUS_INSTANCE,
    Settings,
    default_data_dir,
    load_settings,
    normalize_instance,
    parse_backend,
    parse_bool,
    parse_timeout,
)
from tubeport.core.models import Backend
from tubeport.exceptions import ConfigurationError


class TestLoadSettings:
    def test_defaults(self) -> None:
        settings = load_settings({})
        assert settings.data_dir == default_data_dir()
        assert settings.backend_preference is Backend.LOCAL
        assert settings.backend_fallback is True
        assert settings.invidious_instance == DEFAULT_INVIDIOUS_INSTANCE
        assert settings.request_timeout == 10.0

    def test_environment_values(self, tmp_path: Path) -> None:
        settings = load_settings(
            {
                "TUBEPORT_DATA_DIR": str(tmp_path),
                "TUBEPORT_BACKEND": "Invidious",
                "TUBEPORT_BACKEND_FALLBACK": "no",
                "TUBEPORT_INVIDIOUS_INSTANCE": "https://example.org/",
                "TUBEPORT_REQUEST_TIMEOUT": "2.5",
            },
        )
        assert settings.data_dir == tmp_path
        assert settings.backend_preference is Backend.INVIDIOUS
        assert settings.backend_fallback is False
        assert settings.invidious_instance == "https://example.org"
        assert settings.request_timeout == 2.5

    def test_empty_values_ignored(self) -> None:
        settings = load_settings({"TUBEPORT_BACKEND": "", "TUBEPORT_REQUEST_TIMEOUT": ""})
        assert settings.backend_preference is Backend.LOCAL
        assert settings.request_timeout == 10.0

    def test_invalid_value_raises(self) -> None:
        with pytest.raises(ConfigurationError):
            load_settings({"TUBEPORT_BACKEND": "piped"})


class TestSettings:
    def test_store_paths(self, tmp_path: Path) -> None:
        settings = Settings(data_dir=tmp_path)
        assert settings.profiles_path == tmp_path / "profiles.db"
        assert settings.history_path == tmp_path / "history.db"

    def test_overrides_skip_none(self, tmp_path: Path) -> None:
        base = Settings(data_dir=tmp_path)
        updated = base.with_overrides(
            data_dir=None,
            backend_preference=Backend.INVIDIOUS,
            backend_fallback=False,
        )
        assert updated.data_dir == tmp_path
        assert updated.backend_preference is Backend.INVIDIOUS
        assert updated.backend_fallback is False
        assert base.backend_preference is Backend.LOCAL


class TestParsers:
    @pytest.mark.parametrize(("raw", "expected"), [("local", Backend.LOCAL), (" INVIDIOUS ", Backend.INVIDIOUS)])
    def test_parse_backend(self, raw: str, expected: Backend) -> None:
        assert parse_backend(raw) is expected

    def test_parse_backend_hint_lists_choices(self) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            parse_backend("nope")
        assert "invidious" in (exc_info.value.hint or "")

    @pytest.mark.parametrize("raw", ["1", "true", "Yes", "ON"])
    def test_parse_bool_true(self, raw: str) -> None:
        assert parse_bool("X", raw) is True

    @pytest.mark.parametrize("raw", ["0", "false", "No", "off"])
    def test_parse_bool_false(self, raw: str) -> None:
        assert parse_bool("X", raw) is False

    def test_parse_bool_invalid(self) -> None:
        with pytest.raises(ConfigurationError, match="X must be a boolean"):
            parse_bool("X", "maybe")

    @pytest.mark.parametrize("raw", ["abc", "0", "-1"])
    def test_parse_timeout_invalid(self, raw: str) -> None:
        with pytest.raises(ConfigurationError):
            parse_timeout("T", raw)

    def test_normalize_instance_requires_scheme(self) -> None:
        with pytest.raises(ConfigurationError):
            normalize_instance("yewtu.be")
