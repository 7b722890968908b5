"""Tests for Settings models and the TOML/environment loader."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from blurqueue.config import (
    FilterSettings,
    LoggingSettings,
    PipelineSettings,
    Settings,
    load_settings,
    reload_config,
)
from blurqueue.config.loader import SettingsLoader
from blurqueue.config.validators import validate_extensions_list, validate_filter_window
from blurqueue.shared.errors import ApplicationError, ErrorCode


@pytest.fixture(autouse=True)
def _work_in_tmp(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Run every test from an empty directory so no config file is found."""
    monkeypatch.chdir(tmp_path)


class TestSettingsModels:
    """Test cases for the pydantic settings models."""

    def test_defaults(self) -> None:
        """Defaults match the documented pipeline configuration."""
        settings = Settings()

        assert settings.pipeline.input_root == Path("../input")
        assert settings.pipeline.output_root == Path("../output")
        assert settings.pipeline.num_producers == 1
        assert settings.pipeline.num_consumers == 10
        assert settings.pipeline.queue_capacity == 1000
        assert settings.pipeline.max_io_retries == 1
        assert settings.filter.filter_size == 5
        assert settings.logging.level == "INFO"

    @pytest.mark.parametrize("field", ["num_producers", "num_consumers", "queue_capacity"])
    def test_sizes_must_be_positive(self, field: str) -> None:
        """Pool sizes and capacity reject zero."""
        with pytest.raises(ValidationError):
            PipelineSettings(**{field: 0})

    @pytest.mark.parametrize("max_io_retries", [-1, 2, 5])
    def test_retry_limit(self, max_io_retries: int) -> None:
        """At most one retry can be configured."""
        with pytest.raises(ValidationError):
            PipelineSettings(max_io_retries=max_io_retries)

    def test_single_retry_accepted(self) -> None:
        """Zero and one are both valid retry counts."""
        assert PipelineSettings(max_io_retries=0).max_io_retries == 0
        assert PipelineSettings(max_io_retries=1).max_io_retries == 1

    @pytest.mark.parametrize("filter_size", [1, 2, 4, -3])
    def test_invalid_filter_sizes(self, filter_size: int) -> None:
        """Configured windows must be odd and at least 3."""
        with pytest.raises(ValidationError):
            FilterSettings(filter_size=filter_size)

    def test_extensions_lowercased(self) -> None:
        """Extensions are normalized to lower case."""
        assert PipelineSettings(extensions=[".PNG", ".Jpg"]).extensions == [".png", ".jpg"]

    def test_log_level_normalized(self) -> None:
        """Log levels are case-insensitive."""
        assert LoggingSettings(level="debug").level == "DEBUG"
        with pytest.raises(ValidationError):
            LoggingSettings(level="chatty")


class TestValidators:
    """Test cases for the reusable validators."""

    def test_extensions_need_leading_dot(self) -> None:
        """Bare suffixes are rejected."""
        with pytest.raises(ValueError, match="must start with a dot"):
            validate_extensions_list(["png"])

    def test_empty_extensions_pass_through(self) -> None:
        """None and [] are returned unchanged."""
        assert validate_extensions_list(None) is None
        assert validate_extensions_list([]) == []

    def test_filter_window(self) -> None:
        """Odd windows of at least 3 are accepted."""
        assert validate_filter_window(7) == 7
        with pytest.raises(ValueError, match="odd"):
            validate_filter_window(8)


class TestEnvironmentOverrides:
    """Environment variables override defaults."""

    def test_nested_environment_variable(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """BLURQUEUE_PIPELINE__NUM_CONSUMERS sets the consumer count."""
        monkeypatch.setenv("BLURQUEUE_PIPELINE__NUM_CONSUMERS", "4")
        monkeypatch.setenv("BLURQUEUE_FILTER__FILTER_SIZE", "7")

        settings = load_settings()

        assert settings.pipeline.num_consumers == 4
        assert settings.filter.filter_size == 7

    def test_invalid_environment_value(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """An invalid environment value is a configuration error."""
        monkeypatch.setenv("BLURQUEUE_FILTER__FILTER_SIZE", "6")

        with pytest.raises(ApplicationError) as exc_info:
            load_settings()

        assert exc_info.value.code == ErrorCode.CONFIG_INVALID


class TestLoadSettings:
    """Test cases for load_settings and the singleton loader."""

    def _write(self, path: Path, content: str) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    def test_explicit_toml_file(self, tmp_path: Path) -> None:
        """Values from the TOML file are loaded."""
        config = self._write(
            tmp_path / "custom.toml",
            "[pipeline]\nnum_producers = 3\nqueue_capacity = 16\n[filter]\nfilter_size = 9\n",
        )

        settings = load_settings(config)

        assert settings.pipeline.num_producers == 3
        assert settings.pipeline.queue_capacity == 16
        assert settings.filter.filter_size == 9
        assert settings.pipeline.num_consumers == 10

    def test_file_values_take_priority_over_environment(
        self,
        tmp_path: Path,
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        """The TOML file wins; fields it omits still come from the environment."""
        # Given
        monkeypatch.setenv("BLURQUEUE_PIPELINE__NUM_PRODUCERS", "7")
        monkeypatch.setenv("BLURQUEUE_PIPELINE__NUM_CONSUMERS", "4")
        config = self._write(tmp_path / "custom.toml", "[pipeline]\nnum_producers = 3\n")

        # When
        settings = Settings.from_toml_file(config)

        # Then
        assert settings.pipeline.num_producers == 3
        assert settings.pipeline.num_consumers == 4

    def test_default_location_is_discovered(self, tmp_path: Path) -> None:
        """config/config.toml in the working directory is picked up."""
        self._write(tmp_path / "config" / "config.toml", "[pipeline]\nnum_consumers = 2\n")

        assert load_settings().pipeline.num_consumers == 2

    def test_missing_file(self, tmp_path: Path) -> None:
        """A missing explicit file is CONFIG_MISSING."""
        with pytest.raises(ApplicationError) as exc_info:
            load_settings(tmp_path / "absent.toml")

        assert exc_info.value.code == ErrorCode.CONFIG_MISSING

    def test_malformed_toml(self, tmp_path: Path) -> None:
        """Unparsable TOML is CONFIG_INVALID."""
        config = self._write(tmp_path / "broken.toml", "[pipeline\nnum_consumers = \n")

        with pytest.raises(ApplicationError) as exc_info:
            load_settings(config)

        assert exc_info.value.code == ErrorCode.CONFIG_INVALID

    def test_invalid_value_names_the_key(self, tmp_path: Path) -> None:
        """Validation failures report the offending key."""
        config = self._write(tmp_path / "bad.toml", "[filter]\nfilter_size = 4\n")

        with pytest.raises(ApplicationError) as exc_info:
            load_settings(config)

        assert exc_info.value.code == ErrorCode.CONFIG_INVALID
        assert exc_info.value.context.additional_data == {"config_key": "filter.filter_size"}

    def test_toml_round_trip(self, tmp_path: Path) -> None:
        """to_toml_file output loads back to equal settings."""
        original = Settings(
            pipeline=PipelineSettings(num_producers=2, extensions=[".png"]),
            filter=FilterSettings(filter_size=3),
        )
        path = tmp_path / "out" / "saved.toml"

        original.to_toml_file(path)

        assert Settings.from_toml_file(path) == original

    def test_reload_replaces_singleton(self, tmp_path: Path) -> None:
        """reload_config swaps the shared instance."""
        first = self._write(tmp_path / "a.toml", "[pipeline]\nnum_consumers = 2\n")
        second = self._write(tmp_path / "b.toml", "[pipeline]\nnum_consumers = 5\n")

        assert reload_config(first).pipeline.num_consumers == 2
        assert reload_config(second).pipeline.num_consumers == 5

    def test_loader_caches_instance(self) -> None:
        """get_config returns the same object until reloaded."""
        loader = SettingsLoader()

        assert loader.get_config() is loader.get_config()
