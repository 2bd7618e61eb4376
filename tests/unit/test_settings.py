"""Unit tests for attospan._settings — configuration models.

Test Techniques Used:
    - Specification-based Testing: Default values and field
      constraints
    - Boundary Value Analysis: File size and backup count limits
    - Environment Override: monkeypatch for env var injection
    - Dotenv Loading: .env file in a temporary directory
    - Validation Error: pydantic constraint violations
"""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from attospan._settings import LoggingSettings, Settings


class TestLoggingSettingsDefaults:
    """Verify all logging default values.

    Technique: Specification-based Testing.
    """

    def test_level_defaults_to_warning(self) -> None:
        """Default log level is WARNING so CLI output stays clean."""
        s = LoggingSettings()
        assert s.level == "WARNING"

    def test_format_defaults_to_text(self) -> None:
        """Default format is human-readable text."""
        s = LoggingSettings()
        assert s.format == "text"

    def test_file_defaults_to_none(self) -> None:
        """Default file is None (stderr only)."""
        s = LoggingSettings()
        assert s.file is None

    def test_max_file_size_defaults_to_10(self) -> None:
        """Default rotation size is 10 MB."""
        s = LoggingSettings()
        assert s.max_file_size_mb == 10

    def test_backup_count_defaults_to_3(self) -> None:
        """Default backup count is 3."""
        s = LoggingSettings()
        assert s.backup_count == 3


class TestLoggingSettingsValidation:
    """Field constraint validation for LoggingSettings.

    Technique: Boundary Value Analysis.
    """

    def test_invalid_level_rejected(self) -> None:
        """An unrecognized level string is rejected."""
        with pytest.raises(ValidationError):
            LoggingSettings(level="TRACE")  # type: ignore[arg-type]

    def test_invalid_format_rejected(self) -> None:
        """An unrecognized format string is rejected."""
        with pytest.raises(ValidationError):
            LoggingSettings(format="yaml")  # type: ignore[arg-type]

    def test_negative_backup_count_rejected(self) -> None:
        """Negative backup_count is rejected (ge=0)."""
        with pytest.raises(ValidationError):
            LoggingSettings(backup_count=-1)

    def test_zero_backup_count_is_valid(self) -> None:
        """backup_count=0 is the lower bound."""
        assert LoggingSettings(backup_count=0).backup_count == 0

    def test_zero_max_file_size_rejected(self) -> None:
        """max_file_size_mb must be at least 1."""
        with pytest.raises(ValidationError):
            LoggingSettings(max_file_size_mb=0)

    def test_one_mb_max_file_size_is_valid(self) -> None:
        """max_file_size_mb=1 is the lower bound."""
        assert LoggingSettings(max_file_size_mb=1).max_file_size_mb == 1


class TestSettingsDefaults:
    """Verify root Settings default values.

    Technique: Specification-based Testing.
    """

    def test_logging_is_logging_settings_instance(self) -> None:
        """Default logging is a LoggingSettings instance."""
        s = Settings(_env_file=None)  # type: ignore[call-arg]
        assert isinstance(s.logging, LoggingSettings)

    def test_logging_defaults_propagate(self) -> None:
        """Nested logging defaults are preserved."""
        s = Settings(_env_file=None)  # type: ignore[call-arg]
        assert s.logging.level == "WARNING"
        assert s.logging.format == "text"

    def test_output_defaults_to_text(self) -> None:
        """CLI results are printed as text by default."""
        s = Settings(_env_file=None)  # type: ignore[call-arg]
        assert s.output == "text"

    def test_unit_defaults_to_seconds(self) -> None:
        """Amounts without --unit are read as seconds."""
        s = Settings(_env_file=None)  # type: ignore[call-arg]
        assert s.unit == "seconds"

    def test_invalid_unit_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Settings(_env_file=None, unit="fortnights")  # type: ignore[call-arg, arg-type]

    def test_invalid_output_rejected(self) -> None:
        """Only text and json outputs exist."""
        with pytest.raises(ValidationError):
            Settings(_env_file=None, output="xml")  # type: ignore[call-arg, arg-type]


class TestSettingsEnvOverride:
    """Environment variable override for Settings.

    Technique: Environment Override via monkeypatch.
    """

    def test_output_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """ATTOSPAN_OUTPUT env var overrides the default output."""
        monkeypatch.setenv("ATTOSPAN_OUTPUT", "json")
        s = Settings(_env_file=None)  # type: ignore[call-arg]
        assert s.output == "json"

    def test_unit_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """ATTOSPAN_UNIT env var selects the default unit."""
        monkeypatch.setenv("ATTOSPAN_UNIT", "nanoseconds")
        s = Settings(_env_file=None)  # type: ignore[call-arg]
        assert s.unit == "nanoseconds"

    def test_logging_level_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """ATTOSPAN_LOGGING__LEVEL env var overrides default level."""
        monkeypatch.setenv("ATTOSPAN_LOGGING__LEVEL", "DEBUG")
        s = Settings(_env_file=None)  # type: ignore[call-arg]
        assert s.logging.level == "DEBUG"

    def test_unprefixed_variables_are_ignored(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Variables without the ATTOSPAN_ prefix have no effect."""
        monkeypatch.setenv("OUTPUT", "json")
        monkeypatch.setenv("LOGGING__LEVEL", "DEBUG")
        s = Settings(_env_file=None)  # type: ignore[call-arg]
        assert s.output == "text"
        assert s.logging.level == "WARNING"

    def test_invalid_env_value_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """A bad value in the environment surfaces as ValidationError."""
        monkeypatch.setenv("ATTOSPAN_LOGGING__MAX_FILE_SIZE_MB", "0")
        with pytest.raises(ValidationError):
            Settings(_env_file=None)  # type: ignore[call-arg]


class TestSettingsNestedDelimiter:
    """Verify __ delimiter works for nested env vars.

    Technique: Environment Override via monkeypatch.
    """

    def test_double_underscore_delimiter(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Double-underscore delimiter maps to nested fields."""
        monkeypatch.setenv("ATTOSPAN_LOGGING__FORMAT", "json")
        monkeypatch.setenv("ATTOSPAN_LOGGING__BACKUP_COUNT", "7")
        s = Settings(_env_file=None)  # type: ignore[call-arg]
        assert s.logging.format == "json"
        assert s.logging.backup_count == 7


class TestSettingsDotenv:
    """Settings read from a .env file.

    Technique: Dotenv Loading in an isolated temporary directory.
    """

    def test_values_loaded_from_env_file(self, tmp_path: Path) -> None:
        """An explicit env file supplies prefixed values."""
        env_file = tmp_path / "custom.env"
        env_file.write_text("ATTOSPAN_OUTPUT=json\nATTOSPAN_LOGGING__LEVEL=ERROR\n")
        s = Settings(_env_file=env_file)  # type: ignore[call-arg]
        assert s.output == "json"
        assert s.logging.level == "ERROR"

    def test_environment_wins_over_env_file(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Process environment takes precedence over the .env file."""
        env_file = tmp_path / "custom.env"
        env_file.write_text("ATTOSPAN_OUTPUT=json\n")
        monkeypatch.setenv("ATTOSPAN_OUTPUT", "text")
        s = Settings(_env_file=env_file)  # type: ignore[call-arg]
        assert s.output == "text"

    def test_missing_env_file_is_ignored(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """The default .env is optional."""
        monkeypatch.chdir(tmp_path)
        s = Settings()
        assert s.output == "text"
