"""Tests for marksite._errors."""

from pathlib import Path

from marksite._errors import (
    BuildError,
    ConfigError,
    CopyFailure,
    MarksiteError,
    MigrationError,
    PortInUseError,
    ScaffoldError,
    ServerError,
)


class TestErrorHierarchy:
    """All marksite errors inherit from MarksiteError."""

    def test_marksite_error_is_exception(self) -> None:
        assert issubclass(MarksiteError, Exception)

    def test_specific_errors_inherit(self) -> None:
        for error_cls in (ConfigError, MigrationError, BuildError, ServerError, ScaffoldError):
            assert issubclass(error_cls, MarksiteError)

    def test_copy_failure_is_migration_error(self) -> None:
        assert issubclass(CopyFailure, MigrationError)

    def test_port_in_use_is_server_error(self) -> None:
        assert issubclass(PortInUseError, ServerError)


class TestPortInUseError:
    def test_carries_port(self) -> None:
        err = PortInUseError(4000)
        assert err.port == 4000

    def test_message_is_actionable(self) -> None:
        message = str(PortInUseError(4000))
        assert "4000" in message
        assert "--port" in message


class TestCopyFailure:
    def test_preserves_original_message(self) -> None:
        cause = PermissionError(13, "Permission denied")
        err = CopyFailure(Path("/project/content"), cause)
        assert err.source == Path("/project/content")
        assert err.cause is cause
        assert "Permission denied" in str(err)
        assert "/project/content" in str(err)
