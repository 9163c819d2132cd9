# tests/test_errors.py
"""
Tests for errors.py - exception formatting and factories
"""
from pathlib import Path

from fumagen.errors import (
    DataLoadError,
    FumagenError,
    MissingDirectoryError,
    invalid_plan_error,
    missing_directory_error,
    missing_token_error,
)


class TestFumagenError:
    """Tests for the boxed report"""

    def test_sections(self):
        error = FumagenError(
            "Something broke",
            suggestion="Try again",
            context={"file": "a.toml"},
            cause=ValueError("bad value"),
        )
        text = str(error)

        assert "❌ FumagenError" in text
        assert "Something broke" in text
        assert "  file: a.toml" in text
        assert "💡 Suggestion:\n  Try again" in text
        assert "Caused by: ValueError: bad value" in text
        assert error.message == "Something broke"

    def test_minimal(self):
        text = str(FumagenError("Only a message"))
        assert "Context:" not in text
        assert "Suggestion" not in text


class TestFactories:
    """Tests for the error factory helpers"""

    def test_missing_directory(self):
        error = missing_directory_error(Path("/data/plans"))
        assert isinstance(error, MissingDirectoryError)
        assert error.context["expected_path"] == "/data/plans"

    def test_invalid_plan_keeps_cause(self):
        cause = KeyError("info")
        error = invalid_plan_error(Path("plans/2024/080601.toml"), cause)
        assert isinstance(error, DataLoadError)
        assert error.cause is cause
        assert "080601.toml" in error.message

    def test_missing_token_mentions_gh(self):
        assert "gh auth login" in str(missing_token_error())
