# Fumagen
# Copyright (c) 2026 The Fumagen Authors
# Licensed under the MIT License. See LICENSE in the project root.

"""
errors.py - Fumagen exceptions

Loaders and the fetcher raise these; the CLI prints them and exits 1.
The factory functions below cover the failures users hit most often and
carry a concrete fix in their suggestion.
"""
from pathlib import Path
from typing import Optional, Dict, Any


RULE = "=" * 70


class FumagenError(Exception):
    """
    Base exception for Fumagen.

    ``str(error)`` is the boxed report printed by the CLI; ``message``
    holds the one-line summary for log records.
    """

    def __init__(
        self,
        message: str,
        suggestion: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
    ):
        self.message = message
        self.suggestion = suggestion
        self.context = context or {}
        self.cause = cause
        super().__init__(self.format_message())

    def format_message(self) -> str:
        sections = [[f"❌ {type(self).__name__}", RULE, "", self.message]]

        if self.context:
            sections.append(["Context:", *(f"  {k}: {v}" for k, v in self.context.items())])
        if self.suggestion:
            sections.append(["💡 Suggestion:", f"  {self.suggestion}"])
        if self.cause:
            sections.append([f"Caused by: {type(self.cause).__name__}: {self.cause}"])

        body = "\n\n".join("\n".join(section) for section in sections)
        return f"\n{RULE}\n{body}\n\n{RULE}\n"


class ConfigurationError(FumagenError):
    """Configuration is missing or invalid"""
    pass


class DataLoadError(FumagenError):
    """A plan, manifest or lookup file could not be parsed"""
    pass


class MissingDirectoryError(FumagenError):
    """A required input directory does not exist"""
    pass


class FetchError(FumagenError):
    """Error communicating with the GitHub API"""
    pass


class FormatError(FumagenError):
    """The Markdown toolchain is unusable"""
    pass


# Specific error factory functions

def missing_directory_error(path: Path) -> MissingDirectoryError:
    """Create error for a missing input directory"""
    return MissingDirectoryError(
        message=f"Missing required directory: {path}",
        suggestion=(
            "Point Fumagen at the training plan data:\n"
            "  export FUMAGEN_DATA_DIR=/path/to/hoa-majors/data\n\n"
            "Or set it in fumagen.yaml:\n"
            "  data_dir: hoa-majors/data"
        ),
        context={"expected_path": str(path)}
    )


def invalid_plan_error(plan_file: Path, cause: Optional[Exception] = None) -> DataLoadError:
    """Create error for a training plan that fails to parse"""
    return DataLoadError(
        message=f"Invalid training plan in {plan_file.name}",
        suggestion=(
            "Check the TOML syntax and required tables:\n"
            "  [info]\n"
            '  year = "2024"\n'
            '  major_code = "080601"\n'
            '  major_name = "..."\n'
            '  plan_ID = "..."\n\n'
            "  [[courses]]\n"
            '  course_code = "..."\n'
            '  course_name = "..."'
        ),
        context={"file": str(plan_file)},
        cause=cause
    )


def invalid_manifest_error(manifest_file: Path, cause: Optional[Exception] = None) -> DataLoadError:
    """Create error for a worktree manifest that fails to parse"""
    return DataLoadError(
        message=f"Invalid worktree manifest in {manifest_file.name}",
        suggestion=(
            "The manifest must be a JSON object keyed by file path:\n"
            '  {"slides/week1.pdf": {"size": 1024, "time": 1700000000}}\n\n'
            "Delete the file and run: fumagen fetch"
        ),
        context={"file": str(manifest_file)},
        cause=cause
    )


def missing_token_error() -> ConfigurationError:
    """Create error for missing GitHub credentials"""
    return ConfigurationError(
        message="GitHub token not found",
        suggestion=(
            "Set one of these environment variables:\n"
            "  export PERSONAL_ACCESS_TOKEN=ghp_...\n"
            "  export GITHUB_TOKEN=ghp_...\n\n"
            "Or log in with the GitHub CLI:\n"
            "  gh auth login"
        ),
        context={
            "checked_locations": [
                "PERSONAL_ACCESS_TOKEN environment variable",
                "GITHUB_TOKEN environment variable",
                "gh auth token",
            ]
        }
    )


def fetch_failed_error(url: str, status: int) -> FetchError:
    """Create error when the contents API answers with a non-2xx status"""
    return FetchError(
        message=f"GitHub API returned status: {status}",
        suggestion=(
            "Possible causes:\n"
            "  - Repository or file does not exist\n"
            "  - Token lacks access to the organization\n"
            "  - API rate limit exceeded"
        ),
        context={"url": url, "status": status}
    )


def missing_markdown_extension_error(name: str, cause: Optional[Exception] = None) -> FormatError:
    """Create error when an mdformat parser extension is not installed"""
    return FormatError(
        message=f"mdformat extension '{name}' is not installed",
        suggestion=(
            "Install the Markdown plugins:\n"
            "  pip install mdformat-gfm mdformat-footnote"
        ),
        context={"extension": name},
        cause=cause
    )
