"""
icons.py - Icons for Fumagen CLI output

    from fumagen.icons import icons
    click.echo(f"{icons.SUCCESS} Build complete")

Emoji live here only; other modules import them.
"""

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Icons:
    """
    Icons used in CLI output and log lines.

    Status icons prefix log records by level (see log_utils); the rest
    mark the build phases.
    """

    # Status / log levels
    SUCCESS: str = "✅"
    ERROR: str = "❌"
    WARNING: str = "⚠️"
    INFO: str = "ℹ️"
    SKIP: str = "⏭️"        # step or course skipped
    DEBUG: str = "🔍"

    # Build phases
    DOWNLOAD: str = "⬇️"    # fetch
    BOOKS: str = "📚"       # training plans loaded
    PAGE: str = "📄"        # pages written
    FOLDER: str = "📁"      # meta.json / docs tree
    SWEEP: str = "🧹"       # MDX cleanup
    EDIT: str = "✏️"        # files rewritten


icons = Icons()


DOT_LINE = "." * 80


def fence(label: str) -> None:
    """Print a dotted rule and a timestamped phase label."""
    ts = datetime.now().strftime("%H:%M:%S")
    print(DOT_LINE)
    print(f"[{ts}] {label}")
    print()
