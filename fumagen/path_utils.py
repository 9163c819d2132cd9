#!/usr/bin/env python3

"""
path_utils.py - Manifest path rules for Fumagen

Decides which tracked repository files show up in the generated download
tree. Housekeeping files, project config and CI folders are hidden.
"""

# Files to exclude from the file tree (exact final segment)
EXCLUDED_PATTERNS = (".gitkeep", "README.md", "LICENSE", "tag.txt")

# File extensions to exclude
EXCLUDED_EXTENSIONS = (".toml",)

# Directory prefixes to exclude (matched against the full path)
EXCLUDED_PREFIXES = (".github/",)


def final_segment(path: str) -> str:
    """
    Get the file name part of a manifest path.

    Returns:
        Everything after the last "/", or the path itself
    """
    return path.rsplit("/", 1)[-1]


def should_include_file(path: str) -> bool:
    """
    Check if a manifest path belongs in the download tree.

    Args:
        path: Repository-relative path using "/" separators

    Returns:
        False when the file name, its extension or its directory prefix
        is excluded, True otherwise (including for "")
    """
    filename = final_segment(path)

    if filename in EXCLUDED_PATTERNS:
        return False

    if any(filename.endswith(ext) for ext in EXCLUDED_EXTENSIONS):
        return False

    if any(path.startswith(prefix) for prefix in EXCLUDED_PREFIXES):
        return False

    return True
