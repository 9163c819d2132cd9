# Fumagen
# Copyright (c) 2026 The Fumagen Authors
# Licensed under the MIT License. See LICENSE in the project root.

"""
tree.py - Build the download tree for a course repository

Turns the flat worktree manifest ({path: {size, time}}) into nested
Folder/File nodes and renders them as the JSX children of a Fumadocs
<Files> component:

    <Folder name="slides">
      <File name="week1.pdf" url="https://..." date="2021-12-20" size={1024} />
    </Folder>
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Mapping, Optional
from urllib.parse import quote

from fumagen.models import FileEntry, FileNode, FolderNode, TreeNode
from fumagen.path_utils import should_include_file


logger = logging.getLogger(__name__)

MIRROR_HOST = "gh.hoa.moe"
GITHUB_ORG = "HITSZ-OpenAuto"

INDENT = "  "


# =============================================================================
# Manifest value formatting
# =============================================================================

def format_timestamp(unix_ts: int) -> str:
    """Format a Unix timestamp (seconds) as a UTC date, YYYY-MM-DD."""
    return datetime.fromtimestamp(unix_ts, tz=timezone.utc).strftime("%Y-%m-%d")


def generate_download_url(
    repo: str,
    path: str,
    mirror_host: str = MIRROR_HOST,
    org: str = GITHUB_ORG,
) -> str:
    """
    Build the mirrored raw-download URL for a file in a course repo.

    Each path segment is percent-encoded on its own so the "/" separators
    survive:

        generate_download_url("COURSE", "作业/file name.pdf")
        -> https://gh.hoa.moe/github.com/HITSZ-OpenAuto/COURSE/raw/main/%E4%BD%9C%E4%B8%9A/file%20name.pdf
    """
    encoded_path = "/".join(quote(part, safe="") for part in path.split("/"))
    return f"https://{mirror_host}/github.com/{org}/{repo}/raw/main/{encoded_path}"


# =============================================================================
# Tree construction
# =============================================================================

@dataclass
class _TrieNode:
    children: Dict[str, "_TrieNode"] = field(default_factory=dict)
    is_file: bool = False
    url: Optional[str] = None
    size: Optional[int] = None
    date: Optional[str] = None

    def to_node(self, name: str, path: str) -> TreeNode:
        if self.children:
            if self.is_file:
                logger.warning(
                    "Manifest path '%s' is both a file and a folder; keeping the folder", path
                )
            return FolderNode(name=name, children=_sorted_nodes(self.children, path))
        if self.is_file:
            return FileNode(name=name, url=self.url, size=self.size, date=self.date)
        return FolderNode(name=name)


def _sort_key(node: TreeNode):
    return (isinstance(node, FileNode), node.name.lower(), node.name)


def _sorted_nodes(children: Dict[str, _TrieNode], parent_path: str = "") -> List[TreeNode]:
    nodes = [
        child.to_node(name, f"{parent_path}/{name}" if parent_path else name)
        for name, child in children.items()
    ]
    return sorted(nodes, key=_sort_key)


def build_file_tree(
    flat_data: Mapping[str, FileEntry],
    repo_name: str,
    mirror_host: str = MIRROR_HOST,
    org: str = GITHUB_ORG,
) -> List[TreeNode]:
    """
    Build the nested, sorted file tree for one repository.

    Excluded paths (see path_utils.should_include_file) are skipped before
    insertion, so they never create folders of their own. Every sibling
    list puts folders first, then orders names case-insensitively.

    Args:
        flat_data: Manifest mapping of relative path -> FileEntry
        repo_name: Repository name used in download URLs
        mirror_host: Host serving raw GitHub content
        org: GitHub organization owning the repository

    Returns:
        Root-level nodes
    """
    root = _TrieNode()

    for path, meta in flat_data.items():
        if not should_include_file(path):
            continue

        current = root
        for part in path.split("/"):
            current = current.children.setdefault(part, _TrieNode())

        current.is_file = True
        current.url = generate_download_url(repo_name, path, mirror_host, org)
        current.size = meta.size
        current.date = format_timestamp(meta.time) if meta.time is not None else None

    return _sorted_nodes(root.children)


# =============================================================================
# JSX rendering
# =============================================================================

def _file_props(node: FileNode) -> str:
    props = [f'name="{node.name}"']
    if node.url is not None:
        props.append(f'url="{node.url}"')
    if node.date is not None:
        props.append(f'date="{node.date}"')
    # A size of 0 renders like a missing size
    if node.size:
        props.append(f"size={{{node.size}}}")
    return " ".join(props)


def tree_to_jsx(nodes: List[TreeNode], indent_level: int = 1) -> str:
    """
    Render tree nodes as <Folder>/<File> JSX lines.

    Args:
        nodes: Sibling nodes to render
        indent_level: Two-space indentation level of these nodes

    Returns:
        Newline-joined lines; "" for an empty node list
    """
    indent = INDENT * indent_level
    lines: List[str] = []

    for node in nodes:
        if isinstance(node, FolderNode):
            lines.append(f'{indent}<Folder name="{node.name}">')
            lines.append(tree_to_jsx(node.children, indent_level + 1))
            lines.append(f"{indent}</Folder>")
        else:
            lines.append(f"{indent}<File {_file_props(node)} />")

    return "\n".join(lines)
