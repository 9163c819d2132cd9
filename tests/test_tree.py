# tests/test_tree.py
"""
Tests for tree.py - manifest to nested tree to <Folder>/<File> JSX
"""
import logging

from fumagen.models import FileEntry, FileNode, FolderNode
from fumagen.tree import (
    build_file_tree,
    format_timestamp,
    generate_download_url,
    tree_to_jsx,
)


class TestFormatTimestamp:
    def test_utc_date(self):
        assert format_timestamp(1640000000) == "2021-12-20"

    def test_epoch(self):
        assert format_timestamp(0) == "1970-01-01"


class TestGenerateDownloadUrl:
    """Tests for mirrored raw URLs"""

    def test_plain_path(self):
        assert generate_download_url("COURSE", "a/b.pdf") == (
            "https://gh.hoa.moe/github.com/HITSZ-OpenAuto/COURSE/raw/main/a/b.pdf"
        )

    def test_segments_encoded_separately(self):
        """Spaces and CJK are encoded, slashes are kept"""
        url = generate_download_url("COURSE", "作业/file name.pdf")
        assert url.endswith("/raw/main/%E4%BD%9C%E4%B8%9A/file%20name.pdf")

    def test_reserved_characters_encoded(self):
        url = generate_download_url("COURSE", "a#b?.pdf")
        assert url.endswith("/a%23b%3F.pdf")

    def test_custom_host_and_org(self):
        url = generate_download_url("R", "x.pdf", mirror_host="mirror.test", org="Org")
        assert url == "https://mirror.test/github.com/Org/R/raw/main/x.pdf"


class TestBuildFileTree:
    """Tests for flat manifest -> nested nodes"""

    def test_nesting_and_file_fields(self):
        tree = build_file_tree({"a/b.pdf": FileEntry(size=1024, time=1640000000)}, "COURSE")

        assert len(tree) == 1
        folder = tree[0]
        assert isinstance(folder, FolderNode)
        assert folder.name == "a"

        file_node = folder.children[0]
        assert isinstance(file_node, FileNode)
        assert file_node.name == "b.pdf"
        assert file_node.size == 1024
        assert file_node.date == "2021-12-20"
        assert file_node.url.endswith("/COURSE/raw/main/a/b.pdf")

    def test_folders_before_files(self):
        tree = build_file_tree({
            "zeta.pdf": FileEntry(),
            "alpha/x.pdf": FileEntry(),
        }, "R")
        assert [node.name for node in tree] == ["alpha", "zeta.pdf"]

    def test_case_insensitive_order(self):
        tree = build_file_tree({
            "b.pdf": FileEntry(),
            "A.pdf": FileEntry(),
            "c.pdf": FileEntry(),
        }, "R")
        assert [node.name for node in tree] == ["A.pdf", "b.pdf", "c.pdf"]

    def test_exact_name_breaks_case_ties(self):
        tree = build_file_tree({"a.pdf": FileEntry(), "A.pdf": FileEntry()}, "R")
        assert [node.name for node in tree] == ["A.pdf", "a.pdf"]

    def test_excluded_paths_create_nothing(self):
        """Excluded files never create their parent folders"""
        tree = build_file_tree({
            ".github/workflows/ci.yml": FileEntry(),
            "docs/README.md": FileEntry(),
            "notes.pdf": FileEntry(),
        }, "R")
        assert [node.name for node in tree] == ["notes.pdf"]

    def test_missing_metadata(self):
        tree = build_file_tree({"x.pdf": FileEntry()}, "R")
        assert tree[0].size is None
        assert tree[0].date is None

    def test_empty_manifest(self):
        assert build_file_tree({}, "R") == []

    def test_file_and_folder_conflict_keeps_folder(self, caplog):
        """A path that is both a file and a folder becomes a folder"""
        manifest = {"a": FileEntry(size=1), "a/b.pdf": FileEntry(size=2)}

        with caplog.at_level(logging.WARNING):
            tree = build_file_tree(manifest, "R")

        assert len(tree) == 1
        assert isinstance(tree[0], FolderNode)
        assert [child.name for child in tree[0].children] == ["b.pdf"]
        assert "both a file and a folder" in caplog.text

    def test_conflict_independent_of_order(self):
        first = build_file_tree({"a": FileEntry(), "a/b.pdf": FileEntry()}, "R")
        second = build_file_tree({"a/b.pdf": FileEntry(), "a": FileEntry()}, "R")
        assert first == second


class TestTreeToJsx:
    """Tests for the JSX renderer"""

    def test_empty(self):
        assert tree_to_jsx([]) == ""

    def test_folder_and_file(self):
        tree = [
            FolderNode(name="slides", children=[
                FileNode(name="w1.pdf", url="https://x/w1.pdf", size=10, date="2024-01-01"),
            ]),
        ]
        assert tree_to_jsx(tree, 1) == (
            '  <Folder name="slides">\n'
            '    <File name="w1.pdf" url="https://x/w1.pdf" date="2024-01-01" size={10} />\n'
            '  </Folder>'
        )

    def test_optional_props_omitted(self):
        jsx = tree_to_jsx([FileNode(name="a.pdf")], 0)
        assert jsx == '<File name="a.pdf" />'

    def test_zero_size_omitted(self):
        jsx = tree_to_jsx([FileNode(name="a.pdf", url="u", size=0)], 0)
        assert "size" not in jsx

    def test_round_trip_from_manifest(self):
        tree = build_file_tree({"a/b.pdf": FileEntry(size=1024, time=1640000000)}, "COURSE")
        jsx = tree_to_jsx(tree, 1)

        lines = jsx.split("\n")
        assert lines[0] == '  <Folder name="a">'
        assert lines[1].startswith('    <File name="b.pdf" url="https://gh.hoa.moe/')
        assert 'date="2021-12-20" size={1024} />' in lines[1]
        assert lines[2] == "  </Folder>"
