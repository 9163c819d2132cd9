# tests/test_mdx_pipeline.py
"""
Tests for pipeline.py - the complete five-stage MDX formatter
"""
import logging

import pytest

from fumagen.mdx import pipeline
from fumagen.mdx.pipeline import (
    format_all_mdx_files,
    format_mdx_complete,
    format_mdx_document,
    split_frontmatter,
)


README = """# COMP1011 - 程序设计

<!-- generated -->
![build](https://img.shields.io/badge/build-passing-green)

课程简介<br>

{{% details title="考试" %}}
闭卷
{{% /details %}}

{{% details title="作业" %}}
每周一次
{{% /details %}}

公式 $x^{2} + y_{i}$



| 项目 | 占比 |
|---|---|
| 期末 | 60% |
"""


class TestFormatMdxComplete:
    """End-to-end behaviour of the five stages"""

    def test_all_stages_applied(self):
        result = format_mdx_complete(README)

        assert "<!--" not in result
        assert "shields.io" not in result
        assert "<br />" in result
        assert result.count("<Accordions>") == 1
        assert '<Accordion title="考试">' in result
        assert '<Accordion title="作业">' in result
        assert "{{%" not in result
        assert r"$x^\{2\} + y_\{i\}$" in result
        assert "\n\n\n" not in result

    def test_idempotent(self):
        once = format_mdx_complete(README)
        assert format_mdx_complete(once) == once

    def test_empty_input(self):
        assert format_mdx_complete("") == ""

    def test_serializer_failure_propagates_empty(self, monkeypatch):
        monkeypatch.setattr(pipeline, "process_with_ast", lambda content: "")
        assert format_mdx_complete("# Title\n") == ""


class TestFormatMdxDocument:
    """Frontmatter handling"""

    def test_frontmatter_preserved(self):
        text = "---\ntitle: 课程\ncourse:\n  credit: 3\n---\n\n<!-- c -->\nText<br>\n"
        result = format_mdx_document(text)

        assert result.startswith("---\ntitle: 课程\ncourse:\n  credit: 3\n---\n")
        assert "<!--" not in result
        assert "Text<br />" in result

    def test_no_frontmatter(self):
        assert format_mdx_document("Text<br>\n") == "Text<br />\n"

    def test_frontmatter_only(self):
        text = "---\ntitle: X\n---\n"
        assert format_mdx_document(text) == text

    def test_split_frontmatter(self):
        header, body = split_frontmatter("---\ntitle: X\n---\n\nBody\n")
        assert header == "---\ntitle: X\n---\n"
        assert body.strip() == "Body"

    def test_split_without_closing_fence(self):
        header, body = split_frontmatter("---\nno closing fence\n")
        assert header == ""
        assert body == "---\nno closing fence\n"

    def test_generated_page_idempotent(self):
        page = (
            "---\ntitle: 程序设计\ndescription: ''\n---\n\n<CourseInfo />\n\n"
            "课程简介<br>\n\n## 资源下载\n\n"
            '<Files url="https://open.osa.moe/openauto/COMP1011">\n'
            '  <File name="a.pdf" url="https://gh.hoa.moe/x/a.pdf" date="2024-01-01" size={10} />\n'
            "</Files>\n"
        )
        once = format_mdx_document(page)
        assert format_mdx_document(once) == once
        assert "<CourseInfo />" in once
        assert "size={10}" in once


class TestFormatAllMdxFiles:
    """Tests for in-place formatting of a docs tree"""

    def test_only_changed_files_written(self, tmp_path):
        clean = tmp_path / "clean.mdx"
        clean.write_text("# Title\n", encoding="utf-8")
        dirty = tmp_path / "sub" / "dirty.mdx"
        dirty.parent.mkdir()
        dirty.write_text("Text<br>\n", encoding="utf-8")
        other = tmp_path / "notes.md"
        other.write_text("Text<br>\n", encoding="utf-8")

        count = format_all_mdx_files(tmp_path)

        assert count == 1
        assert clean.read_text(encoding="utf-8") == "# Title\n"
        assert dirty.read_text(encoding="utf-8") == "Text<br />\n"
        assert other.read_text(encoding="utf-8") == "Text<br>\n"

    def test_empty_result_never_overwrites(self, tmp_path, monkeypatch, caplog):
        page = tmp_path / "page.mdx"
        page.write_text("Text<br>\n", encoding="utf-8")
        monkeypatch.setattr(pipeline, "format_mdx_document", lambda text: "")

        with caplog.at_level(logging.WARNING):
            count = format_all_mdx_files(tmp_path)

        assert count == 0
        assert page.read_text(encoding="utf-8") == "Text<br>\n"
        assert "keeping original" in caplog.text

    def test_empty_directory(self, tmp_path):
        assert format_all_mdx_files(tmp_path) == 0


class TestInlineHtmlAndBadges:
    """Inline HTML with styles and badge-only lines"""

    @pytest.mark.parametrize("content", [
        'Some <span style="color:red">red</span> text\n',
        'Go <a href="#top" style="font-weight: bold;">up</a> now\n',
        'See <img src="logo.png" style="width:50%"> here\n',
    ])
    def test_inline_style_idempotent(self, content):
        once = format_mdx_complete(content)
        assert "style={{" in once
        assert "\\<" not in once
        assert format_mdx_complete(once) == once

    def test_badge_line_before_text(self):
        content = (
            "# Course\n\n"
            "![a](https://img.shields.io/a) ![b](https://img.shields.io/b)\n"
            "Intro line\n"
        )
        result = format_mdx_complete(content)

        assert "&#32;" not in result
        assert result == "# Course\n\nIntro line\n"

    def test_badge_before_text_on_same_line(self):
        result = format_mdx_complete("![Badge](https://img.shields.io/badge/x-y-green) text\n")
        assert "&#32;" not in result
        assert result == "text\n"
