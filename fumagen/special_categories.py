"""
special_categories.py - Course groups outside the training plans

Cross-specialty electives and general-knowledge/MOOC courses are not tied
to a year or major, so they get their own top-level sections:

    docs/cross-specialty/...
    docs/general-knowledge/...

Grades for these repos come from an optional ``<repo>.grades.json`` next
to the README: a list of ``[name, percent]`` pairs.
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Set, Tuple

from fumagen.config_utils import FumagenConfig
from fumagen.generator import (
    GenerationStats,
    build_course_body,
    build_frontmatter,
    cards_page,
    render_download_section,
    render_page,
    strip_leading_lines,
    write_meta,
    write_text,
)
from fumagen.models import Course, GradeDetail


logger = logging.getLogger(__name__)

UNTITLED = "Untitled"


@dataclass(frozen=True)
class SpecialCategory:
    id: str
    title: str
    repos: Tuple[str, ...]


SPECIAL_CATEGORIES = (
    SpecialCategory(
        id="cross-specialty",
        title="跨专业选修",
        repos=(
            "CrossSpecialty",   # overview
            "CHEM1012",         # 大学化学 III
            "COMP3043",         # 深度学习体系结构
            "ECON2005F",        # 经济学原理
            "SPST1004",         # 普通天文学
        ),
    ),
    SpecialCategory(
        id="general-knowledge",
        title="文理通识与 MOOC",
        repos=(
            "GeneralKnowledge", # overview
            "MOOC",
            "SEIN1040",         # 中国科技史话
            "WOCD1008",         # 日语 I
            "WRIT0001",         # 写作与沟通
        ),
    ),
)


def extract_title_from_mdx(content: str) -> str:
    """Title from the first ``# `` heading, else "Untitled"."""
    for line in content.splitlines():
        if line.startswith("# "):
            return line[2:].strip()
    return UNTITLED


def load_repo_grades(repos_dir: Path, repo_id: str) -> Optional[List[GradeDetail]]:
    """Read <repo>.grades.json; None if missing or unreadable."""
    path = repos_dir / f"{repo_id}.grades.json"
    if not path.exists():
        return None

    try:
        pairs = json.loads(path.read_text(encoding="utf-8"))
        return [GradeDetail(name=str(name), percent=str(percent)) for name, percent in pairs]
    except (OSError, ValueError, TypeError) as e:
        logger.warning("Could not read %s: %s", path, e)
        return None


def generate_special_category_pages(
    repos_dir: Path,
    docs_dir: Path,
    repos_set: Set[str],
    settings: Optional[FumagenConfig] = None,
    categories=SPECIAL_CATEGORIES,
) -> GenerationStats:
    """Write pages, index and meta.json for each special category."""
    settings = settings or FumagenConfig()
    repos_dir = Path(repos_dir)
    docs_dir = Path(docs_dir)
    stats = GenerationStats()

    for category in categories:
        category_dir = docs_dir / category.id
        category_dir.mkdir(parents=True, exist_ok=True)
        pages: List[Tuple[str, str]] = []

        for repo_id in category.repos:
            if repos_set and repo_id not in repos_set:
                continue

            readme_path = repos_dir / f"{repo_id}.mdx"
            if not readme_path.exists():
                logger.warning("MDX file not found for %s: %s", repo_id, readme_path)
                stats.skipped_courses += 1
                continue

            readme = readme_path.read_text(encoding="utf-8")
            title = extract_title_from_mdx(readme)
            course = Course(
                repo_id=repo_id,
                name=title,
                grade_details=load_repo_grades(repos_dir, repo_id),
            )
            body = build_course_body(
                strip_leading_lines(readme, 1),
                render_download_section(repo_id, repos_dir, settings),
            )
            write_text(category_dir / f"{repo_id}.mdx", render_page(build_frontmatter(title, course), body))
            stats.course_pages += 1
            pages.append((repo_id, title))

        write_meta(category_dir / "meta.json", {
            "title": category.title,
            "root": True,
            "defaultOpen": True,
            "pages": ["...", *(slug for slug, _ in pages)],
        })
        stats.meta_files += 1

        cards = [(title, f"/docs/{category.id}/{slug}") for slug, title in pages]
        write_text(category_dir / "index.mdx", cards_page(category.title, cards))
        stats.index_pages += 1

        logger.info("Generated %d pages for category '%s'", len(pages), category.id)

    return stats
