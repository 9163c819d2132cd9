# Fumagen
# Copyright (c) 2026 The Fumagen Authors
# Licensed under the MIT License. See LICENSE in the project root.

"""
generator.py - Write the Fumadocs content tree

Layout produced under docs_dir:

    <year>/
    ├── meta.json                     # {"title": "<year>"}
    ├── index.mdx                     # cards: one per major
    └── <major_code>/
        ├── meta.json                 # root section: "...", semesters, categories
        ├── index.mdx                 # cards: semesters then shared categories
        ├── <semester>/
        │   ├── index.mdx             # cards: courses of that semester
        │   └── <repo>.mdx            # course page
        └── <category>/
            ├── index.mdx
            └── <repo>.mdx

Course pages are frontmatter + <CourseInfo /> + the repository README
(minus its title lines) + an optional "资源下载" section holding the
repository's file tree.
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Set, Tuple

import frontmatter

from fumagen.config_utils import FumagenConfig
from fumagen.constants import (
    DOWNLOAD_SECTION_HEADING,
    INDEX_PAGE_TITLE,
    SEMESTER_MAPPING,
    get_semester_title_by_folder,
    parse_semester_folders,
)
from fumagen.loader import load_worktree
from fumagen.models import (
    HOUR_KEYS,
    Course,
    GradeDetail,
    GradesSummary,
    Plan,
    SharedCategory,
)
from fumagen.tree import build_file_tree, tree_to_jsx


logger = logging.getLogger(__name__)

COURSE_INFO = "<CourseInfo />"

# README lines replaced by the page title
COURSE_README_SKIP_LINES = 2


@dataclass
class GenerationStats:
    """Counts reported after a generate run"""
    course_pages: int = 0
    index_pages: int = 0
    meta_files: int = 0
    skipped_courses: int = 0

    def merge(self, other: "GenerationStats") -> "GenerationStats":
        self.course_pages += other.course_pages
        self.index_pages += other.index_pages
        self.meta_files += other.meta_files
        self.skipped_courses += other.skipped_courses
        return self


# =============================================================================
# Frontmatter
# =============================================================================

def _as_number(value: float):
    """Keep whole numbers as ints so YAML shows 3, not 3.0."""
    return int(value) if float(value).is_integer() else value


def parse_percent(percent: Optional[str]):
    """'60%' -> 60; anything unparseable -> 0."""
    if percent is None:
        return 0
    try:
        return _as_number(float(str(percent).strip().rstrip("%")))
    except ValueError:
        return 0


def build_grading_scheme(details: Optional[List[GradeDetail]]) -> List[dict]:
    scheme = []
    for detail in details or []:
        percent = parse_percent(detail.percent)
        if percent > 0:
            scheme.append({"name": detail.name, "percent": percent})
    return scheme


def build_frontmatter(title: str, course: Course) -> dict:
    """
    Frontmatter consumed by the <CourseInfo /> component.

    Missing values become 0 / "" so every page has the same shape.
    """
    hours = course.hours
    hour_distribution = {
        key: (getattr(hours, key) or 0) if hours else 0
        for key in HOUR_KEYS
    }

    return {
        "title": title,
        "description": "",
        "course": {
            "credit": _as_number(course.credit) if course.credit is not None else 0,
            "assessmentMethod": course.assessment_method or "",
            "courseNature": course.course_nature or "",
            "hourDistribution": hour_distribution,
            "gradingScheme": build_grading_scheme(course.grade_details),
        },
    }


def render_page(metadata: dict, body: str) -> str:
    """Render a page as YAML frontmatter followed by the body."""
    return frontmatter.dumps(frontmatter.Post(body, **metadata), sort_keys=False) + "\n"


# =============================================================================
# README helpers
# =============================================================================

def strip_leading_lines(text: str, count: int) -> str:
    """Drop the first ``count`` lines of text."""
    return "\n".join(text.splitlines()[count:])


def title_from_mdx(content: str, fallback: str) -> str:
    """
    Guess a page title from the first lines of a README.

    Looks at the first 5 lines, skipping blanks and "---". Handles
    ``title: "X"`` and ``# X`` forms, and "CODE - Name" headings keep
    only the name.
    """
    for line in content.splitlines()[:5]:
        stripped = line.strip()
        if not stripped or stripped == "---":
            continue

        raw = stripped
        if raw.startswith("title:"):
            raw = raw[len("title:"):].strip().strip('"').strip("'")
        while raw.startswith("# "):
            raw = raw[2:]
        raw = raw.strip()

        if " - " in raw:
            return raw.split(" - ", 1)[1].strip()
        return raw

    return fallback


# =============================================================================
# Page pieces
# =============================================================================

def render_download_section(repo_id: str, repos_dir: Path, settings: FumagenConfig) -> str:
    """
    The "资源下载" section for a repo, or "" when it has no manifest.

    Raises:
        DataLoadError: If <repo>.json exists but is malformed
    """
    manifest_path = repos_dir / f"{repo_id}.json"
    if not manifest_path.exists():
        return ""

    manifest = load_worktree(manifest_path)
    tree = build_file_tree(manifest, repo_id, settings.mirror_host, settings.org)
    jsx = tree_to_jsx(tree, 1)
    files_url = f"{settings.files_base_url.rstrip('/')}/{repo_id}"

    return f'\n\n{DOWNLOAD_SECTION_HEADING}\n\n<Files url="{files_url}">\n{jsx}\n</Files>'


def build_course_body(content: str, download_section: str, course_info: bool = True) -> str:
    if course_info:
        return f"{COURSE_INFO}\n\n{content}{download_section}"
    return f"{content}{download_section}"


def cards_page(title: str, cards: Iterable[Tuple[str, str]]) -> str:
    """Index page listing (title, href) pairs as Fumadocs cards."""
    lines = ["<Cards>"]
    for card_title, href in cards:
        lines.append(f'  <Card title="{card_title}" href="{href}" />')
    lines.append("</Cards>")
    return render_page({"title": title}, "\n".join(lines))


def write_text(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def write_meta(path: Path, data: dict) -> None:
    write_text(path, json.dumps(data, indent=2, ensure_ascii=False) + "\n")


def _is_listed(repo_id: str, repos_set: Set[str]) -> bool:
    # An empty repos_set means no repos_list.txt: everything is listed
    return not repos_set or repo_id in repos_set


# =============================================================================
# Per-major generation
# =============================================================================

def _generate_plan_courses(
    plan: Plan,
    major_dir: Path,
    repos_dir: Path,
    repos_set: Set[str],
    settings: FumagenConfig,
    stats: GenerationStats,
) -> Dict[str, List[Tuple[str, str]]]:
    """Write course pages for one plan; returns semester folder -> [(repo, name)]."""
    courses_by_semester: Dict[str, List[Tuple[str, str]]] = {}

    for course in plan.courses:
        if not _is_listed(course.repo_id, repos_set):
            continue

        readme_path = repos_dir / f"{course.repo_id}.mdx"
        if not readme_path.exists():
            logger.debug("No README for %s, skipping", course.repo_id)
            stats.skipped_courses += 1
            continue

        readme = readme_path.read_text(encoding="utf-8")
        content = strip_leading_lines(readme, COURSE_README_SKIP_LINES)

        semester_folders = parse_semester_folders(course.recommended_semester or "")
        if semester_folders:
            target_dirs = []
            for folder, _title in semester_folders:
                courses_by_semester.setdefault(folder, []).append((course.repo_id, course.name))
                target_dirs.append(major_dir / folder)
        else:
            target_dirs = [major_dir]

        body = build_course_body(content, render_download_section(course.repo_id, repos_dir, settings))
        page = render_page(build_frontmatter(course.name, course), body)

        for target_dir in target_dirs:
            write_text(target_dir / f"{course.repo_id}.mdx", page)
            stats.course_pages += 1

    return courses_by_semester


def _generate_shared_category(
    category: SharedCategory,
    plan: Plan,
    major_dir: Path,
    repos_dir: Path,
    repos_set: Set[str],
    no_course_info_repo_ids: Set[str],
    grades_summary: GradesSummary,
    settings: FumagenConfig,
    stats: GenerationStats,
) -> bool:
    """Write one shared category under a major; False if it ended up empty."""
    category_dir = major_dir / category.id
    cards: List[Tuple[str, str]] = []

    for repo_id in category.repo_ids:
        if not _is_listed(repo_id, repos_set):
            continue

        readme_path = repos_dir / f"{repo_id}.mdx"
        if not readme_path.exists():
            stats.skipped_courses += 1
            continue

        readme = readme_path.read_text(encoding="utf-8")
        title = title_from_mdx(readme, repo_id)
        content = strip_leading_lines(readme, COURSE_README_SKIP_LINES)

        course = Course(
            repo_id=repo_id,
            name=title,
            grade_details=grades_summary.get(repo_id, {}).get("default"),
        )
        body = build_course_body(
            content,
            render_download_section(repo_id, repos_dir, settings),
            course_info=repo_id not in no_course_info_repo_ids,
        )
        write_text(category_dir / f"{repo_id}.mdx", render_page(build_frontmatter(title, course), body))
        stats.course_pages += 1

        cards.append((title, f"/docs/{plan.year}/{plan.major_code}/{category.id}/{repo_id}"))

    if not cards:
        return False

    write_text(category_dir / "index.mdx", cards_page(category.title, cards))
    stats.index_pages += 1
    return True


def generate_major(
    plan: Plan,
    shared_categories: List[SharedCategory],
    no_course_info_repo_ids: Set[str],
    grades_summary: GradesSummary,
    repos_dir: Path,
    docs_dir: Path,
    repos_set: Set[str],
    settings: FumagenConfig,
) -> GenerationStats:
    """Generate every page of one plan (year + major)."""
    stats = GenerationStats()
    major_dir = docs_dir / plan.year / plan.major_code
    major_dir.mkdir(parents=True, exist_ok=True)

    courses_by_semester = _generate_plan_courses(
        plan, major_dir, repos_dir, repos_set, settings, stats
    )

    # Semester order follows the semester table, not discovery order
    semester_folders = [
        folder for _, folder, _ in SEMESTER_MAPPING if folder in courses_by_semester
    ]

    for folder in semester_folders:
        title = get_semester_title_by_folder(folder) or folder
        cards = [
            (name, f"/docs/{plan.year}/{plan.major_code}/{folder}/{repo_id}")
            for repo_id, name in courses_by_semester[folder]
        ]
        write_text(major_dir / folder / "index.mdx", cards_page(title, cards))
        stats.index_pages += 1

    category_pages = [
        category
        for category in shared_categories
        if _generate_shared_category(
            category, plan, major_dir, repos_dir, repos_set,
            no_course_info_repo_ids, grades_summary, settings, stats,
        )
    ]

    write_meta(major_dir / "meta.json", {
        "title": plan.major_name,
        "root": True,
        "defaultOpen": True,
        "pages": ["...", *semester_folders, *(category.id for category in category_pages)],
    })
    stats.meta_files += 1

    index_cards = [
        (get_semester_title_by_folder(folder) or folder, f"/docs/{plan.year}/{plan.major_code}/{folder}")
        for folder in semester_folders
    ]
    index_cards.extend(
        (category.title, f"/docs/{plan.year}/{plan.major_code}/{category.id}")
        for category in category_pages
    )
    write_text(major_dir / "index.mdx", cards_page(INDEX_PAGE_TITLE, index_cards))
    stats.index_pages += 1

    return stats


# =============================================================================
# Public API
# =============================================================================

def generate_course_pages(
    plans: List[Plan],
    shared_categories: List[SharedCategory],
    no_course_info_repo_ids: Set[str],
    grades_summary: GradesSummary,
    repos_dir: Path,
    docs_dir: Path,
    repos_set: Set[str],
    settings: Optional[FumagenConfig] = None,
) -> GenerationStats:
    """
    Generate course pages, index pages and navigation metadata for every
    plan, plus one meta.json and index page per year.

    Args:
        plans: Loaded training plans (see loader.load_all_plans)
        shared_categories: Categories repeated under every major
        no_course_info_repo_ids: Repos whose pages omit <CourseInfo />
        grades_summary: Grade details for shared category pages
        repos_dir: Directory holding <repo>.mdx / <repo>.json
        docs_dir: Output directory
        repos_set: Repos to generate; empty means all
        settings: URL settings (defaults when omitted)

    Returns:
        GenerationStats for the whole run
    """
    settings = settings or FumagenConfig()
    repos_dir = Path(repos_dir)
    docs_dir = Path(docs_dir)
    stats = GenerationStats()

    majors_by_year: Dict[str, List[Tuple[str, str]]] = {}

    for plan in plans:
        majors_by_year.setdefault(plan.year, []).append((plan.major_code, plan.major_name))
        stats.merge(generate_major(
            plan, shared_categories, no_course_info_repo_ids, grades_summary,
            repos_dir, docs_dir, repos_set, settings,
        ))
        logger.info("Generated %s/%s (%s)", plan.year, plan.major_code, plan.major_name)

    for year in sorted(majors_by_year):
        year_dir = docs_dir / year
        write_meta(year_dir / "meta.json", {"title": year})
        stats.meta_files += 1

        cards = [(name, f"/docs/{year}/{code}") for code, name in majors_by_year[year]]
        write_text(year_dir / "index.mdx", cards_page(INDEX_PAGE_TITLE, cards))
        stats.index_pages += 1

    return stats
