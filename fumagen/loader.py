# Fumagen
# Copyright (c) 2026 The Fumagen Authors
# Licensed under the MIT License. See LICENSE in the project root.

"""
loader.py - Load training plans and course metadata

Reads the hoa-majors data directory:

    data/
    ├── plans/**/*.toml          # one training plan per file
    ├── grades_summary.json      # course_code -> plan key -> grade details
    ├── lookup_table.toml        # course_code -> plan_ID / DEFAULT -> repo ID
    └── shared_categories.toml   # categories shared across majors

Everything is loaded once up front; the generator never goes back to disk
for plan data.
"""

import json
import logging
import tomllib
from pathlib import Path
from typing import Dict, List, Optional, Set

from fumagen.errors import (
    invalid_manifest_error,
    invalid_plan_error,
    missing_directory_error,
)
from fumagen.models import (
    Course,
    FileEntry,
    GradeDetail,
    GradesSummary,
    HourDistribution,
    LookupTable,
    Manifest,
    Plan,
    SharedCategoriesConfig,
    SharedCategory,
)


logger = logging.getLogger(__name__)

GRADES_SUMMARY_FILE = "grades_summary.json"
LOOKUP_TABLE_FILE = "lookup_table.toml"
SHARED_CATEGORIES_FILE = "shared_categories.toml"
REPOS_LIST_FILE = "repos_list.txt"
PLANS_DIR = "plans"

DEFAULT_KEYS = ("DEFAULT", "default")


# =============================================================================
# Optional lookup files
# =============================================================================

def load_grades_summary(data_dir: Path) -> GradesSummary:
    """Load grades_summary.json; {} if missing or unreadable."""
    path = Path(data_dir) / GRADES_SUMMARY_FILE
    if not path.is_file():
        return {}

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.warning("Could not read %s: %s", path, e)
        return {}

    summary: GradesSummary = {}
    for course_code, variants in raw.items():
        if not isinstance(variants, dict):
            continue
        summary[course_code] = {
            key: [GradeDetail.from_dict(item) for item in details if isinstance(item, dict)]
            for key, details in variants.items()
            if isinstance(details, list)
        }
    return summary


def load_lookup_table(data_dir: Path) -> LookupTable:
    """Load lookup_table.toml; {} if missing or unreadable."""
    path = Path(data_dir) / LOOKUP_TABLE_FILE
    if not path.is_file():
        return {}

    try:
        with open(path, "rb") as f:
            raw = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning("Could not read %s: %s", path, e)
        return {}

    return {
        course_code: {key: str(value) for key, value in mapping.items()}
        for course_code, mapping in raw.items()
        if isinstance(mapping, dict)
    }


def resolve_repo_id(lookup_table: LookupTable, course_code: str, plan_id: str) -> str:
    """
    Map a course code to its repository ID.

    Priority: the plan's own entry, then DEFAULT/default, then the course
    code itself. Blank entries count as missing.
    """
    mapping = lookup_table.get(course_code)
    if mapping:
        for key in (plan_id, *DEFAULT_KEYS):
            if key in mapping:
                repo_id = mapping[key].strip()
                if repo_id:
                    return repo_id
                break
    return course_code


def select_grade_details(
    grades_summary: GradesSummary,
    course_code: str,
    year: str,
    major_code: str,
    major_name: str,
) -> Optional[List[GradeDetail]]:
    """
    Pick grade details for a course in one plan.

    Keys tried in order: {year}_{major_code}, {year}_{major_name},
    {year}_default, default. Empty lists are skipped.
    """
    entry = grades_summary.get(course_code)
    if not entry:
        return None

    for key in (f"{year}_{major_code}", f"{year}_{major_name}", f"{year}_default", "default"):
        details = entry.get(key)
        if details:
            return list(details)
    return None


# =============================================================================
# Training plans
# =============================================================================

def _parse_course(
    raw: dict,
    info: dict,
    grades_summary: GradesSummary,
    lookup_table: LookupTable,
) -> Course:
    course_code = raw["course_code"]

    grade_details = None
    if raw.get("grade_details") is not None:
        grade_details = [GradeDetail.from_dict(item) for item in raw["grade_details"]]
    if grade_details is None:
        grade_details = select_grade_details(
            grades_summary,
            course_code,
            info["year"],
            info["major_code"],
            info["major_name"],
        )

    hours = raw.get("hours")
    credit = raw.get("credit")

    return Course(
        repo_id=resolve_repo_id(lookup_table, course_code, info.get("plan_ID", "")),
        name=raw["course_name"],
        credit=float(credit) if credit is not None else None,
        assessment_method=raw.get("assessment_method"),
        course_nature=raw.get("course_nature"),
        recommended_semester=raw.get("recommended_year_semester"),
        hours=HourDistribution.from_dict(hours) if isinstance(hours, dict) else None,
        grade_details=grade_details,
    )


def load_plan(
    plan_file: Path,
    grades_summary: GradesSummary,
    lookup_table: LookupTable,
) -> Plan:
    """
    Load one plan TOML file.

    Raises:
        DataLoadError: If the file is not valid TOML or lacks required keys
    """
    try:
        with open(plan_file, "rb") as f:
            raw = tomllib.load(f)
        info = raw["info"]
        courses = [
            _parse_course(course, info, grades_summary, lookup_table)
            for course in raw.get("courses", [])
        ]
        return Plan(
            year=str(info["year"]),
            major_code=str(info["major_code"]),
            major_name=str(info["major_name"]),
            plan_id=str(info.get("plan_ID", "")),
            courses=courses,
        )
    except (tomllib.TOMLDecodeError, KeyError, TypeError, ValueError) as e:
        raise invalid_plan_error(plan_file, e) from e


def load_all_plans(data_dir: Path) -> List[Plan]:
    """
    Load every training plan under data_dir/plans, sorted by year then
    major code.

    Grade details written in a plan file win over grades_summary.json.

    Raises:
        MissingDirectoryError: If the plans directory does not exist
        DataLoadError: If any plan file is malformed
    """
    data_dir = Path(data_dir)
    plans_dir = data_dir / PLANS_DIR
    if not plans_dir.is_dir():
        raise missing_directory_error(plans_dir)

    grades_summary = load_grades_summary(data_dir)
    lookup_table = load_lookup_table(data_dir)

    plans = [
        load_plan(plan_file, grades_summary, lookup_table)
        for plan_file in sorted(plans_dir.rglob("*.toml"))
    ]
    plans.sort(key=lambda p: (p.year, p.major_code))

    logger.info("Loaded %d training plans from %s", len(plans), plans_dir)
    return plans


# =============================================================================
# Shared categories and repo list
# =============================================================================

def load_shared_categories(data_dir: Path) -> SharedCategoriesConfig:
    """Load shared_categories.toml; an empty config if missing or unreadable."""
    path = Path(data_dir) / SHARED_CATEGORIES_FILE
    if not path.is_file():
        return SharedCategoriesConfig()

    try:
        with open(path, "rb") as f:
            raw = tomllib.load(f)
        categories = [
            SharedCategory(
                id=item["id"],
                title=item["title"],
                repo_ids=list(item.get("repo_ids", [])),
            )
            for item in raw.get("categories", [])
        ]
    except (OSError, tomllib.TOMLDecodeError, KeyError, TypeError) as e:
        logger.warning("Could not read %s: %s", path, e)
        return SharedCategoriesConfig()

    return SharedCategoriesConfig(
        categories=categories,
        no_course_info_repo_ids=set(raw.get("no_course_info_repo_ids", [])),
    )


def load_repos_list(repo_root: Path) -> Set[str]:
    """
    Load repos_list.txt (one repository per line).

    An empty set means "no filter": every course with a README is generated.
    """
    path = Path(repo_root) / REPOS_LIST_FILE
    if not path.is_file():
        logger.warning("%s not found, will process all available courses", REPOS_LIST_FILE)
        return set()

    return {
        line.strip()
        for line in path.read_text(encoding="utf-8").splitlines()
        if line.strip()
    }


# =============================================================================
# Worktree manifests
# =============================================================================

def _coerce_int(value) -> Optional[int]:
    if value is None:
        return None
    return int(value)


def load_worktree(path: Path) -> Manifest:
    """
    Load a <repo>.json worktree manifest.

    Raises:
        DataLoadError: If the file is not a JSON object of file entries
    """
    path = Path(path)
    try:
        raw: Dict[str, dict] = json.loads(path.read_text(encoding="utf-8"))
        return {
            file_path: FileEntry(
                size=_coerce_int(meta.get("size")),
                time=_coerce_int(meta.get("time")),
            )
            for file_path, meta in raw.items()
        }
    except (ValueError, AttributeError, TypeError) as e:
        raise invalid_manifest_error(path, e) from e
