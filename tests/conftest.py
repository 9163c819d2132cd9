# tests/conftest.py
"""
Pytest configuration and shared fixtures for Fumagen tests
"""
import json
from pathlib import Path

import pytest


PLAN_TOML = """
[info]
year = "2024"
major_code = "080601"
major_name = "自动化"
plan_ID = "PLAN_2024_AUTO"

[[courses]]
course_code = "AUTO1001"
course_name = "自动控制原理"
credit = 3.0
assessment_method = "考试"
course_nature = "必修"
recommended_year_semester = "第二学年秋季"

[courses.hours]
theory = 48
lab = 8

[[courses.grade_details]]
name = "期末考试"
percent = "70%"

[[courses.grade_details]]
name = "平时成绩"
percent = "30%"

[[courses]]
course_code = "MATH1001"
course_name = "高等数学"
credit = 5.5
recommended_year_semester = "第一学年秋季，第一学年春季"

[[courses]]
course_code = "NOREADME"
course_name = "无资料课程"
recommended_year_semester = "第一学年秋季"
"""

README_AUTO = """# AUTO1001 - 自动控制原理

<!-- maintained by students -->
[![stars](https://img.shields.io/github/stars/x/y)](https://github.com/x/y)

课程介绍<br>

$x^{2}$
"""

README_MATH = """# MATH1001 - 高等数学

讲义与习题。
"""

WORKTREE_AUTO = {
    "slides/第一章.pdf": {"size": 2048, "time": 1640000000},
    "exam.pdf": {"size": 1024, "time": 1700000000},
    "README.md": {"size": 10, "time": 1700000000},
    ".github/workflows/ci.yml": {"size": 5, "time": 1700000000},
}


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    """Data directory with one training plan and the optional lookup files"""
    data = tmp_path / "data"
    (data / "plans" / "2024").mkdir(parents=True)
    (data / "plans" / "2024" / "080601.toml").write_text(PLAN_TOML, encoding="utf-8")

    (data / "grades_summary.json").write_text(json.dumps({
        "MATH1001": {
            "2024_080601": [{"name": "期末", "percent": "60%"}],
            "default": [{"name": "期末", "percent": "100%"}],
        },
        "SHARED01": {
            "default": [{"name": "论文", "percent": "100%"}],
        },
    }, ensure_ascii=False), encoding="utf-8")

    (data / "lookup_table.toml").write_text(
        '[MATH1001]\nPLAN_2024_AUTO = "MATH1001A"\nDEFAULT = "MATH1001"\n',
        encoding="utf-8",
    )
    return data


@pytest.fixture
def repos_dir(tmp_path: Path) -> Path:
    """Downloaded repository data: READMEs and one worktree manifest"""
    repos = tmp_path / "repos"
    repos.mkdir()
    (repos / "AUTO1001.mdx").write_text(README_AUTO, encoding="utf-8")
    (repos / "AUTO1001.json").write_text(json.dumps(WORKTREE_AUTO, ensure_ascii=False), encoding="utf-8")
    (repos / "MATH1001A.mdx").write_text(README_MATH, encoding="utf-8")
    return repos


@pytest.fixture
def docs_dir(tmp_path: Path) -> Path:
    return tmp_path / "content" / "docs"


@pytest.fixture
def project_dir(tmp_path: Path, data_dir: Path, repos_dir: Path) -> Path:
    """Complete project root as the CLI expects it"""
    (tmp_path / "repos_list.txt").write_text("AUTO1001\nMATH1001A\n", encoding="utf-8")
    return tmp_path


@pytest.fixture(autouse=True)
def isolate_environment(monkeypatch, tmp_path_factory):
    """Keep user config and tokens out of the tests"""
    home = tmp_path_factory.mktemp("home")
    monkeypatch.setenv("HOME", str(home))
    for var in (
        "PERSONAL_ACCESS_TOKEN", "GITHUB_TOKEN",
        "FUMAGEN_DATA_DIR", "FUMAGEN_REPOS_DIR", "FUMAGEN_DOCS_DIR",
        "FUMAGEN_ORG", "FUMAGEN_MIRROR_HOST", "FUMAGEN_FILES_BASE_URL",
        "FUMAGEN_CONCURRENCY",
    ):
        monkeypatch.delenv(var, raising=False)
