"""
models.py - Data types shared by the loaders, the tree compiler and the
page generator.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set, Union


# =============================================================================
# Training plans
# =============================================================================

@dataclass
class GradeDetail:
    """One grading component, e.g. ("期末考试", "60%")."""
    name: str
    percent: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "GradeDetail":
        percent = data.get("percent")
        return cls(name=str(data.get("name", "")), percent=None if percent is None else str(percent))


HOUR_KEYS = ("theory", "lab", "practice", "exercise", "computer", "tutoring")


@dataclass
class HourDistribution:
    theory: Optional[int] = None
    lab: Optional[int] = None
    practice: Optional[int] = None
    exercise: Optional[int] = None
    computer: Optional[int] = None
    tutoring: Optional[int] = None

    @classmethod
    def from_dict(cls, data: dict) -> "HourDistribution":
        return cls(**{key: data.get(key) for key in HOUR_KEYS})


@dataclass
class Course:
    repo_id: str
    name: str
    credit: Optional[float] = None
    assessment_method: Optional[str] = None
    course_nature: Optional[str] = None
    recommended_semester: Optional[str] = None
    hours: Optional[HourDistribution] = None
    grade_details: Optional[List[GradeDetail]] = None


@dataclass
class Plan:
    year: str
    major_code: str
    major_name: str
    plan_id: str = ""
    courses: List[Course] = field(default_factory=list)


@dataclass
class SharedCategory:
    id: str
    title: str
    repo_ids: List[str] = field(default_factory=list)


@dataclass
class SharedCategoriesConfig:
    """Shared categories plus the repo IDs whose pages omit <CourseInfo />."""
    categories: List[SharedCategory] = field(default_factory=list)
    no_course_info_repo_ids: Set[str] = field(default_factory=set)


# course_code -> plan key (e.g. "2024_080601") -> grade details
GradesSummary = Dict[str, Dict[str, List[GradeDetail]]]

# course_code -> plan_ID or "DEFAULT" -> repo ID
LookupTable = Dict[str, Dict[str, str]]


# =============================================================================
# Repository manifests and file trees
# =============================================================================

@dataclass(frozen=True)
class FileEntry:
    """Manifest record for one tracked file; ``time`` is a Unix timestamp."""
    size: Optional[int] = None
    time: Optional[int] = None


Manifest = Dict[str, FileEntry]


@dataclass
class FileNode:
    name: str
    url: Optional[str] = None
    size: Optional[int] = None
    date: Optional[str] = None


@dataclass
class FolderNode:
    name: str
    children: List["TreeNode"] = field(default_factory=list)


TreeNode = Union[FolderNode, FileNode]
