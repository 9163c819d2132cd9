"""
constants.py - Fixed tables used while laying out the docs tree.
"""

from typing import List, Optional, Tuple


# Chinese semester name -> (folder slug, display title)
SEMESTER_MAPPING: Tuple[Tuple[str, str, str], ...] = (
    ("第一学年秋季", "fresh-autumn", "大一·秋"),
    ("第一学年春季", "fresh-spring", "大一·春"),
    ("第一学年夏季", "fresh-summer", "大一·夏"),
    ("第二学年秋季", "sophomore-autumn", "大二·秋"),
    ("第二学年春季", "sophomore-spring", "大二·春"),
    ("第二学年夏季", "sophomore-summer", "大二·夏"),
    ("第三学年秋季", "junior-autumn", "大三·秋"),
    ("第三学年春季", "junior-spring", "大三·春"),
    ("第三学年夏季", "junior-summer", "大三·夏"),
    ("第四学年秋季", "senior-autumn", "大四·秋"),
    ("第四学年春季", "senior-spring", "大四·春"),
    ("第四学年夏季", "senior-summer", "大四·夏"),
    ("第五学年秋季", "fifth-autumn", "大五·秋"),
    ("第五学年春季", "fifth-spring", "大五·春"),
    ("第五学年夏季", "fifth-summer", "大五·夏"),
)

SEMESTER_SEPARATORS = (",", "，", "、")

# Page-level strings
DOWNLOAD_SECTION_HEADING = "## 资源下载"
INDEX_PAGE_TITLE = "目录"


def get_semester_folder(recommended: str) -> Optional[Tuple[str, str]]:
    """Return (folder, title) for a Chinese semester name, or None."""
    for key, folder, title in SEMESTER_MAPPING:
        if key == recommended:
            return folder, title
    return None


def get_semester_title_by_folder(folder: str) -> Optional[str]:
    for _, slug, title in SEMESTER_MAPPING:
        if slug == folder:
            return title
    return None


def parse_semester_folders(recommended: str) -> List[Tuple[str, str]]:
    """
    Parse a semester field that may hold several semesters.

    Examples:
        "第三学年秋季"
        "第三学年秋季,第四学年秋季"
        "第三学年秋季，第四学年秋季"

    Unknown names are ignored and duplicates collapse to their first
    occurrence.
    """
    normalized = recommended
    for sep in SEMESTER_SEPARATORS[1:]:
        normalized = normalized.replace(sep, SEMESTER_SEPARATORS[0])

    folders: List[Tuple[str, str]] = []
    seen = set()
    for token in normalized.split(SEMESTER_SEPARATORS[0]):
        semester = token.strip()
        if not semester:
            continue
        found = get_semester_folder(semester)
        if found and found[0] not in seen:
            seen.add(found[0])
            folders.append(found)
    return folders
