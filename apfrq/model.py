"""
Central data model definitions used across the project.

This module defines the canonical structure of the JSON indexes written by
the build step (courses.json, course-<slug>.json, questions-<slug>.json)
so that:
- the build step, the loaders and the views share the same field names
- ill-typed or missing fields are normalized in exactly one place
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, List, Optional


# ---------------------------------------------------------------------------
# File categories
# ---------------------------------------------------------------------------

FRQ = "frq"
SCORING_GUIDELINES = "scoring-guidelines"
CHIEF_READER_REPORT = "chief-reader-report"
SCORING_STATISTICS = "scoring-statistics"
SCORING_DISTRIBUTION = "scoring-distribution"
SAMPLE_RESPONSES = "sample-responses"
OTHER = "other"

FILE_CATEGORIES = (
    FRQ,
    SCORING_GUIDELINES,
    CHIEF_READER_REPORT,
    SCORING_STATISTICS,
    SCORING_DISTRIBUTION,
    SAMPLE_RESPONSES,
    OTHER,
)

# Ordered: the first rule with a matching phrase wins.
_CATEGORY_RULES: tuple[tuple[str, tuple[str, ...]], ...] = (
    (FRQ, ("free-response questions", "free response questions")),
    (SCORING_GUIDELINES, ("scoring guidelines",)),
    (CHIEF_READER_REPORT, ("chief reader report", "chief-reader report")),
    (SCORING_STATISTICS, ("scoring statistics",)),
    (SCORING_DISTRIBUTION, ("scoring distribution", "score distributions", "scoring distributions")),
    (SAMPLE_RESPONSES, ("sample",)),
)


def classify_file(name: str) -> str:
    """
    Map a filename to exactly one file category (case-insensitive).
    """
    n = (name or "").lower()
    for category, phrases in _CATEGORY_RULES:
        if any(p in n for p in phrases):
            return category
    return OTHER


def strip_extension(filename: str) -> str:
    return re.sub(r"\.[^/.]+$", "", str(filename or ""))


def _safe_str(x: Any) -> str:
    return "" if x is None else str(x)


def _list_of_dicts(x: Any) -> list[dict[str, Any]]:
    if not isinstance(x, list):
        return []
    return [item for item in x if isinstance(item, dict)]


# ---------------------------------------------------------------------------
# courses.json / course-<slug>.json
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Course:
    """
    One entry of courses.json. The slug is never remapped, the title may be.
    """

    slug: str
    title: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Course":
        slug = _safe_str(data.get("slug")).strip()
        title = _safe_str(data.get("title")).strip() or slug
        return cls(slug=slug, title=title)


@dataclass(frozen=True)
class FileEntry:
    name: str
    url: str

    @property
    def display_text(self) -> str:
        return strip_extension(self.name)

    @property
    def category(self) -> str:
        return classify_file(self.name)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "FileEntry":
        return cls(name=_safe_str(data.get("name")), url=_safe_str(data.get("url")))


@dataclass(frozen=True)
class YearEntry:
    year: str
    files: List[FileEntry] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "YearEntry":
        return cls(
            year=_safe_str(data.get("year")).strip(),
            files=[FileEntry.from_dict(f) for f in _list_of_dicts(data.get("files"))],
        )


@dataclass(frozen=True)
class CourseIndex:
    """
    Represents one course-<slug>.json document.
    """

    slug: str
    title: str
    years: List[YearEntry] = field(default_factory=list)
    base_path: str = ""
    generated_at: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Any, slug: str = "") -> "CourseIndex":
        if not isinstance(data, dict):
            data = {}
        idx_slug = _safe_str(data.get("slug")).strip() or slug
        return cls(
            slug=idx_slug,
            title=_safe_str(data.get("title")).strip() or idx_slug,
            years=[YearEntry.from_dict(y) for y in _list_of_dicts(data.get("years"))],
            base_path=_safe_str(data.get("basePath")),
            generated_at=data.get("generatedAt"),
        )

    def year(self, year: str) -> Optional[YearEntry]:
        for entry in self.years:
            if entry.year == year:
                return entry
        return None


def courses_from_document(data: Any) -> list[Course]:
    """
    Extract the course list from a courses.json document.
    """
    if not isinstance(data, dict):
        return []
    return [c for c in (Course.from_dict(x) for x in _list_of_dicts(data.get("courses"))) if c.slug]


# ---------------------------------------------------------------------------
# questions-<slug>.json
# ---------------------------------------------------------------------------


def _numeric_year(x: Any) -> int:
    try:
        value = float(x)
    except (TypeError, ValueError):
        return 0
    if value != value:  # NaN
        return 0
    return int(value)


@dataclass(frozen=True)
class Question:
    """
    One topic-organized question record. units[0] is the primary unit.
    """

    year: int
    question_type: Optional[str]
    units: List[str]
    file_base: str
    question_pdf: str

    @property
    def type_text(self) -> str:
        return (self.question_type or "").strip()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Question":
        qt = data.get("question_type")
        qt_norm = None if qt is None else (str(qt).strip() or None)
        units = data.get("units")
        return cls(
            year=_numeric_year(data.get("year")),
            question_type=qt_norm,
            units=[_safe_str(u) for u in units] if isinstance(units, list) else [],
            file_base=_safe_str(data.get("file_base")),
            question_pdf=_safe_str(data.get("question_pdf")),
        )


@dataclass(frozen=True)
class QuestionIndex:
    course: str
    units: List[str]
    questions: List[Question]
    question_types: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> "QuestionIndex":
        if not isinstance(data, dict):
            data = {}
        units = data.get("units")
        types = data.get("question_types")
        return cls(
            course=_safe_str(data.get("course")),
            units=[_safe_str(u) for u in units] if isinstance(units, list) else [],
            questions=[Question.from_dict(q) for q in _list_of_dicts(data.get("questions"))],
            question_types=[_safe_str(t) for t in types] if isinstance(types, list) else [],
        )


def slugify(name: str) -> str:
    """
    Course name -> URL-safe slug. Must stay identical to the build step.
    """
    s = _safe_str(name).lower().replace("&", "and")
    s = re.sub(r"[^a-z0-9]+", "-", s)
    return s.strip("-")
