"""
Filter facets derived from a loaded index.

The topic view offers a question-type control only when at least one
question carries a non-empty type; otherwise the control is omitted and the
type criterion is ignored by the filter engine.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from apfrq.model import FILE_CATEGORIES, CourseIndex, QuestionIndex


@dataclass(frozen=True)
class QuestionFacets:
    question_types: List[str]
    units: List[str]

    @property
    def type_filter_available(self) -> bool:
        return bool(self.question_types)


@dataclass(frozen=True)
class YearFacets:
    years: List[str]
    categories: List[str]


def extract_question_facets(index: QuestionIndex) -> QuestionFacets:
    seen: dict[str, None] = {}
    for q in index.questions:
        t = q.type_text
        if t:
            seen.setdefault(t, None)
    # Units come from the curated list of the index, not from the questions.
    return QuestionFacets(question_types=sorted(seen), units=list(index.units))


def extract_year_facets(index: CourseIndex) -> YearFacets:
    years = [y.year for y in index.years if y.year]
    present = {f.category for y in index.years for f in y.files}
    return YearFacets(
        years=sorted(set(years), key=_year_key, reverse=True),
        categories=[c for c in FILE_CATEGORIES if c in present],
    )


def _year_key(year: str) -> int:
    return int(year) if year.isdigit() else 0
