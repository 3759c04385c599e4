"""
Filter engine.

Pure functions over loaded items and a FilterState:

- filter_*  keep the items matching every criterion (AND). An empty
  criterion is a no-op, so filtering with an empty state is the identity
  and filtering twice equals filtering once.
- sort_*    the deterministic display order of each listing.
- apply_*   filter, then sort. This is what the views display.
"""

from __future__ import annotations

import re
from typing import Iterable, Optional

from apfrq.config import SiteTables
from apfrq.model import Course, FileEntry, Question, YearEntry
from apfrq.urlstate import FilterState


def count_summary(shown: int, total: int) -> str:
    return f"Showing {shown} of {total}"


def _needle(state: FilterState) -> str:
    return state.free_text.strip().lower()


# ---------------------------------------------------------------------------
# Home: courses
# ---------------------------------------------------------------------------


def filter_courses(courses: Iterable[Course], state: FilterState, tables: SiteTables) -> list[Course]:
    q = _needle(state)
    cat = state.category

    out: list[Course] = []
    for c in courses:
        if q:
            hay = f"{tables.display_title(c.title)} {c.slug}".lower()
            if q not in hay:
                continue
        if cat and cat not in tables.categories_for(c.slug):
            continue
        out.append(c)
    return out


def sort_courses(courses: Iterable[Course], tables: SiteTables) -> list[Course]:
    def key(c: Course) -> tuple[bool, str, str]:
        title = tables.display_title(c.title)
        return (title in tables.last_courses, title.lower(), title)

    return sorted(courses, key=key)


def apply_courses(courses: Iterable[Course], state: FilterState, tables: SiteTables) -> list[Course]:
    return sort_courses(filter_courses(courses, state, tables), tables)


# ---------------------------------------------------------------------------
# Year listings: files
# ---------------------------------------------------------------------------


def filter_files(files: Iterable[FileEntry], state: FilterState, category: Optional[str] = None) -> list[FileEntry]:
    """
    ``category`` pins a file category (the type segment of detail routes).
    """
    q = _needle(state)

    out: list[FileEntry] = []
    for f in files:
        if category and f.category != category:
            continue
        if q and q not in f"{f.name} {f.category}".lower():
            continue
        out.append(f)
    return out


def file_rank(name: str) -> int:
    n = (name or "").lower()
    if "free-response questions" in n or "free response questions" in n:
        return 0
    if "scoring guidelines" in n:
        return 1
    if "scoring" in n:
        return 2
    if "score" in n:
        return 3
    if "sample" in n:
        return 5
    return 4


def sort_files(files: Iterable[FileEntry]) -> list[FileEntry]:
    return sorted(files, key=lambda f: (file_rank(f.name), f.name.lower()))


def apply_files(files: Iterable[FileEntry], state: FilterState, category: Optional[str] = None) -> list[FileEntry]:
    return sort_files(filter_files(files, state, category))


def filter_years(years: Iterable[YearEntry], state: FilterState) -> list[YearEntry]:
    """
    Year view: keep the selected year (if any); with a search text, narrow
    each year's files and drop years left without files.
    """
    out: list[YearEntry] = []
    for y in years:
        if state.year and y.year != state.year:
            continue
        if _needle(state):
            files = filter_files(y.files, state)
            if not files:
                continue
            y = YearEntry(year=y.year, files=files)
        out.append(y)
    return out


def _year_sort_key(year: str) -> int:
    return int(year) if year.isdigit() else 0


def apply_years(years: Iterable[YearEntry], state: FilterState) -> list[YearEntry]:
    return [
        YearEntry(year=y.year, files=sort_files(y.files))
        for y in sorted(filter_years(years, state), key=lambda y: _year_sort_key(y.year), reverse=True)
    ]


# ---------------------------------------------------------------------------
# Topic listings: questions
# ---------------------------------------------------------------------------

_UNIT_PREFIX_RE = re.compile(r"^Unit\s*\d+\s*:\s*", re.IGNORECASE)


def primary_unit_label(units: Iterable[str]) -> str:
    units = list(units or [])
    if not units:
        return "Question"
    u0 = str(units[0] if units[0] is not None else "").strip()
    if not u0:
        return "Question"
    return _UNIT_PREFIX_RE.sub("", u0)


def question_title(q: Question) -> str:
    year = str(q.year) if q.year else ""
    qt = q.type_text
    base = f"{year} {qt}" if qt else f"{year} {primary_unit_label(q.units)}"
    return base.strip() or "Question"


def filter_questions(
    questions: Iterable[Question],
    state: FilterState,
    type_filter_available: bool = True,
) -> list[Question]:
    t = state.question_type if type_filter_available else None
    u = state.unit
    q = _needle(state)

    out: list[Question] = []
    for item in questions:
        if t and item.type_text != t:
            continue
        if u and u not in item.units:
            continue
        if q:
            hay = " ".join([str(item.year) if item.year else "", item.type_text, *item.units, item.file_base]).lower()
            if q not in hay:
                continue
        out.append(item)
    return out


def sort_questions(questions: Iterable[Question]) -> list[Question]:
    """
    Year desc, then type, primary unit label and file base (all ascending).
    """
    return sorted(
        questions,
        key=lambda q: (-(q.year or 0), q.type_text, primary_unit_label(q.units), q.file_base),
    )


def apply_questions(
    questions: Iterable[Question],
    state: FilterState,
    type_filter_available: bool = True,
) -> list[Question]:
    return sort_questions(filter_questions(questions, state, type_filter_available))


def dedupe_titles(titles: Iterable[str]) -> list[str]:
    """
    Suffix recurring titles with their occurrence number (" - 2", " - 3").
    Counting starts over on every call.
    """
    counts: dict[str, int] = {}
    out: list[str] = []
    for title in titles:
        seen = counts.get(title, 0) + 1
        counts[title] = seen
        out.append(title if seen == 1 else f"{title} - {seen}")
    return out
