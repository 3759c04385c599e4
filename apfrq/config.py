"""
Site configuration.

Two kinds of configuration exist:

- operator-maintained tables (course title overrides, home categories and
  the titles that sort last on the home page). They are defined exactly once
  here, wrapped read-only and injected into the site at startup.
- runtime settings (where the static site lives, path or hash addressing),
  which come from CLI flags with the defaults below.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Iterable, Mapping

from apfrq.model import slugify


DEFAULT_BASE_URL = "http://localhost:8000"
DEFAULT_TIMEOUT = 30.0

MODE_PATH = "path"
MODE_HASH = "hash"
MODES = (MODE_PATH, MODE_HASH)


# ---------------------------------------------------------------------------
# Operator tables (EDIT THESE)
# ---------------------------------------------------------------------------

# Course title overrides (display only, the slug is never remapped).
_TITLE_OVERRIDES = {
    "AP Physics 1 Algebra-Based": "AP Physics 1",
    "AP Physics 2 Algebra-Based": "AP Physics 2",
    "AP Physics C Electricity and Magnetism": "AP Physics C: Electricity and Magnetism",
    "AP Physics C Mechanics": "AP Physics C: Mechanics",
    "AP Comparative Government and Politics": "AP Comparative Government & Politics",
    "AP World History Modern": "AP World History",
}

# Category -> course slugs, exactly as the slugs appear in courses.json
# (after slugify). A slug may be listed in several categories.
_HOME_CATEGORIES = {
    "Math": [
        "ap-calculus-ab",
        "ap-calculus-bc",
        "ap-statistics",
        "ap-precalculus",
    ],
    "Science": [
        "ap-biology",
        "ap-chemistry",
        "ap-physics-1",
        "ap-physics-2",
        "ap-physics-c-mechanics",
        "ap-physics-c-electricity-and-magnetism",
        "ap-environmental-science",
    ],
    "History": [
        "ap-united-states-history",
        "ap-world-history-modern",
        "ap-european-history",
        "ap-african-american-studies",
    ],
    "English": [
        "ap-english-language-and-composition",
        "ap-english-literature-and-composition",
    ],
    "Capstone": [
        "ap-seminar",
        "ap-research",
    ],
    "Social Studies": [
        "ap-psychology",
        "ap-united-states-government-and-politics",
        "ap-comparative-government-and-politics",
        "ap-human-geography",
        "ap-macroeconomics",
        "ap-microeconomics",
    ],
    "Languages": [
        "ap-spanish-language-and-culture",
        "ap-chinese-language-and-culture",
        "ap-spanish-literature-and-culture",
        "ap-japanese-language-and-culture",
        "ap-italian-language-and-culture",
        "ap-latin",
        "ap-german-language-and-culture",
    ],
    "Arts": [
        "ap-2-d-art-and-design",
        "ap-3-d-art-and-design",
        "ap-drawing",
        "ap-music-theory",
        "ap-art-history",
    ],
    "CS": [
        "ap-computer-science-a",
        "ap-computer-science-principles",
    ],
}

# Display titles that are listed after all other courses on the home page.
_LAST_COURSES = ("AP 2-D Art and Design", "AP 3-D Art and Design")


@dataclass(frozen=True)
class SiteTables:
    """
    Immutable operator tables shared by every component that needs them.
    """

    title_overrides: Mapping[str, str]
    home_categories: Mapping[str, frozenset[str]]
    last_courses: frozenset[str]

    def display_title(self, title: str) -> str:
        return self.title_overrides.get(title, title)

    def categories_for(self, slug: str) -> frozenset[str]:
        """
        Categories a course belongs to, matched on the slugified slug.
        """
        key = slugify(slug)
        return frozenset(cat for cat, slugs in self.home_categories.items() if key in slugs)

    def category_names(self) -> list[str]:
        return sorted(self.home_categories, key=str.lower)


def make_tables(
    title_overrides: Mapping[str, str],
    home_categories: Mapping[str, Iterable[str]],
    last_courses: Iterable[str] = (),
) -> SiteTables:
    cats: dict[str, frozenset[str]] = {}
    for cat, slugs in home_categories.items():
        cats[str(cat)] = frozenset(str(s).strip() for s in slugs if str(s).strip())
    return SiteTables(
        title_overrides=MappingProxyType({str(k): str(v) for k, v in title_overrides.items()}),
        home_categories=MappingProxyType(cats),
        last_courses=frozenset(str(x) for x in last_courses),
    )


DEFAULT_TABLES = make_tables(_TITLE_OVERRIDES, _HOME_CATEGORIES, _LAST_COURSES)


def load_tables(path: str | Path | None = None) -> SiteTables:
    """
    Load operator tables from a JSON file, falling back to the defaults.

    Keys that are missing or have the wrong shape keep their default value,
    so a partial file only overrides what it names. A missing or broken file
    never crashes the application.
    """
    if path is None:
        return DEFAULT_TABLES

    tables_path = Path(path)
    if not tables_path.exists():
        return DEFAULT_TABLES

    try:
        data: Any = json.loads(tables_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError, UnicodeDecodeError):
        return DEFAULT_TABLES
    if not isinstance(data, dict):
        return DEFAULT_TABLES

    overrides = data.get("title_overrides")
    if not isinstance(overrides, dict):
        overrides = _TITLE_OVERRIDES

    categories = data.get("home_categories")
    if not isinstance(categories, dict) or not all(isinstance(v, list) for v in categories.values()):
        categories = _HOME_CATEGORIES

    last = data.get("last_courses")
    if not isinstance(last, list):
        last = _LAST_COURSES

    return make_tables(overrides, categories, last)


@dataclass(frozen=True)
class SiteConfig:
    base_url: str = DEFAULT_BASE_URL
    mode: str = MODE_PATH
    timeout: float = DEFAULT_TIMEOUT
    tables: SiteTables = field(default=DEFAULT_TABLES)

    def __post_init__(self) -> None:
        if self.mode not in MODES:
            raise ValueError(f"Unknown addressing mode: {self.mode!r} (expected one of {MODES})")
