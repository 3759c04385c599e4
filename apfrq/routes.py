"""
Route resolution.

A location (path + query) resolves to exactly one of six route states.
The resolver never fails: an unknown path is a valid NotFound route.

Rules, first match wins:

    /                                   -> Home
    /course/<slug>?view=topic           -> CourseByTopic
    /course/<slug>                      -> CourseByYear
    /course/<slug>/<YYYY>               -> CourseYearDetail
    /course/<slug>/<YYYY>/<type>        -> CourseYearTypeDetail
    anything else                       -> NotFound
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Mapping, Tuple, Union
from urllib.parse import parse_qsl, unquote, urlsplit

from apfrq.loader import encode_component


VIEW_YEAR = "year"
VIEW_TOPIC = "topic"

_YEAR_RE = re.compile(r"[0-9]{4}")


@dataclass(frozen=True)
class Home:
    pass


@dataclass(frozen=True)
class CourseByYear:
    slug: str


@dataclass(frozen=True)
class CourseByTopic:
    slug: str


@dataclass(frozen=True)
class CourseYearDetail:
    slug: str
    year: str


@dataclass(frozen=True)
class CourseYearTypeDetail:
    slug: str
    year: str
    type: str


@dataclass(frozen=True)
class NotFound:
    path: str


Route = Union[Home, CourseByYear, CourseByTopic, CourseYearDetail, CourseYearTypeDetail, NotFound]

ROUTE_TYPES: Tuple[type, ...] = (Home, CourseByYear, CourseByTopic, CourseYearDetail, CourseYearTypeDetail, NotFound)


def parse_query(query: str) -> dict[str, str]:
    """
    Query string -> dict (first value wins for repeated keys).
    """
    out: dict[str, str] = {}
    for key, value in parse_qsl(query.lstrip("?"), keep_blank_values=True):
        out.setdefault(key, value)
    return out


def normalize_location(location: str) -> tuple[str, str]:
    """
    Turn a path-form ("/course/x?view=topic") or fragment-form
    ("#/course/x?view=topic") location into (path, query).
    """
    loc = (location or "").strip()
    if loc.startswith("#"):
        loc = loc[1:]
    parts = urlsplit(loc)
    path = parts.path or "/"
    if not path.startswith("/"):
        path = "/" + path
    return path, parts.query


def resolve_route(path: str, query: Union[str, Mapping[str, str]] = "") -> Route:
    params = parse_query(query) if isinstance(query, str) else dict(query)

    if path == "/":
        return Home()

    segments = path.split("/")
    # "/course/x" -> ["", "course", "x"]
    if len(segments) < 3 or segments[0] != "" or segments[1] != "course":
        return NotFound(path=path)

    rest = segments[2:]
    if any(not s for s in rest):
        return NotFound(path=path)

    decoded = [unquote(s) for s in rest]

    if len(decoded) == 1:
        if params.get("view") == VIEW_TOPIC:
            return CourseByTopic(slug=decoded[0])
        return CourseByYear(slug=decoded[0])

    if not _YEAR_RE.fullmatch(decoded[1]):
        return NotFound(path=path)

    if len(decoded) == 2:
        return CourseYearDetail(slug=decoded[0], year=decoded[1])

    if len(decoded) == 3:
        return CourseYearTypeDetail(slug=decoded[0], year=decoded[1], type=decoded[2])

    return NotFound(path=path)


def course_path(slug: str, year: str | None = None, type_: str | None = None) -> str:
    parts = ["", "course", encode_component(slug)]
    if year:
        parts.append(encode_component(year))
        if type_:
            parts.append(encode_component(type_))
    return "/".join(parts)
