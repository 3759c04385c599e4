"""
Filter state <-> query string.

The address bar is the only persistent home of the filter state: every
filter change is written back with history.replace (no new back-button
stop), and a view reads its initial state from the query on load, so a
shared URL reproduces the exact filtered view.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterable, Mapping, Optional, Union
from urllib.parse import urlencode

from apfrq.routes import (
    CourseByTopic,
    CourseByYear,
    CourseYearDetail,
    CourseYearTypeDetail,
    Home,
    Route,
    parse_query,
)


PARAM_VIEW = "view"
PARAM_Q = "q"
PARAM_CAT = "cat"
PARAM_TYPE = "type"
PARAM_UNIT = "unit"
PARAM_YEAR = "year"

# Serialization order of the query string.
FILTER_KEYS = (PARAM_Q, PARAM_CAT, PARAM_TYPE, PARAM_UNIT, PARAM_YEAR)

_FIELD_FOR_KEY = {
    PARAM_Q: "free_text",
    PARAM_CAT: "category",
    PARAM_TYPE: "question_type",
    PARAM_UNIT: "unit",
    PARAM_YEAR: "year",
}


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


@dataclass(frozen=True)
class FilterState:
    """
    Current filter criteria. An empty criterion never excludes anything.
    """

    free_text: str = ""
    category: Optional[str] = None
    unit: Optional[str] = None
    question_type: Optional[str] = None
    year: Optional[str] = None

    @classmethod
    def from_query(cls, query: Union[str, Mapping[str, str]]) -> "FilterState":
        params = parse_query(query) if isinstance(query, str) else query
        return cls(
            free_text=_clean(params.get(PARAM_Q)) or "",
            category=_clean(params.get(PARAM_CAT)),
            unit=_clean(params.get(PARAM_UNIT)),
            question_type=_clean(params.get(PARAM_TYPE)),
            year=_clean(params.get(PARAM_YEAR)),
        )

    def to_params(self) -> dict[str, str]:
        """
        Ordered query parameters; empty values are omitted, not written blank.
        """
        out: dict[str, str] = {}
        for key in FILTER_KEYS:
            value = _clean(getattr(self, _FIELD_FOR_KEY[key]))
            if value:
                out[key] = value
        return out

    def updated(self, **changes: Optional[str]) -> "FilterState":
        """
        Copy with some criteria changed; blank values clear the criterion.
        """
        clean = {k: _clean(v) for k, v in changes.items()}
        if "free_text" in clean:
            clean["free_text"] = clean["free_text"] or ""
        return replace(self, **clean)

    def only(self, keys: Iterable[str]) -> "FilterState":
        """
        Keep only the criteria named by query keys; clear the rest.
        """
        keep = {_FIELD_FOR_KEY[k] for k in keys}
        cleared = {f: ("" if f == "free_text" else None) for f in _FIELD_FOR_KEY.values() if f not in keep}
        return replace(self, **cleared)

    def is_empty(self) -> bool:
        return not self.to_params()


def meaningful_keys(route: Route, type_filter_available: bool = True) -> tuple[str, ...]:
    """
    Query keys that mean something for a route; everything else is dropped.
    """
    if isinstance(route, Home):
        return (PARAM_Q, PARAM_CAT)
    if isinstance(route, CourseByYear):
        return (PARAM_Q, PARAM_YEAR)
    if isinstance(route, CourseByTopic):
        if type_filter_available:
            return (PARAM_Q, PARAM_TYPE, PARAM_UNIT)
        return (PARAM_Q, PARAM_UNIT)
    if isinstance(route, (CourseYearDetail, CourseYearTypeDetail)):
        return (PARAM_Q,)
    return ()


def build_location(path: str, state: FilterState, view: Optional[str] = None) -> str:
    params: dict[str, str] = {}
    if view:
        params[PARAM_VIEW] = view
    params.update(state.to_params())
    query = urlencode(params)
    return f"{path}?{query}" if query else path


def view_of(query: Union[str, Mapping[str, str]]) -> Optional[str]:
    params = parse_query(query) if isinstance(query, str) else query
    return _clean(params.get(PARAM_VIEW))


def view_switch_location(path: str, view: str) -> str:
    """
    Destination of a year <-> topic switch. Filter params from the
    previous view are not carried over.
    """
    return build_location(path, FilterState(), view=view)

