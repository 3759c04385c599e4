"""
Views: one explicit render function per route state.

A render function takes the route, the loaded data and the current
FilterState and returns a Page, a plain description of what is on screen.
Nothing here performs I/O; loading happens in apfrq.site.
"""

from __future__ import annotations

import traceback
from dataclasses import dataclass, field
from typing import List, Optional

from apfrq.config import SiteTables
from apfrq.facets import extract_question_facets, extract_year_facets
from apfrq.filters import (
    apply_courses,
    apply_files,
    apply_questions,
    apply_years,
    count_summary,
    dedupe_titles,
    question_title,
)
from apfrq.loader import IndexLoadError
from apfrq.model import Course, CourseIndex, QuestionIndex, slugify
from apfrq.routes import (
    VIEW_TOPIC,
    VIEW_YEAR,
    CourseByTopic,
    CourseByYear,
    CourseYearDetail,
    CourseYearTypeDetail,
    NotFound,
    course_path,
)
from apfrq.urlstate import (
    PARAM_CAT,
    PARAM_Q,
    PARAM_TYPE,
    PARAM_UNIT,
    PARAM_YEAR,
    FilterState,
    view_switch_location,
)


SITE_NAME = "APFRQs"
MAX_BADGES = 6

ERROR = "error"
INFO = "info"
EMPTY = "empty"


# ---------------------------------------------------------------------------
# Page description
# ---------------------------------------------------------------------------


@dataclass
class Link:
    text: str
    href: str
    # internal links go through the router, the rest are assets
    internal: bool = True
    badges: List[str] = field(default_factory=list)
    active: bool = False


@dataclass
class Control:
    name: str
    label: str
    value: str = ""
    options: List[str] = field(default_factory=list)
    kind: str = "select"


@dataclass
class Section:
    heading: str
    links: List[Link] = field(default_factory=list)
    caption: str = ""
    empty_text: str = ""


@dataclass
class Notice:
    kind: str
    message: str
    hints: List[str] = field(default_factory=list)
    detail: str = ""


@dataclass
class Page:
    title: str
    description: str
    heading: str
    canonical: str = ""
    breadcrumbs: List[Link] = field(default_factory=list)
    tabs: List[Link] = field(default_factory=list)
    controls: List[Control] = field(default_factory=list)
    count: str = ""
    sections: List[Section] = field(default_factory=list)
    notices: List[Notice] = field(default_factory=list)

    def links(self) -> list[Link]:
        """
        Every activatable link, in display order.
        """
        out = list(self.breadcrumbs) + list(self.tabs)
        for s in self.sections:
            out.extend(s.links)
        return out

    def control(self, name: str) -> Optional[Control]:
        for c in self.controls:
            if c.name == name:
                return c
        return None


# ---------------------------------------------------------------------------
# Loaded data bundles
# ---------------------------------------------------------------------------


@dataclass
class HomeData:
    courses: List[Course] = field(default_factory=list)
    error: Optional[IndexLoadError] = None


@dataclass
class CourseData:
    index: Optional[CourseIndex] = None
    error: Optional[IndexLoadError] = None


@dataclass
class TopicData:
    index: Optional[CourseIndex] = None
    error: Optional[IndexLoadError] = None
    questions: Optional[QuestionIndex] = None
    questions_error: Optional[IndexLoadError] = None

    @property
    def type_filter_available(self) -> bool:
        if self.questions is None:
            return False
        return extract_question_facets(self.questions).type_filter_available


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

HOME_LINK = Link(text="Home", href="/")


def _search(value: str, label: str) -> Control:
    return Control(name=PARAM_Q, label=label, value=value, kind="search")


def _course_title(index: Optional[CourseIndex], slug: str, tables: SiteTables) -> str:
    if index is None:
        return slug
    return tables.display_title(index.title) or slug


def _course_tabs(slug: str, active: str) -> list[Link]:
    path = course_path(slug)
    return [
        Link(text="By year", href=view_switch_location(path, VIEW_YEAR), active=active == VIEW_YEAR),
        Link(text="By topic", href=view_switch_location(path, VIEW_TOPIC), active=active == VIEW_TOPIC),
    ]


def _index_error(error: Optional[IndexLoadError]) -> Notice:
    return Notice(
        kind=ERROR,
        message="Could not load this course index.",
        hints=["Run `apfrq build` and publish the updated data/ folder"],
        detail=f"Error: {error}" if error is not None else "",
    )


def _file_links(files) -> list[Link]:
    return [Link(text=f.display_text, href=f.url, internal=False) for f in files]


# ---------------------------------------------------------------------------
# Home
# ---------------------------------------------------------------------------


def render_home(route, data: HomeData, state: FilterState, tables: SiteTables) -> Page:
    page = Page(
        title="AP FRQ Archive | Free Response Questions",
        description="Browse AP exam free-response questions, scoring guidelines, and sample responses by course and year.",
        heading="AP Exam FRQ Archive",
        canonical="/",
        controls=[
            _search(state.free_text, "Search courses"),
            Control(name=PARAM_CAT, label="All categories", value=state.category or "", options=tables.category_names()),
        ],
    )

    if data.error is not None:
        page.notices.append(
            Notice(
                kind=ERROR,
                message="Could not load your courses list.",
                hints=[
                    "Run `apfrq build` to generate /data/courses.json",
                    "Ensure the site is served over HTTP (try `apfrq serve`)",
                ],
                detail=f"Error: {data.error}",
            )
        )
        return page

    if not data.courses:
        page.notices.append(Notice(kind=EMPTY, message="No courses found. Run `apfrq build`."))
        return page

    shown = apply_courses(data.courses, state, tables)
    page.count = count_summary(len(shown), len(data.courses))
    page.sections.append(
        Section(
            heading="Courses",
            links=[Link(text=tables.display_title(c.title), href=course_path(c.slug)) for c in shown],
            empty_text="No matching courses.",
        )
    )
    return page


# ---------------------------------------------------------------------------
# Course by year
# ---------------------------------------------------------------------------


def _course_page(slug: str, index: Optional[CourseIndex], tables: SiteTables, view: str) -> Page:
    title = _course_title(index, slug, tables)
    if view == VIEW_TOPIC:
        meta_title = f"{title} By Topic | {SITE_NAME}"
        desc = f"{title} questions organized by unit, with optional question type filtering when available."
    else:
        meta_title = f"{title} By Year | {SITE_NAME}"
        desc = f"{title} free-response questions and related resources, organized by year."
    return Page(
        title=meta_title,
        description=desc,
        heading=title,
        canonical=course_path(slug),
        breadcrumbs=[HOME_LINK, Link(text=title, href=course_path(slug))],
        tabs=_course_tabs(slug, view),
    )


def render_course_by_year(route: CourseByYear, data: CourseData, state: FilterState, tables: SiteTables) -> Page:
    page = _course_page(route.slug, data.index, tables, VIEW_YEAR)
    if data.index is None:
        page.notices.append(_index_error(data.error))
        return page

    index = data.index
    facets = extract_year_facets(index)
    page.controls = [
        Control(name=PARAM_YEAR, label="All years", value=state.year or "", options=facets.years),
        _search(state.free_text, "Search files"),
    ]

    if not index.years:
        page.notices.append(Notice(kind=EMPTY, message="No years found for this course."))
        return page

    years = apply_years(index.years, state)
    total = sum(len(y.files) for y in index.years)
    page.count = count_summary(sum(len(y.files) for y in years), total)

    for y in years:
        page.sections.append(
            Section(
                heading=y.year,
                caption=f"{page.heading} {y.year} resources",
                links=[Link(text=y.year + " detail", href=course_path(route.slug, y.year))] + _file_links(y.files),
                empty_text="No files found in this year.",
            )
        )
    return page


# ---------------------------------------------------------------------------
# Course by topic
# ---------------------------------------------------------------------------


def render_course_by_topic(route: CourseByTopic, data: TopicData, state: FilterState, tables: SiteTables) -> Page:
    page = _course_page(route.slug, data.index, tables, VIEW_TOPIC)
    if data.index is None:
        page.notices.append(_index_error(data.error))
        return page

    questions_slug = slugify(data.index.title or route.slug)
    if data.questions is None:
        page.notices.append(
            Notice(
                kind=INFO,
                message="By topic is not available for this course yet.",
                hints=[
                    f"Missing /data/questions-{questions_slug}.json",
                    f"If you want it enabled, add question JSONs under /questions/{page.heading}/ and rerun `apfrq build`",
                ],
            )
        )
        return page

    qindex = data.questions
    if not qindex.questions:
        page.notices.append(
            Notice(
                kind=EMPTY,
                message="By topic is not available for this course yet.",
                hints=["No questions were found in the generated questions index."],
            )
        )
        return page

    facets = extract_question_facets(qindex)
    if facets.type_filter_available:
        page.controls.append(
            Control(
                name=PARAM_TYPE,
                label="All question types",
                value=state.question_type or "",
                options=facets.question_types,
            )
        )
    page.controls.append(Control(name=PARAM_UNIT, label="All units", value=state.unit or "", options=facets.units))
    page.controls.append(_search(state.free_text, "Search year or unit"))

    shown = apply_questions(qindex.questions, state, facets.type_filter_available)
    page.count = count_summary(len(shown), len(qindex.questions))

    titles = dedupe_titles(question_title(q) for q in shown)
    page.sections.append(
        Section(
            heading="Questions",
            links=[
                Link(text=t, href=q.question_pdf, internal=False, badges=q.units[:MAX_BADGES])
                for t, q in zip(titles, shown)
            ],
            empty_text="No matching questions.",
        )
    )
    return page


# ---------------------------------------------------------------------------
# Year detail views
# ---------------------------------------------------------------------------


def _detail_page(slug: str, year: str, type_: Optional[str], index: Optional[CourseIndex], tables: SiteTables) -> Page:
    title = _course_title(index, slug, tables)
    crumbs = [HOME_LINK, Link(text=title, href=course_path(slug)), Link(text=year, href=course_path(slug, year))]
    heading = f"{title} {year}"
    if type_:
        crumbs.append(Link(text=type_, href=course_path(slug, year, type_)))
        heading = f"{heading} {type_}"
    return Page(
        title=f"{heading} | {SITE_NAME}",
        description=f"{title} {year} free-response questions, scoring guidelines, and related resources.",
        heading=heading,
        canonical=course_path(slug, year, type_),
        breadcrumbs=crumbs,
    )


def _render_year_files(page: Page, data: CourseData, slug: str, year: str, type_: Optional[str], state: FilterState) -> Page:
    if data.index is None:
        page.notices.append(_index_error(data.error))
        return page

    entry = data.index.year(year)
    if entry is None:
        page.notices.append(Notice(kind=EMPTY, message=f"No files found for {year}."))
        return page

    page.controls = [_search(state.free_text, "Search files")]
    pinned = apply_files(entry.files, FilterState(), type_)
    shown = apply_files(entry.files, state, type_)
    page.count = count_summary(len(shown), len(pinned))

    links = _file_links(shown)
    if type_ is None:
        present = extract_year_facets(CourseIndex(slug=slug, title="", years=[entry])).categories
        links = [Link(text=c, href=course_path(slug, year, c)) for c in present] + links

    page.sections.append(
        Section(
            heading=year,
            links=links,
            empty_text=f"No {type_} files found in this year." if type_ else "No files found in this year.",
        )
    )
    return page


def render_year_detail(route: CourseYearDetail, data: CourseData, state: FilterState, tables: SiteTables) -> Page:
    page = _detail_page(route.slug, route.year, None, data.index, tables)
    return _render_year_files(page, data, route.slug, route.year, None, state)


def render_year_type_detail(
    route: CourseYearTypeDetail, data: CourseData, state: FilterState, tables: SiteTables
) -> Page:
    page = _detail_page(route.slug, route.year, route.type, data.index, tables)
    return _render_year_files(page, data, route.slug, route.year, route.type, state)


# ---------------------------------------------------------------------------
# Not found / fault
# ---------------------------------------------------------------------------


def render_not_found(route: NotFound, data: None, state: FilterState, tables: SiteTables) -> Page:
    return Page(
        title=f"404 | {SITE_NAME}",
        description="Page not found.",
        heading="404",
        notices=[Notice(kind=INFO, message="Page not found.")],
        sections=[Section(heading="", links=[Link(text="Go Home", href="/")])],
    )


def render_fault(exc: BaseException) -> Page:
    """
    Diagnostic page for a failure nobody else handled.
    """
    detail = "".join(traceback.format_exception_only(type(exc), exc)).strip()
    return Page(
        title=f"Error | {SITE_NAME}",
        description="Something went wrong.",
        heading="Something went wrong",
        notices=[
            Notice(
                kind=ERROR,
                message="This page could not be displayed.",
                hints=["Go back or reload the page", "Check that the data/ folder is up to date"],
                detail=detail,
            )
        ],
        sections=[Section(heading="", links=[Link(text="Go Home", href="/")])],
    )
