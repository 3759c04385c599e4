"""
The browsing site: route -> load -> render, plus filter/URL synchronization.

Site owns the output surface (``site.page``) and the address bar. Each
navigation bumps a generation counter; a load that finishes after a newer
navigation started is discarded, so a slow response for an old route never
overwrites the page of the current one.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Callable, NamedTuple, Optional

from apfrq.config import DEFAULT_TABLES, SiteConfig, SiteTables
from apfrq.loader import IndexLoader, IndexLoadError
from apfrq.model import CourseIndex, QuestionIndex, courses_from_document, slugify
from apfrq.navigation import LinkActivation, NavigationController, SessionHistory, make_history
from apfrq.routes import (
    ROUTE_TYPES,
    VIEW_TOPIC,
    CourseByTopic,
    CourseByYear,
    CourseYearDetail,
    CourseYearTypeDetail,
    Home,
    NotFound,
    Route,
    resolve_route,
)
from apfrq.urlstate import FilterState, build_location, meaningful_keys, view_of, view_switch_location
from apfrq.views import (
    CourseData,
    HomeData,
    Page,
    TopicData,
    render_course_by_topic,
    render_course_by_year,
    render_fault,
    render_home,
    render_not_found,
    render_year_detail,
    render_year_type_detail,
)


log = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Loaders per view
# ---------------------------------------------------------------------------


def load_home(loader: IndexLoader, route: Home) -> HomeData:
    try:
        return HomeData(courses=courses_from_document(loader.courses()))
    except IndexLoadError as exc:
        return HomeData(error=exc)


def load_course(loader: IndexLoader, route: Any) -> CourseData:
    try:
        return CourseData(index=CourseIndex.from_dict(loader.course(route.slug), slug=route.slug))
    except IndexLoadError as exc:
        return CourseData(error=exc)


def load_topic(loader: IndexLoader, route: CourseByTopic) -> TopicData:
    course = load_course(loader, route)
    if course.index is None:
        return TopicData(error=course.error)

    # the questions index is keyed by the slugified course title
    questions_slug = slugify(course.index.title or route.slug)
    try:
        questions = QuestionIndex.from_dict(loader.questions(questions_slug))
    except IndexLoadError as exc:
        log.info("no questions index for %s: %s", route.slug, exc)
        return TopicData(index=course.index, questions_error=exc)
    return TopicData(index=course.index, questions=questions)


def load_nothing(loader: IndexLoader, route: NotFound) -> None:
    return None


class View(NamedTuple):
    load: Callable[[IndexLoader, Any], Any]
    render: Callable[[Any, Any, FilterState, SiteTables], Page]


VIEWS: dict[type, View] = {
    Home: View(load_home, render_home),
    CourseByYear: View(load_course, render_course_by_year),
    CourseByTopic: View(load_topic, render_course_by_topic),
    CourseYearDetail: View(load_course, render_year_detail),
    CourseYearTypeDetail: View(load_course, render_year_type_detail),
    NotFound: View(load_nothing, render_not_found),
}

_missing = set(ROUTE_TYPES) - set(VIEWS)
if _missing:
    raise RuntimeError(f"No view registered for: {sorted(t.__name__ for t in _missing)}")


def view_for(route: Route) -> View:
    view = VIEWS.get(type(route))
    if view is None:
        raise TypeError(f"Unknown route state: {route!r}")
    return view


# ---------------------------------------------------------------------------
# Site
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ActiveView:
    route: Route
    path: str
    view_param: Optional[str]
    state: FilterState
    data: Any
    generation: int


def _type_filter_available(data: Any) -> bool:
    if isinstance(data, TopicData):
        return data.type_filter_available
    return True


class Site:
    def __init__(
        self,
        loader: IndexLoader,
        history: SessionHistory,
        tables: SiteTables = DEFAULT_TABLES,
        origin: str = "http://localhost",
    ) -> None:
        self.loader = loader
        self.tables = tables
        self.controller = NavigationController(history, origin, self.render_location)
        self.page: Optional[Page] = None
        self.active: Optional[ActiveView] = None
        self._generation = 0

    @classmethod
    def from_config(cls, config: SiteConfig, initial: str = "/") -> "Site":
        loader = IndexLoader(config.base_url, timeout=config.timeout)
        history = make_history(config.mode, initial)
        return cls(loader, history, tables=config.tables, origin=config.base_url)

    @property
    def history(self) -> SessionHistory:
        return self.controller.history

    def start(self) -> Optional[Page]:
        self.controller.start()
        return self.page

    # -- navigation ---------------------------------------------------------

    def render_location(self, path: str, query: str) -> None:
        """
        Resolve, load and render one location. Never raises.
        """
        self._generation += 1
        token = self._generation
        try:
            route = resolve_route(path, query)
            view = view_for(route)
            data = view.load(self.loader, route)
            if token != self._generation:
                log.debug("discarding stale result for %s (generation %d < %d)", path, token, self._generation)
                return

            keys = meaningful_keys(route, _type_filter_available(data))
            state = FilterState.from_query(query).only(keys)
            self.active = ActiveView(
                route=route,
                path=path,
                view_param=view_of(query),
                state=state,
                data=data,
                generation=token,
            )
            self.page = view.render(route, data, state, self.tables)
        except Exception as exc:
            log.exception("rendering %s failed", path)
            if token == self._generation:
                self.active = None
                self.page = render_fault(exc)

    def activate(self, href: str, **modifiers: bool) -> bool:
        return self.controller.activate(LinkActivation(href=href, **modifiers))

    def navigate(self, location: str) -> Optional[Page]:
        self.controller.navigate(location)
        return self.page

    def back(self) -> bool:
        return self.controller.back()

    def forward(self) -> bool:
        return self.controller.forward()

    def switch_view(self, view: str) -> Optional[Page]:
        """
        Year <-> topic switch: a real navigation (new history entry), with
        the previous view's filters cleared.
        """
        if self.active is None or not isinstance(self.active.route, (CourseByYear, CourseByTopic)):
            return self.page
        return self.navigate(view_switch_location(self.active.path, view))

    # -- filters ------------------------------------------------------------

    def update_filters(self, **changes: Optional[str]) -> Optional[Page]:
        """
        Apply filter changes to the active view: re-render from the data
        already loaded and replace the current history entry.
        """
        active = self.active
        if active is None:
            return self.page

        keys = meaningful_keys(active.route, _type_filter_available(active.data))
        state = active.state.updated(**changes).only(keys)
        self.active = replace(active, state=state)
        try:
            self.page = view_for(active.route).render(active.route, active.data, state, self.tables)
        except Exception as exc:
            log.exception("re-rendering %s failed", active.path)
            self.page = render_fault(exc)

        # only the course views carry a view param
        view = None
        if isinstance(active.route, CourseByTopic):
            view = VIEW_TOPIC
        elif isinstance(active.route, CourseByYear):
            view = active.view_param
        self.controller.replace(build_location(active.path, state, view))
        return self.page

    def reset_filters(self) -> Optional[Page]:
        if self.active is None:
            return self.page
        return self.update_filters(free_text="", category=None, unit=None, question_type=None, year=None)

    @property
    def location(self) -> str:
        path, query = self.history.location
        return f"{path}?{query}" if query else path
