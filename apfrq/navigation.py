"""
Navigation: session history + link interception.

Two interchangeable addressing strategies exist:

    PathHistory   entries look like  /course/ap-biology?view=topic
    HashHistory   entries look like  #/course/ap-biology?view=topic

Both expose the same interface, and the rest of the package only ever sees
the normalized (path, query) pair, so it does not care which one is active.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Optional
from urllib.parse import urljoin, urlsplit

from apfrq.routes import normalize_location


PopListener = Callable[[str, str], None]


class SessionHistory:
    """
    In-memory session history with push/replace/back/forward.

    Listeners are notified on back/forward only, like a browser's popstate.
    """

    def __init__(self, initial: str = "/") -> None:
        self._entries: List[str] = [self.encode(initial)]
        self._index = 0
        self._listeners: List[PopListener] = []

    # strategy hook
    def encode(self, location: str) -> str:
        raise NotImplementedError

    def url_for(self, origin: str, entry: str) -> str:
        raise NotImplementedError

    @property
    def entry(self) -> str:
        return self._entries[self._index]

    @property
    def entries(self) -> list[str]:
        return list(self._entries)

    @property
    def location(self) -> tuple[str, str]:
        return normalize_location(self.entry)

    def __len__(self) -> int:
        return len(self._entries)

    def subscribe(self, listener: PopListener) -> None:
        self._listeners.append(listener)

    def push(self, location: str) -> None:
        # pushing drops the forward stack
        del self._entries[self._index + 1 :]
        self._entries.append(self.encode(location))
        self._index += 1

    def replace(self, location: str) -> None:
        self._entries[self._index] = self.encode(location)

    def can_go_back(self) -> bool:
        return self._index > 0

    def can_go_forward(self) -> bool:
        return self._index < len(self._entries) - 1

    def go(self, delta: int) -> bool:
        target = self._index + delta
        if delta == 0 or not (0 <= target < len(self._entries)):
            return False
        self._index = target
        path, query = self.location
        for listener in list(self._listeners):
            listener(path, query)
        return True

    def back(self) -> bool:
        return self.go(-1)

    def forward(self) -> bool:
        return self.go(1)


class PathHistory(SessionHistory):
    def encode(self, location: str) -> str:
        path, query = normalize_location(location)
        return f"{path}?{query}" if query else path

    def url_for(self, origin: str, entry: str) -> str:
        return origin.rstrip("/") + entry


class HashHistory(SessionHistory):
    def encode(self, location: str) -> str:
        path, query = normalize_location(location)
        return f"#{path}?{query}" if query else f"#{path}"

    def url_for(self, origin: str, entry: str) -> str:
        return origin.rstrip("/") + "/" + entry


def make_history(mode: str, initial: str = "/") -> SessionHistory:
    if mode == "hash":
        return HashHistory(initial)
    return PathHistory(initial)


@dataclass(frozen=True)
class LinkActivation:
    """
    A click on a link: its href and the modifier keys held.
    """

    href: str
    meta: bool = False
    ctrl: bool = False
    shift: bool = False
    alt: bool = False

    @property
    def modified(self) -> bool:
        return self.meta or self.ctrl or self.shift or self.alt


class NavigationController:
    """
    Intercepts same-origin link activations and back/forward, and hands the
    resulting (path, query) to ``on_route`` synchronously.
    """

    def __init__(self, history: SessionHistory, origin: str, on_route: PopListener) -> None:
        self.history = history
        self.origin = origin.rstrip("/")
        self.on_route = on_route
        history.subscribe(self._on_pop)

    def current_url(self) -> str:
        return self.history.url_for(self.origin, self.history.entry)

    def start(self) -> None:
        path, query = self.history.location
        self.on_route(path, query)

    def resolve_href(self, href: str) -> Optional[str]:
        """
        Same-origin href -> location ("/path?query"); None if cross-origin.
        """
        target = urlsplit(urljoin(self.current_url(), href))
        origin = urlsplit(self.origin)
        if (target.scheme, target.netloc) != (origin.scheme, origin.netloc):
            return None
        if target.fragment.startswith("/"):
            return target.fragment
        location = target.path or "/"
        if target.query:
            location += "?" + target.query
        return location

    def activate(self, link: LinkActivation) -> bool:
        """
        Returns True when the activation was intercepted. Modified clicks
        and cross-origin targets are left to the default behavior.
        """
        if link.modified:
            return False
        location = self.resolve_href(link.href)
        if location is None:
            return False
        self.navigate(location)
        return True

    def navigate(self, location: str) -> None:
        self.history.push(location)
        path, query = self.history.location
        self.on_route(path, query)

    def replace(self, location: str) -> None:
        # address bar only, no re-render
        self.history.replace(location)

    def back(self) -> bool:
        return self.history.back()

    def forward(self) -> bool:
        return self.history.forward()

    def _on_pop(self, path: str, query: str) -> None:
        self.on_route(path, query)
