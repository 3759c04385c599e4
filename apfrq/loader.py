"""
Index loading over plain HTTP.

Every index is fetched from an ordered list of candidate URLs; the first
successful response with a JSON body wins. Candidates exist because slugs
with spaces or punctuation are encoded differently by different hosts.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional
from urllib.parse import quote, urljoin

import requests

from apfrq.config import DEFAULT_TIMEOUT


log = logging.getLogger(__name__)

# Always revalidate: the data changes with every deployment.
NO_CACHE_HEADERS = {"Cache-Control": "no-cache", "Pragma": "no-cache"}


class IndexLoadError(Exception):
    """
    All candidate URLs failed. ``url`` is the last one attempted.
    """

    def __init__(self, url: str, cause: str) -> None:
        super().__init__(f"Tried {url} -> {cause}")
        self.url = url
        self.cause = cause


def encode_component(text: str) -> str:
    """
    Percent-encode one path component (same safe set as encodeURIComponent).
    """
    return quote(str(text), safe="-_.!~*'()")


def course_index_paths(slug: str) -> list[str]:
    encoded = encode_component(slug)
    return [
        f"/data/course-{encoded}.json",
        f"/data/course-{slug}.json",
        f"/data/course-{encoded.replace('%20', '+')}.json",
    ]


def question_index_paths(slug: str) -> list[str]:
    return [f"/data/questions-{slug}.json"]


class IndexLoader:
    def __init__(
        self,
        base_url: str,
        session: Optional[requests.Session] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        self.base_url = base_url.rstrip("/") + "/"
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout

    def url_for(self, path: str) -> str:
        return urljoin(self.base_url, path.lstrip("/"))

    def fetch_first_ok(self, paths: Iterable[str]) -> Any:
        """
        Try each candidate in order and return the first parsed JSON body.

        Attempts are strictly sequential. Raises IndexLoadError naming the
        last attempted URL and its status or cause.
        """
        last_url = ""
        last_cause = "no candidate URLs"

        for path in paths:
            url = self.url_for(path)
            last_url = url
            try:
                resp = self.session.get(url, headers=NO_CACHE_HEADERS, timeout=self.timeout)
            except requests.RequestException as exc:
                last_cause = f"{type(exc).__name__}: {exc}"
                log.debug("fetch %s failed: %s", url, last_cause)
                continue

            if not resp.ok:
                last_cause = str(resp.status_code)
                log.debug("fetch %s -> %s", url, resp.status_code)
                continue

            try:
                return resp.json()
            except ValueError as exc:
                last_cause = f"invalid JSON: {exc}"
                log.debug("fetch %s returned invalid JSON", url)
                continue

        raise IndexLoadError(last_url, last_cause)

    def courses(self) -> Any:
        return self.fetch_first_ok(["/data/courses.json"])

    def course(self, slug: str) -> Any:
        return self.fetch_first_ok(course_index_paths(slug))

    def questions(self, slug: str) -> Any:
        return self.fetch_first_ok(question_index_paths(slug))
