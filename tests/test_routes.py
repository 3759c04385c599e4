"""
Unit tests for route resolution.

The resolver is total: every path maps to exactly one route state and
unknown paths become NotFound instead of raising.
"""

import unittest

from apfrq.routes import (
    ROUTE_TYPES,
    CourseByTopic,
    CourseByYear,
    CourseYearDetail,
    CourseYearTypeDetail,
    Home,
    NotFound,
    course_path,
    normalize_location,
    resolve_route,
)


class TestResolveRoute(unittest.TestCase):
    def test_home(self) -> None:
        self.assertEqual(resolve_route("/"), Home())
        self.assertEqual(resolve_route("/", "q=bio&cat=Science"), Home())

    def test_course_views(self) -> None:
        self.assertEqual(resolve_route("/course/ap-biology"), CourseByYear(slug="ap-biology"))
        self.assertEqual(resolve_route("/course/ap-biology", "view=year"), CourseByYear(slug="ap-biology"))
        self.assertEqual(resolve_route("/course/ap-biology", "view=topic"), CourseByTopic(slug="ap-biology"))
        self.assertEqual(resolve_route("/course/ap-biology", {"view": "topic"}), CourseByTopic(slug="ap-biology"))
        self.assertEqual(resolve_route("/course/ap-biology", "view=other"), CourseByYear(slug="ap-biology"))

    def test_detail_views(self) -> None:
        self.assertEqual(resolve_route("/course/ap-biology/2021"), CourseYearDetail(slug="ap-biology", year="2021"))
        self.assertEqual(
            resolve_route("/course/ap-biology/2021/frq"),
            CourseYearTypeDetail(slug="ap-biology", year="2021", type="frq"),
        )

    def test_year_must_be_four_digits(self) -> None:
        self.assertIsInstance(resolve_route("/course/ap-biology/21"), NotFound)
        self.assertIsInstance(resolve_route("/course/ap-biology/20210"), NotFound)
        self.assertIsInstance(resolve_route("/course/ap-biology/abcd/frq"), NotFound)
        # a trailing newline is not part of four digits
        self.assertIsInstance(resolve_route("/course/ap-biology/2021%0A"), NotFound)
        self.assertIsInstance(resolve_route("/course/ap-biology/2021%0A/frq"), NotFound)

    def test_segments_are_decoded(self) -> None:
        route = resolve_route("/course/AP%20Physics%20C%3A%20Mechanics/2019/scoring-guidelines")
        self.assertEqual(route, CourseYearTypeDetail(slug="AP Physics C: Mechanics", year="2019", type="scoring-guidelines"))

    def test_slug_round_trip(self) -> None:
        for slug in ["ap-biology", "AP Biology", "AP Physics C: E&M", "a/b", "100% sure?", "plus+sign"]:
            with self.subTest(slug=slug):
                self.assertEqual(resolve_route(course_path(slug)), CourseByYear(slug=slug))

    def test_unmatched_paths_are_not_found(self) -> None:
        for path in ["", "/about", "/course", "/course/", "/course/x/", "/course//2021", "/course/x/2021/frq/extra", "//", "x"]:
            with self.subTest(path=path):
                route = resolve_route(path)
                self.assertIsInstance(route, NotFound)

    def test_every_result_is_a_known_state(self) -> None:
        for path in ["/", "/course/a", "/course/a/2020", "/course/a/2020/b", "/nope", "/%%%"]:
            self.assertIsInstance(resolve_route(path), ROUTE_TYPES)


class TestNormalizeLocation(unittest.TestCase):
    def test_path_and_fragment_forms_agree(self) -> None:
        self.assertEqual(normalize_location("/course/x?view=topic"), ("/course/x", "view=topic"))
        self.assertEqual(normalize_location("#/course/x?view=topic"), ("/course/x", "view=topic"))

    def test_empty(self) -> None:
        self.assertEqual(normalize_location(""), ("/", ""))
        self.assertEqual(normalize_location("#"), ("/", ""))


if __name__ == "__main__":
    unittest.main()
