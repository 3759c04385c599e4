"""
Unit tests for session history and link interception.
"""

import unittest

from apfrq.navigation import HashHistory, LinkActivation, NavigationController, PathHistory, make_history


class TestHistory(unittest.TestCase):
    def test_push_replace_back_forward(self) -> None:
        h = PathHistory("/")
        popped = []
        h.subscribe(lambda path, query: popped.append((path, query)))

        h.push("/course/x")
        h.replace("/course/x?view=topic")
        self.assertEqual(h.entries, ["/", "/course/x?view=topic"])
        self.assertEqual(popped, [])

        self.assertTrue(h.back())
        self.assertEqual(h.location, ("/", ""))
        self.assertTrue(h.forward())
        self.assertEqual(h.location, ("/course/x", "view=topic"))
        self.assertFalse(h.forward())
        self.assertEqual(popped, [("/", ""), ("/course/x", "view=topic")])

    def test_push_drops_forward_entries(self) -> None:
        h = PathHistory("/")
        h.push("/a")
        h.push("/b")
        h.back()
        h.push("/c")
        self.assertEqual(h.entries, ["/", "/a", "/c"])
        self.assertFalse(h.can_go_forward())

    def test_hash_entries(self) -> None:
        h = HashHistory("/")
        h.push("/course/x?view=topic")
        self.assertEqual(h.entry, "#/course/x?view=topic")
        self.assertEqual(h.location, ("/course/x", "view=topic"))
        self.assertEqual(h.url_for("http://site", h.entry), "http://site/#/course/x?view=topic")

    def test_make_history(self) -> None:
        self.assertIsInstance(make_history("hash"), HashHistory)
        self.assertIsInstance(make_history("path"), PathHistory)


class TestNavigationController(unittest.TestCase):
    def _controller(self, history):
        seen = []
        controller = NavigationController(history, "http://site", lambda p, q: seen.append((p, q)))
        return controller, seen

    def test_same_origin_link_is_intercepted(self) -> None:
        controller, seen = self._controller(PathHistory("/"))
        self.assertTrue(controller.activate(LinkActivation("/course/ap-biology")))
        self.assertEqual(seen, [("/course/ap-biology", "")])
        self.assertEqual(len(controller.history), 2)

    def test_absolute_same_origin_link(self) -> None:
        controller, seen = self._controller(PathHistory("/"))
        self.assertTrue(controller.activate(LinkActivation("http://site/course/x?view=topic")))
        self.assertEqual(seen, [("/course/x", "view=topic")])

    def test_modified_clicks_are_not_intercepted(self) -> None:
        for mods in [{"meta": True}, {"ctrl": True}, {"shift": True}, {"alt": True}]:
            with self.subTest(mods=mods):
                controller, seen = self._controller(PathHistory("/"))
                self.assertFalse(controller.activate(LinkActivation("/course/x", **mods)))
                self.assertEqual(seen, [])
                self.assertEqual(len(controller.history), 1)

    def test_cross_origin_is_not_intercepted(self) -> None:
        controller, seen = self._controller(PathHistory("/"))
        self.assertFalse(controller.activate(LinkActivation("https://example.com/course/x")))
        self.assertFalse(controller.activate(LinkActivation("https://site/course/x")))
        self.assertEqual(seen, [])

    def test_back_re_resolves_without_push(self) -> None:
        controller, seen = self._controller(PathHistory("/"))
        controller.navigate("/course/x")
        controller.back()
        self.assertEqual(seen, [("/course/x", ""), ("/", "")])
        self.assertEqual(len(controller.history), 2)

    def test_hash_mode_links(self) -> None:
        controller, seen = self._controller(HashHistory("/"))
        self.assertTrue(controller.activate(LinkActivation("#/course/x?view=topic")))
        self.assertTrue(controller.activate(LinkActivation("/course/y")))
        self.assertEqual(seen, [("/course/x", "view=topic"), ("/course/y", "")])
        self.assertEqual(controller.history.entries, ["#/", "#/course/x?view=topic", "#/course/y"])

    def test_replace_does_not_render(self) -> None:
        controller, seen = self._controller(PathHistory("/"))
        controller.replace("/?q=bio")
        self.assertEqual(seen, [])
        self.assertEqual(controller.history.entries, ["/?q=bio"])


if __name__ == "__main__":
    unittest.main()
