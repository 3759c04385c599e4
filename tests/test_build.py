"""
Tests for the build step (directory tree -> JSON indexes).

Everything runs inside a temporary site root so no real data is touched.
"""

import contextlib
import io
import json
import tempfile
import unittest
from pathlib import Path

from apfrq.build import BuildError, build_all, build_course_indexes, parse_question_record


def _touch(path: Path, text: str = "") -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


def _read(path: Path):
    return json.loads(path.read_text(encoding="utf-8"))


class TestBuild(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name)
        self.out = io.StringIO()

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _build(self, **kwargs) -> None:
        with contextlib.redirect_stdout(self.out):
            build_all(self.root, **kwargs)

    def test_missing_courses_folder_raises(self) -> None:
        with self.assertRaises(BuildError):
            with contextlib.redirect_stdout(self.out):
                build_course_indexes(self.root)

    def test_course_indexes(self) -> None:
        bio = self.root / "courses" / "ap-biology"
        _touch(bio / "2019" / "Chief Reader Report.pdf")
        _touch(bio / "2021" / "Free-Response Questions.pdf")
        _touch(bio / "2021" / "scoring guidelines.PDF")
        _touch(bio / "2021" / "notes.docx")
        _touch(bio / "misc" / "readme.txt")
        _touch(bio / "20211" / "x.pdf")
        _touch(self.root / "courses" / "AP 2-D Art and Design" / "2020" / "Sample Responses.pdf")

        self._build(questions=False)
        data = self.root / "data"

        master = _read(data / "courses.json")
        self.assertEqual(
            master["courses"],
            [
                {"slug": "AP 2-D Art and Design", "title": "AP 2-D Art and Design"},
                {"slug": "ap-biology", "title": "ap-biology"},
            ],
        )
        self.assertTrue(master["generatedAt"].endswith("Z"))

        idx = _read(data / "course-ap-biology.json")
        self.assertEqual(idx["basePath"], "/courses/ap-biology")
        self.assertEqual([y["year"] for y in idx["years"]], ["2021", "2019"])
        self.assertEqual(
            idx["years"][0]["files"],
            [
                {"name": "Free-Response Questions.pdf", "url": "/courses/ap-biology/2021/Free-Response%20Questions.pdf"},
                {"name": "scoring guidelines.PDF", "url": "/courses/ap-biology/2021/scoring%20guidelines.PDF"},
            ],
        )

        art = _read(data / "course-AP 2-D Art and Design.json")
        self.assertEqual(art["basePath"], "/courses/AP%202-D%20Art%20and%20Design")

    def test_question_indexes(self) -> None:
        _touch(self.root / "courses" / "ap-biology" / "2021" / "a.pdf")
        qdir = self.root / "questions" / "AP Biology"
        _touch(qdir / "2019" / "q3.json", json.dumps({"year": "2019", "question_type": " LAQ ", "units": ["Unit 2"]}))
        _touch(qdir / "2021" / "q1.json", json.dumps({"year": 2021, "question_type": "FRQ", "units": ["Unit 1"]}))
        _touch(qdir / "2021" / "broken.json", "{not json")
        _touch(qdir / "2021" / "nounits.json", json.dumps({"year": 2021}))

        self._build()
        idx = _read(self.root / "data" / "questions-ap-biology.json")

        self.assertEqual(idx["course"], "AP Biology")
        self.assertEqual(idx["question_types"], ["FRQ", "LAQ"])
        self.assertEqual(idx["units"], ["Unit 1", "Unit 2"])
        self.assertEqual([q["file_base"] for q in idx["questions"]], ["q1", "q3"])
        self.assertEqual(idx["questions"][0]["question_pdf"], "/questions/AP Biology/2021/q1.pdf")
        self.assertEqual(idx["questions"][1]["year"], 2019)
        self.assertEqual(idx["questions"][1]["question_type"], "LAQ")
        self.assertIn("Skipping invalid JSON", self.out.getvalue())

    def test_no_questions_folder_is_skipped(self) -> None:
        _touch(self.root / "courses" / "ap-biology" / "2021" / "a.pdf")
        self._build()
        self.assertFalse(any((self.root / "data").glob("questions-*.json")))


class TestParseQuestionRecord(unittest.TestCase):
    def setUp(self) -> None:
        self.root = Path("/site")
        self.path = Path("/site/questions/AP Biology/q1.json")

    def test_minimum_fields(self) -> None:
        self.assertIsNone(parse_question_record({"units": []}, self.path, self.root))
        self.assertIsNone(parse_question_record({"year": 2020, "units": "Unit 1"}, self.path, self.root))
        self.assertIsNone(parse_question_record({"year": "nan", "units": []}, self.path, self.root))
        self.assertIsNone(parse_question_record({"year": "abc", "units": []}, self.path, self.root))
        self.assertIsNone(parse_question_record(["not", "a", "dict"], self.path, self.root))

    def test_blank_type_is_none(self) -> None:
        rec = parse_question_record({"year": 2020, "question_type": "  ", "units": ["U"]}, self.path, self.root)
        self.assertIsNone(rec["question_type"])
        self.assertEqual(rec["question_pdf"], "/questions/AP Biology/q1.pdf")


if __name__ == "__main__":
    unittest.main()
