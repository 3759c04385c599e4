import unittest

from apfrq.facets import extract_question_facets, extract_year_facets
from apfrq.model import CourseIndex, QuestionIndex


class TestQuestionFacets(unittest.TestCase):
    def test_types_are_unique_sorted_and_non_empty(self) -> None:
        index = QuestionIndex.from_dict(
            {
                "units": ["Unit 2", "Unit 1"],
                "questions": [
                    {"year": 2021, "question_type": "LAQ", "units": []},
                    {"year": 2021, "question_type": " FRQ", "units": []},
                    {"year": 2020, "question_type": "", "units": []},
                    {"year": 2019, "question_type": "FRQ", "units": []},
                ],
            }
        )
        facets = extract_question_facets(index)
        self.assertEqual(facets.question_types, ["FRQ", "LAQ"])
        # curated order of the index is kept
        self.assertEqual(facets.units, ["Unit 2", "Unit 1"])
        self.assertTrue(facets.type_filter_available)

    def test_no_types_means_no_type_filter(self) -> None:
        index = QuestionIndex.from_dict({"questions": [{"year": 2021, "question_type": None, "units": []}]})
        self.assertFalse(extract_question_facets(index).type_filter_available)


class TestYearFacets(unittest.TestCase):
    def test_years_desc_and_categories_in_canonical_order(self) -> None:
        index = CourseIndex.from_dict(
            {
                "title": "AP Biology",
                "years": [
                    {"year": "2019", "files": [{"name": "Sample Responses Q1.pdf", "url": "/a"}]},
                    {"year": "2021", "files": [{"name": "Free-Response Questions.pdf", "url": "/b"}]},
                    {"year": "2020", "files": []},
                ],
            },
            slug="ap-biology",
        )
        facets = extract_year_facets(index)
        self.assertEqual(facets.years, ["2021", "2020", "2019"])
        self.assertEqual(facets.categories, ["frq", "sample-responses"])


if __name__ == "__main__":
    unittest.main()
