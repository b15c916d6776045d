"""
End-to-end tests: example snapshot through decoding, weighting and
dependency resolution.
"""

import pytest
from surveyweights.analyzer import analyze_weights
from surveyweights.config import get_profile
from surveyweights.decoder import FormDecodeError
from surveyweights.examples import build_example_page, build_example_snapshot
from surveyweights.pipeline import analyze_form, analyze_page


@pytest.fixture
def form():
    return analyze_form(build_example_snapshot())


def weights_by_id(form):
    return {q.id: q.weights() for q in form.questions if q.has_options}


class TestDecodedStructure:
    """Structure recovered from the example snapshot."""

    def test_title_and_questions(self, form):
        assert form.title == "Campus Life Survey"
        assert [q.id for q in form.questions] == ["101", "102", "104", "105", "106", "108", "109", "110"]

    def test_page_indexes(self, form):
        assert [q.page_index for q in form.questions] == [0, 0, 1, 1, 1, 2, 2, 2]
        assert form.page_count == 3

    def test_entities_decoded(self, form):
        assert form.get_question("108").title == "Q&A sessions are useful"
        assert form.get_question("106").options[1].value == "Bachelor's degree"

    def test_entry_ids_and_required(self, form):
        age = form.get_question("101")
        assert age.entry_id == "2001"
        assert age.required
        assert not form.get_question("104").required
        assert form.get_question("110").entry_id == "2010"


class TestWeights:
    """Weights after the full pipeline."""

    def test_resolved_weights(self, form):
        weights = weights_by_id(form)
        assert weights["101"] == [8, 25, 35, 20, 8, 4]
        assert weights["102"] == [49, 49, 2]
        assert weights["104"] == [56, 11, 12, 21]
        assert weights["105"] == [49, 49, 1, 1]
        assert weights["106"] == [52, 45, 2, 1]
        assert weights["108"] == [5, 10, 20, 45, 20]
        assert weights["109"] == [75, 25]

    def test_free_text_unweighted(self, form):
        paragraph = form.get_question("110")
        assert not paragraph.has_options
        assert paragraph.weights() == []

    def test_every_vector_sums_to_100(self, form):
        for weights in weights_by_id(form).values():
            assert sum(weights) == 100

    def test_metadata(self, form):
        assert form.metadata["template_profile"] == "classic"
        assert form.metadata["dependencies_resolved"] == "true"

    def test_report_is_consistent(self, form):
        report = analyze_weights(form)
        assert report.is_consistent
        assert report.total_questions == 8
        assert report.questions_with_options == 7


class TestOptions:
    """Pipeline switches."""

    def test_without_resolution(self):
        form = analyze_form(build_example_snapshot(), resolve=False)
        weights = weights_by_id(form)
        assert weights["104"] == [10, 35, 40, 15]
        assert weights["105"] == [10, 35, 40, 15]
        assert "dependencies_resolved" not in form.metadata

    def test_balanced_profile(self):
        form = analyze_form(build_example_snapshot(), templates=get_profile("balanced"))
        weights = weights_by_id(form)
        assert weights["101"] == [5, 15, 30, 25, 15, 10]
        assert weights["109"] == [60, 40]
        assert form.metadata["template_profile"] == "balanced"

    def test_malformed_snapshot(self):
        with pytest.raises(FormDecodeError):
            analyze_form({"not": "a list"})


class TestPage:
    def test_analyze_page_matches_snapshot(self):
        from_page = analyze_page(build_example_page())
        from_data = analyze_form(build_example_snapshot())
        assert weights_by_id(from_page) == weights_by_id(from_data)
        assert from_page.title == from_data.title
