"""
Tests for serialization and deserialization of form model objects.

These tests ensure lossless JSON/YAML round-trip using the explicit
serialization functions in `surveyweights.serialization`.
"""

from surveyweights.model import FormModel, Option, Question, QuestionType
from surveyweights.serialization import (
    form_to_dict,
    form_from_dict,
    form_to_json,
    form_from_json,
    form_to_yaml,
    form_from_yaml,
    question_from_dict,
)


def build_sample_form() -> FormModel:
    form = FormModel(title="Serialization Test Form")
    form.questions = [
        Question(
            id="101",
            entry_id="2001",
            title="Café visits per week?",
            type=QuestionType.DROPDOWN,
            options=[Option("None", 20), Option("1-2", 50), Option("3+", 30)],
            required=True,
        ),
        Question(
            id="102",
            entry_id="2002",
            title="Anything else?",
            type=QuestionType.PARAGRAPH,
            page_index=1,
            text_samples=["No", "Great coffee"],
        ),
        Question(id="103", title="Unweighted", options=[Option("A"), Option("B")]),
    ]
    form.metadata = {"template_profile": "classic"}
    return form


def test_json_roundtrip():
    form = build_sample_form()
    before = form_to_dict(form)
    restored = form_from_json(form_to_json(form))
    after = form_to_dict(restored)
    assert before == after


def test_yaml_roundtrip():
    form = build_sample_form()
    before = form_to_dict(form)
    restored = form_from_yaml(form_to_yaml(form))
    after = form_to_dict(restored)
    assert before == after


def test_dict_shape():
    d = form_to_dict(build_sample_form())
    assert d["questions"][0]["type"] == "DROPDOWN"
    assert d["questions"][0]["options"][1] == {"value": "1-2", "weight": 50}
    assert d["questions"][2]["options"][0]["weight"] is None


def test_question_defaults_from_minimal_dict():
    q = question_from_dict({"id": "9"})
    assert q.type == QuestionType.UNKNOWN
    assert q.options == []
    assert q.required is False
    assert q.page_index == 0


def test_restored_form_is_independent():
    form = build_sample_form()
    restored = form_from_dict(form_to_dict(form))
    restored.questions[0].options[0].weight = 99
    assert form.questions[0].options[0].weight == 20
