"""
Tests for the external hand-off projection, parsing and merge.
"""

import json

import pytest
from surveyweights.handoff import (
    HandoffFormatError,
    build_handoff_payload,
    handoff_payload_to_json,
    merge_handoff,
    parse_handoff_response,
)
from surveyweights.model import Option, Question, QuestionType


def sample_questions():
    return [
        Question(id="1", title="Do you drive?", type=QuestionType.MULTIPLE_CHOICE,
                 options=[Option("Yes"), Option("No")]),
        Question(id="2", title="Your name", type=QuestionType.SHORT_ANSWER),
        Question(id="3", title="Favourite colour", type=QuestionType.DROPDOWN,
                 options=[Option("Red"), Option("Green"), Option("Blue")]),
    ]


class TestPayload:
    """Test projecting questions for the hand-off."""

    def test_projection(self):
        payload = build_handoff_payload(sample_questions())
        assert payload[0] == {
            "id": "1", "title": "Do you drive?", "type": "MULTIPLE_CHOICE", "options": ["Yes", "No"],
        }
        assert payload[1] == {"id": "2", "title": "Your name", "type": "SHORT_ANSWER"}

    def test_json(self):
        assert json.loads(handoff_payload_to_json(sample_questions()))[2]["options"] == ["Red", "Green", "Blue"]


class TestParseResponse:
    """Test parsing the external answer."""

    def test_plain_json(self):
        entries = parse_handoff_response('[{"id": "1", "options": [{"value": "Yes", "weight": 60}]}]')
        assert entries[0]["id"] == "1"

    def test_code_fences_stripped(self):
        text = '```json\n[{"id": "2", "samples": ["Ana", "Raj"]}]\n```'
        assert parse_handoff_response(text) == [{"id": "2", "samples": ["Ana", "Raj"]}]

    @pytest.mark.parametrize("text", [
        "",
        "not json",
        '{"id": "1"}',
        '["text"]',
        '[{"title": "no id"}]',
        '[{"id": "1", "options": "Yes"}]',
        '[{"id": "1", "options": ["Yes"]}]',
        '[{"id": "1", "samples": "Ana"}]',
    ])
    def test_format_mismatch(self, text):
        with pytest.raises(HandoffFormatError):
            parse_handoff_response(text)

    def test_format_error_is_value_error(self):
        with pytest.raises(ValueError):
            parse_handoff_response("[")


class TestMerge:
    """Test folding an answer back into the questions."""

    def test_merge_by_id_and_case_insensitive_text(self):
        questions = sample_questions()
        entries = [
            {"id": "1", "options": [{"value": "YES", "weight": 62}, {"value": "no", "weight": 38}]},
            {"id": "2", "samples": ["Ana", "Raj"]},
            {"id": "3", "options": [{"value": "red", "weight": 70}, {"value": "Blue", "weight": 30}]},
        ]
        merge_handoff(questions, entries)
        assert questions[0].weights() == [62, 38]
        assert questions[1].text_samples == ["Ana", "Raj"]
        assert questions[2].weights() == [70, 0, 30]

    def test_match_by_title(self):
        questions = sample_questions()
        merge_handoff(questions, [{"id": "Do you drive?", "options": [{"value": "Yes", "weight": 55},
                                                                     {"value": "No", "weight": 45}]}])
        assert questions[0].weights() == [55, 45]

    def test_unmatched_question_gets_engine_weights(self):
        questions = sample_questions()
        merge_handoff(questions, [])
        assert questions[0].weights() == [75, 25]
        assert questions[2].weights() == [20, 55, 25]
        assert questions[1].text_samples == []

    def test_bad_weight_values(self):
        questions = sample_questions()
        merge_handoff(questions, [{"id": "1", "options": [{"value": "Yes", "weight": "lots"},
                                                          {"value": "No", "weight": 40.5}]}])
        assert questions[0].weights() == [0, 41]
