"""
Hand-off to an external text generator.

The form is projected to a small JSON payload (id, title, type and
option values) that can be handed to an external tool. The tool's
answer, a JSON list with weights per option and sample answers for
free-text questions, is parsed and merged back by question id, then
by case-insensitive option text.

Malformed answers raise HandoffFormatError; callers should ask the user
to supply the answer again.
"""
from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, List, Optional

from surveyweights.config import WeightTemplates
from surveyweights.model import Question, round_half_up
from surveyweights.weights import calculate_weights

logger = logging.getLogger(__name__)


_CODE_FENCE_RE = re.compile(r"```(?:json)?\s*", re.IGNORECASE)


class HandoffFormatError(ValueError):
    """Raised when a hand-off answer does not have the expected shape."""
    pass


def build_handoff_payload(questions: List[Question]) -> List[Dict[str, Any]]:
    """Project questions to the id/title/type/options payload."""
    payload = []
    for q in questions:
        entry: Dict[str, Any] = {"id": q.id, "title": q.title, "type": q.type.value}
        if q.options:
            entry["options"] = [o.value for o in q.options]
        payload.append(entry)
    return payload


def handoff_payload_to_json(questions: List[Question]) -> str:
    return json.dumps(build_handoff_payload(questions), indent=2, ensure_ascii=False)


def parse_handoff_response(text: str) -> List[Dict[str, Any]]:
    """
    Parse the external tool's answer.

    Markdown code fences around the JSON are tolerated.

    Raises:
        HandoffFormatError: If the text is not a JSON list of objects with an id
    """
    cleaned = _CODE_FENCE_RE.sub("", text or "").replace("```", "").strip()
    if not cleaned:
        raise HandoffFormatError("Hand-off answer is empty")
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise HandoffFormatError(f"Hand-off answer is not valid JSON: {e}")

    if not isinstance(data, list):
        raise HandoffFormatError("Expected a JSON array of questions")
    for position, entry in enumerate(data):
        if not isinstance(entry, dict) or "id" not in entry:
            raise HandoffFormatError(f"Entry {position} is not an object with an 'id'")
        options = entry.get("options")
        if options is not None and not isinstance(options, list):
            raise HandoffFormatError(f"Entry {position}: 'options' must be a list")
        for option in options or []:
            if not isinstance(option, dict) or "value" not in option:
                raise HandoffFormatError(f"Entry {position}: options must be objects with a 'value'")
        samples = entry.get("samples")
        if samples is not None and not isinstance(samples, list):
            raise HandoffFormatError(f"Entry {position}: 'samples' must be a list")
    return data


def _find_entry(question: Question, entries: List[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    for entry in entries:
        entry_id = str(entry.get("id"))
        if entry_id == question.id or entry_id == question.title:
            return entry
    return None


def _weight_of(option: Dict[str, Any]) -> int:
    try:
        return max(0, round_half_up(float(option.get("weight", 0))))
    except (TypeError, ValueError, OverflowError):
        return 0


def merge_handoff(questions: List[Question], entries: List[Dict[str, Any]],
                  templates: Optional[WeightTemplates] = None) -> List[Question]:
    """
    Fold a parsed hand-off answer back into the questions, in place.

    Questions missing from the answer get engine weights. Options
    missing from a matched answer get weight 0.

    Returns:
        The same list, for chaining
    """
    for question in questions:
        entry = _find_entry(question, entries)
        if entry is None:
            logger.debug("No hand-off entry for question %s, using engine weights", question.id)
            if question.has_options:
                question.set_weights(
                    calculate_weights(question.title, [o.value for o in question.options], templates)
                )
            continue

        question.text_samples = [str(s) for s in entry.get("samples") or []]
        answered = {
            str(o["value"]).lower(): _weight_of(o) for o in entry.get("options") or []
        }
        for option in question.options:
            option.weight = answered.get(option.value.lower(), 0)
    return questions
