"""
Form Decoder (Layer 1: Raw Page Data → Form Model).

Converts the positional nested structure a hosted form page embeds
into FormModel objects.

Raw layout (reverse-engineered, unversioned):
    root[1][8] or root[3]    form title candidates
    root[1][1]               question entries
    entry                    [id, title, ?, type_code, option_field, ...]

Option fields come in several shapes. Each supported shape is an
OptionShape member with its own predicate, tried in a fixed order.

A malformed entry is skipped, never raised.
Only a snapshot without the question-list position is fatal.
"""

import json
import logging
import re
from enum import Enum
from typing import Any, List, Optional

from surveyweights.model import FormModel, Option, Question, QuestionType

logger = logging.getLogger(__name__)


DEFAULT_TITLE = "Untitled Form"
PAGE_BREAK_CODE = 8

TYPE_CODES = {
    0: QuestionType.SHORT_ANSWER,
    1: QuestionType.PARAGRAPH,
    2: QuestionType.MULTIPLE_CHOICE,
    3: QuestionType.DROPDOWN,
    4: QuestionType.CHECKBOXES,
    5: QuestionType.LINEAR_SCALE,
    7: QuestionType.GRID,
    9: QuestionType.DATE,
    10: QuestionType.TIME,
}

_HTML_ENTITIES = [
    ("&amp;", "&"),
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&quot;", '"'),
    ("&#39;", "'"),
    ("&nbsp;", " "),
]

_LOAD_DATA_RE = re.compile(r"var\s+FB_PUBLIC_LOAD_DATA_\s*=\s*(\[.+?\])\s*;", re.DOTALL)
_WIZ_DATA_RE = re.compile(r"window\.WIZ_global_data\s*=\s*(\{.+?\})\s*;", re.DOTALL)


class FormDecodeError(Exception):
    """Raised when the top-level snapshot is missing or unrecognized."""
    pass


class OptionShape(Enum):
    """Known layouts of a question's option field."""
    DIRECT = "direct"              # [[text, ...], [text, ...]]
    NESTED = "nested"              # [[[text, ...], [text, ...]]]
    UNDER_SECOND = "under_second"  # [[entry_id, [[text, ...], ...], required]]
    NONE = "none"


def decode_html_entities(text: Optional[str]) -> str:
    """Unescape the handful of HTML entities the page leaves in text."""
    if not text:
        return ""
    for entity, replacement in _HTML_ENTITIES:
        text = text.replace(entity, replacement)
    return text


def _at(value: Any, *path: int) -> Any:
    """Follow a positional path, returning None as soon as a step is missing."""
    for index in path:
        if not isinstance(value, list) or index >= len(value):
            return None
        value = value[index]
    return value


def _is_direct(field: Any) -> bool:
    first = _at(field, 0)
    return isinstance(first, list) and len(first) > 0 and isinstance(first[0], str)


def _is_nested(field: Any) -> bool:
    return isinstance(_at(field, 0, 0), list)


def _is_under_second(field: Any) -> bool:
    return isinstance(_at(field, 0, 1), list)


_SHAPE_PREDICATES = [
    (OptionShape.DIRECT, _is_direct),
    (OptionShape.NESTED, _is_nested),
    (OptionShape.UNDER_SECOND, _is_under_second),
]


def detect_option_shape(field: Any) -> OptionShape:
    """
    Classify an option field.

    Predicates are tried in fixed priority order; the first match wins.

    Args:
        field: The raw option field (entry[4])

    Returns:
        OptionShape member (NONE if nothing matched)
    """
    if not isinstance(field, list) or not field:
        return OptionShape.NONE
    for shape, predicate in _SHAPE_PREDICATES:
        if predicate(field):
            return shape
    return OptionShape.NONE


def _option_tuples(field: Any, shape: OptionShape) -> List[Any]:
    if shape is OptionShape.DIRECT:
        return field
    if shape is OptionShape.NESTED:
        return field[0]
    if shape is OptionShape.UNDER_SECOND:
        return field[0][1]
    return []


def extract_options(field: Any) -> List[Option]:
    """
    Collect options from an option field of any supported shape.

    Tuples whose first element is not non-empty text are dropped.
    """
    options = []
    for raw in _option_tuples(field, detect_option_shape(field)):
        text = _at(raw, 0)
        if isinstance(text, str) and text != "":
            options.append(Option(value=decode_html_entities(text)))
    return options


def _entry_id(entry: List[Any], question_id: str, shape: OptionShape) -> str:
    # In the DIRECT shape field[0][0] is option text, not an identifier
    if shape is OptionShape.DIRECT:
        return question_id
    candidate = _at(entry, 4, 0, 0)
    if isinstance(candidate, bool) or not isinstance(candidate, (int, str)):
        return question_id
    if candidate == "" or candidate == 0:
        return question_id
    return str(candidate)


def _resolve_title(data: List[Any], fallback_title: str) -> str:
    title = _at(data, 1, 8)
    if not isinstance(title, str) or not title or title == DEFAULT_TITLE:
        secondary = _at(data, 3)
        if isinstance(secondary, str) and secondary:
            title = secondary
    if (not isinstance(title, str) or not title or title == DEFAULT_TITLE) and fallback_title:
        title = fallback_title
    if not isinstance(title, str) or not title:
        title = DEFAULT_TITLE
    return decode_html_entities(title)


def _decode_entry(entry: Any, page_index: int) -> Optional[Question]:
    """Decode one raw question entry, or return None if it must be skipped."""
    raw_id = _at(entry, 0)
    raw_title = _at(entry, 1)
    if raw_id is None or not isinstance(raw_title, str) or not raw_title.strip():
        return None

    type_code = _at(entry, 3)
    question_type = TYPE_CODES.get(type_code, QuestionType.UNKNOWN)
    if question_type is QuestionType.UNKNOWN:
        logger.debug("Unrecognized type code %r for entry %r", type_code, raw_id)

    field = _at(entry, 4)
    shape = detect_option_shape(field)
    question_id = str(raw_id)

    return Question(
        id=question_id,
        entry_id=_entry_id(entry, question_id, shape),
        title=decode_html_entities(raw_title).strip(),
        type=question_type,
        options=extract_options(field),
        required=_at(field, 0, 2) == 1,
        page_index=page_index,
    )


def decode_form(data: Any, fallback_title: str = "") -> FormModel:
    """
    Decode a raw form snapshot into a FormModel.

    Args:
        data: The nested positional structure embedded in the page
        fallback_title: Title to use when the snapshot carries none

    Returns:
        FormModel with title and questions (page breaks consumed)

    Raises:
        FormDecodeError: If the snapshot is absent or has no root[1] list
    """
    if not isinstance(data, list) or not isinstance(_at(data, 1), list):
        raise FormDecodeError("Snapshot does not contain the form section at root[1]")

    title = _resolve_title(data, fallback_title)
    raw_questions = _at(data, 1, 1)
    if not isinstance(raw_questions, list):
        logger.debug("No question list at root[1][1]")
        return FormModel(title=title)

    questions = []
    page_index = 0
    for position, entry in enumerate(raw_questions):
        if not entry:
            continue
        if _at(entry, 3) == PAGE_BREAK_CODE:
            page_index += 1
            continue
        question = _decode_entry(entry, page_index)
        if question is None:
            logger.debug("Skipping malformed question entry at position %d", position)
            continue
        questions.append(question)

    logger.debug("Decoded %d questions across %d pages", len(questions), page_index + 1)
    return FormModel(title=title, questions=questions)


def extract_form_data(html: str) -> List[Any]:
    """
    Pull the raw form snapshot out of a form page's HTML.

    Looks for the FB_PUBLIC_LOAD_DATA_ script variable first, then for
    a suitable list inside WIZ_global_data.

    Raises:
        FormDecodeError: If no snapshot is found or it is not valid JSON
    """
    match = _LOAD_DATA_RE.search(html or "")
    if match:
        try:
            return json.loads(match.group(1))
        except json.JSONDecodeError as e:
            raise FormDecodeError(f"FB_PUBLIC_LOAD_DATA_ is not valid JSON: {e}")

    wiz_match = _WIZ_DATA_RE.search(html or "")
    if wiz_match:
        try:
            wiz_data = json.loads(wiz_match.group(1))
        except json.JSONDecodeError as e:
            raise FormDecodeError(f"WIZ_global_data is not valid JSON: {e}")
        found = None
        for value in wiz_data.values():
            if isinstance(value, list) and len(value) > 1 and isinstance(value[1], list) and len(value[1]) > 1:
                found = value
        if found is not None:
            return found

    raise FormDecodeError("No form data found in page")


def decode_page(html: str, fallback_title: str = "") -> FormModel:
    """Extract and decode the form embedded in a page."""
    return decode_form(extract_form_data(html), fallback_title=fallback_title)


__all__ = [
    "FormDecodeError",
    "OptionShape",
    "decode_form",
    "decode_page",
    "decode_html_entities",
    "detect_option_shape",
    "extract_form_data",
    "extract_options",
]
