"""
Core Form Model Objects

Defines the fundamental data structures of the canonical form model.

These are pure data classes representing:
    - Question types (closed enumeration)
    - Options (answer choices with an optional weight)
    - Questions (one decoded form item)
    - Forms (root container)

ARCHITECTURAL RULE:
    These objects:
        - Know nothing about the raw page format
        - Are structurally immutable after decoding (ids, titles, option text)
        - Only carry mutable weights
        - Are fully serializable
"""

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Dict, Sequence


WEIGHT_TOTAL = 100


def round_half_up(value: float) -> int:
    """Round a non-negative value to the nearest integer, halves going up."""
    return int(math.floor(value + 0.5))


class QuestionType(Enum):
    """
    Question types a decoded form item can have.

    Unknown discriminators map to UNKNOWN instead of failing.
    """

    SHORT_ANSWER = "SHORT_ANSWER"
    PARAGRAPH = "PARAGRAPH"
    MULTIPLE_CHOICE = "MULTIPLE_CHOICE"
    CHECKBOXES = "CHECKBOXES"
    DROPDOWN = "DROPDOWN"
    LINEAR_SCALE = "LINEAR_SCALE"
    GRID = "GRID"
    DATE = "DATE"
    TIME = "TIME"
    UNKNOWN = "UNKNOWN"


@dataclass
class Option:
    """
    A single answer choice.

    Properties:
        value:
            Decoded display text (never empty; empty entries are
            dropped while decoding)

        weight:
            Integer percentage in [0, 100].
            None until the weight engine or the redistribution
            algorithm has run.
    """

    value: str
    weight: Optional[int] = None


@dataclass
class Question:
    """
    Represents a single decoded form question.

    Properties:
        id:
            Stable identifier taken from the decoded structure

        entry_id:
            Secondary identifier used to map answers back to the
            hosted form's submission fields

        title:
            Entity-unescaped display text

        type:
            QuestionType enum

        options:
            Answer choices in source order (empty for free-text types)

        required:
            Whether the form marks the question as mandatory

        page_index:
            Zero-based page/section number

        text_samples:
            Sample free-text answers supplied by an external hand-off

    INVARIANT (weight sum):
        Once weighted, the option weights of a question with at least
        one option sum to exactly 100.
    """

    id: str
    title: str
    type: QuestionType = QuestionType.UNKNOWN
    options: List[Option] = field(default_factory=list)
    required: bool = False
    page_index: int = 0
    entry_id: str = ""
    text_samples: List[str] = field(default_factory=list)

    @property
    def has_options(self) -> bool:
        return len(self.options) > 0

    @property
    def is_weighted(self) -> bool:
        """True when every option carries a weight."""
        return self.has_options and all(o.weight is not None for o in self.options)

    def weights(self) -> List[Optional[int]]:
        """Return the current weight vector in option order."""
        return [o.weight for o in self.options]

    def set_weights(self, weights: Sequence[int]) -> None:
        """
        Write a weight vector onto the options in place.

        Raises:
            ValueError: If the vector length does not match the option count
        """
        if len(weights) != len(self.options):
            raise ValueError(
                f"Question {self.id} has {len(self.options)} options, "
                f"got {len(weights)} weights"
            )
        for option, weight in zip(self.options, weights):
            option.weight = int(weight)


@dataclass
class FormModel:
    """
    Root container for one decoded form snapshot.

    A fresh decode produces a fresh FormModel; questions are never
    added or removed afterwards.

    Properties:
        title:
            Resolved form title

        questions:
            Decoded questions in source order

        metadata:
            Arbitrary key-value pairs (use sparingly)
            Example: {"template_profile": "classic"}
    """

    title: str
    questions: List[Question] = field(default_factory=list)
    metadata: Dict[str, str] = field(default_factory=dict)

    def get_question(self, question_id: str) -> Optional[Question]:
        """
        Retrieve a question by ID.

        Args:
            question_id: Question identifier

        Returns:
            Question object or None if not found
        """
        for question in self.questions:
            if question.id == question_id:
                return question
        return None

    @property
    def page_count(self) -> int:
        if not self.questions:
            return 0
        return max(q.page_index for q in self.questions) + 1
