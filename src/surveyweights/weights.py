"""
Demographic Weight Engine.

Assigns an initial integer weight vector (summing to 100) to every
question from its title and option text.

Rules are tried in order and the first one that applies wins:
    1. Gender questions          49 each, 2 for "other"/"prefer not to say"
    2. Likert scales             fixed positively-skewed template
    3. Negative options          5 / 10 for negative sentiment, rest spread
    4. Named patterns            template keyed by a title keyword
    5. Binary yes/no             skewed two-option template
    6. Default bell curves       3, 4 and 5 options
    7. Uniform                   everything else

Whatever rule fired, the vector is corrected to sum to exactly 100 by
adjusting the last weight.
"""

import logging
from typing import List, Optional, Sequence

from surveyweights import classifiers as cls
from surveyweights.classifiers import DEFAULT_CLASSIFIER, TextClassifier
from surveyweights.config import WeightTemplates, get_profile
from surveyweights.model import WEIGHT_TOTAL, Option, Question, round_half_up

logger = logging.getLogger(__name__)


GENDER_BASE = 49
GENDER_MINOR = 2
STRONG_NEGATIVE_WEIGHT = 5
NEGATIVE_WEIGHT = 10


def _gender_weights(options: Sequence[str], classifier: TextClassifier) -> List[int]:
    """
    Scale the 49/2 base scores to 100.

    Every weight stays at least 1; the rounding residual is settled on
    the largest main option so minor options are never zeroed.
    """
    minor = [classifier.matches(cls.MINOR_CHOICE, o) for o in options]
    base = [GENDER_MINOR if is_minor else GENDER_BASE for is_minor in minor]
    total = sum(base)
    weights = [max(1, round_half_up(w * WEIGHT_TOTAL / total)) for w in base]

    diff = WEIGHT_TOTAL - sum(weights)
    if diff:
        candidates = [i for i, is_minor in enumerate(minor) if not is_minor] or list(range(len(weights)))
        largest = max(candidates, key=lambda i: (weights[i], -i))
        weights[largest] += diff
    return weights


def _negative_weights(options: Sequence[str], classifier: TextClassifier) -> Optional[List[int]]:
    """Penalize negative-sentiment options; None if the rule does not apply."""
    weights = [0] * len(options)
    remaining = []
    for i, option in enumerate(options):
        if classifier.matches(cls.STRONG_NEGATIVE, option):
            weights[i] = STRONG_NEGATIVE_WEIGHT
        elif classifier.matches(cls.NEGATIVE, option):
            weights[i] = NEGATIVE_WEIGHT
        else:
            remaining.append(i)

    assigned = sum(weights)
    if not remaining or len(remaining) == len(options) or assigned >= WEIGHT_TOTAL:
        return None

    rest = WEIGHT_TOTAL - assigned
    chunk = rest // len(remaining)
    for idx in remaining[:-1]:
        weights[idx] = chunk
    weights[remaining[-1]] = rest - chunk * (len(remaining) - 1)
    return weights


def uniform_weights(count: int) -> List[int]:
    """Split 100 evenly; the last option absorbs the remainder."""
    if count <= 0:
        return []
    chunk = WEIGHT_TOTAL // count
    return [chunk] * (count - 1) + [WEIGHT_TOTAL - chunk * (count - 1)]


def calculate_weights(title: str, options: Sequence[str],
                      templates: Optional[WeightTemplates] = None,
                      classifier: Optional[TextClassifier] = None) -> List[int]:
    """
    Compute the initial weight vector for one question.

    Args:
        title: Question title
        options: Option display texts, in order
        templates: Template profile (defaults to the "classic" profile)
        classifier: Keyword classifier (defaults to DEFAULT_CLASSIFIER)

    Returns:
        Integer weights, one per option, summing to 100
        (empty if there are no options)
    """
    count = len(options)
    if count == 0:
        return []
    templates = templates or get_profile()
    classifier = classifier or DEFAULT_CLASSIFIER

    weights = None
    rule = None

    if classifier.matches(cls.GENDER, title):
        weights, rule = _gender_weights(options, classifier), "gender"

    if weights is None and any(classifier.matches(cls.LIKERT, o) for o in options):
        if count in templates.likert:
            weights, rule = list(templates.likert[count]), "likert"

    if weights is None:
        negative = _negative_weights(options, classifier)
        if negative is not None:
            weights, rule = negative, "negative"

    if weights is None:
        pattern = templates.pattern_for(title, count)
        if pattern is not None:
            weights, rule = pattern, "named_pattern"

    if weights is None and count == 2 and classifier.matches(cls.BINARY, options[0]):
        weights, rule = list(templates.binary), "binary"

    if weights is None and count in templates.bell_curves:
        weights, rule = list(templates.bell_curves[count]), "bell_curve"

    if weights is None:
        weights, rule = uniform_weights(count), "uniform"

    drift = WEIGHT_TOTAL - sum(weights)
    if drift:
        weights[-1] += drift

    logger.debug("Weighted %r with %s rule: %s", title, rule, weights)
    return weights


def assign_weights(questions: List[Question],
                   templates: Optional[WeightTemplates] = None,
                   classifier: Optional[TextClassifier] = None) -> List[Question]:
    """
    Run the weight engine over every question, writing weights in place.

    Questions without options are left untouched.

    Returns:
        The same list, for chaining
    """
    templates = templates or get_profile()
    for question in questions:
        if not question.has_options:
            continue
        question.set_weights(
            calculate_weights(question.title, [o.value for o in question.options], templates, classifier)
        )
    return questions


def balance_evenly(options: Sequence[Option]) -> List[Option]:
    """
    Reset a weight vector to an even split.

    The first option absorbs the remainder. Returns new Option objects.
    """
    if not options:
        return []
    chunk = WEIGHT_TOTAL // len(options)
    remainder = WEIGHT_TOTAL - chunk * len(options)
    return [
        Option(value=o.value, weight=chunk + (remainder if i == 0 else 0))
        for i, o in enumerate(options)
    ]
