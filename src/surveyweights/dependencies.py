"""
Cross-Question Dependency Resolver.

Adjusts the weight vectors of related questions so the synthetic
answers stay internally consistent: a form whose audience includes
under-18s should not be dominated by working professionals, high
incomes or post-graduate degrees.

Groups are detected from question titles (age, profession, income,
education); the first question with options in each group is used.

Rules:
    Age -> Profession     (under-18 option present)
        working x0.3 (min 2), student >= 40,
        retired x0.15 (min 1) when the age mass is young
    Age -> Income         (under-18 option present)
        high income x0.1 (min 1), low income >= 35
    Profession -> Income  (student mass > 35)
        high income x0.2 (min 1), low income >= 30
    Age -> Education      (under-18 option present)
        post-graduate x0.05 (min 1), school >= 40

Each adjusted vector is renormalized to sum to 100. Options that a rule
scaled down keep their suppressed weight; the remaining options are
rescaled proportionally to fill the rest.

This stage is optional and only runs when explicitly invoked.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Set

from surveyweights import classifiers as cls
from surveyweights.classifiers import DEFAULT_CLASSIFIER, TextClassifier
from surveyweights.model import WEIGHT_TOTAL, Question, round_half_up

logger = logging.getLogger(__name__)


YOUNG_MASS_THRESHOLD = 40
STUDENT_MASS_THRESHOLD = 35


@dataclass
class AgeProfile:
    """Summary of how the age question's weight mass is distributed."""
    under_18_weight: int = 0
    young_adult_weight: int = 0
    has_under_18: bool = False

    @property
    def dominant_age_is_young(self) -> bool:
        return self.under_18_weight + self.young_adult_weight > YOUNG_MASS_THRESHOLD


def normalize_weights(weights: Sequence[int]) -> List[int]:
    """
    Scale a vector proportionally to sum to 100.

    Every entry is at least 1; the rounding residual goes to the
    largest entry. An all-zero vector becomes an even split.
    """
    if not weights:
        return []
    total = sum(weights)
    count = len(weights)
    if total == 0:
        equal = WEIGHT_TOTAL // count
        remainder = WEIGHT_TOTAL - equal * count
        return [equal + (1 if i < remainder else 0) for i in range(count)]

    scaled = [max(1, round_half_up(w * WEIGHT_TOTAL / total)) for w in weights]
    diff = WEIGHT_TOTAL - sum(scaled)
    if diff:
        largest = scaled.index(max(scaled))
        scaled[largest] += diff
    return scaled


def _renormalize(weights: List[int], pinned: Set[int]) -> List[int]:
    """Renormalize, holding suppressed entries at their value."""
    free = [i for i in range(len(weights)) if i not in pinned]
    pinned_total = sum(weights[i] for i in pinned)
    if not pinned or not free or pinned_total >= WEIGHT_TOTAL - len(free):
        return normalize_weights(weights)

    room = WEIGHT_TOTAL - pinned_total
    free_total = sum(weights[i] for i in free)
    result = list(weights)
    for i in free:
        if free_total > 0:
            result[i] = max(1, round_half_up(weights[i] * room / free_total))
        else:
            result[i] = max(1, room // len(free))

    diff = WEIGHT_TOTAL - sum(result)
    if diff:
        largest = max(free, key=lambda i: (result[i], -i))
        result[largest] += diff
    return result


def _age_profile(question: Question, classifier: TextClassifier) -> AgeProfile:
    profile = AgeProfile()
    for option in question.options:
        weight = option.weight or 0
        if classifier.matches(cls.UNDER_18, option.value):
            profile.has_under_18 = True
            profile.under_18_weight += weight
        if classifier.matches(cls.YOUNG_ADULT, option.value):
            profile.young_adult_weight += weight
    return profile


def _category_mass(question: Question, category: str, classifier: TextClassifier) -> int:
    return sum(o.weight or 0 for o in question.options if classifier.matches(category, o.value))


def _adjust(question: Question, classifier: TextClassifier,
            suppress: Dict[str, tuple], boost: Dict[str, int]) -> None:
    """
    Apply suppression multipliers and boost floors, then renormalize.

    Args:
        suppress: option category -> (multiplier, floor)
        boost: option category -> minimum weight
    """
    weights = [o.weight or 0 for o in question.options]
    pinned: Set[int] = set()
    for i, option in enumerate(question.options):
        for category, (factor, floor) in suppress.items():
            if classifier.matches(category, option.value):
                weights[i] = max(floor, round_half_up(weights[i] * factor))
                pinned.add(i)
        for category, minimum in boost.items():
            if classifier.matches(category, option.value):
                weights[i] = max(weights[i], minimum)
                pinned.discard(i)
    question.set_weights(_renormalize(weights, pinned))


def find_group(questions: Sequence[Question], category: str,
               classifier: Optional[TextClassifier] = None) -> Optional[Question]:
    """First question with options whose title belongs to a title category."""
    classifier = classifier or DEFAULT_CLASSIFIER
    for question in questions:
        if question.has_options and classifier.matches(category, question.title):
            return question
    return None


def resolve_dependencies(questions: List[Question],
                         classifier: Optional[TextClassifier] = None) -> List[Question]:
    """
    Apply the cross-question consistency rules in place.

    The age question must be weighted for age-driven rules to run.
    Questions outside the detected groups are not touched.

    Returns:
        The same list, for chaining
    """
    classifier = classifier or DEFAULT_CLASSIFIER
    age_q = find_group(questions, cls.AGE, classifier)
    prof_q = find_group(questions, cls.PROFESSION, classifier)
    income_q = find_group(questions, cls.INCOME, classifier)
    edu_q = find_group(questions, cls.EDUCATION, classifier)

    age = AgeProfile()
    if age_q is not None and age_q.is_weighted:
        age = _age_profile(age_q, classifier)

    if prof_q is not None and prof_q is not age_q and age.has_under_18:
        suppress = {cls.WORKING: (0.3, 2)}
        if age.dominant_age_is_young:
            suppress[cls.RETIRED] = (0.15, 1)
        _adjust(prof_q, classifier, suppress, {cls.STUDENT: 40})
        logger.debug("Adjusted profession question %s for an under-18 audience", prof_q.id)

    if income_q is not None and income_q is not age_q:
        if age.has_under_18:
            _adjust(income_q, classifier, {cls.HIGH_INCOME: (0.1, 1)}, {cls.LOW_INCOME: 35})
            logger.debug("Adjusted income question %s for an under-18 audience", income_q.id)
        if prof_q is not None and prof_q is not income_q:
            student_mass = _category_mass(prof_q, cls.STUDENT, classifier)
            if student_mass > STUDENT_MASS_THRESHOLD:
                _adjust(income_q, classifier, {cls.HIGH_INCOME: (0.2, 1)}, {cls.LOW_INCOME: 30})
                logger.debug("Adjusted income question %s for a student-heavy audience", income_q.id)

    if edu_q is not None and edu_q is not age_q and age.has_under_18:
        _adjust(edu_q, classifier, {cls.POST_GRADUATE: (0.05, 1)}, {cls.SCHOOL: 40})
        logger.debug("Adjusted education question %s for an under-18 audience", edu_q.id)

    return questions
