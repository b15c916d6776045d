"""
Weight template configuration.

Templates are fixed weight vectors the engine hands out for recognized
question categories and option counts. They encode a deliberate
positivity skew, so they are data: two built-in profiles ship with the
package and either can be overridden from YAML.

YAML layout (every key optional):

    profile: balanced          # base profile to merge over
    named_patterns:
      AGE: [5, 15, 30, 25, 15, 10]
    likert:
      5: [5, 10, 20, 45, 20]
    bell_curves:
      3: [25, 50, 25]
    binary: [60, 40]
"""
from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any, Dict, List

import yaml

from surveyweights.model import WEIGHT_TOTAL


class TemplateConfigError(ValueError):
    """Raised when a template configuration is invalid."""
    pass


@dataclass
class WeightTemplates:
    """
    One complete set of weight templates.

    Properties:
        name: Profile name (for reporting)
        named_patterns: Title keyword (upper-case) -> template, checked in order
        likert: Option count -> Likert template
        bell_curves: Option count -> default skewed template
        binary: Template for two-option yes/no questions
    """

    name: str
    named_patterns: Dict[str, List[int]] = field(default_factory=dict)
    likert: Dict[int, List[int]] = field(default_factory=dict)
    bell_curves: Dict[int, List[int]] = field(default_factory=dict)
    binary: List[int] = field(default_factory=lambda: [50, 50])

    def pattern_for(self, title: str, option_count: int) -> List[int] | None:
        """First named pattern whose keyword is in the title and whose length fits."""
        upper = title.upper()
        for keyword, template in self.named_patterns.items():
            if keyword in upper:
                if len(template) == option_count:
                    return list(template)
                return None
        return None


_LIKERT = {
    5: [5, 10, 20, 45, 20],
    4: [5, 15, 50, 30],
    7: [3, 5, 10, 22, 35, 15, 10],
}

PROFILES: Dict[str, WeightTemplates] = {
    "classic": WeightTemplates(
        name="classic",
        named_patterns={
            "AGE": [8, 25, 35, 20, 8, 4],
            "YEAR": [5, 10, 45, 30, 8, 2],
            "SATISFACTION": [3, 7, 15, 45, 30],
            "RATE": [2, 8, 20, 45, 25],
            "LIKELY": [5, 10, 25, 40, 20],
            "INCOME": [20, 30, 30, 15, 5],
            "EDUCATION": [5, 25, 40, 20, 10],
        },
        likert=_LIKERT,
        bell_curves={5: [5, 15, 40, 30, 10], 4: [10, 35, 40, 15], 3: [20, 55, 25]},
        binary=[75, 25],
    ),
    "balanced": WeightTemplates(
        name="balanced",
        named_patterns={
            "AGE": [5, 15, 30, 25, 15, 10],
            "YEAR": [5, 10, 40, 30, 10, 5],
            "SATISFACTION": [5, 10, 15, 40, 30],
            "RATE": [5, 5, 20, 40, 30],
            "LIKELY": [10, 10, 20, 30, 30],
            "INCOME": [15, 25, 30, 20, 10],
            "EDUCATION": [5, 20, 45, 20, 10],
        },
        likert=_LIKERT,
        bell_curves={5: [10, 20, 40, 20, 10], 4: [15, 35, 35, 15], 3: [25, 50, 25]},
        binary=[60, 40],
    ),
}

DEFAULT_PROFILE = "classic"


def get_profile(name: str = DEFAULT_PROFILE) -> WeightTemplates:
    """
    Return a private copy of a built-in profile.

    Raises:
        TemplateConfigError: If the profile name is unknown
    """
    if name not in PROFILES:
        raise TemplateConfigError(f"Unknown template profile: {name!r} (known: {sorted(PROFILES)})")
    return copy.deepcopy(PROFILES[name])


def _check_vector(label: str, vector: Any, expected_length: int | None = None) -> List[int]:
    if not isinstance(vector, list) or not vector:
        raise TemplateConfigError(f"{label}: expected a non-empty list of integers")
    for w in vector:
        if isinstance(w, bool) or not isinstance(w, int) or w < 0:
            raise TemplateConfigError(f"{label}: weights must be non-negative integers, got {w!r}")
    if sum(vector) != WEIGHT_TOTAL:
        raise TemplateConfigError(f"{label}: weights sum to {sum(vector)}, expected {WEIGHT_TOTAL}")
    if expected_length is not None and len(vector) != expected_length:
        raise TemplateConfigError(f"{label}: expected {expected_length} weights, got {len(vector)}")
    return list(vector)


def _counted_templates(section: str, raw: Any) -> Dict[int, List[int]]:
    if not isinstance(raw, dict):
        raise TemplateConfigError(f"{section}: expected a mapping of option count to weights")
    result = {}
    for key, vector in raw.items():
        try:
            count = int(key)
        except (TypeError, ValueError):
            raise TemplateConfigError(f"{section}: option count {key!r} is not an integer")
        result[count] = _check_vector(f"{section}[{count}]", vector, expected_length=count)
    return result


def templates_from_dict(data: Dict[str, Any] | None) -> WeightTemplates:
    """
    Build templates from a plain dict, merged over a base profile.

    Raises:
        TemplateConfigError: If any section is malformed
    """
    data = data or {}
    if not isinstance(data, dict):
        raise TemplateConfigError("Template configuration must be a mapping")

    templates = get_profile(data.get("profile", DEFAULT_PROFILE))

    if "named_patterns" in data:
        raw = data["named_patterns"]
        if not isinstance(raw, dict):
            raise TemplateConfigError("named_patterns: expected a mapping of keyword to weights")
        for keyword, vector in raw.items():
            templates.named_patterns[str(keyword).upper()] = _check_vector(
                f"named_patterns[{keyword}]", vector
            )
    if "likert" in data:
        templates.likert.update(_counted_templates("likert", data["likert"]))
    if "bell_curves" in data:
        templates.bell_curves.update(_counted_templates("bell_curves", data["bell_curves"]))
    if "binary" in data:
        templates.binary = _check_vector("binary", data["binary"], expected_length=2)
    if "name" in data:
        templates.name = str(data["name"])
    return templates


def templates_from_yaml(text: str) -> WeightTemplates:
    """Build templates from a YAML document."""
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise TemplateConfigError(f"Invalid template YAML: {e}")
    return templates_from_dict(data)


def load_templates(filepath: str) -> WeightTemplates:
    """
    Load templates from a YAML file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        TemplateConfigError: If the file content is invalid
    """
    try:
        with open(filepath, 'r', encoding='utf-8') as f:
            content = f.read()
    except FileNotFoundError:
        raise FileNotFoundError(f"Template file not found: {filepath}")
    return templates_from_yaml(content)
