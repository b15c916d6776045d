"""
Weight Analyzer: diagnostics for weighted forms.

This module provides lightweight checks over a FormModel:
    - Question inventory by type and page
    - Weight-sum violations
    - Zero-weight options
    - Questions with options but no weights

IMPORTANT: It does NOT modify the form. It only produces read-only reports.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List

from surveyweights.model import WEIGHT_TOTAL, FormModel


@dataclass
class WeightReport:
    """Analysis report for one form."""

    form_title: str
    total_questions: int = 0
    questions_with_options: int = 0
    total_options: int = 0
    page_count: int = 0
    required_questions: int = 0

    questions_by_type: Dict[str, int] = field(default_factory=dict)

    # Weight checks
    weight_sums: Dict[str, int] = field(default_factory=dict)
    sum_violations: List[str] = field(default_factory=list)
    zero_weight_options: List[str] = field(default_factory=list)
    unweighted_questions: List[str] = field(default_factory=list)

    warnings: List[str] = field(default_factory=list)

    @property
    def is_consistent(self) -> bool:
        """True when every weighted question sums to 100."""
        return not self.sum_violations and not self.unweighted_questions

    def add_warning(self, msg: str) -> None:
        """Add a warning to the report."""
        if msg not in self.warnings:
            self.warnings.append(msg)


def analyze_weights(form: FormModel) -> WeightReport:
    """
    Check a form's weight vectors.

    Returns a WeightReport with metrics and warnings.
    """
    report = WeightReport(form_title=form.title)
    report.total_questions = len(form.questions)
    report.page_count = form.page_count
    report.questions_by_type = dict(Counter(q.type.value for q in form.questions))

    for question in form.questions:
        if question.required:
            report.required_questions += 1
        if not question.has_options:
            continue
        report.questions_with_options += 1
        report.total_options += len(question.options)

        if not question.is_weighted:
            report.unweighted_questions.append(question.id)
            continue

        total = sum(question.weights())
        report.weight_sums[question.id] = total
        if total != WEIGHT_TOTAL:
            report.sum_violations.append(question.id)
        for option in question.options:
            if option.weight == 0:
                report.zero_weight_options.append(f"{question.id}:{option.value}")

    if report.sum_violations:
        report.add_warning(
            f"Weights do not sum to {WEIGHT_TOTAL}: {', '.join(report.sum_violations)}"
        )
    if report.zero_weight_options:
        report.add_warning(
            f"Options with zero weight: {', '.join(report.zero_weight_options)}"
        )
    if report.unweighted_questions:
        report.add_warning(
            f"Questions without weights: {', '.join(report.unweighted_questions)}"
        )
    if report.total_questions == 0:
        report.add_warning("Form has no questions")

    return report
