#!/usr/bin/env python3
"""
Complete Pipeline Demo: Page → Form Model → Weights → Dependencies → Report

Shows the full workflow:
1. Extract the embedded snapshot from a form page
2. Decode it into the canonical form model
3. Assign template weights and resolve cross-question dependencies
4. Apply a manual override
5. Check the weights and export YAML
"""

import logging

from surveyweights.analyzer import analyze_weights
from surveyweights.examples import build_example_page
from surveyweights.pipeline import analyze_page
from surveyweights.redistribution import redistribute
from surveyweights.serialization import form_to_yaml


def print_question(question):
    print(f"   [{question.page_index}] {question.title} ({question.type.value})")
    for option in question.options:
        print(f"        {option.weight:>3}%  {option.value}")


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    print("=" * 80)
    print("COMPLETE PIPELINE DEMO: Page → Form → Weights → Report")
    print("=" * 80)

    # =========================================================================
    # STEP 1-3: Decode and weight
    # =========================================================================
    print("\n1. DECODING AND WEIGHTING...")
    form = analyze_page(build_example_page())
    print(f"   ✓ Loaded form: {form.title}")
    print(f"   ✓ Questions: {len(form.questions)}")
    print(f"   ✓ Pages: {form.page_count}")
    for question in form.questions:
        print_question(question)

    # =========================================================================
    # STEP 4: Manual override
    # =========================================================================
    print("\n2. MANUAL OVERRIDE...")
    gender = form.questions[1]
    gender.options = redistribute(gender.options, 2, 10)
    print_question(gender)

    # =========================================================================
    # STEP 5: Report
    # =========================================================================
    print("\n3. WEIGHT REPORT:")
    print("-" * 80)
    report = analyze_weights(form)
    print(f"   Questions with options: {report.questions_with_options}")
    print(f"   Consistent:             {report.is_consistent}")
    for warning in report.warnings:
        print(f"      - {warning}")

    print("\n4. YAML EXPORT (first 20 lines):")
    print("-" * 80)
    lines = form_to_yaml(form).split('\n')
    for line in lines[:20]:
        print(f"   {line}")
    if len(lines) > 20:
        print(f"   ... ({len(lines) - 20} more lines)")

    print("\n" + "=" * 80)
    print("PIPELINE COMPLETE!")
    print("=" * 80)


if __name__ == "__main__":
    main()
