"""
Serialization helpers for form model objects (FormModel, Question, Option).

Provides lossless JSON/YAML round-trip via intermediate dict representation.
This module intentionally keeps serialization structure stable and explicit.
"""
from __future__ import annotations

import json
from typing import Any, Dict

import yaml

from surveyweights.model import FormModel, Option, Question, QuestionType


def option_to_dict(o: Option) -> Dict[str, Any]:
    return {"value": o.value, "weight": o.weight}


def option_from_dict(d: Dict[str, Any]) -> Option:
    return Option(value=d["value"], weight=d.get("weight"))


def question_to_dict(q: Question) -> Dict[str, Any]:
    return {
        "id": q.id,
        "entry_id": q.entry_id,
        "title": q.title,
        "type": q.type.value,
        "options": [option_to_dict(o) for o in q.options],
        "required": q.required,
        "page_index": q.page_index,
        "text_samples": list(q.text_samples),
    }


def question_from_dict(d: Dict[str, Any]) -> Question:
    return Question(
        id=d["id"],
        entry_id=d.get("entry_id", ""),
        title=d.get("title", ""),
        type=QuestionType(d.get("type", QuestionType.UNKNOWN.value)),
        options=[option_from_dict(o) for o in d.get("options", [])],
        required=bool(d.get("required", False)),
        page_index=int(d.get("page_index", 0)),
        text_samples=list(d.get("text_samples", [])),
    )


def form_to_dict(f: FormModel) -> Dict[str, Any]:
    return {
        "title": f.title,
        "questions": [question_to_dict(q) for q in f.questions],
        "metadata": f.metadata,
    }


def form_from_dict(d: Dict[str, Any]) -> FormModel:
    f = FormModel(title=d.get("title", ""))
    f.questions = [question_from_dict(q) for q in d.get("questions", [])]
    f.metadata = d.get("metadata", {})
    return f


def form_to_json(f: FormModel) -> str:
    return json.dumps(form_to_dict(f), sort_keys=True)


def form_from_json(s: str) -> FormModel:
    d = json.loads(s)
    return form_from_dict(d)


def form_to_yaml(f: FormModel) -> str:
    return yaml.safe_dump(form_to_dict(f), allow_unicode=True)


def form_from_yaml(s: str) -> FormModel:
    d = yaml.safe_load(s)
    return form_from_dict(d)
