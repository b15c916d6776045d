"""
Example form snapshot for demos and tests.

Builds a raw snapshot in the same positional layout a hosted form page
embeds: a two-page student survey with demographic questions, a Likert
item and a free-text question.
"""
import json
from typing import Any, List


def _choice(question_id: int, entry_id: int, title: str, type_code: int,
            options: List[str], required: bool = False) -> List[Any]:
    """Build one raw choice entry with options nested under the field identifier."""
    return [
        question_id,
        title,
        None,
        type_code,
        [[entry_id, [[text, None, None, None, 0] for text in options], 1 if required else 0]],
    ]


def build_example_snapshot(title: str = "Campus Life Survey") -> List[Any]:
    """Build a three-page student survey snapshot with demographic, Likert and free-text questions."""
    entries = [
        _choice(101, 2001, "What is your age?", 2,
                ["Under 18", "18-24", "25-34", "35-44", "45-54", "55+"], required=True),
        _choice(102, 2002, "What is your gender?", 2,
                ["Male", "Female", "Prefer not to say"], required=True),
        [103, "About you", None, 8, None],
        _choice(104, 2004, "What is your current occupation?", 3,
                ["Student", "Working Professional", "Self-employed", "Retired"]),
        _choice(105, 2005, "What is your monthly income?", 3,
                ["No income", "Below 10,000", "10,000 - 50,000", "Above 50,000"]),
        _choice(106, 2006, "Highest education qualification", 2,
                ["High School", "Bachelor&#39;s degree", "Master&#39;s degree", "PhD"]),
        [107, "Campus opinions", None, 8, None],
        _choice(108, 2008, "Q&amp;A sessions are useful", 2,
                ["Strongly disagree", "Disagree", "Neutral", "Agree", "Strongly agree"]),
        _choice(109, 2009, "Do you live on campus?", 2, ["Yes", "No"]),
        [110, "Any other comments?", None, 1, [[2010, None, 0]]],
    ]
    return [
        None,
        ["Tell us about campus life.", entries, None, None, None, None, None, None, title],
        "/forms/example",
        title,
    ]


def build_example_page(title: str = "Campus Life Survey") -> str:
    """Wrap the example snapshot in a minimal HTML page."""
    data = json.dumps(build_example_snapshot(title))
    return (
        "<html><head><title>" + title + "</title></head><body>"
        "<script>var FB_PUBLIC_LOAD_DATA_ = " + data + ";</script>"
        "</body></html>"
    )
