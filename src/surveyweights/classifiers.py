"""
Keyword classification for question titles and option text.

Every heuristic detector used by the weight engine and the dependency
resolver lives here, as one table of named regular expressions.
Localizing or tuning the heuristics means passing a different table to
TextClassifier; the engines only ever ask "does this text belong to
category X?".
"""

import re
from typing import Dict, Iterable, Optional, Set


# Question-title categories
AGE = "age"
PROFESSION = "profession"
INCOME = "income"
EDUCATION = "education"
GENDER = "gender"

# Option categories
UNDER_18 = "under_18"
YOUNG_ADULT = "young_adult"
STUDENT = "student"
WORKING = "working"
RETIRED = "retired"
HIGH_INCOME = "high_income"
LOW_INCOME = "low_income"
POST_GRADUATE = "post_graduate"
SCHOOL = "school"
MINOR_CHOICE = "minor_choice"  # "other" / "prefer not to say"
LIKERT = "likert"
STRONG_NEGATIVE = "strong_negative"
NEGATIVE = "negative"
BINARY = "binary"


DEFAULT_PATTERNS: Dict[str, str] = {
    AGE: r"\bage\b|age.?group|age.?range|how old",
    PROFESSION: r"profession|occupation|employment|job\b|work|designation|working|career",
    INCOME: r"income|salary|earn|earning|stipend|pocket.?money|monthly|annual|ctc|pay",
    EDUCATION: r"education|qualification|degree|class|standard|studying|school|college|university",
    GENDER: r"gender|sex",
    UNDER_18: r"under.?18|below.?18|<\s*18|13.?17|14.?17|15.?17|less than 18|minor|child",
    YOUNG_ADULT: r"18.?2[0-5]|18.?to.?2[0-5]|19.?24|18.?24|20.?25",
    STUDENT: r"student|school|college|studying|learner|pupil|intern|fresher",
    WORKING: (
        r"working|professional|employed|job|business|self.?employ|entrepreneur"
        r"|manager|director|executive|engineer|doctor|lawyer"
    ),
    RETIRED: r"retire|pension|senior.?citizen",
    HIGH_INCOME: (
        r"50[\s,]*000|60[\s,]*000|70[\s,]*000|80[\s,]*000|90[\s,]*000|1[\s,]*00[\s,]*000"
        r"|1[\s,]*lakh|2[\s,]*lakh|5[\s,]*lakh|above.?50|more than 50|[₹$]\s*50|[₹$]\s*1[\s,]*00"
    ),
    LOW_INCOME: (
        r"no.?income|none|zero|nil|below.?5|under.?5|0.?to|less.?than.?10|pocket.?money"
        r"|below.?10|under.?10|0.?5"
    ),
    POST_GRADUATE: r"master|phd|doctorate|post.?grad|m\.?tech|m\.?sc|mba|m\.?a\b|m\.?com|m\.?ed",
    SCHOOL: r"school|10th|12th|high.?school|secondary|ssc|hsc|class.?[0-9]|intermediate",
    MINOR_CHOICE: r"prefer|say|other",
    LIKERT: r"strongly disagree|don['’]t agree|strongly agree|highly likely",
    STRONG_NEGATIVE: r"strongly disagree|very unsatisfied|poor",
    NEGATIVE: r"disagree|unsatisfied|bad",
    BINARY: r"yes|no|true|false",
}


class TextClassifier:
    """
    Case-insensitive keyword classifier over a table of named patterns.

    Args:
        patterns: category name -> regular expression. Defaults to
            DEFAULT_PATTERNS.
        overrides: patterns replacing (or adding to) the base table
    """

    def __init__(self, patterns: Optional[Dict[str, str]] = None,
                 overrides: Optional[Dict[str, str]] = None):
        table = dict(DEFAULT_PATTERNS if patterns is None else patterns)
        if overrides:
            table.update(overrides)
        self._compiled = {name: re.compile(expr, re.IGNORECASE) for name, expr in table.items()}

    @property
    def categories(self) -> Set[str]:
        return set(self._compiled)

    def matches(self, category: str, text: Optional[str]) -> bool:
        """
        True if text belongs to category.

        Raises:
            KeyError: If category is not in the pattern table
        """
        pattern = self._compiled[category]
        return bool(text) and pattern.search(text) is not None

    def classify(self, text: Optional[str], categories: Optional[Iterable[str]] = None) -> Set[str]:
        """Return every category (optionally restricted) that text belongs to."""
        names = self._compiled.keys() if categories is None else categories
        return {name for name in names if self.matches(name, text)}


DEFAULT_CLASSIFIER = TextClassifier()
