"""
Answer Parsing
ablls_platform/scoring/answer_parser.py

Turns free-text answers and question definitions into numbers:

    extract_numeric_score("2 - Emerging / Prompted")  -> 2
    extract_numeric_score("Not answered")             -> 0
    resolve_max_score("0-4", [...])                   -> 4
    resolve_max_score(None, ["0", "1", "2"])          -> 2   (len(options) - 1)
    resolve_max_score(None, [])                       -> 4   (default)
"""

import re
from typing import Optional, Sequence

DEFAULT_MAX_SCORE = 4
NOT_ANSWERED = "Not answered"

# Digit runs longer than this are above any real max and are capped
# before int() conversion.
MAX_SCORE_DIGITS = 9
OVERSIZED_SCORE = 10 ** MAX_SCORE_DIGITS

# ASCII digits only; fullwidth or Arabic-Indic digits do not count as a score
_LEADING_DIGITS = re.compile(r"^([0-9]+)")
_SCORE_TYPE_RANGE = re.compile(r"0-([0-9]+)")


def _digits_to_int(digits: str) -> int:
    significant = digits.lstrip("0")
    if len(significant) > MAX_SCORE_DIGITS:
        return OVERSIZED_SCORE
    return int(significant or "0")


def extract_numeric_score(answer: Optional[str]) -> int:
    """Leading run of digits at the very start of the answer, else 0."""
    if not answer:
        return 0
    match = _LEADING_DIGITS.match(answer)
    return _digits_to_int(match.group(1)) if match else 0


def resolve_max_score(
    score_type: Optional[str],
    options: Optional[Sequence[str]] = None,
) -> int:
    """
    Max score for a question.

    Preference order: explicit "0-N" score type, then option count - 1,
    then DEFAULT_MAX_SCORE.
    """
    if score_type:
        match = _SCORE_TYPE_RANGE.search(score_type)
        if match:
            return _digits_to_int(match.group(1))

    if options:
        return len(options) - 1

    return DEFAULT_MAX_SCORE


def clamp_numeric_score(score: int, max_score: int) -> int:
    """Clamp into [0, max(0, max_score)]; out-of-range values are never rejected."""
    return max(0, min(score, max(0, max_score)))
