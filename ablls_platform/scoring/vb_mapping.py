# ablls_platform/scoring/vb_mapping.py
"""
VB Mapping Engine
-----------------
Maps one question's (raw score, max score) pair onto a fixed 4-unit bar,
independent of the question's native scale (0-2 or 0-4).

Algorithm:
    max        = 2 if raw_max == 2 else 4
    score      = clamp(raw_score, 0, max)        non-finite / missing -> 0
    normalized = score * 2 if max == 2 else score
    threshold  = 4 - normalized + 1
    cell i (1..4) is filled iff i >= threshold   (right-aligned fill)
    paired     = [cell1 or cell2, cell3 or cell4]

Pure functions, no I/O and no state.
"""
import math
import re
from dataclasses import dataclass, field
from typing import List, Mapping, Optional, Tuple, Union

VB_BASE_UNITS = 4
VB_FILLED_CHAR = "X"
VB_EMPTY_CHAR = "_"
VB_SUPPORTED_MAX = (2, 4)

Number = Union[int, float]


@dataclass(frozen=True)
class VBExportRow:
    """Reduced mapping row used for export and validation."""
    question: str
    score: Number
    max: int
    normalized: Number


@dataclass(frozen=True)
class VBMappingResult:
    """Output of map_question_to_vb()."""
    question: str
    score: Number                          # clamped into [0, max]
    max: int                               # 2 or 4
    normalized: Number                     # score on the 4-unit basis
    threshold: Number                      # first filled cell index
    filled_units: List[int] = field(default_factory=list)
    filled_map: Tuple[bool, bool, bool, bool] = (False, False, False, False)
    paired_fill_map: Tuple[bool, bool] = (False, False)

    def to_export_row(self) -> VBExportRow:
        return VBExportRow(
            question=self.question,
            score=self.score,
            max=self.max,
            normalized=self.normalized,
        )


def resolve_vb_max(raw_max: Optional[Number] = None) -> int:
    """Only a literal 2 selects the 2-point scale; everything else is 4."""
    if isinstance(raw_max, bool):
        return 4
    return 2 if raw_max == 2 else 4


def clamp_vb_score(raw_score: Optional[Number], max_score: int) -> Number:
    """Clamp to [0, max_score]; None, NaN and infinities count as 0."""
    if raw_score is None or isinstance(raw_score, bool):
        return 0
    try:
        finite = math.isfinite(raw_score)
    except TypeError:
        return 0
    if not finite:
        return 0
    if raw_score < 0:
        return 0
    if raw_score > max_score:
        return max_score
    return raw_score


def normalize_vb_score(score: Number, max_score: int) -> Number:
    return score * 2 if max_score == 2 else score


def map_question_to_vb(
    question: str,
    raw_score: Optional[Number],
    raw_max: Optional[Number] = None,
) -> VBMappingResult:
    """
    Map a single question score onto the 4-unit VB bar.

    Args:
        question: Question key (skill code or question id).
        raw_score: Numeric score; missing or non-finite values become 0.
        raw_max: Native max score; only 2 selects the 2-point scale.

    Returns:
        VBMappingResult with clamped/normalized score and fill maps.
    """
    max_score = resolve_vb_max(raw_max)
    score = clamp_vb_score(raw_score, max_score)
    normalized = normalize_vb_score(score, max_score)
    threshold = VB_BASE_UNITS - normalized + 1

    filled = [cell_index >= threshold for cell_index in range(1, VB_BASE_UNITS + 1)]
    filled_units = [i + 1 for i, is_filled in enumerate(filled) if is_filled]

    return VBMappingResult(
        question=question,
        score=score,
        max=max_score,
        normalized=normalized,
        threshold=threshold,
        filled_units=filled_units,
        filled_map=(filled[0], filled[1], filled[2], filled[3]),
        paired_fill_map=(filled[0] or filled[1], filled[2] or filled[3]),
    )


def _natural_key(value: str) -> List[Union[int, str]]:
    return [int(part) if part.isdigit() else part.lower() for part in re.split(r"(\d+)", value)]


def map_answers_to_vb(
    answers: Mapping[str, Optional[Number]],
    score_map: Optional[Mapping[str, Optional[Number]]] = None,
) -> List[VBMappingResult]:
    """
    Map every question in answers ∪ score_map, in natural order (A2 before A10).

    Questions present only in score_map are mapped with a missing score (0).
    """
    score_map = score_map or {}
    questions = set(score_map) | set(answers)
    return [
        map_question_to_vb(question, answers.get(question), score_map.get(question))
        for question in sorted(questions, key=_natural_key)
    ]


def to_vb_export_rows(results: List[VBMappingResult]) -> List[VBExportRow]:
    return [result.to_export_row() for result in results]


def render_vb_bar(filled_map: Tuple[bool, ...]) -> str:
    """Render the fill map as e.g. '_ _ X X'."""
    return " ".join(VB_FILLED_CHAR if is_filled else VB_EMPTY_CHAR for is_filled in filled_map)
