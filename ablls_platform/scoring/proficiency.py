"""
Proficiency Bands
ablls_platform/scoring/proficiency.py

    p >= 86  Mastered
    p >= 61  Proficient
    p >= 26  Developing
    else     Emerging
"""

from typing import List, Tuple

from ablls_platform.models.enumerations import ProficiencyLevel

# Inclusive lower bounds, evaluated highest first
PROFICIENCY_BANDS: List[Tuple[float, ProficiencyLevel]] = [
    (86, ProficiencyLevel.MASTERED),
    (61, ProficiencyLevel.PROFICIENT),
    (26, ProficiencyLevel.DEVELOPING),
]


def get_proficiency_level(percentage: float) -> ProficiencyLevel:
    for lower_bound, level in PROFICIENCY_BANDS:
        if percentage >= lower_bound:
            return level
    return ProficiencyLevel.EMERGING
