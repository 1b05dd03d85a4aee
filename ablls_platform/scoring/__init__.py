"""
scoring/ - VB Scoring Engine

Modules:
    utils.py               - Decimal rounding and percentage helpers
    vb_mapping.py          - VB Mapping Engine (4-unit right-aligned bar, export rows)
    answer_parser.py       - Numeric score extraction and max-score resolution
    proficiency.py         - Proficiency band table
    grading_calculator.py  - Domain + overall aggregation into VBGradingResult
"""
