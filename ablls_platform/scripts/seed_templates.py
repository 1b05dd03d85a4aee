#!/usr/bin/env python
"""
Seed the built-in questionnaire templates into Snowflake.

Creates the template and session tables when missing, then (re)seeds
ABLLS-R, AFLLS, DAYC-2 and Behavior-Therapy. Re-seeding a template deletes
its previous domains and questions first. Sessions are never touched.

Usage:
    python -m ablls_platform.scripts.seed_templates
    python -m ablls_platform.scripts.seed_templates --assessment-type ABLLS-R
    python -m ablls_platform.scripts.seed_templates --dry-run
"""

import argparse
import json
import logging
import sys
import uuid
from typing import Dict, List, Optional, Tuple

from ablls_platform.models.enumerations import AssessmentType
from ablls_platform.repositories.schema import SCHEMA_STATEMENTS
from ablls_platform.services.cache import invalidate_templates
from ablls_platform.services.snowflake import get_snowflake_connection

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)-8s | %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger(__name__)


ABA_SCORE_OPTIONS = [
    "1 - Not observed / Not present",
    "2 - Emerging / Prompted",
    "3 - Inconsistent / Partial",
    "4 - Consistent / Independent",
    "5 - Mastered / Generalized",
]

DAYC2_SCORE_OPTIONS = [
    "1 - Unable to perform",
    "2 - Emerging skill",
    "3 - Developing",
    "4 - Age-appropriate",
]

BEHAVIOR_SCORE_OPTIONS = [
    "1 - Never",
    "2 - Rarely",
    "3 - Sometimes",
    "4 - Often",
    "5 - Always",
]


# (name, code, question texts) per domain
BUILT_IN_TEMPLATES: Dict[str, Dict] = {
    AssessmentType.ABLLS_R.value: {
        "title": "ABLLS-R Assessment Questionnaire",
        "description": (
            "Assessment of Basic Language and Learning Skills - Revised. Evaluates cooperation, "
            "visual performance, receptive language and motor imitation."
        ),
        "options": ABA_SCORE_OPTIONS,
        "domains": [
            ("Cooperation & Reinforcer Effectiveness", "A", [
                "Takes a reinforcer from a familiar adult.",
                "Eats/uses reinforcer appropriately.",
                "Looks at, touches or points to a reinforcer offered.",
                "Approaches adult to obtain reinforcer.",
                "Sits in a chair for a brief period for reinforcer.",
                "Waits without problem behavior for a promised reinforcer.",
                "Makes eye contact with adult when anticipating reinforcer.",
            ]),
            ("Visual Performance", "B", [
                "Matches identical objects from an array of 3.",
                "Matches identical pictures from an array of 3.",
                "Matches object to picture from an array of 3.",
                "Matches picture to object from an array of 3.",
                "Sorts non-identical items into categories.",
                "Completes a 3-piece inset puzzle.",
                "Matches associated pictures (e.g., cup and saucer).",
                "Completes a simple ABAB sequencing pattern.",
            ]),
            ("Receptive Language", "C", [
                "Responds to own name by orienting towards speaker.",
                'Follows a one-step instruction (e.g., "sit down").',
                "Touches named body parts on request.",
                "Touches named objects from an array of 2.",
                "Identifies objects in pictures when named.",
                "Selects items by feature (e.g., color).",
                "Follows two-step related commands.",
                "Identifies actions in pictures.",
            ]),
            ("Motor Imitation", "D", [
                "Imitates gross motor movements (e.g., clapping hands).",
                "Imitates actions with objects (e.g., pushing a toy car).",
                "Imitates fine motor movements (e.g., pinching fingers).",
                "Imitates oral motor movements (e.g., opening mouth).",
                "Imitates a sequence of two motor actions.",
                "Imitates novel, previously unseen motor actions.",
            ]),
        ],
    },
    AssessmentType.AFLLS.value: {
        "title": "AFLS Assessment Questionnaire",
        "description": (
            "Assessment of Functional Living Skills. Evaluates basic living, home, "
            "community participation and school skills."
        ),
        "options": ABA_SCORE_OPTIONS,
        "domains": [
            ("Basic Living Skills - Self Management", "SM", [
                "Indicates need for toileting.",
                "Manages clothing for toileting independently.",
                "Washes hands with soap and water.",
                "Covers mouth when coughing or sneezing.",
                "Recognizes when clothing is dirty or wet.",
            ]),
            ("Basic Living Skills - Dressing", "DR", [
                "Puts on and removes shoes independently.",
                "Puts on a pullover shirt independently.",
                "Manages buttons and snaps.",
                "Uses a zipper independently.",
                "Ties shoelaces independently.",
            ]),
            ("Basic Living Skills - Grooming", "GR", [
                "Brushes teeth with toothpaste.",
                "Brushes or combs hair appropriately.",
                "Washes face independently.",
                "Maintains appropriate personal hygiene habits.",
            ]),
            ("Home Skills - Meals", "ML", [
                "Uses utensils correctly to eat meals.",
                "Pours liquid from a container into a glass.",
                "Prepares a simple snack independently.",
                "Clears own place setting after eating.",
            ]),
            ("Community Participation Skills", "CP", [
                "Walks safely on sidewalks and crosswalks.",
                "Behaves appropriately in public places.",
                "Makes a purchase at a store with assistance.",
                "Waits in line patiently.",
            ]),
            ("School Skills", "SS", [
                "Follows classroom rules and routines.",
                "Transitions between activities with minimal support.",
                "Raises hand to get attention or ask a question.",
                "Works cooperatively with peers on group activities.",
            ]),
        ],
    },
    AssessmentType.DAYC_2.value: {
        "title": "DAYC-2 Assessment Questionnaire",
        "description": (
            "Developmental Assessment of Young Children - 2nd Edition. Evaluates cognitive, "
            "communication, social-emotional, physical and adaptive development."
        ),
        "options": DAYC2_SCORE_OPTIONS,
        "domains": [
            ("Cognitive Development", None, [
                "Demonstrates object permanence (searches for hidden objects).",
                "Uses simple cause-and-effect toys appropriately.",
                "Stacks 2 or more blocks.",
                "Sorts objects by color or shape.",
                "Engages in pretend play with toys.",
            ]),
            ("Communication", None, [
                "Responds to sounds by turning head towards source.",
                "Uses gestures to communicate (pointing, waving).",
                'Combines two words (e.g., "more juice").',
                "Follows simple verbal directions.",
                "Uses 3-word sentences to express needs.",
            ]),
            ("Social-Emotional Development", None, [
                "Shows attachment to primary caregiver.",
                "Shows interest in other children.",
                "Takes turns during simple play activities.",
                "Plays cooperatively with other children.",
            ]),
            ("Physical Development", None, [
                "Sits without support.",
                "Walks independently.",
                "Climbs stairs with support.",
                "Grasps small objects using pincer grasp.",
                "Kicks a ball forward.",
            ]),
            ("Adaptive Behavior", None, [
                "Drinks from a cup with minimal spilling.",
                "Feeds self with a spoon.",
                "Removes simple clothing items (hat, socks).",
                "Follows simple safety rules with reminders.",
            ]),
        ],
    },
    AssessmentType.BEHAVIOR_THERAPY.value: {
        "title": "Behavior Therapy Assessment Questionnaire",
        "description": (
            "Behavioral assessment covering functional behavior, intervention planning, "
            "school behavior and therapy progress tracking."
        ),
        "options": BEHAVIOR_SCORE_OPTIONS,
        "domains": [
            ("Functional Behavior Assessment", "FBA", [
                "Identifies the primary function of the target behavior (attention, escape, access, sensory).",
                "Demonstrates the target behavior during structured activities.",
                "Demonstrates the target behavior during unstructured activities.",
                "Exhibits aggressive behaviors towards others.",
                "Displays elopement or running away behaviors.",
            ]),
            ("Behavior Intervention Strategies", "BIS", [
                "Responds positively to positive reinforcement strategies.",
                "Accepts redirection when engaging in maladaptive behavior.",
                "Uses replacement behaviors when prompted.",
                "Responds to visual supports and schedules.",
            ]),
            ("School Behavior Plan", "SBP", [
                "Follows classroom rules with minimal prompting.",
                "Transitions between school activities appropriately.",
                "Stays seated during instruction time.",
                "Responds appropriately to teacher instructions.",
            ]),
            ("Therapy Progress Indicators", "TPI", [
                "Shows reduction in frequency of target behavior over time.",
                "Demonstrates increased use of appropriate communication.",
                "Generalizes learned skills across settings.",
                "Maintains acquired skills over time.",
            ]),
        ],
    },
}


def build_template_rows(assessment_type: str, data: Dict) -> Tuple[tuple, List[tuple], List[tuple]]:
    """
    Flatten one template definition into insert rows.

    Domains and questions get SORT_ORDER from their position. Skill codes are
    {domain code}{position + 1} when the domain has a code.

    Returns:
        (template_row, domain_rows, question_rows)
    """
    template_id = str(uuid.uuid4())
    template_row = (template_id, assessment_type, data["title"], data["description"])
    options_json = json.dumps(data["options"])

    domain_rows = []
    question_rows = []
    for domain_index, (name, code, questions) in enumerate(data["domains"]):
        domain_id = str(uuid.uuid4())
        domain_rows.append((domain_id, template_id, name, code, domain_index))
        for question_index, text in enumerate(questions):
            skill_code = f"{code}{question_index + 1}" if code else None
            question_rows.append((
                str(uuid.uuid4()),
                domain_id,
                skill_code,
                text,
                "dropdown",
                options_json,
                question_index,
            ))

    return template_row, domain_rows, question_rows


def apply_schema(cur) -> None:
    for statement in SCHEMA_STATEMENTS:
        cur.execute(statement)
    logger.info(f"Applied {len(SCHEMA_STATEMENTS)} schema statements")


def delete_template(cur, assessment_type: str) -> None:
    """Remove a template with its domains and questions."""
    cur.execute(
        """
        DELETE FROM TEMPLATE_QUESTIONS WHERE DOMAIN_ID IN (
            SELECT d.ID FROM TEMPLATE_DOMAINS d
            JOIN QUESTIONNAIRE_TEMPLATES t ON d.TEMPLATE_ID = t.ID
            WHERE t.ASSESSMENT_TYPE = %s
        )
        """,
        (assessment_type,),
    )
    cur.execute(
        """
        DELETE FROM TEMPLATE_DOMAINS WHERE TEMPLATE_ID IN (
            SELECT ID FROM QUESTIONNAIRE_TEMPLATES WHERE ASSESSMENT_TYPE = %s
        )
        """,
        (assessment_type,),
    )
    cur.execute(
        "DELETE FROM QUESTIONNAIRE_TEMPLATES WHERE ASSESSMENT_TYPE = %s",
        (assessment_type,),
    )


def insert_template(cur, template_row: tuple, domain_rows: List[tuple], question_rows: List[tuple]) -> None:
    cur.execute(
        """
        INSERT INTO QUESTIONNAIRE_TEMPLATES (ID, ASSESSMENT_TYPE, TITLE, DESCRIPTION)
        VALUES (%s, %s, %s, %s)
        """,
        template_row,
    )
    cur.executemany(
        """
        INSERT INTO TEMPLATE_DOMAINS (ID, TEMPLATE_ID, NAME, CODE, SORT_ORDER)
        VALUES (%s, %s, %s, %s, %s)
        """,
        domain_rows,
    )
    # PARSE_JSON is not allowed in a VALUES clause
    for row in question_rows:
        cur.execute(
            """
            INSERT INTO TEMPLATE_QUESTIONS
                (ID, DOMAIN_ID, SKILL_CODE, QUESTION_TEXT, RESPONSE_TYPE, OPTIONS, SORT_ORDER)
            SELECT %s, %s, %s, %s, %s, PARSE_JSON(%s), %s
            """,
            row,
        )


def seed(assessment_types: List[str], dry_run: bool = False) -> Dict[str, int]:
    """
    Seed the given templates.

    Returns:
        Question count per seeded assessment type.
    """
    planned = {}
    for assessment_type in assessment_types:
        planned[assessment_type] = build_template_rows(assessment_type, BUILT_IN_TEMPLATES[assessment_type])

    if dry_run:
        for assessment_type, (_, domain_rows, question_rows) in planned.items():
            logger.info(
                f"[dry-run] {assessment_type}: {len(domain_rows)} domains, {len(question_rows)} questions"
            )
        return {t: len(rows[2]) for t, rows in planned.items()}

    conn = get_snowflake_connection()
    try:
        cur = conn.cursor()
        try:
            apply_schema(cur)
            for assessment_type, (template_row, domain_rows, question_rows) in planned.items():
                delete_template(cur, assessment_type)
                insert_template(cur, template_row, domain_rows, question_rows)
                logger.info(
                    f"Seeded {assessment_type}: {len(domain_rows)} domains, {len(question_rows)} questions"
                )
            conn.commit()
        finally:
            cur.close()
    finally:
        conn.close()

    removed = invalidate_templates(planned)
    if removed:
        logger.info(f"Invalidated {removed} cached templates")

    return {t: len(rows[2]) for t, rows in planned.items()}


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Seed built-in questionnaire templates")
    parser.add_argument(
        "--assessment-type",
        action="append",
        choices=list(BUILT_IN_TEMPLATES),
        help="Seed only this template (repeatable). Default: all four.",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Build the rows and log counts without connecting to Snowflake",
    )
    args = parser.parse_args(argv)

    assessment_types = args.assessment_type or list(BUILT_IN_TEMPLATES)
    logger.info(f"Seeding templates: {', '.join(assessment_types)}")

    try:
        counts = seed(assessment_types, dry_run=args.dry_run)
    except Exception as e:
        logger.error(f"Seed failed: {e}")
        return 1

    logger.info(f"Done. {sum(counts.values())} questions across {len(counts)} templates")
    return 0


if __name__ == "__main__":
    sys.exit(main())
