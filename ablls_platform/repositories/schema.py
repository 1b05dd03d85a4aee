"""
Snowflake Schema - ABLLS Assessment Platform
ablls_platform/repositories/schema.py

DDL for the template and session tables. Applied by the seed script.
Uniqueness of (SESSION_ID, QUESTION_ID) is declared but not enforced by
Snowflake; SessionRepository.upsert_response keeps it with a MERGE.
"""

SCHEMA_STATEMENTS = [
    """
    CREATE TABLE IF NOT EXISTS QUESTIONNAIRE_TEMPLATES (
        ID VARCHAR(36) PRIMARY KEY,
        ASSESSMENT_TYPE VARCHAR(50) NOT NULL UNIQUE,
        TITLE VARCHAR(255),
        DESCRIPTION VARCHAR(2000),
        CREATED_AT TIMESTAMP_TZ DEFAULT CURRENT_TIMESTAMP()
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS TEMPLATE_DOMAINS (
        ID VARCHAR(36) PRIMARY KEY,
        TEMPLATE_ID VARCHAR(36) NOT NULL REFERENCES QUESTIONNAIRE_TEMPLATES(ID),
        NAME VARCHAR(255) NOT NULL,
        CODE VARCHAR(10),
        SORT_ORDER INTEGER NOT NULL DEFAULT 0
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS TEMPLATE_QUESTIONS (
        ID VARCHAR(36) PRIMARY KEY,
        DOMAIN_ID VARCHAR(36) NOT NULL REFERENCES TEMPLATE_DOMAINS(ID),
        SKILL_CODE VARCHAR(20),
        TASK_NAME VARCHAR(255),
        QUESTION_TEXT VARCHAR(2000) NOT NULL,
        RESPONSE_TYPE VARCHAR(50) DEFAULT 'dropdown',
        OPTIONS VARIANT,
        SCORE_TYPE VARCHAR(20),
        SORT_ORDER INTEGER NOT NULL DEFAULT 0
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS QUESTIONNAIRE_SESSIONS (
        ID VARCHAR(36) PRIMARY KEY,
        ASSESSMENT_TYPE VARCHAR(50) NOT NULL,
        CHILD_ID VARCHAR(255) NOT NULL,
        CHILD_NAME VARCHAR(255),
        RESPONDENT_ID VARCHAR(255),
        STATUS VARCHAR(20) NOT NULL DEFAULT 'in-progress',
        CREATED_AT TIMESTAMP_TZ NOT NULL,
        COMPLETED_AT TIMESTAMP_TZ
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS SESSION_RESPONSES (
        ID VARCHAR(36) PRIMARY KEY,
        SESSION_ID VARCHAR(36) NOT NULL REFERENCES QUESTIONNAIRE_SESSIONS(ID),
        QUESTION_ID VARCHAR(36) NOT NULL,
        ANSWER VARCHAR(2000) NOT NULL,
        CREATED_AT TIMESTAMP_TZ NOT NULL,
        UPDATED_AT TIMESTAMP_TZ NOT NULL,
        UNIQUE (SESSION_ID, QUESTION_ID)
    )
    """,
]
