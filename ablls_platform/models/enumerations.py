from enum import Enum

class AssessmentType(str, Enum):
    ABLLS_R = "ABLLS-R"                    # Assessment of Basic Language and Learning Skills - Revised
    AFLLS = "AFLLS"                        # Assessment of Functional Living Skills
    DAYC_2 = "DAYC-2"                      # Developmental Assessment of Young Children, 2nd ed.
    BEHAVIOR_THERAPY = "Behavior-Therapy"  # Behavior therapy intake questionnaire

class SessionStatus(str, Enum):
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"

class ProficiencyLevel(str, Enum):
    EMERGING = "Emerging"
    DEVELOPING = "Developing"
    PROFICIENT = "Proficient"
    MASTERED = "Mastered"
