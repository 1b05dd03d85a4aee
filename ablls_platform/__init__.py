"""ABLLS Assessment Platform - questionnaire scoring, VB mapping and reports."""

__version__ = "1.0.0"
