"""
Services Package - ABLLS Assessment Platform
ablls_platform/services/__init__.py

Scoring orchestration, session lifecycle, report rendering and caching.
"""
