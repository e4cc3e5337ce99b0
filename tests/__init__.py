"""
Test suite for bigmath

Contains:
- tests/unit/          : Unit tests for individual modules
"""
