"""
Test suite for leverage-lens

Contains:
- tests/unit/          : Unit tests for individual modules
"""
