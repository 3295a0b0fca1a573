"""
Test suite for the generic math engine

Contains:
- tests/unit/          : Unit tests for individual modules
"""
