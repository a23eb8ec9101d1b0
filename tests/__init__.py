"""
Test Suite
==========

Test suite matching the src/ directory structure.

Test Categories:
- unit: Unit tests for individual components
- integration: HTTP contract tests against the application factory
"""
