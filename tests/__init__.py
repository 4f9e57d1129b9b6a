"""
Test Suite
==========

Test suite matching the spa_prerender/ package structure.

Test Categories:
- unit: Unit tests for individual components
- integration: Static server and full pipeline runs against a real build directory
"""
