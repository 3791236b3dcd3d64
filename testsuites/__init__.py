"""
Test suites package.

Kept importable to support:
  - IDE navigation
  - the programmatic runner (`run_tests.py`)
  - framework unit tests importing page objects and helpers
"""
