"""
Test suites package.

Kept importable so that page objects and the framework can be reached from:
  - IDE navigation
  - programmatic runners (e.g., `run_tests.py`)
  - CI/CD module imports
"""
