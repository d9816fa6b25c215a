"""
bddreport - HTML reports for Playwright BDD runs.
"""

__version__ = "0.1.0"
