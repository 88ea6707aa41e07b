"""
Cohort rotation assignment and generation for clinical education programs.
"""

__version__ = "0.1.0"
