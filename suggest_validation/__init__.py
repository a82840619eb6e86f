"""
suggest-validation: tiered validation of facility suggestions with
pull-based metrics exposition.
"""

__version__ = "0.1.0"
