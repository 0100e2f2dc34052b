"""
Elysiar - flashcard review scheduling and library loan tracking.
"""

__version__ = "0.1.0"
