"""
Exceptions raised by the review and loan core.
"""


class ElysiarError(Exception):
    """Base class for all core errors."""


class InvalidGradeError(ElysiarError, ValueError):
    """A review grade outside {hard, medium, easy} was supplied."""


class DataIntegrityError(ElysiarError):
    """A card, loan or notification record is malformed (e.g. unparsable date)."""
