"""Typed exceptions for malformed analysis input.

Only boundary faults are exceptions: a tile code outside its category's
range, or a template that cannot be a hand at all. Combinations that fail
to resolve during expansion are omitted, never raised, and unreachable
templates are reported with infinite distance.
"""


class AnalysisError(Exception):
    """Base exception for invalid data handed to the analysis core.

    Raised by the codec and the template models when records coming from
    the storage layer are malformed. Callers convert these into their own
    error responses before evaluation starts.
    """


class InvalidTileError(AnalysisError, ValueError):
    """Tile code or category/value pair outside the valid ranges."""


class InvalidTemplateError(AnalysisError, ValueError):
    """Template definition is malformed (no groups, conflicting fields, etc.)."""
