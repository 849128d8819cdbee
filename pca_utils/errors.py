"""
Error kinds raised by the composition PCA workflow.

Every error carries an optional ``field`` naming the offending column or
compound, so a driver can build its own message.
"""

from typing import Optional


class CompositionPCAError(Exception):
    """Base class for all analysis errors."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class InvalidInputError(CompositionPCAError):
    """Empty input, missing required fields or bad concentration values."""


class DuplicateObservationError(InvalidInputError):
    """The same (sample, compound) pair appears more than once."""


class ConstantColumnError(CompositionPCAError):
    """A compound has zero variance across all samples."""

    def __init__(self, compound: str):
        super().__init__(
            f"Compound '{compound}' has zero variance across all samples "
            f"and cannot be standardized",
            field=compound
        )
        self.compound = compound


class InsufficientDimensionsError(CompositionPCAError):
    """Fewer than 2 usable compounds or fewer than 2 samples."""
