"""
Exception types raised by the keyword engine and catalog
"""
from typing import Optional


class KeywordEngineError(Exception):
    """Base class for all keyword engine errors"""


class KeywordNotFoundError(KeywordEngineError):
    """Raised when a single-record operation targets an unknown id"""

    def __init__(self, keyword_id: str):
        self.keyword_id = keyword_id
        super().__init__(f"Keyword not found: {keyword_id}")


class KeywordValidationError(KeywordEngineError):
    """Raised when keyword input fails validation"""

    def __init__(self, message: str, field: Optional[str] = None):
        self.field = field
        super().__init__(message)


class InvalidPriorityConfigError(KeywordEngineError):
    """Raised when a priority tier table breaks the contiguity rules"""


class UnknownTierError(KeywordEngineError):
    """Raised when looking up a tier the configuration does not define"""


class InvalidScoringConfigError(KeywordEngineError):
    """Raised when an AIO scoring configuration is malformed"""


class InvalidWeightsError(InvalidScoringConfigError):
    """Raised when factor weights are negative or do not sum to 1"""
