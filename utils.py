"""
Utility functions for validation, text normalisation and timing
"""
import time
import logging
import functools
from typing import Callable, Optional, Union

from exceptions import KeywordValidationError

logger = logging.getLogger(__name__)

MAX_KEYWORD_LENGTH = 200


def normalize_keyword_text(text: Optional[str]) -> str:
    """Lowercase keyword text and collapse runs of whitespace"""
    if not text:
        return ""
    return " ".join(str(text).split()).lower()


def clamp_score(value: float, low: int = 0, high: int = 100) -> int:
    """Round a score and clamp it into [low, high]"""
    return int(max(low, min(high, round(value))))


def validate_keyword_text(text: Optional[str]) -> str:
    """Strip keyword text and reject empty or oversized input"""
    if text is None or not str(text).strip():
        raise KeywordValidationError("Keyword text cannot be empty", field="text")
    cleaned = " ".join(str(text).split())
    if len(cleaned) > MAX_KEYWORD_LENGTH:
        raise KeywordValidationError(
            f"Keyword text cannot exceed {MAX_KEYWORD_LENGTH} characters", field="text"
        )
    return cleaned


def validate_search_volume(volume: Union[int, float, None]) -> int:
    """Validate a monthly search volume, None is treated as 0"""
    if volume is None:
        return 0
    if isinstance(volume, bool) or not isinstance(volume, (int, float)):
        raise KeywordValidationError("Search volume must be a number", field="search_volume")
    if volume < 0:
        raise KeywordValidationError("Search volume cannot be negative", field="search_volume")
    return int(volume)


def validate_cpc(cpc: Union[int, float, None]) -> float:
    """Validate a cost-per-click value, None is treated as 0"""
    if cpc is None:
        return 0.0
    if isinstance(cpc, bool) or not isinstance(cpc, (int, float)):
        raise KeywordValidationError("CPC must be a number", field="cpc")
    if cpc < 0:
        raise KeywordValidationError("CPC cannot be negative", field="cpc")
    return float(cpc)


def timed(operation: str) -> Callable:
    """Decorator that logs how long the wrapped call took"""
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            start = time.perf_counter()
            try:
                return func(*args, **kwargs)
            finally:
                logger.debug(f"{operation} took {time.perf_counter() - start:.4f}s")
        return wrapper
    return decorator
