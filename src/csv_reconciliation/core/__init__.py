"""
Core building blocks: records, key generation and the base manager.
"""

from .key_generator import KEY_SEPARATOR, MatchingKeyGenerator
from .record import Record

__all__ = ["KEY_SEPARATOR", "MatchingKeyGenerator", "Record"]
