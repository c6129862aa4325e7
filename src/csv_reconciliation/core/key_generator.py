"""
Matching key generation for reconciliation.

A matching key is derived from the configured fields of a record, in the
configured order, and is used to decide whether a record in folder A and a
record in folder B describe the same entity.
"""

from typing import List, Optional

from ..config.models import MatchingConfig
from ..exceptions import ConfigurationError
from .record import Record

KEY_SEPARATOR = "||"


class MatchingKeyGenerator:
    """Derives deterministic matching keys from records."""

    def __init__(self, config: Optional[MatchingConfig]):
        """
        Initialize the key generator.

        Args:
            config: Matching rules; must name at least one field

        Raises:
            ConfigurationError: If no config is given or it has no matching fields
        """
        if config is None:
            raise ConfigurationError("Matching configuration is required")
        if not config.matching_fields:
            raise ConfigurationError("Matching fields cannot be empty")

        self.config = config
        self._fields = tuple(config.matching_fields)

    @property
    def fields(self) -> List[str]:
        return list(self._fields)

    def generate_key(self, record: Record) -> str:
        """
        Build the matching key for a record.

        Absent fields contribute an empty part. Parts are trimmed and
        lower-cased according to the configuration, then joined with
        ``KEY_SEPARATOR``.
        """
        parts = []
        for field in self._fields:
            value = record.get_value(field)
            if self.config.trim:
                value = value.strip()
            if not self.config.case_sensitive:
                value = value.lower()
            parts.append(value)
        return KEY_SEPARATOR.join(parts)

    def has_required_fields(self, record: Record) -> bool:
        """True if every matching field is present in the record, even if empty."""
        return all(record.has_field(field) for field in self._fields)

    def get_missing_fields(self, record: Record) -> List[str]:
        """Matching fields absent from the record, in configured order."""
        return [field for field in self._fields if not record.has_field(field)]
