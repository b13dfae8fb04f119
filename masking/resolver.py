"""FieldSensitivityResolver - decides whether a field name is sensitive."""

from typing import Optional

from .config import MaskConfig


def normalize_field_name(name: str) -> str:
    """Lower-case and drop '_' / '-' so phone_number == PhoneNumber == phone-number."""
    return name.lower().replace("_", "").replace("-", "")


class FieldSensitivityResolver:
    """
    Matches field names against the configured sensitive names.

    Matching is exact after normalization: no substring or prefix matches.
    The normalized lookup set is derived once from the (immutable) config.
    """

    def __init__(self, config: MaskConfig):
        self._config = config
        self._normalized = frozenset(normalize_field_name(f) for f in config.fields)

    def is_sensitive_field(self, name: Optional[str]) -> bool:
        if not self._config.enabled or not name:
            return False
        return normalize_field_name(name) in self._normalized
