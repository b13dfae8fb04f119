"""
Masking Module - log-safe representations of sensitive data

This module produces masked copies of values for log output. The original
objects are never modified, and masked output is meant for log lines only,
never for storage or API responses.

Architecture:
    - MaskConfig: Immutable process-wide configuration
    - StyleEngine: String masking styles (FULL, PARTIAL, LAST4)
    - FieldSensitivityResolver: Config-driven sensitive field matching
    - ObjectMasker: Object graph traversal producing masked trees
    - MaskedObject: Lazy wrapper that masks only when a log line is written
    - log_masked: Decorator logging calls with masked arguments
    - FreeTextScrubber: Placeholder scrubbing for unstructured strings

Example:
    from masking import MaskConfig, MaskedObject, ObjectMasker

    masker = ObjectMasker(MaskConfig(fields=("email", "phoneNumber")))
    logger.info("Creating book: %s", MaskedObject.of(book, masker))
    # Creating book: {"title": "Clean Code", "email": "ro****@example.com", ...}
"""

from .config import DEFAULT_SENSITIVE_FIELDS, MaskConfig, MaskStyle
from .decorators import log_masked
from .directives import Mask, directive_table
from .lazy import MaskedObject
from .resolver import FieldSensitivityResolver
from .styles import StyleEngine
from .text import FreeTextScrubber, ScrubPattern
from .traversal import ObjectMasker

__all__ = [
    "DEFAULT_SENSITIVE_FIELDS",
    "FieldSensitivityResolver",
    "FreeTextScrubber",
    "Mask",
    "MaskConfig",
    "MaskStyle",
    "MaskedObject",
    "ObjectMasker",
    "ScrubPattern",
    "StyleEngine",
    "directive_table",
    "log_masked",
]
