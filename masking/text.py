"""
FreeTextScrubber - scrubbing of unstructured log text.

Structured values are masked field by field (see masking.traversal). Plain
string arguments have no field name to match against, so when
MaskConfig.scrub_free_text is on they are run through this scrubber
instead:

1. scrubadub's built-in detectors (emails, phone numbers, URLs, ...)
2. credential patterns (access keys, tokens, passwords in key=value form)

Example:
    scrubber = FreeTextScrubber()
    text, scrubbed = scrubber.scrub("Contact john@example.com, password=hunter22")
    # text: "Contact {{EMAIL}}, password={{REDACTED_PASSWORD}}"
    # scrubbed: True
"""

import logging
import re
from dataclasses import dataclass
from typing import Iterable, Optional, Pattern

import scrubadub

logger = logging.getLogger(__name__)


@dataclass
class ScrubPattern:
    """A single credential pattern and its replacement."""
    name: str
    pattern: Pattern[str]
    replacement: str


CREDENTIAL_PATTERNS: tuple[ScrubPattern, ...] = (
    ScrubPattern(
        name="aws_access_key",
        pattern=re.compile(r'\b(?:AKIA|ABIA|ACCA|ASIA)[A-Z0-9]{16}\b'),
        replacement="{{AWS_ACCESS_KEY}}",
    ),
    ScrubPattern(
        name="bearer_token",
        pattern=re.compile(r'Bearer\s+[A-Za-z0-9_\-.=]{16,}'),
        replacement="Bearer {{TOKEN}}",
    ),
    ScrubPattern(
        name="jwt",
        pattern=re.compile(r'\beyJ[A-Za-z0-9_-]{10,}\.eyJ[A-Za-z0-9_-]{10,}\.[A-Za-z0-9_-]{10,}'),
        replacement="{{JWT_TOKEN}}",
    ),
    ScrubPattern(
        name="secret_value",
        pattern=re.compile(
            r'(?i)\b(api[_-]?key|api[_-]?secret|secret[_-]?key|access[_-]?token|auth[_-]?token)'
            r'\s*[=:]\s*["\']?[A-Za-z0-9_\-+=/.]{8,}["\']?'
        ),
        replacement=r"\1={{REDACTED_KEY}}",
    ),
    ScrubPattern(
        name="password",
        pattern=re.compile(r'(?i)\b(password|passwd|pwd)\s*[=:]\s*["\']?[^\s"\',;]{4,}["\']?'),
        replacement=r"\1={{REDACTED_PASSWORD}}",
    ),
    ScrubPattern(
        name="private_key",
        pattern=re.compile(
            r'-----BEGIN\s+(?:[A-Z]+\s+)?PRIVATE\s+KEY-----[\s\S]*?-----END\s+(?:[A-Z]+\s+)?PRIVATE\s+KEY-----'
        ),
        replacement="{{PRIVATE_KEY}}",
    ),
)


class FreeTextScrubber:
    """
    Replaces recognizable secrets and PII in free text with placeholders.

    The scrubadub detectors run first, then the credential patterns. A
    failing detector or pattern is logged and skipped; the other steps
    still run.
    """

    def __init__(
        self,
        patterns: Optional[Iterable[ScrubPattern]] = None,
        use_detectors: bool = True,
    ):
        self._patterns = list(CREDENTIAL_PATTERNS if patterns is None else patterns)
        self._scrubber = scrubadub.Scrubber() if use_detectors else None

    @property
    def patterns(self) -> list[ScrubPattern]:
        return list(self._patterns)

    def add_pattern(self, pattern: ScrubPattern) -> None:
        """Register an extra pattern (call during setup, not while logging)."""
        self._patterns.append(pattern)

    def scrub(self, text: Optional[str]) -> tuple[Optional[str], bool]:
        """
        Scrub a piece of free text.

        Returns:
            A tuple of (scrubbed_text, was_scrubbed). None and empty strings
            are returned unchanged with was_scrubbed False.
        """
        if not text:
            return text, False

        original = text
        if self._scrubber is not None:
            try:
                text = self._scrubber.clean(text)
            except Exception as e:
                logger.warning(f"Scrubadub error (continuing with patterns): {e}")

        for pattern in self._patterns:
            try:
                text = pattern.pattern.sub(pattern.replacement, text)
            except Exception as e:
                logger.warning(f"Pattern '{pattern.name}' error: {e}")

        return text, text != original
