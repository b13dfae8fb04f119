"""
Masking configuration - process-wide, immutable settings.

A MaskConfig is built once at process start (from code, a mapping or the
environment) and handed to every component that needs it. It is never
mutated afterwards, so it can be shared freely between threads.

Environment variables (read by MaskConfig.from_environment):
    MASKING_ENABLED: "true" / "false"
    MASKING_FIELDS: comma-separated field names (e.g. "email,phoneNumber")
    MASKING_STYLE: FULL | PARTIAL | LAST4
    MASKING_CHARACTER: single mask character
    MASKING_MAX_DEPTH: maximum nesting depth before truncation
    MASKING_SCRUB_FREE_TEXT: "true" to scrub plain string log arguments
"""

import logging
import os
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional, Union

from dotenv import load_dotenv

logger = logging.getLogger(__name__)


class MaskStyle(Enum):
    """Available masking styles."""

    DEFAULT = "default"  # use the globally configured style
    FULL = "full"  # "john@gmail.com" -> "**************"
    PARTIAL = "partial"  # "john@gmail.com" -> "jo**@gmail.com"
    LAST4 = "last4"  # "4111111111111234" -> "************1234"

    @classmethod
    def parse(cls, value: Union["MaskStyle", str]) -> "MaskStyle":
        """Accept a MaskStyle or its name/value in any case."""
        if isinstance(value, cls):
            return value
        text = str(value).strip()
        for member in cls:
            if text.upper() == member.name or text.lower() == member.value:
                return member
        raise ValueError(
            f"Unknown mask style {value!r}. Valid: {[m.name for m in cls]}"
        )


DEFAULT_SENSITIVE_FIELDS: tuple[str, ...] = (
    "email",
    "phoneNumber",
    "ssn",
    "creditCardNumber",
    "password",
    "cardNumber",
)

DEFAULT_MAX_DEPTH = 64


@dataclass(frozen=True)
class MaskConfig:
    """
    Immutable masking configuration.

    Attributes:
        enabled: Global switch. When False nothing is masked or traversed.
        fields: Sensitive field names, stored as given. Case and the
                separators "_" / "-" are ignored when matching.
        mask_style: Style used when a field carries no explicit style.
        mask_character: Single character used for masking.
        max_depth: Nesting depth after which traversal emits a
                   truncation marker.
        scrub_free_text: Run plain string log arguments through the
                         free-text scrubber before logging them.
    """

    enabled: bool = True
    fields: tuple[str, ...] = DEFAULT_SENSITIVE_FIELDS
    mask_style: MaskStyle = MaskStyle.PARTIAL
    mask_character: str = "*"
    max_depth: int = DEFAULT_MAX_DEPTH
    scrub_free_text: bool = False

    def __post_init__(self) -> None:
        # frozen dataclass: normalize through object.__setattr__
        style = MaskStyle.parse(self.mask_style)
        if style is MaskStyle.DEFAULT:
            raise ValueError("mask_style must be FULL, PARTIAL or LAST4")
        object.__setattr__(self, "mask_style", style)

        if isinstance(self.fields, str):
            raise ValueError("fields must be a collection of names, not a string")
        object.__setattr__(self, "fields", tuple(self.fields))

        if not isinstance(self.mask_character, str) or len(self.mask_character) != 1:
            raise ValueError(
                f"mask_character must be a single character, got {self.mask_character!r}"
            )
        if isinstance(self.max_depth, bool) or not isinstance(self.max_depth, int) or self.max_depth <= 0:
            raise ValueError(f"max_depth must be a positive integer, got {self.max_depth!r}")

    @classmethod
    def disabled(cls) -> "MaskConfig":
        """A configuration that turns all masking off."""
        return cls(enabled=False)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "MaskConfig":
        """
        Build a config from a mapping such as a parsed YAML/JSON section.

        Accepts the keys enabled, fields, maskStyle and maskCharacter
        (snake_case spellings work too). Missing keys keep their defaults.

        Example:
            MaskConfig.from_mapping({
                "enabled": True,
                "fields": ["email", "phoneNumber"],
                "maskStyle": "PARTIAL",
                "maskCharacter": "#",
            })
        """
        kwargs: dict[str, Any] = {}
        aliases = {
            "enabled": "enabled",
            "fields": "fields",
            "maskStyle": "mask_style",
            "mask_style": "mask_style",
            "mask-style": "mask_style",
            "maskCharacter": "mask_character",
            "mask_character": "mask_character",
            "mask-character": "mask_character",
            "maxDepth": "max_depth",
            "max_depth": "max_depth",
            "scrubFreeText": "scrub_free_text",
            "scrub_free_text": "scrub_free_text",
        }
        for key, value in data.items():
            name = aliases.get(key)
            if name is None:
                logger.debug(f"Ignoring unknown masking option: {key}")
                continue
            kwargs[name] = value

        if isinstance(kwargs.get("fields"), str):
            kwargs["fields"] = _split_names(kwargs["fields"])
        return cls(**kwargs)

    @classmethod
    def from_environment(
        cls, prefix: str = "MASKING_", dotenv_path: Optional[str] = None
    ) -> "MaskConfig":
        """
        Load configuration from environment variables (and a .env file).

        Invalid booleans or integers fall back to their defaults with a
        warning. An unknown style is a configuration error and raises
        ValueError.
        """
        load_dotenv(dotenv_path)

        defaults = cls()
        fields_raw = os.getenv(f"{prefix}FIELDS")
        config = cls(
            enabled=_get_env_bool(f"{prefix}ENABLED", defaults.enabled),
            fields=_split_names(fields_raw) if fields_raw is not None else defaults.fields,
            mask_style=os.getenv(f"{prefix}STYLE", defaults.mask_style.name),
            mask_character=os.getenv(f"{prefix}CHARACTER", defaults.mask_character),
            max_depth=_get_env_int(f"{prefix}MAX_DEPTH", defaults.max_depth),
            scrub_free_text=_get_env_bool(f"{prefix}SCRUB_FREE_TEXT", defaults.scrub_free_text),
        )
        logger.info(
            f"Loaded masking configuration: enabled={config.enabled}, "
            f"style={config.mask_style.name}, fields={len(config.fields)}"
        )
        return config


def _split_names(raw: str) -> tuple[str, ...]:
    return tuple(name.strip() for name in raw.split(",") if name.strip())


def _get_env_bool(key: str, default: bool) -> bool:
    value = os.getenv(key)
    if value is None:
        return default

    cleaned = value.strip().lower()
    if cleaned in ("true", "1", "yes"):
        return True
    if cleaned in ("false", "0", "no"):
        return False
    logger.warning(f"Invalid boolean for {key}: {value!r}, using {default}")
    return default


def _get_env_int(key: str, default: int) -> int:
    value = os.getenv(key)
    if value is None:
        return default

    try:
        parsed = int(value.strip())
    except ValueError:
        logger.warning(f"Invalid integer for {key}: {value!r}, using {default}")
        return default
    if parsed <= 0:
        logger.warning(f"{key} must be positive, got {parsed}, using {default}")
        return default
    return parsed
