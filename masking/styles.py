"""
StyleEngine - string-level masking algorithms.

Styles:
    FULL    "hello"            -> "*****"
    LAST4   "4111111111111234" -> "************1234"
    PARTIAL content-aware:
            emails   "john@gmail.com" -> "jo**@gmail.com"
            phones   "0712345678"     -> "071****678"
            generic  "password123"    -> "pa*******23"

The engine is stateless apart from the immutable MaskConfig it was built
with, so a single instance can be shared across threads.
"""

from typing import Optional

from .config import MaskConfig, MaskStyle

# Fraction of digits above which a value is treated as a phone number
PHONE_DIGIT_RATIO = 0.5


def mask_full(value: str, mask_char: str) -> str:
    """Replace every character with ``mask_char``."""
    return mask_char * len(value)


def mask_last4(value: str, mask_char: str) -> str:
    """Keep only the last 4 characters. Values of 4 characters or fewer are returned as-is."""
    if len(value) <= 4:
        return value
    return mask_char * (len(value) - 4) + value[-4:]


def mask_email(email: str, mask_char: str) -> str:
    at_idx = email.find("@")
    if at_idx <= 0:
        return mask_full(email, mask_char)

    username, domain = email[:at_idx], email[at_idx:]  # domain keeps the '@'
    if len(username) <= 2:
        return mask_char * len(username) + domain

    shown = min(2, len(username) // 2)
    return username[:shown] + mask_char * (len(username) - shown) + domain


def mask_phone(phone: str, mask_char: str) -> str:
    length = len(phone)
    if length <= 4:
        return mask_full(phone, mask_char)

    shown = min(3, length // 3)
    masked = max(1, length - 2 * shown)
    return phone[:shown] + mask_char * masked + phone[length - shown:]


def mask_partial(value: str, mask_char: str) -> str:
    """
    Content-aware partial masking.

    Checked in order: email (contains '@'), phone-like (more than half ASCII
    digits), then generic. Generic values shorter than 6 characters are
    fully masked; longer ones keep a quarter of their length at each end.
    """
    if "@" in value:
        return mask_email(value, mask_char)

    digits = sum(1 for ch in value if "0" <= ch <= "9")
    if digits / len(value) > PHONE_DIGIT_RATIO:
        return mask_phone(value, mask_char)

    length = len(value)
    if length < 6:
        return mask_full(value, mask_char)
    show = max(1, length // 4)
    return value[:show] + mask_char * (length - 2 * show) + value[length - show:]


_STYLES = {
    MaskStyle.FULL: mask_full,
    MaskStyle.PARTIAL: mask_partial,
    MaskStyle.LAST4: mask_last4,
}


class StyleEngine:
    """
    Applies a masking style to single string values.

    Example:
        engine = StyleEngine(MaskConfig())
        engine.mask("john@gmail.com")                       # "jo**@gmail.com"
        engine.mask("4111111111111234", MaskStyle.LAST4)    # "************1234"
        engine.mask("secret", MaskStyle.FULL, "#")          # "######"
    """

    def __init__(self, config: MaskConfig):
        self._config = config

    @property
    def config(self) -> MaskConfig:
        return self._config

    def resolve_style(self, style: Optional[MaskStyle]) -> MaskStyle:
        """Substitute the configured style for ``None`` / ``DEFAULT``."""
        if style is None or style is MaskStyle.DEFAULT:
            return self._config.mask_style
        return style

    def resolve_character(self, mask_character: Optional[str]) -> str:
        """Substitute the configured character for ``None`` / blank."""
        if mask_character is None or not mask_character.strip():
            return self._config.mask_character
        return mask_character

    def mask(
        self,
        value: Optional[str],
        style: Optional[MaskStyle] = None,
        mask_character: Optional[str] = None,
    ) -> Optional[str]:
        """
        Mask a single value.

        Args:
            value: The string to mask. None is returned as None; empty or
                   whitespace-only strings are returned unchanged.
            style: Style to apply. None or MaskStyle.DEFAULT uses the
                   configured style.
            mask_character: Character to mask with. None or blank uses the
                            configured character.

        Returns:
            A new masked string (the input is never modified).
        """
        if value is None:
            return None
        if not value.strip():
            return value

        algorithm = _STYLES[self.resolve_style(style)]
        return algorithm(value, self.resolve_character(mask_character))
