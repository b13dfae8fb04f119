"""
Per-field masking directives.

A Mask directive marks a field (or a function parameter) as sensitive and
optionally overrides the masking style and character for it:

    @dataclass
    class PaymentDto:
        holder: str
        email: Annotated[str, Mask()]
        card_number: Annotated[str, Mask(style=MaskStyle.LAST4)]
        pin: str = field(default="", metadata={"mask": Mask(style=MaskStyle.FULL)})

A directive always wins over config-driven name matching. Directive tables
are built once per type and cached.
"""

import dataclasses
import functools
import inspect
import logging
import typing
from dataclasses import dataclass
from typing import Any, Callable, Optional

from .config import MaskStyle

logger = logging.getLogger(__name__)

METADATA_KEY = "mask"


@dataclass(frozen=True)
class Mask:
    """
    Masking directive attached to a field or parameter.

    Attributes:
        style: Style to apply. MaskStyle.DEFAULT uses the configured style.
        mask_character: Character to mask with. Blank uses the configured one.
    """
    style: MaskStyle = MaskStyle.DEFAULT
    mask_character: str = ""

    def __post_init__(self) -> None:
        if not isinstance(self.mask_character, str) or len(self.mask_character) > 1:
            raise ValueError(
                f"mask_character must be a single character or blank, got {self.mask_character!r}"
            )


def _directive_in(annotation: Any) -> Optional[Mask]:
    """Return the Mask carried by an Annotated[...] type, if any."""
    for meta in getattr(annotation, "__metadata__", ()):
        if isinstance(meta, Mask):
            return meta
    return None


def _resolved_hints(owner: Any) -> dict[str, Any]:
    try:
        return typing.get_type_hints(owner, include_extras=True)
    except Exception as e:
        # Forward references that cannot be resolved: fall back to raw annotations
        logger.debug(f"Could not resolve annotations of {owner!r}: {e}")
        return {}


@functools.lru_cache(maxsize=None)
def directive_table(cls: type) -> dict[str, Mask]:
    """
    Build the field name -> Mask table for a class.

    Walks the MRO from the most basic class down so that subclasses can
    override a directive declared on a parent. Sources, in order of
    precedence within a class: dataclass field metadata, then
    Annotated[..., Mask(...)] annotations.

    The result is cached per class; treat it as read-only.
    """
    table: dict[str, Mask] = {}
    hints = _resolved_hints(cls)

    for klass in reversed(cls.__mro__):
        for name, annotation in inspect.get_annotations(klass).items():
            directive = _directive_in(hints.get(name, annotation))
            if directive is not None:
                table[name] = directive
            else:
                table.pop(name, None)

    if dataclasses.is_dataclass(cls):
        for f in dataclasses.fields(cls):
            directive = f.metadata.get(METADATA_KEY)
            if isinstance(directive, Mask):
                table[f.name] = directive

    return table


def parameter_directives(func: Callable[..., Any]) -> dict[str, Mask]:
    """Map parameter names of ``func`` to the Mask directives on their annotations."""
    hints = _resolved_hints(func)
    directives: dict[str, Mask] = {}
    try:
        parameters = inspect.signature(func).parameters
    except (TypeError, ValueError):
        return directives

    for name, param in parameters.items():
        directive = _directive_in(hints.get(name, param.annotation))
        if directive is not None:
            directives[name] = directive
    return directives
