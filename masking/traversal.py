"""
ObjectMasker - masked, log-safe representations of arbitrary object graphs.

The masker walks an object and builds a fresh tree of plain Python data
(dicts, lists, strings, scalars) in which sensitive string fields are
masked. The input object is never modified.

A field is masked when:
    1. it carries a Mask directive (see masking.directives), or
    2. its name matches one of the configured sensitive field names.

Output shape:
    objects        -> dict keyed by field name, in declaration order
    collections    -> list (strings inside follow the owning field's rule)
    masked strings -> str
    scalars        -> passed through (numbers, booleans, enums are never masked)
    mappings       -> copied unmasked, non-JSON keys converted to strings
    repeated node  -> {"$ref": "<Type>@cyclic"}
    too deep       -> {"$truncated": "<Type>"}

Example:
    masker = ObjectMasker(MaskConfig())
    masker.to_masked_string(book)
    # '{"title": "Clean Code", "email": "ro****@example.com", ...}'
"""

import array
import collections
import dataclasses
import logging
import numbers
import sys
from collections.abc import Mapping
from enum import Enum
from typing import Any, Optional

from .config import MaskConfig
from .directives import Mask, directive_table
from .rendering import json_default, json_key, render
from .resolver import FieldSensitivityResolver
from .styles import StyleEngine

logger = logging.getLogger(__name__)

CYCLIC_KEY = "$ref"
TRUNCATED_KEY = "$truncated"

_COLLECTION_TYPES = (list, tuple, set, frozenset, collections.deque)
# Arrays of primitive scalars cannot hold sensitive strings
_PRIMITIVE_ARRAY_TYPES = (bytes, bytearray, memoryview, array.array)
_PLATFORM_MODULES = frozenset(sys.stdlib_module_names) | {"builtins"}


def _is_platform_type(cls: type) -> bool:
    module = getattr(cls, "__module__", None) or ""
    return module.split(".", 1)[0] in _PLATFORM_MODULES


def _has_slots(cls: type) -> bool:
    return any("__slots__" in klass.__dict__ for klass in cls.__mro__ if klass is not object)


def is_complex(value: Any) -> bool:
    """
    Whether ``value`` is an application object worth traversing.

    Built-in and standard-library types, mappings, enums and classes
    themselves are not complex; neither are objects without instance state.
    """
    if isinstance(value, (type, str, numbers.Number, Enum, Mapping)):
        return False
    if isinstance(value, _COLLECTION_TYPES + _PRIMITIVE_ARRAY_TYPES):
        return False
    cls = type(value)
    if _is_platform_type(cls):
        return False
    return hasattr(value, "__dict__") or _has_slots(cls)


def _is_synthetic(name: str) -> bool:
    return name.startswith("__") and name.endswith("__")


def _field_names(obj: Any) -> list[str]:
    """Instance field names of ``obj`` in declaration order, base classes first."""
    if dataclasses.is_dataclass(obj):
        return [f.name for f in dataclasses.fields(obj)]

    names: list[str] = []
    for klass in reversed(type(obj).__mro__):
        slots = klass.__dict__.get("__slots__", ())
        if isinstance(slots, str):
            slots = (slots,)
        for name in slots:
            if not _is_synthetic(name) and name not in names:
                names.append(name)
    for name in getattr(obj, "__dict__", {}):
        if not _is_synthetic(name) and name not in names:
            names.append(name)
    return names


def _plain_string(value: Any) -> str:
    try:
        return str(value)
    except Exception:
        return object.__repr__(value)


class ObjectMasker:
    """
    Produces masked representations of object graphs.

    Thread-safe: all per-call state (the visited set) lives on the stack of
    the calling thread, and the configuration is immutable.
    """

    def __init__(
        self,
        config: MaskConfig,
        style_engine: Optional[StyleEngine] = None,
        resolver: Optional[FieldSensitivityResolver] = None,
    ):
        self._config = config
        self._styles = style_engine or StyleEngine(config)
        self._resolver = resolver or FieldSensitivityResolver(config)

    @property
    def config(self) -> MaskConfig:
        return self._config

    @property
    def style_engine(self) -> StyleEngine:
        return self._styles

    @property
    def resolver(self) -> FieldSensitivityResolver:
        return self._resolver

    def to_masked_representation(self, value: Any) -> Any:
        """
        Build the masked tree for ``value``.

        Returns None for None, and the plain ``str(value)`` when masking is
        disabled or the traversal fails.
        """
        if value is None:
            return None
        if not self._config.enabled:
            return _plain_string(value)
        try:
            return self._visit(value, False, None, set(), 0)
        except Exception as e:
            logger.debug(
                f"Could not produce masked representation for {type(value).__name__}: {e}"
            )
            return _plain_string(value)

    def to_masked_string(self, value: Any) -> str:
        """
        Render ``value`` as masked JSON text, ready for a log line.

        Never raises: on any failure the value's ordinary ``str()`` form is
        returned instead.
        """
        if value is None:
            return "null"
        if not self._config.enabled:
            return _plain_string(value)
        try:
            return render(self._visit(value, False, None, set(), 0))
        except Exception as e:
            logger.debug(
                f"Could not produce masked representation for {type(value).__name__}: {e}"
            )
            return _plain_string(value)

    def _mask_string(self, value: str, directive: Optional[Mask]) -> Optional[str]:
        if directive is not None:
            return self._styles.mask(value, directive.style, directive.mask_character)
        return self._styles.mask(value)

    def _visit(
        self,
        value: Any,
        should_mask: bool,
        directive: Optional[Mask],
        visited: set[int],
        depth: int,
    ) -> Any:
        if value is None:
            return None
        # Enum before str: str-valued enums are still enums
        if isinstance(value, Enum):
            return value
        if isinstance(value, str):
            return self._mask_string(value, directive) if should_mask else value
        if isinstance(value, numbers.Number):
            return value
        if isinstance(value, (Mapping,) + _PRIMITIVE_ARRAY_TYPES):
            return self._copy_plain(value, visited, depth)
        if isinstance(value, _COLLECTION_TYPES):
            return self._visit_collection(value, should_mask, directive, visited, depth)
        if is_complex(value):
            return self._visit_object(value, visited, depth)
        return value

    def _visit_collection(
        self,
        items: Any,
        should_mask: bool,
        directive: Optional[Mask],
        visited: set[int],
        depth: int,
    ) -> Any:
        key = id(items)
        if key in visited:
            return {CYCLIC_KEY: f"{type(items).__name__}@cyclic"}
        if depth >= self._config.max_depth:
            return {TRUNCATED_KEY: type(items).__name__}

        # Collections are only guarded while on the current path, so a list
        # shared by two fields is rendered twice.
        visited.add(key)
        try:
            return [
                self._visit(item, should_mask, directive, visited, depth + 1)
                for item in items
            ]
        finally:
            visited.discard(key)

    def _copy_plain(self, value: Any, visited: set[int], depth: int) -> Any:
        """
        Unmasked copy of a mapping or primitive array.

        Nothing inside is masked, but every container is rebuilt so the
        tree never shares state with the input. Keys JSON cannot hold are
        converted to strings; other leaves JSON cannot hold are reduced to
        their rendered form.
        """
        if value is None or isinstance(value, (str, numbers.Number, Enum)):
            return value
        if isinstance(value, (bytes, bytearray, memoryview)):
            return bytes(value)
        if isinstance(value, array.array):
            return value.tolist()
        if not isinstance(value, (Mapping,) + _COLLECTION_TYPES):
            return json_default(value)

        key = id(value)
        if key in visited:
            return {CYCLIC_KEY: f"{type(value).__name__}@cyclic"}
        if depth >= self._config.max_depth:
            return {TRUNCATED_KEY: type(value).__name__}

        visited.add(key)
        try:
            if isinstance(value, Mapping):
                return {
                    json_key(k): self._copy_plain(v, visited, depth + 1)
                    for k, v in value.items()
                }
            return [self._copy_plain(item, visited, depth + 1) for item in value]
        finally:
            visited.discard(key)

    def _visit_object(self, obj: Any, visited: set[int], depth: int) -> Any:
        cls = type(obj)
        if id(obj) in visited:
            return {CYCLIC_KEY: f"{cls.__name__}@cyclic"}
        if depth >= self._config.max_depth:
            return {TRUNCATED_KEY: cls.__name__}
        visited.add(id(obj))

        directives = directive_table(cls)
        result: dict[str, Any] = {}
        for name in _field_names(obj):
            try:
                field_value = getattr(obj, name)
            except Exception as e:
                logger.debug(f"Could not access field {cls.__name__}.{name}: {e}")
                continue

            directive = directives.get(name)
            should_mask = directive is not None or self._resolver.is_sensitive_field(name)
            result[name] = self._visit(field_value, should_mask, directive, visited, depth + 1)

        return result
