"""
log_masked - entry/exit logging with masked arguments.

Example:
    masker = ObjectMasker(MaskConfig())

    class BookService:
        @log_masked(masker)
        def create_book(self, request: BookRequest, api_key: Annotated[str, Mask(style=MaskStyle.FULL)]):
            ...

    # DEBUG Entering BookService.create_book(request={"title": "Clean Code", "email": "ro****@example.com", ...}, api_key=**********)
    # DEBUG Exiting BookService.create_book [3ms]

Argument rendering:
    - None                           -> null
    - str with a Mask directive      -> masked with that directive
    - other str                      -> quoted (scrubbed first if scrub_free_text is on)
    - anything else                  -> ObjectMasker.to_masked_string()

Lines are only built when DEBUG is enabled for the logger. Exceptions from
the wrapped function propagate unchanged.
"""

import functools
import inspect
import logging
import time
from typing import Any, Callable, Optional

from .directives import Mask, parameter_directives
from .text import FreeTextScrubber
from .traversal import ObjectMasker

logger = logging.getLogger(__name__)

_RECEIVER_NAMES = frozenset({"self", "cls"})


class _MaskedArguments:
    """Lazily formatted ``name=value, ...`` list for the entry log line."""

    __slots__ = ("_renderer", "_bound")

    def __init__(self, renderer: "_ArgumentRenderer", bound: inspect.BoundArguments):
        self._renderer = renderer
        self._bound = bound

    def __str__(self) -> str:
        return ", ".join(
            f"{name}={self._renderer.render(name, value)}"
            for name, value in self._bound.arguments.items()
            if name not in _RECEIVER_NAMES
        )


class _ArgumentRenderer:
    def __init__(
        self,
        masker: ObjectMasker,
        directives: dict[str, Mask],
        scrubber: Optional[FreeTextScrubber],
    ):
        self._masker = masker
        self._directives = directives
        self._scrubber = scrubber

    def render(self, name: str, value: Any) -> str:
        try:
            return self._render(name, value)
        except Exception as e:
            logger.debug(f"Could not render argument {name}: {e}")
            return f"<{type(value).__name__}>"

    def _render(self, name: str, value: Any) -> str:
        if value is None:
            return "null"

        directive = self._directives.get(name)
        if isinstance(value, str):
            if directive is not None:
                return self._masker.style_engine.mask(
                    value, directive.style, directive.mask_character
                )
            if self._scrubber is not None:
                value, _ = self._scrubber.scrub(value)
            return f'"{value}"'

        return self._masker.to_masked_string(value)


def log_masked(
    masker: ObjectMasker,
    log: Optional[logging.Logger] = None,
    scrubber: Optional[FreeTextScrubber] = None,
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """
    Decorator: log calls to the wrapped function with masked arguments.

    Args:
        masker: The ObjectMasker used for structured arguments.
        log: Logger to write to. Defaults to the wrapped function's module logger.
        scrubber: Free-text scrubber for plain string arguments. When omitted
                  and the config has scrub_free_text on, a default
                  FreeTextScrubber is created.
    """

    def decorator(fn: Callable[..., Any]) -> Callable[..., Any]:
        target_logger = log or logging.getLogger(fn.__module__)
        method_name = fn.__qualname__.rsplit("<locals>.", 1)[-1]
        signature = inspect.signature(fn)

        text_scrubber = scrubber
        if text_scrubber is None and masker.config.scrub_free_text:
            text_scrubber = FreeTextScrubber()
        renderer = _ArgumentRenderer(masker, parameter_directives(fn), text_scrubber)

        def active() -> bool:
            return masker.config.enabled and target_logger.isEnabledFor(logging.DEBUG)

        def log_entry(args: tuple, kwargs: dict) -> None:
            try:
                bound = signature.bind(*args, **kwargs)
            except TypeError:
                # let the call itself raise the argument error
                return
            target_logger.debug("Entering %s(%s)", method_name, _MaskedArguments(renderer, bound))

        def log_exit(start: float) -> None:
            elapsed_ms = int((time.perf_counter() - start) * 1000)
            target_logger.debug("Exiting %s [%dms]", method_name, elapsed_ms)

        if inspect.iscoroutinefunction(fn):
            @functools.wraps(fn)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                if not active():
                    return await fn(*args, **kwargs)
                log_entry(args, kwargs)
                start = time.perf_counter()
                result = await fn(*args, **kwargs)
                log_exit(start)
                return result

            return async_wrapper

        @functools.wraps(fn)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            if not active():
                return fn(*args, **kwargs)
            log_entry(args, kwargs)
            start = time.perf_counter()
            result = fn(*args, **kwargs)
            log_exit(start)
            return result

        return wrapper

    return decorator
