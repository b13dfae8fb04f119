"""Deferred masked rendering for log calls."""

from typing import Any

from .traversal import ObjectMasker


class MaskedObject:
    """
    Wraps a value so that its masked form is only computed when formatted.

    Pass it as a logging argument (not pre-formatted into the message):

        logger.debug("Creating book: %s", MaskedObject.of(book, masker))

    If DEBUG is filtered out, the logging module never calls ``str()`` and
    no traversal happens.
    """

    __slots__ = ("_target", "_masker")

    def __init__(self, target: Any, masker: ObjectMasker):
        self._target = target
        self._masker = masker

    @classmethod
    def of(cls, target: Any, masker: ObjectMasker) -> "MaskedObject":
        return cls(target, masker)

    def __str__(self) -> str:
        return self._masker.to_masked_string(self._target)

    __repr__ = __str__
