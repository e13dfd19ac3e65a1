"""The power label - text shown by the host and the callbacks watching it."""

import logging
from typing import Callable, List

from wattmeter.core.formatter import PLACEHOLDER_LABEL

log = logging.getLogger(__name__)


class PowerLabel:
    """Renderable label handle.

    The periodic task assigns ``text``; the host subscribes to be told when
    it changes.
    """

    def __init__(self, text: str = PLACEHOLDER_LABEL):
        self._text = text
        self._listeners: List[Callable[[str], None]] = []

    @property
    def text(self) -> str:
        return self._text

    @text.setter
    def text(self, value: str) -> None:
        if value == self._text:
            return
        self._text = value
        for listener in list(self._listeners):
            try:
                listener(value)
            except Exception:
                log.exception("Label listener failed")

    def subscribe(self, listener: Callable[[str], None]) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: Callable[[str], None]) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)
