# app/core/guard.py
import logging
from contextlib import contextmanager
from typing import Dict, Iterator, Optional, Set

logger = logging.getLogger(__name__)


class OperationGuard:
    """Allows at most one in-flight mutation per key.

    A call is refused when another call holding the same key has not finished
    yet, or when it carries the same operation token as the last call accepted
    for that key. Everything runs on one event loop, so the checks between two
    awaits cannot interleave.

    Only the ``max_tokens`` most recently used keys remember their last token;
    older entries are evicted first.
    """

    def __init__(self, name: str = "guard", max_tokens: int = 1024):
        self.name = name
        self.max_tokens = max_tokens
        self._in_flight: Set[str] = set()
        self._last_token: Dict[str, str] = {}

    def is_busy(self, key: str) -> bool:
        return key in self._in_flight

    def try_begin(self, key: str, token: Optional[str] = None) -> bool:
        if key in self._in_flight:
            logger.info("%s: dropped call for %s, another operation is in flight", self.name, key)
            return False
        if token is not None and self._last_token.get(key) == token:
            logger.info("%s: dropped duplicate operation %s for %s", self.name, token, key)
            return False

        self._in_flight.add(key)
        if token is not None:
            self._remember(key, token)
        return True

    def _remember(self, key: str, token: str) -> None:
        # dicts keep insertion order, so the first key is the least recently used
        self._last_token.pop(key, None)
        self._last_token[key] = token
        while len(self._last_token) > self.max_tokens:
            del self._last_token[next(iter(self._last_token))]

    def end(self, key: str) -> None:
        self._in_flight.discard(key)

    @contextmanager
    def hold(self, key: str, token: Optional[str] = None) -> Iterator[bool]:
        acquired = self.try_begin(key, token)
        try:
            yield acquired
        finally:
            if acquired:
                self.end(key)
