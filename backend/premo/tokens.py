"""Request tokens for operations that complete after a delay."""

from __future__ import annotations

import itertools
from dataclasses import dataclass
from typing import Dict, Iterator


@dataclass(frozen=True)
class RequestToken:
    kind: str
    serial: int


class RequestTokens:
    """Tracks the one outstanding token per operation kind.

    Issuing a new token for a kind supersedes the previous one; invalidating
    a kind (or everything) makes any outstanding token stale, so a late
    completion can check `is_current` and drop its result.
    """

    def __init__(self) -> None:
        self._serials: Iterator[int] = itertools.count(1)
        self._current: Dict[str, RequestToken] = {}

    def issue(self, kind: str) -> RequestToken:
        token = RequestToken(kind=kind, serial=next(self._serials))
        self._current[kind] = token
        return token

    def is_current(self, token: RequestToken | None) -> bool:
        return token is not None and self._current.get(token.kind) == token

    def pending(self, kind: str) -> bool:
        return kind in self._current

    def finish(self, token: RequestToken) -> bool:
        """Retire `token`. Returns False if it was already stale."""
        if not self.is_current(token):
            return False
        del self._current[token.kind]
        return True

    def invalidate(self, kind: str | None = None) -> None:
        if kind is None:
            self._current.clear()
        else:
            self._current.pop(kind, None)
