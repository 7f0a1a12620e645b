"""Rotation of client identities (User-Agent strings) for outbound calls."""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from collections.abc import Iterable

__all__: list[str] = ["BROWSER_HEADERS", "IdentityRotator"]

BROWSER_HEADERS: Final[dict[str, str]] = {
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,image/webp,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
    "Connection": "keep-alive",
    "Upgrade-Insecure-Requests": "1",
}


class IdentityRotator:
    """Round-robin over a fixed pool of identity strings.

    Args:
        pool (Iterable[str]): Identity strings, used in the given order.

    Raises:
        ValueError: If the pool is empty.
    """

    def __init__(self, pool: Iterable[str]) -> None:
        self.pool: tuple[str, ...] = tuple(pool)
        if not self.pool:
            msg = "IdentityRotator needs at least one identity"
            raise ValueError(msg)
        self._cursor: int = 0

    @property
    def cursor(self) -> int:
        return self._cursor

    def next(self) -> str:
        """Return the identity at the cursor and advance it, wrapping at the end."""
        identity: str = self.pool[self._cursor]
        self._cursor = (self._cursor + 1) % len(self.pool)
        return identity

    def build_headers(self) -> dict[str, str]:
        """Return the browser-like header set with the next identity as User-Agent."""
        return {"User-Agent": self.next(), **BROWSER_HEADERS}
