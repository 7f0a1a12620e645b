from __future__ import annotations

import pytest

from core.trans.identity import BROWSER_HEADERS, IdentityRotator


def test_empty_pool_raises() -> None:
    with pytest.raises(ValueError, match="at least one"):
        IdentityRotator([])


def test_next_cycles_round_robin() -> None:
    rotator = IdentityRotator(["a", "b", "c"])

    assert [rotator.next() for _ in range(7)] == ["a", "b", "c", "a", "b", "c", "a"]
    assert rotator.cursor == 1


def test_single_identity_pool_always_returns_it() -> None:
    rotator = IdentityRotator(["only"])

    assert {rotator.next() for _ in range(3)} == {"only"}
    assert rotator.cursor == 0


def test_build_headers_adds_browser_headers() -> None:
    rotator = IdentityRotator(["agent-1", "agent-2"])

    first: dict[str, str] = rotator.build_headers()
    second: dict[str, str] = rotator.build_headers()

    assert first["User-Agent"] == "agent-1"
    assert second["User-Agent"] == "agent-2"
    for name, value in BROWSER_HEADERS.items():
        assert first[name] == value
