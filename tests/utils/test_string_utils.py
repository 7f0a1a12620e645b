from __future__ import annotations

import pytest

from utils.string_utils import StringUtils


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("  Hola   mundo ", "Hola mundo"),
        ("\tline\none\r\n", "line one"),
        ("   ", ""),
        ("", ""),
        (None, ""),
        ("already normal", "already normal"),
    ],
)
def test_normalize_text(raw: str | None, expected: str) -> None:
    assert StringUtils.normalize_text(raw) == expected


def test_normalize_text_is_idempotent() -> None:
    once: str = StringUtils.normalize_text("  a 　 b\t\tc  ")

    assert StringUtils.normalize_text(once) == once


def test_ensure_str_converts_none_and_other_values() -> None:
    assert StringUtils.ensure_str(None) == ""
    assert StringUtils.ensure_str("x") == "x"
    assert StringUtils.ensure_str(12) == "12"  # type: ignore[arg-type]


def test_generate_cache_key_is_deterministic_and_distinguishes_languages() -> None:
    key: str = StringUtils.generate_cache_key("es", "en", "Hola mundo")

    assert key == StringUtils.generate_cache_key("es", "en", "Hola mundo")
    assert key != StringUtils.generate_cache_key("en", "es", "Hola mundo")
    assert key != StringUtils.generate_cache_key("es", "en", "Hola")


def test_generate_cache_key_does_not_collide_on_hyphenated_codes() -> None:
    assert StringUtils.generate_cache_key("zh-CN", "en", "x") != StringUtils.generate_cache_key("zh", "CN-en", "x")


def test_preview_truncates_long_text() -> None:
    assert StringUtils.preview("short") == "short"
    assert StringUtils.preview("a" * 60) == "a" * 50 + "..."
    assert StringUtils.preview("abcdef", limit=3) == "abc..."
