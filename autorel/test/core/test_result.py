"""Tests for autorel.core.result."""

from __future__ import annotations

import pytest

from autorel.core.result import Err, Ok, Result


def _half(n: int) -> Result[int, str]:
    if n % 2:
        return Err(f"{n} is odd")
    return Ok(n // 2)


def test_repr() -> None:
    assert repr(Ok(3)) == "Ok(3)"
    assert repr(Err("nope")) == "Err('nope')"


def test_equality_is_by_variant_and_payload() -> None:
    assert Ok(1) == Ok(1)
    assert Ok(1) != Err(1)


def test_isinstance_narrowing() -> None:
    result = _half(4)
    assert isinstance(result, Ok)
    assert result.value == 2


def test_match() -> None:
    match _half(3):
        case Ok(value):
            pytest.fail(f"unexpected {value}")
        case Err(error):
            assert error == "3 is odd"
