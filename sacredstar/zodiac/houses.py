"""Whole-sign house arithmetic."""

from __future__ import annotations

from .sign import Sign

__all__ = ["opposite_house", "sign_of_house", "whole_sign_house"]


def whole_sign_house(target: Sign, ascendant: Sign) -> int:
    """House (1..12) occupied by ``target`` when ``ascendant`` rises."""

    return ((target.number - ascendant.number + 12) % 12) + 1


def sign_of_house(house: int, ascendant: Sign) -> Sign:
    _check(house)
    return Sign.from_int(ascendant.number + house - 1)


def opposite_house(house: int) -> int:
    _check(house)
    return ((house + 5) % 12) + 1


def _check(house: int) -> None:
    if not 1 <= int(house) <= 12:
        raise ValueError(f"Invalid house: {house}")
