"""Compass orientations for ship placement."""

from __future__ import annotations

from enum import Enum


class Orientation(Enum):
    """Placement direction, tagged with the character used to type it."""

    NORTH = "n"
    SOUTH = "s"
    EAST = "e"
    WEST = "o"
    UNKNOWN = "u"

    @property
    def direction(self) -> str:
        return self.value

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_char(cls, ch: str) -> Orientation:
        """Parse the first character of ``ch``; anything unrecognised is UNKNOWN."""
        if not ch:
            return cls.UNKNOWN
        return _BY_CHAR.get(ch[0], cls.UNKNOWN)


_BY_CHAR = {
    member.value: member for member in Orientation if member is not Orientation.UNKNOWN
}


def char_to_orientation(ch: str) -> Orientation:
    return Orientation.from_char(ch)
