"""NMEA fix mode reported in TPV messages."""

from enum import Enum

__all__ = ["Mode"]


class Mode(Enum):
    """Quality of the current fix.

    The wire value is the NMEA mode number. gpsd reports ``0`` (unknown) and
    ``1`` (no fix) for the same practical situation, and newer daemons may
    grow further values, so everything except 2 and 3 decodes to ``NO_FIX``.

    Example:
        >>> Mode.from_wire(3)
        <Mode.FIX_3D: 3>
        >>> str(Mode.FIX_2D)
        '2d'
    """

    NO_FIX = 1
    FIX_2D = 2
    FIX_3D = 3

    @classmethod
    def from_wire(cls, value: int) -> "Mode":
        if value == 2:
            return cls.FIX_2D
        if value == 3:
            return cls.FIX_3D
        return cls.NO_FIX

    def __str__(self) -> str:
        return _LABELS[self]


_LABELS = {
    Mode.NO_FIX: "NoFix",
    Mode.FIX_2D: "2d",
    Mode.FIX_3D: "3d",
}
