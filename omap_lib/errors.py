# -*- coding: utf-8 -*-
"""Error handling for map construction and serialization.

Every error raised by omap_lib derives from ``OmapError``. Only
``GeomagneticError`` is recovered internally (the declination then
defaults to 0); all other errors abort the current operation and the
caller should discard any partial output.
"""


class OmapError(Exception):
    """Base class of all omap_lib errors.

    Attributes:
        message: Error message
    """

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def __str__(self) -> str:
        return self.message


class MapCoordinateOverflowError(OmapError):
    """A projected coordinate does not fit in the map coordinate range."""

    def __init__(self, x: float, y: float):
        self.x = x
        self.y = y
        super().__init__(
            f"Map coordinate overflow at ({x}, {y}), double check that all "
            "input files are over the same general area and in the same "
            "coordinate reference system."
        )


class MismatchedGeometryError(OmapError):
    """The geometry does not match the kind expected by the symbol."""


class ProjectionError(OmapError):
    """The projection engine failed or produced untrustworthy results."""


class GeomagneticError(OmapError):
    """The geomagnetic model could not compute a declination."""


class OmapWriteError(OmapError):
    """The output file could not be opened or written."""


class MapConsumedError(OmapError):
    """The map has already been written and can no longer be used."""

    def __init__(self) -> None:
        super().__init__("Map has already been written to file")
