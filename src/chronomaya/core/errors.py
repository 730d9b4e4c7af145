class ChronoMayaError(Exception):
    """Base error."""

class InvalidDate(ChronoMayaError, ValueError):
    """Raised when a Gregorian (year, month, day) triple does not name a real day."""

class ConfigurationError(ChronoMayaError):
    """Raised when an engine cannot be built from its spec (bad capacity, missing constants)."""

class AssetError(ChronoMayaError):
    """Base for glyph lookup failures. Local to one glyph, never cached."""

class UnknownGlyph(AssetError):
    """The glyph table declares no path for the requested (category, name)."""

class AssetIOError(AssetError):
    """Raw bytes for a glyph could not be read."""

class AssetDecodeError(AssetError):
    """Raw bytes were read but are not a decodable image."""

class DimensionMismatch(AssetError):
    def __init__(self, width: int, height: int, expected: int = 128) -> None:
        super().__init__(f"Invalid glyph dimensions: {width}x{height}, expected {expected}x{expected}")
        self.width = width
        self.height = height
        self.expected = expected
