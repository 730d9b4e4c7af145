from __future__ import annotations
from pathlib import Path
from typing import Any, Protocol, Tuple, runtime_checkable


class PixelBuffer(Protocol):
    """Anything decoded that reports its pixel size (a PIL image qualifies)."""
    @property
    def size(self) -> Tuple[int, int]: ...


@runtime_checkable
class AssetProvider(Protocol):
    """Raw bytes, decoding and display upload for glyph images.

    read_bytes raises AssetIOError, decode raises AssetDecodeError.
    upload returns an opaque handle owned by the display layer.
    """
    def read_bytes(self, path: Path) -> bytes: ...
    def decode(self, data: bytes) -> PixelBuffer: ...
    def upload(self, pixels: PixelBuffer, *, label: str) -> Any: ...

