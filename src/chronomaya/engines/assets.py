"""
chronomaya.engines.assets
-------------------------
Load-once cache of decoded glyph images.

The key universe is fixed (20 Tzolk'in day names, 19 Haab' month names), so
there is no eviction. Successful loads are stored for the life of the
process; failures are never stored, so a fixed file is picked up on the next
request. Reads are plain dict lookups; the map lock is taken only to insert.
"""

from __future__ import annotations

import io
import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from PIL import Image, UnidentifiedImageError

from ..core.engine import AssetProvider, PixelBuffer
from ..core.errors import (
    AssetDecodeError,
    AssetError,
    AssetIOError,
    DimensionMismatch,
    UnknownGlyph,
)
from ..core.types import AssetKey, GlyphCategory, PreloadFailure, PreloadReport
from .metrics import Metrics
from .specs import GlyphSpec, normalize_glyph_name

logger = logging.getLogger(__name__)

GLYPH_SIZE = 128

# Any value, None included, can be a display handle.
_MISSING = object()


class PillowAssetProvider:
    """Reads glyph files from disk and decodes them with Pillow.

    ``uploader`` turns a decoded RGBA image into whatever the display layer
    wants as a handle; without one, the image itself is the handle.
    """

    def __init__(self, uploader: Optional[Callable[[Image.Image, str], Any]] = None) -> None:
        self._uploader = uploader

    def read_bytes(self, path: Path) -> bytes:
        try:
            return Path(path).read_bytes()
        except OSError as e:
            raise AssetIOError(f"Failed to read glyph file {path}: {e}") from e

    def decode(self, data: bytes) -> Image.Image:
        try:
            with Image.open(io.BytesIO(data)) as img:
                img.load()
                return img.convert("RGBA")
        except (UnidentifiedImageError, OSError, ValueError) as e:
            raise AssetDecodeError(f"Failed to decode glyph image: {e}") from e

    def upload(self, pixels: Image.Image, *, label: str) -> Any:
        if self._uploader is None:
            return pixels
        return self._uploader(pixels, label)


class AssetCache:
    def __init__(
        self,
        glyphs: GlyphSpec,
        provider: Optional[AssetProvider] = None,
        metrics: Optional[Metrics] = None,
        *,
        expected_size: int = GLYPH_SIZE,
        max_workers: int = 4,
    ) -> None:
        self.glyphs = glyphs
        self.provider = provider if provider is not None else PillowAssetProvider()
        self.metrics = metrics if metrics is not None else Metrics()
        self.expected_size = expected_size
        self.max_workers = max_workers
        self._handles: Dict[Tuple[GlyphCategory, str], Any] = {}
        self._lock = threading.Lock()
        # One lock per key in flight, so two threads never decode the same glyph.
        self._loading: Dict[Tuple[GlyphCategory, str], threading.Lock] = {}

    def _key(self, category: GlyphCategory, name: str) -> Tuple[GlyphCategory, str]:
        try:
            cat = GlyphCategory(category)
        except ValueError as e:
            raise UnknownGlyph(f"Unknown glyph category {category!r}") from e
        return (cat, normalize_glyph_name(name))

    def _key_lock(self, key: Tuple[GlyphCategory, str]) -> threading.Lock:
        with self._lock:
            lock = self._loading.get(key)
            if lock is None:
                lock = self._loading[key] = threading.Lock()
            return lock

    def _check_size(self, pixels: PixelBuffer) -> None:
        w, h = pixels.size
        if (w, h) != (self.expected_size, self.expected_size):
            raise DimensionMismatch(w, h, self.expected_size)

    def load_texture(self, category: GlyphCategory, name: str, *, glyphs: Optional[GlyphSpec] = None) -> Any:
        """Handle for (category, name), loading it on first use.

        ``glyphs`` overrides the table the path is resolved from.
        Raises UnknownGlyph, AssetIOError, AssetDecodeError or DimensionMismatch.
        """
        key = self._key(category, name)
        handle = self._handles.get(key, _MISSING)
        if handle is not _MISSING:
            return handle

        path = (glyphs or self.glyphs).path_for(*key)
        if path is None:
            raise UnknownGlyph(f"No glyph configured for {key[0].value}/{name}")

        with self._key_lock(key):
            handle = self._handles.get(key, _MISSING)
            if handle is not _MISSING:
                return handle

            t0 = time.perf_counter()
            try:
                pixels = self.provider.decode(self.provider.read_bytes(path))
                self._check_size(pixels)
                handle = self.provider.upload(pixels, label=f"{key[0].value}/{key[1]}")
            except AssetError:
                self.metrics.record_asset_load(time.perf_counter() - t0, ok=False)
                raise
            self.metrics.record_asset_load(time.perf_counter() - t0)

            with self._lock:
                self._handles[key] = handle
            logger.debug("Loaded glyph %s/%s from %s", key[0].value, key[1], path)
            return handle

    def get_texture(self, category: GlyphCategory, name: str) -> Optional[Any]:
        """Handle, or None when the glyph is unavailable (caller renders a text fallback)."""
        try:
            return self.load_texture(category, name)
        except AssetError as e:
            logger.warning("Glyph %s/%s unavailable: %s", getattr(category, "value", category), name, e)
            return None

    def get_glyph_sequence(self, keys: Iterable[AssetKey]) -> List[Optional[Any]]:
        return [self.get_texture(k.category, k.name) for k in keys]

    def is_loaded(self, category: GlyphCategory, name: str) -> bool:
        try:
            return self._key(category, name) in self._handles
        except UnknownGlyph:
            return False

    def __len__(self) -> int:
        return len(self._handles)

    def preload_all(self, glyphs: Optional[GlyphSpec] = None, *, parallel: bool = True) -> PreloadReport:
        """Load every glyph the table declares; one bad glyph never aborts the batch.

        Without ``glyphs`` the cache's own table is used.
        """
        table = glyphs or self.glyphs
        keys = [AssetKey(cat, name) for cat in GlyphCategory for name in table.names(cat)]

        def attempt(key: AssetKey) -> Optional[PreloadFailure]:
            try:
                self.load_texture(key.category, key.name, glyphs=table)
            except AssetError as e:
                return PreloadFailure(key.category, key.name, str(e))
            return None

        t0 = time.perf_counter()
        if parallel and len(keys) > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="chronomaya-glyph") as pool:
                outcomes = list(pool.map(attempt, keys))
        else:
            outcomes = [attempt(k) for k in keys]

        loaded = tuple(k for k, o in zip(keys, outcomes) if o is None)
        failures = tuple(o for o in outcomes if o is not None)
        for f in failures:
            logger.warning("Preload failed for %s/%s: %s", f.category.value, f.name, f.reason)
        logger.info(
            "Preloaded %d/%d glyphs in %.2fms",
            len(loaded),
            len(keys),
            (time.perf_counter() - t0) * 1000,
        )
        return PreloadReport(loaded=loaded, failures=failures)
