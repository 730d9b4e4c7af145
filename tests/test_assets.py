# tests/test_assets.py

import io
import pytest
import threading
import time
from concurrent.futures import ThreadPoolExecutor

from PIL import Image

from chronomaya.core.engine import AssetProvider
from chronomaya.core.errors import (
    AssetDecodeError,
    AssetIOError,
    DimensionMismatch,
    UnknownGlyph,
)
from chronomaya.core.types import AssetKey, GlyphCategory
from chronomaya.engines.assets import AssetCache, PillowAssetProvider
from chronomaya.engines.metrics import Metrics
from chronomaya.engines.specs import GlyphSpec

TZ = GlyphCategory.TZOLKIN
HAAB = GlyphCategory.HAAB


class FakePixels:
    def __init__(self, size):
        self.size = size


class CountingProvider:
    """In-memory provider that counts every read, decode and upload."""

    def __init__(self, sizes=None, missing=(), delay=0.0):
        self.sizes = dict(sizes or {})
        self.missing = set(missing)
        self.delay = delay
        self.reads = 0
        self.decodes = 0
        self.uploads = 0
        self._lock = threading.Lock()

    def read_bytes(self, path):
        with self._lock:
            self.reads += 1
        if path.stem in self.missing:
            raise AssetIOError(f"no such file: {path}")
        return path.stem.encode()

    def decode(self, data):
        with self._lock:
            self.decodes += 1
        if self.delay:
            time.sleep(self.delay)
        return FakePixels(self.sizes.get(data.decode(), (128, 128)))

    def upload(self, pixels, *, label):
        with self._lock:
            self.uploads += 1
        return ("handle", label, object())


@pytest.fixture
def glyphs(tmp_path):
    return GlyphSpec.from_root(tmp_path)


def test_counting_provider_satisfies_protocol():
    assert isinstance(CountingProvider(), AssetProvider)
    assert isinstance(PillowAssetProvider(), AssetProvider)


def test_load_once_returns_same_handle(glyphs):
    p = CountingProvider()
    cache = AssetCache(glyphs, p)
    h1 = cache.get_texture(TZ, "Imix")
    h2 = cache.get_texture(TZ, "Imix")
    assert h1 is h2
    assert (p.reads, p.decodes, p.uploads) == (1, 1, 1)
    assert cache.is_loaded(TZ, "imix")


def test_name_lookup_is_normalized(glyphs):
    p = CountingProvider()
    cache = AssetCache(glyphs, p)
    h = cache.get_texture(TZ, "Ak'b'al")
    assert cache.get_texture(TZ, "AKBAL") is h
    assert cache.get_texture(HAAB, "Kumk’u") is cache.get_texture(HAAB, "kumku")
    assert p.decodes == 2


def test_concurrent_first_requests_decode_once(glyphs):
    p = CountingProvider(delay=0.02)
    cache = AssetCache(glyphs, p)
    with ThreadPoolExecutor(max_workers=16) as pool:
        handles = list(pool.map(lambda _: cache.get_texture(HAAB, "Pop"), range(32)))
    assert p.decodes == 1
    assert all(h is handles[0] for h in handles)


def test_wrong_dimensions_are_not_cached(glyphs):
    p = CountingProvider(sizes={"ajaw": (64, 64)})
    metrics = Metrics()
    cache = AssetCache(glyphs, p, metrics)
    with pytest.raises(DimensionMismatch) as ei:
        cache.load_texture(TZ, "Ajaw")
    assert (ei.value.width, ei.value.height) == (64, 64)
    assert "64x64, expected 128x128" in str(ei.value)
    assert cache.get_texture(TZ, "Ajaw") is None
    assert not cache.is_loaded(TZ, "Ajaw")

    # the file gets fixed; the next request loads it
    p.sizes["ajaw"] = (128, 128)
    assert cache.get_texture(TZ, "Ajaw") is not None
    assert p.decodes == 3
    report = metrics.report()
    assert (report.asset_loads, report.asset_failures) == (1, 2)


def test_unknown_glyph(glyphs):
    cache = AssetCache(glyphs, CountingProvider())
    with pytest.raises(UnknownGlyph):
        cache.load_texture(TZ, "Pop")
    assert cache.get_texture(HAAB, "NotAMonth") is None
    assert len(cache) == 0


def test_glyph_sequence_keeps_order_and_gaps(glyphs):
    cache = AssetCache(glyphs, CountingProvider(missing={"ix"}))
    keys = [AssetKey(TZ, "Imix"), AssetKey(TZ, "Ix"), AssetKey(HAAB, "Yax")]
    out = cache.get_glyph_sequence(keys)
    assert out[0][1] == "tzolkin/imix"
    assert out[1] is None
    assert out[2][1] == "haab/yax"


@pytest.mark.parametrize("parallel", [True, False])
def test_preload_is_fail_soft(glyphs, parallel):
    p = CountingProvider(sizes={"wayeb": (128, 64)}, missing={"kawak"})
    cache = AssetCache(glyphs, p)
    report = cache.preload_all(parallel=parallel)
    assert not report.ok
    assert len(report.loaded) == 37
    assert sorted(f.name for f in report.failures) == ["Kawak", "Wayeb'"]
    assert len(cache) == 37
    assert "Loaded 37 glyphs, 2 failed" in str(report)
    # a second preload only retries the failures
    cache.preload_all(parallel=parallel)
    assert p.decodes == 38 + 1


def test_preload_all_succeeds(glyphs):
    report = AssetCache(glyphs, CountingProvider()).preload_all()
    assert report.ok
    assert len(report.loaded) == 39


# ------------------------------------------------------------
# Pillow-backed provider against real files
# ------------------------------------------------------------

def _write_png(path, size=(128, 128), mode="RGB"):
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.new(mode, size, color=(200, 30, 30) if mode == "RGB" else 128).save(path, format="PNG")


def test_pillow_provider_decodes_rgba(tmp_path):
    _write_png(tmp_path / "tzolkin" / "glyphs" / "imix.png")
    cache = AssetCache(GlyphSpec.from_root(tmp_path))
    img = cache.get_texture(TZ, "Imix")
    assert img.size == (128, 128)
    assert img.mode == "RGBA"


def test_pillow_provider_rejects_wrong_size(tmp_path):
    _write_png(tmp_path / "haab" / "glyphs" / "pop.png", size=(100, 128))
    cache = AssetCache(GlyphSpec.from_root(tmp_path))
    with pytest.raises(DimensionMismatch):
        cache.load_texture(HAAB, "Pop")


def test_pillow_provider_errors(tmp_path):
    bad = tmp_path / "tzolkin" / "glyphs" / "ik.png"
    bad.parent.mkdir(parents=True)
    bad.write_bytes(b"definitely not a png")
    cache = AssetCache(GlyphSpec.from_root(tmp_path))
    with pytest.raises(AssetDecodeError):
        cache.load_texture(TZ, "Ik'")
    with pytest.raises(AssetIOError):
        cache.load_texture(TZ, "Lamat")


def test_pillow_provider_uploader(tmp_path):
    _write_png(tmp_path / "haab" / "glyphs" / "wayeb.png", mode="L")
    calls = []

    def uploader(img, label):
        calls.append((img.mode, label))
        return len(calls)

    cache = AssetCache(GlyphSpec.from_root(tmp_path), PillowAssetProvider(uploader))
    assert cache.get_texture(HAAB, "Wayeb'") == 1
    assert cache.get_texture(HAAB, "wayeb") == 1
    assert calls == [("RGBA", "haab/wayeb")]


def test_pillow_decode_from_memory():
    buf = io.BytesIO()
    Image.new("RGBA", (128, 128)).save(buf, format="PNG")
    img = PillowAssetProvider().decode(buf.getvalue())
    assert img.size == (128, 128)


class NoneHandleProvider(CountingProvider):
    """Display layer whose upload hands back None as the handle."""

    def upload(self, pixels, *, label):
        with self._lock:
            self.uploads += 1
        return None


def test_none_handle_is_still_loaded_once(glyphs):
    p = NoneHandleProvider()
    cache = AssetCache(glyphs, p)
    assert cache.get_texture(TZ, "Imix") is None
    assert cache.get_texture(TZ, "Imix") is None
    assert cache.is_loaded(TZ, "Imix")
    assert (p.decodes, p.uploads) == (1, 1)


def test_unknown_category_is_not_available(glyphs):
    cache = AssetCache(glyphs, CountingProvider())
    assert cache.get_texture("calendar-round", "Imix") is None
    with pytest.raises(UnknownGlyph):
        cache.load_texture("calendar-round", "Imix")
    assert not cache.is_loaded("calendar-round", "Imix")
    assert cache.get_texture("tzolkin", "Imix") is not None


def test_preload_with_another_table(glyphs, tmp_path):
    p = CountingProvider()
    cache = AssetCache(glyphs, p)
    extra = GlyphSpec(((TZ, "Imix", tmp_path / "alt" / "imix.png"),))
    report = cache.preload_all(extra, parallel=False)
    assert report.ok
    assert [k.name for k in report.loaded] == ["Imix"]
    assert len(cache) == 1
    # the cache's own table still resolves every other glyph
    assert cache.get_texture(HAAB, "Pop") is not None
