# tests/test_api.py

import pytest

import chronomaya
from chronomaya.engines.specs import DEFAULT_SPEC, GlyphSpec


@pytest.fixture
def fresh_engine():
    eng = chronomaya.configure(DEFAULT_SPEC.tweak(cache_capacity=128, max_workers=2))
    yield eng
    chronomaya.configure(DEFAULT_SPEC)


def test_default_engine_is_ready_on_import():
    eng = chronomaya.get_engine()
    assert eng.spec.cache_capacity == DEFAULT_SPEC.cache_capacity
    assert chronomaya.snapshot(0).long_count == chronomaya.LongCount(13, 0, 0, 0, 0)


def test_api_wrappers_share_metrics(fresh_engine):
    chronomaya.snapshot_for_date(2012, 12, 21)
    chronomaya.snapshot(1_872_000)
    r = chronomaya.metrics_report()
    assert (r.cache_hits, r.cache_misses) == (1, 1)
    assert [s.day_offset for s in chronomaya.calculate_range(5, 3)] == [5, 6, 7]


def test_invalid_date_surfaces_through_api(fresh_engine):
    with pytest.raises(chronomaya.InvalidDate):
        chronomaya.snapshot_for_date(2021, 2, 29)


def test_configure_replaces_caches(fresh_engine):
    chronomaya.snapshot(1)
    eng = chronomaya.configure(fresh_engine.spec)
    assert eng is chronomaya.get_engine()
    assert eng.metrics.report().cache_misses == 0


def test_glyph_api_uses_engine_assets(tmp_path, fresh_engine):
    from PIL import Image

    path = tmp_path / "tzolkin" / "glyphs" / "muluk.png"
    path.parent.mkdir(parents=True)
    Image.new("RGBA", (128, 128)).save(path)
    chronomaya.configure(fresh_engine.spec.tweak(glyphs=GlyphSpec.from_root(tmp_path)))

    assert chronomaya.glyph(chronomaya.GlyphCategory.TZOLKIN, "Muluk").size == (128, 128)
    assert chronomaya.glyph(chronomaya.GlyphCategory.TZOLKIN, "Ok") is None
    report = chronomaya.preload_glyphs(parallel=False)
    assert len(report.loaded) == 1
    assert len(report.failures) == 38
    assert chronomaya.metrics_report().asset_loads == 1


def test_make_engine_is_independent_of_the_global():
    eng = chronomaya.make_engine(DEFAULT_SPEC.tweak(cache_capacity=2))
    try:
        eng.calculator.calculate_range(0, 5)
        assert len(eng.calculator.cache) == 2
        assert eng is not chronomaya.get_engine()
    finally:
        eng.close()
