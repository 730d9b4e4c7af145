# tests/test_cli.py

import pytest

import chronomaya
from chronomaya import cli
from chronomaya.diagnostics import cache_bench, pretty_month, round_trip
from chronomaya.engines.specs import DEFAULT_SPEC


@pytest.fixture(autouse=True)
def default_engine():
    chronomaya.configure(DEFAULT_SPEC)
    yield
    chronomaya.configure(DEFAULT_SPEC)


def test_day_command(capsys):
    assert cli.main(["day", "2012-12-21"]) == 0
    out = capsys.readouterr().out
    assert "13.0.0.0.0  (era count 26.0.0.0.0)" in out
    assert "4 Ajaw" in out
    assert "3 K'ank'in" in out
    assert "Winter Solstice (0 days away)" in out


def test_bare_negative_date_shortcut(capsys):
    assert cli.main(["-3113-08-11"]) == 0
    out = capsys.readouterr().out
    assert "The Maya creation date" in out
    assert "8 Kumk'u" in out


def test_day_command_rejects_impossible_date(capsys):
    assert cli.main(["day", "2023-02-30"]) == 2
    assert "error:" in capsys.readouterr().err


def test_day_command_rejects_malformed_date():
    with pytest.raises(SystemExit):
        cli.main(["day", "21/12/2012"])


def test_offset_and_range(capsys):
    assert cli.main(["offset", "0"]) == 0
    assert "Days since 13.0.0.0.0: 0" in capsys.readouterr().out

    assert cli.main(["range", "0", "3"]) == 0
    lines = capsys.readouterr().out.strip().splitlines()
    assert len(lines) == 3
    assert lines[0].split()[0] == "0"
    assert lines[2].split()[0] == "2"


def test_metrics_command(capsys):
    assert cli.main(["metrics", "--start", "0", "--count", "10"]) == 0
    assert "Performance Metrics:" in capsys.readouterr().out


def test_glyphs_command_reports_failures(tmp_path, capsys):
    assert cli.main(["glyphs", "--root", str(tmp_path), "--serial"]) == 1
    out = capsys.readouterr().out
    assert "Loaded 0 glyphs, 39 failed" in out


def test_pretty_month(capsys):
    assert cli.main(["pretty-month", "--greg", "2012", "12"]) == 0
    out = capsys.readouterr().out
    assert "Mo" in out and "Su" in out
    assert "4 Ajaw" in out


def test_round_trip_diagnostic(capsys):
    assert round_trip.main(["--N", "500", "--seed", "1"]) == 0
    assert "All round-trip tests passed." in capsys.readouterr().out


def test_cache_bench_second_pass_hits(capsys):
    timings = cache_bench.run_passes(0, 50, 2, 128, 2)
    assert len(timings) == 2
    assert "Cache Hits: 50" in capsys.readouterr().out
    assert pretty_month.dow_header().startswith("Mo")
