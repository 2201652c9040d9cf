import random
from utils.pattern_stats import label_frequencies, scenario_mix, body_stats


def test_label_frequencies_counts_every_bar():
    df = label_frequencies(series_count=5, bars_per_series=20, rng=random.Random(8))
    # First bar of each series has no predecessor and is skipped
    assert int(df["count"].sum()) == 5 * 19
    assert abs(float(df["share_pct"].sum()) - 100.0) < 0.1
    assert "NO PATTERN" in df.index


def test_scenario_mix_is_mostly_patterns():
    df = scenario_mix(rounds=200, rng=random.Random(9))
    assert int(df["count"].sum()) == 200
    none_count = int(df["count"].get("NO PATTERN", 0))
    assert none_count < 200 * 0.3


def test_body_stats_bounds():
    stats = body_stats(bars=500, volatility=4.0, rng=random.Random(10))
    assert stats["bars"] == 500
    assert 0.0 < stats["body_mean"] <= 4.0
    assert stats["range_max"] <= 4.0 * 2 + 1e-9
