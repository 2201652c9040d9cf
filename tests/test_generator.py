import random
from core.generator import generate_walk, generate_series


def test_walk_invariants_over_many_bars():
    rng = random.Random(7)
    price = 100.0
    for i in range(2000):
        vol = (i % 10) + 0.5
        c = generate_walk(price, vol, rng=rng, timestamp=i)
        assert c.open == price
        assert c.low <= min(c.open, c.close)
        assert c.high >= max(c.open, c.close)
        # Body moves at most `volatility`, each wick at most half of it
        assert abs(c.close - c.open) <= vol + 1e-9
        assert c.high - max(c.open, c.close) <= vol * 0.5 + 1e-9
        assert min(c.open, c.close) - c.low <= vol * 0.5 + 1e-9
        price = c.close


def test_same_seed_same_bars():
    a = generate_series(30, 100.0, rng=random.Random(42))
    b = generate_series(30, 100.0, rng=random.Random(42))
    assert a == b

    c = generate_series(30, 100.0, rng=random.Random(43))
    assert a != c


def test_series_threads_close_and_timestamps():
    candles = generate_series(15, 250.0, volatility=2.0, rng=random.Random(1), start_timestamp=1000, interval_ms=500)
    assert len(candles) == 15
    assert candles[0].open == 250.0
    for prev, curr in zip(candles, candles[1:]):
        assert curr.open == prev.close
        assert curr.timestamp - prev.timestamp == 500
    assert candles[0].timestamp == 1000


def test_zero_volatility_is_flat():
    c = generate_walk(42.0, 0.0, rng=random.Random(3), timestamp=0)
    assert (c.open, c.high, c.low, c.close) == (42.0, 42.0, 42.0, 42.0)
    assert c.direction is None


def test_default_timestamp_is_wall_clock():
    c = generate_walk(10.0, rng=random.Random(5))
    assert c.timestamp > 1_600_000_000_000


def test_process_wide_source_when_no_rng():
    random.seed(99)
    a = generate_walk(10.0, timestamp=0)
    random.seed(99)
    b = generate_walk(10.0, timestamp=0)
    assert a == b
