import random
from models.types import Direction, PatternFamily
from core.annotate import annotate_series, to_frame, FRAME_COLUMNS
from core.generator import generate_series
from core.synthesizer import synthesize


def build_series():
    candles = generate_series(10, 100.0, rng=random.Random(3))
    start = (len(candles)) * 60_000
    candles.extend(synthesize(PatternFamily.RUN, Direction.BULL, True, candles[-1].close, timestamp=start))
    return candles


def test_one_label_per_bar():
    candles = build_series()
    labels = annotate_series(candles)
    assert len(labels) == len(candles)
    assert not labels[0].is_pattern
    assert labels[-1].key == (PatternFamily.RUN, Direction.BULL, True)


def test_frame_for_renderer():
    candles = build_series()
    df = to_frame(candles)

    assert list(df.columns[: len(FRAME_COLUMNS)]) == FRAME_COLUMNS
    assert "datetime" in df.columns
    assert len(df) == len(candles)

    last = df.iloc[-1]
    assert last["pattern"] == "RUN"
    assert last["direction"] == "BULL"
    assert bool(last["is_plus"]) is True
    assert last["label"] == "RUN BULL PLUS"
    assert df.iloc[0]["label"] == "NO PATTERN"
    assert df["close"].iloc[-1] == candles[-1].close


def test_empty_series():
    assert annotate_series([]) == []
    df = to_frame([])
    assert df.empty
