import pytest
from models.types import Candle, Direction, PatternFamily, PatternLabel
from core.classifier import classify, match_rule, RULES


def create_candle(open_price, high, low, close, timestamp=0):
    return Candle(open=open_price, high=high, low=low, close=close, timestamp=timestamp)


# (prev, curr, expected key) - each curr sweeps the previous extreme
CASES = [
    # RUN BULL: green -> green, lower low, higher close, close inside prev high
    (create_candle(100, 109, 97, 106), create_candle(106, 110, 94.5, 107.5),
     (PatternFamily.RUN, Direction.BULL, False)),
    # RUN BULL PLUS: close above prev high
    (create_candle(100, 109, 97, 106), create_candle(106, 113.5, 94.5, 112),
     (PatternFamily.RUN, Direction.BULL, True)),
    # RUN BEAR
    (create_candle(100, 103, 91, 94), create_candle(94, 105.5, 91.5, 92.5),
     (PatternFamily.RUN, Direction.BEAR, False)),
    # RUN BEAR PLUS
    (create_candle(100, 103, 91, 94), create_candle(94, 105.5, 86.5, 88),
     (PatternFamily.RUN, Direction.BEAR, True)),
    # REV BULL: red -> green, close above prev open
    (create_candle(100, 103, 91, 94), create_candle(94, 103, 88.5, 101.5),
     (PatternFamily.REVERSAL, Direction.BULL, False)),
    # REV BULL PLUS
    (create_candle(100, 103, 91, 94), create_candle(94, 107.5, 88.5, 106),
     (PatternFamily.REVERSAL, Direction.BULL, True)),
    # REV BEAR: green -> red, close below prev open
    (create_candle(100, 109, 97, 106), create_candle(106, 111.5, 97, 98.5),
     (PatternFamily.REVERSAL, Direction.BEAR, False)),
    # REV BEAR PLUS
    (create_candle(100, 109, 97, 106), create_candle(106, 111.5, 92.5, 94),
     (PatternFamily.REVERSAL, Direction.BEAR, True)),
]


@pytest.mark.parametrize("prev,curr,expected", CASES)
def test_rule_table(prev, curr, expected):
    label = classify(curr, prev)
    assert label.key == expected
    assert label.display_name != "NO PATTERN"


def test_no_predecessor_is_none():
    c = create_candle(100, 110, 90, 105)
    label = classify(c, None)
    assert label.family is PatternFamily.NONE
    assert label.direction is None
    assert label.is_plus is False
    assert label.reasons == ()
    assert classify(c) == PatternLabel.none()


def test_doji_never_matches():
    prev = create_candle(100, 103, 91, 94)
    doji = create_candle(94, 110, 80, 94)
    assert classify(doji, prev).family is PatternFamily.NONE

    # A doji setup bar has no direction either
    green = create_candle(100, 110, 80, 105)
    assert classify(green, create_candle(100, 102, 98, 100)).family is PatternFamily.NONE


def test_no_liquidity_grab_is_none():
    prev = create_candle(100, 109, 97, 106)
    # Green, higher close, but low stays above prev low
    curr = create_candle(106, 112, 98, 108)
    assert classify(curr, prev).family is PatternFamily.NONE


def test_close_must_clear_floor():
    prev = create_candle(100, 103, 91, 94)
    # Green after red with a sweep, but closes below prev open -> not a reversal
    curr = create_candle(94, 99, 88, 98)
    assert classify(curr, prev).family is PatternFamily.NONE

    # Exactly at prev open is not enough either
    curr = create_candle(94, 101, 88, 100)
    assert classify(curr, prev).family is PatternFamily.NONE


def test_plus_requires_strict_break():
    prev = create_candle(100, 103, 91, 94)
    at_high = create_candle(94, 104, 88, 103)
    label = classify(at_high, prev)
    assert label.key == (PatternFamily.REVERSAL, Direction.BULL, False)

    past_high = create_candle(94, 104, 88, 103.01)
    assert classify(past_high, prev).is_plus is True


def test_reasons_per_rule():
    prev = create_candle(100, 103, 91, 94)
    label = classify(create_candle(94, 107.5, 88.5, 106), prev)
    assert label.reasons == (
        "Reversal (Red → Green)",
        "Liquidity Grab (Low < Prev Low)",
        "Engulfing (Close > Prev Open)",
        "PLUS: Close > Prev High",
    )

    label = classify(create_candle(94, 105.5, 91.5, 92.5), prev)
    assert label.reasons == (
        "Continuation (Red → Red)",
        "Liquidity Grab (High > Prev High)",
        "Weaker Close (Close < Prev Close)",
    )


def test_classifier_is_deterministic():
    prev, curr, _ = CASES[5]
    first = classify(curr, prev)
    for _ in range(5):
        again = classify(curr, prev)
        assert again == first
        assert again.reasons == first.reasons


def test_rule_order_and_prev_direction():
    assert [(r.family, r.direction) for r in RULES] == [
        (PatternFamily.RUN, Direction.BULL),
        (PatternFamily.RUN, Direction.BEAR),
        (PatternFamily.REVERSAL, Direction.BULL),
        (PatternFamily.REVERSAL, Direction.BEAR),
    ]
    assert [r.prev_direction for r in RULES] == [
        Direction.BULL, Direction.BEAR, Direction.BEAR, Direction.BULL,
    ]
    assert match_rule(create_candle(1, 2, 0, 1.5), None) is None


def test_bar_that_sweeps_both_sides():
    # Outside bar: sweeps both prev high and prev low. Green after green -> RUN BULL PLUS only.
    prev = create_candle(100, 109, 97, 106)
    curr = create_candle(106, 120, 90, 115)
    label = classify(curr, prev)
    assert label.key == (PatternFamily.RUN, Direction.BULL, True)
