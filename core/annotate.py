import pandas as pd
from typing import List, Sequence
from models.types import Candle, PatternLabel
from core.classifier import classify

FRAME_COLUMNS = [
    "timestamp", "open", "high", "low", "close",
    "pattern", "direction", "is_plus", "label",
]


def annotate_series(candles: Sequence[Candle]) -> List[PatternLabel]:
    """One label per bar, each against its predecessor. The first bar is always NONE."""
    labels: List[PatternLabel] = []
    prev = None
    for c in candles:
        labels.append(classify(c, prev))
        prev = c
    return labels


def to_frame(candles: Sequence[Candle]) -> pd.DataFrame:
    """Candles plus their pattern labels, one row per bar, for chart renderers."""
    labels = annotate_series(candles)
    df = pd.DataFrame(
        [
            {
                "timestamp": c.timestamp,
                "open": c.open, "high": c.high, "low": c.low, "close": c.close,
                "pattern": label.family.value,
                "direction": label.direction.value if label.direction else None,
                "is_plus": label.is_plus,
                "label": label.display_name,
            }
            for c, label in zip(candles, labels)
        ],
        columns=FRAME_COLUMNS,
    )
    df["datetime"] = pd.to_datetime(df["timestamp"], unit="ms", utc=True)
    return df
