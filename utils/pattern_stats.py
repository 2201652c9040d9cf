import random
from typing import Optional
import numpy as np
import pandas as pd
from core.annotate import to_frame
from core.exam import ExamEngine
from core.generator import generate_series
from config.settings import DEFAULT_VOLATILITY, EXAM_START_PRICE
from utils.logger import setup_logger

logger = setup_logger("pattern_stats")


def _shares(labels: pd.Series) -> pd.DataFrame:
    counts = labels.value_counts(dropna=False)
    out = counts.rename("count").to_frame()
    out["share_pct"] = np.round(out["count"] / max(int(counts.sum()), 1) * 100.0, 2)
    out.index.name = "label"
    return out.sort_values(["count"], ascending=False)


def label_frequencies(
    series_count: int = 200,
    bars_per_series: int = 50,
    start_price: float = EXAM_START_PRICE,
    volatility: float = DEFAULT_VOLATILITY,
    rng: Optional[random.Random] = None,
) -> pd.DataFrame:
    """
    How often a plain random walk produces each label by itself.
    The first bar of every series has no predecessor and is excluded.
    """
    rng = rng if rng is not None else random.Random()
    frames = []
    for i in range(series_count):
        candles = generate_series(bars_per_series, start_price, volatility, rng=rng)
        df = to_frame(candles).iloc[1:].copy()
        df["series"] = i
        frames.append(df)

    if not frames:
        return _shares(pd.Series([], dtype=object))

    master = pd.concat(frames, ignore_index=True)
    logger.info(f"Classified {len(master)} random-walk bars across {series_count} series")
    return _shares(master["label"])


def scenario_mix(rounds: int = 500, rng: Optional[random.Random] = None) -> pd.DataFrame:
    """Distribution of the true label on the last bar of generated exam scenarios."""
    engine = ExamEngine(rng=rng if rng is not None else random.Random())
    labels = []
    for _ in range(rounds):
        labels.append(engine.actual_label().display_name)
        engine.new_scenario()
    logger.info(f"Sampled {rounds} exam scenarios")
    return _shares(pd.Series(labels, dtype=object))


def body_stats(
    bars: int = 1000,
    start_price: float = EXAM_START_PRICE,
    volatility: float = DEFAULT_VOLATILITY,
    rng: Optional[random.Random] = None,
) -> dict:
    """Body and range percentiles of random-walk bars, to sanity check a volatility setting."""
    candles = generate_series(bars, start_price, volatility, rng=rng)
    body = np.array([abs(c.close - c.open) for c in candles])
    rng_ = np.array([c.high - c.low for c in candles])
    return {
        "bars": bars,
        "volatility": volatility,
        "body_mean": float(np.mean(body)) if bars else 0.0,
        "body_p95": float(np.percentile(body, 95)) if bars else 0.0,
        "range_mean": float(np.mean(rng_)) if bars else 0.0,
        "range_max": float(np.max(rng_)) if bars else 0.0,
    }
