import random
import time
from typing import List, Optional
from models.types import Candle
from config.settings import DEFAULT_VOLATILITY, BAR_INTERVAL_MS


def _now_ms() -> int:
    return int(time.time() * 1000)


def generate_walk(
    prev_close: float,
    volatility: float = DEFAULT_VOLATILITY,
    rng: Optional[random.Random] = None,
    timestamp: Optional[int] = None,
) -> Candle:
    """
    Unconstrained next bar opening at `prev_close`.
    Body moves at most `volatility` either way, each wick adds up to half of it.

    The body draw is `(u - 0.5) * volatility * 2` with u uniform in [0, 1),
    i.e. half the range of `uniform(-1, 1) * volatility * 2`.
    """
    rng = rng if rng is not None else random
    change = (rng.random() - 0.5) * volatility * 2
    open_ = prev_close
    close = prev_close + change
    high = max(open_, close) + abs(rng.random() * volatility * 0.5)
    low = min(open_, close) - abs(rng.random() * volatility * 0.5)
    return Candle(
        open=open_,
        high=high,
        low=low,
        close=close,
        timestamp=_now_ms() if timestamp is None else timestamp,
    )


def generate_series(
    count: int,
    start_price: float,
    volatility: float = DEFAULT_VOLATILITY,
    rng: Optional[random.Random] = None,
    start_timestamp: int = 0,
    interval_ms: int = BAR_INTERVAL_MS,
) -> List[Candle]:
    """Sequential walk of `count` bars, each opening at the previous close."""
    candles: List[Candle] = []
    price = start_price
    for i in range(count):
        c = generate_walk(price, volatility, rng=rng, timestamp=start_timestamp + i * interval_ms)
        candles.append(c)
        price = c.close
    return candles
