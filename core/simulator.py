import random
from typing import List, Optional
from models.types import Candle, Direction, PatternFamily, PatternLabel
from core.classifier import classify
from core.generator import generate_walk, generate_series
from core.synthesizer import ScenarioSynthesizer, default_synthesizer
from config.settings import (
    SIM_SEED_BARS,
    SIM_MAX_BARS,
    SIM_START_PRICE,
    DEFAULT_VOLATILITY,
    BAR_INTERVAL_MS,
)
from utils.logger import setup_logger

logger = setup_logger("simulator")


class ChartSimulator:
    """
    Sliding practice chart. Random bars scroll in one at a time and forced
    patterns can be injected on demand from the last close.
    """

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        synthesizer: Optional[ScenarioSynthesizer] = None,
        seed_bars: int = SIM_SEED_BARS,
        max_bars: int = SIM_MAX_BARS,
        start_price: float = SIM_START_PRICE,
        volatility: float = DEFAULT_VOLATILITY,
    ):
        if seed_bars < 1:
            raise ValueError(f"seed_bars must be >= 1, got {seed_bars}")
        self.rng = rng if rng is not None else random.Random()
        self.synthesizer = synthesizer or default_synthesizer()
        self.max_bars = max_bars
        self.volatility = volatility
        self.candles: List[Candle] = generate_series(seed_bars, start_price, volatility, rng=self.rng)
        self.focused_index: Optional[int] = None

    @property
    def last(self) -> Candle:
        return self.candles[-1]

    def _next_timestamp(self) -> int:
        return self.last.timestamp + BAR_INTERVAL_MS

    def inject(self, family: PatternFamily, direction: Direction, is_plus: bool) -> PatternLabel:
        pair = self.synthesizer.synthesize(
            family, direction, is_plus, self.last.close, timestamp=self._next_timestamp()
        )
        # Window check happens before appending, so the chart may briefly hold max_bars + 2
        if len(self.candles) > self.max_bars:
            self.candles = self.candles[2:]
        self.candles.extend(pair)
        self.focused_index = len(self.candles) - 1

        label = self.focused_label()
        logger.info(f"Injected {family.value} {direction.value} plus={is_plus} -> {label}")
        return label

    def next_candle(self) -> Candle:
        c = generate_walk(self.last.close, self.volatility, rng=self.rng, timestamp=self._next_timestamp())
        self.candles = self.candles[1:] + [c]
        if self.focused_index is not None:
            # Focus follows its bar as the window scrolls left
            self.focused_index = self.focused_index - 1 if self.focused_index > 0 else None
        return c

    def focus(self, index: Optional[int]):
        if index is not None and not 0 <= index < len(self.candles):
            raise IndexError(f"Bar {index} outside chart of {len(self.candles)} bars")
        self.focused_index = index

    def label_at(self, index: int) -> PatternLabel:
        if index < 0:
            index += len(self.candles)
        if not 0 <= index < len(self.candles):
            raise IndexError(f"Bar {index} outside chart of {len(self.candles)} bars")
        prev = self.candles[index - 1] if index > 0 else None
        return classify(self.candles[index], prev)

    def focused_label(self) -> Optional[PatternLabel]:
        if self.focused_index is None or self.focused_index == 0:
            return None
        return self.label_at(self.focused_index)
