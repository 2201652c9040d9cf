from itertools import product
from typing import Iterable, Optional, Tuple
from models.types import Candle, Direction, PatternFamily, SynthesisTuning
from core.classifier import classify
from config.settings import (
    BAR_INTERVAL_MS,
    SYNTH_PREV_BODY,
    SYNTH_PREV_WICK,
    SYNTH_GRAB_AMOUNT,
    SYNTH_PLUS_BUFFER,
    SYNTH_REGULAR_BUFFER,
    SYNTH_CLOSE_WICK,
    SYNTH_RETRACE_WICK,
    SYNTH_PROBE_PRICES,
)
from utils.logger import setup_logger

logger = setup_logger("synthesizer")

DEFAULT_TUNING = SynthesisTuning(
    prev_body=SYNTH_PREV_BODY,
    prev_wick=SYNTH_PREV_WICK,
    grab_amount=SYNTH_GRAB_AMOUNT,
    plus_buffer=SYNTH_PLUS_BUFFER,
    regular_buffer=SYNTH_REGULAR_BUFFER,
    close_wick=SYNTH_CLOSE_WICK,
    retrace_wick=SYNTH_RETRACE_WICK,
)

PATTERN_FAMILIES = (PatternFamily.RUN, PatternFamily.REVERSAL)
DIRECTIONS = (Direction.BULL, Direction.BEAR)

# Every label the synthesizer can be asked for: (family, direction, is_plus)
TARGET_LABELS: Tuple[Tuple[PatternFamily, Direction, bool], ...] = tuple(
    product(PATTERN_FAMILIES, DIRECTIONS, (False, True))
)


class SynthesisTuningError(ValueError):
    """Raised when a tuning produces a pair that does not classify to its target."""


class ScenarioSynthesizer:
    """
    Builds a (prev, curr) bar pair that classifies to a requested label.

    The construction is a fixed numeric recipe, not a solver: it is only
    correct for tunings inside SynthesisTuning's validity ranges. Every
    instance re-checks all eight labels at construction.
    """

    def __init__(
        self,
        tuning: Optional[SynthesisTuning] = None,
        interval_ms: int = BAR_INTERVAL_MS,
        probe_prices: Iterable[float] = SYNTH_PROBE_PRICES,
    ):
        self.tuning = tuning or DEFAULT_TUNING
        self.interval_ms = interval_ms
        self.verify(probe_prices)

    def verify(self, probe_prices: Iterable[float] = SYNTH_PROBE_PRICES):
        failures = []
        for price in probe_prices:
            for family, direction, is_plus in TARGET_LABELS:
                prev, curr = self._build(family, direction, is_plus, price, 0)
                failure = self._check(family, direction, is_plus, price, prev, curr)
                if failure:
                    failures.append(failure)
        if failures:
            logger.error(f"Synthesis tuning {self.tuning} failed verification: {failures}")
            raise SynthesisTuningError(
                f"Tuning does not reproduce {len(failures)} target label(s): {', '.join(failures)}"
            )

    @staticmethod
    def _check(family, direction, is_plus, price, prev: Candle, curr: Candle) -> Optional[str]:
        label = classify(curr, prev)
        if prev.is_valid and curr.is_valid and label.matches(family, direction, is_plus):
            return None
        return f"{family.value}/{direction.value}/plus={is_plus}@{price} -> {label}"

    def synthesize(
        self,
        family: PatternFamily,
        direction: Direction,
        is_plus: bool,
        start_price: float,
        timestamp: int = 0,
    ) -> Tuple[Candle, Candle]:
        """
        Raises SynthesisTuningError when the pair does not classify back to
        the requested label, e.g. once start_price is so large that the
        tuning offsets fall below float resolution.
        """
        try:
            family = PatternFamily(family)
            direction = Direction(direction)
        except ValueError:
            raise ValueError(f"Cannot synthesize {family!r}/{direction!r}") from None
        if family not in PATTERN_FAMILIES:
            raise ValueError(f"Cannot synthesize family {family!r}; expected RUN or REVERSAL")
        is_plus = bool(is_plus)
        start_price = float(start_price)

        prev, curr = self._build(family, direction, is_plus, start_price, timestamp)
        failure = self._check(family, direction, is_plus, start_price, prev, curr)
        if failure:
            logger.warning(f"Synthesized pair misses its target: {failure}")
            raise SynthesisTuningError(f"Cannot reproduce target label: {failure}")
        return prev, curr

    def _build(
        self,
        family: PatternFamily,
        direction: Direction,
        is_plus: bool,
        start_price: float,
        timestamp: int,
    ) -> Tuple[Candle, Candle]:
        t = self.tuning

        # Setup bar: same direction for RUN, opposite for REVERSAL
        prev_bull = (direction is Direction.BULL) == (family is PatternFamily.RUN)
        prev_open = start_price
        prev_close = start_price + t.prev_body if prev_bull else start_price - t.prev_body
        prev_high = max(prev_open, prev_close) + t.prev_wick
        prev_low = min(prev_open, prev_close) - t.prev_wick
        prev = Candle(open=prev_open, high=prev_high, low=prev_low, close=prev_close, timestamp=timestamp)

        # Pattern bar opens where the setup bar closed
        curr_open = prev_close
        if direction is Direction.BULL:
            curr_low = prev_low - t.grab_amount
            if is_plus:
                curr_close = prev_high + t.plus_buffer
            else:
                curr_close = prev_high - t.regular_buffer
            curr_high = max(curr_close + t.close_wick, prev_high - t.retrace_wick)
        else:
            curr_high = prev_high + t.grab_amount
            if is_plus:
                curr_close = prev_low - t.plus_buffer
            else:
                curr_close = prev_low + t.regular_buffer
            curr_low = min(curr_close - t.close_wick, prev_low + t.retrace_wick)

        curr = Candle(
            open=curr_open,
            high=curr_high,
            low=curr_low,
            close=curr_close,
            timestamp=timestamp + self.interval_ms,
        )
        return prev, curr


_default_synthesizer: Optional[ScenarioSynthesizer] = None


def default_synthesizer() -> ScenarioSynthesizer:
    global _default_synthesizer
    if _default_synthesizer is None:
        _default_synthesizer = ScenarioSynthesizer()
    return _default_synthesizer


def synthesize(
    family: PatternFamily,
    direction: Direction,
    is_plus: bool,
    start_price: float,
    timestamp: int = 0,
    tuning: Optional[SynthesisTuning] = None,
) -> Tuple[Candle, Candle]:
    synthesizer = default_synthesizer() if tuning is None else ScenarioSynthesizer(tuning)
    return synthesizer.synthesize(family, direction, is_plus, start_price, timestamp=timestamp)
