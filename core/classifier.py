from dataclasses import dataclass
from typing import Callable, Optional, Tuple
from models.types import Candle, Direction, PatternFamily, PatternLabel


@dataclass(frozen=True)
class PatternRule:
    """
    One liquidity-sweep rule. A rule fires when:
    - the current bar points in `direction`
    - the previous bar points in `direction` (RUN) or against it (REVERSAL)
    - the current bar sweeps the previous extreme on the far side of its close
    - the close clears `floor(prev)` in `direction`
    """
    family: PatternFamily
    direction: Direction
    floor: Callable[[Candle], float]
    reasons: Tuple[str, ...]
    plus_reason: str

    @property
    def prev_direction(self) -> Direction:
        return self.direction if self.family is PatternFamily.RUN else self.direction.opposite

    def fires(self, curr: Candle, prev: Candle) -> bool:
        if curr.direction is not self.direction or prev.direction is not self.prev_direction:
            return False
        if self.direction is Direction.BULL:
            return curr.low < prev.low and curr.close > self.floor(prev)
        return curr.high > prev.high and curr.close < self.floor(prev)

    def is_plus(self, curr: Candle, prev: Candle) -> bool:
        # Close breaks past the opposite extreme of the previous bar
        if self.direction is Direction.BULL:
            return curr.close > prev.high
        return curr.close < prev.low


# Evaluation order is the tie-break: first rule that fires wins.
RULES: Tuple[PatternRule, ...] = (
    PatternRule(
        PatternFamily.RUN, Direction.BULL,
        floor=lambda prev: prev.close,
        reasons=(
            "Continuation (Green → Green)",
            "Liquidity Grab (Low < Prev Low)",
            "Stronger Close (Close > Prev Close)",
        ),
        plus_reason="PLUS: Close > Prev High",
    ),
    PatternRule(
        PatternFamily.RUN, Direction.BEAR,
        floor=lambda prev: prev.close,
        reasons=(
            "Continuation (Red → Red)",
            "Liquidity Grab (High > Prev High)",
            "Weaker Close (Close < Prev Close)",
        ),
        plus_reason="PLUS: Close < Prev Low",
    ),
    PatternRule(
        PatternFamily.REVERSAL, Direction.BULL,
        floor=lambda prev: prev.open,
        reasons=(
            "Reversal (Red → Green)",
            "Liquidity Grab (Low < Prev Low)",
            "Engulfing (Close > Prev Open)",
        ),
        plus_reason="PLUS: Close > Prev High",
    ),
    PatternRule(
        PatternFamily.REVERSAL, Direction.BEAR,
        floor=lambda prev: prev.open,
        reasons=(
            "Reversal (Green → Red)",
            "Liquidity Grab (High > Prev High)",
            "Engulfing (Close < Prev Open)",
        ),
        plus_reason="PLUS: Close < Prev Low",
    ),
)


def match_rule(curr: Candle, prev: Optional[Candle]) -> Optional[PatternRule]:
    if prev is None:
        return None
    for rule in RULES:
        if rule.fires(curr, prev):
            return rule
    return None


def classify(curr: Candle, prev: Optional[Candle] = None) -> PatternLabel:
    """Label `curr` against its predecessor. Total: anything unmatched is NONE."""
    rule = match_rule(curr, prev)
    if rule is None:
        return PatternLabel.none()

    is_plus = rule.is_plus(curr, prev)
    reasons = rule.reasons + (rule.plus_reason,) if is_plus else rule.reasons
    return PatternLabel(
        family=rule.family,
        direction=rule.direction,
        is_plus=is_plus,
        reasons=reasons,
    )
