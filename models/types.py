from enum import Enum
from dataclasses import dataclass, field
from typing import Optional, Tuple


class PatternFamily(str, Enum):
    RUN = "RUN"
    REVERSAL = "REV"
    NONE = "NONE"


class Direction(str, Enum):
    BULL = "BULL"
    BEAR = "BEAR"

    @property
    def opposite(self) -> "Direction":
        return Direction.BEAR if self is Direction.BULL else Direction.BULL


class ExamState(Enum):
    GUESSING = "GUESSING"
    RESULT = "RESULT"


@dataclass(frozen=True, slots=True)
class Candle:
    open: float
    high: float
    low: float
    close: float
    timestamp: int = 0  # Milliseconds

    @property
    def is_bullish(self) -> bool:
        return self.close > self.open

    @property
    def is_bearish(self) -> bool:
        return self.close < self.open

    @property
    def direction(self) -> Optional[Direction]:
        # Doji (close == open) has no direction
        if self.is_bullish:
            return Direction.BULL
        if self.is_bearish:
            return Direction.BEAR
        return None

    @property
    def is_valid(self) -> bool:
        return self.low <= min(self.open, self.close) and self.high >= max(self.open, self.close)

    def __str__(self):
        return f"O:{self.open:.2f} H:{self.high:.2f} L:{self.low:.2f} C:{self.close:.2f}"


@dataclass(frozen=True)
class PatternLabel:
    family: PatternFamily
    direction: Optional[Direction] = None
    is_plus: bool = False
    reasons: Tuple[str, ...] = ()

    @classmethod
    def none(cls) -> "PatternLabel":
        return cls(family=PatternFamily.NONE)

    @property
    def is_pattern(self) -> bool:
        return self.family is not PatternFamily.NONE

    @property
    def key(self) -> Tuple[PatternFamily, Optional[Direction], bool]:
        return (self.family, self.direction, self.is_plus)

    def matches(self, family: PatternFamily, direction: Optional[Direction], is_plus: bool) -> bool:
        return self.key == (family, direction, is_plus)

    @property
    def display_name(self) -> str:
        if not self.is_pattern:
            return "NO PATTERN"
        name = f"{self.family.value} {self.direction.value}"
        return f"{name} PLUS" if self.is_plus else name

    def __str__(self):
        return self.display_name


@dataclass(frozen=True)
class Guess:
    """A player's answer: one of the eight pattern labels, or explicitly 'no pattern'."""
    family: PatternFamily
    direction: Optional[Direction] = None
    is_plus: bool = False

    @classmethod
    def none(cls) -> "Guess":
        return cls(family=PatternFamily.NONE)

    @property
    def is_none(self) -> bool:
        return self.family is PatternFamily.NONE

    @property
    def display_name(self) -> str:
        return PatternLabel(self.family, self.direction, self.is_plus).display_name


@dataclass
class ScoreState:
    score: int = 0
    streak: int = 0


@dataclass(frozen=True)
class GuessResult:
    correct: bool
    actual: PatternLabel
    guess: Guess
    points: int = 0

    @property
    def explanation(self) -> Tuple[str, ...]:
        # Reasons are only surfaced when the player got it wrong
        return () if self.correct else self.actual.reasons

    def __str__(self):
        verdict = "CORRECT" if self.correct else "WRONG"
        return f"{verdict} | guess={self.guess.display_name} | actual={self.actual.display_name} | +{self.points}"


@dataclass(frozen=True)
class SynthesisTuning:
    """
    Offsets used to build a forced pattern pair.

    Validity ranges (every value in price units):
    - prev_body > 0: body of the setup bar, fixes its direction
    - prev_wick > 0: wick added on both ends of the setup bar
    - grab_amount > 0: how far the pattern bar pierces the setup extreme
    - plus_buffer > 0: distance past the opposite setup extreme on a PLUS close
    - 0 <= regular_buffer < prev_wick: pull-back from the opposite extreme on a
      regular close; must stay inside the wick so the close still clears the
      setup bar's open and close
    - close_wick >= 0, retrace_wick >= 0: cosmetic wick on the close side

    Changing any of these requires re-running the round-trip verification in
    ScenarioSynthesizer, which happens on construction.
    """
    prev_body: float = 6.0
    prev_wick: float = 3.0
    grab_amount: float = 2.5
    plus_buffer: float = 3.0
    regular_buffer: float = 1.5
    close_wick: float = 1.5
    retrace_wick: float = 0.5

    def __post_init__(self):
        for name in ("prev_body", "prev_wick", "grab_amount", "plus_buffer"):
            if not getattr(self, name) > 0:
                raise ValueError(f"{name} must be > 0, got {getattr(self, name)}")
        for name in ("regular_buffer", "close_wick", "retrace_wick"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be >= 0, got {getattr(self, name)}")
        if not self.regular_buffer < self.prev_wick:
            raise ValueError(
                f"regular_buffer ({self.regular_buffer}) must be smaller than prev_wick ({self.prev_wick})"
            )
