import random
from dataclasses import dataclass
from typing import List, Optional, Tuple
from models.types import (
    Candle, Direction, ExamState, Guess, GuessResult, PatternFamily, PatternLabel, ScoreState,
)
from core.classifier import classify
from core.generator import generate_walk, generate_series
from core.synthesizer import ScenarioSynthesizer, default_synthesizer, PATTERN_FAMILIES, DIRECTIONS
from config.settings import (
    EXAM_LEAD_IN_BARS,
    EXAM_PATTERN_PROBABILITY,
    EXAM_START_PRICE,
    DEFAULT_VOLATILITY,
    BAR_INTERVAL_MS,
    SCORE_BASE_POINTS,
    SCORE_STREAK_BONUS,
)
from utils.event_snapshot import build_round_snapshot, log_snapshot
from utils.logger import setup_logger

logger = setup_logger("exam")


@dataclass(frozen=True)
class GuessChoice:
    guess: Guess
    label: str
    hint: str


# Answer buttons, in display order
GUESS_CHOICES: Tuple[GuessChoice, ...] = (
    GuessChoice(Guess(PatternFamily.RUN, Direction.BULL, False), "RUN BULL", "Green → Green"),
    GuessChoice(Guess(PatternFamily.RUN, Direction.BULL, True), "RUN BULL +", "Close > Prev High"),
    GuessChoice(Guess(PatternFamily.REVERSAL, Direction.BULL, False), "REV BULL", "Red → Green"),
    GuessChoice(Guess(PatternFamily.REVERSAL, Direction.BULL, True), "REV BULL +", "Close > Prev High"),
    GuessChoice(Guess(PatternFamily.RUN, Direction.BEAR, False), "RUN BEAR", "Red → Red"),
    GuessChoice(Guess(PatternFamily.RUN, Direction.BEAR, True), "RUN BEAR +", "Close < Prev Low"),
    GuessChoice(Guess(PatternFamily.REVERSAL, Direction.BEAR, False), "REV BEAR", "Green → Red"),
    GuessChoice(Guess(PatternFamily.REVERSAL, Direction.BEAR, True), "REV BEAR +", "Close < Prev Low"),
    GuessChoice(Guess.none(), "NO PATTERN", "No valid pattern"),
)


def grade(guess: Guess, actual: PatternLabel) -> bool:
    if guess.is_none:
        return not actual.is_pattern
    # Exact match on the full triple; right family and direction with the wrong PLUS flag is wrong
    return actual.matches(guess.family, guess.direction, guess.is_plus)


def points_for(streak: int) -> int:
    return SCORE_BASE_POINTS + streak * SCORE_STREAK_BONUS


class ExamEngine:
    """
    Practice exam session.

    GUESSING -> submit_guess -> RESULT -> new_scenario -> GUESSING ...
    The true label is never stored; it is recomputed from the last two bars.
    """

    def __init__(
        self,
        rng: Optional[random.Random] = None,
        synthesizer: Optional[ScenarioSynthesizer] = None,
        lead_in: int = EXAM_LEAD_IN_BARS,
        pattern_probability: float = EXAM_PATTERN_PROBABILITY,
        start_price: float = EXAM_START_PRICE,
        volatility: float = DEFAULT_VOLATILITY,
    ):
        if lead_in < 0:
            raise ValueError(f"lead_in must be >= 0, got {lead_in}")
        if not 0.0 <= pattern_probability <= 1.0:
            raise ValueError(f"pattern_probability must be within [0, 1], got {pattern_probability}")

        self.rng = rng if rng is not None else random.Random()
        self.synthesizer = synthesizer or default_synthesizer()
        self.lead_in = lead_in
        self.pattern_probability = pattern_probability
        self.start_price = start_price
        self.volatility = volatility

        self.candles: List[Candle] = []
        self.state = ExamState.GUESSING
        self.last_result: Optional[GuessResult] = None
        self.score = ScoreState()
        self.rounds = 0

        self.reset()

    # ------------------------------------------------------------------
    # Session
    # ------------------------------------------------------------------
    def reset(self) -> List[Candle]:
        """Start a new session: zero score and streak, fresh scenario."""
        self.score = ScoreState()
        self.rounds = 0
        logger.info("New exam session")
        return self.new_scenario()

    def new_scenario(self) -> List[Candle]:
        candles = generate_series(
            self.lead_in, self.start_price, self.volatility, rng=self.rng, interval_ms=BAR_INTERVAL_MS
        )
        price = candles[-1].close if candles else self.start_price
        next_ts = len(candles) * BAR_INTERVAL_MS

        if self.rng.random() < self.pattern_probability:
            family = self.rng.choice(PATTERN_FAMILIES)
            direction = self.rng.choice(DIRECTIONS)
            is_plus = self.rng.random() < 0.5
            candles.extend(
                self.synthesizer.synthesize(family, direction, is_plus, price, timestamp=next_ts)
            )
            logger.debug(f"Scenario ends on forced {family.value} {direction.value} plus={is_plus}")
        else:
            c1 = generate_walk(price, self.volatility, rng=self.rng, timestamp=next_ts)
            c2 = generate_walk(c1.close, self.volatility, rng=self.rng, timestamp=next_ts + BAR_INTERVAL_MS)
            candles.extend((c1, c2))
            logger.debug("Scenario ends on two random bars")

        self.candles = candles
        self.state = ExamState.GUESSING
        self.last_result = None
        return candles

    def actual_label(self) -> PatternLabel:
        if len(self.candles) < 2:
            return PatternLabel.none()
        return classify(self.candles[-1], self.candles[-2])

    # ------------------------------------------------------------------
    # Grading
    # ------------------------------------------------------------------
    def submit_guess(self, guess: Guess) -> Optional[GuessResult]:
        if self.state is not ExamState.GUESSING:
            # Double submission; the round is already graded
            logger.debug(f"Ignored guess {guess.display_name} in state {self.state.name}")
            return None

        actual = self.actual_label()
        correct = grade(guess, actual)

        points = 0
        if correct:
            points = points_for(self.score.streak)
            self.score.score += points
            self.score.streak += 1
        else:
            self.score.streak = 0

        self.rounds += 1
        result = GuessResult(correct=correct, actual=actual, guess=guess, points=points)
        self.last_result = result
        self.state = ExamState.RESULT

        logger.info(f"Round {self.rounds}: {result} | score={self.score.score} streak={self.score.streak}")
        log_snapshot(build_round_snapshot(
            round_no=self.rounds,
            candles=self.candles[-2:],
            result=result,
            score=self.score,
        ))
        return result
