import json
from datetime import datetime, timezone
from typing import Sequence
from models.types import Candle, GuessResult, ScoreState
from config.settings import DEBUG_LOG_FILE
from utils.logger import setup_logger

debug_logger = setup_logger("exam_snapshots", log_file=DEBUG_LOG_FILE, level="DEBUG")


def build_round_snapshot(
    *,
    round_no: int,
    candles: Sequence[Candle],
    result: GuessResult,
    score: ScoreState,
) -> dict:
    actual = result.actual
    return {
        "meta": {
            "round": round_no,
            "logged_at": datetime.now(timezone.utc).isoformat(),
            "correct": result.correct,
            "points": result.points,
        },

        # Graded pair, oldest first
        "candles": [
            {
                "timestamp": c.timestamp,
                "open": c.open,
                "high": c.high,
                "low": c.low,
                "close": c.close,
            }
            for c in candles
        ],

        "guess": {
            "family": result.guess.family.value,
            "direction": result.guess.direction.value if result.guess.direction else None,
            "is_plus": result.guess.is_plus,
        },

        "actual": {
            "family": actual.family.value,
            "direction": actual.direction.value if actual.direction else None,
            "is_plus": actual.is_plus,
            "reasons": list(actual.reasons),
        },

        "score": {"score": score.score, "streak": score.streak},
    }


def log_snapshot(snapshot: dict):
    debug_logger.debug(json.dumps(snapshot, ensure_ascii=False))
