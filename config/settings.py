import os

# Exam scenario
EXAM_LEAD_IN_BARS = 15
EXAM_PATTERN_PROBABILITY = 0.8  # Remaining 20% ends on two random bars
EXAM_START_PRICE = 100.0

# Scoring
SCORE_BASE_POINTS = 100
SCORE_STREAK_BONUS = 20  # Added per consecutive correct answer already in the streak

# Random walk
DEFAULT_VOLATILITY = 5.0
BAR_INTERVAL_MS = 60 * 1000

# Pattern pair construction (price units)
SYNTH_PREV_BODY = 6.0
SYNTH_PREV_WICK = 3.0
SYNTH_GRAB_AMOUNT = 2.5
SYNTH_PLUS_BUFFER = 3.0
SYNTH_REGULAR_BUFFER = 1.5
SYNTH_CLOSE_WICK = 1.5
SYNTH_RETRACE_WICK = 0.5

# Start prices used to verify a tuning round-trips through the classifier
SYNTH_PROBE_PRICES = (0.0, 1.0, 100.0, -250.0, 43_000.0, 1_000_000.0)

# Simulator window
SIM_SEED_BARS = 25
SIM_MAX_BARS = 40
SIM_START_PRICE = 100.0

# UI
CHART_TAIL_BARS = 12  # Bars shown in the terminal candle table

# Logging
LOG_LEVEL = "INFO"
LOG_FILE = "logs/trainer.log"
DEBUG_LOG_FILE = "logs/debug_trainer.log"


# Deterministic replay (unset or unparsable -> process-wide random state)
def _parse_seed(raw):
    try:
        return int(raw)
    except (TypeError, ValueError):
        return None


RANDOM_SEED = _parse_seed(os.environ.get("LIQSWEEP_SEED"))
