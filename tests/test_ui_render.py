import io
import random
from rich.console import Console
from models.types import Direction, Guess, PatternFamily
from core.exam import ExamEngine
from core.simulator import ChartSimulator
from core.synthesizer import synthesize
from ui.console import TrainerConsole


def make_ui():
    capture_console = Console(file=io.StringIO(), width=140, force_terminal=False)
    return TrainerConsole(console=capture_console), capture_console


def rendered(console):
    return console.file.getvalue()


def test_exam_hides_label_until_answered():
    ui, console = make_ui()
    engine = ExamEngine(rng=random.Random(21))
    pair = synthesize(PatternFamily.REVERSAL, Direction.BULL, False, engine.candles[-3].close)
    engine.candles = engine.candles[:-2] + list(pair)

    ui.show_exam(engine)
    out = rendered(console)
    assert "Practice Exam" in out
    assert "REV BULL" in out  # answer menu
    assert "Awaiting answer" in out
    assert "Engulfing" not in out

    engine.submit_guess(Guess(PatternFamily.RUN, Direction.BULL, False))
    ui.show_exam(engine)
    out = rendered(console)
    assert "Wrong." in out
    assert "Engulfing (Close > Prev Open)" in out
    assert "Streak:" in out


def test_exam_correct_answer_panel():
    ui, console = make_ui()
    engine = ExamEngine(rng=random.Random(22))
    pair = synthesize(PatternFamily.RUN, Direction.BEAR, True, engine.candles[-3].close)
    engine.candles = engine.candles[:-2] + list(pair)
    engine.submit_guess(Guess(PatternFamily.RUN, Direction.BEAR, True))

    ui.show_exam(engine)
    out = rendered(console)
    assert "Correct!" in out
    assert "+100 points" in out
    assert "Liquidity Grab" not in out


def test_simulator_pattern_panel():
    ui, console = make_ui()
    sim = ChartSimulator(rng=random.Random(23))
    sim.inject(PatternFamily.RUN, Direction.BULL, True)

    ui.show_simulator(sim)
    out = rendered(console)
    assert "Pattern Simulator" in out
    assert "RUN BULL PLUS" in out
    assert "PLUS: Close > Prev High" in out


def test_chart_tail_length():
    ui, _ = make_ui()
    engine = ExamEngine(rng=random.Random(24))
    table = ui.generate_chart_table(engine.candles, "t")
    assert table.row_count == ui.tail_bars
