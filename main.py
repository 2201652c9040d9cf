import argparse
import random
import sys
from rich.console import Console
from rich.prompt import Prompt
from config.settings import RANDOM_SEED
from core.exam import ExamEngine, GUESS_CHOICES
from core.simulator import ChartSimulator
from core.synthesizer import PATTERN_FAMILIES, DIRECTIONS
from models.types import ExamState
from ui.console import TrainerConsole
from utils.logger import setup_logger, shutdown_logging
from utils.pattern_stats import label_frequencies, scenario_mix, body_stats

logger = setup_logger("trainer")

console = Console(file=sys.__stdout__)

# Simulator keys -> (family, direction, is_plus)
INJECT_KEYS = {
    str(i): target
    for i, target in enumerate(
        ((f, d, p) for d in DIRECTIONS for f in PATTERN_FAMILIES for p in (False, True)), start=1
    )
}


def _rng(seed):
    return random.Random(seed) if seed is not None else random.Random()


def run_exam(args: argparse.Namespace):
    engine = ExamEngine(rng=_rng(args.seed))
    ui = TrainerConsole(console)
    keys = [str(i) for i in range(1, len(GUESS_CHOICES) + 1)]

    while True:
        ui.show_exam(engine)
        if engine.state is ExamState.GUESSING:
            answer = Prompt.ask("Answer", choices=keys + ["q"], console=console)
            if answer == "q":
                break
            engine.submit_guess(GUESS_CHOICES[int(answer) - 1].guess)
        else:
            answer = Prompt.ask("Next scenario (n) or quit (q)", choices=["n", "q"], default="n", console=console)
            if answer == "q":
                break
            engine.new_scenario()

    console.print(f"Final score: [bold]{engine.score.score}[/] over {engine.rounds} round(s)")
    logger.info(f"Exam finished: score={engine.score.score} rounds={engine.rounds}")


def run_simulator(args: argparse.Namespace):
    sim = ChartSimulator(rng=_rng(args.seed))
    ui = TrainerConsole(console)
    menu = "  ".join(
        f"{k}={f.value} {d.value}{' +' if p else ''}" for k, (f, d, p) in INJECT_KEYS.items()
    )

    while True:
        ui.show_simulator(sim)
        console.print(f"[dim]{menu}  n=next candle  q=quit[/]")
        answer = Prompt.ask("Action", choices=list(INJECT_KEYS) + ["n", "q"], default="n", console=console)
        if answer == "q":
            break
        if answer == "n":
            sim.next_candle()
        else:
            sim.inject(*INJECT_KEYS[answer])


def run_stats(args: argparse.Namespace):
    rng = _rng(args.seed)
    console.print("[bold]Labels produced by plain random walks[/]")
    console.print(label_frequencies(series_count=args.series, bars_per_series=args.bars, rng=rng).to_string())
    console.print("\n[bold]True label of generated exam scenarios[/]")
    console.print(scenario_mix(rounds=args.rounds, rng=rng).to_string())
    console.print("\n[bold]Random-walk bar sizes[/]")
    console.print(body_stats(rng=rng))


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Liquidity sweep pattern trainer")
    p.add_argument("--seed", type=int, default=RANDOM_SEED, help="seed for deterministic replay")
    sub = p.add_subparsers(dest="cmd", required=True)

    sub.add_parser("exam", help="practice exam: classify the last bar").set_defaults(func=run_exam)
    sub.add_parser("sim", help="scrolling chart with pattern injection").set_defaults(func=run_simulator)

    s = sub.add_parser("stats", help="label frequencies over random data")
    s.add_argument("--series", type=int, default=200)
    s.add_argument("--bars", type=int, default=50)
    s.add_argument("--rounds", type=int, default=500)
    s.set_defaults(func=run_stats)
    return p


def main(argv=None):
    args = build_parser().parse_args(argv)
    logger.info(f"Starting trainer: {args.cmd} (seed={args.seed})")
    try:
        args.func(args)
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        console.print("\nBye.")
    finally:
        shutdown_logging()


if __name__ == "__main__":
    main()
