from typing import List, Optional, Sequence
import pandas as pd
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from models.types import Candle, Direction, ExamState, GuessResult, PatternLabel
from core.annotate import annotate_series
from core.exam import ExamEngine, GUESS_CHOICES
from core.simulator import ChartSimulator
from config.settings import CHART_TAIL_BARS
from utils.logger import setup_logger

logger = setup_logger("ui")


def _direction_style(direction: Optional[Direction]) -> str:
    if direction is Direction.BULL:
        return "green"
    if direction is Direction.BEAR:
        return "red"
    return "white"


def _label_markup(label: PatternLabel) -> str:
    if not label.is_pattern:
        return "[dim]-[/]"
    style = _direction_style(label.direction)
    if label.is_plus:
        style = f"bold {style}"
    return f"[{style}]{label.display_name}[/]"


class TrainerConsole:
    def __init__(self, console: Console, tail_bars: int = CHART_TAIL_BARS):
        logger.info("TrainerConsole initialized")
        self.console = console
        self.tail_bars = tail_bars

    # ------------------------------------------------------------------
    # Building blocks
    # ------------------------------------------------------------------
    def generate_chart_table(
        self,
        candles: Sequence[Candle],
        title: str,
        reveal: bool = True,
        highlight_index: Optional[int] = None,
    ) -> Table:
        """
        Tail of the series with one pattern label per bar.
        With reveal=False the labels stay hidden (exam still being answered).
        """
        table = Table(title=title)
        table.add_column("#", style="dim", justify="right")
        table.add_column("Time", style="cyan", no_wrap=True)
        table.add_column("Open", justify="right")
        table.add_column("High", justify="right")
        table.add_column("Low", justify="right")
        table.add_column("Close", justify="right")
        table.add_column("Bar", justify="center")
        table.add_column("Pattern", justify="center")

        labels = annotate_series(candles)
        start = max(0, len(candles) - self.tail_bars)
        if highlight_index is None:
            highlight_index = len(candles) - 1

        for i in range(start, len(candles)):
            c = candles[i]
            bar_style = _direction_style(c.direction)
            bar = "▲" if c.is_bullish else ("▼" if c.is_bearish else "•")
            ts = pd.to_datetime(c.timestamp, unit="ms", utc=True)

            pattern = _label_markup(labels[i]) if reveal else "[dim]?[/]"
            row_style = "reverse" if i == highlight_index else None

            table.add_row(
                str(i),
                ts.strftime("%H:%M"),
                f"{c.open:.2f}",
                f"{c.high:.2f}",
                f"{c.low:.2f}",
                f"{c.close:.2f}",
                f"[{bar_style}]{bar}[/]",
                pattern,
                style=row_style,
            )
        return table

    def generate_status_panel(self, engine: ExamEngine) -> Panel:
        items = [
            f"[magenta]Score:[/] {engine.score.score}",
            f"[yellow]Streak:[/] {engine.score.streak}",
            f"[cyan]Round:[/] {engine.rounds + (1 if engine.state is ExamState.GUESSING else 0)}",
        ]
        if engine.state is ExamState.GUESSING:
            items.append("[green]Awaiting answer[/]")
        else:
            items.append("[blue]Result shown - next scenario[/]")
        return Panel(Text.from_markup("  |  ".join(items)), title="Exam", border_style="blue")

    def generate_result_panel(self, result: GuessResult) -> Panel:
        lines: List[str] = []
        if result.correct:
            lines.append(f"[bold green]Correct![/] +{result.points} points")
            lines.append("You correctly identified the pattern logic.")
            border = "green"
        else:
            lines.append(f"[bold red]Wrong.[/] You answered {result.guess.display_name}")
            lines.append(f"Correct: {_label_markup(result.actual)}")
            border = "red"
            for reason in result.explanation:
                lines.append(f"  • {reason}")
        return Panel(Text.from_markup("\n".join(lines)), title="Result", border_style=border)

    def generate_guess_menu(self) -> Table:
        table = Table(title="Your answer", show_header=False, box=None)
        table.add_column("Key", style="bold cyan", justify="right")
        table.add_column("Pattern")
        table.add_column("Hint", style="dim")
        for i, choice in enumerate(GUESS_CHOICES, start=1):
            style = _direction_style(choice.guess.direction)
            table.add_row(str(i), f"[{style}]{choice.label}[/]", choice.hint)
        return table

    def generate_pattern_panel(self, label: Optional[PatternLabel]) -> Panel:
        if label is None or not label.is_pattern:
            return Panel(Text("No pattern on focused bar", style="dim"), title="Detected pattern")
        body = "\n".join([_label_markup(label)] + [f"  • {r}" for r in label.reasons])
        return Panel(
            Text.from_markup(body),
            title="Detected pattern",
            border_style=_direction_style(label.direction),
        )

    # ------------------------------------------------------------------
    # Screens
    # ------------------------------------------------------------------
    def show_exam(self, engine: ExamEngine):
        self.console.clear()
        self.console.print(self.generate_chart_table(
            engine.candles, "Practice Exam - classify the last bar", reveal=engine.state is ExamState.RESULT
        ))
        if engine.state is ExamState.RESULT and engine.last_result is not None:
            self.console.print(self.generate_result_panel(engine.last_result))
        else:
            self.console.print(self.generate_guess_menu())
        self.console.print(self.generate_status_panel(engine))

    def show_simulator(self, sim: ChartSimulator):
        self.console.clear()
        self.console.print(self.generate_chart_table(
            sim.candles, "Pattern Simulator", highlight_index=sim.focused_index
        ))
        self.console.print(self.generate_pattern_panel(sim.focused_label()))
