"""Rich-based console output for packaging runs"""

from typing import Iterable

from rich.console import Console
from rich.table import Table
from rich.text import Text

console = Console()

def _status(symbol: str, style: str, message: str, message_style: str = "bold") -> None:
    console.print(Text(f"{symbol} ", style=style) + Text(message, style=message_style))

def print_check(message: str) -> None:
    """Print a completed step."""
    _status("✓", "bold green", message)

def print_warning(message: str) -> None:
    _status("⚠", "bold yellow", message)

def print_error(message: str) -> None:
    _status("✗", "bold red", message)

def print_success(message: str) -> None:
    """Print a final success line in plain green."""
    _status("✓", "green", message, message_style="green")

def print_info(message: str) -> None:
    _status("ℹ", "bold blue", message, message_style="blue")

def print_header(title: str, width: int = 80) -> None:
    """Print a title centered between two rules."""
    rule = Text("=" * width, style="bold blue")
    console.print(rule)
    console.print(title.center(width).rstrip(), style="bold blue")
    console.print(rule)

def print_separator() -> None:
    console.print("-" * 40, style="blue")

def print_ladder(ladder: Iterable) -> None:
    """Print planned quality specs as a table, highest rung first."""
    table = Table(title="Quality ladder", header_style="bold blue")
    table.add_column("Rung")
    table.add_column("Resolution", justify="right")
    table.add_column("Video", justify="right")
    table.add_column("Audio", justify="right")
    for spec in ladder:
        table.add_row(
            spec.name,
            spec.resolution,
            f"{spec.video_bitrate_kbps}k",
            f"{spec.audio_bitrate_kbps}k",
        )
    console.print(table)

def print_rendition_summary(renditions: Iterable) -> None:
    """Print the outcome of every rendition of a finished job."""
    table = Table(title="Renditions", header_style="bold blue")
    table.add_column("Rung")
    table.add_column("Resolution", justify="right")
    table.add_column("Segments", justify="right")
    table.add_column("Timing")
    table.add_column("Status")
    for result in renditions:
        if result.succeeded:
            table.add_row(result.name, result.spec.resolution, str(result.segment_count),
                          result.timing_strategy.value, Text("ok", style="green"))
        else:
            table.add_row(result.name, result.spec.resolution, "-", "-",
                          Text(f"failed: {result.error}", style="red"))
    console.print(table)
