"""Rich-based rendering of tool status and results."""

import logging
from typing import Optional

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..models.audio import AudioStats
from ..models.results import AnalysisResult, EditResult, SongResult
from ..models.status import AppMode, RequestStatus
from ..services.image_editor import QUICK_PROMPTS

logger = logging.getLogger(__name__)


STATUS_STYLES = {
    RequestStatus.IDLE: ("Idle", "dim white"),
    RequestStatus.LOADING: ("Working...", "bold yellow"),
    RequestStatus.SUCCESS: ("Done", "bold green"),
    RequestStatus.ERROR: ("Failed", "bold red"),
}

MODE_DESCRIPTIONS = {
    AppMode.IMAGE_EDITOR: ("edit", "Edit or merge images from a text prompt"),
    AppMode.IMAGE_ANALYZER: ("analyze", "Describe objects, colors, mood and text in an image"),
    AppMode.SONG_SEARCH: ("identify", "Hum, sing, or play. We'll find the song"),
}


class ConsoleView:
    """Prints panels for the landing page, status changes and results."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def show_landing(self) -> None:
        table = Table(show_header=True, header_style="bold magenta")
        table.add_column("Command", style="cyan")
        table.add_column("Tool", style="white")
        for command, description in MODE_DESCRIPTIONS.values():
            table.add_row(command, description)

        self.console.print(Panel(
            Align.center(Text("MediaMuse", style="bold blue")),
            style="bright_blue",
        ))
        self.console.print(table)
        self.console.print(Text.assemble(("Quick prompts: ", "bold"), ", ".join(QUICK_PROMPTS)))

    def on_status(self, tool: str, status: RequestStatus) -> None:
        """Status listener for RequestTracker."""
        label, style = STATUS_STYLES[status]
        self.console.print(Text.assemble((f"[{tool}] ", "cyan"), (label, style)))

    def show_recording(self, stats: AudioStats) -> None:
        peak_bar = "█" * int(stats.peak_level * 20)
        self.console.print(Text.assemble(
            ("LISTENING ", "bold magenta"),
            f"{stats.duration_seconds:.1f}s  {stats.total_chunks} chunks  ",
            (f"{peak_bar:<20}", "green"),
        ))

    def show_edit_result(self, result: EditResult, saved_to: str) -> None:
        self.console.print(Panel(
            Text(f"Generated {len(result.images)} image(s); saved first ({result.mime_type}) to {saved_to}",
                 style="white"),
            title="Image Editor",
            border_style="green",
        ))

    def show_analysis(self, result: AnalysisResult) -> None:
        self.console.print(Panel(Text(result.text), title="Analysis Report", border_style="blue"))

    def show_song(self, result: SongResult) -> None:
        self.console.print(Panel(Text(result.text), title="Identification Match", border_style="magenta"))

    def show_error(self, message: str) -> None:
        self.console.print(Text(message, style="bold red"))
