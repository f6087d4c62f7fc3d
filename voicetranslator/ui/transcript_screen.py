"""Two-column transcript view rendered with rich."""

import logging
from typing import Optional

from rich.console import Console, Group, RenderableType
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from ..models.fragments import RecognitionErrorEvent
from ..models.transcript import TranscriptSnapshot

logger = logging.getLogger(__name__)


class TranscriptScreen:
    """Renders source and translated lines side by side.

    Reads only snapshots; never touches engine or buffer state.
    """

    def __init__(self,
                 console: Optional[Console] = None,
                 source_title: str = "Dutch (Original)",
                 target_title: str = "English (Translated)"):
        self.console = console or Console()
        self.source_title = source_title
        self.target_title = target_title
        self.source_placeholder = "Waiting for speech..."
        self.target_placeholder = "Translation will appear here..."

    def build(self,
              snapshot: TranscriptSnapshot,
              error: Optional[RecognitionErrorEvent] = None) -> RenderableType:
        """Build the renderable for one snapshot."""
        grid = Table.grid(expand=True, padding=(0, 1))
        grid.add_column(ratio=1)
        grid.add_column(ratio=1)
        grid.add_row(
            self._panel(self.source_title, snapshot.source_lines, self.source_placeholder),
            self._panel(self.target_title, snapshot.translated_lines, self.target_placeholder),
        )

        if error is None:
            return grid
        alert = Panel(Text(error.message, style="bold red"), title="Error", border_style="red")
        return Group(alert, grid)

    def render(self,
               snapshot: TranscriptSnapshot,
               error: Optional[RecognitionErrorEvent] = None) -> None:
        self.console.print(self.build(snapshot, error))

    def _panel(self, title: str, lines, placeholder: str) -> Panel:
        if lines:
            body = Text("\n".join(lines))
        else:
            body = Text(placeholder, style="dim italic")
        return Panel(body, title=title, title_align="left")
