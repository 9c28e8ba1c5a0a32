"""
Readings report for the terminal.
Renders the latest reading and recent history using the Rich library.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from datacollector.shared.models import Reading
from datacollector.shared.store import ReadingStore

logger = logging.getLogger(__name__)

TIME_FORMAT = "%Y-%m-%d %H:%M:%S"


class ReadingsReport:
    """Terminal report built from the store's latest and range lookups"""

    def __init__(self, store: ReadingStore, console: Optional[Console] = None):
        self.store = store
        self.console = console or Console()

    def render(self, hours: float = 1.0, now: Optional[datetime] = None) -> Group:
        """Build the report for the last `hours` hours"""
        now = now or datetime.now(timezone.utc)
        start = now - timedelta(hours=hours)

        latest = self.store.get_latest()
        history = self.store.get_range(start, now)
        logger.debug(f"Rendering {len(history)} readings since {start:%H:%M:%S}")

        return Group(
            self._create_latest_panel(latest),
            self._create_history_table(history, hours),
        )

    def show(self, hours: float = 1.0) -> None:
        self.console.print(self.render(hours))

    def _create_latest_panel(self, latest: Optional[Reading]) -> Panel:
        text = Text()
        if latest is None:
            text.append("No readings stored yet", style="yellow")
        else:
            text.append(f"{latest.temperature:.2f}°C", style="bold cyan")
            text.append("  ")
            text.append(f"{latest.humidity:.2f}%", style="bold green")
            text.append(f"  at {latest.timestamp.strftime(TIME_FORMAT)} UTC", style="white")
            text.append(f"  from {latest.device_id or 'unknown'}", style="dim")

        return Panel(text, title="Latest reading", style="cyan")

    def _create_history_table(self, readings: List[Reading], hours: float) -> Table:
        table = Table(
            title=f"Readings in the last {hours:g}h ({len(readings)})",
            show_header=True,
            header_style="bold cyan",
        )
        table.add_column("Time (UTC)", style="white")
        table.add_column("Temperature", justify="right")
        table.add_column("Humidity", justify="right")
        table.add_column("Device", style="dim")

        for reading in readings:
            table.add_row(
                reading.timestamp.strftime(TIME_FORMAT),
                f"{reading.temperature:.2f}°C",
                f"{reading.humidity:.2f}%",
                reading.device_id or "unknown",
            )

        return table
