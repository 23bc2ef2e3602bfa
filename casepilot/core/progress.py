"""Pipeline progress reporting."""

import threading
from dataclasses import dataclass
from typing import Dict, List, Optional

from rich.console import Console
from rich.progress import BarColumn, Progress, SpinnerColumn, TaskID, TextColumn, TimeElapsedColumn


@dataclass(frozen=True)
class ProgressEvent:
    """A single progress update."""

    endpoint_key: str
    phase: str
    percent: int
    message: str = ""


class ProgressReporter:
    """Receives pipeline progress updates. The base class ignores them."""

    def update(self, endpoint_key: str, phase: str, percent: int, message: str = "") -> None:
        pass


class RecordingProgressReporter(ProgressReporter):
    """Keeps every event in memory."""

    def __init__(self):
        self.events: List[ProgressEvent] = []
        self._lock = threading.Lock()

    def update(self, endpoint_key: str, phase: str, percent: int, message: str = "") -> None:
        with self._lock:
            self.events.append(ProgressEvent(endpoint_key, phase, percent, message))

    def phases_for(self, endpoint_key: str) -> List[str]:
        """Phases reported for one endpoint, in order."""
        with self._lock:
            return [e.phase for e in self.events if e.endpoint_key == endpoint_key]


class RichProgressReporter(ProgressReporter):
    """Shows one progress bar per endpoint.

    Use as a context manager so the live display is started and stopped.
    """

    def __init__(self, console: Optional[Console] = None):
        self.progress = Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TextColumn("[progress.percentage]{task.percentage:>3.0f}%"),
            TimeElapsedColumn(),
            console=console,
            transient=False,
        )
        self._tasks: Dict[str, TaskID] = {}
        self._lock = threading.Lock()

    def __enter__(self) -> "RichProgressReporter":
        self.progress.start()
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.progress.stop()
        return False

    def update(self, endpoint_key: str, phase: str, percent: int, message: str = "") -> None:
        with self._lock:
            task_id = self._tasks.get(endpoint_key)
            if task_id is None:
                task_id = self.progress.add_task(endpoint_key, total=100)
                self._tasks[endpoint_key] = task_id
        description = f"{endpoint_key} [dim]{phase}[/dim]"
        self.progress.update(task_id, completed=percent, description=description)
