"""StageResult dataclass for the 4-stage command pattern."""

from collections.abc import Callable, Iterator
from dataclasses import dataclass, field


@dataclass
class StageResult:
    """What a ``cmd_*`` function hands back to its caller.

    1. ``announce`` is shown before any work starts.
    2. ``progress_callback(self)`` yields ``(fraction, message)`` while it works
       and fills in the remaining fields.
    3. ``result`` is the one-line summary, ``success`` picks the exit code.
    4. ``output`` is the structured payload (a dumped output model).
    """

    announce: str
    progress_callback: Callable[["StageResult"], Iterator[tuple[float, str]]]
    result: str = ""
    output: dict = field(default_factory=dict)
    success: bool = False

    def run(self) -> "StageResult":
        """Drain the progress callback without displaying it."""
        for _ in self.progress_callback(self):
            pass
        return self
