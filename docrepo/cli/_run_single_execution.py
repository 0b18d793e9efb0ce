"""Run a command once and show it in four stages."""

from collections.abc import Callable
from datetime import datetime
from typing import Any

import typer

from docrepo.utils.logger import get_logger


def _run_single_execution(
    func: Callable,
    args: tuple,
    kwargs: dict,
    display: Any,
    display_format: str,
) -> None:
    """Announce, stream progress, report the result line, then print the output payload.

    Raises:
        typer.Exit: Always; code 0 on success and 1 on failure.
        ValueError: If the command left ``result`` or ``output`` empty.
    """
    stage = func(*args, **kwargs)
    display.status(stage.announce)

    for fraction, message in stage.progress_callback(stage):
        display.info(f"[dim]{datetime.now():%H:%M:%S}[/dim] Progress: {message} ({fraction:.1%})")

    if not stage.result:
        raise ValueError(f"{func.__name__} did not set a result line")
    if not stage.output:
        raise ValueError(f"{func.__name__} did not set an output payload")

    get_logger("cli").info(f"{func.__name__}: {stage.result}")
    if stage.success:
        display.success(stage.result)
    else:
        display.error(stage.result)

    display.json_output(stage.output, format=display_format)
    raise typer.Exit(0 if stage.success else 1)
