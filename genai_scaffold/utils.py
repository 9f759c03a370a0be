"""Shared utility functions for genai-scaffold.

Provides async command execution, file-system helpers that turn ``OSError``
into ``IOFailure``, and Rich-based console output.  All user-facing messages go
through the helpers at the bottom of this module so the colour scheme stays
consistent (blue for steps, green for success, yellow for warnings, red for
errors).
"""

from __future__ import annotations

import asyncio
import stat
from datetime import datetime
from pathlib import Path
from typing import Sequence

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from genai_scaffold.errors import IOFailure

console = Console()

_state = {"debug": False}


# ---------------------------------------------------------------------------
# Async command execution
# ---------------------------------------------------------------------------


async def run_command(
    cmd: Sequence[str],
    cwd: str | Path | None = None,
    timeout: float = 120,
) -> tuple[int, str, str]:
    """Run an external tool without a shell and capture its output.

    Args:
        cmd: Executable followed by its arguments.
        cwd: Working directory for the child process.
        timeout: Seconds to wait before the process is killed.

    Returns:
        ``(returncode, stdout, stderr)`` with both streams decoded and
        stripped.  A timeout kills the process and is reported as returncode
        ``-1``.

    Raises:
        FileNotFoundError: If the executable does not exist.
    """
    process = await asyncio.create_subprocess_exec(
        *cmd,
        cwd=str(cwd) if cwd else None,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )
    try:
        out, err = await asyncio.wait_for(process.communicate(), timeout=timeout)
    except asyncio.TimeoutError:
        process.kill()
        await process.wait()
        return -1, "", f"{' '.join(cmd)} timed out after {timeout}s"
    return process.returncode or 0, _decode(out), _decode(err)


def _decode(stream: bytes | None) -> str:
    return (stream or b"").decode("utf-8", errors="replace").strip()


# ---------------------------------------------------------------------------
# File-system helpers
# ---------------------------------------------------------------------------


def ensure_dir(path: str | Path) -> Path:
    """Create a directory (and parents) if it does not exist.

    Raises:
        IOFailure: If the directory cannot be created.
    """
    dir_path = Path(path)
    try:
        dir_path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise IOFailure(dir_path, str(exc)) from exc
    return dir_path


def write_file(path: Path, content: str) -> Path:
    """Create parent dirs and write *content*, raising ``IOFailure`` on error."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    except OSError as exc:
        raise IOFailure(path, str(exc)) from exc
    return path


def touch_file(path: Path) -> Path:
    """Create an empty file (and its parents) if it does not exist."""
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.touch(exist_ok=True)
    except OSError as exc:
        raise IOFailure(path, str(exc)) from exc
    return path


def make_executable(path: Path) -> None:
    """Set the executable bit on a file."""
    try:
        current = path.stat().st_mode
        path.chmod(current | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    except OSError as exc:
        raise IOFailure(path, str(exc)) from exc


# ---------------------------------------------------------------------------
# Formatting helpers
# ---------------------------------------------------------------------------


def format_duration(seconds: float) -> str:
    """Format a duration in seconds to a human-readable string.

    Examples::

        format_duration(3.7)    -> "3.7s"
        format_duration(65.2)   -> "1m 5s"
    """
    if seconds < 0:
        return "0.0s"

    minutes = int(seconds // 60)
    secs = seconds % 60
    if minutes > 0:
        return f"{minutes}m {int(secs)}s"
    return f"{secs:.1f}s"


def _timestamp() -> str:
    return datetime.now().strftime("%Y-%m-%d %H:%M:%S")


# ---------------------------------------------------------------------------
# Rich output helpers
# ---------------------------------------------------------------------------


def set_debug(enabled: bool) -> None:
    """Turn :func:`print_debug` output on or off."""
    _state["debug"] = enabled


def print_banner(title: str, body: str) -> None:
    """Print a framed banner at the start of a run."""
    console.print(Panel(body, title=f"[bold]{title}[/bold]", border_style="bright_cyan"))


def print_step(message: str) -> None:
    """Print a timestamped blue progress message."""
    console.print(f"[blue][{_timestamp()}] {escape(message)}[/blue]", highlight=False)


def print_success(message: str) -> None:
    """Print a green success message."""
    console.print(f"[bold green]{escape(message)}[/bold green]", highlight=False)


def print_error(message: str) -> None:
    """Print a red error message."""
    console.print(f"[bold red]{escape(message)}[/bold red]", highlight=False)


def print_warning(message: str) -> None:
    """Print a yellow warning message."""
    console.print(f"[bold yellow]{escape(message)}[/bold yellow]", highlight=False)


def print_debug(message: str) -> None:
    """Print a dim debug message, only when debug output is enabled."""
    if _state["debug"]:
        console.print(f"[dim][{_timestamp()}] [DEBUG] {escape(message)}[/dim]", highlight=False)


def print_summary_table(rows: dict[str, str], title: str = "Summary") -> None:
    """Print *rows* as a borderless key/value table followed by a blank line."""
    table = Table(title=title, title_justify="left", show_header=False, box=None, padding=(0, 2))
    table.add_column(style="bold cyan", no_wrap=True)
    table.add_column()
    for key, value in rows.items():
        table.add_row(escape(key), escape(str(value)))
    console.print(table)
    console.print()


def print_next_steps(steps: list[str]) -> None:
    """Print a numbered list of follow-up commands."""
    console.print("[bold blue]Next steps:[/bold blue]")
    for number, step in enumerate(steps, start=1):
        console.print(f"  {number}. {escape(step)}", highlight=False)
