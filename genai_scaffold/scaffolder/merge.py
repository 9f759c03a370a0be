"""Marker-based merge guard for shared generated files.

Several generators contribute to the same file (``Makefile``, ``.gitignore``,
``pyproject.toml``).  Each contribution is a *block* whose first line, or any
line, is a unique *marker*.  :func:`ensure_block` adds the block only when no
line of the file equals the marker, so re-running a generator, or running
generators in a different order, never duplicates a block.
"""

from __future__ import annotations

from pathlib import Path

from genai_scaffold.errors import IOFailure


def has_marker(content: str, marker: str) -> bool:
    """Return ``True`` if any line of *content* equals *marker* (ignoring surrounding whitespace)."""
    wanted = marker.strip()
    return any(line.strip() == wanted for line in content.splitlines())


def merge_block(content: str, marker: str, block: str, *, prepend: bool = False) -> str:
    """Return *content* with *block* merged in, or unchanged if *marker* is present.

    Blocks are separated from existing content by exactly one blank line and
    the result always ends with a newline.

    Raises:
        ValueError: If *block* does not itself contain *marker*; such a block
            could never be detected on the next run.
    """
    if not has_marker(block, marker):
        raise ValueError(f"Block does not contain its marker line: {marker!r}")
    if has_marker(content, marker):
        return content

    block = block.strip("\n") + "\n"
    existing = content.strip("\n")
    if not existing:
        return block
    if prepend:
        return block + "\n" + existing + "\n"
    return existing + "\n\n" + block


def ensure_block(path: Path, marker: str, block: str, *, prepend: bool = False) -> bool:
    """Make sure *block* is present in the file at *path*.

    The file is created when missing.

    Returns:
        ``True`` if the file was changed, ``False`` if the marker was already
        there.

    Raises:
        IOFailure: If the file cannot be read or written.
    """
    path = Path(path)
    try:
        content = path.read_text(encoding="utf-8") if path.exists() else ""
        merged = merge_block(content, marker, block, prepend=prepend)
        if merged == content:
            return False
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(merged, encoding="utf-8")
    except OSError as exc:
        raise IOFailure(path, str(exc)) from exc
    return True
