"""Base directory skeleton of a generated project."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

from genai_scaffold.utils import ensure_dir, touch_file

from .templates import TemplateRenderer

# Directories relative to the project root; ``{package}`` is the project name.
SKELETON_DIRS: tuple[str, ...] = (
    "src/{package}",
    "tests",
    "data/raw",
    "data/processed",
    "docs",
    "scripts",
    "configs",
    "notebooks",
)


class StructureGenerator:
    """Creates the fixed directory tree and the starter package files."""

    def __init__(self, renderer: TemplateRenderer) -> None:
        self.renderer = renderer

    def directories(self, context: dict[str, Any]) -> list[str]:
        return [d.format(package=context["project_name"]) for d in SKELETON_DIRS]

    async def generate(self, root: Path, context: dict[str, Any]) -> list[Path]:
        """Create the skeleton under *root* and return the files written."""
        for rel in self.directories(context):
            await asyncio.to_thread(ensure_dir, root / rel)

        package = root / "src" / context["project_name"]
        written = [
            await self.renderer.render_to_file(
                "base/package_init.py.j2", package / "__init__.py", context
            ),
            await self.renderer.render_to_file(
                "base/main.py.j2", package / "main.py", context
            ),
            await asyncio.to_thread(touch_file, root / "tests" / "__init__.py"),
            await self.renderer.render_to_file(
                "base/test_main.py.j2", root / "tests" / "test_main.py", context
            ),
        ]
        return written
