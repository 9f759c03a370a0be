"""Sphinx documentation site generation."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

from genai_scaffold.utils import ensure_dir

from .manifest import ManifestGenerator
from .task_runner import TaskRunnerGenerator
from .templates import TemplateRenderer


class SphinxGenerator:
    """Writes ``docs/`` with a Sphinx source tree and its own Makefile.

    Also adds the optional ``docs`` dependency group to ``pyproject.toml`` and
    the ``docs`` task group to the project Makefile.
    """

    def __init__(
        self,
        renderer: TemplateRenderer,
        task_runner: TaskRunnerGenerator,
        manifest: ManifestGenerator,
    ) -> None:
        self.renderer = renderer
        self.task_runner = task_runner
        self.manifest = manifest

    async def generate(self, root: Path, context: dict[str, Any]) -> list[Path]:
        docs = root / "docs"
        for rel in ("source/_static", "source/_templates"):
            await asyncio.to_thread(ensure_dir, docs / rel)

        written = await self.renderer.render_tree("sphinx/source", docs / "source", context)
        written.append(
            await self.renderer.render_to_file("sphinx/Makefile.j2", docs / "Makefile", context)
        )

        await self.manifest.ensure_docs_group(root, context)
        await self.task_runner.ensure_group(root, "docs", context)
        return written
