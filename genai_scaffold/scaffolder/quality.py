"""Code-quality configuration: pre-commit hooks and ``.gitignore``."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

from .merge import ensure_block
from .templates import TemplateRenderer


class PreCommitGenerator:
    """Writes the static ``.pre-commit-config.yaml``."""

    FILENAME = ".pre-commit-config.yaml"

    def __init__(self, renderer: TemplateRenderer) -> None:
        self.renderer = renderer

    def render(self, context: dict[str, Any]) -> str:
        return self.renderer.render("base/pre-commit-config.yaml.j2", context)

    async def generate(self, root: Path, context: dict[str, Any]) -> list[Path]:
        path = await self.renderer.render_to_file(
            "base/pre-commit-config.yaml.j2", root / self.FILENAME, context
        )
        return [path]


class GitignoreGenerator:
    """Writes ``.gitignore``, a shared target.

    The base block covers Python, virtualenv, IDE and test artifacts.  The
    DVC block is added here when the dvc feature is enabled and is ensured
    again by the DVC generator; the marker keeps a single copy.
    """

    FILENAME = ".gitignore"
    MARKER = "# Python"
    DVC_MARKER = "# DVC"

    def __init__(self, renderer: TemplateRenderer) -> None:
        self.renderer = renderer

    def render(self, context: dict[str, Any]) -> str:
        return self.renderer.render("base/gitignore.j2", context)

    def render_dvc_block(self, context: dict[str, Any]) -> str:
        return self.renderer.render("base/gitignore_dvc.j2", context)

    async def ensure_dvc_block(self, root: Path, context: dict[str, Any]) -> bool:
        """Append the DVC ignore block unless it is already present."""
        return await asyncio.to_thread(
            ensure_block, root / self.FILENAME, self.DVC_MARKER, self.render_dvc_block(context)
        )

    async def generate(self, root: Path, context: dict[str, Any]) -> list[Path]:
        path = root / self.FILENAME
        await asyncio.to_thread(
            ensure_block, path, self.MARKER, self.render(context), prepend=True
        )
        if context.get("use_dvc"):
            await self.ensure_dvc_block(root, context)
        return [path]
