"""Dependency manifest (``pyproject.toml``) and Conda environment generation."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

from genai_scaffold.models import DvcRemote, Framework, ProjectSpec

from .merge import ensure_block
from .task_runner import TaskRunnerGenerator
from .templates import TemplateRenderer


# ---------------------------------------------------------------------------
# Dependency assembly
# ---------------------------------------------------------------------------

_DVC_REMOTE_PLUGINS: dict[DvcRemote, tuple[str, str]] = {
    DvcRemote.S3: ("dvc-s3", "^3.0.0"),
    DvcRemote.GCS: ("dvc-gs", "^3.0.0"),
    DvcRemote.AZURE: ("dvc-azure", "^3.0.0"),
}


def dependencies(spec: ProjectSpec) -> list[tuple[str, str]]:
    """Return the ``[tool.poetry.dependencies]`` entries for *spec*, in order.

    Each entry is a ``(package, constraint)`` pair.  The list always starts
    with the Python constraint.
    """
    deps: list[tuple[str, str]] = [
        ("python", f"^{spec.python_version.value}"),
        ("pandas", "^2.0.0"),
        ("numpy", "^1.24.0"),
    ]

    if spec.framework in (Framework.LLAMAINDEX, Framework.BOTH):
        deps.append(("llama-index", "^0.9.0"))
    if spec.framework in (Framework.LANGCHAIN, Framework.BOTH):
        deps.append(("langchain", "^0.1.0"))

    if spec.use_ollama:
        deps.append(("httpx", "^0.24.0"))
        deps.append(("pytest-asyncio", "^0.21.0"))

    if spec.use_dvc:
        deps.append(("dvc", "^3.0.0"))
        deps.append(("pyyaml", "^6.0"))
        plugin = _DVC_REMOTE_PLUGINS.get(spec.dvc_remote)
        if plugin is not None:
            deps.append(plugin)

    return deps


# ---------------------------------------------------------------------------
# Generators
# ---------------------------------------------------------------------------


class ManifestGenerator:
    """Writes the Poetry ``pyproject.toml``.

    The manifest is a shared target: the Sphinx generator later adds its
    ``docs`` dependency group to the same file.
    """

    FILENAME = "pyproject.toml"
    MARKER = "[tool.poetry]"
    DOCS_MARKER = "[tool.poetry.group.docs]"

    def __init__(self, renderer: TemplateRenderer) -> None:
        self.renderer = renderer

    def render(self, context: dict[str, Any]) -> str:
        """Render the base manifest.  *context* must carry ``dependencies``."""
        return self.renderer.render("base/pyproject.toml.j2", context)

    def render_docs_group(self, context: dict[str, Any]) -> str:
        """Render the optional Sphinx dependency group."""
        return self.renderer.render("base/pyproject_docs.toml.j2", context)

    async def generate(self, root: Path, context: dict[str, Any]) -> list[Path]:
        path = root / self.FILENAME
        await asyncio.to_thread(
            ensure_block, path, self.MARKER, self.render(context), prepend=True
        )
        return [path]

    async def ensure_docs_group(self, root: Path, context: dict[str, Any]) -> bool:
        """Append the ``docs`` dependency group unless it is already present."""
        return await asyncio.to_thread(
            ensure_block,
            root / self.FILENAME,
            self.DOCS_MARKER,
            self.render_docs_group(context),
        )


class CondaGenerator:
    """Writes ``environment.yml`` and the ``conda`` task group."""

    def __init__(self, renderer: TemplateRenderer, task_runner: TaskRunnerGenerator) -> None:
        self.renderer = renderer
        self.task_runner = task_runner

    def render_environment(self, context: dict[str, Any]) -> str:
        return self.renderer.render("base/environment.yml.j2", context)

    async def generate(self, root: Path, context: dict[str, Any]) -> list[Path]:
        path = await self.renderer.render_to_file(
            "base/environment.yml.j2", root / "environment.yml", context
        )
        await self.task_runner.ensure_group(root, "conda", context)
        return [path]
