"""Makefile generation from marker-delimited task groups.

The generated ``Makefile`` is a shared target: the base ``core`` group is
written first and every optional feature contributes its own group.  Each
group starts with a unique comment line (its marker) and is only ever added
through :func:`~genai_scaffold.scaffolder.merge.ensure_block`, so a group is
present at most once no matter how often or in which order it is requested.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict

from genai_scaffold.utils import print_debug

from .merge import ensure_block
from .templates import TemplateRenderer


class TaskGroup(BaseModel):
    """A named block of Makefile targets."""

    model_config = ConfigDict(frozen=True)

    name: str
    marker: str
    template: str
    flag: str | None = None  # context key that enables the group; None = always


TASK_GROUPS: dict[str, TaskGroup] = {
    group.name: group
    for group in (
        TaskGroup(name="core", marker="# Project tasks", template="makefile/core.mk.j2"),
        TaskGroup(name="conda", marker="# Conda commands", template="makefile/conda.mk.j2", flag="use_conda"),
        TaskGroup(name="docker", marker="# Docker commands", template="makefile/docker.mk.j2", flag="use_docker"),
        TaskGroup(name="docs", marker="# Documentation commands", template="makefile/docs.mk.j2", flag="use_sphinx"),
        TaskGroup(name="ollama", marker="# Ollama commands", template="makefile/ollama.mk.j2", flag="use_ollama"),
        TaskGroup(name="dvc", marker="# DVC commands", template="makefile/dvc.mk.j2", flag="use_dvc"),
    )
}


class TaskRunnerGenerator:
    """Writes and extends the project ``Makefile``."""

    FILENAME = "Makefile"

    def __init__(self, renderer: TemplateRenderer) -> None:
        self.renderer = renderer

    def render_group(self, name: str, context: dict[str, Any]) -> str:
        """Render the task group *name* to text."""
        return self.renderer.render(TASK_GROUPS[name].template, context)

    async def ensure_group(self, root: Path, name: str, context: dict[str, Any]) -> bool:
        """Add task group *name* to ``<root>/Makefile`` unless its marker is present.

        The ``core`` group is always placed at the top of the file.

        Returns:
            ``True`` if the group was added.
        """
        group = TASK_GROUPS[name]
        block = self.render_group(name, context)
        added = await asyncio.to_thread(
            ensure_block,
            root / self.FILENAME,
            group.marker,
            block,
            prepend=group.name == "core",
        )
        if not added:
            print_debug(f"Makefile already contains task group '{name}'")
        return added

    async def generate(self, root: Path, context: dict[str, Any]) -> list[str]:
        """Write ``core`` plus every task group whose feature is enabled.

        Returns:
            Names of the groups that were newly added.
        """
        added: list[str] = []
        for group in TASK_GROUPS.values():
            if group.flag is not None and not context.get(group.flag):
                continue
            if await self.ensure_group(root, group.name, context):
                added.append(group.name)
        return added
