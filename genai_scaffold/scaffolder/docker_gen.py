"""Docker and Docker Compose file generation.

Produces the production and development images, the matching Compose files
(with an ``ollama`` service when the ollama feature is enabled), a
``.dockerignore`` and three helper scripts under ``scripts/docker/``.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

from genai_scaffold.utils import make_executable

from .task_runner import TaskRunnerGenerator
from .templates import TemplateRenderer


class DockerGenerator:
    """Generates the container file set for a project."""

    # Template name -> output file name (relative to the project root)
    _FILES: dict[str, str] = {
        "docker/Dockerfile.j2": "Dockerfile",
        "docker/Dockerfile.dev.j2": "Dockerfile.dev",
        "docker/docker-compose.yml.j2": "docker-compose.yml",
        "docker/docker-compose.dev.yml.j2": "docker-compose.dev.yml",
        "docker/dockerignore.j2": ".dockerignore",
    }

    def __init__(self, renderer: TemplateRenderer, task_runner: TaskRunnerGenerator) -> None:
        self.renderer = renderer
        self.task_runner = task_runner

    def render_compose(self, context: dict[str, Any], *, dev: bool = False) -> str:
        """Render ``docker-compose.yml`` (or the ``.dev`` variant)."""
        name = "docker/docker-compose.dev.yml.j2" if dev else "docker/docker-compose.yml.j2"
        return self.renderer.render(name, context)

    async def generate(self, root: Path, context: dict[str, Any]) -> list[Path]:
        """Write all Docker files to *root*.

        Args:
            root: Project root directory.
            context: Template rendering context.

        Returns:
            List of written file paths.
        """
        written = await self.renderer.render_files(self._FILES, root, context)
        scripts = await self.renderer.render_tree(
            "docker/scripts", root / "scripts" / "docker", context
        )
        for script in scripts:
            await asyncio.to_thread(make_executable, script)
        written.extend(scripts)

        await self.task_runner.ensure_group(root, "docker", context)
        return written
