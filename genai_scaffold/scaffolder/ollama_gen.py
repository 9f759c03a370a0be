"""Ollama integration stub generation.

Writes an httpx-based client for the local Ollama API into the generated
package, runnable examples, a config file with its loader, tests that skip
without a server, and an example ``Modelfile``.  Everything is parameterised
by the chosen model name.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from .task_runner import TaskRunnerGenerator
from .templates import TemplateRenderer


class OllamaGenerator:
    """Generates the Ollama client stub and its supporting files."""

    def __init__(self, renderer: TemplateRenderer, task_runner: TaskRunnerGenerator) -> None:
        self.renderer = renderer
        self.task_runner = task_runner

    def files(self, context: dict[str, Any]) -> dict[str, str]:
        """Return the template -> output path mapping (output relative to the root)."""
        package = f"src/{context['project_name']}"
        return {
            "ollama/package_init.py.j2": f"{package}/ollama/__init__.py",
            "ollama/client.py.j2": f"{package}/ollama/client.py",
            "base/models_init.py.j2": f"{package}/models/__init__.py",
            "ollama/run_ollama.py.j2": f"{package}/models/run_ollama.py",
            "ollama/config_example.py.j2": f"{package}/models/config_example.py",
            "ollama/config.py.j2": f"{package}/config.py",
            "ollama/tests_init.py.j2": "tests/ollama/__init__.py",
            "ollama/test_client.py.j2": "tests/ollama/test_client.py",
            "ollama/Modelfile.j2": "models/Modelfile",
            "ollama/ollama.json.j2": "configs/ollama.json",
        }

    def render_client(self, context: dict[str, Any]) -> str:
        return self.renderer.render("ollama/client.py.j2", context)

    async def generate(self, root: Path, context: dict[str, Any]) -> list[Path]:
        written = await self.renderer.render_files(self.files(context), root, context)
        await self.task_runner.ensure_group(root, "ollama", context)
        return written
