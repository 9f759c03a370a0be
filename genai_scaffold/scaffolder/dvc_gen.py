"""DVC data-versioning setup.

The composer runs ``dvc init`` before this generator; the generator then
overwrites ``.dvc/config`` with a remote selected by ``dvc_remote`` and adds a
three-stage pipeline (prepare, train, evaluate) with stub stage scripts.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any

from genai_scaffold.utils import ensure_dir

from .quality import GitignoreGenerator
from .task_runner import TaskRunnerGenerator
from .templates import TemplateRenderer

# Placeholder remote URL per remote type, written to ``.dvc/config``.
REMOTE_URLS: dict[str, str] = {
    "s3": "s3://my-bucket/dvc-store",
    "gcs": "gs://my-bucket/dvc-store",
    "azure": "azure://my-container/dvc-store",
    "local": "/path/to/dvc-store",
}


class DvcGenerator:
    """Generates the DVC configuration, pipeline and stage scripts."""

    def __init__(
        self,
        renderer: TemplateRenderer,
        task_runner: TaskRunnerGenerator,
        gitignore: GitignoreGenerator,
    ) -> None:
        self.renderer = renderer
        self.task_runner = task_runner
        self.gitignore = gitignore

    def files(self, context: dict[str, Any]) -> dict[str, str]:
        """Return the template -> output path mapping (output relative to the root)."""
        package = f"src/{context['project_name']}"
        return {
            "dvc/config.j2": ".dvc/config",
            "dvc/dvc.yaml.j2": "dvc.yaml",
            "dvc/params.yaml.j2": "params.yaml",
            "dvc/dvcignore.j2": ".dvcignore",
            "dvc/data_init.py.j2": f"{package}/data/__init__.py",
            "dvc/prepare.py.j2": f"{package}/data/prepare.py",
            "base/models_init.py.j2": f"{package}/models/__init__.py",
            "dvc/train.py.j2": f"{package}/models/train.py",
            "dvc/evaluate.py.j2": f"{package}/models/evaluate.py",
        }

    @staticmethod
    def _with_remote(context: dict[str, Any]) -> dict[str, Any]:
        return {**context, "remote_url": REMOTE_URLS[context["dvc_remote"]]}

    def render_remote_config(self, context: dict[str, Any]) -> str:
        return self.renderer.render("dvc/config.j2", self._with_remote(context))

    async def generate(self, root: Path, context: dict[str, Any]) -> list[Path]:
        context = self._with_remote(context)
        for rel in (".dvc", "data/raw", "data/processed", "data/external", "models"):
            await asyncio.to_thread(ensure_dir, root / rel)

        written = await self.renderer.render_files(self.files(context), root, context)

        await self.task_runner.ensure_group(root, "dvc", context)
        await self.gitignore.ensure_dvc_block(root, context)
        return written
