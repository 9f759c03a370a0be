"""Project composition orchestrator.

Takes a ``ProjectSpec`` and produces a complete project directory by running
the base generators and then one generator per enabled feature, strictly in
order.  Shared files (``Makefile``, ``.gitignore``, ``pyproject.toml``) are only
touched through the marker-based merge guard, so each contribution appears
exactly once.
"""

from __future__ import annotations

import asyncio
import time
from datetime import date
from pathlib import Path
from typing import Any, Awaitable, Callable

from pydantic import BaseModel, Field

from genai_scaffold.config import ScaffoldSettings
from genai_scaffold.errors import DirectoryExists, ExternalToolFailure
from genai_scaffold.models import ProjectSpec
from genai_scaffold.utils import (
    ensure_dir,
    format_duration,
    print_debug,
    print_step,
    print_success,
    run_command,
)

from .ci_gen import GitHubActionsGenerator, GitLabCIGenerator
from .docker_gen import DockerGenerator
from .dvc_gen import DvcGenerator
from .manifest import CondaGenerator, ManifestGenerator, dependencies
from .ollama_gen import OllamaGenerator
from .quality import GitignoreGenerator, PreCommitGenerator
from .readme import ReadmeGenerator
from .sphinx_gen import SphinxGenerator
from .structure import StructureGenerator
from .task_runner import TaskRunnerGenerator
from .templates import TemplateRenderer

CommandRunner = Callable[..., Awaitable[tuple[int, str, str]]]


# ---------------------------------------------------------------------------
# Result model
# ---------------------------------------------------------------------------


class CompositionResult(BaseModel):
    """Outcome of a successful composition."""

    root: Path
    files: list[Path] = Field(default_factory=list)
    steps: list[str] = Field(default_factory=list)
    git_initialized: bool = False
    duration_seconds: float = 0.0


# ---------------------------------------------------------------------------
# Context building
# ---------------------------------------------------------------------------


def build_context(spec: ProjectSpec, today: date | None = None) -> dict[str, Any]:
    """Build the Jinja2 template context from a ``ProjectSpec``."""
    today = today or date.today()
    return {
        "project_name": spec.name,
        "python_version": spec.python_version.value,
        "framework": spec.framework.value,
        "framework_title": spec.framework_title,
        "template": spec.template.value,
        "ollama_model": spec.ollama_model,
        "dvc_remote": spec.dvc_remote.value,
        "dependencies": dependencies(spec),
        "use_docker": spec.use_docker,
        "use_sphinx": spec.use_sphinx,
        "use_github_actions": spec.use_github_actions,
        "use_gitlab_ci": spec.use_gitlab_ci,
        "use_conda": spec.use_conda,
        "use_ollama": spec.use_ollama,
        "use_dvc": spec.use_dvc,
        "year": today.year,
        "today": today.isoformat(),
    }


# ---------------------------------------------------------------------------
# Composer
# ---------------------------------------------------------------------------


class ProjectComposer:
    """Generates a project directory from a ``ProjectSpec``.

    External tools (``git``, ``dvc``) are invoked through *runner*, which
    defaults to :func:`genai_scaffold.utils.run_command`.  Any non-zero exit,
    missing executable or timeout raises ``ExternalToolFailure``; any failed
    write raises ``IOFailure``.  Nothing is rolled back on failure.
    """

    def __init__(
        self,
        spec: ProjectSpec,
        settings: ScaffoldSettings | None = None,
        runner: CommandRunner = run_command,
        renderer: TemplateRenderer | None = None,
    ) -> None:
        self.spec = spec
        self.settings = settings or ScaffoldSettings()
        self.runner = runner
        self.renderer = renderer or TemplateRenderer()

        self.structure = StructureGenerator(self.renderer)
        self.task_runner = TaskRunnerGenerator(self.renderer)
        self.manifest = ManifestGenerator(self.renderer)
        self.pre_commit = PreCommitGenerator(self.renderer)
        self.gitignore = GitignoreGenerator(self.renderer)
        self.readme = ReadmeGenerator(self.renderer)
        self.conda = CondaGenerator(self.renderer, self.task_runner)
        self.docker = DockerGenerator(self.renderer, self.task_runner)
        self.sphinx = SphinxGenerator(self.renderer, self.task_runner, self.manifest)
        self.github = GitHubActionsGenerator(self.renderer)
        self.gitlab = GitLabCIGenerator(self.renderer)
        self.ollama = OllamaGenerator(self.renderer, self.task_runner)
        self.dvc = DvcGenerator(self.renderer, self.task_runner, self.gitignore)

    # -- Public API --------------------------------------------------------

    async def compose(self, parent_dir: str | Path) -> CompositionResult:
        """Generate the project under ``<parent_dir>/<name>``.

        Args:
            parent_dir: Existing or new directory that will contain the
                project folder.

        Returns:
            A ``CompositionResult`` describing what was written.

        Raises:
            DirectoryExists: If the project directory already exists.  Nothing
                is written in that case.
        """
        start = time.monotonic()
        root = Path(parent_dir) / self.spec.name
        if root.exists():
            raise DirectoryExists(root)

        context = self._build_context()
        result = CompositionResult(root=root)

        await asyncio.to_thread(ensure_dir, root)
        await self._step(result, "project structure", self.structure.generate(root, context))

        if self.settings.init_git:
            print_step("Initializing git repository...")
            await self._run_tool(["git", "init", "-q"], root)
            result.git_initialized = True

        await self._step(result, "pyproject.toml", self.manifest.generate(root, context))
        print_step("Creating Makefile...")
        await self.task_runner.generate(root, context)
        result.files.append(root / TaskRunnerGenerator.FILENAME)
        result.steps.append("Makefile")
        await self._step(result, "pre-commit config", self.pre_commit.generate(root, context))
        await self._step(result, ".gitignore", self.gitignore.generate(root, context))
        await self._step(result, "README.md", self.readme.generate(root, context))

        if self.spec.use_conda:
            await self._step(result, "Conda environment", self.conda.generate(root, context))
        if self.spec.use_docker:
            await self._step(result, "Docker configuration", self.docker.generate(root, context))
        if self.spec.use_sphinx:
            await self._step(result, "Sphinx documentation", self.sphinx.generate(root, context))
        if self.spec.use_github_actions:
            await self._step(result, "GitHub Actions", self.github.generate(root, context))
        if self.spec.use_gitlab_ci:
            await self._step(result, "GitLab CI", self.gitlab.generate(root, context))
        if self.spec.use_ollama:
            await self._step(result, "Ollama integration", self.ollama.generate(root, context))
        if self.spec.use_dvc:
            await self._init_dvc(root, git_initialized=result.git_initialized)
            await self._step(result, "DVC", self.dvc.generate(root, context))

        if result.git_initialized:
            print_step("Creating initial commit...")
            await self._run_tool(["git", "add", "."], root)
            await self._run_tool(["git", "commit", "-q", "-m", self.settings.commit_message], root)

        result.files = sorted(set(result.files))
        result.duration_seconds = time.monotonic() - start
        print_success(
            f"Project {self.spec.name} created in {format_duration(result.duration_seconds)}"
        )
        return result

    # -- Context building --------------------------------------------------

    def _build_context(self) -> dict[str, Any]:
        return build_context(self.spec)

    # -- Helpers -----------------------------------------------------------

    async def _step(
        self,
        result: CompositionResult,
        label: str,
        work: Awaitable[list[Path]],
    ) -> None:
        print_step(f"Creating {label}...")
        written = await work
        result.files.extend(written)
        result.steps.append(label)
        print_debug(f"{label}: {len(written)} file(s)")

    async def _init_dvc(self, root: Path, *, git_initialized: bool) -> None:
        if not self.settings.init_dvc:
            print_debug("Skipping dvc init (disabled in settings)")
            return
        print_step("Initializing DVC...")
        cmd = ["dvc", "init", "-q"]
        if not git_initialized:
            cmd.append("--no-scm")
        await self._run_tool(cmd, root)

    async def _run_tool(self, cmd: list[str], cwd: Path) -> str:
        """Run an external command, raising ``ExternalToolFailure`` on any failure."""
        print_debug(f"Running: {' '.join(cmd)}")
        try:
            returncode, stdout, stderr = await self.runner(
                cmd, cwd=cwd, timeout=self.settings.tool_timeout
            )
        except FileNotFoundError as exc:
            raise ExternalToolFailure(cmd, 127, f"{cmd[0]}: command not found") from exc
        if returncode != 0:
            raise ExternalToolFailure(cmd, returncode, stderr)
        return stdout
