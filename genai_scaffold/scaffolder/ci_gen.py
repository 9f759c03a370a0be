"""CI configuration for GitHub Actions and GitLab CI.

Both generators are parameterised only by the target Python version (and,
for GitLab, whether a Sphinx site exists to publish with Pages).
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from .templates import TemplateRenderer


class GitHubActionsGenerator:
    """Writes the workflow set under ``.github/workflows/``."""

    WORKFLOWS: tuple[str, ...] = ("ci", "dependency-review", "security", "release")

    def __init__(self, renderer: TemplateRenderer) -> None:
        self.renderer = renderer

    def render_workflow(self, name: str, context: dict[str, Any]) -> str:
        return self.renderer.render(f"ci/github/{name}.yml.j2", context)

    async def generate(self, root: Path, context: dict[str, Any]) -> list[Path]:
        return await self.renderer.render_tree(
            "ci/github", root / ".github" / "workflows", context
        )


class GitLabCIGenerator:
    """Writes ``.gitlab-ci.yml`` and the default merge request template."""

    def __init__(self, renderer: TemplateRenderer) -> None:
        self.renderer = renderer

    def render_pipeline(self, context: dict[str, Any]) -> str:
        return self.renderer.render("ci/gitlab/gitlab-ci.yml.j2", context)

    async def generate(self, root: Path, context: dict[str, Any]) -> list[Path]:
        pipeline = await self.renderer.render_to_file(
            "ci/gitlab/gitlab-ci.yml.j2", root / ".gitlab-ci.yml", context
        )
        template = await self.renderer.render_to_file(
            "ci/gitlab/merge_request_default.md.j2",
            root / ".gitlab" / "merge_request_templates" / "default.md",
            context,
        )
        return [pipeline, template]
