"""Unit tests for the pre-commit and .gitignore generators."""

from __future__ import annotations

import pytest
import yaml

from genai_scaffold.scaffolder.quality import GitignoreGenerator, PreCommitGenerator

pytestmark = pytest.mark.unit


class TestPreCommitGenerator:
    async def test_hooks(self, renderer, basic_context, project_root):
        [path] = await PreCommitGenerator(renderer).generate(project_root, basic_context)
        assert path.name == ".pre-commit-config.yaml"

        config = yaml.safe_load(path.read_text())
        hook_ids = {hook["id"] for repo in config["repos"] for hook in repo["hooks"]}
        assert {"black", "isort", "mypy", "pylint", "trailing-whitespace"} <= hook_ids


class TestGitignoreGenerator:
    async def test_base_block(self, renderer, basic_context, project_root):
        [path] = await GitignoreGenerator(renderer).generate(project_root, basic_context)
        content = path.read_text()
        assert content.startswith("# Python\n")
        assert "__pycache__/" in content
        assert "# DVC" not in content

    async def test_dvc_block_once(self, renderer, make_context, project_root):
        context = make_context(features={"dvc"})
        generator = GitignoreGenerator(renderer)
        await generator.generate(project_root, context)
        assert await generator.ensure_dvc_block(project_root, context) is False

        content = (project_root / ".gitignore").read_text()
        assert content.count("# DVC") == 1
        assert "/data/processed" in content
        assert ".dvc/cache" in content

    async def test_dvc_block_first_then_base(self, renderer, make_context, project_root):
        context = make_context(features={"dvc"})
        generator = GitignoreGenerator(renderer)
        await generator.ensure_dvc_block(project_root, context)
        await generator.generate(project_root, context)

        content = (project_root / ".gitignore").read_text()
        assert content.startswith("# Python\n")
        assert content.count("# DVC") == 1

    def test_dvc_tracking_files_not_ignored(self, renderer, make_context):
        block = GitignoreGenerator(renderer).render_dvc_block(make_context(features={"dvc"}))
        lines = {line.strip() for line in block.splitlines()}
        assert "*.dvc" not in lines
        assert "/models" not in lines
