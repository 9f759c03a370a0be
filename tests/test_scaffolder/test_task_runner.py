"""Unit tests for Makefile task groups (genai_scaffold.scaffolder.task_runner)."""

from __future__ import annotations

import pytest

from genai_scaffold.scaffolder.task_runner import TASK_GROUPS, TaskRunnerGenerator

pytestmark = pytest.mark.unit


class TestTaskGroups:
    def test_every_group_template_starts_with_marker(self, renderer, make_context):
        generator = TaskRunnerGenerator(renderer)
        context = make_context(features={"conda", "docker", "sphinx", "ollama", "dvc"})
        for name, group in TASK_GROUPS.items():
            assert generator.render_group(name, context).startswith(group.marker + "\n"), name

    def test_recipes_use_tabs(self, renderer, make_context):
        content = TaskRunnerGenerator(renderer).render_group("core", make_context())
        recipe_lines = [line for line in content.splitlines() if line.startswith(("\t", " "))]
        assert recipe_lines
        assert all(line.startswith("\t") for line in recipe_lines)

    def test_core_targets(self, renderer, basic_context):
        content = TaskRunnerGenerator(renderer).render_group("core", basic_context)
        for target in ("install:", "test:", "lint:", "format:", "clean:", "setup-pre-commit:"):
            assert target in content
        assert "setup-hooks: setup-pre-commit" in content

    def test_ollama_targets_use_model(self, renderer, make_context):
        content = TaskRunnerGenerator(renderer).render_group(
            "ollama", make_context(name="Demo", ollama_model="mistral")
        )
        assert "ollama pull mistral" in content
        assert "ollama create demo-assistant" in content

    @pytest.mark.parametrize(
        "remote, expected",
        [("s3", "s3-remote"), ("gcs", "gs://"), ("azure", "azure://"), ("local", "local-remote")],
    )
    def test_dvc_remote_setup(self, renderer, make_context, remote, expected):
        content = TaskRunnerGenerator(renderer).render_group(
            "dvc", make_context(features={"dvc"}, dvc_remote=remote)
        )
        assert expected in content


class TestGenerate:
    async def test_core_only_by_default(self, renderer, basic_context, project_root):
        added = await TaskRunnerGenerator(renderer).generate(project_root, basic_context)
        assert added == ["core"]

    async def test_enabled_groups_added(self, renderer, make_context, project_root):
        context = make_context(features={"docker", "dvc"})
        added = await TaskRunnerGenerator(renderer).generate(project_root, context)
        assert added == ["core", "docker", "dvc"]

    async def test_idempotent(self, renderer, make_context, project_root):
        context = make_context(features={"docker", "ollama"})
        generator = TaskRunnerGenerator(renderer)
        await generator.generate(project_root, context)
        first = (project_root / "Makefile").read_text()

        assert await generator.generate(project_root, context) == []
        assert await generator.ensure_group(project_root, "docker", context) is False
        assert (project_root / "Makefile").read_text() == first
        assert first.count("# Docker commands") == 1

    async def test_core_stays_first(self, renderer, make_context, project_root):
        context = make_context(features={"docker"})
        generator = TaskRunnerGenerator(renderer)
        await generator.ensure_group(project_root, "docker", context)
        await generator.ensure_group(project_root, "core", context)
        assert (project_root / "Makefile").read_text().startswith("# Project tasks\n")
