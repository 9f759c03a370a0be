"""Unit tests for dependency assembly and the pyproject / Conda generators.

Tests cover:
- dependencies() per framework, ollama and dvc remote
- Rendered pyproject.toml (valid TOML, python constraint, black target)
- Docs dependency group merge
- environment.yml and the conda task group
"""

from __future__ import annotations

import tomllib

import pytest
import yaml

from genai_scaffold.models import ProjectSpec
from genai_scaffold.scaffolder.manifest import CondaGenerator, ManifestGenerator, dependencies
from genai_scaffold.scaffolder.task_runner import TaskRunnerGenerator

pytestmark = pytest.mark.unit


def _dep_names(**fields) -> list[str]:
    return [name for name, _ in dependencies(ProjectSpec.create(name="demo", **fields))]


# ---------------------------------------------------------------------------
# dependencies()
# ---------------------------------------------------------------------------


class TestDependencies:
    def test_base_entries_first(self):
        deps = dependencies(ProjectSpec.create(name="demo", python_version="3.10"))
        assert deps[:3] == [("python", "^3.10"), ("pandas", "^2.0.0"), ("numpy", "^1.24.0")]

    def test_llamaindex_default(self):
        names = _dep_names()
        assert "llama-index" in names
        assert "langchain" not in names

    def test_langchain(self):
        names = _dep_names(framework="langchain")
        assert "langchain" in names
        assert "llama-index" not in names

    def test_both_frameworks(self):
        names = _dep_names(framework="both")
        assert names.index("llama-index") < names.index("langchain")

    def test_ollama_adds_httpx(self):
        assert {"httpx", "pytest-asyncio"} <= set(_dep_names(features={"ollama"}))

    @pytest.mark.parametrize(
        "remote, plugin",
        [("s3", "dvc-s3"), ("gcs", "dvc-gs"), ("azure", "dvc-azure")],
    )
    def test_dvc_remote_plugin(self, remote, plugin):
        names = _dep_names(features={"dvc"}, dvc_remote=remote)
        assert {"dvc", "pyyaml", plugin} <= set(names)

    def test_dvc_local_has_no_plugin(self):
        names = _dep_names(features={"dvc"}, dvc_remote="local")
        assert "dvc" in names
        assert not any(n.startswith("dvc-") for n in names)

    def test_no_dvc_without_feature(self):
        assert "dvc" not in _dep_names(dvc_remote="gcs")


# ---------------------------------------------------------------------------
# ManifestGenerator
# ---------------------------------------------------------------------------


class TestManifestGenerator:
    def test_render_is_valid_toml(self, renderer, make_context):
        data = tomllib.loads(ManifestGenerator(renderer).render(make_context(python_version="3.9")))
        poetry = data["tool"]["poetry"]
        assert poetry["name"] == "demo"
        assert poetry["dependencies"]["python"] == "^3.9"
        assert poetry["packages"] == [{"include": "demo", "from": "src"}]
        assert data["tool"]["black"]["target-version"] == ["py39"]
        assert data["tool"]["mypy"]["python_version"] == "3.9"

    def test_description_mentions_framework(self, renderer, make_context):
        content = ManifestGenerator(renderer).render(make_context(framework="both"))
        assert "LlamaIndex and LangChain" in content

    async def test_generate_and_docs_group(self, renderer, basic_context, project_root):
        manifest = ManifestGenerator(renderer)
        [path] = await manifest.generate(project_root, basic_context)
        assert await manifest.ensure_docs_group(project_root, basic_context) is True
        assert await manifest.ensure_docs_group(project_root, basic_context) is False

        data = tomllib.loads(path.read_text())
        docs = data["tool"]["poetry"]["group"]["docs"]
        assert docs["optional"] is True
        assert "Sphinx" in docs["dependencies"]

    async def test_docs_group_before_base_still_valid(self, renderer, basic_context, project_root):
        manifest = ManifestGenerator(renderer)
        await manifest.ensure_docs_group(project_root, basic_context)
        await manifest.generate(project_root, basic_context)

        content = (project_root / "pyproject.toml").read_text()
        assert content.startswith("[tool.poetry]\n")
        assert content.count("[tool.poetry]") == 1
        tomllib.loads(content)


# ---------------------------------------------------------------------------
# CondaGenerator
# ---------------------------------------------------------------------------


class TestCondaGenerator:
    async def test_environment_and_task_group(self, renderer, make_context, project_root):
        context = make_context(python_version="3.10", features={"conda"})
        generator = CondaGenerator(renderer, TaskRunnerGenerator(renderer))
        [path] = await generator.generate(project_root, context)

        env = yaml.safe_load(path.read_text())
        assert env["name"] == "demo"
        assert "python=3.10" in env["dependencies"]
        assert "# Conda commands" in (project_root / "Makefile").read_text()
