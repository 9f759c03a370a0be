"""Shared pytest fixtures for the genai-scaffold test suite.

Provides reusable fixtures for:
- Settings with external tools and the Ollama probe disabled
- A fake command runner that records git/dvc invocations
- A real TemplateRenderer and ready-made template contexts
- Helpers that run a full composition into ``tmp_path``
"""

from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Any

import pytest

from genai_scaffold.config import ScaffoldSettings
from genai_scaffold.models import ProjectSpec
from genai_scaffold.scaffolder.composer import ProjectComposer, build_context
from genai_scaffold.scaffolder.templates import TemplateRenderer


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------


@pytest.fixture
def offline_settings() -> ScaffoldSettings:
    """Settings that never call git, dvc, or the Ollama server."""
    return ScaffoldSettings(init_git=False, init_dvc=False, probe_ollama=False)


@pytest.fixture
def tool_settings() -> ScaffoldSettings:
    """Settings that route git/dvc through the (fake) runner."""
    return ScaffoldSettings(init_git=True, init_dvc=True, probe_ollama=False)


# ---------------------------------------------------------------------------
# Fake command runner
# ---------------------------------------------------------------------------


class FakeRunner:
    """Async stand-in for ``run_command`` that records every call.

    ``dvc init`` creates ``.dvc/`` like the real tool would.  Commands listed
    in ``failures`` return the mapped ``(returncode, stderr)``.
    """

    def __init__(self) -> None:
        self.calls: list[list[str]] = []
        self.failures: dict[str, tuple[int, str]] = {}
        self.kwargs: list[dict[str, Any]] = []

    async def __call__(self, cmd: list[str], cwd: Path | None = None, **kwargs: Any):
        self.calls.append(list(cmd))
        self.kwargs.append({"cwd": cwd, **kwargs})
        key = " ".join(cmd[:2])
        if key in self.failures:
            returncode, stderr = self.failures[key]
            return returncode, "", stderr
        if cmd[:2] == ["dvc", "init"] and cwd is not None:
            (Path(cwd) / ".dvc").mkdir(exist_ok=True)
        return 0, "", ""

    def commands(self) -> list[str]:
        return [" ".join(c) for c in self.calls]


@pytest.fixture
def fake_runner() -> FakeRunner:
    """A recording command runner that always succeeds."""
    return FakeRunner()


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


@pytest.fixture
def renderer() -> TemplateRenderer:
    """The real template renderer over the packaged templates."""
    return TemplateRenderer()


@pytest.fixture
def make_context():
    """Factory: ``make_context(**spec_fields)`` -> template context dict."""

    def _make(**fields: Any) -> dict[str, Any]:
        fields.setdefault("name", "demo")
        return build_context(ProjectSpec.create(**fields), today=date(2024, 5, 17))

    return _make


@pytest.fixture
def basic_context(make_context) -> dict[str, Any]:
    """Context for a project with no optional features."""
    return make_context()


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    """An empty, existing project root directory."""
    root = tmp_path / "demo"
    root.mkdir()
    return root


# ---------------------------------------------------------------------------
# Composition helpers
# ---------------------------------------------------------------------------


@pytest.fixture
def compose(tmp_path: Path, offline_settings: ScaffoldSettings):
    """Factory: ``await compose(**spec_fields)`` -> CompositionResult.

    Runs a full offline composition into ``tmp_path``.
    """

    async def _compose(**fields: Any):
        fields.setdefault("name", "demo")
        spec = ProjectSpec.create(**fields)
        return await ProjectComposer(spec, offline_settings).compose(tmp_path)

    return _compose


def _relative_files(root: Path) -> set[str]:
    return {p.relative_to(root).as_posix() for p in root.rglob("*") if p.is_file()}


@pytest.fixture
def file_set():
    """Function returning every regular file under a root as relative POSIX paths."""
    return _relative_files
