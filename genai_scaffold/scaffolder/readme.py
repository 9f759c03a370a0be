"""README generation."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from .templates import TemplateRenderer

# Section heading emitted for each framework choice.
FRAMEWORK_SECTIONS: dict[str, str] = {
    "llamaindex": "## LlamaIndex Integration",
    "langchain": "## LangChain Integration",
    "both": "## Framework Integration",
}


class ReadmeGenerator:
    """Renders ``README.md``.

    The framework section is chosen by the ``framework`` context value; the
    Docker install steps and the optional ``make`` targets only appear for
    enabled features.
    """

    def __init__(self, renderer: TemplateRenderer) -> None:
        self.renderer = renderer

    def render(self, context: dict[str, Any]) -> str:
        return self.renderer.render("base/README.md.j2", context)

    async def generate(self, root: Path, context: dict[str, Any]) -> list[Path]:
        path = await self.renderer.render_to_file("base/README.md.j2", root / "README.md", context)
        return [path]
