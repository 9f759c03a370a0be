"""Jinja2 rendering of the packaged project templates.

Every generated file comes from a ``.j2`` template under
``genai_scaffold/scaffolder/templates/``.  Templates are addressed by their
POSIX path relative to that directory (``"docker/Dockerfile.j2"``) and are
rendered with the context dict built by
:func:`genai_scaffold.scaffolder.composer.build_context`.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Any, Mapping

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from genai_scaffold.utils import write_file

TEMPLATE_SUFFIX = ".j2"

_PACKAGED_TEMPLATES = Path(__file__).parent / "templates"


# ---------------------------------------------------------------------------
# Filters
# ---------------------------------------------------------------------------


def py_tag(version: str) -> str:
    """``"3.11"`` -> ``"py311"`` (black / ruff target tag)."""
    return "py" + str(version).replace(".", "")


def underline(title: str, char: str = "=") -> str:
    """Return *title* followed by a reStructuredText underline of equal length."""
    return f"{title}\n{char * len(title)}"


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Loads templates from a directory and renders them to text or files.

    Undefined context variables raise ``jinja2.UndefinedError`` rather than
    rendering as empty strings.  No HTML escaping is applied; every template
    produces source, config or Markdown.

    Args:
        template_dir: Template root.  Defaults to the packaged templates.
    """

    def __init__(self, template_dir: str | Path | None = None) -> None:
        self.template_dir = Path(template_dir) if template_dir else _PACKAGED_TEMPLATES
        self.env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=False,
            undefined=StrictUndefined,
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.env.filters.update(py_tag=py_tag, underline=underline)

    # -- Text ----------------------------------------------------------------

    def render(self, name: str, context: Mapping[str, Any]) -> str:
        """Render the template *name* and return the text."""
        return self.env.get_template(name).render(context)

    def render_string(self, source: str, context: Mapping[str, Any]) -> str:
        """Render an inline template string."""
        return self.env.from_string(source).render(context)

    # -- Files ---------------------------------------------------------------

    async def render_to_file(
        self, name: str, output_path: str | Path, context: Mapping[str, Any]
    ) -> Path:
        """Render *name* into *output_path*, creating parent directories.

        Raises:
            IOFailure: If the file cannot be written.
        """
        return await asyncio.to_thread(write_file, Path(output_path), self.render(name, context))

    async def render_files(
        self, files: Mapping[str, str], root: Path, context: Mapping[str, Any]
    ) -> list[Path]:
        """Render a ``{template name: path relative to root}`` mapping in order."""
        return [
            await self.render_to_file(name, root / rel, context)
            for name, rel in files.items()
        ]

    async def render_tree(
        self,
        prefix: str,
        output_dir: str | Path,
        context: Mapping[str, Any],
        *,
        skip_patterns: list[str] | None = None,
    ) -> list[Path]:
        """Render every template below *prefix* into *output_dir*.

        The sub-directory layout is kept and the ``.j2`` suffix dropped, so
        ``sphinx/source/modules/index.rst.j2`` rendered with
        ``prefix="sphinx/source"`` lands in ``<output_dir>/modules/index.rst``.
        Templates whose relative path contains any of *skip_patterns* are
        left out.
        """
        files: dict[str, str] = {}
        for name in self.list_templates(prefix):
            rel = name[len(prefix) + 1 : -len(TEMPLATE_SUFFIX)]
            if skip_patterns and any(pattern in rel for pattern in skip_patterns):
                continue
            files[name] = rel
        return await self.render_files(files, Path(output_dir), context)

    # -- Discovery -----------------------------------------------------------

    def list_templates(self, prefix: str = "") -> list[str]:
        """Sorted template names, optionally restricted to the *prefix* directory."""
        base = self.template_dir / prefix if prefix else self.template_dir
        if not base.is_dir():
            return []
        return sorted(
            path.relative_to(self.template_dir).as_posix()
            for path in base.rglob(f"*{TEMPLATE_SUFFIX}")
        )
