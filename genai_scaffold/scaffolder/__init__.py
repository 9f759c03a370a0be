"""Project scaffolder: renders and writes a GenAI project tree.

Each generator renders Jinja2 templates from ``templates/`` and writes them
under the project root.  ``ProjectComposer`` runs them in a fixed order.

Quick usage::

    from genai_scaffold.scaffolder import ProjectComposer

    result = await ProjectComposer(spec).compose("/tmp/output")
"""

from genai_scaffold.scaffolder.composer import ProjectComposer, build_context
from genai_scaffold.scaffolder.merge import ensure_block
from genai_scaffold.scaffolder.templates import TemplateRenderer

__all__ = [
    "ProjectComposer",
    "TemplateRenderer",
    "build_context",
    "ensure_block",
]
