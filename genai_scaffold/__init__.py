"""genai-scaffold: generate GenAI application projects from the command line.

Quick usage::

    from genai_scaffold import ProjectComposer, ProjectSpec

    spec = ProjectSpec.create(name="demo", features={"docker", "ollama"}, ollama_model="mistral")
    result = await ProjectComposer(spec).compose("/tmp/output")
"""

__version__ = "0.1.0"

from genai_scaffold.models import Feature, ProjectSpec  # noqa: E402
from genai_scaffold.scaffolder.composer import CompositionResult, ProjectComposer  # noqa: E402

__all__ = [
    "CompositionResult",
    "Feature",
    "ProjectComposer",
    "ProjectSpec",
    "__version__",
]
