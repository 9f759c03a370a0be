"""genai-scaffold runtime settings.

Settings that control *how* a project is generated (external tool calls,
timeouts, the Ollama probe), as opposed to ``ProjectSpec`` which describes
*what* is generated.  Pydantic v2 models so values are validated on
construction and can be round-tripped through JSON.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from genai_scaffold.errors import InvalidArgument

_TRUTHY = {"1", "true", "yes", "on"}

# Field name -> environment variable it is read from.
_ENV_NAMES = {
    "commit_message": "GENAI_SCAFFOLD_COMMIT_MESSAGE",
    "tool_timeout": "GENAI_SCAFFOLD_TOOL_TIMEOUT",
    "ollama_url": "GENAI_SCAFFOLD_OLLAMA_URL",
}


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").strip().lower() in _TRUTHY


class ScaffoldSettings(BaseModel):
    """Tuning knobs for a scaffolding run.

    Instances are created once by the CLI (usually via :meth:`from_env`) and
    passed to ``ProjectComposer``.
    """

    init_git: bool = Field(default=True, description="Run git init and commit the generated tree")
    init_dvc: bool = Field(default=True, description="Run dvc init when the dvc feature is enabled")
    commit_message: str = Field(default="Initial commit")
    tool_timeout: int = Field(default=120, ge=1, description="Per-command timeout in seconds")
    probe_ollama: bool = Field(default=True, description="Check the local Ollama server after generation")
    ollama_url: str = Field(default="http://localhost:11434")
    debug: bool = Field(default=False)

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path) -> Path:
        """Persist the settings to a JSON file and return the path."""
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return target

    @classmethod
    def load(cls, path: Path) -> "ScaffoldSettings":
        """Load previously-saved settings from JSON."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)

    @classmethod
    def from_env(cls) -> "ScaffoldSettings":
        """Build settings from environment variables.

        Recognised variables (all optional):
            GENAI_SCAFFOLD_NO_GIT, GENAI_SCAFFOLD_NO_DVC_INIT,
            GENAI_SCAFFOLD_COMMIT_MESSAGE, GENAI_SCAFFOLD_TOOL_TIMEOUT,
            GENAI_SCAFFOLD_NO_OLLAMA_PROBE, GENAI_SCAFFOLD_OLLAMA_URL, DEBUG.

        Raises:
            InvalidArgument: If a variable holds a value the model rejects.
        """
        kwargs: dict[str, Any] = {
            "init_git": not _env_flag("GENAI_SCAFFOLD_NO_GIT"),
            "init_dvc": not _env_flag("GENAI_SCAFFOLD_NO_DVC_INIT"),
            "probe_ollama": not _env_flag("GENAI_SCAFFOLD_NO_OLLAMA_PROBE"),
            "debug": _env_flag("DEBUG"),
        }
        for field, env_name in _ENV_NAMES.items():
            if os.environ.get(env_name):
                kwargs[field] = os.environ[env_name]
        try:
            return cls(**kwargs)
        except ValidationError as exc:
            problems = "; ".join(
                f"{_ENV_NAMES.get(str(err['loc'][0]), err['loc'][0])}: {err['msg']}"
                for err in exc.errors()
            )
            raise InvalidArgument(f"Invalid environment settings: {problems}") from exc
