"""Pydantic v2 models describing a project generation request.

``ProjectSpec`` is built once from the command line, validated, and then
handed read-only to every generator.  It is frozen: generators cannot change
the request after construction.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from genai_scaffold.errors import InvalidArgument


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class Template(str, Enum):
    """Project template.  ``advanced`` is accepted but renders the same tree."""
    BASIC = "basic"
    ADVANCED = "advanced"


class PythonVersion(str, Enum):
    """Python versions the generated project may target."""
    PY38 = "3.8"
    PY39 = "3.9"
    PY310 = "3.10"
    PY311 = "3.11"


class Framework(str, Enum):
    """LLM framework(s) the generated project depends on."""
    LLAMAINDEX = "llamaindex"
    LANGCHAIN = "langchain"
    BOTH = "both"


class Feature(str, Enum):
    """Optional, independently toggleable feature sets."""
    DOCKER = "docker"
    SPHINX = "sphinx"
    GITHUB_ACTIONS = "github_actions"
    GITLAB_CI = "gitlab_ci"
    CONDA = "conda"
    OLLAMA = "ollama"
    DVC = "dvc"


class DvcRemote(str, Enum):
    """Remote storage backend for DVC."""
    S3 = "s3"
    GCS = "gcs"
    AZURE = "azure"
    LOCAL = "local"


PROJECT_NAME_PATTERN = re.compile(r"[a-zA-Z][a-zA-Z0-9_-]*")
MODEL_NAME_PATTERN = re.compile(r"[A-Za-z0-9][A-Za-z0-9._:/-]*")

_FRAMEWORK_TITLES: dict[Framework, str] = {
    Framework.LLAMAINDEX: "LlamaIndex",
    Framework.LANGCHAIN: "LangChain",
    Framework.BOTH: "LlamaIndex and LangChain",
}


def _choices(enum_cls: type[Enum]) -> str:
    return ", ".join(member.value for member in enum_cls)


# ---------------------------------------------------------------------------
# ProjectSpec
# ---------------------------------------------------------------------------

class ProjectSpec(BaseModel):
    """Immutable record of a project generation request."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Project and package name")
    template: Template = Field(default=Template.BASIC)
    python_version: PythonVersion = Field(default=PythonVersion.PY311)
    framework: Framework = Field(default=Framework.LLAMAINDEX)
    features: frozenset[Feature] = Field(default_factory=frozenset)
    ollama_model: str = Field(default="llama2", description="Only used with the ollama feature")
    dvc_remote: DvcRemote = Field(default=DvcRemote.S3, description="Only used with the dvc feature")

    # -- Validators ---------------------------------------------------------

    @field_validator("name")
    @classmethod
    def _check_name(cls, value: str) -> str:
        if not PROJECT_NAME_PATTERN.fullmatch(value):
            raise ValueError(
                f"Invalid project name {value!r}. Must start with a letter and contain "
                "only letters, numbers, underscores, or hyphens."
            )
        return value

    @field_validator("template", mode="before")
    @classmethod
    def _check_template(cls, value: Any) -> Any:
        return _check_choice(value, Template, "template")

    @field_validator("python_version", mode="before")
    @classmethod
    def _check_python_version(cls, value: Any) -> Any:
        if isinstance(value, PythonVersion):
            return value
        if str(value) not in {v.value for v in PythonVersion}:
            raise ValueError(
                f"Invalid Python version: {value}. Supported versions: {_choices(PythonVersion)}"
            )
        return str(value)

    @field_validator("framework", mode="before")
    @classmethod
    def _check_framework(cls, value: Any) -> Any:
        return _check_choice(value, Framework, "framework")

    @field_validator("dvc_remote", mode="before")
    @classmethod
    def _check_dvc_remote(cls, value: Any) -> Any:
        return _check_choice(value, DvcRemote, "DVC remote type")

    @field_validator("features", mode="before")
    @classmethod
    def _check_features(cls, value: Any) -> Any:
        if isinstance(value, str):
            names = [value]
        elif isinstance(value, Iterable):
            names = [getattr(v, "value", v) for v in value]
        else:
            raise ValueError(f"Invalid features: {value!r}. Expected a list of feature names")
        unknown = sorted(str(n) for n in names if n not in {f.value for f in Feature})
        if unknown:
            raise ValueError(
                f"Unknown feature: {', '.join(unknown)}. Supported values: {_choices(Feature)}"
            )
        return frozenset(Feature(n) for n in names)

    @field_validator("ollama_model")
    @classmethod
    def _check_ollama_model(cls, value: str) -> str:
        if not MODEL_NAME_PATTERN.fullmatch(value):
            raise ValueError(f"Invalid Ollama model name: {value!r}")
        return value

    # -- Construction -------------------------------------------------------

    @classmethod
    def create(cls, **fields: Any) -> "ProjectSpec":
        """Validate *fields* and return a spec, raising ``InvalidArgument`` on error."""
        try:
            return cls(**fields)
        except ValidationError as exc:
            raise InvalidArgument(_format_validation_error(exc)) from exc

    # -- Queries ------------------------------------------------------------

    def has(self, feature: Feature | str) -> bool:
        """Return ``True`` if *feature* is enabled."""
        return Feature(feature) in self.features

    @property
    def use_docker(self) -> bool:
        return self.has(Feature.DOCKER)

    @property
    def use_sphinx(self) -> bool:
        return self.has(Feature.SPHINX)

    @property
    def use_github_actions(self) -> bool:
        return self.has(Feature.GITHUB_ACTIONS)

    @property
    def use_gitlab_ci(self) -> bool:
        return self.has(Feature.GITLAB_CI)

    @property
    def use_conda(self) -> bool:
        return self.has(Feature.CONDA)

    @property
    def use_ollama(self) -> bool:
        return self.has(Feature.OLLAMA)

    @property
    def use_dvc(self) -> bool:
        return self.has(Feature.DVC)

    @property
    def framework_title(self) -> str:
        """Human-readable framework name used in descriptions and the README."""
        return _FRAMEWORK_TITLES[self.framework]

    def enabled_features(self) -> list[Feature]:
        """Enabled features in declaration order (stable for output)."""
        return [f for f in Feature if f in self.features]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _check_choice(value: Any, enum_cls: type[Enum], label: str) -> Any:
    if isinstance(value, enum_cls):
        return value
    allowed = {member.value for member in enum_cls}
    if str(value) not in allowed:
        raise ValueError(f"Invalid {label}: {value}. Supported values: {_choices(enum_cls)}")
    return str(value)


def _format_validation_error(exc: ValidationError) -> str:
    """Flatten a pydantic ``ValidationError`` into a one-message-per-line string."""
    messages: list[str] = []
    for error in exc.errors():
        msg = error.get("msg", "")
        if msg.startswith("Value error, "):
            msg = msg[len("Value error, "):]
        loc = ".".join(str(part) for part in error.get("loc", ()))
        messages.append(f"{loc}: {msg}" if loc and msg == error.get("msg") else msg)
    return "\n".join(messages)
