"""Command-line interface: ``create-project``.

Parses the flag set into a ``ProjectSpec``, runs the composer and prints a
summary.  Every ``ScaffoldError`` ends the process with exit code 1; argument
errors additionally print the usage text.
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import Sequence

from genai_scaffold import __version__
from genai_scaffold.config import ScaffoldSettings
from genai_scaffold.errors import InvalidArgument, ScaffoldError
from genai_scaffold.models import Feature, ProjectSpec
from genai_scaffold.ollama_probe import OllamaProbe
from genai_scaffold.scaffolder.composer import CompositionResult, ProjectComposer
from genai_scaffold.utils import (
    console,
    print_banner,
    print_error,
    print_next_steps,
    print_step,
    print_summary_table,
    print_warning,
    set_debug,
)


class _ArgumentParser(argparse.ArgumentParser):
    """``ArgumentParser`` that raises ``InvalidArgument`` instead of exiting."""

    def error(self, message: str) -> None:  # type: ignore[override]
        raise InvalidArgument(message)


# Boolean flag -> enabled feature
_FEATURE_FLAGS: dict[str, Feature] = {
    "docker": Feature.DOCKER,
    "sphinx": Feature.SPHINX,
    "github_actions": Feature.GITHUB_ACTIONS,
    "gitlab_ci": Feature.GITLAB_CI,
    "conda": Feature.CONDA,
    "ollama": Feature.OLLAMA,
    "dvc": Feature.DVC,
}


def build_parser() -> argparse.ArgumentParser:
    """Return the ``create-project`` argument parser."""
    parser = _ArgumentParser(
        prog="create-project",
        description="Create a new GenAI project with best practices and modern tooling.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  create-project -n my_project\n"
            "  create-project -n my_project -d -s -g -f both\n"
            "  create-project -n my_project -o -m mistral -v -r gcs\n"
        ),
    )
    parser.add_argument("-n", "--name", required=True, help="Project name (required)")
    parser.add_argument(
        "-t", "--template", default="basic", help="Template type: basic|advanced (default: basic)"
    )
    parser.add_argument(
        "-p", "--python", dest="python_version", default="3.11",
        help="Python version: 3.8|3.9|3.10|3.11 (default: 3.11)",
    )
    parser.add_argument(
        "-f", "--framework", default="llamaindex",
        help="LLM framework: llamaindex|langchain|both (default: llamaindex)",
    )
    parser.add_argument("-d", "--docker", action="store_true", help="Include Docker configuration")
    parser.add_argument("-s", "--sphinx", action="store_true", help="Include Sphinx documentation")
    parser.add_argument(
        "-g", "--github-actions", dest="github_actions", action="store_true",
        help="Include GitHub Actions workflows",
    )
    parser.add_argument(
        "-l", "--gitlab-ci", dest="gitlab_ci", action="store_true", help="Include GitLab CI pipeline"
    )
    parser.add_argument("-c", "--conda", action="store_true", help="Include a Conda environment")
    parser.add_argument("-o", "--ollama", action="store_true", help="Include Ollama integration")
    parser.add_argument(
        "-m", "--model", dest="ollama_model", default="llama2",
        help="Ollama model (default: llama2)",
    )
    parser.add_argument("-v", "--dvc", action="store_true", help="Include DVC data versioning")
    parser.add_argument(
        "-r", "--remote", dest="dvc_remote", default="s3",
        help="DVC remote type: s3|gcs|azure|local (default: s3)",
    )
    parser.add_argument(
        "--output", default=".", help="Parent directory for the new project (default: .)"
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def parse_namespace(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse raw arguments, raising ``InvalidArgument`` on any parser error."""
    return build_parser().parse_args(argv)


def spec_from_namespace(args: argparse.Namespace) -> ProjectSpec:
    """Validate parsed arguments into a ``ProjectSpec``."""
    features = frozenset(f for flag, f in _FEATURE_FLAGS.items() if getattr(args, flag))
    return ProjectSpec.create(
        name=args.name,
        template=args.template,
        python_version=args.python_version,
        framework=args.framework,
        features=features,
        ollama_model=args.ollama_model,
        dvc_remote=args.dvc_remote,
    )


def parse_args(argv: Sequence[str] | None = None) -> ProjectSpec:
    """Turn a command line into a validated ``ProjectSpec``.

    Raises:
        InvalidArgument: If the name is missing, a flag is unknown, or any
            value is out of range.
    """
    return spec_from_namespace(parse_namespace(argv))


# ---------------------------------------------------------------------------
# Output helpers
# ---------------------------------------------------------------------------


def next_steps(spec: ProjectSpec, root: Path) -> list[str]:
    """Follow-up commands for the generated project, one per enabled feature."""
    steps = [f"cd {root}", "make install", "make setup-pre-commit", "make test"]
    if spec.use_conda:
        steps.insert(1, "make conda-create")
    if spec.use_docker:
        steps.append("make docker-build")
    if spec.use_sphinx:
        steps.append("make docs-build")
    if spec.use_ollama:
        steps.extend(["make ollama-start", "make ollama-pull", "make ollama-run"])
    if spec.use_dvc:
        steps.extend(["make dvc-remote-setup", "make dvc-run-pipeline"])
    return steps


def _print_result(spec: ProjectSpec, result: CompositionResult) -> None:
    features = ", ".join(f.value for f in spec.enabled_features()) or "none"
    summary = {
        "Project": spec.name,
        "Location": str(result.root),
        "Python": spec.python_version.value,
        "Framework": spec.framework_title,
        "Features": features,
        "Files written": str(len(result.files)),
        "Git repository": "yes" if result.git_initialized else "no",
    }
    if spec.use_ollama:
        summary["Ollama model"] = spec.ollama_model
    if spec.use_dvc:
        summary["DVC remote"] = spec.dvc_remote.value
    print_summary_table(summary, title="Project created")
    print_next_steps(next_steps(spec, result.root))


async def _probe_ollama(spec: ProjectSpec, settings: ScaffoldSettings) -> None:
    print_step("Checking local Ollama server...")
    status = await OllamaProbe(settings.ollama_url).check(spec.ollama_model)
    hint = status.hint(spec.ollama_model)
    if hint:
        print_warning(hint)


async def _run(spec: ProjectSpec, output: Path, settings: ScaffoldSettings) -> CompositionResult:
    result = await ProjectComposer(spec, settings).compose(output)
    if spec.use_ollama and settings.probe_ollama:
        await _probe_ollama(spec, settings)
    return result


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main(argv: Sequence[str] | None = None, settings: ScaffoldSettings | None = None) -> None:
    """CLI entry point for ``create-project`` and ``python -m genai_scaffold``."""
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
        spec = spec_from_namespace(args)
    except InvalidArgument as exc:
        print_error(f"Error: {exc}")
        console.print(parser.format_usage(), highlight=False, markup=False)
        sys.exit(1)

    try:
        settings = settings or ScaffoldSettings.from_env()
    except ScaffoldError as exc:
        print_error(f"Error: {exc}")
        sys.exit(1)
    set_debug(settings.debug)

    print_banner("genai-scaffold", f"Creating GenAI project [bold]{spec.name}[/bold]")
    try:
        result = asyncio.run(_run(spec, Path(args.output), settings))
    except ScaffoldError as exc:
        print_error(f"Error: {exc}")
        sys.exit(1)

    _print_result(spec, result)


if __name__ == "__main__":
    main()
