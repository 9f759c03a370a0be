"""Advisory check of the local Ollama server.

After a project with the ollama feature is generated, the CLI asks the local
server whether it is running and whether the chosen model has been pulled,
then suggests the matching ``make`` target.  Every failure is reported as
"not available"; the probe never raises.

Typical usage::

    probe = OllamaProbe()
    status = await probe.check("mistral")
    if not status.server_available:
        print("run: make ollama-start")
"""

from __future__ import annotations

import httpx
from pydantic import BaseModel, Field


class ProbeResult(BaseModel):
    """What the probe found out about the local Ollama server."""

    server_available: bool = Field(default=False)
    model_available: bool = Field(default=False)
    models: list[str] = Field(default_factory=list, description="Locally pulled model names")

    def hint(self, model: str) -> str | None:
        """Return a follow-up suggestion, or ``None`` if nothing is missing."""
        if not self.server_available:
            return "Ollama server not reachable. Start it with: make ollama-start"
        if not self.model_available:
            return f"Model '{model}' is not pulled yet. Pull it with: make ollama-pull"
        return None


class OllamaProbe:
    """Minimal async client for the Ollama ``/api/tags`` endpoint."""

    def __init__(self, base_url: str = "http://localhost:11434", timeout: float = 3.0) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def _client(self) -> httpx.AsyncClient:
        """Return a fresh ``AsyncClient`` configured with our base URL and timeout."""
        return httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(self.timeout, connect=self.timeout),
        )

    async def is_available(self) -> bool:
        """Return ``True`` if the Ollama server responds to ``/api/tags``."""
        try:
            async with self._client() as client:
                response = await client.get("/api/tags")
                return response.status_code == 200
        except httpx.HTTPError:
            return False

    async def list_models(self) -> list[str]:
        """Return the sorted names of all locally-available models.

        Returns an empty list if the server is unreachable or answers with
        something that is not the expected JSON.
        """
        try:
            async with self._client() as client:
                response = await client.get("/api/tags")
                response.raise_for_status()
                data = response.json()
        except (httpx.HTTPError, ValueError):
            return []
        models = data.get("models", []) if isinstance(data, dict) else []
        return sorted(m["name"] for m in models if isinstance(m, dict) and m.get("name"))

    async def has_model(self, model: str) -> bool:
        """Check whether *model* is pulled.  An untagged name matches ``:latest``."""
        return _matches(model, await self.list_models())

    async def check(self, model: str) -> ProbeResult:
        """Probe the server and the model in one go."""
        if not await self.is_available():
            return ProbeResult()
        models = await self.list_models()
        return ProbeResult(
            server_available=True,
            model_available=_matches(model, models),
            models=models,
        )


def _matches(model: str, available: list[str]) -> bool:
    tagged = model if ":" in model else f"{model}:latest"
    return model in available or tagged in available
