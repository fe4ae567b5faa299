"""Runtime configuration for the Content Extract service."""

from __future__ import annotations

import os
from typing import List, Mapping

from pydantic import BaseModel, Field, SecretStr, ValidationError

__all__ = [
    "ServiceConfig",
    "DEFAULT_ALLOWED_ORIGIN",
    "DEFAULT_INFERENCE_URL",
    "DEFAULT_SUMMARY_MODEL",
]

DEFAULT_ALLOWED_ORIGIN = "https://content-extract-ui.vercel.app"
DEFAULT_INFERENCE_URL = "https://api-inference.huggingface.co/models"
DEFAULT_SUMMARY_MODEL = "facebook/bart-large-cnn"

# Environment variable -> field name.
_ENV_FIELDS = {
    "HUGGINGFACE_API_KEY": "api_token",
    "PORT": "port",
    "ALLOWED_ORIGINS": "allowed_origins",
    "SUMMARY_MODEL": "summary_model",
    "INFERENCE_API_URL": "inference_url",
    "REQUEST_TIMEOUT": "request_timeout",
    "EXCERPT_BUDGET": "excerpt_budget",
}


class ServiceConfig(BaseModel):
    """Settings shared by the HTTP layer and the extraction pipeline."""

    api_token: SecretStr | None = Field(
        default=None,
        description="Bearer token for the summarization provider",
    )
    port: int = Field(default=5000, ge=1, le=65535, description="Port the server listens on")
    allowed_origins: List[str] = Field(
        default_factory=lambda: [DEFAULT_ALLOWED_ORIGIN],
        description="Origins allowed to call the API cross-origin. Use ``*`` to allow any origin.",
    )
    summary_model: str = Field(default=DEFAULT_SUMMARY_MODEL, min_length=1)
    inference_url: str = Field(
        default=DEFAULT_INFERENCE_URL,
        description="Base URL of the inference API; the model name is appended to it",
    )
    request_timeout: float = Field(
        default=15.0,
        gt=0,
        description="Timeout in seconds applied to both the page fetch and the summarization call",
    )
    excerpt_budget: int = Field(
        default=3000,
        gt=0,
        description="Maximum number of characters of page text forwarded to the summarizer",
    )
    retry_backoff: float = Field(default=3.0, ge=0, description="Seconds to wait after a 503 response")
    max_attempts: int = Field(default=3, ge=1, description="Total summarization attempts, retries included")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "ServiceConfig":
        """Build a configuration from process environment variables."""

        source = os.environ if environ is None else environ
        data: dict[str, object] = {}
        for env_name, field_name in _ENV_FIELDS.items():
            raw = source.get(env_name)
            if raw is None or not raw.strip():
                continue
            value = raw.strip()
            if field_name == "allowed_origins":
                data[field_name] = [origin.strip() for origin in value.split(",") if origin.strip()]
            else:
                data[field_name] = value

        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            names = {field: env for env, field in _ENV_FIELDS.items()}
            fields = [str(err["loc"][0]) for err in exc.errors() if err["loc"]]
            invalid = sorted({names.get(field, field) for field in fields})
            raise ValueError(f"Invalid environment configuration: {', '.join(invalid)}\n{exc}") from exc

    @property
    def allows_any_origin(self) -> bool:
        return "*" in self.allowed_origins

    def model_endpoint(self, model: str | None = None) -> str:
        """Return the inference URL for ``model`` (defaults to :attr:`summary_model`)."""

        return f"{self.inference_url.rstrip('/')}/{model or self.summary_model}"
