"""
nanotrust — Configuration System

All configuration is Pydantic-validated and loaded from:
1. A YAML file (defaults)
2. Environment variables (overrides)

Every tunable parameter of the trust layer lives here.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from nanotrust.primitives.common import TEMP_NAMESPACE

# ─── Sub-configs ──────────────────────────────────────────────────


class LoggingConfig(BaseModel):
    level: str = "INFO"
    format: str = "console"  # "console" | "json"


class RetrievalConfig(BaseModel):
    # Candidate server base URLs, tried in this order; the artifact code is appended
    servers: list[str] = Field(
        default_factory=lambda: [
            "https://np.knowledgepixels.com/",
            "https://server.np.trustyuri.net/",
            "http://server.nanopubs.lod.labs.vu.nl/",
        ]
    )
    request_timeout_s: float = 10.0
    max_parallel: int = 4  # batch size for the async fan-out path
    shuffle: bool = False
    accept: str = "application/trig"

    @field_validator("servers")
    @classmethod
    def _normalize_servers(cls, servers: list[str]) -> list[str]:
        # Codes are appended directly, so every base must end with a slash
        return [s.strip() if s.strip().endswith("/") else s.strip() + "/" for s in servers if s.strip()]

    @field_validator("max_parallel")
    @classmethod
    def _positive_parallelism(cls, value: int) -> int:
        if value < 1:
            raise ValueError("max_parallel must be at least 1")
        return value


class SigningConfig(BaseModel):
    algorithm: str = "RSA"  # "RSA" | "DSA"
    private_key_path: str | None = None
    signer: str | None = None  # URI recorded as npx:signedBy
    key_size: int = 2048


class PublicationConfig(BaseModel):
    temp_namespace: str = TEMP_NAMESPACE
    creators: list[str] = Field(default_factory=list)
    derived_from: str | None = None


# ─── Root Configuration ──────────────────────────────────────────


class NanotrustConfig(BaseSettings):
    """
    Root configuration. Loads from YAML, overridable by env vars.
    """

    model_config = SettingsConfigDict(
        env_prefix="NANOTRUST_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    retrieval: RetrievalConfig = Field(default_factory=RetrievalConfig)
    signing: SigningConfig = Field(default_factory=SigningConfig)
    publication: PublicationConfig = Field(default_factory=PublicationConfig)


def load_config(config_path: str | Path | None = None) -> NanotrustConfig:
    """
    Load configuration from YAML file, then apply environment variable overrides.
    """
    raw: dict[str, Any] = {}

    if config_path:
        path = Path(config_path)
        if path.exists():
            with open(path) as f:
                raw = yaml.safe_load(f) or {}

    import os

    if servers := os.environ.get("NANOTRUST_SERVERS"):
        raw.setdefault("retrieval", {})["servers"] = [
            s.strip() for s in servers.split(",") if s.strip()
        ]
    if key_path := os.environ.get("NANOTRUST_SIGNING_KEY_PATH"):
        raw.setdefault("signing", {})["private_key_path"] = key_path
    if signer := os.environ.get("NANOTRUST_SIGNER"):
        raw.setdefault("signing", {})["signer"] = signer
    if log_level := os.environ.get("NANOTRUST_LOG_LEVEL"):
        raw.setdefault("logging", {})["level"] = log_level

    return NanotrustConfig(**raw)
