"""Chunking configuration and environment-backed service settings."""

from __future__ import annotations

import os
from dataclasses import dataclass, field, fields, replace
from enum import Enum
from typing import Any

from email_rag.exceptions import ConfigError


class TailPolicy(str, Enum):
    """What to do with a trailing sentence buffer smaller than ``min_tokens``."""

    DROP = "drop"
    MERGE = "merge"
    EMIT = "emit"


@dataclass(frozen=True)
class ChunkingConfig:
    """Token budgets and switches for ``chunk_email``."""

    target_tokens: int = 384
    min_tokens: int = 128
    max_tokens: int = 512
    overlap_tokens: int = 32
    preserve_structure: bool = True
    optimize_for_search: bool = True
    undersized_tail: TailPolicy = TailPolicy.DROP

    def __post_init__(self):
        if not 0 < self.min_tokens <= self.target_tokens <= self.max_tokens:
            raise ConfigError(
                "Token budgets must satisfy 0 < min_tokens <= target_tokens <= max_tokens, "
                f"got min={self.min_tokens} target={self.target_tokens} max={self.max_tokens}"
            )
        if not 0 <= self.overlap_tokens < self.max_tokens:
            raise ConfigError(
                f"overlap_tokens must be in [0, max_tokens), got {self.overlap_tokens}"
            )
        try:
            object.__setattr__(self, "undersized_tail", TailPolicy(self.undersized_tail))
        except ValueError as e:
            raise ConfigError(f"Unknown undersized_tail policy: {self.undersized_tail!r}") from e

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ChunkingConfig":
        """Build from a mapping with snake_case or camelCase keys."""
        known = {f.name for f in fields(cls)}
        kwargs = {}
        for key, value in data.items():
            name = _snake_case(key)
            if name == "on_undersized_tail":
                name = "undersized_tail"
            if name not in known:
                raise ConfigError(f"Unknown chunking option: {key}")
            kwargs[name] = value
        return cls(**kwargs)

    def with_overrides(self, **changes: Any) -> "ChunkingConfig":
        return replace(self, **changes)


@dataclass(frozen=True)
class Settings:
    """Service endpoints and credentials, usually read with ``from_env``."""

    search_endpoint: str = ""
    search_api_key: str = ""
    search_index: str = "email-chunks"
    search_api_version: str = "2024-07-01"
    openai_api_key: str = ""
    azure_openai_endpoint: str = ""
    azure_openai_api_key: str = ""
    azure_openai_deployment: str = ""
    embedding_model: str = "text-embedding-3-small"
    embedding_dimensions: int = 1536
    max_workers: int = 4
    chunking: ChunkingConfig = field(default_factory=ChunkingConfig)

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> "Settings":
        env = os.environ if environ is None else environ
        chunking_overrides = {}
        for option in ("target_tokens", "min_tokens", "max_tokens", "overlap_tokens"):
            raw = env.get(f"EMAIL_RAG_{option.upper()}")
            if raw:
                chunking_overrides[option] = _int(raw, f"EMAIL_RAG_{option.upper()}")

        return cls(
            search_endpoint=env.get("AZURE_SEARCH_ENDPOINT", "").rstrip("/"),
            search_api_key=env.get("AZURE_SEARCH_API_KEY", ""),
            search_index=env.get("AZURE_SEARCH_INDEX", "email-chunks"),
            search_api_version=env.get("AZURE_SEARCH_API_VERSION", "2024-07-01"),
            openai_api_key=env.get("OPENAI_API_KEY", ""),
            azure_openai_endpoint=env.get("AZURE_OPENAI_ENDPOINT", "").rstrip("/"),
            azure_openai_api_key=env.get("AZURE_OPENAI_API_KEY", ""),
            azure_openai_deployment=env.get("AZURE_OPENAI_DEPLOYMENT", ""),
            embedding_model=env.get("EMBEDDING_MODEL", "text-embedding-3-small"),
            embedding_dimensions=_int(env.get("EMBEDDING_DIMENSIONS", "1536"), "EMBEDDING_DIMENSIONS"),
            max_workers=_int(env.get("EMAIL_RAG_MAX_WORKERS", "4"), "EMAIL_RAG_MAX_WORKERS"),
            chunking=ChunkingConfig(**chunking_overrides),
        )


def _snake_case(key: str) -> str:
    out = []
    for ch in key:
        if ch.isupper():
            out.append("_")
            out.append(ch.lower())
        else:
            out.append(ch)
    return "".join(out).lstrip("_")


def _int(raw: str, name: str) -> int:
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from e
