from __future__ import annotations

from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, field_validator


class ServerSettings(BaseModel):
    url: str
    username: str
    password: str
    legacy_auth: bool = False
    client_name: str = "media-provider"
    api_version: str = "1.16.1"
    timeout_seconds: float = Field(default=30.0, gt=0)

    @field_validator("url", mode="before")
    @classmethod
    def _strip_url(cls, value: str) -> str:
        return str(value).strip().rstrip("/")


class ProviderSettings(BaseModel):
    cache_ttl_seconds: float = Field(default=60.0, gt=0)
    rating_batch_size: int = Field(default=5, ge=1)
    page_size: int = Field(default=50, ge=1, le=500)


class Settings(BaseModel):
    server: ServerSettings
    provider: ProviderSettings = ProviderSettings()

    @classmethod
    def load(cls, path: Path) -> "Settings":
        with path.open("r", encoding="utf-8") as fh:
            raw = yaml.safe_load(fh)
        return cls.model_validate(raw)


def find_config(explicit_path: Optional[Path]) -> Path:
    if explicit_path:
        return explicit_path
    cwd = Path.cwd()
    for candidate in (cwd / "config.yaml", cwd / "config.yml"):
        if candidate.exists():
            return candidate
    raise FileNotFoundError("Could not find config.yaml - pass --config explicitly.")
