from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .ids import ID_GENERATORS


class CachingConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    enabled: bool = True


class StoreConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    directory: str = "data/entries"
    id_format: str = "hex"
    caching: CachingConfig = Field(default_factory=CachingConfig)

    @field_validator("directory")
    @classmethod
    def validate_directory(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError("directory must not be empty")
        return normalized

    @field_validator("id_format")
    @classmethod
    def validate_id_format(cls, value: str) -> str:
        normalized = value.strip().lower()
        if normalized not in ID_GENERATORS:
            known = ", ".join(sorted(ID_GENERATORS))
            raise ValueError(f"id_format must be one of: {known}")
        return normalized


def load_config(path: str | Path) -> StoreConfig:
    raw = Path(path).read_text(encoding="utf-8")
    payload = _parse_yaml_or_json(raw)
    try:
        return StoreConfig.model_validate(payload)
    except ValidationError as exc:
        raise ValueError(f"Invalid configuration: {exc}") from exc


def _parse_yaml_or_json(raw: str) -> dict[str, Any]:
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError:
        parsed = yaml.safe_load(raw)
    if not isinstance(parsed, dict):
        raise ValueError("Configuration root must be an object.")
    return parsed
