"""Pagination settings and YAML config loading."""

from __future__ import annotations

import base64
import binascii
from datetime import timedelta
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from .exceptions import ConfigError, ConfigErrorCodes


class LogSection(BaseModel):
    """Library log output: level name and json or text rendering."""

    level: str = "INFO"
    format: Literal["json", "text"] = "json"


class PaginationConfig(BaseModel):
    """Settings for PageAssembler.from_config.

    Durations (lister_timeout, token_ttl, sweep_interval) are in seconds.
    """

    default_page_size: int = Field(default=50, ge=1)
    max_page_size: int = Field(default=1000, ge=1)
    lister_timeout: float = Field(default=5.0, gt=0)
    token_ttl: float = Field(default=3 * 24 * 60 * 60, gt=0)
    sweep_interval: float = Field(default=60 * 60, gt=0)
    token_keys: list[str] = Field(min_length=1)
    store: Literal["none", "memory"] = "none"
    log: LogSection = Field(default_factory=LogSection)

    @field_validator("token_keys")
    @classmethod
    def _check_token_keys(cls, keys: list[str]) -> list[str]:
        for key in keys:
            try:
                raw = base64.urlsafe_b64decode(key)
            except (binascii.Error, ValueError) as e:
                raise ValueError("token key is not valid URL-safe base64") from e
            if len(raw) != 32:
                raise ValueError("token key must decode to 32 bytes")
        return keys

    @model_validator(mode="after")
    def _check_page_sizes(self) -> PaginationConfig:
        if self.default_page_size > self.max_page_size:
            raise ValueError("default_page_size must not exceed max_page_size")
        return self

    @property
    def token_ttl_delta(self) -> timedelta:
        return timedelta(seconds=self.token_ttl)


def _overlay(base: dict[str, Any], env: dict[str, Any]) -> dict[str, Any]:
    # nested sections merge key by key; scalars and lists from env win
    merged = {**base}
    for key, value in env.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            value = _overlay(current, value)
        merged[key] = value
    return merged


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(
            code=ConfigErrorCodes.READ_FILE,
            message=f"Failed to read config file: {path}",
            cause=e,
        ) from e
    try:
        data = yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise ConfigError(
            code=ConfigErrorCodes.PARSE_YAML,
            message=f"Failed to parse YAML: {path}",
            cause=e,
        ) from e
    if not isinstance(data, dict):
        raise ConfigError(
            code=ConfigErrorCodes.PARSE_YAML,
            message=f"Config root must be a mapping: {path}",
        )
    # settings may sit under a pagination: key or at the top level
    section = data.get("pagination", data)
    return section if isinstance(section, dict) else {}


def load(base_path: Path, env_path: Path | None = None) -> PaginationConfig:
    """Load PaginationConfig from *base_path*, overlaid with *env_path* if it exists."""
    data = _read_yaml(base_path)
    if env_path is not None and env_path.exists():
        data = _overlay(data, _read_yaml(env_path))
    try:
        return PaginationConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(
            code=ConfigErrorCodes.VALIDATION,
            message=f"Config validation failed: {e}",
            cause=e,
        ) from e
