"""Configuration loading utilities for the CDATA issuer."""
from __future__ import annotations

import os
from pathlib import Path
from typing import Mapping, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from .exceptions import ConfigError
from .token.header import CERTIFICATE_ID, FORMAT_VERSION

_ENV_PREFIX = "CDATA_"
_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class IssuerConfig(BaseModel):
    partner_id: str = Field(description="Partner identifier issued by the wallet platform")
    certificate_id: str = Field(default=CERTIFICATE_ID, description="Identifier of the registered partner certificate")
    version: str = Field(default=FORMAT_VERSION, description="CDATA format version")

    model_config = {"frozen": True}

    @field_validator("partner_id", "certificate_id", "version")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value


class LoggingConfig(BaseModel):
    level: str = Field(default="INFO", description="Logging verbosity level")
    json_output: bool = Field(default=True, alias="json", description="Emit JSON lines")

    model_config = {"populate_by_name": True}

    @field_validator("level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        if value.strip().upper() not in _LEVELS:
            raise ValueError(f"unknown level {value!r}, expected one of {', '.join(_LEVELS)}")
        return value.strip()

    def normalized_level(self) -> str:
        return self.level.upper()


class AppConfig(BaseModel):
    issuer: IssuerConfig
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def load_config(path: Path | str) -> AppConfig:
    candidate = Path(path).expanduser()
    if not candidate.is_file():
        raise ConfigError(f"Configuration file not found: {candidate}")
    with candidate.open("r", encoding="utf-8") as handle:
        try:
            data = yaml.safe_load(handle) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML in {candidate}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Configuration in {candidate} must be a mapping")
    try:
        return AppConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration in {candidate}: {exc}") from exc


def config_from_env(environ: Optional[Mapping[str, str]] = None) -> AppConfig:
    env = os.environ if environ is None else environ
    issuer: dict[str, str] = {}
    for field, name in (
        ("partner_id", "PARTNER_ID"),
        ("certificate_id", "CERTIFICATE_ID"),
        ("version", "VERSION"),
    ):
        value = env.get(_ENV_PREFIX + name)
        if value is not None:
            issuer[field] = value
    data: dict[str, object] = {"issuer": issuer}
    logging_section: dict[str, str] = {}
    level = env.get(_ENV_PREFIX + "LOG_LEVEL")
    if level:
        logging_section["level"] = level
    json_flag = env.get(_ENV_PREFIX + "LOG_JSON")
    if json_flag:
        logging_section["json"] = json_flag
    if logging_section:
        data["logging"] = logging_section
    try:
        return AppConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration from environment: {exc}") from exc


__all__ = ["AppConfig", "IssuerConfig", "LoggingConfig", "config_from_env", "load_config"]
