"""Load test configuration.

A configuration file is a YAML (or JSON) mapping::

    url: http://localhost:8080/echo
    method: post
    request_count: 100
    headers:
      Content-Type: application/json
    body: '{"name": "${name}", "id": "${id}"}'
    data_file: users.csv
    concurrency: 50      # optional cap on in-flight requests
    timeout: 10          # optional per-request timeout in seconds
"""

import logging
from enum import Enum
from typing import Dict, Optional
from urllib.parse import urlparse

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from loadfire.errors import ConfigError

logger = logging.getLogger(__name__)


class HttpMethod(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"


class LoadTestConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    url: str
    method: Optional[HttpMethod] = None
    request_count: int = Field(ge=0)
    headers: Optional[Dict[str, str]] = None
    body: Optional[str] = None
    data_file: Optional[str] = None
    concurrency: Optional[int] = Field(default=None, gt=0)
    timeout: Optional[float] = Field(default=None, gt=0)

    @field_validator("url")
    @classmethod
    def _check_url(cls, value: str) -> str:
        value = value.strip()
        parsed = urlparse(value)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError("url must be an absolute http:// or https:// URL")
        return value

    @field_validator("method", mode="before")
    @classmethod
    def _normalize_method(cls, value):
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @property
    def effective_method(self) -> HttpMethod:
        return self.method or HttpMethod.GET


def load_config(file_path: str) -> LoadTestConfig:
    """Read and validate a configuration file, raising ConfigError on any problem."""
    try:
        with open(file_path, mode="r", encoding="utf-8") as config_file:
            raw = yaml.safe_load(config_file)
    except OSError as e:
        raise ConfigError(f"Cannot read config file {file_path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Malformed config file {file_path}: {e}") from e

    if not isinstance(raw, dict):
        raise ConfigError(f"Config file {file_path} must contain a mapping at the top level")

    try:
        config = LoadTestConfig.model_validate(raw)
    except ValidationError as e:
        raise ConfigError(f"Invalid config file {file_path}: {e}") from e

    if config.request_count <= 0:
        raise ConfigError("request_count must be a positive integer")

    logger.debug("Loaded config from %s: %s %s x%d", file_path,
                 config.effective_method.value, config.url, config.request_count)
    return config
