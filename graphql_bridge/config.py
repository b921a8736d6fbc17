"""Environment configuration for the GraphQL bridge."""

import json
import logging
import os
from typing import Dict, Mapping, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

from .exceptions import ConfigurationError


class Settings(BaseModel):
    """Runtime settings read from the environment."""

    endpoint: str = Field(description="GraphQL endpoint URL")
    headers: Dict[str, str] = Field(default_factory=dict, description="Default HTTP headers")
    schema_cache_ttl: int = Field(default=0, ge=0, description="Introspection cache TTL in seconds, 0 disables caching")
    timeout: float = Field(default=30.0, gt=0, description="HTTP request timeout in seconds")
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def known_log_level(cls, value: str) -> str:
        if not isinstance(logging.getLevelName(value), int):
            raise ValueError(f"unknown log level {value}")
        return value


def parse_headers_json(raw: Optional[str], source: str = "GRAPHQL_HEADERS") -> Dict[str, str]:
    """
    Parse a JSON object of header names to values

    Raises:
        ConfigurationError: If ``raw`` is not a JSON object of strings
    """
    if not raw:
        return {}
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"{source} must be valid JSON: {e}") from e
    if not isinstance(parsed, dict):
        raise ConfigurationError(f"{source} must be a JSON object")
    for key, value in parsed.items():
        if not isinstance(value, str):
            raise ConfigurationError(f"{source} header '{key}' must be a string, got {json.dumps(value)}")
    return parsed


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """
    Build settings from environment variables.

    Loads a ``.env`` file first when reading the process environment.

    Args:
        environ: Mapping to read instead of ``os.environ``

    Returns:
        Settings: Validated settings

    Raises:
        ConfigurationError: If ``ADDRESS`` is missing or a value is invalid
    """
    if environ is None:
        load_dotenv()
        environ = os.environ

    endpoint = environ.get("ADDRESS", "").strip()
    if not endpoint:
        raise ConfigurationError("Environment variable ADDRESS is required")

    try:
        return Settings(
            endpoint=endpoint,
            headers=parse_headers_json(environ.get("GRAPHQL_HEADERS")),
            schema_cache_ttl=environ.get("GRAPHQL_SCHEMA_CACHE_TTL", 0),
            timeout=environ.get("GRAPHQL_TIMEOUT", 30.0),
            log_level=environ.get("LOG_LEVEL", "INFO").upper(),
        )
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e
