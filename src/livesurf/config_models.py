"""
Pydantic models for client configuration.
Validates YAML files and environment variables with clear error messages.
"""

from __future__ import annotations
import os
from typing import Any, Dict, Mapping, Optional
from pydantic import BaseModel, Field, ValidationError, field_validator

from livesurf.core.errors import ConfigError

DEFAULT_BASE_URL = "https://api.livesurf.ru/"
DEFAULT_USER_AGENT = "livesurf-python/0.1"
ENV_PREFIX = "LIVESURF_"


class ClientConfig(BaseModel):
    """Configuration for a LiveSurf API client."""
    api_key: str = Field(..., description="Static API key sent in the Authorization header")
    base_url: str = Field(DEFAULT_BASE_URL, description="API root; normalized to one trailing slash")
    timeout_seconds: float = Field(15, gt=0, le=600, description="Per-request transport timeout")
    rate_limit_per_sec: int = Field(10, ge=1, le=1000, description="Max admissions per trailing second")
    max_retries: int = Field(3, ge=0, le=20, description="Retries after the first attempt")
    initial_backoff_ms: float = Field(500, ge=0, le=60000, description="Backoff before the first retry")
    append_slash: bool = Field(False, description="Keep one trailing slash on paths passed to request()")
    user_agent: str = Field(DEFAULT_USER_AGENT, description="User-Agent header value")

    @field_validator('api_key')
    @classmethod
    def validate_api_key(cls, v):
        v = v.strip()
        if not v:
            raise ValueError('api_key cannot be empty')
        return v

    @field_validator('base_url')
    @classmethod
    def validate_base_url(cls, v):
        v = v.strip()
        if not v.startswith(('http://', 'https://')):
            raise ValueError('base_url must be a valid HTTP/HTTPS URL')
        return v.rstrip('/') + '/'


def _format_validation_error(source: str, e: ValidationError) -> str:
    error_messages = []
    for error in e.errors():
        field_path = '.'.join(str(loc) for loc in error['loc'])
        error_messages.append(f"  {field_path}: {error['msg']}")
    return f"Configuration validation failed for {source}:\n" + '\n'.join(error_messages)


def build_config(raw: Mapping[str, Any], source: str = "<dict>") -> ClientConfig:
    """Validate a raw mapping, reporting every bad field at once."""
    try:
        return ClientConfig(**raw)
    except ValidationError as e:
        raise ConfigError(_format_validation_error(source, e)) from e


def load_and_validate_config(config_path: str, environ: Optional[Mapping[str, str]] = None) -> ClientConfig:
    """
    Load and validate a client configuration from a YAML file.

    The file may hold the settings at top level or under a `client:` key.
    A missing `api_key` is taken from LIVESURF_API_KEY.

    Raises:
        FileNotFoundError: If config file doesn't exist
        ConfigError: If YAML is malformed or configuration is invalid
    """
    import yaml

    environ = os.environ if environ is None else environ
    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            raw_config = yaml.safe_load(f) or {}
    except FileNotFoundError:
        raise FileNotFoundError(f"Configuration file not found: {config_path}")
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {config_path}: {e}")

    if not isinstance(raw_config, dict):
        raise ConfigError(f"Configuration in {config_path} must be a mapping")

    data: Dict[str, Any] = dict(raw_config.get('client', raw_config))
    if not data.get('api_key') and environ.get(ENV_PREFIX + 'API_KEY'):
        data['api_key'] = environ[ENV_PREFIX + 'API_KEY']

    return build_config(data, config_path)


def config_from_env(environ: Optional[Mapping[str, str]] = None) -> ClientConfig:
    """Build a config from LIVESURF_* variables (e.g. LIVESURF_RATE_LIMIT_PER_SEC)."""
    environ = os.environ if environ is None else environ
    data: Dict[str, Any] = {}
    for name in ClientConfig.model_fields:
        value = environ.get(ENV_PREFIX + name.upper())
        if value is not None and value != "":
            data[name] = value
    if 'api_key' not in data:
        raise ConfigError(f"Missing API key. Set {ENV_PREFIX}API_KEY")
    return build_config(data, "environment")
