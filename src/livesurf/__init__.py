from livesurf.client import LiveSurfClient, resolve_url
from livesurf.config_models import ClientConfig, config_from_env, load_and_validate_config
from livesurf.core.errors import (
    ApiError,
    ConfigError,
    ExhaustedRetries,
    LiveSurfError,
    NonRetryableClientError,
    RequestCancelled,
    TransportFault,
)

__all__ = [
    "ApiError",
    "ClientConfig",
    "ConfigError",
    "ExhaustedRetries",
    "LiveSurfClient",
    "LiveSurfError",
    "NonRetryableClientError",
    "RequestCancelled",
    "TransportFault",
    "config_from_env",
    "load_and_validate_config",
    "resolve_url",
]
