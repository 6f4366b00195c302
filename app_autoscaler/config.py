import os
import math
import logging
from typing import Mapping, NamedTuple, Optional

from dotenv import load_dotenv

from app_autoscaler.errors import ConfigurationError

DEFAULT_BIND_PORT = 8080
DEFAULT_REQUEST_TIMEOUT = 30.0
DEFAULT_API_RETRIES = 1
DEFAULT_DO_API_URL = 'https://api.digitalocean.com'


class Config(NamedTuple):
    """Configuration for the autoscaler."""
    # Prometheus configuration
    prometheus_host: str
    prometheus_metric: str

    # Scaling parameters
    threshold_up: float
    threshold_down: float
    max_size: int

    # DigitalOcean configuration
    do_api_token: str
    do_app_id: str
    do_api_url: str

    # Outbound call behaviour
    request_timeout: float
    api_retries: int

    # Status endpoint
    bind_port: int


def _required(env: Mapping[str, str], key: str) -> str:
    value = env.get(key)
    if value is None or not value.strip():
        raise ConfigurationError(f"{key} is required")
    return value.strip()


def _parse_float(key: str, raw: str) -> float:
    try:
        value = float(raw)
    except ValueError:
        raise ConfigurationError(f"{key} must be a number, got {raw!r}") from None
    if not math.isfinite(value):
        raise ConfigurationError(f"{key} must be a finite number, got {raw!r}")
    return value


def _parse_int(key: str, raw: str, minimum: int, maximum: Optional[int] = None) -> int:
    try:
        value = int(raw)
    except ValueError:
        raise ConfigurationError(f"{key} must be an integer, got {raw!r}") from None
    if value < minimum or (maximum is not None and value > maximum):
        bounds = f">= {minimum}" if maximum is None else f"between {minimum} and {maximum}"
        raise ConfigurationError(f"{key} must be {bounds}, got {value}")
    return value


def _optional(env: Mapping[str, str], key: str, default: str) -> str:
    value = env.get(key)
    if value is None or not value.strip():
        return default
    return value.strip()


def load_config(env: Optional[Mapping[str, str]] = None) -> Config:
    """
    Load configuration from environment variables.

    When no mapping is given, a local .env file is loaded first (without
    overriding variables already set) and the process environment is read.

    Args:
        env: Optional mapping to read settings from instead of os.environ

    Returns:
        Config: Configuration object with all autoscaler settings

    Raises:
        ConfigurationError: If a required setting is missing or malformed
    """
    if env is None:
        load_dotenv()
        env = os.environ

    # Prometheus configuration
    prometheus_host = _required(env, 'PROMETHEUS_HOST')
    prometheus_metric = _required(env, 'PROMETHEUS_METRIC')

    # Scaling parameters
    threshold_up = _parse_float('THRESHOLD_UP', _required(env, 'THRESHOLD_UP'))
    threshold_down = _parse_float('THRESHOLD_DOWN', _required(env, 'THRESHOLD_DOWN'))
    max_size = _parse_int('MAX_SIZE', _required(env, 'MAX_SIZE'), minimum=1)

    if threshold_down >= threshold_up:
        logging.warning(f"THRESHOLD_DOWN ({threshold_down}) is not below THRESHOLD_UP ({threshold_up}); "
                        f"scale-up checks take precedence")

    # DigitalOcean configuration
    do_api_token = _required(env, 'DO_API_TOKEN')
    do_app_id = _required(env, 'DO_APP_ID')
    do_api_url = _optional(env, 'DO_API_URL', DEFAULT_DO_API_URL)

    # Outbound call behaviour
    request_timeout = _parse_float('REQUEST_TIMEOUT',
                                   _optional(env, 'REQUEST_TIMEOUT', str(DEFAULT_REQUEST_TIMEOUT)))
    if request_timeout <= 0:
        raise ConfigurationError(f"REQUEST_TIMEOUT must be positive, got {request_timeout}")
    api_retries = _parse_int('API_RETRIES', _optional(env, 'API_RETRIES', str(DEFAULT_API_RETRIES)), minimum=1)

    bind_port = _parse_int('BIND_PORT', _optional(env, 'BIND_PORT', str(DEFAULT_BIND_PORT)),
                           minimum=1, maximum=65535)

    return Config(
        prometheus_host=prometheus_host,
        prometheus_metric=prometheus_metric,
        threshold_up=threshold_up,
        threshold_down=threshold_down,
        max_size=max_size,
        do_api_token=do_api_token,
        do_app_id=do_app_id,
        do_api_url=do_api_url,
        request_timeout=request_timeout,
        api_retries=api_retries,
        bind_port=bind_port
    )
