"""Configuration loading, validation, and access."""

from __future__ import annotations

import os
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from stock_forecast.core.exceptions import ConfigError
from stock_forecast.core.models import StorageBackend

# Unprefixed variables used by earlier deployments, mapped onto config paths.
# Prefixed STOCK_FORECAST_* variables take precedence over these.
_LEGACY_ENV_VARS: dict[str, tuple[str, ...]] = {
    "AZURE_STORAGE_ACCOUNT": ("storage", "account_name"),
    "AZURE_STORAGE_KEY": ("storage", "account_key"),
    "AZURE_STORAGE_CONNECTION_STRING": ("storage", "connection_string"),
    "AZURE_CONTAINER_NAME": ("storage", "container"),
}

_DEFAULT_BLOB_SUFFIX = "core.windows.net"


class BlobCredentials(BaseModel):
    """Resolved Azure Shared Key credentials."""

    model_config = ConfigDict(frozen=True)

    account_name: str
    account_key: str
    endpoint: str


class StorageConfig(BaseModel):
    """Blob storage configuration.

    Azure credentials are optional at load time; they are resolved when the
    first blob is fetched so that a misconfigured deployment still starts
    and reports the problem per request.
    """

    model_config = ConfigDict(frozen=True)

    backend: StorageBackend = StorageBackend.AZURE
    account_name: str | None = None
    account_key: str | None = None
    connection_string: str | None = None
    container: str = "symbols"
    endpoint: str | None = None
    local_root: str = "./data/blobs"
    request_timeout: int = 30

    @field_validator("container")
    @classmethod
    def container_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("container must not be empty")
        return v

    @field_validator("request_timeout")
    @classmethod
    def timeout_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("request_timeout must be >= 1")
        return v

    def resolve_credentials(self) -> BlobCredentials:
        """Merge explicit fields with the connection string.

        Raises:
            ConfigError: If no account name or key can be determined.
        """
        parts = parse_connection_string(self.connection_string or "")
        account = self.account_name or parts.get("AccountName")
        key = self.account_key or parts.get("AccountKey")

        if not account:
            raise ConfigError(
                "Azure storage account not configured",
                context={"field": "storage.account_name", "value": None},
            )
        if not key:
            raise ConfigError(
                "Azure storage credentials not configured",
                context={"field": "storage.account_key", "value": "<redacted>"},
            )

        endpoint = self.endpoint or parts.get("BlobEndpoint")
        if not endpoint:
            protocol = parts.get("DefaultEndpointsProtocol", "https")
            suffix = parts.get("EndpointSuffix", _DEFAULT_BLOB_SUFFIX)
            endpoint = f"{protocol}://{account}.blob.{suffix}"

        return BlobCredentials(
            account_name=account,
            account_key=key,
            endpoint=endpoint.rstrip("/"),
        )


class MetricsConfig(BaseModel):
    """Metric derivation settings and display placeholders."""

    model_config = ConfigDict(frozen=True)

    previous_offset: int = 1
    volume: str = "1.2M"
    market_cap: str = "850.2B"
    pe_ratio: float = 28.5

    @field_validator("previous_offset")
    @classmethod
    def offset_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("previous_offset must be >= 1")
        return v


class APIConfig(BaseModel):
    """FastAPI server configuration."""

    model_config = ConfigDict(frozen=True)

    host: str = "0.0.0.0"
    port: int = 8000
    default_symbol: str = "BTCUSD"
    cors_origins: list[str] = ["*"]


class ForecastConfig(BaseModel):
    """Root configuration for the entire stock-forecast system."""

    model_config = ConfigDict(frozen=True)

    storage: StorageConfig = StorageConfig()
    metrics: MetricsConfig = MetricsConfig()
    api: APIConfig = APIConfig()

    @model_validator(mode="after")
    def local_root_for_local(self) -> ForecastConfig:
        if self.storage.backend == StorageBackend.LOCAL and not self.storage.local_root:
            raise ValueError("local_root is required when backend is 'local'")
        return self


def parse_connection_string(value: str) -> dict[str, str]:
    """Split ``Key=Value;Key=Value`` into a dict.

    Only the first ``=`` separates key from value; account keys are base64
    and end in ``=`` padding.
    """
    result: dict[str, str] = {}
    for segment in value.split(";"):
        segment = segment.strip()
        if not segment or "=" not in segment:
            continue
        key, _, val = segment.partition("=")
        result[key.strip()] = val.strip()
    return result


def load_config(
    config_path: str | None = None,
    env_prefix: str = "STOCK_FORECAST_",
) -> ForecastConfig:
    """Load configuration from environment + YAML file + defaults.

    Resolution order (highest priority first):
    1. Environment variables (STOCK_FORECAST_STORAGE__CONTAINER, etc.)
    2. Legacy AZURE_* environment variables
    3. YAML file at config_path
    4. Built-in defaults

    Nested keys use double-underscore in env vars:
        STOCK_FORECAST_METRICS__PREVIOUS_OFFSET=24  ->  metrics.previous_offset = 24
    """
    try:
        yaml_path = _resolve_config_path(config_path)
        base: dict = {}
        if yaml_path is not None:
            base = _load_yaml(yaml_path)

        merged = _merge_legacy_env_vars(base)
        merged = _merge_env_vars(merged, env_prefix)
        return ForecastConfig.model_validate(merged)
    except Exception as e:
        if isinstance(e, ConfigError):
            raise
        raise ConfigError(str(e), context={"source": "load_config"}) from e


def _resolve_config_path(explicit: str | None) -> Path | None:
    """Determine config file path."""
    if explicit is not None:
        p = Path(explicit)
        if not p.exists():
            raise ConfigError(
                f"Config file not found: {explicit}",
                context={"field": "config_path", "value": explicit},
            )
        return p

    env_path = os.environ.get("STOCK_FORECAST_CONFIG")
    if env_path:
        p = Path(env_path)
        if not p.exists():
            raise ConfigError(
                f"Config file from STOCK_FORECAST_CONFIG not found: {env_path}",
                context={"field": "STOCK_FORECAST_CONFIG", "value": env_path},
            )
        return p

    default = Path("stock-forecast.yml")
    if default.exists():
        return default

    return None


def _load_yaml(path: Path) -> dict:
    """Load and parse YAML file."""
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError(
                f"YAML config must be a mapping, got {type(data).__name__}",
                context={"field": "config_file", "value": str(path)},
            )
        return data
    except yaml.YAMLError as e:
        raise ConfigError(
            f"Failed to parse YAML config: {e}",
            context={"field": "config_file", "value": str(path)},
        ) from e


def _set_nested(target: dict, parts: list[str] | tuple[str, ...], value: object) -> None:
    for part in parts[:-1]:
        if not isinstance(target.get(part), dict):
            target[part] = {}
        target = target[part]
    target[parts[-1]] = value


def _merge_legacy_env_vars(base: dict) -> dict:
    """Overlay the unprefixed AZURE_* variables onto base config dict.

    Values are kept as strings: account keys and names must not be cast.
    """
    result = {k: (dict(v) if isinstance(v, dict) else v) for k, v in base.items()}
    for var, path in _LEGACY_ENV_VARS.items():
        value = os.environ.get(var)
        if value:
            _set_nested(result, path, value)
    return result


def _merge_env_vars(base: dict, prefix: str) -> dict:
    """Overlay environment variables onto base config dict.

    Double-underscore separates nesting levels.
    Values are auto-cast: "true"/"false" -> bool, numeric strings -> int.
    """
    result = dict(base)

    for key, value in os.environ.items():
        if not key.startswith(prefix):
            continue

        # Strip prefix, split by double-underscore for nesting
        remainder = key[len(prefix) :]
        parts = [p.lower() for p in remainder.split("__")]

        # Skip the CONFIG env var itself
        if parts == ["config"]:
            continue

        _set_nested(result, parts, _auto_cast(value))

    return result


def _auto_cast(value: str) -> str | int | float | bool:
    """Auto-cast string values from environment variables."""
    if value.lower() == "true":
        return True
    if value.lower() == "false":
        return False
    try:
        return int(value)
    except ValueError:
        pass
    try:
        return float(value)
    except ValueError:
        pass
    return value
