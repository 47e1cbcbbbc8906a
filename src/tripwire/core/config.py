"""Nested pydantic-settings configuration for tripwire.

Each group reads its own ``TRIPWIRE_<GROUP>_*`` env vars::

    export TRIPWIRE_BREAKER_DEFAULT_MAX_FAILURES=10
    export TRIPWIRE_STORAGE_BACKEND=redis
    export TRIPWIRE_STORAGE_REDIS_URL=redis://cache:6379/2
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings


class ServiceOverride(BaseModel):
    """Per-service threshold and retry timeout. Zero means "use the default"."""

    max_failures: int = Field(default=0, ge=0)
    retry_timeout: int = Field(default=0, ge=0)


class BreakerConfig(BaseSettings):
    """Breaker defaults and trip handler messages.

    Env vars use ``TRIPWIRE_BREAKER_`` prefix. ``services`` is read as JSON::

        export TRIPWIRE_BREAKER_SERVICES='{"billing-db": {"max_failures": 5, "retry_timeout": 5}}'
    """

    model_config = {"env_prefix": "TRIPWIRE_BREAKER_"}

    default_max_failures: int = Field(default=20, ge=1)
    default_retry_timeout: int = Field(default=60, ge=0)
    unavailable_message: str = "Service No Longer Available"
    retry_message: str = "Retrying Service"
    services: dict[str, ServiceOverride] = Field(default_factory=dict)


class StorageConfig(BaseSettings):
    """Status storage configuration.

    Env vars use ``TRIPWIRE_STORAGE_`` prefix.
    """

    model_config = {"env_prefix": "TRIPWIRE_STORAGE_"}

    backend: Literal["memory", "local", "redis"] = "memory"
    ttl: int = Field(default=3600, ge=0)
    cache_prefix: str = "CircuitBreaker"
    aggregate: bool = False
    aggregate_max_age: float = Field(default=1.0, ge=0)
    redis_url: str = "redis://localhost:6379/0"
    local_max_entries: int = Field(default=10_000, ge=1)


class ObservabilityConfig(BaseSettings):
    """Logging configuration.

    Env vars use ``TRIPWIRE_OBSERVABILITY_`` prefix.
    """

    model_config = {"env_prefix": "TRIPWIRE_OBSERVABILITY_"}

    log_level: str = "INFO"
    log_format: Literal["auto", "json", "console"] = "auto"


class AppSettings(BaseSettings):
    """Top-level settings aggregating all sub-configs."""

    breaker: BreakerConfig = Field(default_factory=BreakerConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)
