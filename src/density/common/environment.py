# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Environment-driven settings.

Every value can be overridden with a ``DENSITY_``-prefixed environment variable:
    DENSITY_LIFECYCLE_POLL_INTERVAL=0.1      # Seconds between liveness polls during teardown
    DENSITY_LIFECYCLE_TEARDOWN_TIMEOUT=5.0   # Seconds before surviving workloads are killed
    DENSITY_BENCH_DEFAULT_WARMUP=20.0        # Warmup used when none, zero or a negative one is given
    DENSITY_LOG_LEVEL=INFO
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class _LifecycleSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="DENSITY_LIFECYCLE_")

    POLL_INTERVAL: float = Field(
        default=0.1,
        gt=0,
        lt=1,
        description="Interval in seconds between liveness polls while tearing down workloads.",
    )
    TEARDOWN_TIMEOUT: float = Field(
        default=5.0,
        gt=0,
        description="Total seconds to wait for workloads to exit after SIGTERM before SIGKILL.",
    )


class _BenchSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="DENSITY_BENCH_")

    DEFAULT_WARMUP: float = Field(
        default=20.0,
        ge=0,
        description="Default warmup in seconds, sized for at least one KSM scan pass.",
    )


class _LoggingSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="DENSITY_")

    LOG_LEVEL: str = "INFO"


class _Environment:
    """Namespace for all environment-driven settings."""

    def __init__(self) -> None:
        self.LIFECYCLE = _LifecycleSettings()
        self.BENCH = _BenchSettings()
        self.LOGGING = _LoggingSettings()


Environment = _Environment()
