# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Data models for benchmark orchestration."""

import sys
from datetime import datetime
from pathlib import Path
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from density.common.config.base_config import BaseConfig
from density.common.config.config_defaults import BenchDefaults, KsmDefaults
from density.common.config.scale import parse_instances
from density.common.enums import Profile, StepStatus
from density.common.environment import Environment


def default_exec_command() -> list[str]:
    """Command prefix that re-invokes this tool with the current interpreter."""
    return [sys.executable, "-m", "density"]


class RunConfig(BaseConfig):
    """Configuration for an entire benchmark run.

    Attributes:
        exec_command: Command prefix used to re-invoke DENSITY as a workload process
        output_dir: Directory for the JSON record and Markdown report
        ksm_path: KSM sysfs directory to read statistics from
        profile: Benchmark profile
        instances: Instance counts to measure, in order
        mem_mib: Memory per workload instance in MiB
        warmup_seconds: Time given to KSM to scan and merge before measuring
        redirty_interval: Re-dirty interval override for the divergent profile (seconds)
        publish_path: Optional secondary location for the JSON record
    """

    exec_command: list[str] = Field(
        default_factory=default_exec_command, min_length=1
    )

    output_dir: Path = BenchDefaults.OUTPUT_DIR
    ksm_path: Path = KsmDefaults.PATH
    profile: Profile = BenchDefaults.PROFILE

    instances: Annotated[
        list[int],
        Field(
            description="Instance counts to benchmark, in order. "
            "Accepts a list, a single count, or a scale like 10..80..10.",
        ),
    ]

    mem_mib: Annotated[int, Field(gt=0)] = BenchDefaults.MEM_MIB

    warmup_seconds: Annotated[
        float | None,
        Field(
            description="Warmup in seconds. None, zero or a negative value falls back to "
            "DENSITY_BENCH_DEFAULT_WARMUP.",
            validate_default=True,
        ),
    ] = None

    redirty_interval: Annotated[float | None, Field(gt=0)] = None

    publish_path: Path | None = None

    @field_validator("profile", mode="before")
    @classmethod
    def parse_profile(cls, v: Any) -> Profile:
        if isinstance(v, Profile):
            return v
        try:
            return Profile(v)
        except ValueError as err:
            raise ValueError(
                f"Invalid profile: '{v}'. "
                f"Use P1 (identical), P2 (similar) or P3 (divergent)."
            ) from err

    @field_validator("instances", mode="before")
    @classmethod
    def parse_instance_counts(cls, v: Any) -> list[int]:
        if v is None:
            raise ValueError(
                "No instance counts given. Use --scale (e.g. 10..80..10) or --instances."
            )
        return parse_instances(v)

    @field_validator("warmup_seconds", mode="after")
    @classmethod
    def default_warmup(cls, v: float | None) -> float:
        if v is None or v <= 0:
            return Environment.BENCH.DEFAULT_WARMUP
        return v

    @model_validator(mode="after")
    def validate_instances(self) -> "RunConfig":
        counts = self.instances
        if not counts:
            raise ValueError("Instance counts must be a non-empty list.")

        invalid = [n for n in counts if n <= 0]
        if invalid:
            raise ValueError(
                f"Invalid instance counts: {invalid}. "
                f"All instance counts must be positive integers (>= 1)."
            )

        duplicates = sorted({n for n in counts if counts.count(n) > 1})
        if duplicates:
            raise ValueError(
                f"Duplicate instance counts: {duplicates}. "
                f"Each instance count may appear only once."
            )
        return self


class StepResult(BaseModel):
    """One measurement for one instance count.

    Attributes:
        n: Requested number of workload instances
        status: RECORDED, or ABORTED when the batch failed to launch
        alive: Workloads confirmed alive when the post snapshot was taken
        duration_seconds: Elapsed time from spawn to the post snapshot
        pre_mem_kb / post_mem_kb: /proc/meminfo counters (kB) before spawn and after warmup
        pre_vmstat / post_vmstat: /proc/vmstat swap counters before and after
        pre_ksm / post_ksm: KSM statistics before and after
        estimated_saved_mib: Memory saved by merging, derived from post_ksm
        ksmd_ticks_delta: CPU ticks spent by ksmd during the step, when measurable
        notes: Free-text notes on partial failures
    """

    model_config = ConfigDict(frozen=True)

    n: int
    status: StepStatus = StepStatus.RECORDED
    alive: int = 0
    duration_seconds: float = 0.0
    profile: Profile
    mem_mib: int
    warmup_seconds: float

    pre_mem_kb: dict[str, int] | None = None
    post_mem_kb: dict[str, int] | None = None
    pre_vmstat: dict[str, int] | None = None
    post_vmstat: dict[str, int] | None = None
    pre_ksm: dict[str, int] | None = None
    post_ksm: dict[str, int] | None = None

    estimated_saved_mib: Annotated[float, Field(ge=0)] = 0.0
    ksmd_ticks_delta: int | None = None

    notes: str | None = None


class RunResult(BaseModel):
    """Result of a whole benchmark run.

    Attributes:
        started_at: When the run started
        profile: Benchmark profile
        steps: One StepResult per requested instance count, in request order
        artifacts: Paths of the artifacts written for this run (not serialized)
    """

    started_at: datetime = Field(default_factory=datetime.now)
    profile: Profile
    steps: list[StepResult] = Field(default_factory=list)
    artifacts: list[Path] = Field(default_factory=list, exclude=True)
