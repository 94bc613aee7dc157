# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Enumerations shared across DENSITY."""

from enum import Enum


class CaseInsensitiveStrEnum(str, Enum):
    """String enum that matches values and member names regardless of case."""

    def __str__(self) -> str:
        return self.value

    @classmethod
    def _missing_(cls, value):
        if not isinstance(value, str):
            return None
        needle = value.strip().lower()
        for member in cls:
            if needle in (member.value.lower(), member.name.lower()):
                return member
        return None


class Profile(CaseInsensitiveStrEnum):
    """Benchmark profile controlling how much the workload instances diverge."""

    IDENTICAL = "P1"
    """Every page is identical across instances (maximum merge potential)."""

    SIMILAR = "P2"
    """A small fraction of pages is unique per instance."""

    DIVERGENT = "P3"
    """Half of the pages are unique and periodically re-written (worst case)."""


class StepStatus(CaseInsensitiveStrEnum):
    RECORDED = "recorded"
    ABORTED = "aborted"


class StepPhase(CaseInsensitiveStrEnum):
    """Phases a single benchmark step moves through."""

    IDLE = "idle"
    SNAPSHOT_PRE = "snapshot_pre"
    SPAWNING = "spawning"
    WARMUP = "warmup"
    SNAPSHOT_POST = "snapshot_post"
    TEARING_DOWN = "tearing_down"
    RECORDED = "recorded"
    ABORTED = "aborted"


class WorkloadState(CaseInsensitiveStrEnum):
    UNKNOWN = "unknown"
    ALIVE = "alive"
    EXITED = "exited"
