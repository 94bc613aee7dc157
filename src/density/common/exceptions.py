# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Exceptions raised by DENSITY."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from density.orchestrator.models import RunResult


class DensityError(Exception):
    """Base class for all DENSITY errors."""


class ConfigurationError(DensityError, ValueError):
    """Missing or invalid parameters. Raised before any process is spawned."""


class KsmControlError(DensityError):
    """Reading or writing the KSM sysfs interface failed."""


class LaunchFailureError(DensityError):
    """A workload process in a batch failed to start.

    The batch has already been rolled back when this is raised.
    """

    def __init__(self, message: str, workload_id: int, launched: int) -> None:
        super().__init__(message)
        self.workload_id = workload_id
        self.launched = launched


class ProbeFailureError(DensityError):
    """An optional system or KSM read failed."""

    def __init__(self, source: str, message: str) -> None:
        super().__init__(f"{source}: {message}")
        self.source = source


class BenchmarkCancelledError(DensityError):
    """The benchmark was cancelled. Carries the steps recorded so far."""

    def __init__(self, result: RunResult, message: str = "Benchmark cancelled") -> None:
        super().__init__(message)
        self.result = result


class PersistenceError(DensityError):
    """Writing the run artifacts failed. Carries the in-memory result."""

    def __init__(self, result: RunResult, message: str) -> None:
        super().__init__(message)
        self.result = result
