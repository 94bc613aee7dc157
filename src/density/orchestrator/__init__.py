# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Benchmark orchestration: step loop, workload lifecycle and savings."""

from density.orchestrator.lifecycle import ProcessLifecycleManager, WorkloadHandle
from density.orchestrator.models import RunConfig, RunResult, StepResult
from density.orchestrator.orchestrator import BenchmarkOrchestrator
from density.orchestrator.savings import estimate_saved_mib

__all__ = [
    "BenchmarkOrchestrator",
    "ProcessLifecycleManager",
    "RunConfig",
    "RunResult",
    "StepResult",
    "WorkloadHandle",
    "estimate_saved_mib",
]
