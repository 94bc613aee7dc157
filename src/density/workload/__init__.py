# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Synthetic memory workloads with a reproducible page pattern."""

from density.workload.pattern import (
    apply_dirty,
    build_page_template,
    dirty_marker,
    dirty_page_count,
    fill_template,
    select_dirty_indices,
)
from density.workload.process import (
    MAX_WORKLOAD_BYTES,
    MemoryWorkload,
    WorkloadSpec,
    install_stop_handlers,
    run_workload,
)
from density.workload.profiles import ProfileParameters, resolve_profile

__all__ = [
    "MAX_WORKLOAD_BYTES",
    "MemoryWorkload",
    "ProfileParameters",
    "WorkloadSpec",
    "apply_dirty",
    "build_page_template",
    "dirty_marker",
    "dirty_page_count",
    "fill_template",
    "install_stop_handlers",
    "resolve_profile",
    "run_workload",
    "select_dirty_indices",
]
