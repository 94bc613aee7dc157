# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""System accounting sources (/proc and KSM sysfs)."""

from density.system.probe import SystemProbe
from density.system.procfs import (
    find_pid_by_name,
    parse_meminfo,
    parse_proc_stat_ticks,
    parse_vmstat,
    read_ksmd_ticks,
    read_meminfo,
    read_vmstat,
)

__all__ = [
    "SystemProbe",
    "find_pid_by_name",
    "parse_meminfo",
    "parse_proc_stat_ticks",
    "parse_vmstat",
    "read_ksmd_ticks",
    "read_meminfo",
    "read_vmstat",
]
