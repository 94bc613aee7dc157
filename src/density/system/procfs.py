# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Readers for the /proc accounting sources used by the benchmark."""

from pathlib import Path

import psutil

from density.common.constants import KSMD_PROCESS_NAME

MEMINFO_PATH = Path("/proc/meminfo")
VMSTAT_PATH = Path("/proc/vmstat")

MEMINFO_FIELDS = ("MemTotal", "MemFree", "MemAvailable", "SwapTotal", "SwapFree")
VMSTAT_FIELDS = ("pswpin", "pswpout")

# Offsets of utime and stime in /proc/<pid>/stat, counted from the state field
# that follows the parenthesized comm.
_STAT_UTIME_INDEX = 11
_STAT_STIME_INDEX = 12


def _parse_counters(text: str, fields: tuple[str, ...]) -> dict[str, int]:
    wanted = set(fields)
    counters: dict[str, int] = {}
    for line in text.splitlines():
        parts = line.replace(":", " ").split()
        if len(parts) < 2 or parts[0] not in wanted:
            continue
        try:
            counters[parts[0]] = int(parts[1])
        except ValueError:
            continue
    return counters


def parse_meminfo(text: str) -> dict[str, int]:
    """Parse /proc/meminfo content into the tracked fields (values in kB)."""
    return _parse_counters(text, MEMINFO_FIELDS)


def parse_vmstat(text: str) -> dict[str, int]:
    """Parse /proc/vmstat content into the swap-in/swap-out page counters."""
    return _parse_counters(text, VMSTAT_FIELDS)


def read_meminfo(path: Path | str = MEMINFO_PATH) -> dict[str, int]:
    return parse_meminfo(Path(path).read_text())


def read_vmstat(path: Path | str = VMSTAT_PATH) -> dict[str, int]:
    return parse_vmstat(Path(path).read_text())


def find_pid_by_name(name: str) -> int:
    """Return the pid of the first process whose name matches exactly.

    Raises:
        ProcessLookupError: If no such process exists.
    """
    for proc in psutil.process_iter(["name"]):
        if proc.info.get("name") == name:
            return proc.pid
    raise ProcessLookupError(f"Process '{name}' not found")


def parse_proc_stat_ticks(stat: str) -> int:
    """Return utime + stime (clock ticks) from a /proc/<pid>/stat line.

    The comm field is parenthesized and may itself contain spaces or parentheses,
    so fields are counted from the last closing parenthesis.

    Raises:
        ValueError: If the line does not have the expected layout.
    """
    end = stat.rfind(")")
    if end < 0:
        raise ValueError("Unexpected /proc/<pid>/stat format: missing comm field")
    fields = stat[end + 1 :].split()
    if len(fields) <= _STAT_STIME_INDEX:
        raise ValueError(
            f"Unexpected /proc/<pid>/stat format: {len(fields)} fields after comm"
        )
    return int(fields[_STAT_UTIME_INDEX]) + int(fields[_STAT_STIME_INDEX])


def read_ksmd_ticks(name: str = KSMD_PROCESS_NAME) -> int:
    """CPU ticks consumed so far by the KSM scanner thread."""
    pid = find_pid_by_name(name)
    return parse_proc_stat_ticks(Path(f"/proc/{pid}/stat").read_text())
