# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Kernel Same-page Merging (KSM) sysfs access."""

from density.ksm.controller import (
    DEFAULT_KSM_PATH,
    disable,
    enable,
    read_int,
    status,
    write_int,
)

__all__ = [
    "DEFAULT_KSM_PATH",
    "disable",
    "enable",
    "read_int",
    "status",
    "write_int",
]
