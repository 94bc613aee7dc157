# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

from dataclasses import dataclass
from pathlib import Path

from density.common.enums import Profile


@dataclass(frozen=True)
class BenchDefaults:
    PROFILE = Profile.IDENTICAL
    MEM_MIB = 256
    OUTPUT_DIR = Path("results")


@dataclass(frozen=True)
class KsmDefaults:
    PATH = Path("/sys/kernel/mm/ksm")
    PAGES_TO_SCAN = 100
    SLEEP_MILLISECS = 20
    UNMERGE_TIMEOUT_SECONDS = 60.0
    UNMERGE_POLL_INTERVAL = 0.5
