# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Point-in-time snapshots of the system and KSM accounting sources."""

from pathlib import Path

import psutil

from density.common.config.config_defaults import KsmDefaults
from density.common.exceptions import KsmControlError, ProbeFailureError
from density.ksm import controller as ksm
from density.system import procfs


class SystemProbe:
    """Reads the accounting sources for one benchmark step.

    Every read is optional from the benchmark's point of view: failures surface as
    ProbeFailureError so the caller can note them and carry on.
    """

    def __init__(self, ksm_path: Path | str = KsmDefaults.PATH) -> None:
        self.ksm_path = Path(ksm_path)

    def memory(self) -> dict[str, int]:
        try:
            return procfs.read_meminfo()
        except (OSError, ValueError) as e:
            raise ProbeFailureError("meminfo", str(e)) from e

    def vmstat(self) -> dict[str, int]:
        try:
            return procfs.read_vmstat()
        except (OSError, ValueError) as e:
            raise ProbeFailureError("vmstat", str(e)) from e

    def ksm(self) -> dict[str, int]:
        try:
            return ksm.status(self.ksm_path)
        except KsmControlError as e:
            raise ProbeFailureError("ksm", str(e)) from e

    def scanner_ticks(self) -> int:
        """CPU ticks of the KSM scanner thread."""
        try:
            return procfs.read_ksmd_ticks()
        except (OSError, ValueError, psutil.Error) as e:
            raise ProbeFailureError("ksmd", str(e)) from e
