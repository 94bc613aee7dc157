# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

from pathlib import Path
from typing import Annotated

from pydantic import Field

from density.common.config.base_config import BaseConfig
from density.common.config.config_defaults import KsmDefaults


class KsmTunables(BaseConfig):
    """The KSM tuning parameters DENSITY manages through sysfs."""

    path: Annotated[
        Path,
        Field(description="KSM sysfs directory."),
    ] = KsmDefaults.PATH

    pages_to_scan: Annotated[
        int,
        Field(
            gt=0,
            description="Pages scanned per ksmd wake-up. Conservative default: 100.",
        ),
    ] = KsmDefaults.PAGES_TO_SCAN

    sleep_millisecs: Annotated[
        int,
        Field(
            ge=0,
            description="Milliseconds ksmd sleeps between scan batches. Conservative default: 20.",
        ),
    ] = KsmDefaults.SLEEP_MILLISECS

    merge_across_nodes: Annotated[
        int | None,
        Field(
            ge=0,
            le=1,
            description="Whether pages from different NUMA nodes may be merged (0/1). "
            "None leaves the current kernel setting untouched.",
        ),
    ] = None
