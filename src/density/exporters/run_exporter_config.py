# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Configuration for run exporters."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from density.orchestrator.models import RunResult


@dataclass(slots=True)
class RunExporterConfig:
    """Configuration for run exporters.

    Attributes:
        result: RunResult to export
        output_dir: Directory where the export file will be written
        file_name: Overrides the exporter's default file name when set
    """

    result: RunResult
    output_dir: Path
    file_name: str | None = None
