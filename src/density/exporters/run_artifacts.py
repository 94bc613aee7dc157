# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Writes all artifacts of a benchmark run."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import TYPE_CHECKING

import orjson

from density.common.exceptions import PersistenceError
from density.exporters.run_exporter_config import RunExporterConfig
from density.exporters.run_json_exporter import RunJsonExporter
from density.exporters.run_markdown_exporter import RunMarkdownExporter

if TYPE_CHECKING:
    from density.orchestrator.models import RunResult

logger = logging.getLogger(__name__)


async def export_run_artifacts(
    result: RunResult, output_dir: Path, publish_path: Path | None = None
) -> list[Path]:
    """Write the JSON record and Markdown report concurrently.

    With ``publish_path``, the JSON record is also written there.
    """
    exporters = [
        RunJsonExporter(RunExporterConfig(result=result, output_dir=output_dir)),
        RunMarkdownExporter(RunExporterConfig(result=result, output_dir=output_dir)),
    ]
    if publish_path is not None:
        publish_path = Path(publish_path)
        exporters.append(
            RunJsonExporter(
                RunExporterConfig(
                    result=result,
                    output_dir=publish_path.parent,
                    file_name=publish_path.name,
                )
            )
        )

    return list(await asyncio.gather(*(exporter.export() for exporter in exporters)))


def write_run_artifacts(
    result: RunResult, output_dir: Path, publish_path: Path | None = None
) -> list[Path]:
    """Synchronous wrapper around export_run_artifacts.

    Raises:
        PersistenceError: If any artifact cannot be written. The in-memory result
            travels with the error.
    """
    try:
        paths = asyncio.run(export_run_artifacts(result, Path(output_dir), publish_path))
    except (OSError, orjson.JSONEncodeError) as e:
        raise PersistenceError(
            result, f"Failed to write run artifacts to {output_dir}: {e}"
        ) from e

    for path in paths:
        logger.debug(f"Wrote {path}")
    return paths
