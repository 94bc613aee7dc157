# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Base class for exporters that write one artifact per benchmark run."""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from pathlib import Path

from density.exporters.run_exporter_config import RunExporterConfig

logger = logging.getLogger(__name__)


class RunBaseExporter(ABC):
    """Renders a RunResult to text and writes it to the output directory.

    Subclasses provide the file name and the content; writing happens off the
    event loop so several exporters can be gathered.
    """

    def __init__(self, config: RunExporterConfig) -> None:
        self._config = config
        self._result = config.result

    @abstractmethod
    def get_file_name(self) -> str:
        """Return the default file name of the artifact."""

    @abstractmethod
    def _generate_content(self) -> str:
        """Render the artifact content."""

    @property
    def file_path(self) -> Path:
        return Path(self._config.output_dir) / (
            self._config.file_name or self.get_file_name()
        )

    async def export(self) -> Path:
        """Write the artifact.

        Returns:
            Path: Location of the written file
        """
        path = self.file_path
        content = self._generate_content()
        await asyncio.to_thread(path.parent.mkdir, parents=True, exist_ok=True)
        await asyncio.to_thread(path.write_text, content, encoding="utf-8")
        logger.debug(f"Exported {self.__class__.__name__} artifact to {path}")
        return path
