# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Exporters for benchmark run artifacts."""

from density.exporters.run_artifacts import export_run_artifacts, write_run_artifacts
from density.exporters.run_base_exporter import RunBaseExporter
from density.exporters.run_exporter_config import RunExporterConfig
from density.exporters.run_json_exporter import RunJsonExporter
from density.exporters.run_markdown_exporter import RunMarkdownExporter

__all__ = [
    "RunBaseExporter",
    "RunExporterConfig",
    "RunJsonExporter",
    "RunMarkdownExporter",
    "export_run_artifacts",
    "write_run_artifacts",
]
