# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Markdown summary exporter for benchmark runs."""

from density.common.constants import KIB_PER_MIB
from density.exporters.run_base_exporter import RunBaseExporter

MEM_AVAILABLE = "MemAvailable"
MISSING = "-"

TABLE_HEADER = (
    "| N | Alive | Saved (MiB) | ksmd ticks Δ "
    "| MemAvailable before (MiB) | MemAvailable after (MiB) |"
)
TABLE_ALIGNMENT = "|---:|---:|---:|---:|---:|---:|"

SAVINGS_NOTE = (
    '**Note:** The estimated "Saved" value is derived from the KSM statistics '
    "(pages_sharing/pages_shared) and depends on the workload."
)


def _mem_available_mib(mem_kb: dict[str, int] | None) -> str:
    if not mem_kb or MEM_AVAILABLE not in mem_kb:
        return MISSING
    return f"{mem_kb[MEM_AVAILABLE] / KIB_PER_MIB:.1f}"


class RunMarkdownExporter(RunBaseExporter):
    """Exports a human-readable summary table with one row per step."""

    def get_file_name(self) -> str:
        return "report.md"

    def _generate_content(self) -> str:
        result = self._result
        lines = [
            "# DENSITY Bench Report",
            "",
            f"- Timestamp: {result.started_at.isoformat(timespec='seconds')}",
            f"- Profile: {result.profile}",
            "",
            TABLE_HEADER,
            TABLE_ALIGNMENT,
        ]

        for step in result.steps:
            ticks = MISSING if step.ksmd_ticks_delta is None else step.ksmd_ticks_delta
            lines.append(
                f"| {step.n} | {step.alive} | {step.estimated_saved_mib:.1f} | {ticks} "
                f"| {_mem_available_mib(step.pre_mem_kb)} "
                f"| {_mem_available_mib(step.post_mem_kb)} |"
            )

        noted = [step for step in result.steps if step.notes]
        if noted:
            lines.extend(["", "## Notes", ""])
            lines.extend(f"- N={step.n} ({step.status}): {step.notes}" for step in noted)

        lines.extend(["", SAVINGS_NOTE, ""])
        return "\n".join(lines)
