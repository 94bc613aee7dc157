# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""JSON exporter for benchmark runs."""

import orjson

from density.exporters.run_base_exporter import RunBaseExporter


class RunJsonExporter(RunBaseExporter):
    """Exports the full run record as JSON.

    Fields that were not measured (failed probes, missing tick deltas) are left out
    rather than written as null.
    """

    def get_file_name(self) -> str:
        """Return JSON file name.

        Returns:
            str: "bench_<profile>_<YYYYmmdd_HHMMSS>.json", e.g. "bench_p1_20250101_120000.json"
        """
        profile = str(self._result.profile).lower()
        stamp = self._result.started_at.strftime("%Y%m%d_%H%M%S")
        return f"bench_{profile}_{stamp}.json"

    def _generate_content(self) -> str:
        data = self._result.model_dump(mode="json", exclude_none=True)
        return orjson.dumps(data, option=orjson.OPT_INDENT_2).decode("utf-8")
