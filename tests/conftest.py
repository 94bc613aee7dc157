# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Shared fixtures for DENSITY tests."""

from unittest.mock import patch

import pytest

from density.orchestrator.models import RunConfig


@pytest.fixture(autouse=True)
def no_default_warmup():
    """Zero or unset warmups fall back to the environment default; keep it at 0 in tests."""
    with patch.multiple("density.orchestrator.models.Environment.BENCH", DEFAULT_WARMUP=0.0):
        yield


@pytest.fixture
def ksm_dir(tmp_path):
    """A fake KSM sysfs directory with realistic statistics."""
    path = tmp_path / "ksm"
    path.mkdir()
    values = {
        "run": "1\n",
        "pages_to_scan": "100\n",
        "sleep_millisecs": "20\n",
        "pages_shared": "1200\n",
        "pages_sharing": "9800\n",
        "pages_unshared": "300\n",
        "full_scans": "7\n",
    }
    for name, value in values.items():
        (path / name).write_text(value)
    return path


@pytest.fixture
def make_run_config(tmp_path):
    """Factory for RunConfig with fast defaults (zero warmup, tiny workloads)."""

    def _make(**kwargs) -> RunConfig:
        kwargs.setdefault("instances", [1, 2])
        kwargs.setdefault("mem_mib", 1)
        kwargs.setdefault("warmup_seconds", 0)
        kwargs.setdefault("output_dir", tmp_path / "results")
        return RunConfig(**kwargs)

    return _make
