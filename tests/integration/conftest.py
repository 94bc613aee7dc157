# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Fixtures for tests that launch real workload processes."""

import os
from pathlib import Path

import pytest

SRC_DIR = Path(__file__).resolve().parents[2] / "src"


@pytest.fixture(autouse=True)
def importable_workloads(monkeypatch):
    """Workload processes re-import density, also from a source checkout."""
    existing = os.environ.get("PYTHONPATH")
    paths = [str(SRC_DIR), existing] if existing else [str(SRC_DIR)]
    monkeypatch.setenv("PYTHONPATH", os.pathsep.join(paths))
