# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Tests for the KSM sysfs controller."""

import logging

import pytest

from density.common.config import KsmTunables
from density.common.exceptions import KsmControlError
from density.ksm import controller as ksm


def read(path, name) -> str:
    return (path / name).read_text().strip()


class TestStatus:
    def test_reads_numeric_files(self, ksm_dir):
        stats = ksm.status(ksm_dir)
        assert stats["pages_shared"] == 1200
        assert stats["pages_sharing"] == 9800
        assert stats["run"] == 1
        assert list(stats) == sorted(stats)

    def test_skips_non_numeric_and_directories(self, ksm_dir):
        (ksm_dir / "use_zero_pages_mode").write_text("[auto] never\n")
        (ksm_dir / "subdir").mkdir()
        stats = ksm.status(ksm_dir)
        assert "use_zero_pages_mode" not in stats
        assert "subdir" not in stats

    def test_missing_directory(self, tmp_path):
        with pytest.raises(KsmControlError, match="Cannot read KSM directory"):
            ksm.status(tmp_path / "missing")

    def test_no_numeric_fields(self, tmp_path):
        (tmp_path / "junk").write_text("abc")
        with pytest.raises(KsmControlError, match="No numeric KSM fields"):
            ksm.status(tmp_path)


class TestReadWriteInt:
    def test_round_trip(self, ksm_dir):
        ksm.write_int(ksm_dir, "sleep_millisecs", 50)
        assert ksm.read_int(ksm_dir, "sleep_millisecs") == 50

    def test_read_non_numeric(self, ksm_dir):
        (ksm_dir / "mode").write_text("auto")
        with pytest.raises(KsmControlError, match="Failed to read"):
            ksm.read_int(ksm_dir, "mode")

    def test_read_missing(self, ksm_dir):
        with pytest.raises(KsmControlError):
            ksm.read_int(ksm_dir, "does_not_exist")

    def test_write_failure(self, tmp_path):
        with pytest.raises(KsmControlError, match="Failed to write"):
            ksm.write_int(tmp_path / "missing", "run", 1)


class TestEnable:
    """Tests for enable."""

    def test_writes_tunables_then_run(self, ksm_dir):
        (ksm_dir / "run").write_text("0")
        ksm.enable(KsmTunables(path=ksm_dir, pages_to_scan=500, sleep_millisecs=10))

        assert read(ksm_dir, "pages_to_scan") == "500"
        assert read(ksm_dir, "sleep_millisecs") == "10"
        assert read(ksm_dir, "run") == "1"
        assert not (ksm_dir / "merge_across_nodes").exists()

    def test_merge_across_nodes_when_set(self, ksm_dir):
        ksm.enable(KsmTunables(path=ksm_dir, merge_across_nodes=0))
        assert read(ksm_dir, "merge_across_nodes") == "0"

    def test_dry_run_writes_nothing(self, ksm_dir, caplog):
        (ksm_dir / "run").write_text("0")
        with caplog.at_level(logging.INFO):
            ksm.enable(KsmTunables(path=ksm_dir, pages_to_scan=999), dry_run=True)

        assert read(ksm_dir, "run") == "0"
        assert read(ksm_dir, "pages_to_scan") == "100"
        assert "[dry-run]" in caplog.text


class TestDisable:
    """Tests for disable."""

    def test_unmerge_then_stop(self, ksm_dir):
        (ksm_dir / "pages_shared").write_text("0")
        ksm.disable(ksm_dir, unmerge=True, timeout=1.0, poll_interval=0.01)
        assert read(ksm_dir, "run") == "0"

    def test_unmerge_wait_is_bounded(self, ksm_dir, caplog):
        with caplog.at_level(logging.WARNING):
            ksm.disable(ksm_dir, unmerge=True, timeout=0.05, poll_interval=0.01)

        assert read(ksm_dir, "run") == "0"
        assert "did not finish" in caplog.text

    def test_without_unmerge(self, ksm_dir):
        ksm.disable(ksm_dir, unmerge=False)
        assert read(ksm_dir, "run") == "0"

    def test_dry_run(self, ksm_dir):
        ksm.disable(ksm_dir, dry_run=True)
        assert read(ksm_dir, "run") == "1"
