# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Tests for BenchmarkOrchestrator."""

import json
import threading
import time

import pytest

from density.common.enums import StepPhase, StepStatus
from density.common.exceptions import (
    BenchmarkCancelledError,
    LaunchFailureError,
    PersistenceError,
    ProbeFailureError,
)
from density.orchestrator.orchestrator import BenchmarkOrchestrator, scanner_ticks_delta

PAGE_SIZE = 4096


class FakeLifecycle:
    """Records spawn/teardown order instead of launching processes."""

    def __init__(self, fail_on=(), alive_offset=0, on_spawn=None):
        self.fail_on = set(fail_on)
        self.alive_offset = alive_offset
        self.on_spawn = on_spawn
        self.events = []

    def spawn(self, n, config):
        self.events.append(("spawn", n))
        if n in self.fail_on:
            raise LaunchFailureError(
                f"failed to start workload 1 of {n}: no memory",
                workload_id=1,
                launched=1,
            )
        if self.on_spawn is not None:
            self.on_spawn(n)
        return [f"handle-{n}-{i}" for i in range(n)]

    def count_alive(self, handles):
        return max(len(handles) - self.alive_offset, 0)

    def teardown(self, handles):
        self.events.append(("teardown", len(handles)))


class FakeProbe:
    """Deterministic accounting sources."""

    def __init__(self, fail=()):
        self.fail = set(fail)
        self.ticks = 100

    def _check(self, source):
        if source in self.fail:
            raise ProbeFailureError(source, "unavailable")

    def memory(self):
        self._check("meminfo")
        return {"MemTotal": 8 * 1024 * 1024, "MemAvailable": 4 * 1024 * 1024}

    def vmstat(self):
        self._check("vmstat")
        return {"pswpin": 0, "pswpout": 0}

    def ksm(self):
        self._check("ksm")
        return {"pages_shared": 10, "pages_sharing": 266, "run": 1}

    def scanner_ticks(self):
        self._check("ksmd")
        self.ticks += 5
        return self.ticks


def make_orchestrator(config, lifecycle=None, probe=None, cancel_event=None):
    return BenchmarkOrchestrator(
        config,
        lifecycle=lifecycle or FakeLifecycle(),
        probe=probe or FakeProbe(),
        cancel_event=cancel_event,
        page_size=PAGE_SIZE,
    )


class TestBenchmarkOrchestrator:
    """Tests for the step loop."""

    def test_steps_in_request_order(self, make_run_config):
        lifecycle = FakeLifecycle()
        result = make_orchestrator(
            make_run_config(instances=[3, 1, 2]), lifecycle
        ).run()

        assert [step.n for step in result.steps] == [3, 1, 2]
        assert lifecycle.events == [
            ("spawn", 3),
            ("teardown", 3),
            ("spawn", 1),
            ("teardown", 1),
            ("spawn", 2),
            ("teardown", 2),
        ]

    def test_recorded_step_contents(self, make_run_config):
        config = make_run_config(instances=[2], mem_mib=16)
        step = make_orchestrator(config).run().steps[0]

        assert step.status is StepStatus.RECORDED
        assert step.alive == 2
        assert step.mem_mib == 16
        assert step.warmup_seconds == 0
        assert step.pre_mem_kb["MemAvailable"] == 4 * 1024 * 1024
        assert step.post_ksm["pages_sharing"] == 266
        assert step.estimated_saved_mib == 1.0
        assert step.ksmd_ticks_delta == 5
        assert step.duration_seconds >= 0
        assert step.notes is None

    def test_alive_never_exceeds_n(self, make_run_config):
        result = make_orchestrator(
            make_run_config(instances=[1, 4]), FakeLifecycle(alive_offset=1)
        ).run()

        assert [step.alive for step in result.steps] == [0, 3]
        assert "exited before measurement" in result.steps[1].notes

    def test_launch_failure_aborts_only_that_step(self, make_run_config):
        lifecycle = FakeLifecycle(fail_on={2})
        result = make_orchestrator(
            make_run_config(instances=[1, 2, 3]), lifecycle
        ).run()

        assert [step.status for step in result.steps] == [
            StepStatus.RECORDED,
            StepStatus.ABORTED,
            StepStatus.RECORDED,
        ]
        aborted = result.steps[1]
        assert aborted.alive == 0
        assert aborted.estimated_saved_mib == 0.0
        assert aborted.notes.startswith("launch failure: ")
        assert aborted.post_ksm is None
        assert ("teardown", 2) not in lifecycle.events

    def test_probe_failure_is_noted(self, make_run_config, caplog):
        result = make_orchestrator(
            make_run_config(instances=[2]), probe=FakeProbe(fail={"ksm", "ksmd"})
        ).run()

        step = result.steps[0]
        assert step.status is StepStatus.RECORDED
        assert step.pre_ksm is None
        assert step.post_ksm is None
        assert step.estimated_saved_mib == 0.0
        assert step.ksmd_ticks_delta is None
        assert "probe failure: ksm: unavailable" in step.notes
        assert "Probe failed" in caplog.text

    def test_cancel_during_warmup(self, make_run_config):
        cancel_event = threading.Event()
        lifecycle = FakeLifecycle(
            on_spawn=lambda n: cancel_event.set() if n == 2 else None
        )
        orchestrator = make_orchestrator(
            make_run_config(instances=[1, 2, 3]), lifecycle, cancel_event=cancel_event
        )

        with pytest.raises(BenchmarkCancelledError) as exc_info:
            orchestrator.run()

        assert [step.n for step in exc_info.value.result.steps] == [1]
        assert lifecycle.events[-2:] == [("spawn", 2), ("teardown", 2)]
        assert ("spawn", 3) not in lifecycle.events
        assert orchestrator.phase is StepPhase.TEARING_DOWN

    def test_cancel_interrupts_long_warmup(self, make_run_config):
        cancel_event = threading.Event()
        lifecycle = FakeLifecycle(on_spawn=lambda n: cancel_event.set())
        orchestrator = make_orchestrator(
            make_run_config(instances=[1], warmup_seconds=300),
            lifecycle,
            cancel_event=cancel_event,
        )

        started = time.monotonic()
        with pytest.raises(BenchmarkCancelledError):
            orchestrator.run()

        assert time.monotonic() - started < 5.0
        assert lifecycle.events == [("spawn", 1), ("teardown", 1)]

    def test_cancel_before_first_step(self, make_run_config):
        cancel_event = threading.Event()
        cancel_event.set()
        lifecycle = FakeLifecycle()

        with pytest.raises(BenchmarkCancelledError) as exc_info:
            make_orchestrator(
                make_run_config(), lifecycle, cancel_event=cancel_event
            ).run()

        assert exc_info.value.result.steps == []
        assert lifecycle.events == []

    def test_artifacts_are_written(self, make_run_config, tmp_path):
        config = make_run_config(
            instances=[1, 2], publish_path=tmp_path / "site" / "latest.json"
        )
        result = make_orchestrator(config).run()

        assert len(result.artifacts) == 3
        assert (config.output_dir / "report.md").is_file()
        published = json.loads((tmp_path / "site" / "latest.json").read_text())
        assert [step["n"] for step in published["steps"]] == [1, 2]

    def test_unwritable_output_dir(self, make_run_config, tmp_path):
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("")
        with pytest.raises(PersistenceError) as exc_info:
            make_orchestrator(make_run_config(output_dir=blocker)).run()
        assert exc_info.value.result.steps == []

    def test_phase_ends_recorded(self, make_run_config):
        orchestrator = make_orchestrator(make_run_config(instances=[1]))
        orchestrator.run()
        assert orchestrator.phase is StepPhase.RECORDED


class TestScannerTicksDelta:
    @pytest.mark.parametrize(
        "before,after,expected",
        [
            (100, 150, 50),
            (100, 100, 0),
            (100, 90, None),
            (0, 50, None),
            (100, 0, None),
            (None, 50, None),
            (100, None, None),
        ],
    )
    def test_delta(self, before, after, expected):
        assert scanner_ticks_delta(before, after) == expected
