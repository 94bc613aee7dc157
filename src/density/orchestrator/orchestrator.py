# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Benchmark orchestrator: one measured step per requested instance count."""

import logging
import mmap
import threading
import time
from collections.abc import Callable
from typing import TypeVar

from density.common.enums import StepPhase, StepStatus
from density.common.exceptions import (
    BenchmarkCancelledError,
    LaunchFailureError,
    PersistenceError,
    ProbeFailureError,
)
from density.exporters import write_run_artifacts
from density.orchestrator.lifecycle import ProcessLifecycleManager
from density.orchestrator.models import RunConfig, RunResult, StepResult
from density.orchestrator.savings import estimate_saved_mib
from density.system.probe import SystemProbe

logger = logging.getLogger(__name__)

__all__ = [
    "BenchmarkOrchestrator",
]

T = TypeVar("T")


class BenchmarkOrchestrator:
    """Runs the benchmark steps strictly one after another.

    Each step snapshots the accounting sources, spawns ``n`` workloads, gives KSM
    the warmup period to merge, snapshots again and tears the workloads down
    before the next step begins. Launch failures abort only their own step.
    Setting ``cancel_event`` stops the run at the next suspension point; the
    current step is torn down and BenchmarkCancelledError carries the steps
    recorded so far.
    """

    def __init__(
        self,
        config: RunConfig,
        lifecycle: ProcessLifecycleManager | None = None,
        probe: SystemProbe | None = None,
        cancel_event: threading.Event | None = None,
        page_size: int | None = None,
    ):
        """Initialize BenchmarkOrchestrator.

        Args:
            config: Validated run configuration
            lifecycle: Workload process manager (defaults to one built from config)
            probe: Accounting sources (defaults to the live system)
            cancel_event: Event that cancels the run when set
            page_size: Page size used for the savings estimate
        """
        self.config = config
        self.cancel_event = cancel_event or threading.Event()
        self.lifecycle = lifecycle or ProcessLifecycleManager(
            config.exec_command, cancel_event=self.cancel_event
        )
        self.probe = probe or SystemProbe(config.ksm_path)
        self.page_size = page_size or mmap.PAGESIZE
        self.phase = StepPhase.IDLE

    def run(self) -> RunResult:
        """Execute every step, then persist the artifacts.

        Returns:
            RunResult with one StepResult per instance count, in request order

        Raises:
            BenchmarkCancelledError: If the cancel event was set during the run
            PersistenceError: If the output directory or artifacts cannot be written
        """
        config = self.config
        result = RunResult(profile=config.profile)

        try:
            config.output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise PersistenceError(
                result, f"Cannot create output directory {config.output_dir}: {e}"
            ) from e

        logger.info("=" * 80)
        logger.info(f"Starting KSM density benchmark: profile {config.profile}")
        logger.info(f"  Instances: {config.instances}")
        logger.info(
            f"  Memory per instance: {config.mem_mib} MiB, "
            f"warmup: {config.warmup_seconds}s"
        )
        logger.info("=" * 80)

        total = len(config.instances)
        for index, n in enumerate(config.instances, start=1):
            if self.cancel_event.is_set():
                raise BenchmarkCancelledError(result)

            logger.info(f"[{index}/{total}] Measuring {n} instance(s)...")
            step = self._run_step(n, result)
            result.steps.append(step)

            if step.status is StepStatus.ABORTED:
                logger.error(f"[{index}/{total}] Step aborted: {step.notes}")
            else:
                logger.info(
                    f"[{index}/{total}] {step.alive}/{n} alive, "
                    f"estimated saved: {step.estimated_saved_mib:.1f} MiB"
                )

        if self.cancel_event.is_set():
            raise BenchmarkCancelledError(result)

        result.artifacts = write_run_artifacts(
            result, config.output_dir, config.publish_path
        )
        logger.info(f"Results written to {config.output_dir}")
        return result

    def _run_step(self, n: int, result: RunResult) -> StepResult:
        config = self.config
        notes: list[str] = []
        self._enter_phase(n, StepPhase.IDLE)

        self._enter_phase(n, StepPhase.SNAPSHOT_PRE)
        pre_mem_kb = self._snapshot(self.probe.memory, notes)
        pre_vmstat = self._snapshot(self.probe.vmstat, notes)
        pre_ksm = self._snapshot(self.probe.ksm, notes)
        ticks_before = self._snapshot(self.probe.scanner_ticks, notes)

        self._enter_phase(n, StepPhase.SPAWNING)
        started = time.monotonic()
        try:
            handles = self.lifecycle.spawn(n, config)
        except LaunchFailureError as e:
            self._enter_phase(n, StepPhase.ABORTED)
            notes.insert(0, f"launch failure: {e}")
            return StepResult(
                n=n,
                status=StepStatus.ABORTED,
                alive=0,
                duration_seconds=time.monotonic() - started,
                profile=config.profile,
                mem_mib=config.mem_mib,
                warmup_seconds=config.warmup_seconds,
                pre_mem_kb=pre_mem_kb,
                pre_vmstat=pre_vmstat,
                pre_ksm=pre_ksm,
                notes="; ".join(notes),
            )

        try:
            self._enter_phase(n, StepPhase.WARMUP)
            if self.cancel_event.wait(config.warmup_seconds):
                logger.warning(f"Cancelled during warmup of step n={n}")
                raise BenchmarkCancelledError(result)

            self._enter_phase(n, StepPhase.SNAPSHOT_POST)
            alive = self.lifecycle.count_alive(handles)
            post_mem_kb = self._snapshot(self.probe.memory, notes)
            post_vmstat = self._snapshot(self.probe.vmstat, notes)
            post_ksm = self._snapshot(self.probe.ksm, notes)
            ticks_after = self._snapshot(self.probe.scanner_ticks, notes)
            duration = time.monotonic() - started
        finally:
            self._enter_phase(n, StepPhase.TEARING_DOWN)
            self.lifecycle.teardown(handles)

        if alive < n:
            notes.append(f"{n - alive} workload(s) exited before measurement")

        self._enter_phase(n, StepPhase.RECORDED)
        return StepResult(
            n=n,
            status=StepStatus.RECORDED,
            alive=alive,
            duration_seconds=duration,
            profile=config.profile,
            mem_mib=config.mem_mib,
            warmup_seconds=config.warmup_seconds,
            pre_mem_kb=pre_mem_kb,
            post_mem_kb=post_mem_kb,
            pre_vmstat=pre_vmstat,
            post_vmstat=post_vmstat,
            pre_ksm=pre_ksm,
            post_ksm=post_ksm,
            estimated_saved_mib=estimate_saved_mib(post_ksm, self.page_size),
            ksmd_ticks_delta=scanner_ticks_delta(ticks_before, ticks_after),
            notes="; ".join(notes) or None,
        )

    def _enter_phase(self, n: int, phase: StepPhase) -> None:
        self.phase = phase
        logger.debug(f"Step n={n}: {phase}")

    @staticmethod
    def _snapshot(read: Callable[[], T], notes: list[str]) -> T | None:
        try:
            return read()
        except ProbeFailureError as e:
            logger.warning(f"Probe failed: {e}")
            notes.append(f"probe failure: {e}")
            return None


def scanner_ticks_delta(before: int | None, after: int | None) -> int | None:
    """Ticks spent by the scanner between two readings, when both are usable.

    A restarted scanner thread resets its counters, so a decreasing reading yields
    no delta rather than a negative one.
    """
    if before is None or after is None:
        return None
    if before > 0 and after > 0 and after >= before:
        return after - before
    return None
