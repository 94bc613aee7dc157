# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Spawning, liveness probing and teardown of workload processes."""

from __future__ import annotations

import logging
import signal
import subprocess
import threading
import time
from collections.abc import Sequence
from dataclasses import dataclass

from density.common.constants import WORKLOAD_SUBCOMMAND
from density.common.enums import WorkloadState
from density.common.environment import Environment
from density.common.exceptions import LaunchFailureError
from density.orchestrator.models import RunConfig
from density.workload.profiles import ProfileParameters, resolve_profile

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class WorkloadHandle:
    """A launched workload process, owned by the manager that spawned it."""

    workload_id: int
    process: subprocess.Popen
    state: WorkloadState = WorkloadState.UNKNOWN

    @property
    def pid(self) -> int:
        return self.process.pid


class ProcessLifecycleManager:
    """Launches batches of workload processes and guarantees their teardown.

    Teardown sends SIGTERM, polls until every process exited or the timeout
    elapses, then SIGKILLs and reaps whatever is left. Setting ``cancel_event``
    cuts the polling short; the kill-and-reap pass still runs.
    """

    def __init__(
        self,
        exec_command: Sequence[str],
        poll_interval: float | None = None,
        teardown_timeout: float | None = None,
        cancel_event: threading.Event | None = None,
    ) -> None:
        if not exec_command:
            raise ValueError("exec_command must not be empty")
        self.exec_command = list(exec_command)
        self.poll_interval = poll_interval or Environment.LIFECYCLE.POLL_INTERVAL
        self.teardown_timeout = (
            teardown_timeout or Environment.LIFECYCLE.TEARDOWN_TIMEOUT
        )
        self.cancel_event = cancel_event or threading.Event()

    def build_workload_command(
        self, workload_id: int, mem_mib: int, params: ProfileParameters
    ) -> list[str]:
        return [
            *self.exec_command,
            WORKLOAD_SUBCOMMAND,
            "--mem-mib",
            str(mem_mib),
            "--id",
            str(workload_id),
            "--dirty-pct",
            f"{params.dirty_pct:.2f}",
            "--redirty-ms",
            str(params.redirty_ms),
        ]

    def spawn(self, n: int, config: RunConfig) -> list[WorkloadHandle]:
        """Launch ``n`` workloads with ids 0..n-1.

        Raises:
            LaunchFailureError: If any launch fails. The processes launched so far
                are torn down before this is raised.
        """
        params = resolve_profile(config.profile, config.redirty_interval)
        handles: list[WorkloadHandle] = []
        for workload_id in range(n):
            command = self.build_workload_command(workload_id, config.mem_mib, params)
            try:
                process = subprocess.Popen(
                    command,
                    stdin=subprocess.DEVNULL,
                    stdout=subprocess.DEVNULL,
                    stderr=subprocess.DEVNULL,
                )
            except (OSError, ValueError, subprocess.SubprocessError) as e:
                logger.debug(
                    f"Launch of workload {workload_id} failed, rolling back "
                    f"{len(handles)} launched workload(s)"
                )
                self.teardown(handles)
                raise LaunchFailureError(
                    f"failed to start workload {workload_id} of {n}: {e}",
                    workload_id=workload_id,
                    launched=len(handles),
                ) from e
            handles.append(WorkloadHandle(workload_id=workload_id, process=process))

        logger.debug(f"Spawned {n} workload(s) via {self.exec_command}")
        return handles

    def count_alive(self, handles: Sequence[WorkloadHandle]) -> int:
        """Count running workloads without blocking. Exited ones are reaped."""
        alive = 0
        for handle in handles:
            if self._is_running(handle):
                alive += 1
        return alive

    def teardown(self, handles: Sequence[WorkloadHandle]) -> None:
        """Stop every workload in ``handles``. Safe to call more than once."""
        pending = [h for h in handles if h.state is not WorkloadState.EXITED]
        if not pending:
            return

        for handle in pending:
            if not self._is_running(handle):
                continue
            try:
                handle.process.send_signal(signal.SIGTERM)
            except OSError as e:
                logger.debug(f"SIGTERM to workload {handle.workload_id} failed: {e!r}")

        deadline = time.monotonic() + self.teardown_timeout
        while True:
            pending = [h for h in pending if self._is_running(h)]
            if not pending or time.monotonic() >= deadline:
                break
            if self.cancel_event.wait(self.poll_interval):
                break

        for handle in handles:
            if handle.state is WorkloadState.EXITED:
                continue
            self._kill_and_reap(handle)

    def _is_running(self, handle: WorkloadHandle) -> bool:
        if handle.state is WorkloadState.EXITED:
            return False
        if handle.process.poll() is None:
            handle.state = WorkloadState.ALIVE
            return True
        handle.state = WorkloadState.EXITED
        return False

    def _kill_and_reap(self, handle: WorkloadHandle) -> None:
        try:
            handle.process.kill()
        except OSError as e:
            logger.debug(f"SIGKILL to workload {handle.workload_id} failed: {e!r}")
        try:
            handle.process.wait(timeout=self.teardown_timeout)
        except subprocess.TimeoutExpired:
            logger.debug(
                f"Workload {handle.workload_id} (pid {handle.pid}) not reaped "
                f"after SIGKILL"
            )
            return
        handle.state = WorkloadState.EXITED
