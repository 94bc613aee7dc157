# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Long-lived synthetic memory workload.

A workload maps a private anonymous region, fills it with the shared page
template, dirties its own subset of pages and then blocks until asked to stop,
optionally re-dirtying the same pages on a fixed interval so KSM cannot keep
them merged.
"""

import logging
import mmap
import signal
import threading
from typing import Annotated

from pydantic import Field, model_validator

from density.common.config.base_config import BaseConfig
from density.common.constants import BYTES_PER_MIB, MILLIS_PER_SECOND
from density.workload.pattern import apply_dirty, fill_template, select_dirty_indices

logger = logging.getLogger(__name__)

__all__ = [
    "MAX_WORKLOAD_BYTES",
    "MemoryWorkload",
    "STOP_SIGNALS",
    "WorkloadSpec",
    "install_stop_handlers",
    "run_workload",
]

# Regions are addressed with signed 32-bit offsets; larger requests are rejected.
MAX_WORKLOAD_BYTES = 2**31 - 1


class WorkloadSpec(BaseConfig):
    """Parameters of a single workload process."""

    mem_mib: Annotated[
        int,
        Field(gt=0, description="Size of the allocated region in MiB."),
    ]

    workload_id: Annotated[
        int,
        Field(ge=0, description="Instance identity. Drives the dirty page selection."),
    ] = 0

    dirty_pct: Annotated[
        float,
        Field(ge=0, le=100, description="Percentage of pages made unique (0..100)."),
    ] = 0.0

    redirty_ms: Annotated[
        int,
        Field(
            ge=0,
            description="Re-dirty interval in milliseconds. 0 disables re-dirtying.",
        ),
    ] = 0

    @model_validator(mode="after")
    def validate_size(self) -> "WorkloadSpec":
        if self.size_bytes > MAX_WORKLOAD_BYTES:
            raise ValueError(
                f"mem_mib={self.mem_mib} is too large: {self.size_bytes} bytes exceeds "
                f"the supported maximum of {MAX_WORKLOAD_BYTES} bytes per workload."
            )
        return self

    @property
    def size_bytes(self) -> int:
        return self.mem_mib * BYTES_PER_MIB

    @property
    def redirty_interval(self) -> float:
        """Re-dirty interval in seconds."""
        return self.redirty_ms / MILLIS_PER_SECOND


class MemoryWorkload:
    """A memory region with the shared template and a per-instance dirty set.

    Usage:
        with MemoryWorkload(spec) as workload:
            workload.allocate()
            workload.run(stop_event)
    """

    def __init__(self, spec: WorkloadSpec, page_size: int | None = None) -> None:
        self.spec = spec
        self.page_size = page_size or mmap.PAGESIZE
        self._region: mmap.mmap | None = None
        self._indices: list[int] = []
        self._counter = 0

    @property
    def total_pages(self) -> int:
        return self.spec.size_bytes // self.page_size

    @property
    def dirty_indices(self) -> list[int]:
        return list(self._indices)

    @property
    def counter(self) -> int:
        """Number of re-dirty cycles applied after the initial one."""
        return self._counter

    @property
    def region(self) -> mmap.mmap:
        if self._region is None:
            raise RuntimeError("Workload region is not allocated")
        return self._region

    def allocate(self) -> None:
        """Map the region, fill it with the template and apply the initial dirty set."""
        if self._region is not None:
            return

        region = mmap.mmap(
            -1,
            self.spec.size_bytes,
            flags=mmap.MAP_PRIVATE | mmap.MAP_ANONYMOUS,
        )
        self._mark_mergeable(region)
        self._region = region

        fill_template(region, self.page_size)

        self._indices = select_dirty_indices(
            self.spec.workload_id, self.total_pages, self.spec.dirty_pct
        )
        if self._indices:
            apply_dirty(
                region, self.page_size, self.spec.workload_id, self._indices, 0
            )
        logger.debug(
            f"Workload {self.spec.workload_id}: {self.total_pages} pages, "
            f"{len(self._indices)} dirty slots"
        )

    def redirty(self) -> None:
        """Apply the next re-dirty cycle with a fresh marker."""
        self._counter += 1
        apply_dirty(
            self.region,
            self.page_size,
            self.spec.workload_id,
            self._indices,
            self._counter,
        )

    def run(self, stop_event: threading.Event) -> None:
        """Block until ``stop_event`` is set, re-dirtying on the configured interval.

        There is no completion state: this only returns once a stop is requested.
        """
        if self._region is None:
            self.allocate()

        interval = self.spec.redirty_interval
        if interval <= 0 or not self._indices:
            stop_event.wait()
            return

        while not stop_event.wait(interval):
            self.redirty()

    def close(self) -> None:
        if self._region is not None:
            self._region.close()
            self._region = None

    def __enter__(self) -> "MemoryWorkload":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @staticmethod
    def _mark_mergeable(region: mmap.mmap) -> None:
        # KSM only scans regions advised as mergeable.
        advice = getattr(mmap, "MADV_MERGEABLE", None)
        if advice is None:
            logger.debug("MADV_MERGEABLE is not available on this platform")
            return
        try:
            region.madvise(advice)
        except OSError as e:
            logger.debug(f"madvise(MADV_MERGEABLE) failed: {e!r}")


STOP_SIGNALS = frozenset({signal.SIGINT, signal.SIGTERM})


def install_stop_handlers(stop_event: threading.Event) -> threading.Thread:
    """Map SIGINT and SIGTERM to one stop request.

    Must be called from the main thread before any other thread is started.
    The stop signals are blocked in the calling thread (and in threads it starts
    later) and consumed by a watcher thread through ``sigwait``. No Python signal
    handler runs on the main thread, which may be holding the event's lock inside
    ``stop_event.wait()``.

    Returns:
        threading.Thread: The watcher thread. It exits after the first stop signal.
    """
    signal.pthread_sigmask(signal.SIG_BLOCK, STOP_SIGNALS)

    def _watch() -> None:
        signum = signal.sigwait(STOP_SIGNALS)
        logger.debug(f"Received {signal.Signals(signum).name}, stopping")
        stop_event.set()

    watcher = threading.Thread(target=_watch, name="density-stop-watcher", daemon=True)
    watcher.start()
    return watcher


def run_workload(spec: WorkloadSpec) -> None:
    """Run a workload in the current process until SIGINT or SIGTERM arrives."""
    stop_event = threading.Event()
    install_stop_handlers(stop_event)
    with MemoryWorkload(spec) as workload:
        workload.allocate()
        workload.run(stop_event)
