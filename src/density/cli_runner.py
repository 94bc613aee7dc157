# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

import contextlib
import logging
import signal
import threading
from collections.abc import Iterator
from pathlib import Path

import orjson
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from density.cli_utils import raise_startup_error_and_exit
from density.common.config import KsmTunables
from density.common.constants import (
    EXIT_CODE_CANCELLED,
    KIB_PER_MIB,
    MILLIS_PER_SECOND,
)
from density.common.exceptions import (
    BenchmarkCancelledError,
    ConfigurationError,
    KsmControlError,
    PersistenceError,
)
from density.exporters import write_run_artifacts
from density.ksm import controller as ksm
from density.orchestrator.models import RunConfig, RunResult
from density.orchestrator.orchestrator import BenchmarkOrchestrator
from density.workload.process import WorkloadSpec, run_workload

logger = logging.getLogger(__name__)


def format_validation_error(error: ValidationError) -> str:
    """One line per failed field, e.g. ``instances: Value error, ...``."""
    lines = []
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"])
        lines.append(f"{location}: {item['msg']}" if location else item["msg"])
    return "\n".join(lines)


def build_run_config(
    *,
    profile: str,
    scale: str | None,
    instances: int | None,
    mem_mib: int,
    warmup_sec: float | None,
    redirty_ms: int,
    out: Path,
    publish: Path | None,
    ksm_path: Path,
) -> RunConfig:
    """Translate bench options into a validated RunConfig.

    A scale takes precedence over a fixed instance count.

    Raises:
        ConfigurationError: If any option is missing or invalid.
    """
    counts = scale if scale else instances
    if counts is None:
        raise ConfigurationError(
            "Specify --scale (e.g. 10..80..10) or --instances (e.g. 20)."
        )

    try:
        return RunConfig(
            profile=profile,
            instances=counts,
            mem_mib=mem_mib,
            warmup_seconds=warmup_sec,
            redirty_interval=redirty_ms / MILLIS_PER_SECOND if redirty_ms > 0 else None,
            output_dir=out,
            publish_path=publish,
            ksm_path=ksm_path,
        )
    except ValidationError as e:
        raise ConfigurationError(format_validation_error(e)) from e


@contextlib.contextmanager
def cancel_on_signals(cancel_event: threading.Event) -> Iterator[None]:
    """Set ``cancel_event`` on SIGINT/SIGTERM while the block runs."""

    def _cancel(signum, frame) -> None:
        cancel_event.set()

    previous = {
        sig: signal.signal(sig, _cancel) for sig in (signal.SIGINT, signal.SIGTERM)
    }
    try:
        yield
    finally:
        for sig, handler in previous.items():
            signal.signal(sig, handler)


def run_bench(config: RunConfig, cancel_event: threading.Event | None = None) -> RunResult:
    """Run the benchmark, print the summary and map failures to exit codes.

    Exits with 130 on cancellation (after writing the partial results) and with 1
    when the artifacts cannot be written.
    """
    cancel_event = cancel_event or threading.Event()
    orchestrator = BenchmarkOrchestrator(config, cancel_event=cancel_event)

    try:
        with cancel_on_signals(cancel_event):
            result = orchestrator.run()
    except BenchmarkCancelledError as e:
        logger.warning(f"Benchmark cancelled after {len(e.result.steps)} recorded step(s)")
        _write_partial_artifacts(e.result, config)
        raise SystemExit(EXIT_CODE_CANCELLED) from e
    except PersistenceError as e:
        logger.debug(f"Persistence failed with {len(e.result.steps)} step(s) in memory")
        raise_startup_error_and_exit(str(e), title="Persistence Error")

    print_run_summary(result)
    return result


def _write_partial_artifacts(result: RunResult, config: RunConfig) -> None:
    if not result.steps:
        return
    try:
        result.artifacts = write_run_artifacts(
            result, config.output_dir, config.publish_path
        )
    except PersistenceError as e:
        logger.warning(f"Could not write partial results: {e}")
        return
    logger.info(f"Partial results written to {config.output_dir}")


def print_run_summary(result: RunResult, console: Console | None = None) -> None:
    console = console or Console()
    table = Table(title=f"DENSITY Bench ({result.profile})")
    for column in ("N", "Alive", "Saved (MiB)", "ksmd ticks Δ", "MemAvailable Δ (MiB)"):
        table.add_column(column, justify="right")

    for step in result.steps:
        table.add_row(
            str(step.n),
            str(step.alive),
            f"{step.estimated_saved_mib:.1f}",
            "-" if step.ksmd_ticks_delta is None else str(step.ksmd_ticks_delta),
            _mem_available_delta(step.pre_mem_kb, step.post_mem_kb),
        )

    console.print(table)
    for path in result.artifacts:
        console.print(f"Wrote [bold]{path}[/bold]")


def _mem_available_delta(
    pre: dict[str, int] | None, post: dict[str, int] | None
) -> str:
    key = "MemAvailable"
    if not pre or not post or key not in pre or key not in post:
        return "-"
    return f"{(post[key] - pre[key]) / KIB_PER_MIB:+.1f}"


def run_enable(tunables: KsmTunables, dry_run: bool = False) -> None:
    try:
        ksm.enable(tunables, dry_run=dry_run)
    except KsmControlError as e:
        raise_startup_error_and_exit(str(e), title="KSM Error")
    if not dry_run:
        Console().print("OK: KSM is active (run=1).")


def run_disable(
    ksm_path: Path, unmerge: bool, timeout_sec: float, dry_run: bool = False
) -> None:
    try:
        ksm.disable(ksm_path, unmerge=unmerge, timeout=timeout_sec, dry_run=dry_run)
    except KsmControlError as e:
        raise_startup_error_and_exit(str(e), title="KSM Error")
    if not dry_run:
        Console().print("OK: KSM is disabled (run=0).")


def run_status(ksm_path: Path, as_json: bool = False, console: Console | None = None) -> None:
    console = console or Console()
    try:
        stats = ksm.status(ksm_path)
    except KsmControlError as e:
        raise_startup_error_and_exit(str(e), title="KSM Error")

    if as_json:
        console.print_json(
            orjson.dumps(stats, option=orjson.OPT_SORT_KEYS).decode("utf-8")
        )
        return

    table = Table(title=f"KSM Status ({ksm_path})")
    table.add_column("Field")
    table.add_column("Value", justify="right")
    for name, value in stats.items():
        table.add_row(name, str(value))
    console.print(table)


def run_workload_command(
    mem_mib: int, workload_id: int, dirty_pct: float, redirty_ms: int
) -> None:
    """Entry point of a workload process launched by the benchmark."""
    try:
        spec = WorkloadSpec(
            mem_mib=mem_mib,
            workload_id=workload_id,
            dirty_pct=dirty_pct,
            redirty_ms=redirty_ms,
        )
    except ValidationError as e:
        raise_startup_error_and_exit(
            format_validation_error(e), title="Workload Configuration Error"
        )
    run_workload(spec)
