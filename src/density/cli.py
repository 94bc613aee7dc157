# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Command line interface for DENSITY."""

from pathlib import Path
from typing import Annotated

from cyclopts import App, Parameter
from pydantic import ValidationError

from density import __version__
from density.cli_utils import raise_startup_error_and_exit
from density.common.config import BenchDefaults, KsmDefaults, KsmTunables
from density.common.constants import WORKLOAD_SUBCOMMAND
from density.common.exceptions import ConfigurationError
from density.common.logging import setup_rich_logging

app = App(
    name="density",
    help="Reproducible KSM memory-deduplication benchmarks for fleets of "
    "near-identical workloads. Uses only the standard kernel interfaces (sysfs).",
    version=__version__,
)


@app.command
def enable(
    *,
    ksm_path: Path = KsmDefaults.PATH,
    pages_to_scan: int = KsmDefaults.PAGES_TO_SCAN,
    sleep_ms: int = KsmDefaults.SLEEP_MILLISECS,
    merge_across_nodes: int | None = None,
    dry_run: bool = False,
    log_level: str | None = None,
) -> None:
    """Enable KSM with conservative tunables.

    Args:
        ksm_path: KSM sysfs directory.
        pages_to_scan: Pages scanned per ksmd wake-up.
        sleep_ms: Milliseconds ksmd sleeps between scan batches.
        merge_across_nodes: Merge pages across NUMA nodes (0/1). Unchanged when omitted.
        dry_run: Only show what would be written.
        log_level: Log level (DEBUG, INFO, WARNING, ...).
    """
    from density.cli_runner import format_validation_error, run_enable

    setup_rich_logging(log_level)
    try:
        tunables = KsmTunables(
            path=ksm_path,
            pages_to_scan=pages_to_scan,
            sleep_millisecs=sleep_ms,
            merge_across_nodes=merge_across_nodes,
        )
    except ValidationError as e:
        raise_startup_error_and_exit(
            format_validation_error(e), title="Configuration Error"
        )
    run_enable(tunables, dry_run=dry_run)


@app.command
def disable(
    *,
    ksm_path: Path = KsmDefaults.PATH,
    unmerge: bool = True,
    timeout_sec: float = KsmDefaults.UNMERGE_TIMEOUT_SECONDS,
    dry_run: bool = False,
    log_level: str | None = None,
) -> None:
    """Disable KSM, optionally unmerging all shared pages first.

    Args:
        ksm_path: KSM sysfs directory.
        unmerge: Set run=2 and wait (best-effort) until pages_shared reaches 0.
        timeout_sec: Maximum seconds to wait for the unmerge.
        dry_run: Only show what would be written.
        log_level: Log level (DEBUG, INFO, WARNING, ...).
    """
    from density.cli_runner import run_disable

    setup_rich_logging(log_level)
    run_disable(ksm_path, unmerge=unmerge, timeout_sec=timeout_sec, dry_run=dry_run)


@app.command
def status(
    *,
    ksm_path: Path = KsmDefaults.PATH,
    as_json: Annotated[bool, Parameter(name="--json")] = False,
) -> None:
    """Show the KSM statistics and tunables.

    Args:
        ksm_path: KSM sysfs directory.
        as_json: Print the statistics as JSON.
    """
    from density.cli_runner import run_status

    setup_rich_logging()
    run_status(ksm_path, as_json=as_json)


@app.command
def bench(
    *,
    profile: str = str(BenchDefaults.PROFILE),
    scale: str | None = None,
    instances: int | None = None,
    mem_mib: int = BenchDefaults.MEM_MIB,
    warmup_sec: float | None = None,
    redirty_ms: int = 0,
    out: Path = BenchDefaults.OUTPUT_DIR,
    publish: Path | None = None,
    ksm_path: Path = KsmDefaults.PATH,
    log_level: str | None = None,
) -> None:
    """Run a reproducible KSM benchmark.

    Examples:
        sudo density enable
        sudo density bench --profile P1 --scale 10..80 --mem-mib 256 --out results

    Args:
        profile: P1 (identical), P2 (similar) or P3 (divergent).
        scale: Instance counts as min..max or min..max..step, e.g. 10..80..10.
        instances: A single fixed instance count, used when no scale is given.
        mem_mib: Memory per workload instance in MiB.
        warmup_sec: Seconds KSM gets to merge before measuring. Zero or less uses DENSITY_BENCH_DEFAULT_WARMUP.
        redirty_ms: Re-dirty interval for P3 in milliseconds. 0 keeps the profile default.
        out: Output directory for the JSON record and report.md.
        publish: Additional path for the JSON record, e.g. docs/data/benchmarks.latest.json.
        ksm_path: KSM sysfs directory.
        log_level: Log level (DEBUG, INFO, WARNING, ...).
    """
    from density.cli_runner import build_run_config, run_bench

    setup_rich_logging(log_level)
    try:
        config = build_run_config(
            profile=profile,
            scale=scale,
            instances=instances,
            mem_mib=mem_mib,
            warmup_sec=warmup_sec,
            redirty_ms=redirty_ms,
            out=out,
            publish=publish,
            ksm_path=ksm_path,
        )
    except ConfigurationError as e:
        raise_startup_error_and_exit(str(e), title="Configuration Error")
    run_bench(config)


@app.command(name=WORKLOAD_SUBCOMMAND, show=False)
def workload(
    *,
    mem_mib: int,
    workload_id: Annotated[int, Parameter(name="--id")],
    dirty_pct: float = 0.0,
    redirty_ms: int = 0,
) -> None:
    """Run one synthetic memory workload until SIGINT/SIGTERM (internal)."""
    from density.cli_runner import run_workload_command

    run_workload_command(mem_mib, workload_id, dirty_pct, redirty_ms)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
