# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Memory savings estimation from KSM statistics."""

import mmap
from collections.abc import Mapping

from density.common.constants import BYTES_PER_MIB

PAGES_SHARED = "pages_shared"
PAGES_SHARING = "pages_sharing"


def estimate_saved_mib(
    stats: Mapping[str, int] | None, page_size: int | None = None
) -> float:
    """Estimate the memory saved by KSM in MiB.

    ``pages_shared`` counts the pages kept as merge targets, ``pages_sharing`` the
    pages mapped onto them. Each sharing page beyond its target is one page saved.

    KSM can report inconsistent values while a scan is in flight, so the estimate
    is floored at zero: missing statistics, a non-positive target count, or fewer
    sharing pages than targets all yield 0.

    Args:
        stats: KSM statistics as read from sysfs (may be None or empty).
        page_size: Page size in bytes. Defaults to the platform page size.

    Returns:
        float: Estimated savings in MiB, never negative.
    """
    if not stats:
        return 0.0

    shared = stats.get(PAGES_SHARED, 0)
    sharing = stats.get(PAGES_SHARING, 0)
    if shared <= 0 or sharing < shared:
        return 0.0

    page_size = page_size or mmap.PAGESIZE
    return (sharing - shared) * page_size / BYTES_PER_MIB
