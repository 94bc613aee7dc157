# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Page content pattern shared by all workload processes.

Every page of a workload's region starts as the same template so that KSM can
merge it with the corresponding page of every other workload. A deterministic,
per-workload subset of pages is then made unique ("dirtied") by overwriting the
first 8 bytes of the page with a marker derived from the workload id.
"""

import math
import struct

TEMPLATE_MARKER = 0x44454E5331545930  # "DENS1TY0"
DIRTY_SALT = 0xBADC0FFEE

# Odd mixing constants for spreading dirty pages across the region.
INDEX_MIX_ID = 1315423911
INDEX_MIX_ORDINAL = 2654435761

MARKER_SIZE = 8
_UINT64_MASK = (1 << 64) - 1
_MARKER_STRUCT = struct.Struct("<Q")

# Size of the chunk written at once while filling the template.
_FILL_CHUNK_PAGES = 256


def dirty_page_count(total_pages: int, dirty_pct: float) -> int:
    """Number of dirty page slots: floor(total_pages * dirty_pct / 100)."""
    return math.floor(total_pages * dirty_pct / 100)


def select_dirty_indices(
    workload_id: int, total_pages: int, dirty_pct: float
) -> list[int]:
    """Select the page indices a workload makes unique.

    Slot ``j`` maps to ``(workload_id * INDEX_MIX_ID + j * INDEX_MIX_ORDINAL) mod
    total_pages`` (with 64-bit wraparound), so the same inputs always yield the same
    sequence and nothing needs to be persisted to re-derive it.

    NOTE: Indices may repeat, most visibly at high dirty percentages on small
    regions. Fewer distinct pages than requested are then dirtied. Recorded results
    depend on this exact selection, so repeats are kept rather than de-duplicated.

    Args:
        workload_id: Identity of the workload instance.
        total_pages: Number of pages in the region.
        dirty_pct: Percentage of pages to dirty (0..100).

    Returns:
        list[int]: Exactly ``dirty_page_count(total_pages, dirty_pct)`` indices.

    Raises:
        ValueError: If total_pages is not positive or dirty_pct is outside 0..100.
    """
    if total_pages <= 0:
        raise ValueError(f"total_pages must be > 0, got {total_pages}")
    if not 0 <= dirty_pct <= 100:
        raise ValueError(f"dirty_pct must be within 0..100, got {dirty_pct}")

    count = dirty_page_count(total_pages, dirty_pct)
    base = workload_id * INDEX_MIX_ID
    return [
        ((base + j * INDEX_MIX_ORDINAL) & _UINT64_MASK) % total_pages
        for j in range(count)
    ]


def build_page_template(page_size: int) -> bytes:
    """Build one page filled with the repeating template marker."""
    if page_size <= 0 or page_size % MARKER_SIZE:
        raise ValueError(
            f"page_size must be a positive multiple of {MARKER_SIZE}, got {page_size}"
        )
    return _MARKER_STRUCT.pack(TEMPLATE_MARKER) * (page_size // MARKER_SIZE)


def fill_template(buf, page_size: int) -> None:
    """Write the template marker across the whole buffer.

    Writes in chunks of whole pages so no buffer-sized temporary is created.
    A trailing partial page receives the leading bytes of the template.
    """
    page = build_page_template(page_size)
    chunk = page * _FILL_CHUNK_PAGES
    view = memoryview(buf)
    try:
        size = len(view)
        offset = 0
        while offset < size:
            end = min(offset + len(chunk), size)
            view[offset:end] = chunk[: end - offset]
            offset = end
    finally:
        view.release()


def dirty_marker(workload_id: int, counter: int) -> int:
    """Unique marker for a workload's dirty pages in re-dirty cycle ``counter``."""
    return ((workload_id << 32) ^ counter ^ DIRTY_SALT) & _UINT64_MASK


def apply_dirty(
    buf, page_size: int, workload_id: int, indices: list[int], counter: int
) -> int:
    """Overwrite the first 8 bytes of every selected page with the dirty marker.

    The rest of each page keeps the template, so only the marker prevents a merge.

    Returns:
        int: Number of writes performed (repeated indices are written again).
    """
    marker = dirty_marker(workload_id, counter)
    size = len(buf)
    written = 0
    for index in indices:
        offset = index * page_size
        if offset + MARKER_SIZE > size:
            continue
        _MARKER_STRUCT.pack_into(buf, offset, marker)
        written += 1
    return written
