# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Parsing of instance-count scales ("10..80..10") and instance lists."""

from typing import Any

_SCALE_SEPARATOR = ".."


def parse_scale(value: str) -> list[int]:
    """Parse ``min..max`` or ``min..max..step`` into an ordered list of counts.

    Args:
        value: Scale expression. All parts must be positive integers, max >= min.

    Returns:
        list[int]: min, min + step, ... up to and including max when reachable.

    Raises:
        ValueError: If the expression is malformed or the bounds are invalid.
    """
    parts = [part.strip() for part in value.split(_SCALE_SEPARATOR)]
    if len(parts) not in (2, 3):
        raise ValueError(
            f"Invalid scale format: '{value}'. "
            f"Expected min..max or min..max..step (e.g. 10..80 or 10..80..10)."
        )

    try:
        numbers = [int(part) for part in parts]
    except ValueError as err:
        raise ValueError(
            f"Invalid scale: '{value}'. All parts must be integers "
            f"(e.g. 10..80 or 10..80..10)."
        ) from err

    minimum, maximum = numbers[0], numbers[1]
    step = numbers[2] if len(numbers) == 3 else 1

    if step <= 0:
        raise ValueError(f"Invalid scale: '{value}'. Step must be > 0.")
    if minimum <= 0 or maximum <= 0 or maximum < minimum:
        raise ValueError(
            f"Invalid scale bounds: {minimum}..{maximum}. "
            f"Both bounds must be positive and max must be >= min."
        )

    return list(range(minimum, maximum + 1, step))


def parse_instances(value: Any) -> list[int]:
    """Normalize instance counts given as an int, a scale string, a
    comma-separated string, or a list.

    Raises:
        ValueError: If the value cannot be interpreted as instance counts.
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid instance count: {value!r}")

    if isinstance(value, int):
        return [value]

    if isinstance(value, str):
        text = value.strip()
        if _SCALE_SEPARATOR in text:
            return parse_scale(text)
        parts = [part.strip() for part in text.split(",") if part.strip()]
        try:
            return [int(part) for part in parts]
        except ValueError as err:
            raise ValueError(
                f"Invalid instance list: '{value}'. "
                f"Expected an integer, a comma-separated list, or a scale like 10..80..10."
            ) from err

    if isinstance(value, (list, tuple)):
        return list(value)

    raise ValueError(
        f"Invalid instances type {type(value).__name__}. "
        f"Expected int, str, or list[int]."
    )
