# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Tests for scale and instance-count parsing."""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from density.common.config.scale import parse_instances, parse_scale


class TestParseScale:
    @pytest.mark.parametrize(
        "value,expected",
        [
            ("10..80", list(range(10, 81))),
            ("10..80..10", [10, 20, 30, 40, 50, 60, 70, 80]),
            ("1..10..4", [1, 5, 9]),
            ("5..5", [5]),
            (" 2 .. 6 .. 2 ", [2, 4, 6]),
        ],
    )
    def test_valid(self, value, expected):
        assert parse_scale(value) == expected

    @pytest.mark.parametrize(
        "value,message",
        [
            ("10", "Invalid scale format"),
            ("1..2..3..4", "Invalid scale format"),
            ("a..5", "must be integers"),
            ("1..5..x", "must be integers"),
            ("0..5", "Both bounds must be positive"),
            ("5..1", "max must be >= min"),
            ("1..5..0", "Step must be > 0"),
            ("1..5..-2", "Step must be > 0"),
        ],
    )
    def test_invalid(self, value, message):
        with pytest.raises(ValueError, match=message):
            parse_scale(value)

    @given(
        minimum=st.integers(min_value=1, max_value=500),
        span=st.integers(min_value=0, max_value=500),
        step=st.integers(min_value=1, max_value=50),
    )
    def test_properties(self, minimum, span, step):
        maximum = minimum + span
        counts = parse_scale(f"{minimum}..{maximum}..{step}")
        assert counts[0] == minimum
        assert counts[-1] <= maximum
        assert counts[-1] + step > maximum
        assert all(b - a == step for a, b in zip(counts, counts[1:]))


class TestParseInstances:
    @pytest.mark.parametrize(
        "value,expected",
        [
            (7, [7]),
            ("7", [7]),
            ("1, 2, 4", [1, 2, 4]),
            ("2..6..2", [2, 4, 6]),
            ([3, 1], [3, 1]),
            ((5,), [5]),
        ],
    )
    def test_valid(self, value, expected):
        assert parse_instances(value) == expected

    @pytest.mark.parametrize("value", [True, "a,b", 1.5, {"n": 1}])
    def test_invalid(self, value):
        with pytest.raises(ValueError):
            parse_instances(value)
