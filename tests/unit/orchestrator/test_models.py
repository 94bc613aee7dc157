# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Tests for orchestrator data models."""

import sys
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from density.common.enums import Profile, StepStatus
from density.common.environment import Environment
from density.orchestrator.models import RunConfig, RunResult, StepResult


class TestRunConfig:
    """Tests for RunConfig validation."""

    def test_defaults(self):
        config = RunConfig(instances=[4])
        assert config.profile is Profile.IDENTICAL
        assert config.mem_mib == 256
        assert str(config.output_dir) == "results"
        assert str(config.ksm_path) == "/sys/kernel/mm/ksm"
        assert config.exec_command == [sys.executable, "-m", "density"]
        assert config.redirty_interval is None
        assert config.publish_path is None

    def test_scale_string(self):
        assert RunConfig(instances="10..40..10").instances == [10, 20, 30, 40]

    def test_single_count(self):
        assert RunConfig(instances=5).instances == [5]

    def test_order_is_preserved(self):
        assert RunConfig(instances=[8, 2, 4]).instances == [8, 2, 4]

    def test_numeric_strings_are_coerced(self):
        assert RunConfig(instances=["3", 6]).instances == [3, 6]

    @pytest.mark.parametrize("instances", [["a", 2], [1.5], [{"n": 1}]])
    def test_rejects_non_integer_counts(self, instances):
        with pytest.raises(ValidationError, match="valid integer"):
            RunConfig(instances=instances)

    @pytest.mark.parametrize(
        "instances,message",
        [
            (None, "No instance counts"),
            ([], "non-empty"),
            ([1, 0], "positive integers"),
            ([3, -1], "positive integers"),
            ([2, 4, 2], "Duplicate instance counts"),
            ("80..10", "max must be >= min"),
            ("1..5..0", "Step must be > 0"),
        ],
    )
    def test_invalid_instances(self, instances, message):
        with pytest.raises(ValidationError, match=message):
            RunConfig(instances=instances)

    def test_instances_required(self):
        with pytest.raises(ValidationError):
            RunConfig()

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("p1", Profile.IDENTICAL),
            ("P2", Profile.SIMILAR),
            ("divergent", Profile.DIVERGENT),
            (Profile.SIMILAR, Profile.SIMILAR),
        ],
    )
    def test_profile_parsing(self, value, expected):
        assert RunConfig(instances=[1], profile=value).profile is expected

    def test_invalid_profile(self):
        with pytest.raises(ValidationError, match="Invalid profile"):
            RunConfig(instances=[1], profile="P9")

    @pytest.mark.parametrize("warmup", [None, 0, -1, -0.5])
    def test_warmup_falls_back_to_default(self, warmup):
        with patch.multiple(Environment.BENCH, DEFAULT_WARMUP=20.0):
            config = RunConfig(instances=[1], warmup_seconds=warmup)
        assert config.warmup_seconds == 20.0

    def test_warmup_default(self):
        with patch.multiple(Environment.BENCH, DEFAULT_WARMUP=12.5):
            assert RunConfig(instances=[1]).warmup_seconds == 12.5

    def test_positive_warmup_is_kept(self):
        with patch.multiple(Environment.BENCH, DEFAULT_WARMUP=20.0):
            assert RunConfig(instances=[1], warmup_seconds=0.5).warmup_seconds == 0.5

    @pytest.mark.parametrize("field,value", [("mem_mib", 0), ("redirty_interval", 0)])
    def test_rejects_non_positive(self, field, value):
        with pytest.raises(ValidationError):
            RunConfig(instances=[1], **{field: value})

    def test_rejects_empty_exec_command(self):
        with pytest.raises(ValidationError):
            RunConfig(instances=[1], exec_command=[])

    def test_rejects_unknown_fields(self):
        with pytest.raises(ValidationError):
            RunConfig(instances=[1], repetitions=3)


class TestStepResult:
    def make_step(self, **kwargs) -> StepResult:
        kwargs.setdefault("n", 2)
        return StepResult(
            profile=Profile.IDENTICAL, mem_mib=16, warmup_seconds=0, **kwargs
        )

    def test_defaults(self):
        step = self.make_step()
        assert step.status is StepStatus.RECORDED
        assert step.alive == 0
        assert step.estimated_saved_mib == 0.0
        assert step.ksmd_ticks_delta is None
        assert step.post_ksm is None

    def test_is_frozen(self):
        step = self.make_step()
        with pytest.raises(ValidationError):
            step.alive = 5

    def test_rejects_negative_savings(self):
        with pytest.raises(ValidationError):
            self.make_step(estimated_saved_mib=-1.0)


class TestRunResult:
    def test_artifacts_are_not_serialized(self, tmp_path):
        result = RunResult(profile=Profile.SIMILAR, artifacts=[tmp_path / "report.md"])
        data = result.model_dump(mode="json")
        assert "artifacts" not in data
        assert data["profile"] == "P2"
        assert data["steps"] == []
        assert "started_at" in data
