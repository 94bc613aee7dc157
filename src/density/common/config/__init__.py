# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

from density.common.config.base_config import BaseConfig
from density.common.config.config_defaults import BenchDefaults, KsmDefaults
from density.common.config.ksm_config import KsmTunables
from density.common.config.scale import parse_instances, parse_scale

__all__ = [
    "BaseConfig",
    "BenchDefaults",
    "KsmDefaults",
    "KsmTunables",
    "parse_instances",
    "parse_scale",
]
