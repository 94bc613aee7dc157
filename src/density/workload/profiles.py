# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0
"""Mapping from benchmark profile to workload dirtying behavior."""

from dataclasses import dataclass

from density.common.constants import MILLIS_PER_SECOND
from density.common.enums import Profile

DIVERGENT_DEFAULT_REDIRTY_SECONDS = 1.0


@dataclass(frozen=True, slots=True)
class ProfileParameters:
    """Dirtying behavior handed to every workload of a step."""

    dirty_pct: float
    redirty_interval: float
    """Seconds between re-dirty cycles. 0 disables re-dirtying."""

    @property
    def redirty_ms(self) -> int:
        return int(self.redirty_interval * MILLIS_PER_SECOND)


_PROFILE_TABLE: dict[Profile, ProfileParameters] = {
    Profile.IDENTICAL: ProfileParameters(dirty_pct=0.0, redirty_interval=0.0),
    Profile.SIMILAR: ProfileParameters(dirty_pct=5.0, redirty_interval=0.0),
    Profile.DIVERGENT: ProfileParameters(
        dirty_pct=50.0, redirty_interval=DIVERGENT_DEFAULT_REDIRTY_SECONDS
    ),
}


def resolve_profile(
    profile: Profile, redirty_override: float | None = None
) -> ProfileParameters:
    """Return the (dirty_pct, redirty_interval) pair for a profile.

    Only the divergent profile's interval can be overridden; the override is ignored
    for the other profiles.
    """
    profile = Profile(profile)
    params = _PROFILE_TABLE[profile]
    if (
        profile is Profile.DIVERGENT
        and redirty_override is not None
        and redirty_override > 0
    ):
        return ProfileParameters(
            dirty_pct=params.dirty_pct, redirty_interval=redirty_override
        )
    return params
