# SPDX-FileCopyrightText: Copyright (c) 2025-2026 NVIDIA CORPORATION & AFFILIATES. All rights reserved.
# SPDX-License-Identifier: Apache-2.0

BYTES_PER_KIB = 1024
BYTES_PER_MIB = 1024 * 1024
KIB_PER_MIB = 1024
MILLIS_PER_SECOND = 1000

# Exit code conventionally used for processes stopped by SIGINT.
EXIT_CODE_CANCELLED = 130

WORKLOAD_SUBCOMMAND = "__workload"
KSMD_PROCESS_NAME = "ksmd"
