# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_bench

import sys
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from coreason_bench.models import MAX_TIMEOUT_SECONDS, MIN_TIMEOUT_SECONDS, MeasurementBudget


class BenchConfig(BaseSettings):
    """
    Configuration for the benchmark harness.
    """

    runtime: Literal["local"] = "local"
    default_timeout: float = Field(default=30.0, ge=MIN_TIMEOUT_SECONDS, le=MAX_TIMEOUT_SECONDS)

    # Child process
    python_executable: str = sys.executable
    working_dir: Path | None = None  # None -> host process cwd
    script_dir: Path | None = None  # None -> system temp dir

    # Measurement budget
    warmup_seconds: float = Field(default=2.0, gt=0)
    measure_seconds: float = Field(default=5.0, gt=0)
    allocation_iterations: int = Field(default=100, ge=1)

    # Comparison
    tie_threshold_percent: float = Field(default=5.0, ge=1.0, le=50.0)
    parallel_execution: bool = False

    max_excerpt_chars: int = Field(default=2000, ge=100)
    enable_audit_logging: bool = True

    model_config = SettingsConfigDict(
        env_prefix="COREASON_BENCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    def budget(self) -> MeasurementBudget:
        """Measurement budget handed to every materialized script."""
        return MeasurementBudget(
            warmup_seconds=self.warmup_seconds,
            measure_seconds=self.measure_seconds,
            allocation_iterations=self.allocation_iterations,
        )
