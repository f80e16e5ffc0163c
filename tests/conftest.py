# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_bench

from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from coreason_bench.config import BenchConfig
from coreason_bench.models import ExecutionMetrics, MeasurementBudget
from coreason_bench.runtimes.local import LocalProcessRuntime


def make_metrics(throughput: float, **overrides: Any) -> ExecutionMetrics:
    values: dict[str, Any] = {
        "throughput_per_sec": throughput,
        "throughput_stddev": 1.5,
        "allocation_count": 12,
        "memory_megabytes": 0.0123,
        "execution_seconds": 0.000042,
    }
    values.update(overrides)
    return ExecutionMetrics(**values)


@pytest.fixture
def fast_budget() -> MeasurementBudget:
    return MeasurementBudget(warmup_seconds=0.01, measure_seconds=0.05, allocation_iterations=3)


@pytest.fixture
def local_runtime(tmp_path: Path, fast_budget: MeasurementBudget) -> LocalProcessRuntime:
    return LocalProcessRuntime(working_dir=tmp_path, script_dir=tmp_path, budget=fast_budget)


@pytest.fixture
def fast_config(tmp_path: Path) -> BenchConfig:
    return BenchConfig(
        warmup_seconds=0.01,
        measure_seconds=0.05,
        allocation_iterations=3,
        working_dir=tmp_path,
        script_dir=tmp_path,
    )


@pytest.fixture
def mock_runtime() -> Any:
    mock = MagicMock()
    mock.execute = AsyncMock(return_value=make_metrics(100.0))
    return mock


@pytest.fixture
def metrics() -> Any:
    """Factory for ExecutionMetrics with a given throughput."""
    return make_metrics
