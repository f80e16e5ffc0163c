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

from coreason_bench.config import BenchConfig
from coreason_bench.factory import RuntimeFactory
from coreason_bench.runtime import BenchmarkRuntime
from coreason_bench.runtimes.local import LocalProcessRuntime


def test_factory_returns_local_runtime() -> None:
    config = BenchConfig(runtime="local")

    runtime = RuntimeFactory.get_runtime(config)

    assert isinstance(runtime, LocalProcessRuntime)
    assert isinstance(runtime, BenchmarkRuntime)


def test_factory_wires_config(tmp_path: Path) -> None:
    config = BenchConfig(
        python_executable="/opt/python/bin/python3",
        working_dir=tmp_path,
        script_dir=tmp_path / "scripts",
        warmup_seconds=0.1,
        measure_seconds=0.2,
        allocation_iterations=5,
        max_excerpt_chars=500,
    )

    runtime = RuntimeFactory.get_runtime(config)

    assert isinstance(runtime, LocalProcessRuntime)
    assert runtime.python_executable == "/opt/python/bin/python3"
    assert runtime.working_dir == tmp_path
    assert runtime.script_dir == tmp_path / "scripts"
    assert runtime.budget == config.budget()
    assert runtime.max_excerpt_chars == 500
