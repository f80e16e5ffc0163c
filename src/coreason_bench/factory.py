# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_bench

from coreason_bench.config import BenchConfig
from coreason_bench.runtime import BenchmarkRuntime
from coreason_bench.runtimes.local import LocalProcessRuntime


class RuntimeFactory:
    """
    Factory to create BenchmarkRuntime instances based on configuration.
    """

    @staticmethod
    def get_runtime(config: BenchConfig) -> BenchmarkRuntime:
        """
        Returns an instance of the configured BenchmarkRuntime.
        """
        if config.runtime == "local":
            return LocalProcessRuntime(
                python_executable=config.python_executable,
                working_dir=config.working_dir,
                script_dir=config.script_dir,
                budget=config.budget(),
                max_excerpt_chars=config.max_excerpt_chars,
            )
        else:
            # This should be unreachable due to Pydantic validation, but for safety:
            raise ValueError(f"Unknown runtime: {config.runtime}")  # pragma: no cover
