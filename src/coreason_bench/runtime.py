# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_bench

from abc import ABC, abstractmethod

from coreason_bench.models import ExecutionFailure, ExecutionMetrics, ExecutionRequest


class BenchmarkRuntime(ABC):
    """
    Abstract base class for isolated snippet runtimes.
    Follows the Strategy Pattern: a stronger isolation boundary (container,
    microVM) can replace the local process without changing the contract.
    """

    @abstractmethod
    async def execute(self, request: ExecutionRequest) -> ExecutionMetrics | ExecutionFailure:
        """Benchmark one snippet in isolation.

        Materializes the benchmark program for the request, runs it outside the
        host process within ``request.timeout_seconds`` and parses its result line.

        Args:
            request: The validated snippet, shared setup and timeout.

        Returns:
            ExecutionMetrics on success, otherwise one of Timeout, ProcessError,
            MalformedOutput or InternalError. Execution problems are never raised.
        """
        pass  # pragma: no cover

    async def run_snippet(
        self, snippet: str, shared_setup: str | None = None, timeout_seconds: float = 30.0
    ) -> ExecutionMetrics | ExecutionFailure:
        """Build an ExecutionRequest and execute it.

        Raises:
            pydantic.ValidationError: If the snippet is blank or the timeout is outside 1..300 seconds.
        """
        request = ExecutionRequest(snippet=snippet, shared_setup=shared_setup, timeout_seconds=timeout_seconds)
        return await self.execute(request)
