# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_bench

from typing import cast
from uuid import uuid4

import anyio

from coreason_bench.comparator import Comparator
from coreason_bench.config import BenchConfig
from coreason_bench.factory import RuntimeFactory
from coreason_bench.models import ComparisonReport, ExecutionFailure, Rejected, ValidationResult
from coreason_bench.runtime import BenchmarkRuntime
from coreason_bench.utils.audit import AuditLogger
from coreason_bench.utils.logger import logger
from coreason_bench.validator import PatternValidator


class BenchAsync:
    """Async-native Benchmark Service (The Core).

    Gates a submission through the pattern validator, then benchmarks and
    compares the two snippets.
    """

    def __init__(
        self,
        config: BenchConfig | None = None,
        runtime: BenchmarkRuntime | None = None,
        validator: PatternValidator | None = None,
    ):
        """Initializes the BenchAsync service.

        Args:
            config: Configuration for the benchmark harness.
            runtime: Optional runtime override. Built from ``config`` when omitted.
            validator: Optional validator override (e.g. with extra rules).
        """
        self.config = config or BenchConfig()
        self.runtime: BenchmarkRuntime = runtime or RuntimeFactory.get_runtime(self.config)
        self.validator = validator or PatternValidator()
        self.auditor = AuditLogger(enabled=self.config.enable_audit_logging)
        self.comparator = Comparator(
            self.runtime,
            tie_threshold_percent=self.config.tie_threshold_percent,
            parallel=self.config.parallel_execution,
        )
        self.session_id = str(uuid4())

    async def __aenter__(self) -> "BenchAsync":
        logger.info("Benchmark session started", session_id=self.session_id)
        return self

    async def __aexit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        logger.info("Benchmark session closed", session_id=self.session_id)

    async def validate(
        self,
        snippet_a: str | None,
        snippet_b: str | None,
        shared_setup: str | None = None,
    ) -> ValidationResult:
        """Checks a submission against the forbidden-pattern table without running it.

        Args:
            snippet_a: First snippet.
            snippet_b: Second snippet.
            shared_setup: Optional setup code.

        Returns:
            ValidationResult: Every violation found, labelled by field.
        """
        return self.validator.validate_submission(snippet_a, snippet_b, shared_setup)

    async def compare(
        self,
        snippet_a: str | None,
        snippet_b: str | None,
        shared_setup: str | None = None,
        timeout_seconds: float | None = None,
    ) -> ComparisonReport | ExecutionFailure | Rejected:
        """Validates, benchmarks and compares two snippets.

        Nothing is executed unless validation passes.

        Args:
            snippet_a: First snippet.
            snippet_b: Second snippet.
            shared_setup: Optional setup code run before each snippet.
            timeout_seconds: Per-execution limit. Defaults to ``config.default_timeout``.

        Returns:
            ComparisonReport on success, Rejected when validation fails, or the
            ExecutionFailure of the first snippet that failed.
        """
        result = await self.validate(snippet_a, snippet_b, shared_setup)
        if not result.valid:
            logger.warning(
                f"Submission rejected: {', '.join(v.describe() for v in result.violations)}",
                session_id=self.session_id,
            )
            return Rejected(message="Security validation failed", violations=result.violations)

        # validation rejects None and blank snippets
        snippet_a = cast(str, snippet_a)
        snippet_b = cast(str, snippet_b)

        if shared_setup is not None and shared_setup.strip():
            self.auditor.log_pre_execution(shared_setup, "shared_setup")
        self.auditor.log_pre_execution(snippet_a, "snippet_a")
        self.auditor.log_pre_execution(snippet_b, "snippet_b")

        timeout = self.config.default_timeout if timeout_seconds is None else timeout_seconds
        logger.info(f"Comparing snippets (timeout {timeout:g}s)", session_id=self.session_id)
        return await self.comparator.compare(shared_setup, snippet_a, snippet_b, timeout)


class Bench:
    """Sync Facade for BenchAsync (The Facade).

    Wraps BenchAsync and executes methods via anyio.run.
    """

    def __init__(
        self,
        config: BenchConfig | None = None,
        runtime: BenchmarkRuntime | None = None,
        validator: PatternValidator | None = None,
    ):
        self._async = BenchAsync(config, runtime, validator)

    def __enter__(self) -> "Bench":
        """Context entry point."""
        anyio.run(self._async.__aenter__)
        return self

    def __exit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        """Context exit point."""
        anyio.run(self._async.__aexit__, exc_type, exc_val, exc_tb)

    def validate(
        self,
        snippet_a: str | None,
        snippet_b: str | None,
        shared_setup: str | None = None,
    ) -> ValidationResult:
        """Checks a submission synchronously."""
        return anyio.run(self._async.validate, snippet_a, snippet_b, shared_setup)

    def compare(
        self,
        snippet_a: str | None,
        snippet_b: str | None,
        shared_setup: str | None = None,
        timeout_seconds: float | None = None,
    ) -> ComparisonReport | ExecutionFailure | Rejected:
        """Validates, benchmarks and compares two snippets synchronously.

        Returns:
            ComparisonReport, Rejected or an ExecutionFailure.
        """
        return anyio.run(self._async.compare, snippet_a, snippet_b, shared_setup, timeout_seconds)
