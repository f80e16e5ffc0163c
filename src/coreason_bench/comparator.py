# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_bench

import asyncio

from pydantic import ValidationError

from coreason_bench.models import (
    EXECUTION_FAILURE_TYPES,
    ComparisonReport,
    ExecutionFailure,
    ExecutionMetrics,
    ExecutionRequest,
    ProcessError,
    Rejected,
    Winner,
)
from coreason_bench.runtime import BenchmarkRuntime
from coreason_bench.utils.logger import logger

DEFAULT_TIE_THRESHOLD_PERCENT = 5.0

# Throughput is reported to 2 decimals, so a 0.0 reading means a true rate below this.
THROUGHPUT_RESOLUTION = 0.005


def decide_winner(
    throughput_a: float, throughput_b: float, threshold_percent: float = DEFAULT_TIE_THRESHOLD_PERCENT
) -> Winner:
    """Pick the snippet with the higher throughput.

    Differences below ``threshold_percent`` of the larger throughput are a tie.
    """
    fastest = max(throughput_a, throughput_b)
    if fastest <= 0:
        return Winner.TIE

    diff_percent = abs(throughput_a - throughput_b) / fastest * 100
    if diff_percent < threshold_percent:
        return Winner.TIE
    return Winner.A if throughput_a > throughput_b else Winner.B


def performance_ratio(throughput_a: float, throughput_b: float, winner: Winner) -> float:
    """How many times faster the winner is, rounded to 2 decimals (1.0 for a tie).

    A loser that measured 0.0 is taken at ``THROUGHPUT_RESOLUTION``, which makes
    the ratio a lower bound instead of an infinite value.
    """
    if winner is Winner.TIE:
        return 1.0

    faster, slower = (throughput_a, throughput_b) if winner is Winner.A else (throughput_b, throughput_a)
    return round(faster / max(slower, THROUGHPUT_RESOLUTION), 2)


def summarize(
    winner: Winner,
    ratio: float,
    threshold_percent: float = DEFAULT_TIE_THRESHOLD_PERCENT,
    loser_unmeasurable: bool = False,
) -> str:
    if winner is Winner.TIE:
        return f"Both code snippets have similar performance (within {threshold_percent:g}% difference)"

    fast, slow = ("A", "B") if winner is Winner.A else ("B", "A")
    if loser_unmeasurable:
        return (
            f"Code {fast} is at least {ratio}× faster than Code {slow} "
            f"(Code {slow} ran below {THROUGHPUT_RESOLUTION:g} iterations/sec)"
        )
    return f"Code {fast} is {ratio}× faster than Code {slow}"


class Comparator:
    """Benchmarks two snippets against the same setup and compares them.

    Runs are sequential by default so the two measurements do not compete for
    CPU. ``parallel=True`` runs both at once, trading measurement fairness for
    wall time.
    """

    def __init__(
        self,
        runtime: BenchmarkRuntime,
        tie_threshold_percent: float = DEFAULT_TIE_THRESHOLD_PERCENT,
        parallel: bool = False,
    ):
        """Initializes the Comparator.

        Args:
            runtime: The runtime used for both executions.
            tie_threshold_percent: Throughput difference (percent) below which the result is a tie.
            parallel: Run both snippets concurrently instead of one after the other.
        """
        self.runtime = runtime
        self.tie_threshold_percent = tie_threshold_percent
        self.parallel = parallel

    async def compare(
        self,
        shared_setup: str | None,
        snippet_a: str,
        snippet_b: str,
        timeout_seconds: float,
    ) -> ComparisonReport | ExecutionFailure | Rejected:
        """Benchmark both snippets and build the comparison report.

        Args:
            shared_setup: Optional setup code run before each snippet.
            snippet_a: First snippet.
            snippet_b: Second snippet.
            timeout_seconds: Per-execution wall-clock limit.

        Returns:
            ComparisonReport when both executions succeed. Otherwise the first
            failure (A before B), or Rejected for an invalid request. No partial
            report is ever produced.
        """
        try:
            request_a = ExecutionRequest(snippet=snippet_a, shared_setup=shared_setup, timeout_seconds=timeout_seconds)
            request_b = ExecutionRequest(snippet=snippet_b, shared_setup=shared_setup, timeout_seconds=timeout_seconds)
        except ValidationError as e:
            details = "; ".join(str(err["msg"]) for err in e.errors())
            logger.warning(f"Rejected comparison request: {details}")
            return Rejected(message=f"Invalid request: {details}")

        if self.parallel:
            result_a, result_b = await asyncio.gather(self._execute(request_a), self._execute(request_b))
            if isinstance(result_a, EXECUTION_FAILURE_TYPES):
                return result_a
        else:
            result_a = await self._execute(request_a)
            if isinstance(result_a, EXECUTION_FAILURE_TYPES):
                logger.warning(f"Snippet A failed ({result_a.kind}); skipping snippet B")
                return result_a
            result_b = await self._execute(request_b)

        if isinstance(result_b, EXECUTION_FAILURE_TYPES):
            return result_b

        return self.build_report(result_a, result_b)

    async def _execute(self, request: ExecutionRequest) -> ExecutionMetrics | ExecutionFailure:
        try:
            return await self.runtime.execute(request)
        except Exception as e:
            logger.exception("Benchmark runtime raised unexpectedly")
            return ProcessError(exit_code=-1, stderr_excerpt=f"Benchmark harness error: {type(e).__name__}: {e}")

    def build_report(self, metrics_a: ExecutionMetrics, metrics_b: ExecutionMetrics) -> ComparisonReport:
        """Derive winner, ratio and summary from two metrics records."""
        winner = decide_winner(metrics_a.throughput_per_sec, metrics_b.throughput_per_sec, self.tie_threshold_percent)
        ratio = performance_ratio(metrics_a.throughput_per_sec, metrics_b.throughput_per_sec, winner)
        loser = metrics_b if winner is Winner.A else metrics_a
        loser_unmeasurable = winner is not Winner.TIE and loser.throughput_per_sec <= 0
        return ComparisonReport(
            metrics_a=metrics_a,
            metrics_b=metrics_b,
            winner=winner,
            ratio=ratio,
            summary=summarize(winner, ratio, self.tie_threshold_percent, loser_unmeasurable),
        )
