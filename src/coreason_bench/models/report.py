# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_bench

"""Data models for a two-snippet comparison."""

from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from coreason_bench.models.execution import ExecutionMetrics
from coreason_bench.models.validation import Violation


class Winner(str, Enum):
    A = "code_a"
    B = "code_b"
    TIE = "tie"


class ComparisonReport(BaseModel):
    """
    Comparative performance report for two snippets sharing the same setup.
    """

    model_config = ConfigDict(frozen=True)

    metrics_a: ExecutionMetrics = Field(..., description="Metrics for snippet A.")
    metrics_b: ExecutionMetrics = Field(..., description="Metrics for snippet B.")
    winner: Winner = Field(..., description="The snippet with the higher throughput, or a tie.")
    ratio: float = Field(..., ge=1.0, description="How many times faster the winner is (1.0 for a tie).")
    summary: str = Field(..., description="One sentence describing the outcome.")


class Rejected(BaseModel):
    """The submission was refused before any process was spawned."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["rejected"] = "rejected"
    message: str
    violations: list[Violation] = Field(default_factory=list)

    def describe(self) -> str:
        if not self.violations:
            return self.message
        details = "; ".join(v.describe() for v in self.violations)
        return f"{self.message}: {details}"
