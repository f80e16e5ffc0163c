# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_bench

"""Data models for a single isolated snippet execution."""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

MIN_TIMEOUT_SECONDS = 1
MAX_TIMEOUT_SECONDS = 300


class MeasurementBudget(BaseModel):
    """How long and how often the child program exercises the snippet."""

    model_config = ConfigDict(frozen=True)

    warmup_seconds: float = Field(default=2.0, gt=0, description="Warm-up time before sampling throughput.")
    measure_seconds: float = Field(default=5.0, gt=0, description="Throughput sampling window.")
    allocation_iterations: int = Field(
        default=100, ge=1, description="Repeated calls profiled for allocations and memory."
    )


class ExecutionRequest(BaseModel):
    """A validated request to benchmark one snippet.

    Attributes:
        snippet: The code under measurement. Must not be blank.
        shared_setup: Optional code evaluated once before the snippet, sharing its namespace.
        timeout_seconds: Hard wall-clock bound on the spawned process.
    """

    model_config = ConfigDict(frozen=True)

    snippet: str
    shared_setup: str | None = None
    timeout_seconds: float = Field(default=30.0, ge=MIN_TIMEOUT_SECONDS, le=MAX_TIMEOUT_SECONDS)

    @field_validator("snippet")
    @classmethod
    def _snippet_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Snippet is required and cannot be empty")
        return value

    @field_validator("shared_setup")
    @classmethod
    def _blank_setup_is_none(cls, value: str | None) -> str | None:
        if value is None or not value.strip():
            return None
        return value


class ExecutionMetrics(BaseModel):
    """Metrics reported by the child program for one snippet."""

    model_config = ConfigDict(frozen=True)

    throughput_per_sec: float = Field(..., ge=0, description="Iterations of the snippet per second.")
    throughput_stddev: float = Field(..., ge=0, description="Standard deviation of the sampled rates.")
    allocation_count: int = Field(..., ge=0, description="Memory blocks allocated during the profiling pass.")
    memory_megabytes: float = Field(..., ge=0, description="Peak traced memory of the profiling pass in MiB.")
    execution_seconds: float = Field(..., ge=0, description="Wall-clock duration of a single call.")


class Timeout(BaseModel):
    """The child exceeded its wall-clock budget and was killed."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["timeout"] = "timeout"
    seconds: float

    def describe(self) -> str:
        return f"Execution exceeded {self.seconds:g} seconds"


class ProcessError(BaseModel):
    """The child exited non-zero without a structured error line."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["process_error"] = "process_error"
    exit_code: int
    stderr_excerpt: str = ""

    def describe(self) -> str:
        return f"Benchmark process failed with exit code {self.exit_code}: {self.stderr_excerpt}"


class MalformedOutput(BaseModel):
    """The child exited cleanly but its last line was not a metrics record."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["malformed_output"] = "malformed_output"
    raw_text: str = ""

    def describe(self) -> str:
        return f"Failed to parse benchmark results. Output: {self.raw_text!r}"


class InternalError(BaseModel):
    """The snippet (or setup) raised inside the child's instrumented region."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["internal_error"] = "internal_error"
    message: str
    context: list[str] = Field(default_factory=list)

    def describe(self) -> str:
        return f"Benchmark failed: {self.message}"


ExecutionFailure = Annotated[
    Union[Timeout, ProcessError, MalformedOutput, InternalError],
    Field(discriminator="kind"),
]

EXECUTION_FAILURE_TYPES = (Timeout, ProcessError, MalformedOutput, InternalError)
