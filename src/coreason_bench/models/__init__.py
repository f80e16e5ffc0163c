# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_bench

# src/coreason_bench/models/__init__.py

"""
Data models for the benchmarking service.
"""

from .execution import (
    EXECUTION_FAILURE_TYPES,
    MAX_TIMEOUT_SECONDS,
    MIN_TIMEOUT_SECONDS,
    ExecutionFailure,
    ExecutionMetrics,
    ExecutionRequest,
    InternalError,
    MalformedOutput,
    MeasurementBudget,
    ProcessError,
    Timeout,
)
from .report import ComparisonReport, Rejected, Winner
from .validation import ValidationResult, Violation, ViolationCategory

__all__ = [
    "EXECUTION_FAILURE_TYPES",
    "MAX_TIMEOUT_SECONDS",
    "MIN_TIMEOUT_SECONDS",
    "ComparisonReport",
    "ExecutionFailure",
    "ExecutionMetrics",
    "ExecutionRequest",
    "InternalError",
    "MalformedOutput",
    "MeasurementBudget",
    "ProcessError",
    "Rejected",
    "Timeout",
    "ValidationResult",
    "Violation",
    "ViolationCategory",
    "Winner",
]
