# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_bench

"""
coreason-bench
"""

__version__ = "0.1.0"
__author__ = "Gowtham A Rao"
__email__ = "gowtham.rao@coreason.ai"

from .bench import Bench, BenchAsync
from .comparator import Comparator
from .config import BenchConfig
from .factory import RuntimeFactory
from .models import (
    ComparisonReport,
    ExecutionMetrics,
    ExecutionRequest,
    InternalError,
    MalformedOutput,
    ProcessError,
    Rejected,
    Timeout,
    ValidationResult,
    Violation,
    ViolationCategory,
    Winner,
)
from .runtime import BenchmarkRuntime
from .runtimes.local import LocalProcessRuntime
from .validator import PatternValidator, validate, validate_submission

__all__ = [
    "Bench",
    "BenchAsync",
    "BenchConfig",
    "BenchmarkRuntime",
    "Comparator",
    "ComparisonReport",
    "ExecutionMetrics",
    "ExecutionRequest",
    "InternalError",
    "LocalProcessRuntime",
    "MalformedOutput",
    "PatternValidator",
    "ProcessError",
    "Rejected",
    "RuntimeFactory",
    "Timeout",
    "ValidationResult",
    "Violation",
    "ViolationCategory",
    "Winner",
    "validate",
    "validate_submission",
]
