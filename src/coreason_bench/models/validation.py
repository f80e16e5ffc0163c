# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_bench

"""Data models for the static security gate."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ViolationCategory(str, Enum):
    """Categories of operations rejected before a snippet is executed."""

    SYSTEM_EXECUTION = "system-execution"
    NETWORK_ACCESS = "network-access"
    FILESYSTEM_ACCESS = "filesystem-access"
    PERSISTENT_STORE_MUTATION = "persistent-store-mutation"
    DYNAMIC_CODE_EVALUATION = "dynamic-code-evaluation"
    THREAD_SPAWNING = "thread-spawning"
    EMPTY_INPUT = "empty-input"


class Violation(BaseModel):
    """A single forbidden-pattern match (or an empty input)."""

    model_config = ConfigDict(frozen=True)

    category: ViolationCategory = Field(..., description="The violated category.")
    matched_text: str = Field(..., description="The source text that triggered the rule.")
    source: str | None = Field(
        default=None,
        description="The submission field the text came from (e.g. 'snippet_a').",
    )

    def describe(self) -> str:
        """Human readable one-liner for this violation."""
        label = self.category.value.replace("-", " ").capitalize()
        prefix = f"{self.source}: " if self.source else ""
        if self.category is ViolationCategory.EMPTY_INPUT:
            return f"{prefix}Code cannot be empty"
        return f"{prefix}{label} detected: '{self.matched_text}' is not allowed for security reasons"


class ValidationResult(BaseModel):
    """Outcome of running source text through the security gate."""

    model_config = ConfigDict(frozen=True)

    valid: bool
    violations: list[Violation] = Field(default_factory=list)

    @property
    def categories(self) -> set[ViolationCategory]:
        return {v.category for v in self.violations}
