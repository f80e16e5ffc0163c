# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_bench

from typing import Any

from mcp.server.fastmcp import FastMCP

from coreason_bench.bench import BenchAsync
from coreason_bench.utils.logger import logger

# Initialize Benchmark Logic
bench = BenchAsync()

# Initialize MCP Server
mcp = FastMCP("coreason-bench")


@mcp.tool()  # type: ignore[misc]
async def validate_code(snippet_a: str, snippet_b: str, shared_setup: str | None = None) -> dict[str, Any]:
    """
    Check two snippets (and optional shared setup) against the security rules without running them.
    Returns whether the submission is valid and every violation found.
    """
    try:
        result = await bench.validate(snippet_a, snippet_b, shared_setup)
    except Exception as e:
        logger.exception("validate_code failed")
        return {"kind": "internal_error", "message": f"Error validating code: {e!s}"}
    return result.model_dump(mode="json")


@mcp.tool()  # type: ignore[misc]
async def compare_snippets(
    snippet_a: str,
    snippet_b: str,
    shared_setup: str | None = None,
    timeout_seconds: float | None = None,
) -> dict[str, Any]:
    """
    Benchmark two Python snippets against the same setup and compare their throughput.
    Returns a comparison report (winner, ratio, summary, per-snippet metrics),
    or a rejection / execution failure with its reason.
    """
    try:
        result = await bench.compare(snippet_a, snippet_b, shared_setup, timeout_seconds)
    except Exception as e:
        logger.exception("compare_snippets failed")
        return {"kind": "internal_error", "message": f"Error comparing snippets: {e!s}"}

    payload = result.model_dump(mode="json")
    if hasattr(result, "describe"):
        payload["description"] = result.describe()
    return payload


def main() -> None:
    """Entry point for the MCP server."""
    mcp.run()


if __name__ == "__main__":  # pragma: no cover
    main()
