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
Renders the self-contained Python program that benchmarks one snippet.

User code is embedded as base64 payloads and only decoded and ``exec``-ed by
the child interpreter, so nothing in the snippet is ever spliced into the
generated source. The child talks back through exactly one JSON line on
stdout: the metrics record on success, or ``{"error", "context"}`` with exit
status 1 on failure.
"""

import base64
from string import Template

from coreason_bench.models import MeasurementBudget

CONTEXT_LINES = 10

SCRIPT_TEMPLATE = Template(
    '''\
import ast
import base64
import contextlib
import json
import os
import statistics
import sys
import time
import timeit
import traceback
import tracemalloc

SNIPPET_PAYLOAD = $snippet_payload
SETUP_PAYLOAD = $setup_payload
WARMUP_SECONDS = $warmup_seconds
MEASURE_SECONDS = $measure_seconds
ALLOCATION_ITERATIONS = $allocation_iterations
CONTEXT_LINES = $context_lines
RESULT_NAME = "__benchmark_result__"


def _decode(payload):
    if payload is None:
        return None
    return base64.b64decode(payload).decode("utf-8")


def _measure_throughput(call):
    deadline = time.perf_counter() + WARMUP_SECONDS
    call()
    while time.perf_counter() < deadline:
        call()

    timer = timeit.Timer(call)
    number, _ = timer.autorange()
    rates = []
    deadline = time.perf_counter() + MEASURE_SECONDS
    while True:
        elapsed = timer.timeit(number)
        rates.append(number / max(elapsed, 1e-9))
        if time.perf_counter() >= deadline:
            break

    stddev = statistics.stdev(rates) if len(rates) > 1 else 0.0
    return statistics.fmean(rates), stddev


def _keep_last_value(source, filename):
    tree = ast.parse(source, filename, "exec")
    if tree.body and isinstance(tree.body[-1], ast.Expr):
        last = tree.body[-1]
        target = ast.Name(id=RESULT_NAME, ctx=ast.Store())
        tree.body[-1] = ast.copy_location(ast.Assign(targets=[target], value=last.value), last)
        ast.fix_missing_locations(tree)
    return compile(tree, filename, "exec")


def _profile_allocations(code, namespace):
    ignored = (
        tracemalloc.Filter(False, tracemalloc.__file__),
        tracemalloc.Filter(False, __file__),
    )
    blocks = 0
    peak = 0
    tracemalloc.start()
    try:
        for _ in range(ALLOCATION_ITERATIONS):
            tracemalloc.clear_traces()
            exec(code, namespace)
            peak = max(peak, tracemalloc.get_traced_memory()[1])
            snapshot = tracemalloc.take_snapshot().filter_traces(ignored)
            blocks += sum(stat.count for stat in snapshot.statistics("filename"))
            namespace.pop(RESULT_NAME, None)
    finally:
        tracemalloc.stop()
    return blocks, peak / 1024.0 / 1024.0


def _context(exc):
    frames = [frame for frame in traceback.extract_tb(exc.__traceback__) if frame.filename != __file__]
    chunks = traceback.format_list(frames) + traceback.format_exception_only(type(exc), exc)
    lines = [line for chunk in chunks for line in chunk.splitlines() if line.strip()]
    return lines[-CONTEXT_LINES:]


def main():
    real_stdout = sys.stdout
    devnull = open(os.devnull, "w")
    try:
        setup_source = _decode(SETUP_PAYLOAD)
        snippet_source = _decode(SNIPPET_PAYLOAD)
        namespace = {"__name__": "__benchmark__", "__builtins__": __builtins__}

        with contextlib.redirect_stdout(devnull):
            if setup_source is not None:
                exec(compile(setup_source, "<shared_setup>", "exec"), namespace)
            code = compile(snippet_source, "<snippet>", "exec")
            profiled = _keep_last_value(snippet_source, "<snippet>")

            def call():
                exec(code, namespace)

            throughput, stddev = _measure_throughput(call)
            allocations, memory_mb = _profile_allocations(profiled, namespace)

            start = time.perf_counter()
            call()
            execution_seconds = time.perf_counter() - start

        result = {
            "throughput_per_sec": round(throughput, 2),
            "throughput_stddev": round(stddev, 2),
            "allocation_count": int(allocations),
            "memory_megabytes": round(memory_mb, 4),
            "execution_seconds": round(execution_seconds, 6),
        }
    except BaseException as exc:
        error = {"error": f"{type(exc).__name__}: {exc}", "context": _context(exc)}
        real_stdout.write(json.dumps(error) + "\\n")
        real_stdout.flush()
        devnull.close()
        sys.exit(1)

    devnull.close()
    real_stdout.write(json.dumps(result) + "\\n")
    real_stdout.flush()


main()
'''
)


def encode_source(source: str | None) -> str | None:
    """Base64 encode source text for embedding, keeping ``None`` as is."""
    if source is None:
        return None
    return base64.b64encode(source.encode("utf-8")).decode("ascii")


def materialize(
    snippet: str,
    shared_setup: str | None = None,
    budget: MeasurementBudget | None = None,
) -> str:
    """Produce the program text that benchmarks ``snippet``.

    Args:
        snippet: The code under measurement.
        shared_setup: Optional code evaluated once, sharing its namespace with the snippet.
        budget: Warm-up, sampling window and allocation repeat count.

    Returns:
        str: A complete Python program that prints one JSON result line.
    """
    budget = budget or MeasurementBudget()
    return SCRIPT_TEMPLATE.substitute(
        snippet_payload=repr(encode_source(snippet)),
        setup_payload=repr(encode_source(shared_setup)),
        warmup_seconds=repr(float(budget.warmup_seconds)),
        measure_seconds=repr(float(budget.measure_seconds)),
        allocation_iterations=int(budget.allocation_iterations),
        context_lines=CONTEXT_LINES,
    )
