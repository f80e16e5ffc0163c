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
Local subprocess runtime.

Every execution gets a fresh interpreter running a materialized script from a
uniquely named temp file. The child inherits the host working directory and
environment (with the working directory on ``PYTHONPATH``) so snippets can
import application modules; isolation here means crash containment, not a
security boundary.
"""

import asyncio
import json
import os
import sys
import tempfile
import time
from pathlib import Path

from pydantic import ValidationError

from coreason_bench.models import (
    ExecutionFailure,
    ExecutionMetrics,
    ExecutionRequest,
    InternalError,
    MalformedOutput,
    MeasurementBudget,
    ProcessError,
    Timeout,
)
from coreason_bench.runtime import BenchmarkRuntime
from coreason_bench.script import materialize
from coreason_bench.utils.logger import logger

SCRIPT_PREFIX = "coreason_bench_"
SCRIPT_SUFFIX = ".py"


def last_output_line(text: str) -> str:
    """Return the last non-empty line of ``text`` (stripped), or an empty string."""
    for line in reversed(text.splitlines()):
        if line.strip():
            return line.strip()
    return ""


class LocalProcessRuntime(BenchmarkRuntime):
    """
    Runs each snippet in a new local Python process.
    """

    def __init__(
        self,
        python_executable: str = sys.executable,
        working_dir: Path | None = None,
        script_dir: Path | None = None,
        budget: MeasurementBudget | None = None,
        max_excerpt_chars: int = 2000,
    ):
        self.python_executable = python_executable
        self.working_dir = working_dir
        self.script_dir = script_dir
        self.budget = budget or MeasurementBudget()
        self.max_excerpt_chars = max_excerpt_chars

    async def execute(self, request: ExecutionRequest) -> ExecutionMetrics | ExecutionFailure:
        """
        Materialize, spawn, wait and parse. The script file is removed on every path.
        """
        try:
            script_path = self._write_script(request)
        except OSError as e:
            logger.error(f"Failed to write benchmark script: {e}")
            return ProcessError(exit_code=-1, stderr_excerpt=f"Failed to write benchmark script: {e}")

        try:
            return await self._run(script_path, request.timeout_seconds)
        finally:
            self._cleanup(script_path)

    def _write_script(self, request: ExecutionRequest) -> Path:
        content = materialize(request.snippet, request.shared_setup, self.budget)
        handle = tempfile.NamedTemporaryFile(
            "w",
            prefix=SCRIPT_PREFIX,
            suffix=SCRIPT_SUFFIX,
            dir=self.script_dir,
            delete=False,
            encoding="utf-8",
        )
        path = Path(handle.name)
        try:
            with handle:
                handle.write(content)
        except OSError:
            self._cleanup(path)
            raise
        return path

    def _cleanup(self, script_path: Path) -> None:
        try:
            script_path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"Failed to remove benchmark script {script_path}: {e}")

    def _child_env(self, cwd: Path) -> dict[str, str]:
        env = os.environ.copy()
        existing_pythonpath = env.get("PYTHONPATH", "")
        env["PYTHONPATH"] = f"{cwd}{os.pathsep}{existing_pythonpath}" if existing_pythonpath else str(cwd)
        env.setdefault("PYTHONIOENCODING", "utf-8")
        return env

    async def _run(self, script_path: Path, timeout: float) -> ExecutionMetrics | ExecutionFailure:
        cwd = self.working_dir or Path.cwd()
        logger.info(f"Spawning benchmark process for {script_path.name} (timeout {timeout:g}s)")

        try:
            proc = await asyncio.create_subprocess_exec(
                self.python_executable,
                str(script_path),
                cwd=cwd,
                env=self._child_env(cwd),
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            logger.error(f"Failed to spawn benchmark process: {e}")
            return ProcessError(exit_code=-1, stderr_excerpt=f"Failed to spawn benchmark process: {e}")

        start_time = time.monotonic()
        try:
            stdout_bytes, stderr_bytes = await asyncio.wait_for(proc.communicate(), timeout=timeout)
        except asyncio.TimeoutError:
            logger.warning(f"Benchmark process {proc.pid} exceeded {timeout:g}s. Killing it.")
            return Timeout(seconds=timeout)
        finally:
            if proc.returncode is None:
                await self._kill(proc)

        duration = time.monotonic() - start_time
        exit_code = proc.returncode if proc.returncode is not None else -1
        logger.info(f"Benchmark process {proc.pid} exited with code {exit_code} after {duration:.2f}s")

        stdout = stdout_bytes.decode("utf-8", errors="replace") if stdout_bytes else ""
        stderr = stderr_bytes.decode("utf-8", errors="replace") if stderr_bytes else ""
        return self.parse_output(stdout, stderr, exit_code)

    @staticmethod
    async def _kill(proc: asyncio.subprocess.Process) -> None:
        try:
            proc.kill()
        except ProcessLookupError:
            pass
        await proc.wait()

    def parse_output(self, stdout: str, stderr: str, exit_code: int) -> ExecutionMetrics | ExecutionFailure:
        """Turn the child's streams and exit status into metrics or a typed failure.

        Args:
            stdout: Full standard output of the child.
            stderr: Full standard error of the child.
            exit_code: The child's exit status.

        Returns:
            ExecutionMetrics, MalformedOutput, InternalError or ProcessError.
        """
        line = last_output_line(stdout)

        if exit_code == 0:
            if not line:
                logger.error("Benchmark process produced no output")
                return MalformedOutput(raw_text=self._excerpt(stdout))
            try:
                return ExecutionMetrics.model_validate_json(line)
            except ValidationError as e:
                logger.error(f"Failed to parse benchmark results: {e.error_count()} error(s)")
                return MalformedOutput(raw_text=self._excerpt(line))

        error = self._parse_error_line(line)
        if error is not None:
            logger.warning(f"Benchmark failed inside the child: {error.message}")
            return error

        streams = "\n".join(part for part in (stderr.strip(), stdout.strip()) if part)
        logger.error(f"Benchmark process failed with exit code {exit_code}")
        return ProcessError(exit_code=exit_code, stderr_excerpt=self._excerpt(streams))

    @staticmethod
    def _parse_error_line(line: str) -> InternalError | None:
        if not line:
            return None
        try:
            data = json.loads(line)
        except json.JSONDecodeError:
            return None
        if not isinstance(data, dict) or "error" not in data:
            return None

        context = data.get("context")
        if isinstance(context, list):
            context_lines = [str(item) for item in context]
        elif context:
            context_lines = [str(context)]
        else:
            context_lines = []
        return InternalError(message=str(data["error"]), context=context_lines)

    def _excerpt(self, text: str) -> str:
        text = text.strip()
        if len(text) <= self.max_excerpt_chars:
            return text
        return "..." + text[-self.max_excerpt_chars :]
