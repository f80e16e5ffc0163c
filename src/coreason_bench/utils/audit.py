# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_bench

import hashlib

from coreason_bench.utils.logger import logger


class AuditLogger:
    """Audit trail for code submitted to the benchmark harness.

    Records a SHA-256 fingerprint of every snippet before it is executed.
    """

    def __init__(self, service_name: str = "coreason-bench", enabled: bool = True):
        """Initializes the AuditLogger.

        Args:
            service_name: The name of the service recorded with each entry.
            enabled: Whether to emit audit entries.
        """
        self.service_name = service_name
        self.enabled = enabled
        if self.enabled:
            logger.info(f"Audit logging enabled for {service_name}")

    def log_pre_execution(self, code: str, label: str) -> str:
        """Log an execution attempt.

        Args:
            code: The code about to be executed.
            label: Which part of the submission the code is (e.g. 'snippet_a').

        Returns:
            str: The SHA-256 hash of the code.
        """
        code_hash = hashlib.sha256(code.encode("utf-8")).hexdigest()
        if self.enabled:
            logger.bind(service=self.service_name).info(
                f"AUDIT: Executing {label}. Hash: {code_hash}, Length: {len(code)}"
            )
        return code_hash
