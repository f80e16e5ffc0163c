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
Static security gate for benchmark code.

Code is matched as raw text against a fixed table of regular expressions,
grouped by category of dangerous operation (process execution, network,
filesystem, persistent stores, dynamic evaluation/reflection, threads).

This is a heuristic gate, not a semantic guarantee. There is no parsing, so
safe code that happens to contain a matched substring (``d.update(...)``, a
variable called ``requests``) is rejected, and obfuscated code that assembles
a forbidden call at runtime is not detected. The child process boundary is
what contains crashes; this table only keeps the obvious primitives out.
"""

import re
from collections.abc import Iterable
from dataclasses import dataclass

from coreason_bench.models import ValidationResult, Violation, ViolationCategory


@dataclass(frozen=True)
class ForbiddenPattern:
    """A single rule in the deny-list."""

    category: ViolationCategory
    matcher: re.Pattern[str]


def _rules(category: ViolationCategory, *patterns: str) -> tuple[ForbiddenPattern, ...]:
    return tuple(ForbiddenPattern(category, re.compile(p)) for p in patterns)


FORBIDDEN_PATTERNS: tuple[ForbiddenPattern, ...] = (
    *_rules(
        ViolationCategory.SYSTEM_EXECUTION,
        r"\bos\s*\.\s*(system|popen|exec[lv]p?e?|spawn[lv]p?e?|posix_spawnp?|fork|forkpty|kill|killpg|startfile)\b",
        r"\bfrom\s+(os|posix|nt)\s+import\b[^\n]*\b(system|popen|exec[lv]p?e?|spawn[lv]p?e?|fork|kill)\b",
        r"\b(system|popen)\s*\(",
        r"\.\s*(exec[lv]p?e?|spawn[lv]p?e?|posix_spawnp?|fork|forkpty|startfile)\s*\(",
        r"\b(posix|nt)\s*\.|\bimport\s+[^\n]*\b(posix|nt)\b",
        r"\bsubprocess\b",
        r"\bpty\s*\.\s*spawn\b",
        r"\bcommands\s*\.\s*get(status)?output\b",
    ),
    *_rules(
        ViolationCategory.NETWORK_ACCESS,
        r"\bsocket\b",
        r"\burllib\d?\b",
        r"\bhttp\s*\.\s*(client|server)\b",
        r"\bfrom\s+http\s+import\b[^\n]*\b(client|server)\b",
        r"\brequests\b",
        r"\bhttpx\b",
        r"\baiohttp\b",
        r"\b(ftplib|smtplib|poplib|imaplib|telnetlib|xmlrpc)\b",
        r"\basyncio\s*\.\s*(open_connection|start_server)\b",
    ),
    *_rules(
        ViolationCategory.FILESYSTEM_ACCESS,
        r"\bopen\s*\(",
        r"\bos\s*\.\s*(remove|unlink|rename|renames|replace|rmdir|removedirs|mkdir|makedirs|chmod|chown"
        r"|truncate|listdir|scandir|walk|link|symlink|chdir)\b",
        r"\bshutil\b",
        r"\bpathlib\b",
        r"\bPath\s*\(",
        r"\.\s*(write_text|write_bytes|read_text|read_bytes|touch)\s*\(",
        r"\btempfile\b",
        r"\bglob\s*\.\s*i?glob\b",
        r"\bfileinput\b",
    ),
    *_rules(
        ViolationCategory.PERSISTENT_STORE_MUTATION,
        r"\.\s*save\s*\(",
        r"\.\s*delete\s*\(",
        r"\.\s*update\s*\(",
        r"\.\s*(bulk_create|bulk_update|get_or_create|update_or_create)\s*\(",
        r"\.\s*create\s*\(",
        r"\.\s*create_all\s*\(",
        r"\.\s*drop_all\s*\(",
        r"\.\s*(insert|insert_one|insert_many|upsert)\s*\(",
        r"\.\s*commit\s*\(",
        r"\.\s*(truncate|drop)\s*\(",
        r"\.\s*(execute|executemany|executescript)\s*\(",
        r"\b(sqlite3|shelve|dbm)\b",
    ),
    *_rules(
        ViolationCategory.DYNAMIC_CODE_EVALUATION,
        r"(?<![\w.])eval\s*\(",
        r"(?<![\w.])exec\s*\(",
        r"(?<![\w.])compile\s*\(",
        r"\b__import__\b",
        r"\bimportlib\b",
        r"(?<![\w.])(getattr|setattr|delattr)\s*\(",
        r"(?<![\w.])(globals|locals|vars)\s*\(",
        r"__(subclasses|globals|builtins|code|dict|bases|mro)__",
        r"\b(builtins|ctypes|marshal|pickle)\b",
    ),
    *_rules(
        ViolationCategory.THREAD_SPAWNING,
        r"\bthreading\b",
        r"\b_thread\b",
        r"\bstart_new_thread\b",
        r"\bThread\s*\(",
        r"\bmultiprocessing\b",
        r"\bconcurrent\s*\.\s*futures\b",
        r"\b(ThreadPoolExecutor|ProcessPoolExecutor)\b",
        r"\basyncio\s*\.\s*to_thread\b",
        r"\.\s*run_in_executor\s*\(",
    ),
)


class PatternValidator:
    """
    Checks source text against the forbidden-pattern table.

    Instances never mutate the module-level table. Extra rules added through
    ``add_pattern`` only apply to that instance.
    """

    def __init__(self, patterns: Iterable[ForbiddenPattern] | None = None) -> None:
        self._patterns: list[ForbiddenPattern] = list(FORBIDDEN_PATTERNS if patterns is None else patterns)

    @property
    def patterns(self) -> tuple[ForbiddenPattern, ...]:
        return tuple(self._patterns)

    def add_pattern(self, category: ViolationCategory, pattern: str) -> None:
        """
        Add a custom rule to this validator.

        Args:
            category: Category reported when the rule matches.
            pattern: Regex pattern string.
        """
        self._patterns.append(ForbiddenPattern(category, re.compile(pattern)))

    def find_violations(self, text: str | None, source: str | None = None) -> list[Violation]:
        """
        Collect every rule matching ``text``.

        All rules are evaluated, so the caller gets the complete set in one pass.
        Blank input yields a single ``empty-input`` violation.
        """
        if text is None or not text.strip():
            return [Violation(category=ViolationCategory.EMPTY_INPUT, matched_text="", source=source)]

        violations: list[Violation] = []
        for rule in self._patterns:
            match = rule.matcher.search(text)
            if match:
                violations.append(Violation(category=rule.category, matched_text=match.group(0), source=source))
        return violations

    def validate(self, text: str | None) -> ValidationResult:
        """Validate a single piece of source text."""
        violations = self.find_violations(text)
        return ValidationResult(valid=not violations, violations=violations)

    def validate_submission(
        self,
        snippet_a: str | None,
        snippet_b: str | None,
        shared_setup: str | None = None,
    ) -> ValidationResult:
        """Validate both snippets and, when present, the shared setup.

        Snippets are required. The shared setup is optional and only scanned
        when it contains something other than whitespace.

        Args:
            snippet_a: First snippet.
            snippet_b: Second snippet.
            shared_setup: Optional setup code run before each snippet.

        Returns:
            ValidationResult: Violations labelled with the field they came from.
        """
        violations = self.find_violations(snippet_a, source="snippet_a")
        violations += self.find_violations(snippet_b, source="snippet_b")
        if shared_setup is not None and shared_setup.strip():
            violations += self.find_violations(shared_setup, source="shared_setup")
        return ValidationResult(valid=not violations, violations=violations)


_default_validator = PatternValidator()


def validate(text: str | None) -> ValidationResult:
    """Validate source text against the default forbidden-pattern table."""
    return _default_validator.validate(text)


def validate_submission(
    snippet_a: str | None,
    snippet_b: str | None,
    shared_setup: str | None = None,
) -> ValidationResult:
    """Validate a full submission against the default forbidden-pattern table."""
    return _default_validator.validate_submission(snippet_a, snippet_b, shared_setup)
