# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/coreason_bench

import pytest

from coreason_bench import validator as validator_module
from coreason_bench.models import ValidationResult, Violation, ViolationCategory
from coreason_bench.validator import FORBIDDEN_PATTERNS, PatternValidator, validate, validate_submission


@pytest.mark.parametrize(
    "code, category",
    [
        ("os.system('ls')", ViolationCategory.SYSTEM_EXECUTION),
        ('system("ls")', ViolationCategory.SYSTEM_EXECUTION),
        ("commands.getoutput('ls')", ViolationCategory.SYSTEM_EXECUTION),
        ("import subprocess\nsubprocess.run(['ls'])", ViolationCategory.SYSTEM_EXECUTION),
        ("from os import popen", ViolationCategory.SYSTEM_EXECUTION),
        ("import socket", ViolationCategory.NETWORK_ACCESS),
        ("requests.get('http://example.com')", ViolationCategory.NETWORK_ACCESS),
        ("from urllib.request import urlopen", ViolationCategory.NETWORK_ACCESS),
        ("open('data.txt').read()", ViolationCategory.FILESYSTEM_ACCESS),
        ("shutil.rmtree('/tmp/x')", ViolationCategory.FILESYSTEM_ACCESS),
        ("os.remove('x')", ViolationCategory.FILESYSTEM_ACCESS),
        ("user.save()", ViolationCategory.PERSISTENT_STORE_MUTATION),
        ("cursor.execute('DROP TABLE users')", ViolationCategory.PERSISTENT_STORE_MUTATION),
        ("session.commit()", ViolationCategory.PERSISTENT_STORE_MUTATION),
        ("table.drop(engine)", ViolationCategory.PERSISTENT_STORE_MUTATION),
        ("eval('1 + 1')", ViolationCategory.DYNAMIC_CODE_EVALUATION),
        ("exec('x = 1')", ViolationCategory.DYNAMIC_CODE_EVALUATION),
        ("__import__('os')", ViolationCategory.DYNAMIC_CODE_EVALUATION),
        ("getattr(obj, 'secret')", ViolationCategory.DYNAMIC_CODE_EVALUATION),
        ("().__class__.__bases__[0].__subclasses__()", ViolationCategory.DYNAMIC_CODE_EVALUATION),
        ("import threading", ViolationCategory.THREAD_SPAWNING),
        ("Thread(target=work).start()", ViolationCategory.THREAD_SPAWNING),
        ("from multiprocessing import Pool", ViolationCategory.THREAD_SPAWNING),
        ("loop.run_in_executor(None, work)", ViolationCategory.THREAD_SPAWNING),
        # aliased modules and attribute-call spellings
        ("import posix\nposix.system('id')", ViolationCategory.SYSTEM_EXECUTION),
        ("import os as o\no.system('id')", ViolationCategory.SYSTEM_EXECUTION),
        ("import os as o\no.popen('id')", ViolationCategory.SYSTEM_EXECUTION),
        ("o.execv('/bin/sh', ['sh'])", ViolationCategory.SYSTEM_EXECUTION),
        ("pid = o.fork()", ViolationCategory.SYSTEM_EXECUTION),
        ("from posix import system as run", ViolationCategory.SYSTEM_EXECUTION),
        ("import nt", ViolationCategory.SYSTEM_EXECUTION),
        ("import socket as s\ns.create_connection(('example.com', 80))", ViolationCategory.NETWORK_ACCESS),
        ("from http import client", ViolationCategory.NETWORK_ACCESS),
        ("import urllib.request as ur", ViolationCategory.NETWORK_ACCESS),
        ("io.open('data.txt')", ViolationCategory.FILESYSTEM_ACCESS),
        ("builtins.open('data.txt')", ViolationCategory.FILESYSTEM_ACCESS),
        ("import shutil as sh\nsh.copy('a', 'b')", ViolationCategory.FILESYSTEM_ACCESS),
        ("from pathlib import Path as P\nP('x').write_text('y')", ViolationCategory.FILESYSTEM_ACCESS),
        ("User.objects.filter(id=1).delete()", ViolationCategory.PERSISTENT_STORE_MUTATION),
        ("import sqlite3 as db", ViolationCategory.PERSISTENT_STORE_MUTATION),
        ("conn.cursor().executemany(sql, rows)", ViolationCategory.PERSISTENT_STORE_MUTATION),
        ("builtins.exec('x = 1')", ViolationCategory.DYNAMIC_CODE_EVALUATION),
        ("import builtins as b\nb.eval('1')", ViolationCategory.DYNAMIC_CODE_EVALUATION),
        ("__builtins__['exec']('x = 1')", ViolationCategory.DYNAMIC_CODE_EVALUATION),
        ("import importlib as il\nil.import_module('os')", ViolationCategory.DYNAMIC_CODE_EVALUATION),
        ("t.start_new_thread(work, ())", ViolationCategory.THREAD_SPAWNING),
        ("from threading import Thread as T\nT(target=work)", ViolationCategory.THREAD_SPAWNING),
        ("import concurrent.futures as cf", ViolationCategory.THREAD_SPAWNING),
    ],
)
def test_forbidden_code_is_rejected(code: str, category: ViolationCategory) -> None:
    result = validate(code)

    assert not result.valid
    assert category in result.categories


def test_system_call_match_is_reported() -> None:
    result = validate("os.system('ls')")

    violation = next(v for v in result.violations if v.category is ViolationCategory.SYSTEM_EXECUTION)
    assert violation.matched_text == "os.system"
    assert violation.source is None


@pytest.mark.parametrize(
    "code",
    [
        "sum(x * x for x in range(1000))",
        "sorted(data, key=lambda v: -v)",
        "[i for i in range(10) if i % 2]",
        "'-'.join(map(str, range(10)))",
        "{k: v for k, v in zip('abc', range(3))}",
        "re.compile(r'\\d+').findall('a1b22')",
        "my_eval(1)",
        "total = 0\nfor n in items:\n    total += n",
    ],
)
def test_benign_code_passes(code: str) -> None:
    result = validate(code)

    assert result.valid
    assert result.violations == []


def test_all_categories_collected_in_one_pass() -> None:
    code = "os.system('ls')\nopen('x')\neval('1')\nimport threading"

    result = validate(code)

    assert result.categories >= {
        ViolationCategory.SYSTEM_EXECUTION,
        ViolationCategory.FILESYSTEM_ACCESS,
        ViolationCategory.DYNAMIC_CODE_EVALUATION,
        ViolationCategory.THREAD_SPAWNING,
    }


@pytest.mark.parametrize("code", ["", "   ", "\n\t\n", None])
def test_empty_input_is_rejected(code: str | None) -> None:
    result = validate(code)

    assert not result.valid
    assert [v.category for v in result.violations] == [ViolationCategory.EMPTY_INPUT]


def test_dict_update_is_a_known_false_positive() -> None:
    # Matching is textual, so ordinary dict.update() looks like an ORM write.
    result = validate("d = {}\nd.update({'a': 1})")

    assert not result.valid
    assert result.categories == {ViolationCategory.PERSISTENT_STORE_MUTATION}


def test_validate_submission_labels_sources() -> None:
    result = validate_submission("sum(range(10))", "os.system('ls')", "import socket")

    assert not result.valid
    sources = {v.source: v.category for v in result.violations}
    assert "snippet_a" not in sources
    assert sources["snippet_b"] is ViolationCategory.SYSTEM_EXECUTION
    assert sources["shared_setup"] is ViolationCategory.NETWORK_ACCESS


def test_validate_submission_requires_both_snippets() -> None:
    result = validate_submission("x = 1", "   ")

    assert not result.valid
    assert result.violations == [
        Violation(category=ViolationCategory.EMPTY_INPUT, matched_text="", source="snippet_b"),
    ]


@pytest.mark.parametrize("setup", [None, "", "  \n"])
def test_validate_submission_skips_blank_setup(setup: str | None) -> None:
    result = validate_submission("x = 1", "y = 2", setup)

    assert result == ValidationResult(valid=True, violations=[])


def test_add_pattern_is_instance_only() -> None:
    custom = PatternValidator()
    custom.add_pattern(ViolationCategory.DYNAMIC_CODE_EVALUATION, r"\bnumpy\b")

    assert not custom.validate("import numpy").valid
    assert validate("import numpy").valid
    assert len(custom.patterns) == len(FORBIDDEN_PATTERNS) + 1
    assert len(validator_module._default_validator.patterns) == len(FORBIDDEN_PATTERNS)


def test_custom_pattern_table() -> None:
    custom = PatternValidator(patterns=[])

    assert custom.validate("os.system('ls')").valid
    assert not custom.validate("").valid


def test_violation_describe() -> None:
    violation = Violation(
        category=ViolationCategory.SYSTEM_EXECUTION,
        matched_text="os.system",
        source="snippet_a",
    )
    empty = Violation(category=ViolationCategory.EMPTY_INPUT, matched_text="")

    assert violation.describe() == (
        "snippet_a: System execution detected: 'os.system' is not allowed for security reasons"
    )
    assert empty.describe() == "Code cannot be empty"
