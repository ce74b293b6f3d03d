# Copyright 2026 Cisco Systems, Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
#
# SPDX-License-Identifier: Apache-2.0

"""
Pytest configuration and shared fixtures.

This file is automatically loaded by pytest before running tests.
All fixtures defined here are available to every test module without
explicit imports.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from unittest.mock import patch

import pytest

from qbscript_linter.core.engine import EngineOptions, scan_buffer
from qbscript_linter.core.linter import QbScriptLinter
from qbscript_linter.core.scan_policy import ScanPolicy

# A small script with one if/else/endif block and no defects:
#   00 if      -> lands on 07, just past "01 48" at 03
#   03 newline
#   04 else    -> lands on 09, just past "01 28" at 07
#   07 newline
#   08 endif
#   09 end of script
CLEAN_SCRIPT = bytes.fromhex("47 06 00 01 48 04 00 01 28 24")


# ---------------------------------------------------------------------------
# Environment
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _isolated_env():
    """Strip QBSCRIPT_LINTER_* variables so the host environment cannot leak in."""
    env = {k: v for k, v in os.environ.items() if not k.startswith("QBSCRIPT_LINTER_")}
    with patch.dict("os.environ", env, clear=True):
        yield


@pytest.fixture(autouse=True)
def _reset_package_log_level():
    """Undo any level the CLI set on the package logger."""
    package_logger = logging.getLogger("qbscript_linter")
    level = package_logger.level
    yield
    package_logger.setLevel(level)


# ---------------------------------------------------------------------------
# Factory fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def scan_hex():
    """Scan a buffer written as a hex string.

    Usage::

        outcome = scan_hex("04")
        outcome = scan_hex("38", corrected_opcode_ranges=True)
    """

    def _scan(hex_bytes: str, **options):
        return scan_buffer(bytes.fromhex(hex_bytes), options=EngineOptions(**options))

    return _scan


@pytest.fixture
def make_script(tmp_path: Path):
    """Factory fixture writing script bytes to disk.

    Usage::

        path = make_script(bytes.fromhex("24"), name="ok.qb")
    """

    def _make(data: bytes, name: str = "script.qb") -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
        return path

    return _make


@pytest.fixture
def make_policy(tmp_path: Path):
    """Factory fixture for a :class:`ScanPolicy` built from YAML text.

    The YAML is merged over the built-in defaults, as ``--policy`` would.
    """
    _counter = [0]

    def _make(yaml_text: str) -> ScanPolicy:
        _counter[0] += 1
        path = tmp_path / f"policy-{_counter[0]}.yaml"
        path.write_text(yaml_text, encoding="utf-8")
        return ScanPolicy.from_yaml(path)

    return _make


@pytest.fixture
def linter() -> QbScriptLinter:
    """Linter with the built-in default policy."""
    return QbScriptLinter()


@pytest.fixture
def clean_script() -> bytes:
    return CLEAN_SCRIPT
