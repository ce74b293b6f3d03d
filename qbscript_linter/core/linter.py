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
Linter front end: load scripts, run the scanner, apply the scan policy.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable
from pathlib import Path

from . import rules
from .engine import scan_buffer
from .exceptions import ScriptLoadError
from .loader import ScriptLoader
from .models import Diagnostic, Report, ScanResult, Severity
from .scan_policy import ScanPolicy

logger = logging.getLogger(__name__)


class QbScriptLinter:
    """Lints QB script files one at a time, with no state carried between them."""

    def __init__(self, policy: ScanPolicy | None = None, loader: ScriptLoader | None = None):
        """
        Initialize linter.

        Args:
            policy: Scan policy for rule selection and engine knobs.
                If None, loads built-in defaults.
            loader: Script loader. If None, a default loader is created.
        """
        self.policy = policy or ScanPolicy.default()
        self.loader = loader or ScriptLoader()
        self._engine_options = self.policy.engine_options()

    def lint_bytes(self, data: bytes, name: str = "<buffer>") -> ScanResult:
        """
        Lint an in-memory script.

        Args:
            data: Script bytes
            name: Label for the result and log messages

        Returns:
            ScanResult with policy-filtered diagnostics
        """
        start_time = time.time()
        outcome = scan_buffer(data, options=self._engine_options, source=name)
        result = ScanResult(
            script_path=name,
            diagnostics=self._apply_policy(outcome.diagnostics),
            size_bytes=len(data),
            bytes_scanned=outcome.bytes_scanned,
            scan_duration_seconds=time.time() - start_time,
            policy_name=self.policy.policy_name,
        )
        logger.info("%s: %d diagnostic(s)%s", name, len(result.diagnostics), " (aborted)" if result.aborted else "")
        return result

    def lint_file(self, path: str | Path) -> ScanResult:
        """
        Lint a single script file.

        Load failures do not raise; they come back as a result holding one
        fatal ``FILE_NOT_FOUND`` diagnostic.

        Args:
            path: Path to the script

        Returns:
            ScanResult for the file
        """
        try:
            data = self.loader.load_script(path)
        except ScriptLoadError as e:
            logger.warning("Could not load %s: %s", path, e)
            return ScanResult(
                script_path=str(path),
                diagnostics=[
                    Diagnostic(
                        position=0,
                        message=str(e),
                        rule_id=rules.FILE_NOT_FOUND,
                        severity=Severity.FATAL,
                        fatal=True,
                    )
                ],
                policy_name=self.policy.policy_name,
            )
        return self.lint_bytes(data, name=str(path))

    def lint_files(self, paths: Iterable[str | Path]) -> Report:
        """
        Lint several scripts, in the order given.

        Args:
            paths: Script paths

        Returns:
            Report aggregating every file's result
        """
        report = Report()
        for path in paths:
            report.add_scan_result(self.lint_file(path))
        return report

    def lint_directory(self, directory: str | Path, recursive: bool = True) -> Report:
        """
        Lint every script found under *directory*.

        Args:
            directory: Directory to search
            recursive: Search subdirectories too

        Returns:
            Report aggregating every file's result
        """
        directory = Path(directory)
        if recursive:
            return self.lint_files(self.loader.discover_scripts([directory], recursive=True))
        scripts = sorted(
            p for p in directory.iterdir() if p.is_file() and p.suffix.lower() in self.loader.extensions
        )
        return self.lint_files(scripts)

    def _apply_policy(self, diagnostics: list[Diagnostic]) -> list[Diagnostic]:
        """Drop disabled rules and apply severity overrides. Fatal diagnostics are always kept."""
        kept: list[Diagnostic] = []
        for diagnostic in diagnostics:
            if not diagnostic.fatal and diagnostic.rule_id in self.policy.disabled_rules:
                continue
            override = None if diagnostic.fatal else self.policy.get_severity_override(diagnostic.rule_id)
            if override:
                diagnostic.severity = Severity(override.upper())
            kept.append(diagnostic)
        return kept


def lint_file(path: str | Path, policy: ScanPolicy | None = None) -> ScanResult:
    """
    Convenience function to lint a single script.

    Args:
        path: Path to the script
        policy: Optional scan policy

    Returns:
        ScanResult
    """
    return QbScriptLinter(policy=policy).lint_file(path)


def lint_files(paths: Iterable[str | Path], policy: ScanPolicy | None = None) -> Report:
    """
    Convenience function to lint several scripts.

    Args:
        paths: Script paths
        policy: Optional scan policy

    Returns:
        Report
    """
    return QbScriptLinter(policy=policy).lint_files(paths)
