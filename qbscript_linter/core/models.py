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
Data models for script diagnostics and lint results.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


class Severity(str, Enum):
    """Severity levels for diagnostics."""

    FATAL = "FATAL"
    ERROR = "ERROR"
    WARNING = "WARNING"
    INFO = "INFO"
    CLEAN = "CLEAN"


# Most severe first
SEVERITY_ORDER = [Severity.FATAL, Severity.ERROR, Severity.WARNING, Severity.INFO]


@dataclass
class Diagnostic:
    """A structural defect found at a byte offset of a script."""

    position: int  # Byte offset of the opcode or operand field being validated
    message: str
    rule_id: str
    severity: Severity = Severity.ERROR
    fatal: bool = False  # The scan of this buffer stopped here
    metadata: dict[str, Any] = field(default_factory=dict)

    def format_position(self) -> str:
        """Render the offset as eight upper-case hex digits."""
        return f"{self.position:08X}"

    def to_dict(self) -> dict[str, Any]:
        """Convert diagnostic to dictionary."""
        return {
            "position": self.position,
            "offset_hex": self.format_position(),
            "message": self.message,
            "rule_id": self.rule_id,
            "severity": self.severity.value,
            "fatal": self.fatal,
            "metadata": self.metadata,
        }


@dataclass
class ScanOutcome:
    """What the engine found in one buffer, in discovery order."""

    diagnostics: list[Diagnostic] = field(default_factory=list)
    bytes_scanned: int = 0

    @property
    def aborted(self) -> bool:
        """True when a fatal condition stopped the scan before the end of the buffer."""
        return any(d.fatal for d in self.diagnostics)

    @property
    def is_clean(self) -> bool:
        return not self.diagnostics


@dataclass
class ScanResult:
    """Results from linting a single script file."""

    script_path: str
    diagnostics: list[Diagnostic] = field(default_factory=list)
    size_bytes: int = 0
    bytes_scanned: int = 0
    scan_duration_seconds: float = 0.0
    timestamp: datetime = field(default_factory=datetime.now)
    policy_name: str = "default"

    @property
    def is_clean(self) -> bool:
        """True when the file parsed fully and nothing was reported."""
        return not self.diagnostics

    @property
    def aborted(self) -> bool:
        return any(d.fatal for d in self.diagnostics)

    @property
    def has_errors(self) -> bool:
        """Check if any diagnostic should fail the run."""
        return any(d.severity in (Severity.FATAL, Severity.ERROR) for d in self.diagnostics)

    @property
    def max_severity(self) -> Severity:
        """Get the highest severity level found."""
        for severity in SEVERITY_ORDER:
            if any(d.severity == severity for d in self.diagnostics):
                return severity
        return Severity.CLEAN

    @property
    def fatal_diagnostic(self) -> Diagnostic | None:
        for diagnostic in self.diagnostics:
            if diagnostic.fatal:
                return diagnostic
        return None

    def get_diagnostics_by_severity(self, severity: Severity) -> list[Diagnostic]:
        """Get all diagnostics of a specific severity."""
        return [d for d in self.diagnostics if d.severity == severity]

    def get_diagnostics_by_rule(self, rule_id: str) -> list[Diagnostic]:
        """Get all diagnostics produced by one rule."""
        return [d for d in self.diagnostics if d.rule_id == rule_id]

    def to_dict(self) -> dict[str, Any]:
        """Convert scan result to dictionary."""
        return {
            "script_path": self.script_path,
            "is_clean": self.is_clean,
            "has_errors": self.has_errors,
            "aborted": self.aborted,
            "max_severity": self.max_severity.value,
            "size_bytes": self.size_bytes,
            "bytes_scanned": self.bytes_scanned,
            "diagnostics_count": len(self.diagnostics),
            "diagnostics": [d.to_dict() for d in self.diagnostics],
            "scan_duration_seconds": self.scan_duration_seconds,
            "duration_ms": int(self.scan_duration_seconds * 1000),
            "policy_name": self.policy_name,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass
class Report:
    """Aggregated report from linting one or more scripts."""

    scan_results: list[ScanResult] = field(default_factory=list)
    total_files_scanned: int = 0
    total_diagnostics: int = 0
    fatal_count: int = 0
    error_count: int = 0
    warning_count: int = 0
    info_count: int = 0
    clean_count: int = 0
    timestamp: datetime = field(default_factory=datetime.now)

    def add_scan_result(self, result: ScanResult):
        """Add a scan result and update counters."""
        self.scan_results.append(result)
        self.total_files_scanned += 1
        self.total_diagnostics += len(result.diagnostics)

        for diagnostic in result.diagnostics:
            if diagnostic.severity == Severity.FATAL:
                self.fatal_count += 1
            elif diagnostic.severity == Severity.ERROR:
                self.error_count += 1
            elif diagnostic.severity == Severity.WARNING:
                self.warning_count += 1
            elif diagnostic.severity == Severity.INFO:
                self.info_count += 1

        if result.is_clean:
            self.clean_count += 1

    @property
    def has_errors(self) -> bool:
        return any(r.has_errors for r in self.scan_results)

    @property
    def failed_files(self) -> list[ScanResult]:
        return [r for r in self.scan_results if r.has_errors]

    def to_dict(self) -> dict[str, Any]:
        """Convert report to dictionary."""
        return {
            "summary": {
                "total_files_scanned": self.total_files_scanned,
                "total_diagnostics": self.total_diagnostics,
                "clean_files": self.clean_count,
                "diagnostics_by_severity": {
                    "fatal": self.fatal_count,
                    "error": self.error_count,
                    "warning": self.warning_count,
                    "info": self.info_count,
                },
                "timestamp": self.timestamp.isoformat(),
            },
            "results": [result.to_dict() for result in self.scan_results],
        }
