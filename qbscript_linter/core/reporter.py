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
Per-scan diagnostic collector.

One ``ErrorReporter`` lives for exactly one buffer scan, so "did this file
have an error" is a property of the scan rather than process-wide state.
"""

from __future__ import annotations

import logging

from .models import Diagnostic, ScanOutcome
from .rules import get_rule

logger = logging.getLogger(__name__)


class ErrorReporter:
    """Accumulates diagnostics in discovery order."""

    def __init__(self, source: str = "<buffer>"):
        self.source = source
        self._diagnostics: list[Diagnostic] = []

    def report(self, rule_id: str, message: str, position: int) -> Diagnostic:
        """Record a recoverable defect; the scan continues."""
        rule = get_rule(rule_id)
        diagnostic = Diagnostic(position=position, message=message, rule_id=rule_id, severity=rule.default_severity)
        self._diagnostics.append(diagnostic)
        logger.debug("%s: %08X: %s", self.source, position, message)
        return diagnostic

    def fatal(self, rule_id: str, message: str, position: int, **metadata) -> Diagnostic:
        """Record the defect that stopped the scan."""
        rule = get_rule(rule_id)
        diagnostic = Diagnostic(
            position=position,
            message=message,
            rule_id=rule_id,
            severity=rule.default_severity,
            fatal=True,
            metadata=dict(metadata),
        )
        self._diagnostics.append(diagnostic)
        logger.warning("%s: scan aborted at %08X: %s", self.source, position, message)
        return diagnostic

    @property
    def diagnostics(self) -> list[Diagnostic]:
        return list(self._diagnostics)

    @property
    def error_found(self) -> bool:
        return bool(self._diagnostics)

    def outcome(self, bytes_scanned: int) -> ScanOutcome:
        return ScanOutcome(diagnostics=list(self._diagnostics), bytes_scanned=bytes_scanned)
