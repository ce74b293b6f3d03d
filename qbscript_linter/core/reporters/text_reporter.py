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
Console reporter in the classic ``##`` / ``@@`` / ``>>`` format.

    === scripts/foo.qb ===
    ## 0000001A: Illegal opcode: FF
    ## 0000002C: Invalid struct header
    @@ Cannot continue decompilation
    >> No errors found

``##`` lines carry the byte offset of a defect. The ``@@`` line is the message
that ended the scan: a corrupt struct header is printed as a ``##`` line
followed by the abort reason, a truncated script as ``@@ XXXXXXXX: message``
and a file that could not be loaded as ``@@ message``. ``>>`` confirms a clean
file. Each file block ends with two blank lines.
"""

from ...core import rules
from ...core.models import Diagnostic, Report, ScanResult


class TextReporter:
    """Generates plain-text console reports."""

    def __init__(self, show_severity: bool = False):
        """
        Initialize text reporter.

        Args:
            show_severity: Append ``[SEVERITY]`` to each diagnostic line
        """
        self.show_severity = show_severity

    def generate_report(self, data: ScanResult | Report) -> str:
        if isinstance(data, ScanResult):
            return "\n".join(self._format_result(data))
        lines: list[str] = []
        for result in data.scan_results:
            lines.extend(self._format_result(result))
        lines.append(
            f"{data.total_files_scanned} file(s) checked, {data.clean_count} clean, "
            f"{len(data.failed_files)} with errors"
        )
        return "\n".join(lines)

    def _format_result(self, result: ScanResult) -> list[str]:
        lines = [f"=== {result.script_path} ==="]
        for diagnostic in result.diagnostics:
            lines.append(self.format_diagnostic(diagnostic))
        if result.is_clean:
            lines.append(">> No errors found")
        lines.extend(["", ""])
        return lines

    def format_diagnostic(self, diagnostic: Diagnostic) -> str:
        suffix = f" [{diagnostic.severity.value}]" if self.show_severity else ""
        if not diagnostic.fatal:
            return f"## {diagnostic.format_position()}: {diagnostic.message}{suffix}"
        if diagnostic.rule_id == rules.FILE_NOT_FOUND:
            return f"@@ {diagnostic.message}{suffix}"
        reason = diagnostic.metadata.get("reason")
        if reason:
            return f"## {diagnostic.format_position()}: {diagnostic.message}{suffix}\n@@ {reason}"
        return f"@@ {diagnostic.format_position()}: {diagnostic.message}{suffix}"

    def save_report(self, data: ScanResult | Report, output_path: str):
        """Save text report to file."""
        with open(output_path, "w", encoding="utf-8") as f:
            f.write(self.generate_report(data))
