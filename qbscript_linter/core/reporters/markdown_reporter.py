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
Markdown format reporter for lint results.
"""

from ...core.models import SEVERITY_ORDER, Diagnostic, Report, ScanResult
from ...core.rules import RULES


class MarkdownReporter:
    """Generates Markdown format reports."""

    def __init__(self, detailed: bool = True):
        """
        Initialize Markdown reporter.

        Args:
            detailed: If True, list every diagnostic in multi-file reports
        """
        self.detailed = detailed

    def generate_report(self, data: ScanResult | Report) -> str:
        """
        Generate Markdown report.

        Args:
            data: ScanResult or Report object

        Returns:
            Markdown string
        """
        if isinstance(data, ScanResult):
            return self._generate_scan_result_report(data)
        else:
            return self._generate_multi_file_report(data)

    def _generate_scan_result_report(self, result: ScanResult) -> str:
        """Generate report for a single script."""
        lines = []

        lines.append("# QB Script Lint Report")
        lines.append("")
        lines.append(f"**Script:** {result.script_path}")
        lines.append(f"**Status:** {self._status(result)}")
        lines.append(f"**Size:** {result.size_bytes} bytes")
        lines.append(f"**Policy:** {result.policy_name}")
        lines.append(f"**Scan Duration:** {result.scan_duration_seconds:.3f}s")
        lines.append(f"**Timestamp:** {result.timestamp.isoformat()}")
        lines.append("")

        lines.append("## Summary")
        lines.append("")
        lines.append(f"- **Total Diagnostics:** {len(result.diagnostics)}")
        for severity in SEVERITY_ORDER:
            lines.append(f"- **{severity.value.title()}:** {len(result.get_diagnostics_by_severity(severity))}")
        lines.append("")

        if result.diagnostics:
            lines.append("## Diagnostics")
            lines.append("")
            lines.append("| Offset | Severity | Rule | Message |")
            lines.append("|---|---|---|---|")
            for diagnostic in result.diagnostics:
                lines.append(self._format_row(diagnostic))
            lines.append("")
        else:
            lines.append("## [OK] No errors found")
            lines.append("")

        return "\n".join(lines)

    def _generate_multi_file_report(self, report: Report) -> str:
        """Generate report for multiple scripts."""
        lines = []

        lines.append("# QB Script Lint Report")
        lines.append("")
        lines.append(f"**Timestamp:** {report.timestamp.isoformat()}")
        lines.append("")

        lines.append("## Summary")
        lines.append("")
        lines.append(f"- **Files Checked:** {report.total_files_scanned}")
        lines.append(f"- **Clean Files:** {report.clean_count}")
        lines.append(f"- **Total Diagnostics:** {report.total_diagnostics}")
        lines.append("")
        lines.append("### Diagnostics by Severity")
        lines.append("")
        lines.append(f"- **Fatal:** {report.fatal_count}")
        lines.append(f"- **Error:** {report.error_count}")
        lines.append(f"- **Warning:** {report.warning_count}")
        lines.append(f"- **Info:** {report.info_count}")
        lines.append("")

        lines.append("## Files")
        lines.append("")

        for result in report.scan_results:
            lines.append("\n---\n")
            lines.append(f"### {self._status(result)} {result.script_path}")
            lines.append("")
            lines.append(f"- **Max Severity:** {result.max_severity.value}")
            lines.append(f"- **Diagnostics:** {len(result.diagnostics)}")
            lines.append("")

            if self.detailed and result.diagnostics:
                lines.append("| Offset | Severity | Rule | Message |")
                lines.append("|---|---|---|---|")
                for diagnostic in result.diagnostics:
                    lines.append(self._format_row(diagnostic))
                lines.append("")

        return "\n".join(lines)

    @staticmethod
    def _status(result: ScanResult) -> str:
        if result.is_clean:
            return "[OK]"
        if result.aborted:
            return "[ABORTED]"
        return "[FAIL]" if result.has_errors else "[WARN]"

    @staticmethod
    def _format_row(diagnostic: Diagnostic) -> str:
        rule = RULES.get(diagnostic.rule_id)
        rule_label = f"`{diagnostic.rule_id}`" if rule is None else f"`{rule.id}` ({rule.title})"
        message = diagnostic.message.replace("|", "\\|")
        return f"| `{diagnostic.format_position()}` | {diagnostic.severity.value} | {rule_label} | {message} |"

    def save_report(self, data: ScanResult | Report, output_path: str):
        """
        Save Markdown report to file.

        Args:
            data: ScanResult or Report object
            output_path: Path to save file
        """
        report_md = self.generate_report(data)
        with open(output_path, "w", encoding="utf-8") as f:
            f.write(report_md)
