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
SARIF format reporter for code scanning integration.

Implements SARIF 2.1.0 specification for lint results. Script locations are
binary, so each result carries a byte-offset region instead of a line.
https://docs.oasis-open.org/sarif/sarif/v2.1.0/sarif-v2.1.0.html
"""

import json
from typing import Any

from ...config.constants import LinterConstants
from ...core.models import Diagnostic, Report, ScanResult, Severity
from ...core.rules import RULES


class SARIFReporter:
    """Generates SARIF 2.1.0 format reports."""

    SARIF_VERSION = "2.1.0"
    SARIF_SCHEMA = "https://raw.githubusercontent.com/oasis-tcs/sarif-spec/master/Schemata/sarif-schema-2.1.0.json"

    # Map severity to SARIF levels
    SEVERITY_TO_LEVEL = {
        Severity.FATAL: "error",
        Severity.ERROR: "error",
        Severity.WARNING: "warning",
        Severity.INFO: "note",
        Severity.CLEAN: "none",
    }

    def __init__(self, tool_name: str = LinterConstants.TOOL_NAME, tool_version: str = LinterConstants.VERSION):
        """
        Initialize SARIF reporter.

        Args:
            tool_name: Name of the linting tool
            tool_version: Version of the linting tool
        """
        self.tool_name = tool_name
        self.tool_version = tool_version

    def generate_report(self, data: ScanResult | Report) -> str:
        """
        Generate SARIF report.

        Args:
            data: ScanResult or Report object

        Returns:
            SARIF JSON string
        """
        if isinstance(data, ScanResult):
            results = [data]
            timestamp = data.timestamp
        else:
            results = data.scan_results
            timestamp = data.timestamp

        all_diagnostics: list[Diagnostic] = []
        all_results: list[dict[str, Any]] = []
        for scan_result in results:
            all_diagnostics.extend(scan_result.diagnostics)
            all_results.extend(self._convert_diagnostics(scan_result.diagnostics, scan_result.script_path))

        sarif = {
            "$schema": self.SARIF_SCHEMA,
            "version": self.SARIF_VERSION,
            "runs": [
                {
                    "tool": self._create_tool_component(self._extract_rules(all_diagnostics)),
                    "results": all_results,
                    "invocations": [
                        {
                            "executionSuccessful": True,
                            "endTimeUtc": timestamp.isoformat() + "Z",
                        }
                    ],
                }
            ],
        }
        return json.dumps(sarif, indent=2, default=str)

    def _create_tool_component(self, rules: list[dict[str, Any]]) -> dict[str, Any]:
        """Create the tool component with rules."""
        return {
            "driver": {
                "name": self.tool_name,
                "version": self.tool_version,
                "rules": rules,
            }
        }

    def _extract_rules(self, diagnostics: list[Diagnostic]) -> list[dict[str, Any]]:
        """Extract unique rules from diagnostics."""
        seen_rules: set[str] = set()
        rules = []

        for diagnostic in diagnostics:
            if diagnostic.rule_id in seen_rules:
                continue
            seen_rules.add(diagnostic.rule_id)

            definition = RULES.get(diagnostic.rule_id)
            title = definition.title if definition else diagnostic.rule_id
            description = definition.description if definition else diagnostic.message
            default = definition.default_severity if definition else diagnostic.severity

            rules.append(
                {
                    "id": diagnostic.rule_id,
                    "name": diagnostic.rule_id.replace("_", " ").title(),
                    "shortDescription": {"text": title},
                    "fullDescription": {"text": description},
                    "defaultConfiguration": {
                        "level": self.SEVERITY_TO_LEVEL.get(default, "warning"),
                    },
                    "properties": {
                        "severity": default.value,
                        "fatal": bool(definition and definition.fatal),
                    },
                }
            )

        return rules

    def _convert_diagnostics(self, diagnostics: list[Diagnostic], script_path: str) -> list[dict[str, Any]]:
        """Convert diagnostics to SARIF results."""
        results = []

        for diagnostic in diagnostics:
            results.append(
                {
                    "ruleId": diagnostic.rule_id,
                    "level": self.SEVERITY_TO_LEVEL.get(diagnostic.severity, "warning"),
                    "message": {"text": diagnostic.message},
                    "locations": [
                        {
                            "physicalLocation": {
                                "artifactLocation": {
                                    "uri": script_path,
                                    "uriBaseId": "%SRCROOT%",
                                },
                                "region": {
                                    "byteOffset": diagnostic.position,
                                    "byteLength": 1,
                                },
                            }
                        }
                    ],
                    "properties": {
                        "severity": diagnostic.severity.value,
                        "offsetHex": diagnostic.format_position(),
                        "fatal": diagnostic.fatal,
                    },
                }
            )

        return results

    def save_report(self, data: ScanResult | Report, output_path: str):
        """
        Save SARIF report to file.

        Args:
            data: ScanResult or Report object
            output_path: Path to save file
        """
        report_json = self.generate_report(data)
        with open(output_path, "w", encoding="utf-8") as f:
            f.write(report_json)
