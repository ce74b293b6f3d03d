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
Tests for report generators.
"""

import json

import pytest

from qbscript_linter.core import rules
from qbscript_linter.core.models import Diagnostic, Report, ScanResult, Severity
from qbscript_linter.core.reporters.json_reporter import JSONReporter
from qbscript_linter.core.reporters.markdown_reporter import MarkdownReporter
from qbscript_linter.core.reporters.sarif_reporter import SARIFReporter
from qbscript_linter.core.reporters.text_reporter import TextReporter


@pytest.fixture
def failing_result():
    return ScanResult(
        script_path="scripts/bad.qb",
        diagnostics=[
            Diagnostic(position=0x1A, message="Illegal opcode: FF", rule_id=rules.ILLEGAL_OPCODE),
            Diagnostic(
                position=0x2C,
                message="Invalid struct header",
                rule_id=rules.STRUCT_HEADER_INVALID,
                severity=Severity.FATAL,
                fatal=True,
                metadata={"reason": "Cannot continue decompilation"},
            ),
        ],
        size_bytes=64,
        bytes_scanned=0x29,
    )


@pytest.fixture
def clean_result():
    return ScanResult(script_path="scripts/ok.qb", size_bytes=10, bytes_scanned=10)


@pytest.fixture
def report(failing_result, clean_result):
    report = Report()
    report.add_scan_result(failing_result)
    report.add_scan_result(clean_result)
    return report


class TestTextReporter:
    def test_failing_file(self, failing_result):
        output = TextReporter().generate_report(failing_result)

        assert output == (
            "=== scripts/bad.qb ===\n"
            "## 0000001A: Illegal opcode: FF\n"
            "## 0000002C: Invalid struct header\n"
            "@@ Cannot continue decompilation\n"
            "\n"
        )

    def test_clean_file(self, clean_result):
        output = TextReporter().generate_report(clean_result)

        assert output.splitlines()[:2] == ["=== scripts/ok.qb ===", ">> No errors found"]

    def test_multi_file_summary(self, report):
        output = TextReporter().generate_report(report)

        assert output.endswith("2 file(s) checked, 1 clean, 1 with errors")
        assert output.index("scripts/bad.qb") < output.index("scripts/ok.qb")

    def test_show_severity(self, failing_result):
        line = TextReporter(show_severity=True).format_diagnostic(failing_result.diagnostics[0])

        assert line == "## 0000001A: Illegal opcode: FF [ERROR]"

    def test_struct_header_offset_reaches_console(self, linter):
        result = linter.lint_bytes(bytes.fromhex("4A 04 00 00 00 00 02 00 24"), name="s.qb")

        output = TextReporter().generate_report(result)

        assert output == "=== s.qb ===\n## 00000004: Invalid struct header\n@@ Cannot continue decompilation\n\n"

    def test_truncated_script_keeps_offset(self, linter):
        result = linter.lint_bytes(bytes.fromhex("47 04 00 01 28"), name="t.qb")

        output = TextReporter().generate_report(result)

        assert output.splitlines()[1] == (
            "@@ 00000000: Unexpected end of script: offset 0x00000006 is beyond the end of the buffer (5 bytes)"
        )

    def test_load_failure_has_no_offset(self):
        diagnostic = Diagnostic(
            position=0,
            message="File does not exist",
            rule_id=rules.FILE_NOT_FOUND,
            severity=Severity.FATAL,
            fatal=True,
        )

        assert TextReporter().format_diagnostic(diagnostic) == "@@ File does not exist"


class TestJSONReporter:
    def test_single_result(self, failing_result):
        data = json.loads(JSONReporter().generate_report(failing_result))

        assert data["script_path"] == "scripts/bad.qb"
        assert data["aborted"] is True
        assert data["diagnostics"][0]["offset_hex"] == "0000001A"
        assert data["diagnostics"][1]["fatal"] is True

    def test_report_summary(self, report):
        data = json.loads(JSONReporter().generate_report(report))

        assert data["summary"]["total_files_scanned"] == 2
        assert data["summary"]["clean_files"] == 1
        assert data["summary"]["diagnostics_by_severity"] == {"fatal": 1, "error": 1, "warning": 0, "info": 0}

    def test_compact(self, clean_result):
        output = JSONReporter(pretty=False).generate_report(clean_result)

        assert "\n" not in output
        assert json.loads(output)["is_clean"] is True

    def test_save_report(self, clean_result, tmp_path):
        path = tmp_path / "out.json"

        JSONReporter().save_report(clean_result, str(path))

        assert json.loads(path.read_text())["script_path"] == "scripts/ok.qb"


class TestMarkdownReporter:
    def test_single_result(self, failing_result):
        output = MarkdownReporter().generate_report(failing_result)

        assert "# QB Script Lint Report" in output
        assert "**Status:** [ABORTED]" in output
        assert "| `0000001A` | ERROR | `ILLEGAL_OPCODE` (Illegal opcode) | Illegal opcode: FF |" in output

    def test_clean_result(self, clean_result):
        output = MarkdownReporter().generate_report(clean_result)

        assert "[OK] No errors found" in output

    def test_multi_file(self, report):
        output = MarkdownReporter(detailed=False).generate_report(report)

        assert "- **Files Checked:** 2" in output
        assert "### [OK] scripts/ok.qb" in output
        assert "| Offset |" not in output


class TestSARIFReporter:
    def test_structure(self, report):
        sarif = json.loads(SARIFReporter().generate_report(report))

        assert sarif["version"] == "2.1.0"
        run = sarif["runs"][0]
        assert run["tool"]["driver"]["name"] == "qbscript-lint"
        assert {r["id"] for r in run["tool"]["driver"]["rules"]} == {
            rules.ILLEGAL_OPCODE,
            rules.STRUCT_HEADER_INVALID,
        }
        assert len(run["results"]) == 2

    def test_results_use_byte_offsets(self, failing_result):
        sarif = json.loads(SARIFReporter().generate_report(failing_result))

        first = sarif["runs"][0]["results"][0]
        location = first["locations"][0]["physicalLocation"]
        assert first["level"] == "error"
        assert location["artifactLocation"]["uri"] == "scripts/bad.qb"
        assert location["region"] == {"byteOffset": 0x1A, "byteLength": 1}

    def test_warning_level(self):
        result = ScanResult(
            script_path="w.qb",
            diagnostics=[
                Diagnostic(0, "Struct is not 4-aligned", rules.STRUCT_MISALIGNED, severity=Severity.WARNING)
            ],
        )

        sarif = json.loads(SARIFReporter().generate_report(result))

        assert sarif["runs"][0]["results"][0]["level"] == "warning"
        # the rule keeps its catalog default
        assert sarif["runs"][0]["tool"]["driver"]["rules"][0]["defaultConfiguration"]["level"] == "error"
