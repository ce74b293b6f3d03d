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
Tests for the linter front end and policy application.
"""

from qbscript_linter import lint_file, lint_files
from qbscript_linter.core import rules
from qbscript_linter.core.linter import QbScriptLinter
from qbscript_linter.core.models import Severity
from qbscript_linter.core.scan_policy import ScanPolicy


class TestLintBytes:
    def test_clean_buffer(self, linter, clean_script):
        result = linter.lint_bytes(clean_script, name="clean.qb")

        assert result.is_clean
        assert result.script_path == "clean.qb"
        assert result.size_bytes == len(clean_script)
        assert result.bytes_scanned == len(clean_script)
        assert result.max_severity == Severity.CLEAN
        assert result.policy_name == "default"

    def test_diagnostics_carry_rule_severity(self, linter):
        result = linter.lint_bytes(bytes.fromhex("FF"))

        [diagnostic] = result.diagnostics
        assert diagnostic.rule_id == rules.ILLEGAL_OPCODE
        assert diagnostic.severity == Severity.ERROR
        assert result.has_errors
        assert not result.aborted


class TestPolicyApplication:
    def test_disabled_rule_dropped(self, make_policy):
        linter = QbScriptLinter(policy=make_policy("disabled_rules: [ILLEGAL_OPCODE]\n"))

        result = linter.lint_bytes(bytes.fromhex("FF 04"))

        assert [d.rule_id for d in result.diagnostics] == [rules.UNBALANCED_NESTING]

    def test_severity_override_applied(self, make_policy):
        policy = make_policy("severity_overrides:\n  - rule_id: ILLEGAL_OPCODE\n    severity: warning\n")

        result = QbScriptLinter(policy=policy).lint_bytes(bytes.fromhex("FF"))

        assert result.diagnostics[0].severity == Severity.WARNING
        assert not result.has_errors
        assert result.max_severity == Severity.WARNING

    def test_fatal_diagnostics_always_kept(self, make_policy):
        policy = make_policy("severity_overrides:\n  - rule_id: TRUNCATED_SCRIPT\n    severity: INFO\n")

        result = QbScriptLinter(policy=policy).lint_bytes(bytes.fromhex("16 00"))

        assert result.aborted
        assert result.diagnostics[0].severity == Severity.FATAL

    def test_engine_options_follow_policy(self, make_policy):
        policy = make_policy("opcodes:\n  corrected_ranges: true\nnesting:\n  check_balance_at_end: true\n")
        linter = QbScriptLinter(policy=policy)

        result = linter.lint_bytes(bytes.fromhex("38 03"))

        assert [d.message for d in result.diagnostics] == ["Unclosed dict at end of script"]

    def test_permissive_preset(self):
        linter = QbScriptLinter(policy=ScanPolicy.from_preset("permissive"))

        # misaligned and over-padded struct header
        result = linter.lint_bytes(bytes.fromhex("4A 04 00" + " 00" * 4 + " 00 00 01 00"))

        assert [(d.rule_id, d.severity) for d in result.diagnostics] == [(rules.STRUCT_MISALIGNED, Severity.WARNING)]


class TestLintFiles:
    def test_lint_file(self, make_script, clean_script):
        path = make_script(clean_script)

        result = lint_file(path)

        assert result.is_clean
        assert result.script_path == str(path)

    def test_missing_file_becomes_fatal_result(self, tmp_path):
        result = QbScriptLinter().lint_file(tmp_path / "missing.qb")

        [diagnostic] = result.diagnostics
        assert diagnostic.rule_id == rules.FILE_NOT_FOUND
        assert diagnostic.message == "File does not exist"
        assert diagnostic.fatal
        assert result.has_errors
        assert result.fatal_diagnostic is diagnostic
        assert result.get_diagnostics_by_rule(rules.FILE_NOT_FOUND) == [diagnostic]

    def test_files_are_independent(self, make_script, clean_script, tmp_path):
        bad = make_script(bytes.fromhex("04"), name="bad.qb")
        good = make_script(clean_script, name="good.qb")

        report = lint_files([bad, tmp_path / "missing.qb", good])

        assert [r.script_path for r in report.scan_results] == [str(bad), str(tmp_path / "missing.qb"), str(good)]
        assert report.total_files_scanned == 3
        assert report.clean_count == 1
        assert report.error_count == 1
        assert report.fatal_count == 1
        assert len(report.failed_files) == 2
        assert report.has_errors

    def test_nesting_does_not_carry_between_files(self, make_script):
        opener = make_script(bytes.fromhex("03"), name="a.qb")
        closer = make_script(bytes.fromhex("04"), name="b.qb")

        report = lint_files([opener, closer])

        assert report.scan_results[0].is_clean
        assert report.scan_results[1].diagnostics[0].message == "Unbalanced end dict"

    def test_lint_directory(self, make_script, clean_script, tmp_path):
        make_script(clean_script, name="one.qb")
        make_script(bytes.fromhex("FF"), name="deep/two.qb")

        recursive = QbScriptLinter().lint_directory(tmp_path)
        flat = QbScriptLinter().lint_directory(tmp_path, recursive=False)

        assert recursive.total_files_scanned == 2
        assert flat.total_files_scanned == 1
        assert flat.clean_count == 1
