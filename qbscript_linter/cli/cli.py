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

"""Command-line interface for the QB script linter."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from ..config.config import Config
from ..config.constants import LinterConstants
from ..core.exceptions import PolicyError
from ..core.linter import QbScriptLinter
from ..core.loader import ScriptLoader
from ..core.models import Report
from ..core.reporters.json_reporter import JSONReporter
from ..core.reporters.markdown_reporter import MarkdownReporter
from ..core.reporters.sarif_reporter import SARIFReporter
from ..core.reporters.text_reporter import TextReporter
from ..core.rules import RULES
from ..core.scan_policy import ScanPolicy

logger = logging.getLogger("qbscript_linter.cli")


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------


def _configure_logging(level_name: str) -> None:
    level = logging.getLevelName(level_name.upper())
    if not isinstance(level, int):
        level = logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s", stream=sys.stderr)
    logging.getLogger("qbscript_linter").setLevel(level)


def _load_policy(policy_value: str | None) -> ScanPolicy:
    """Load scan policy from a preset name or YAML path, or return the default."""
    if not policy_value:
        return ScanPolicy.default()

    if policy_value.lower() in ScanPolicy.preset_names():
        policy = ScanPolicy.from_preset(policy_value)
        logger.info("Using %s scan policy (preset)", policy.policy_name)
    else:
        policy = ScanPolicy.from_yaml(policy_value)
        logger.info("Using scan policy: %s (%s)", policy_value, policy.policy_name)
    return policy


def _format_output(args: argparse.Namespace, report: Report) -> str:
    """Generate the formatted output string for a report."""
    fmt = args.format
    if fmt == "json":
        return JSONReporter(pretty=not args.compact).generate_report(report)
    if fmt == "markdown":
        return MarkdownReporter(detailed=True).generate_report(report)
    if fmt == "sarif":
        return SARIFReporter().generate_report(report)
    # summary (default)
    return TextReporter().generate_report(report)


def _write_output(args: argparse.Namespace, output: str) -> None:
    """Write *output* to a file or stdout."""
    if args.output:
        with open(args.output, "w", encoding="utf-8") as fh:
            fh.write(output)
        print(f"Report saved to: {args.output}")
    else:
        print(output)


def _exit_status(report: Report, fail_on_warnings: bool) -> int:
    if report.has_errors:
        return 1
    if fail_on_warnings and report.warning_count > 0:
        return 1
    return 0


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


def lint_command(args: argparse.Namespace) -> int:
    """Handle the ``lint`` command."""
    if not args.paths:
        print("No file arguments given!")
        args.print_usage()
        return 0

    try:
        config = Config(policy=args.policy)
        if args.format is None:
            args.format = config.output_format
        policy = _load_policy(config.policy)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except (PolicyError, ValueError) as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return 1

    if args.corrected_opcodes:
        policy.opcodes.corrected_ranges = True

    loader = ScriptLoader(max_file_size_mb=config.max_file_size_mb, extensions=config.extensions)
    linter = QbScriptLinter(policy=policy, loader=loader)
    scripts = loader.discover_scripts(args.paths, recursive=args.recursive)
    if not scripts:
        print("No scripts found.", file=sys.stderr)
        return 1

    report = linter.lint_files(scripts)
    _write_output(args, _format_output(args, report))
    return _exit_status(report, args.fail_on_warnings)


def list_rules_command(_args: argparse.Namespace) -> int:
    """Handle the ``list-rules`` command."""
    print("Available Rules:\n")
    for i, rule in enumerate(RULES.values(), 1):
        badge = " [FATAL]" if rule.fatal else ""
        print(f"  {i}. {rule.id} ({rule.default_severity.value}){badge}")
        print(f"     {rule.title}: {rule.description}")
        print()
    return 0


def generate_policy_command(args: argparse.Namespace) -> int:
    """Handle the ``generate-policy`` command."""
    output_path = Path(args.output)
    preset = args.preset
    try:
        policy = ScanPolicy.from_preset(preset)
        policy.to_yaml(output_path)
    except (OSError, PolicyError, ValueError) as e:
        print(f"Error generating policy: {e}", file=sys.stderr)
        return 1

    print(f"Generated {preset} scan policy: {output_path}\n")
    print("Edit the file to customise, then use:")
    print(f"  {LinterConstants.TOOL_NAME} lint --policy {output_path} script.qb\n")
    print(f"Available presets: {' | '.join(ScanPolicy.preset_names())}")
    return 0


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=LinterConstants.TOOL_NAME,
        description="QB Script Linter - structural validator for compiled QB scripts",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
Examples:
  {LinterConstants.TOOL_NAME} lint script.qb
  {LinterConstants.TOOL_NAME} lint scripts/ --recursive --format sarif -o results.sarif
  {LinterConstants.TOOL_NAME} lint script.qb --policy strict
  {LinterConstants.TOOL_NAME} generate-policy -o my_policy.yaml
  {LinterConstants.TOOL_NAME} list-rules
        """,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {LinterConstants.VERSION}")
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        type=str.upper,
        help="Logging level (default: QBSCRIPT_LINTER_LOG_LEVEL or WARNING)",
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    # -- lint --------------------------------------------------------------
    lint_p = subparsers.add_parser("lint", help="Lint one or more QB scripts")
    lint_p.add_argument("paths", nargs="*", help="Script files (or directories with --recursive)")
    lint_p.add_argument(
        "--format",
        choices=list(LinterConstants.OUTPUT_FORMATS),
        default=None,
        help="Output format (default: summary). Use 'sarif' for code scanning upload.",
    )
    lint_p.add_argument("--output", "-o", help="Output file path")
    lint_p.add_argument("--compact", action="store_true", help="Compact JSON output")
    lint_p.add_argument(
        "--policy",
        metavar="PRESET_OR_PATH",
        help="Scan policy: preset name (strict, balanced, permissive) or path to custom YAML",
    )
    lint_p.add_argument(
        "--corrected-opcodes", action="store_true", help="Accept opcodes 0x37-0x39 instead of 0x37 alone"
    )
    lint_p.add_argument("--recursive", "-r", action="store_true", help="Search directories for scripts")
    lint_p.add_argument("--fail-on-warnings", action="store_true", help="Exit with error on warnings too")
    lint_p.add_argument("--env-file", metavar="PATH", help="Load QBSCRIPT_LINTER_* settings from a .env file")
    lint_p.add_argument(
        "--log-level",
        default=argparse.SUPPRESS,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        type=str.upper,
        help="Logging level",
    )
    lint_p.set_defaults(print_usage=lint_p.print_usage)

    # -- list-rules --------------------------------------------------------
    subparsers.add_parser("list-rules", help="List the diagnostics the linter can report")

    # -- generate-policy ---------------------------------------------------
    gp_p = subparsers.add_parser("generate-policy", help="Generate a scan policy YAML")
    gp_p.add_argument("--output", "-o", default="qb_policy.yaml", help="Output file path")
    gp_p.add_argument("--preset", choices=ScanPolicy.preset_names(), default="balanced", help="Base preset")

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    env_file = getattr(args, "env_file", None)
    try:
        if env_file:
            Config.from_file(Path(env_file))
        log_level = args.log_level or Config().log_level
    except ValueError:
        log_level = LinterConstants.DEFAULT_LOG_LEVEL
    _configure_logging(log_level)

    if not args.command:
        parser.print_help()
        return 1

    dispatch = {
        "lint": lint_command,
        "list-rules": list_rules_command,
        "generate-policy": generate_policy_command,
    }
    handler = dispatch.get(args.command)
    if handler:
        return handler(args)

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
