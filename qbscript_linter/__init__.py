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
QB Script Linter - structural validator for compiled QB script bytecode.
"""

try:
    from ._version import __version__
except ImportError:
    __version__ = "0.0.0+unknown"


def __getattr__(name: str):
    """Lazy-load public API symbols on first access.

    Keeps ``python -m qbscript_linter.cli.cli`` from importing the whole
    package eagerly through ``runpy``.
    """
    _lazy_map = {
        "Config": (".config.config", "Config"),
        "LinterConstants": (".config.constants", "LinterConstants"),
        "ScriptLoader": (".core.loader", "ScriptLoader"),
        "Diagnostic": (".core.models", "Diagnostic"),
        "Report": (".core.models", "Report"),
        "ScanResult": (".core.models", "ScanResult"),
        "Severity": (".core.models", "Severity"),
        "ScanPolicy": (".core.scan_policy", "ScanPolicy"),
        "QbScriptLinter": (".core.linter", "QbScriptLinter"),
        "lint_file": (".core.linter", "lint_file"),
        "lint_files": (".core.linter", "lint_files"),
        "scan_buffer": (".core.engine", "scan_buffer"),
    }
    if name in _lazy_map:
        module_path, attr = _lazy_map[name]
        import importlib

        mod = importlib.import_module(module_path, __package__)
        val = getattr(mod, attr)
        # Cache on the module so __getattr__ is only called once per symbol
        globals()[name] = val
        return val
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "QbScriptLinter",
    "lint_file",
    "lint_files",
    "scan_buffer",
    "Diagnostic",
    "ScanResult",
    "Report",
    "Severity",
    "ScanPolicy",
    "ScriptLoader",
    "Config",
    "LinterConstants",
]
