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

"""QbScript Linter exceptions.

This module defines custom exceptions for linter operations.
All exceptions inherit from QbScriptLinterError for easy catching.

Example:
    >>> from qbscript_linter.core.linter import QbScriptLinter
    >>> from qbscript_linter.core.exceptions import ScriptLoadError
    >>>
    >>> linter = QbScriptLinter()
    >>>
    >>> try:
    ...     data = linter.loader.load_script("path/to/script.qb")
    ... except ScriptLoadError as e:
    ...     print(f"Failed to load script: {e}")
"""


class QbScriptLinterError(Exception):
    """Base exception for all QbScript Linter errors."""

    pass


class ScriptLoadError(QbScriptLinterError):
    """Raised when a script file cannot be turned into a byte buffer.

    This can indicate:
    - The path does not exist
    - The path is a directory
    - The file exceeds the configured size limit
    - File system errors while reading
    """

    pass


class ScriptScanError(QbScriptLinterError):
    """Raised when the opcode stream cannot be decoded any further.

    Scan errors abort the scan of the current buffer only. ``position`` is
    the byte offset the failure is reported at.
    """

    def __init__(self, message: str, position: int):
        super().__init__(message)
        self.position = position


class OutOfBoundsError(ScriptScanError):
    """Raised when a read or seek runs outside the script buffer."""

    def __init__(self, position: int, requested: int, length: int):
        if requested < 0:
            message = f"Seek to offset {requested} is before the start of the script"
        else:
            message = (
                f"Unexpected end of script: offset {requested:#010x} is beyond the "
                f"end of the buffer ({length} bytes)"
            )
        super().__init__(message, position)
        self.requested = requested
        self.length = length


class InvalidStructHeaderError(ScriptScanError):
    """Raised when a struct's header constant is wrong.

    The stream layout after a corrupt struct header cannot be trusted.
    """

    def __init__(self, position: int, header: int):
        super().__init__("Cannot continue decompilation", position)
        self.header = header


class PolicyError(QbScriptLinterError):
    """Raised when a scan policy file is missing or malformed."""

    pass
