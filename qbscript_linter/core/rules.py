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
Rule catalog – every diagnostic the linter can emit, with its metadata.

Rule ids are stable: policies disable them, severity overrides target them,
and SARIF output lists them as ``reportingDescriptor`` entries. Message text
lives with the rule so downstream tooling can grep for it.
"""

from __future__ import annotations

from dataclasses import dataclass

from .models import Severity


@dataclass(frozen=True)
class RuleDefinition:
    """Metadata for a single validation rule."""

    id: str
    """Unique rule identifier, e.g. ``ILLEGAL_OPCODE``."""

    title: str
    """Short human-readable name."""

    default_severity: Severity
    """Severity before policy overrides."""

    description: str = ""
    """What the rule checks."""

    fatal: bool = False
    """Fatal rules abort the scan of the current file."""


UNBALANCED_NESTING = "UNBALANCED_NESTING"
UNCLOSED_NESTING = "UNCLOSED_NESTING"
ILLEGAL_OPCODE = "ILLEGAL_OPCODE"
ZERO_LENGTH_STRING = "ZERO_LENGTH_STRING"
NARROW_STRING_UNTERMINATED = "NARROW_STRING_UNTERMINATED"
WIDE_STRING_ODD_LENGTH = "WIDE_STRING_ODD_LENGTH"
WIDE_STRING_UNTERMINATED = "WIDE_STRING_UNTERMINATED"
STRUCT_HEADER_INVALID = "STRUCT_HEADER_INVALID"
STRUCT_MISALIGNED = "STRUCT_MISALIGNED"
STRUCT_PADDING_TOO_LONG = "STRUCT_PADDING_TOO_LONG"
END_BEFORE_EOF = "END_BEFORE_EOF"
NEXT_BRANCH_OFFSET = "NEXT_BRANCH_OFFSET"
ENDIF_OFFSET = "ENDIF_OFFSET"
CASE_MISSING_SHORT_JUMP = "CASE_MISSING_SHORT_JUMP"
CASE_JUMP_TARGET = "CASE_JUMP_TARGET"
SWITCH_JUMP_TARGET = "SWITCH_JUMP_TARGET"
TRUNCATED_SCRIPT = "TRUNCATED_SCRIPT"
FILE_NOT_FOUND = "FILE_NOT_FOUND"


_RULES = [
    RuleDefinition(
        UNBALANCED_NESTING,
        "Unbalanced block end",
        Severity.ERROR,
        "A dict, array or paren end opcode appears with no matching open block.",
    ),
    RuleDefinition(
        UNCLOSED_NESTING,
        "Block left open",
        Severity.ERROR,
        "A dict, array or paren block is still open at the end of the script (opt-in).",
    ),
    RuleDefinition(
        ILLEGAL_OPCODE,
        "Illegal opcode",
        Severity.ERROR,
        "A byte in opcode position is not a known opcode.",
    ),
    RuleDefinition(
        ZERO_LENGTH_STRING,
        "Zero-length string",
        Severity.ERROR,
        "A narrow or wide string declares length 0 and so has no null terminator.",
    ),
    RuleDefinition(
        NARROW_STRING_UNTERMINATED,
        "Narrow string not null-terminated",
        Severity.ERROR,
        "The last byte of a narrow string is not 0.",
    ),
    RuleDefinition(
        WIDE_STRING_ODD_LENGTH,
        "Odd wide string length",
        Severity.ERROR,
        "A wide string's byte length is not a multiple of 2.",
    ),
    RuleDefinition(
        WIDE_STRING_UNTERMINATED,
        "Wide string missing null terminator",
        Severity.ERROR,
        "The last code unit of a wide string is not 0.",
    ),
    RuleDefinition(
        STRUCT_HEADER_INVALID,
        "Invalid struct header",
        Severity.FATAL,
        "The 4-byte header after a struct's padding is not 0x00010000.",
        fatal=True,
    ),
    RuleDefinition(
        STRUCT_MISALIGNED,
        "Struct not 4-aligned",
        Severity.ERROR,
        "The byte after a struct header is not on a 4-byte boundary.",
    ),
    RuleDefinition(
        STRUCT_PADDING_TOO_LONG,
        "Struct padding too long",
        Severity.ERROR,
        "More zero padding precedes a struct header than alignment needs.",
    ),
    RuleDefinition(
        END_BEFORE_EOF,
        "End of script before end of file",
        Severity.ERROR,
        "Bytes follow the end-of-script opcode.",
    ),
    RuleDefinition(
        NEXT_BRANCH_OFFSET,
        "Bad next-branch offset",
        Severity.ERROR,
        "An if/elseif offset does not land on an else, endif or elseif.",
    ),
    RuleDefinition(
        ENDIF_OFFSET,
        "Bad endif offset",
        Severity.ERROR,
        "An else/elseif offset does not land on an endif.",
    ),
    RuleDefinition(
        CASE_MISSING_SHORT_JUMP,
        "Case missing short jump",
        Severity.ERROR,
        "A case opcode is not followed by a short jump.",
    ),
    RuleDefinition(
        CASE_JUMP_TARGET,
        "Bad case jump target",
        Severity.ERROR,
        "A case's short jump does not land on the next case, default or endswitch.",
    ),
    RuleDefinition(
        SWITCH_JUMP_TARGET,
        "Bad end-switch jump target",
        Severity.ERROR,
        "A short jump does not land on an endswitch.",
    ),
    RuleDefinition(
        TRUNCATED_SCRIPT,
        "Truncated script",
        Severity.FATAL,
        "An operand, seek or jump target runs past the end of the buffer.",
        fatal=True,
    ),
    RuleDefinition(
        FILE_NOT_FOUND,
        "Script could not be loaded",
        Severity.FATAL,
        "The path does not exist, is a directory, or could not be read.",
        fatal=True,
    ),
]

RULES: dict[str, RuleDefinition] = {rule.id: rule for rule in _RULES}


def get_rule(rule_id: str) -> RuleDefinition:
    """Look up a rule by id; raises ``KeyError`` for unknown ids."""
    return RULES[rule_id]
