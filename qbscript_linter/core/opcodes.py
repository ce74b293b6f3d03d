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
QB opcode values and the known-opcode table.

Only opcodes the engine treats specially, or that appear in jump-target
markers, get a name. Everything else is validated against the range table.
"""

from __future__ import annotations

from enum import IntEnum


class Opcode(IntEnum):
    NEWLINE = 0x01
    DICT_START = 0x03
    DICT_END = 0x04
    ARRAY_START = 0x05
    ARRAY_END = 0x06
    PAREN_OPEN = 0x0E
    PAREN_CLOSE = 0x0F
    NAME = 0x16
    INTEGER = 0x17
    HEX_INTEGER = 0x18
    FLOAT = 0x1A
    STRING = 0x1B
    VECTOR3 = 0x1E
    VECTOR2 = 0x1F
    END_OF_SCRIPT = 0x24
    ELSEIF = 0x27
    ENDIF = 0x28
    JUMP = 0x2E
    RECORD_TABLE = 0x2F
    END_SWITCH = 0x3D
    CASE = 0x3E
    DEFAULT = 0x3F
    IF = 0x47
    ELSE = 0x48
    SHORT_JUMP = 0x49
    STRUCT = 0x4A
    WIDE_STRING = 0x4C


# Operand sizes for opcodes whose operand is skipped without inspection
FIXED_OPERAND_SIZES: dict[int, int] = {
    Opcode.NAME: 4,
    Opcode.INTEGER: 4,
    Opcode.HEX_INTEGER: 4,
    Opcode.FLOAT: 4,
    Opcode.JUMP: 4,
    Opcode.VECTOR3: 12,
    Opcode.VECTOR2: 8,
}

RECORD_SIZE = 8
STRUCT_HEADER = 0x00010000
MAX_STRUCT_PADDING = 5

# Inclusive ranges of opcodes legal without an explicit handler.
# The 0x37 entry has always been checked as ``code == 0x37 && code <= 0x39``,
# which admits 0x37 only.
KNOWN_OPCODE_RANGES: tuple[tuple[int, int], ...] = (
    (0x01, 0x01),
    (0x03, 0x0F),
    (0x12, 0x18),
    (0x1A, 0x1B),
    (0x1E, 0x22),
    (0x24, 0x24),
    (0x27, 0x29),
    (0x2C, 0x34),
    (0x37, 0x37),
    (0x3C, 0x42),
    (0x47, 0x4D),
)

CORRECTED_OPCODE_RANGES: tuple[tuple[int, int], ...] = tuple(
    (0x37, 0x39) if r == (0x37, 0x37) else r for r in KNOWN_OPCODE_RANGES
)


def is_known_opcode(code: int, corrected: bool = False) -> bool:
    """Return True if *code* is in the known-opcode table.

    Args:
        code: Opcode byte value.
        corrected: Use the 0x37–0x39 range instead of the single 0x37 entry.
    """
    table = CORRECTED_OPCODE_RANGES if corrected else KNOWN_OPCODE_RANGES
    return any(low <= code <= high for low, high in table)
