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
Single-pass opcode scanner.

The scanner reads one opcode per iteration and routes it by value: nesting
opcodes go to the :class:`NestingTracker`, jump opcodes to the offset
verifier, strings and structs to their own operand checks, and fixed-size
operands are skipped. At the top of each iteration the cursor sits on the
next opcode.

Recoverable defects are reported and scanning continues. Running off the
end of the buffer, or a corrupt struct header, ends the scan of the buffer
with a fatal diagnostic.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from . import rules
from .cursor import ByteCursor
from .exceptions import InvalidStructHeaderError, OutOfBoundsError
from .jumps import JumpRole, read_and_verify
from .models import ScanOutcome
from .nesting import NestingKind, NestingTracker
from .opcodes import (
    FIXED_OPERAND_SIZES,
    MAX_STRUCT_PADDING,
    RECORD_SIZE,
    STRUCT_HEADER,
    Opcode,
    is_known_opcode,
)
from .reporter import ErrorReporter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EngineOptions:
    """Knobs that change what the scanner accepts."""

    # Accept 0x37-0x39 instead of the historical lone 0x37
    corrected_opcode_ranges: bool = False
    # Report blocks still open when the buffer ends
    check_balance_at_end: bool = False
    # Zero bytes before a struct's 0x01, counting the header's own two zeros
    max_struct_padding: int = MAX_STRUCT_PADDING


_NESTING_OPCODES: dict[int, tuple[NestingKind, bool]] = {
    Opcode.DICT_START: (NestingKind.DICT, True),
    Opcode.DICT_END: (NestingKind.DICT, False),
    Opcode.ARRAY_START: (NestingKind.ARRAY, True),
    Opcode.ARRAY_END: (NestingKind.ARRAY, False),
    Opcode.PAREN_OPEN: (NestingKind.PAREN, True),
    Opcode.PAREN_CLOSE: (NestingKind.PAREN, False),
}


class ScriptScanner:
    """Scans one buffer. Create a new instance per script."""

    def __init__(self, data: bytes, options: EngineOptions | None = None, source: str = "<buffer>"):
        self.options = options or EngineOptions()
        self.source = source
        self.cursor = ByteCursor(data)
        self.reporter = ErrorReporter(source)
        self.nesting = NestingTracker(self.reporter)
        self._handlers: dict[int, Callable[[int, int], None]] = {
            Opcode.STRING: self._narrow_string,
            Opcode.WIDE_STRING: self._wide_string,
            Opcode.RECORD_TABLE: self._record_table,
            Opcode.STRUCT: self._struct,
            Opcode.END_OF_SCRIPT: self._end_of_script,
            Opcode.IF: self._if,
            Opcode.ELSEIF: self._elseif,
            Opcode.ELSE: self._else,
            Opcode.SHORT_JUMP: self._short_jump,
            Opcode.CASE: self._case,
        }
        for opcode in _NESTING_OPCODES:
            self._handlers[opcode] = self._nesting

    def scan(self) -> ScanOutcome:
        """Walk the whole buffer and return what was found."""
        cursor = self.cursor
        start = 0
        try:
            while not cursor.at_end():
                start = cursor.position
                self._step(start)
        except OutOfBoundsError as e:
            self.reporter.fatal(rules.TRUNCATED_SCRIPT, str(e), start, requested=e.requested)
            return self.reporter.outcome(bytes_scanned=start)
        except InvalidStructHeaderError as e:
            self.reporter.fatal(
                rules.STRUCT_HEADER_INVALID,
                "Invalid struct header",
                e.position,
                header=f"{e.header:#010x}",
                reason=str(e),
            )
            return self.reporter.outcome(bytes_scanned=start)

        if self.options.check_balance_at_end:
            self.nesting.check_closed(cursor.length)
        return self.reporter.outcome(bytes_scanned=cursor.position)

    def _step(self, start: int) -> None:
        opcode = self.cursor.read_byte()
        handler = self._handlers.get(opcode)
        if handler is not None:
            handler(opcode, start)
        elif opcode in FIXED_OPERAND_SIZES:
            self.cursor.skip(FIXED_OPERAND_SIZES[opcode])
        elif not is_known_opcode(opcode, corrected=self.options.corrected_opcode_ranges):
            self.reporter.report(rules.ILLEGAL_OPCODE, f"Illegal opcode: {opcode:02X}", start)

    # ------------------------------------------------------------------
    # Blocks
    # ------------------------------------------------------------------

    def _nesting(self, opcode: int, start: int) -> None:
        kind, opens = _NESTING_OPCODES[opcode]
        if opens:
            self.nesting.enter(kind)
        else:
            self.nesting.exit(kind, start)

    def _end_of_script(self, opcode: int, start: int) -> None:
        if self.cursor.remaining > 0:
            self.reporter.report(rules.END_BEFORE_EOF, "End of script found before end of file.", start)

    # ------------------------------------------------------------------
    # Variable-length operands
    # ------------------------------------------------------------------

    def _narrow_string(self, opcode: int, start: int) -> None:
        length = self.cursor.read_uint32()
        if length == 0:
            # Scanning resumes right after the length field.
            self.reporter.report(rules.ZERO_LENGTH_STRING, "Zero-length string (no null terminator)", start)
            return
        self.cursor.skip(length - 1)
        if self.cursor.read_byte() != 0:
            self.reporter.report(rules.NARROW_STRING_UNTERMINATED, "Narrow string not null-terminated", start)

    def _wide_string(self, opcode: int, start: int) -> None:
        length = self.cursor.read_uint32()
        if length == 0:
            self.reporter.report(rules.ZERO_LENGTH_STRING, "Zero-length wide string (no null terminator)", start)
            return
        if length % 2 != 0:
            self.reporter.report(rules.WIDE_STRING_ODD_LENGTH, "Invalid string length for wide string", start)
        self.cursor.skip(length - 2)
        if self.cursor.read_uint16() != 0:
            self.reporter.report(rules.WIDE_STRING_UNTERMINATED, "Wide string missing null terminator", start)

    def _record_table(self, opcode: int, start: int) -> None:
        count = self.cursor.read_uint16()
        self.cursor.skip(count * RECORD_SIZE)

    def _struct(self, opcode: int, start: int) -> None:
        cursor = self.cursor
        length = cursor.read_uint16()
        padding_start = cursor.position
        padding = 0
        while cursor.read_byte() == 0:
            padding += 1

        # The first non-zero byte is the 0x01 of the header; back up to its start.
        cursor.skip(-3)
        header_start = cursor.position
        header = cursor.read_uint32()
        if header != STRUCT_HEADER:
            raise InvalidStructHeaderError(header_start, header)

        if cursor.position % 4 != 0:
            self.reporter.report(rules.STRUCT_MISALIGNED, "Struct is not 4-aligned", header_start)
        if padding > self.options.max_struct_padding:
            self.reporter.report(
                rules.STRUCT_PADDING_TOO_LONG, "Padding unnecessarily long for struct", padding_start
            )

        # TODO: check alignment of the struct's own items once their layout is modelled
        cursor.skip(length - 4)

    # ------------------------------------------------------------------
    # Control flow
    # ------------------------------------------------------------------

    def _if(self, opcode: int, start: int) -> None:
        field, ok = read_and_verify(self.cursor, JumpRole.NEXT_BRANCH)
        if not ok:
            self.reporter.report(rules.NEXT_BRANCH_OFFSET, "Incorrect next branch offset in if", field)

    def _elseif(self, opcode: int, start: int) -> None:
        field, ok = read_and_verify(self.cursor, JumpRole.NEXT_BRANCH)
        if not ok:
            self.reporter.report(rules.NEXT_BRANCH_OFFSET, "Incorrect next branch offset in elseif", field)
        field, ok = read_and_verify(self.cursor, JumpRole.ENDIF)
        if not ok:
            self.reporter.report(rules.ENDIF_OFFSET, "Incorrect endif offset in elseif", field)

    def _else(self, opcode: int, start: int) -> None:
        field, ok = read_and_verify(self.cursor, JumpRole.ENDIF)
        if not ok:
            self.reporter.report(rules.ENDIF_OFFSET, "Incorrect endif offset in else", field)

    def _short_jump(self, opcode: int, start: int) -> None:
        _, ok = read_and_verify(self.cursor, JumpRole.END_SWITCH)
        if not ok:
            self.reporter.report(rules.SWITCH_JUMP_TARGET, "Short jump does not point to end switch", start)

    def _case(self, opcode: int, start: int) -> None:
        if self.cursor.read_byte() != Opcode.SHORT_JUMP:
            self.reporter.report(rules.CASE_MISSING_SHORT_JUMP, "Case is missing short jump", start)
        field, ok = read_and_verify(self.cursor, JumpRole.NEXT_CASE)
        if not ok:
            self.reporter.report(
                rules.CASE_JUMP_TARGET, "Case's short jump does not point to next branch", field
            )


def scan_buffer(data: bytes, options: EngineOptions | None = None, source: str = "<buffer>") -> ScanOutcome:
    """Scan *data* and return its diagnostics.

    Args:
        data: The complete script bytes.
        options: Engine knobs; defaults give compatibility mode.
        source: Name used in log messages.

    Returns:
        ScanOutcome with diagnostics in discovery order.
    """
    logger.debug("Scanning %s (%d bytes)", source, len(data))
    return ScriptScanner(data, options=options, source=source).scan()
