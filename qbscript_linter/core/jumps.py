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
Control-flow offset verification.

Jump opcodes carry an unsigned 16-bit displacement. The displacement is
measured from the offset field itself, so ``landing = field + offset``. No
control-flow graph is built: each jump is checked by looking at the bytes
around its landing point for the marker of the construct it must reach.

Markers are anchored relative to the landing point. A jump to the next
branch of an ``if`` lands just past the ``else`` opcode's own offset field
(so ``NEWLINE ELSE`` sits four bytes back), just past an ``endif`` (two bytes
back), or directly on an ``elseif`` opcode.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from .cursor import ByteCursor, SeekOrigin
from .opcodes import Opcode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Marker:
    """A byte pattern expected at ``landing + shift``."""

    name: str
    shift: int
    pattern: bytes

    def matches(self, cursor: ByteCursor, landing: int) -> bool:
        cursor.seek(landing + self.shift, SeekOrigin.BEGIN)
        return cursor.read_bytes(len(self.pattern)) == self.pattern


class JumpRole(Enum):
    """What construct a jump must reach."""

    NEXT_BRANCH = "next branch"
    ENDIF = "endif"
    END_SWITCH = "end switch"
    NEXT_CASE = "next case"


_ELSE_MARKER = Marker("else", -4, bytes([Opcode.NEWLINE, Opcode.ELSE]))
_ENDIF_MARKER = Marker("endif", -2, bytes([Opcode.NEWLINE, Opcode.ENDIF]))

ROLE_MARKERS: dict[JumpRole, tuple[Marker, ...]] = {
    JumpRole.NEXT_BRANCH: (
        _ELSE_MARKER,
        _ENDIF_MARKER,
        # Read even when the endif marker matched: landing on the end of the
        # buffer leaves no elseif byte and aborts the scan
        Marker("elseif", 0, bytes([Opcode.ELSEIF])),
    ),
    JumpRole.ENDIF: (_ENDIF_MARKER,),
    JumpRole.END_SWITCH: (Marker("end switch", -2, bytes([Opcode.NEWLINE, Opcode.END_SWITCH])),),
    JumpRole.NEXT_CASE: (
        Marker("end switch", 0, bytes([Opcode.END_SWITCH])),
        Marker("case", 0, bytes([Opcode.CASE])),
        Marker("default", 0, bytes([Opcode.DEFAULT])),
    ),
}


def landing_point(origin: int, offset: int) -> int:
    """Absolute position a jump field at *origin* with displacement *offset* lands on."""
    return origin + offset


def verify_target(cursor: ByteCursor, origin: int, offset: int, role: JumpRole) -> bool:
    """Check that a jump lands on one of the markers for *role*.

    Every marker of the role is read, so a marker window that falls outside
    the buffer raises :class:`OutOfBoundsError` even if an earlier marker
    matched. The cursor position is the same on return as on entry.

    Args:
        cursor: Cursor over the script buffer.
        origin: Position of the 16-bit offset field.
        offset: Displacement read from that field.
        role: Which construct the jump must reach.

    Returns:
        True if any marker matched.
    """
    landing = landing_point(origin, offset)
    with cursor.lookaside():
        results = [marker.matches(cursor, landing) for marker in ROLE_MARKERS[role]]
    if not any(results):
        logger.debug("Jump at %08X (+%d) to %08X matched no %s marker", origin, offset, landing, role.value)
    return any(results)


def read_and_verify(cursor: ByteCursor, role: JumpRole) -> tuple[int, bool]:
    """Read a jump's offset field at the cursor and verify it.

    Leaves the cursor just past the two-byte field whatever the outcome.

    Returns:
        ``(field_position, ok)``
    """
    origin = cursor.position
    offset = cursor.read_uint16()
    return origin, verify_target(cursor, origin, offset, role)
