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
Random-access little-endian reader over an immutable script buffer.

Every read advances the position by the width of the value. Reads and seeks
that would leave the buffer raise :class:`OutOfBoundsError`; nothing is
clamped.
"""

from __future__ import annotations

import struct
from collections.abc import Iterator
from contextlib import contextmanager
from enum import Enum

from .exceptions import OutOfBoundsError

_UINT16 = struct.Struct("<H")
_UINT32 = struct.Struct("<I")
_INT16 = struct.Struct("<h")
_INT32 = struct.Struct("<i")


class SeekOrigin(Enum):
    """Reference point for :meth:`ByteCursor.seek`."""

    CURRENT = "current"
    BEGIN = "begin"


class ByteCursor:
    """Reads fixed-width values from a byte buffer."""

    def __init__(self, data: bytes):
        self._data = bytes(data)
        self._position = 0

    @property
    def data(self) -> bytes:
        return self._data

    @property
    def length(self) -> int:
        return len(self._data)

    @property
    def position(self) -> int:
        return self._position

    @property
    def remaining(self) -> int:
        return len(self._data) - self._position

    def at_end(self) -> bool:
        return self._position >= len(self._data)

    def _take(self, size: int) -> bytes:
        end = self._position + size
        if end > len(self._data):
            raise OutOfBoundsError(self._position, end, len(self._data))
        chunk = self._data[self._position : end]
        self._position = end
        return chunk

    def read_byte(self) -> int:
        return self._take(1)[0]

    def read_uint16(self) -> int:
        return _UINT16.unpack(self._take(2))[0]

    def read_uint32(self) -> int:
        return _UINT32.unpack(self._take(4))[0]

    def read_int16(self) -> int:
        return _INT16.unpack(self._take(2))[0]

    def read_int32(self) -> int:
        return _INT32.unpack(self._take(4))[0]

    def read_bytes(self, count: int) -> bytes:
        """Consume *count* bytes and return them."""
        if count < 0:
            raise ValueError(f"count must be non-negative, got {count}")
        return self._take(count)

    def skip(self, count: int) -> None:
        """Move forward (or back, for negative *count*) without reading."""
        self.seek(count, SeekOrigin.CURRENT)

    def seek(self, offset: int, origin: SeekOrigin = SeekOrigin.BEGIN) -> int:
        """Reposition the cursor and return the new position.

        ``SeekOrigin.BEGIN`` also covers restoring an absolute, previously
        saved position. Landing exactly on the end of the buffer is allowed.
        """
        if origin is SeekOrigin.CURRENT:
            target = self._position + offset
        else:
            target = offset
        if target < 0 or target > len(self._data):
            raise OutOfBoundsError(self._position, target, len(self._data))
        self._position = target
        return target

    @contextmanager
    def lookaside(self) -> Iterator[ByteCursor]:
        """Save the position and restore it when the block exits, however it exits."""
        saved = self._position
        try:
            yield self
        finally:
            self._position = saved
