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
Tests for jump landing-point verification.
"""

import pytest

from qbscript_linter.core.cursor import ByteCursor
from qbscript_linter.core.exceptions import OutOfBoundsError
from qbscript_linter.core.jumps import JumpRole, landing_point, read_and_verify, verify_target


class TestNextBranch:
    def test_lands_past_else(self):
        # "01 48" sits four bytes before the landing point at 7
        cursor = ByteCursor(bytes.fromhex("47 06 00 01 48 04 00 01 28 24"))

        assert verify_target(cursor, 1, 6, JumpRole.NEXT_BRANCH)

    def test_lands_past_endif(self):
        cursor = ByteCursor(bytes.fromhex("47 04 00 01 28 24"))

        assert verify_target(cursor, 1, 4, JumpRole.NEXT_BRANCH)

    def test_lands_on_elseif(self):
        cursor = ByteCursor(bytes.fromhex("47 04 00 00 00 27"))

        assert verify_target(cursor, 1, 4, JumpRole.NEXT_BRANCH)

    def test_no_marker(self):
        cursor = ByteCursor(bytes.fromhex("01 01 01 01 47 02 00 01"))

        assert not verify_target(cursor, 5, 2, JumpRole.NEXT_BRANCH)

    def test_every_marker_is_read(self):
        # The endif marker matches, but the elseif marker at the landing
        # point lies past the end of the buffer.
        cursor = ByteCursor(bytes.fromhex("47 04 00 01 28"))

        with pytest.raises(OutOfBoundsError):
            verify_target(cursor, 1, 4, JumpRole.NEXT_BRANCH)

    def test_marker_before_start_raises(self):
        cursor = ByteCursor(bytes.fromhex("47 00 00"))

        with pytest.raises(OutOfBoundsError):
            verify_target(cursor, 1, 0, JumpRole.NEXT_BRANCH)


class TestOtherRoles:
    def test_endif(self):
        cursor = ByteCursor(bytes.fromhex("48 04 00 01 28"))

        assert verify_target(cursor, 1, 4, JumpRole.ENDIF)
        assert not verify_target(cursor, 1, 3, JumpRole.ENDIF)

    def test_end_switch(self):
        cursor = ByteCursor(bytes.fromhex("49 04 00 01 3D"))

        assert verify_target(cursor, 1, 4, JumpRole.END_SWITCH)

    @pytest.mark.parametrize("target", ["3D", "3E", "3F"])
    def test_next_case_accepts_each_case_opcode(self, target):
        cursor = ByteCursor(bytes.fromhex(f"3E 49 02 00 {target}"))

        assert verify_target(cursor, 2, 2, JumpRole.NEXT_CASE)

    def test_next_case_rejects_other_bytes(self):
        cursor = ByteCursor(bytes.fromhex("3E 49 02 00 40"))

        assert not verify_target(cursor, 2, 2, JumpRole.NEXT_CASE)


class TestCursorHandling:
    def test_verification_leaves_position_alone(self):
        cursor = ByteCursor(bytes.fromhex("47 06 00 01 48 04 00 01 28 24"))
        cursor.seek(3)

        verify_target(cursor, 1, 6, JumpRole.NEXT_BRANCH)

        assert cursor.position == 3

    def test_position_restored_after_out_of_bounds(self):
        cursor = ByteCursor(bytes.fromhex("47 00 00"))
        cursor.seek(3)

        with pytest.raises(OutOfBoundsError):
            verify_target(cursor, 1, 0, JumpRole.NEXT_BRANCH)

        assert cursor.position == 3

    def test_read_and_verify_consumes_field(self):
        cursor = ByteCursor(bytes.fromhex("48 04 00 01 28"))
        cursor.seek(1)

        field, ok = read_and_verify(cursor, JumpRole.ENDIF)

        assert (field, ok) == (1, True)
        assert cursor.position == 3

    def test_landing_point_is_relative_to_field(self):
        assert landing_point(0x10, 0x20) == 0x30
