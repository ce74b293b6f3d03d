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
Open/close balance tracking for dict, array and paren blocks.
"""

from __future__ import annotations

from enum import Enum

from . import rules
from .reporter import ErrorReporter


class NestingKind(str, Enum):
    DICT = "dict"
    ARRAY = "array"
    PAREN = "paren"


class NestingTracker:
    """Three independent depth counters.

    A counter that goes negative stays negative: later ends of the same kind
    are judged against the deficit rather than a reset count.
    """

    def __init__(self, reporter: ErrorReporter):
        self._reporter = reporter
        self._depth = {kind: 0 for kind in NestingKind}

    def depth(self, kind: NestingKind) -> int:
        return self._depth[kind]

    def enter(self, kind: NestingKind) -> None:
        self._depth[kind] += 1

    def exit(self, kind: NestingKind, position: int) -> None:
        self._depth[kind] -= 1
        if self._depth[kind] < 0:
            self._reporter.report(rules.UNBALANCED_NESTING, f"Unbalanced end {kind.value}", position)

    def check_closed(self, position: int) -> None:
        """Report every block kind still open; used only when the policy asks for it."""
        for kind in NestingKind:
            if self._depth[kind] > 0:
                self._reporter.report(rules.UNCLOSED_NESTING, f"Unclosed {kind.value} at end of script", position)
