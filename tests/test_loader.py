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
Tests for script loading and discovery.
"""

import pytest

from qbscript_linter.core.exceptions import ScriptLoadError
from qbscript_linter.core.loader import ScriptLoader


class TestLoadScript:
    def test_loads_bytes(self, make_script):
        path = make_script(b"\x01\x24")

        assert ScriptLoader().load_script(path) == b"\x01\x24"

    def test_accepts_string_path(self, make_script):
        path = make_script(b"\x24")

        assert ScriptLoader().load_script(str(path)) == b"\x24"

    def test_missing_file(self, tmp_path):
        with pytest.raises(ScriptLoadError, match="File does not exist"):
            ScriptLoader().load_script(tmp_path / "missing.qb")

    def test_directory(self, tmp_path):
        with pytest.raises(ScriptLoadError, match="path is a directory"):
            ScriptLoader().load_script(tmp_path)

    def test_size_limit(self, make_script):
        path = make_script(bytes(1024 * 1024 + 1))

        with pytest.raises(ScriptLoadError, match="byte limit"):
            ScriptLoader(max_file_size_mb=1).load_script(path)

    def test_empty_file_loads(self, make_script):
        assert ScriptLoader().load_script(make_script(b"")) == b""


class TestDiscoverScripts:
    def test_files_kept_in_order(self, make_script, tmp_path):
        b = make_script(b"\x24", name="b.qb")
        a = make_script(b"\x24", name="a.bin")
        missing = tmp_path / "missing.qb"

        assert ScriptLoader().discover_scripts([b, a, missing]) == [b, a, missing]

    def test_directory_kept_without_recursive(self, tmp_path):
        assert ScriptLoader().discover_scripts([tmp_path]) == [tmp_path]

    def test_recursive_expands_by_extension(self, make_script, tmp_path):
        nested = make_script(b"\x24", name="sub/z.qb")
        top = make_script(b"\x24", name="a.QB")
        make_script(b"\x24", name="notes.txt")

        found = ScriptLoader().discover_scripts([tmp_path], recursive=True)

        assert found == sorted([nested, top])

    def test_custom_extensions(self, make_script, tmp_path):
        script = make_script(b"\x24", name="x.qbc")
        make_script(b"\x24", name="y.qb")

        assert ScriptLoader(extensions=[".QBC"]).discover_scripts([tmp_path], recursive=True) == [script]
