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
Script file loader.

Turns a path into the flat byte buffer the scanner works on, and expands
directories into the script files they contain.
"""

import logging
from collections.abc import Iterable
from pathlib import Path

from .exceptions import ScriptLoadError

logger = logging.getLogger(__name__)


class ScriptLoader:
    """Loads compiled QB scripts from disk."""

    DEFAULT_EXTENSIONS = (".qb",)

    def __init__(self, max_file_size_mb: int = 10, extensions: Iterable[str] | None = None):
        """
        Initialize script loader.

        Args:
            max_file_size_mb: Largest script to read, in MB
            extensions: File suffixes picked up when expanding directories
        """
        self.max_file_size_bytes = max_file_size_mb * 1024 * 1024
        self.extensions = tuple(e.lower() for e in (extensions or self.DEFAULT_EXTENSIONS))

    def load_script(self, path: str | Path) -> bytes:
        """
        Read a script into memory.

        Args:
            path: Path to the script file

        Returns:
            The script's bytes

        Raises:
            ScriptLoadError: If the script cannot be loaded
        """
        if not isinstance(path, Path):
            path = Path(path)

        if not path.exists():
            raise ScriptLoadError("File does not exist")

        if path.is_dir():
            raise ScriptLoadError("File does not exist (path is a directory)")

        size_bytes = path.stat().st_size
        if size_bytes > self.max_file_size_bytes:
            raise ScriptLoadError(
                f"File is {size_bytes} bytes, larger than the {self.max_file_size_bytes} byte limit"
            )

        try:
            data = path.read_bytes()
        except OSError as e:
            raise ScriptLoadError(f"Failed to read script: {e}") from e

        logger.debug("Loaded %s (%d bytes)", path, len(data))
        return data

    def discover_scripts(self, paths: Iterable[str | Path], recursive: bool = False) -> list[Path]:
        """
        Expand *paths* into a list of script files.

        Files are kept as given, in order, whatever their suffix (a missing
        file is kept too so it can be reported). With *recursive*, a
        directory contributes every file below it that carries one of the
        configured extensions, sorted by path; without it the directory is
        kept as-is and fails to load like any other non-file.

        Args:
            paths: Files and/or directories
            recursive: Expand directories

        Returns:
            List of file paths
        """
        scripts: list[Path] = []
        for entry in paths:
            entry = Path(entry)
            if not entry.is_dir() or not recursive:
                scripts.append(entry)
                continue
            found = sorted(p for p in entry.rglob("*") if p.is_file() and p.suffix.lower() in self.extensions)
            if not found:
                logger.info("No scripts with extensions %s in %s", ", ".join(self.extensions), entry)
            scripts.extend(found)
        return scripts
