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
Configuration class for QbScript Linter.

Values come from explicit arguments first, then ``QBSCRIPT_LINTER_*``
environment variables, then the defaults in :class:`LinterConstants`.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import dotenv_values

from .constants import LinterConstants

ENV_PREFIX = "QBSCRIPT_LINTER_"


@dataclass
class Config:
    """
    Runtime configuration for the linter and its CLI.
    """

    # Policy preset name or path to a policy YAML
    policy: str | None = None

    # Loading
    max_file_size_mb: int = LinterConstants.DEFAULT_MAX_FILE_SIZE_MB
    extensions: tuple[str, ...] = field(default_factory=lambda: LinterConstants.DEFAULT_EXTENSIONS)

    # Output Options
    output_format: str = LinterConstants.DEFAULT_OUTPUT_FORMAT
    log_level: str = LinterConstants.DEFAULT_LOG_LEVEL

    def __post_init__(self):
        """Load configuration from environment variables if not provided."""

        if self.policy is None:
            self.policy = os.getenv(f"{ENV_PREFIX}POLICY") or None

        if self.max_file_size_mb == LinterConstants.DEFAULT_MAX_FILE_SIZE_MB:
            if env_size := os.getenv(f"{ENV_PREFIX}MAX_FILE_SIZE_MB"):
                try:
                    self.max_file_size_mb = int(env_size)
                except ValueError:
                    raise ValueError(f"{ENV_PREFIX}MAX_FILE_SIZE_MB must be an integer, got {env_size!r}") from None

        if self.extensions == LinterConstants.DEFAULT_EXTENSIONS:
            if env_ext := os.getenv(f"{ENV_PREFIX}EXTENSIONS"):
                parts = [p.strip().lower() for p in env_ext.split(",")]
                self.extensions = tuple(p if p.startswith(".") else f".{p}" for p in parts if p)

        if self.output_format == LinterConstants.DEFAULT_OUTPUT_FORMAT:
            if env_format := os.getenv(f"{ENV_PREFIX}FORMAT"):
                self.output_format = env_format.lower()

        if self.output_format not in LinterConstants.OUTPUT_FORMATS:
            raise ValueError(
                f"Unknown output format '{self.output_format}'. "
                f"Available: {', '.join(LinterConstants.OUTPUT_FORMATS)}"
            )

        if self.log_level == LinterConstants.DEFAULT_LOG_LEVEL:
            if env_level := os.getenv(f"{ENV_PREFIX}LOG_LEVEL"):
                self.log_level = env_level.upper()

    @classmethod
    def from_env(cls) -> "Config":
        """
        Create configuration from environment variables.

        Returns:
            Config instance with values from environment
        """
        return cls()

    @classmethod
    def from_file(cls, config_file: Path) -> "Config":
        """
        Load configuration from a .env file.

        Variables already set in the process environment win over the file.

        Args:
            config_file: Path to .env file

        Returns:
            Config instance
        """
        if config_file.exists():
            for key, value in dotenv_values(config_file).items():
                if value is not None and key.startswith(ENV_PREFIX):
                    os.environ.setdefault(key, value)

        return cls.from_env()
