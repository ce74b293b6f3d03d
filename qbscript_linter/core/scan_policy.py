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
Scan policy: which rules run, how severe they are, and which engine knobs apply.

Usage
-----
    from qbscript_linter.core.scan_policy import ScanPolicy

    # Load built-in defaults (compatibility mode)
    policy = ScanPolicy.default()

    # Load a project policy (merges on top of defaults)
    policy = ScanPolicy.from_yaml("qb_policy.yaml")

    # Dump the current (including default) policy for editing
    policy.to_yaml("generated_policy.yaml")
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from ..data import DATA_DIR, DEFAULT_POLICY_PATH
from .engine import EngineOptions
from .exceptions import PolicyError
from .models import Severity
from .opcodes import MAX_STRUCT_PADDING
from .rules import RULES

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Where the built-in policies live (ship with the package)
# ---------------------------------------------------------------------------
_PRESET_POLICIES: dict[str, Path] = {
    "strict": DATA_DIR / "strict_policy.yaml",
    "balanced": DEFAULT_POLICY_PATH,
    "permissive": DATA_DIR / "permissive_policy.yaml",
}


# ---------------------------------------------------------------------------
# Data classes for each policy section
# ---------------------------------------------------------------------------


@dataclass
class OpcodePolicy:
    """Controls the known-opcode table."""

    # Use 0x37-0x39 instead of the historical single 0x37 entry
    corrected_ranges: bool = False


@dataclass
class NestingPolicy:
    """Controls block balance checks."""

    # Report dict/array/paren blocks still open at the end of the script
    check_balance_at_end: bool = False


@dataclass
class StructPolicy:
    """Controls struct layout checks."""

    # Longest zero run before a struct header's 0x01 byte (includes the
    # header's own two zero bytes) before STRUCT_PADDING_TOO_LONG fires
    max_padding: int = MAX_STRUCT_PADDING


@dataclass
class SeverityOverride:
    """A per-rule severity override."""

    rule_id: str
    severity: str  # ERROR / WARNING / INFO
    reason: str = ""


# ---------------------------------------------------------------------------
# The top-level policy object
# ---------------------------------------------------------------------------


@dataclass
class ScanPolicy:
    """Project scan policy – everything about linting that should be customisable."""

    policy_name: str = "default"
    policy_version: str = "1.0"
    preset_base: str = "balanced"

    opcodes: OpcodePolicy = field(default_factory=OpcodePolicy)
    nesting: NestingPolicy = field(default_factory=NestingPolicy)
    structs: StructPolicy = field(default_factory=StructPolicy)
    severity_overrides: list[SeverityOverride] = field(default_factory=list)
    disabled_rules: set[str] = field(default_factory=set)

    # -----------------------------------------------------------------------
    # Convenience helpers
    # -----------------------------------------------------------------------

    def get_severity_override(self, rule_id: str) -> str | None:
        """Return the overridden severity for *rule_id*, or ``None``."""
        for ovr in self.severity_overrides:
            if ovr.rule_id == rule_id:
                return ovr.severity
        return None

    def engine_options(self) -> EngineOptions:
        """Translate the policy into scanner knobs."""
        return EngineOptions(
            corrected_opcode_ranges=self.opcodes.corrected_ranges,
            check_balance_at_end=self.nesting.check_balance_at_end,
            max_struct_padding=self.structs.max_padding,
        )

    def validate(self) -> None:
        """Reject unknown rule ids and severities.

        Raises:
            PolicyError: On the first problem found.
        """
        for rule_id in self.disabled_rules:
            if rule_id not in RULES:
                raise PolicyError(f"Unknown rule in disabled_rules: {rule_id}")
            if RULES[rule_id].fatal:
                raise PolicyError(f"Fatal rule {rule_id} cannot be disabled")
        for ovr in self.severity_overrides:
            if not isinstance(ovr.rule_id, str) or ovr.rule_id not in RULES:
                raise PolicyError(f"Unknown rule in severity_overrides: {ovr.rule_id}")
            if not isinstance(ovr.severity, str):
                raise PolicyError(f"Severity for {ovr.rule_id} must be a string, got {ovr.severity!r}")
            try:
                severity = Severity(ovr.severity.upper())
            except ValueError:
                raise PolicyError(f"Invalid severity '{ovr.severity}' for {ovr.rule_id}") from None
            if severity in (Severity.FATAL, Severity.CLEAN):
                raise PolicyError(f"Severity {severity.value} cannot be assigned by override ({ovr.rule_id})")
        if self.structs.max_padding < 0:
            raise PolicyError("structs.max_padding must be non-negative")

    # -----------------------------------------------------------------------
    # Construction helpers
    # -----------------------------------------------------------------------

    @classmethod
    def default(cls) -> ScanPolicy:
        """Load the built-in default policy that ships with the package."""
        return cls.from_yaml(DEFAULT_POLICY_PATH)

    @classmethod
    def from_preset(cls, name: str) -> ScanPolicy:
        """Load a named preset policy: ``strict``, ``balanced``, or ``permissive``."""
        name_lower = name.lower()
        if name_lower not in _PRESET_POLICIES:
            raise ValueError(f"Unknown preset '{name}'. Available: {', '.join(sorted(_PRESET_POLICIES))}")
        return cls.from_yaml(_PRESET_POLICIES[name_lower])

    @classmethod
    def preset_names(cls) -> list[str]:
        """Return available preset policy names."""
        return sorted(_PRESET_POLICIES.keys())

    @classmethod
    def from_yaml(cls, path: str | Path) -> ScanPolicy:
        """
        Load a policy from a YAML file.

        The YAML is first merged on top of the built-in defaults so that
        users only need to specify the sections they want to override.
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Policy file not found: {path}")

        try:
            with open(path) as fh:
                raw: dict[str, Any] = yaml.safe_load(fh) or {}
        except yaml.YAMLError as e:
            raise PolicyError(f"Invalid policy YAML in {path}: {e}") from e
        if not isinstance(raw, dict):
            raise PolicyError(f"Policy file {path} must contain a mapping")

        is_default = path.resolve() == DEFAULT_POLICY_PATH.resolve()
        if is_default:
            policy = cls._from_dict(raw)
        else:
            merged = cls._deep_merge(cls._load_default_raw(), raw)
            policy = cls._from_dict(merged)

        policy.validate()
        logger.debug("Loaded scan policy %s from %s", policy.policy_name, path)
        return policy

    def to_yaml(self, path: str | Path) -> None:
        """Dump the full policy to a YAML file for editing."""
        data = self._to_dict()
        with open(path, "w") as fh:
            fh.write("# QbScript Linter – Scan Policy\n")
            fh.write("# Only include sections you want to override; omitted sections\n")
            fh.write("# will use the built-in defaults.\n\n")
            yaml.dump(data, fh, default_flow_style=False, sort_keys=False, width=120)

    # -----------------------------------------------------------------------
    # Internal parsing
    # -----------------------------------------------------------------------

    @classmethod
    def _load_default_raw(cls) -> dict[str, Any]:
        if DEFAULT_POLICY_PATH.exists():
            with open(DEFAULT_POLICY_PATH) as fh:
                return yaml.safe_load(fh) or {}
        return {}

    @staticmethod
    def _deep_merge(base: dict, override: dict) -> dict:
        """Recursively merge *override* into *base*.

        Lists in the override replace the base list.
        """
        result = dict(base)
        for key, val in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(val, dict):
                result[key] = ScanPolicy._deep_merge(result[key], val)
            else:
                result[key] = val
        return result

    @classmethod
    def _from_dict(cls, d: dict[str, Any]) -> ScanPolicy:
        op = _section(d, "opcodes")
        ns = _section(d, "nesting")
        st = _section(d, "structs")

        raw_overrides = d.get("severity_overrides") or []
        if not isinstance(raw_overrides, list) or not all(isinstance(o, dict) for o in raw_overrides):
            raise PolicyError("severity_overrides must be a list of mappings")
        try:
            severity_overrides = [SeverityOverride(**ovr) for ovr in raw_overrides]
        except TypeError as e:
            raise PolicyError(f"Malformed severity override: {e}") from e

        disabled_rules = d.get("disabled_rules") or []
        if not isinstance(disabled_rules, list) or not all(isinstance(r, str) for r in disabled_rules):
            raise PolicyError("disabled_rules must be a list of rule ids")

        return cls(
            policy_name=str(d.get("policy_name", "default")),
            policy_version=str(d.get("policy_version", "1.0")),
            preset_base=str(d.get("preset_base", "balanced")),
            opcodes=OpcodePolicy(
                corrected_ranges=_typed(op, "opcodes", "corrected_ranges", bool, False),
            ),
            nesting=NestingPolicy(
                check_balance_at_end=_typed(ns, "nesting", "check_balance_at_end", bool, False),
            ),
            structs=StructPolicy(
                max_padding=_typed(st, "structs", "max_padding", int, MAX_STRUCT_PADDING),
            ),
            severity_overrides=severity_overrides,
            disabled_rules=set(disabled_rules),
        )

    def _to_dict(self) -> dict[str, Any]:
        return {
            "policy_name": self.policy_name,
            "policy_version": self.policy_version,
            "preset_base": self.preset_base,
            "opcodes": {
                "corrected_ranges": self.opcodes.corrected_ranges,
            },
            "nesting": {
                "check_balance_at_end": self.nesting.check_balance_at_end,
            },
            "structs": {
                "max_padding": self.structs.max_padding,
            },
            "severity_overrides": [
                {"rule_id": o.rule_id, "severity": o.severity, "reason": o.reason} for o in self.severity_overrides
            ],
            "disabled_rules": sorted(self.disabled_rules),
        }


def _section(d: dict[str, Any], name: str) -> dict[str, Any]:
    section = d.get(name) or {}
    if not isinstance(section, dict):
        raise PolicyError(f"Policy section '{name}' must be a mapping")
    return section


def _typed(section: dict[str, Any], section_name: str, key: str, kind: type, default: Any) -> Any:
    """Return ``section[key]`` if it is a *kind*, *default* if absent."""
    value = section.get(key, default)
    # Reject bools for int fields
    if not isinstance(value, kind) or (kind is int and isinstance(value, bool)):
        raise PolicyError(f"{section_name}.{key} must be {kind.__name__}, got {value!r}")
    return value
