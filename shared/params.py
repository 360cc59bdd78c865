"""Declarative parameter schema.

A synth's parameter contract is defined as a list of ParamDef objects.
ParamSchema wraps the list and derives the plain dicts (default_params,
PARAM_RANGES, PARAM_SECTIONS) that presets, the CLI and the engine share.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class ParamType(Enum):
    FLOAT = "float"
    INT = "int"


@dataclass
class ParamDef:
    key: str
    type: ParamType
    default: Any
    section: str
    label: str = ""
    range: tuple | None = None  # (min, max), inclusive
    help: str = ""


class ParamSchema:
    """Derives the params dict structures from a declarative param list."""

    def __init__(self, params: list[ParamDef]):
        self._params = params
        self._by_key: dict[str, ParamDef] = {p.key: p for p in params}

    def default_params(self) -> dict:
        return {p.key: p.default for p in self._params}

    def param_ranges(self) -> dict[str, tuple]:
        """PARAM_RANGES: params with a (min, max) range."""
        return {p.key: p.range for p in self._params if p.range is not None}

    def param_sections(self) -> dict[str, list[str]]:
        """PARAM_SECTIONS: section name -> list of param keys."""
        sections: dict[str, list[str]] = {}
        for p in self._params:
            sections.setdefault(p.section, []).append(p.key)
        return sections

    def validate_and_clamp(self, raw: dict) -> dict:
        """Validate and clamp a raw params dict (e.g. a preset or CLI overrides).

        Unknown keys are dropped. Values that cannot be cast are dropped too,
        the rest are type-cast and clamped to range.
        """
        result = {}
        for key, value in raw.items():
            p = self._by_key.get(key)
            if p is None:
                continue

            if p.type == ParamType.INT:
                try:
                    v = int(round(value))
                except (TypeError, ValueError):
                    continue
            else:
                try:
                    v = float(value)
                except (TypeError, ValueError):
                    continue

            if p.range:
                lo, hi = p.range
                v = max(lo, min(hi, v))
            result[key] = v

        return result

    def get(self, key: str) -> ParamDef | None:
        return self._by_key.get(key)

    def __iter__(self):
        return iter(self._params)

    def __len__(self):
        return len(self._params)
