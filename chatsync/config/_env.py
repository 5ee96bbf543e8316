"""Small env/validation helpers shared by the config dataclasses."""
from __future__ import annotations

import os
from typing import Any, Mapping, Optional


def validate_positive_int(value: int, name: str, min_val: int = 1) -> int:
    if not isinstance(value, int) or isinstance(value, bool) or value < min_val:
        raise ValueError(f"{name} must be an integer >= {min_val}, got {value!r}")
    return value


def validate_nonnegative_int(value: int, name: str) -> int:
    return validate_positive_int(value, name, min_val=0)


def env_int(overrides: Mapping[str, Any], attr: str, var: str, default: int) -> int:
    v = overrides.get(attr)
    if v is not None:
        return int(v)
    return int(os.environ.get(var, default))


def env_bool(overrides: Mapping[str, Any], attr: str, var: str, default: bool) -> bool:
    v = overrides.get(attr)
    if v is not None:
        return bool(v) if not isinstance(v, str) else v.lower() in ("1", "true", "yes")
    raw = os.environ.get(var, "").strip().lower()
    return raw in ("1", "true", "yes") if raw else default


def env_str(overrides: Mapping[str, Any], attr: str, var: str, default: Optional[str]) -> Optional[str]:
    v = overrides.get(attr)
    if v is not None:
        return str(v)
    raw = os.environ.get(var, "").strip()
    return raw or default
