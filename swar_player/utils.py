"""Environment parsing helpers shared by configuration loading."""
from __future__ import annotations

import math
import os
from typing import Callable, Optional, TypeVar

Number = TypeVar("Number", int, float)

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})


def resolve_path(value: str, base_dir: str) -> str:
    """Anchor ``value`` at ``base_dir`` unless it is already absolute."""
    return value if os.path.isabs(value) else os.path.join(base_dir, value)


def parse_bool_env(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in _TRUE_VALUES


def _parse_number_env(
    name: str,
    default: Number,
    cast: Callable[[str], Number],
    min_value: Optional[Number],
    max_value: Optional[Number],
) -> Number:
    raw = os.getenv(name)
    try:
        value = cast(raw) if raw is not None else default
    except ValueError:
        value = default
    if isinstance(value, float) and math.isnan(value):
        value = default
    if min_value is not None and value < min_value:
        value = min_value
    if max_value is not None and value > max_value:
        value = max_value
    return value


def parse_int_env(
    name: str,
    default: int,
    *,
    min_value: Optional[int] = None,
    max_value: Optional[int] = None,
) -> int:
    """Integer env var; unparsable values fall back to ``default``, then bounds apply."""
    return _parse_number_env(name, default, int, min_value, max_value)


def parse_float_env(
    name: str,
    default: float,
    *,
    min_value: Optional[float] = None,
    max_value: Optional[float] = None,
) -> float:
    return _parse_number_env(name, default, float, min_value, max_value)
