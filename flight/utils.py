#!/usr/bin/env python3
"""
General utilities for Flight Simulator.
"""
import math
from typing import Optional


def try_float(val) -> Optional[float]:
    try:
        f = float(val)
    except (TypeError, ValueError):
        return None
    return f if math.isfinite(f) else None


def try_int(val) -> Optional[int]:
    f = try_float(val)
    return int(f) if f is not None else None
