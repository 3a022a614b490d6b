#!/usr/bin/env python3
"""
Preset JSON loading utilities.

This module defines a simple JSON schema and loader for tuning presets
(presets/*.json). A preset overrides any subset of FlightSettings fields.

Schema
======
Preset JSON (presets/*.json):
{
  "name": "Human-friendly preset name",
  "description": "Optional description",
  "settings": {
    "speed_model": "altitude",
    "speed_min": 10.0,
    "speed_max": 22.0,
    "difficulty_rate": 0.15,
    "max_life": 5
  }
}

Numeric fields must be numbers, string fields strings. Unknown keys and values
of the wrong type are skipped with a warning. Users can add their own JSON
files into the folder and they'll be picked up by the loader.
"""
import json
import logging
import os
from dataclasses import fields
from typing import Any, Dict, List, Optional, Tuple
from .settings import FlightSettings
from .utils import try_float, try_int

logger = logging.getLogger(__name__)

PRESETS_DIR = os.path.join(os.path.dirname(os.path.dirname(__file__)), "presets")


def _read_json(path: str) -> Optional[dict]:
  try:
    with open(path, "r", encoding="utf-8") as f:
      data = json.load(f)
  except (OSError, ValueError) as e:
    logger.warning("Could not read %s: %s", path, e)
    return None
  if not isinstance(data, dict):
    logger.warning("Ignoring %s: top level is not an object", path)
    return None
  return data


def _coerce_settings(raw: Dict[str, Any]) -> Dict[str, Any]:
  """Convert raw JSON values to the types FlightSettings declares."""
  types = {f.name: f.type for f in fields(FlightSettings)}
  out: Dict[str, Any] = {}
  for key, val in raw.items():
    if key not in types:
      logger.warning("Unknown preset key %r", key)
      continue
    t = types[key]
    if t in (int, "int"):
      coerced = try_int(val)
    elif t in (float, "float"):
      coerced = try_float(val)
    else:
      coerced = val if isinstance(val, str) else None
    if coerced is None:
      logger.warning("Bad value for %s: %r", key, val)
      continue
    out[key] = coerced
  return out


def list_presets(directory: str = PRESETS_DIR) -> List[Tuple[str, str]]:
  """Return list of (file_name, display_name) for available presets."""
  items: List[Tuple[str, str]] = []
  if not os.path.isdir(directory):
    return items
  for fn in sorted(os.listdir(directory)):
    if not fn.lower().endswith(".json"):
      continue
    path = os.path.join(directory, fn)
    data = _read_json(path) or {}
    display = data.get("name") or os.path.splitext(fn)[0]
    items.append((fn, display))
  return items


def load_preset(file_name: str, base: Optional[FlightSettings] = None,
                directory: str = PRESETS_DIR) -> Tuple[FlightSettings, str]:
  """
  Load a preset JSON by file name on top of `base` (defaults when omitted).
  Returns (settings, display_name). A missing or broken file yields `base`.
  """
  base = base or FlightSettings()
  path = file_name if os.path.isabs(file_name) else os.path.join(directory, file_name)
  data = _read_json(path) or {}
  display_name = data.get("name") or os.path.splitext(os.path.basename(file_name))[0]
  raw = data.get("settings", {})
  if not isinstance(raw, dict):
    logger.warning("Preset %s: 'settings' is not an object", file_name)
    raw = {}
  return base.with_overrides(**_coerce_settings(raw)), display_name
