"""
Configuration Loader (``hr_config.loader``).

Responsibility
--------------
Loads the YAML configuration file and parses it into the typed
``hr_config.schema`` dataclasses.  Runtime callers go through
``hr_config.get_active_config()`` instead of calling this directly.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Unknown keys or out-of-range values  -> ``ValueError``.
"""

from __future__ import annotations

import hashlib
import json
from pathlib import Path
from typing import Any

import yaml

from hr_config.schema import HRConfig


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
        ValueError: if the document is not a mapping.
    """
    with open(path) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: top-level YAML must be a mapping, got {type(data).__name__}")
    return data


def compute_checksum(data: dict[str, Any]) -> str:
    """Deterministic SHA-256 over the canonical JSON form of ``data``."""
    canonical = json.dumps(data, sort_keys=True, separators=(",", ":"), default=str)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


def parse_hr_config(data: dict[str, Any]) -> HRConfig:
    """Parse a loaded YAML document into an ``HRConfig`` with its checksum."""
    return HRConfig.from_dict(data, checksum=compute_checksum(data))


def load_hr_config(path: Path) -> HRConfig:
    """Load and parse a configuration file."""
    return parse_hr_config(load_yaml_file(path))
