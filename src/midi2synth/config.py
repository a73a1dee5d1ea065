# src/midi2synth/config.py
from __future__ import annotations
from dataclasses import fields
from pathlib import Path
from typing import Any, Dict, Optional
import copy
import sys
import yaml

from .envelope import EnvelopeConfig
from .partition import PartitionOptions
from .timeline import DEFAULT_TEMPO_US

# package root: .../src/midi2synth
PKG_ROOT = Path(__file__).resolve().parent
DEFAULT_CFG_PATH = PKG_ROOT / "config.default.yaml"
USER_CFG_PATH = Path.home() / ".config" / "midi2synth" / "config.yaml"

def _safe_load(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    try:
        return yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        print(f"[config] WARNING: ignoring {path}: {e}", file=sys.stderr)
        return {}

def _deep_merge(a: Dict[str, Any], b: Dict[str, Any]) -> Dict[str, Any]:
    out = copy.deepcopy(a)
    for k, v in (b or {}).items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = _deep_merge(out[k], v)
        else:
            out[k] = copy.deepcopy(v)
    return out

def load_config(
    user_path: Optional[Path] = None,
    default_path: Optional[Path] = None,
) -> Dict[str, Any]:
    """
    Loads the packaged defaults and merges user overrides on top.
    Sections: 'envelope', 'partition', 'tempo'.
    """
    dpath = Path(default_path) if default_path else DEFAULT_CFG_PATH
    upath = Path(user_path) if user_path else USER_CFG_PATH

    defaults = _safe_load(dpath)
    user = _safe_load(upath)
    cfg = _deep_merge(defaults, user)

    cfg.setdefault("envelope", {})
    cfg.setdefault("partition", {})
    cfg.setdefault("tempo", {}).setdefault("default_tempo_us", DEFAULT_TEMPO_US)
    return cfg

def envelope_config(cfg: Dict[str, Any]) -> EnvelopeConfig:
    section = cfg.get("envelope", {}) or {}
    known = {f.name for f in fields(EnvelopeConfig)}
    return EnvelopeConfig(**{k: float(v) for k, v in section.items() if k in known})

def partition_options(cfg: Dict[str, Any]) -> PartitionOptions:
    section = cfg.get("partition", {}) or {}
    return PartitionOptions(
        allow_back_to_back=bool(section.get("allow_back_to_back", True)),
        check_sorted=bool(section.get("check_sorted", True)),
    )

def default_tempo_us(cfg: Dict[str, Any]) -> int:
    return int((cfg.get("tempo", {}) or {}).get("default_tempo_us", DEFAULT_TEMPO_US))
