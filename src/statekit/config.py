from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional
import copy
import logging

import yaml

logger = logging.getLogger(__name__)


DEFAULT_CONFIG: Dict[str, Any] = {
    "store": {
        "max_history_items": 10,
        "single_flight": False,   # queue overlapping top-level dispatches
    },
    "logging": {
        "level": "WARNING",
        "file": None,
    },
}


def load_config(path: Optional[str | Path] = None) -> Dict[str, Any]:
    """
    Defaults, shallow-merged per section with a YAML file if one is given.
    A missing file is not an error: defaults are returned.
    """
    cfg = copy.deepcopy(DEFAULT_CONFIG)
    if not path:
        return cfg
    p = Path(path)
    if not p.exists():
        logger.warning("config not found: %s (using defaults)", p)
        return cfg
    with p.open("r", encoding="utf-8") as f:
        user = yaml.safe_load(f) or {}
    if not isinstance(user, dict):
        raise ValueError(f"{p}: top level must be a mapping, got {type(user).__name__}")
    for k, v in user.items():
        if isinstance(cfg.get(k), dict):
            # known section: `store:` with no value keeps the defaults
            if v is None:
                continue
            if not isinstance(v, dict):
                raise ValueError(f"{p}: section '{k}' must be a mapping, got {type(v).__name__}")
            cfg[k].update(v)
        else:
            cfg[k] = v
    return cfg


@dataclass(frozen=True)
class StoreConfig:
    max_history_items: int = 10
    single_flight: bool = False

    @classmethod
    def from_mapping(cls, cfg: Mapping[str, Any]) -> "StoreConfig":
        """Build from a full config dict (as returned by load_config) or its 'store' section."""
        section = cfg.get("store", cfg)
        if section is None:
            section = {}
        if not isinstance(section, Mapping):
            raise ValueError(f"store section must be a mapping, got {type(section).__name__}")
        max_items = section.get("max_history_items", cls.max_history_items)
        single = section.get("single_flight", cls.single_flight)
        # bool is an int subclass; reject it explicitly
        if isinstance(max_items, bool) or not isinstance(max_items, int):
            raise ValueError(f"store.max_history_items must be an integer, got {max_items!r}")
        if max_items < 0:
            raise ValueError(f"store.max_history_items must be >= 0, got {max_items}")
        if not isinstance(single, bool):
            raise ValueError(f"store.single_flight must be true/false, got {single!r}")
        return cls(max_history_items=max_items, single_flight=single)
