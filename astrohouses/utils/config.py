# astrohouses/utils/config.py
import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import yaml

from astrohouses.core.constants import DEFAULT_OBLIQUITY_DEG

logger = logging.getLogger(__name__)

POLAR_POLICIES = ("fallback", "reject")


class AttrDict(dict):
    """Dict that also supports attribute access: cfg.houses and cfg['houses'] both work."""
    def __getattr__(self, item):
        try:
            return self[item]
        except KeyError as e:
            raise AttributeError(item) from e
    def __setattr__(self, key, value):
        self[key] = value

def _to_attr(obj):
    if isinstance(obj, dict):
        return AttrDict({k: _to_attr(v) for k, v in obj.items()})
    if isinstance(obj, list):
        return [_to_attr(x) for x in obj]
    return obj

def load_config(path: str):
    """
    Load YAML config from `path`; a missing `houses` section is created empty.
    Optional env overrides (applied on top of the file):
      - ASTRO_DEFAULT_SYSTEM    → houses.default_system
      - ASTRO_DEFAULT_OBLIQUITY → houses.obliquity_deg
      - ASTRO_POLAR_POLICY      → houses.polar_policy
    Returns an AttrDict for convenient access.
    """
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"config root must be a mapping: {path}")

    houses = data.setdefault("houses", {}) or {}
    data["houses"] = houses
    for env_key, cfg_key in (
        ("ASTRO_DEFAULT_SYSTEM", "default_system"),
        ("ASTRO_DEFAULT_OBLIQUITY", "obliquity_deg"),
        ("ASTRO_POLAR_POLICY", "polar_policy"),
    ):
        val = os.getenv(env_key)
        if val:
            houses[cfg_key] = val

    logger.info("loaded house configuration from %s", path)
    return _to_attr(data)


@dataclass(frozen=True)
class HouseSettings:
    """Facade defaults; every field can come from YAML (see load_config)."""
    default_system: str = "placidus"
    obliquity_deg: float = DEFAULT_OBLIQUITY_DEG
    polar_policy: str = "fallback"
    fallback_chains: Dict[str, List[str]] = field(default_factory=dict)

    def __post_init__(self):
        if self.polar_policy not in POLAR_POLICIES:
            raise ValueError(f"polar_policy must be one of {POLAR_POLICIES}, got {self.polar_policy!r}")

    @classmethod
    def from_config(cls, cfg: Optional[Dict[str, Any]]) -> "HouseSettings":
        houses = (cfg or {}).get("houses") or {}
        kwargs: Dict[str, Any] = {}
        if houses.get("default_system"):
            kwargs["default_system"] = str(houses["default_system"])
        if houses.get("obliquity_deg") is not None:
            kwargs["obliquity_deg"] = float(houses["obliquity_deg"])
        if houses.get("polar_policy"):
            kwargs["polar_policy"] = str(houses["polar_policy"]).strip().lower()
        chains = houses.get("fallback_chains") or {}
        if chains:
            kwargs["fallback_chains"] = {str(k): [str(x) for x in v] for k, v in chains.items()}
        return cls(**kwargs)
