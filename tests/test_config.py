# tests/test_config.py
from __future__ import annotations

import pytest

from astrohouses.core.constants import DEFAULT_OBLIQUITY_DEG
from astrohouses.core.house import HouseCalculator, compute_houses_with_policy
from astrohouses.core.validators import LatitudeLimitExceeded
from astrohouses.utils.config import AttrDict, HouseSettings, load_config

YAML = """
houses:
  default_system: Koch
  obliquity_deg: 23.44
  polar_policy: reject
  fallback_chains:
    placidus: [campanus, equal]
"""


@pytest.fixture
def config_path(tmp_path, monkeypatch):
    for key in ("ASTRO_DEFAULT_SYSTEM", "ASTRO_DEFAULT_OBLIQUITY", "ASTRO_POLAR_POLICY"):
        monkeypatch.delenv(key, raising=False)
    p = tmp_path / "houses.yaml"
    p.write_text(YAML, encoding="utf-8")
    return str(p)


def test_load_config_attribute_access(config_path):
    cfg = load_config(config_path)
    assert isinstance(cfg, AttrDict)
    assert cfg.houses.default_system == "Koch"
    assert cfg["houses"]["fallback_chains"]["placidus"] == ["campanus", "equal"]
    with pytest.raises(AttributeError):
        cfg.missing


def test_env_overrides_file(config_path, monkeypatch):
    monkeypatch.setenv("ASTRO_POLAR_POLICY", "fallback")
    monkeypatch.setenv("ASTRO_DEFAULT_OBLIQUITY", "23.5")
    settings = HouseSettings.from_config(load_config(config_path))
    assert settings.polar_policy == "fallback"
    assert settings.obliquity_deg == 23.5


def test_empty_file_gives_defaults(tmp_path, monkeypatch):
    for key in ("ASTRO_DEFAULT_SYSTEM", "ASTRO_DEFAULT_OBLIQUITY", "ASTRO_POLAR_POLICY"):
        monkeypatch.delenv(key, raising=False)
    p = tmp_path / "empty.yaml"
    p.write_text("", encoding="utf-8")
    settings = HouseSettings.from_config(load_config(str(p)))
    assert settings == HouseSettings()
    assert settings.obliquity_deg == DEFAULT_OBLIQUITY_DEG


def test_non_mapping_root_is_rejected(tmp_path):
    p = tmp_path / "list.yaml"
    p.write_text("- 1\n- 2\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_config(str(p))


def test_invalid_polar_policy_is_rejected():
    with pytest.raises(ValueError):
        HouseSettings(polar_policy="maybe")


def test_calculator_from_config(config_path):
    calc = HouseCalculator.from_config(config_path)
    res = calc.calculate_houses(None, 120.0, 40.0)
    assert res.system == "koch"
    assert res.input["obliquity"] == 23.44
    assert calc.fallback_chain("placidus")[:3] == ["placidus", "campanus", "equal"]
    with pytest.raises(LatitudeLimitExceeded):
        compute_houses_with_policy("placidus", 120.0, 65.0, calculator=calc)
