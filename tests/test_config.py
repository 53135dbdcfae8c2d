from pathlib import Path

import pytest

from collision_guard.utils.config import (
    ConfigError,
    get,
    hazards_from_config,
    load_yaml,
    peers_from_config,
    tunables_from_config,
)
from collision_guard.utils.types import ClosingModel, HazardCategory, Sensitivity

REPO_CONFIG = Path(__file__).resolve().parent.parent / "configs" / "system.yaml"


def test_load_missing_yaml(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_yaml(tmp_path / "nope.yaml")


def test_dot_get():
    cfg = {"runtime": {"output_dir": "out", "nested": {"x": 1}}}
    assert get(cfg, "runtime.output_dir") == "out"
    assert get(cfg, "runtime.nested.x") == 1
    assert get(cfg, "runtime.missing", "d") == "d"
    assert get(cfg, "runtime.output_dir.deeper", 7) == 7


def test_tunables_defaults():
    t = tunables_from_config({})
    assert t.safe_distance_m == 50.0
    assert t.proximity_multiplier == 2.0
    assert t.sensitivity == Sensitivity.MEDIUM
    assert t.closing_model == ClosingModel.SCALAR


def test_tunables_parsing():
    t = tunables_from_config({"tunables": {"safe_distance_m": 80, "sensitivity": "HIGH", "closing_model": "vector"}})
    assert t.safe_distance_m == 80.0
    assert t.sensitivity.multiplier == 1.3
    assert t.closing_model == ClosingModel.VECTOR


@pytest.mark.parametrize(
    "tunables",
    [{"safe_distance_m": 0}, {"proximity_multiplier": 0.5}, {"sensitivity": "extreme"}, {"closing_model": "psychic"}],
)
def test_bad_tunables(tunables):
    with pytest.raises(ConfigError):
        tunables_from_config({"tunables": tunables})


def test_default_hazards():
    zones = hazards_from_config({})
    assert [z.zone_id for z in zones] == ["intersection-1", "school-1", "hospital-1"]
    assert zones[0].category == HazardCategory.INTERSECTION
    assert zones[1].radius_m == 30.0


@pytest.mark.parametrize(
    "item",
    [
        {"id": "z", "lat": 0, "lng": 0, "radius": 0, "type": "school"},
        {"id": "z", "lat": 91, "lng": 0, "radius": 10, "type": "school"},
        {"id": "z", "lat": 0, "lng": 0, "radius": 10, "type": "airport"},
    ],
)
def test_bad_hazards(item):
    with pytest.raises(ConfigError):
        hazards_from_config({"hazards": [item]})


def test_peers():
    peers = peers_from_config({"simulation": {"peers": [{"id": "p", "lat": 1, "lng": 2, "speed": 30, "heading": 370}]}})
    assert peers[0].heading_deg == pytest.approx(10.0)
    with pytest.raises(ConfigError):
        peers_from_config({"simulation": {"peers": [{"id": "p", "lat": 1, "lng": 2, "speed": -1}]}})


def test_repo_config_is_valid():
    cfg = load_yaml(REPO_CONFIG)
    assert tunables_from_config(cfg).safe_distance_m == 50.0
    assert len(hazards_from_config(cfg)) == 3
    assert len(peers_from_config(cfg)) == 2
