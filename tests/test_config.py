import dataclasses
import math

import pytest

from eco_sim.sim.config import Settings, ConfigSnapshot, ANIMAL


def test_defaults_are_valid():
    snap = Settings().snapshot()
    assert isinstance(snap, ConfigSnapshot)
    assert snap.regrow_while_paused is True


@pytest.mark.parametrize("field, value", [
    ("plant_regen", -0.1),
    ("move_cost", -1.0),
    ("vision_range", math.nan),
    ("herb_speed", math.inf),
    ("carn_speed", "fast"),
    ("plant_cap", -1),
    ("plant_cap", 2.5),
    ("plant_cap", True),
    ("init_herbivores", None),
])
def test_validate_rejects_bad_values(field, value):
    s = Settings(**{field: value})
    with pytest.raises(ValueError, match=field):
        s.validate()


@pytest.mark.parametrize("field, value", [
    ("herb_speed", ANIMAL.max_speed + 0.1),
    ("carn_speed", ANIMAL.min_speed - 0.1),
    ("vision_range", ANIMAL.max_vision + 1),
    ("vision_range", ANIMAL.min_vision - 1),
])
def test_validate_rejects_values_outside_gene_ranges(field, value):
    with pytest.raises(ValueError, match="outside"):
        Settings(**{field: value}).snapshot()


def test_validate_lists_every_problem():
    with pytest.raises(ValueError) as exc:
        Settings(plant_regen=-1.0, init_plants=-3).validate()
    assert "plant_regen" in str(exc.value) and "init_plants" in str(exc.value)


def test_zero_values_are_allowed():
    Settings(plant_regen=0.0, plant_cap=0, move_cost=0.0,
             init_herbivores=0, init_carnivores=0, init_plants=0).validate()


def test_snapshot_is_frozen_and_detached():
    s = Settings()
    snap = s.snapshot()
    with pytest.raises(dataclasses.FrozenInstanceError):
        snap.plant_regen = 5.0
    s.plant_regen = 9.0
    assert snap.plant_regen == 2.0
    assert s.snapshot().plant_regen == 9.0
