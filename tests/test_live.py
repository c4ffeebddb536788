"""
The frame-driven wrapper: controls, manual spawns, timer ticks and views.
"""
import pytest

from eco_sim.sim.live import LiveSim, AnimalView, PlantView
from eco_sim.sim.models import HERBIVORE, CARNIVORE

from conftest import herbivore


@pytest.fixture
def live(settings):
    return LiveSim(settings, seed=7, spawn=False)


def test_default_instances_own_their_settings():
    a = LiveSim(spawn=False)
    b = LiveSim(spawn=False)
    assert a.settings is not b.settings
    a.settings.plant_regen = 9.0
    assert b.settings.plant_regen == 2.0


def test_initial_spawn_uses_explicit_counts(live):
    live.apply_initial_spawn(herbivores=5, carnivores=2, plants=10)
    assert live.counts() == dict(herbivores=5, carnivores=2, plants=10)
    assert live.running


def test_initial_spawn_falls_back_to_settings(settings):
    settings.init_herbivores, settings.init_carnivores, settings.init_plants = 3, 1, 4
    live = LiveSim(settings, seed=7)
    assert live.counts() == dict(herbivores=3, carnivores=1, plants=4)


def test_initial_spawn_respects_plant_capacity(live, settings):
    settings.plant_cap = 3
    live.apply_initial_spawn(herbivores=0, carnivores=0, plants=10)
    assert len(live.world.plants) == 3
    assert live.spawn_plant() is None


def test_initial_spawn_replaces_previous_population(live):
    live.apply_initial_spawn(herbivores=5, carnivores=0, plants=0)
    live.apply_initial_spawn(herbivores=2, carnivores=0, plants=0)
    assert live.counts()["herbivores"] == 2


def test_manual_spawns(live):
    assert live.spawn_herbivore().species == HERBIVORE
    assert live.spawn_carnivore().species == CARNIVORE
    assert live.spawn_plant() is not None
    assert live.counts() == dict(herbivores=1, carnivores=1, plants=1)


def test_stop_freezes_agents_but_not_the_clock(live):
    a = live.spawn_herbivore()
    pos = (a.x, a.y)
    live.stop()
    live.step(0.05)
    assert not live.running
    assert (a.x, a.y) == pos and a.age == 0.0
    assert live.world.time == pytest.approx(0.05)
    live.start()
    live.step(0.05)
    assert a.age == pytest.approx(0.05)


def test_reset_clears_everything_and_stops(live):
    live.apply_initial_spawn(herbivores=4, carnivores=1, plants=5)
    for _ in range(25):
        live.step(0.05)
    assert live.history()
    live.reset()
    assert live.counts() == dict(herbivores=0, carnivores=0, plants=0)
    assert live.history() == []
    assert live.world.time == 0.0 and live.world.plant_accumulator == 0.0
    assert not live.running


def test_first_tick_has_zero_dt_and_later_ticks_are_clamped(live):
    live.tick(100.0)
    assert live.world.time == 0.0
    live.tick(101.0)
    assert live.world.time == pytest.approx(0.05)
    live.tick(101.02)
    assert live.world.time == pytest.approx(0.07)


def test_stats_sampled_every_half_second(live):
    for _ in range(25):
        live.step(0.05)
    assert len(live.history()) == 2


def test_settings_changes_apply_on_next_tick(live, settings):
    live.step(0.05)
    assert live.world.plants == []
    settings.plant_regen = 20.0
    live.step(0.05)
    assert len(live.world.plants) == 1


def test_invalid_settings_rejected_at_tick(live, settings):
    settings.move_cost = -1.0
    with pytest.raises(ValueError):
        live.step(0.05)


def test_plant_views(live):
    p = live.spawn_plant()
    assert live.plant_views() == [PlantView(p.x, p.y, p.radius)]


def test_animal_view_energy_ratio_and_hidden_overlays(live):
    a = herbivore(live.world, live.cfg, 300, 300, energy=75.0)
    (view,) = live.animal_views()
    assert isinstance(view, AnimalView)
    assert view.energy_ratio == pytest.approx(0.5)
    assert view.vision is None and view.target is None and view.territory is None
    a.energy = 400.0
    assert live.animal_views()[0].energy_ratio == 1.0


def test_animal_view_overlays_follow_toggles(settings):
    settings.show_vision = True
    settings.show_targets = True
    live = LiveSim(settings, seed=7, spawn=False)
    me = herbivore(live.world, live.cfg, 300, 300, energy=10.0, vision=100.0)
    plant = live.world.add_plant(live.cfg, x=350, y=300)
    live.step(0.05)
    (view,) = live.animal_views()
    assert view.vision == 100.0
    assert view.target == (plant.x, plant.y)
    assert me.state == "seek_food"

    settings.show_targets = False
    live.stop()
    live.step(0.05)
    assert live.animal_views()[0].target is None


def test_territory_overlay_only_when_enabled(settings):
    settings.territory = True
    live = LiveSim(settings, seed=7, spawn=False)
    c = live.spawn_carnivore()
    (view,) = live.animal_views()
    assert view.territory == (c.territory.cx, c.territory.cy, c.territory.radius)
    settings.territory = False
    live.stop()
    live.step(0.05)
    assert live.animal_views()[0].territory is None
