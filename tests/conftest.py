import pytest

from eco_sim.sim.config import Settings
from eco_sim.sim.models import Genes, HERBIVORE, CARNIVORE
from eco_sim.sim.world import World


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def settings() -> Settings:
    """Quiet settings: every optional feature off, empty initial population."""
    return Settings(
        plant_regen=0.0,
        plant_cap=50,
        flocking=False,
        territory=False,
        memory=False,
        season=False,
        init_herbivores=0,
        init_carnivores=0,
        init_plants=0,
    )


@pytest.fixture
def cfg(settings):
    return settings.snapshot()


@pytest.fixture
def world() -> World:
    return World(seed=1234)


def place(world, cfg, species, x, y, energy=None, speed=1.6, vision=100.0,
          age=10.0, max_age=140.0, vx=0.0, vy=0.0):
    """Add an animal at an exact spot with controlled genes and state."""
    a = world.add_animal(species, cfg, x=x, y=y)
    a.genes = Genes(speed=speed, vision=vision)
    a.vx, a.vy = vx, vy
    a.age = age
    a.max_age = max_age
    if energy is not None:
        a.energy = energy
    return a


def herbivore(world, cfg, x, y, **kw):
    return place(world, cfg, HERBIVORE, x, y, **kw)


def carnivore(world, cfg, x, y, **kw):
    return place(world, cfg, CARNIVORE, x, y, **kw)
