# eco_sim/sim/world.py
from __future__ import annotations
from typing import Iterable, List, Optional
import math

from .models import Plant, Animal, Genes, Territory, HERBIVORE, CARNIVORE
from .rng import RNG
from .config import WORLD, PLANT, ANIMAL, ConfigSnapshot


def clamp(v: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, v))


class World:
    """
    Owned aggregate for one simulation: entity lists, clock, accumulators
    and the random source. Every update function takes it explicitly.
    """
    def __init__(self, width: float = WORLD.width, height: float = WORLD.height, seed: int | None = None):
        self.width = width
        self.height = height
        self.rng = RNG(seed)
        self.plants: List[Plant] = []
        self.animals: List[Animal] = []
        self.time: float = 0.0
        self.plant_accumulator: float = 0.0
        self.running: bool = True
        self._plant_id = 0
        self._animal_id = 0

    def _next_plant_id(self) -> int:
        self._plant_id += 1
        return self._plant_id

    def _next_animal_id(self) -> int:
        self._animal_id += 1
        return self._animal_id

    def clear(self) -> None:
        self.plants = []
        self.animals = []
        self.plant_accumulator = 0.0
        self.time = 0.0

    # --- plants ---
    def add_plant(self, cfg: ConfigSnapshot, x: float | None = None, y: float | None = None) -> Optional[Plant]:
        """Add a plant unless capacity is reached; random position by default."""
        if len(self.plants) >= cfg.plant_cap:
            return None
        m = WORLD.plant_margin
        if x is None:
            x = self.rng.uniform(m, self.width - m)
        if y is None:
            y = self.rng.uniform(m, self.height - m)
        p = Plant(x=x, y=y, id=self._next_plant_id(), energy=PLANT.energy, radius=PLANT.radius)
        self.plants.append(p)
        return p

    def remove_plants(self, eaten: Iterable[Plant]) -> None:
        ids = {p.id for p in eaten}
        if ids:
            self.plants = [p for p in self.plants if p.id not in ids]

    # --- animals ---
    def make_animal(self, species: str, cfg: ConfigSnapshot,
                    x: float | None = None, y: float | None = None,
                    genes: Genes | None = None) -> Animal:
        """
        Build (but do not add) an animal. Base genes come from `genes` when
        given (offspring), otherwise from the settings; both get the birth
        jitter and are clamped to the gene ranges.
        """
        rng = self.rng
        m = WORLD.animal_margin
        if x is None:
            x = rng.uniform(m, self.width - m)
        if y is None:
            y = rng.uniform(m, self.height - m)

        if genes is None:
            base_speed = cfg.herb_speed if species == HERBIVORE else cfg.carn_speed
            base_vision = cfg.vision_range
        else:
            base_speed, base_vision = genes.speed, genes.vision
        g = Genes(
            speed=clamp(base_speed + rng.symmetric(ANIMAL.speed_jitter), ANIMAL.min_speed, ANIMAL.max_speed),
            vision=clamp(base_vision + rng.symmetric(ANIMAL.vision_jitter), ANIMAL.min_vision, ANIMAL.max_vision),
        )

        territory = None
        if species == CARNIVORE and cfg.territory:
            off = ANIMAL.territory_offset
            territory = Territory(
                cx=x + rng.symmetric(off),
                cy=y + rng.symmetric(off),
                radius=rng.uniform(*ANIMAL.territory_radius_range),
            )

        return Animal(
            id=self._next_animal_id(),
            species=species,
            genes=g,
            x=x, y=y,
            vx=rng.uniform(-1.0, 1.0) * g.speed,
            vy=rng.uniform(-1.0, 1.0) * g.speed,
            radius=ANIMAL.carnivore_radius if species == CARNIVORE else ANIMAL.herbivore_radius,
            energy=ANIMAL.carnivore_energy if species == CARNIVORE else ANIMAL.herbivore_energy,
            max_age=rng.uniform(*ANIMAL.max_age_range),
            territory=territory,
        )

    def add_animal(self, species: str, cfg: ConfigSnapshot, **kw) -> Animal:
        a = self.make_animal(species, cfg, **kw)
        self.animals.append(a)
        return a

    def compact(self) -> int:
        """Drop animals flagged dead or eaten; returns how many were removed."""
        before = len(self.animals)
        self.animals = [a for a in self.animals if a.alive]
        return before - len(self.animals)

    # --- queries ---
    def live_animals(self, species: str | None = None) -> List[Animal]:
        return [a for a in self.animals if a.alive and (species is None or a.species == species)]

    def count(self, species: str) -> int:
        return sum(1 for a in self.animals if a.alive and a.species == species)

    @staticmethod
    def dist2(a, b) -> float:
        dx = a.x - b.x
        dy = a.y - b.y
        return dx * dx + dy * dy

    @staticmethod
    def dist(a, b) -> float:
        return math.hypot(a.x - b.x, a.y - b.y)

    def bounce_inside(self, a: Animal, restitution: float) -> None:
        """Clamp to the walls (inset by radius) and reflect the crossing component."""
        r = a.radius
        if a.x < r:
            a.x = r
            a.vx *= -restitution
        if a.x > self.width - r:
            a.x = self.width - r
            a.vx *= -restitution
        if a.y < r:
            a.y = r
            a.vy *= -restitution
        if a.y > self.height - r:
            a.y = self.height - r
            a.vy *= -restitution
