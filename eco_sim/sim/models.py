# eco_sim/sim/models.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Union

HERBIVORE = "herbivore"
CARNIVORE = "carnivore"

# evaluation order doubles as the tie-break order
STATES = ("wander", "seek_food", "flee", "mate", "rest", "patrol")

@dataclass(frozen=True)
class Plant:
    x: float
    y: float
    id: int
    energy: float = 30.0
    radius: float = 5.0

@dataclass(frozen=True)
class Genes:
    speed: float
    vision: float

@dataclass
class Memory:
    x: float
    y: float
    seen_at: float

@dataclass(frozen=True)
class Territory:
    cx: float
    cy: float
    radius: float

@dataclass(frozen=True)
class Waypoint:
    """Synthesized target (remembered food spot or patrol point)."""
    x: float
    y: float
    radius: float = 0.0

@dataclass(eq=False)
class Animal:
    id: int
    species: str  # "herbivore" | "carnivore"
    genes: Genes
    x: float
    y: float
    vx: float
    vy: float
    radius: float
    energy: float
    max_age: float
    age: float = 0.0
    state: str = "wander"
    mate_cooldown: float = 0.0
    memory: Optional[Memory] = None
    territory: Optional[Territory] = None
    target: Optional[Union["Plant", "Animal", Waypoint]] = None
    patrol_target: Optional[Waypoint] = None
    # cleared when eaten or dead; the world compacts once per tick
    alive: bool = True

    def current_speed(self) -> float:
        return (self.vx * self.vx + self.vy * self.vy) ** 0.5

    def is_dead(self) -> bool:
        return self.energy <= 0 or self.age >= self.max_age
