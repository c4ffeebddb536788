# eco_sim/sim/genetics.py
from __future__ import annotations
from typing import Optional
import logging

from .models import Animal, Genes
from .config import REPRO, ANIMAL, ConfigSnapshot
from .world import World, clamp

logger = logging.getLogger(__name__)

def _mix_value(a: float, b: float, noise: float, lo: float, hi: float, world: World) -> float:
    return clamp((a + b) / 2.0 + world.rng.symmetric(noise), lo, hi)

def child_genes(world: World, a: Animal, b: Animal) -> Genes:
    """Parental mean, perturbed per gene and clamped to the birth ranges."""
    return Genes(
        speed=_mix_value(a.genes.speed, b.genes.speed, REPRO.speed_noise,
                         ANIMAL.min_speed, ANIMAL.max_speed, world),
        vision=_mix_value(a.genes.vision, b.genes.vision, REPRO.vision_noise,
                          ANIMAL.min_vision, ANIMAL.max_vision, world),
    )

def reproduce(world: World, a: Animal, b: Animal, cfg: ConfigSnapshot) -> Optional[Animal]:
    """
    Pay the mating cost and append one child near the parents' midpoint.
    Silently returns None when either parent cannot afford it.
    """
    cost = REPRO.cost
    if a.energy < cost or b.energy < cost:
        return None
    a.energy -= cost
    b.energy -= cost
    a.mate_cooldown = REPRO.cooldown
    b.mate_cooldown = REPRO.cooldown

    genes = child_genes(world, a, b)
    off = REPRO.child_offset
    cx = (a.x + b.x) / 2.0 + world.rng.symmetric(off)
    cy = (a.y + b.y) / 2.0 + world.rng.symmetric(off)
    child = world.add_animal(a.species, cfg, x=cx, y=cy, genes=genes)
    logger.debug("birth %s #%d from #%d + #%d speed=%.2f vision=%.1f",
                 child.species, child.id, a.id, b.id, child.genes.speed, child.genes.vision)
    return child
