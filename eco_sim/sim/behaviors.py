# eco_sim/sim/behaviors.py
from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional, Tuple
import math

from .models import Animal, Plant, Memory, Waypoint, STATES, HERBIVORE, CARNIVORE
from .config import BEHAV, REPRO, ConfigSnapshot
from .world import World, clamp

Vec = Tuple[float, float]
Scores = List[Tuple[str, float]]

# ---------------- vector helpers ----------------
def _unit(v: Vec) -> Vec:
    x, y = v
    n = math.hypot(x, y) or 1.0
    return (x/n, y/n)

def _mul(v: Vec, k: float) -> Vec:
    return (v[0]*k, v[1]*k)

def _add(a: Vec, b: Vec) -> Vec:
    return (a[0] + b[0], a[1] + b[1])

# ---------------- perception ----------------
@dataclass
class Perception:
    plants: List[Plant] = field(default_factory=list)
    herbivores: List[Animal] = field(default_factory=list)
    carnivores: List[Animal] = field(default_factory=list)

def perceive(world: World, me: Animal) -> Perception:
    """Everything within vision radius (squared test), in collection order."""
    r2 = me.genes.vision * me.genes.vision
    seen = Perception()
    for p in world.plants:
        if World.dist2(me, p) <= r2:
            seen.plants.append(p)
    for o in world.animals:
        if o is me or not o.alive:
            continue
        if World.dist2(me, o) <= r2:
            if o.species == HERBIVORE:
                seen.herbivores.append(o)
            elif o.species == CARNIVORE:
                seen.carnivores.append(o)
    return seen

def _nearest(me: Animal, items) -> Tuple[Optional[object], float]:
    best = None
    best_d2 = math.inf
    for t in items:
        d2 = World.dist2(me, t)
        if d2 < best_d2:
            best, best_d2 = t, d2
    return best, math.sqrt(best_d2)

# ---------------- memory ----------------
def remember(me: Animal, x: float, y: float, now: float) -> None:
    me.memory = Memory(x=x, y=y, seen_at=now)

def update_memory(me: Animal, seen: Perception, now: float) -> None:
    """Record the first sighted food item (plants for herbivores, prey for carnivores)."""
    food = seen.plants if me.species == HERBIVORE else seen.herbivores
    if food:
        remember(me, food[0].x, food[0].y, now)

def recall(me: Animal, now: float, cfg: ConfigSnapshot) -> Optional[Memory]:
    if not cfg.memory or me.memory is None:
        return None
    horizon = BEHAV.herb_memory_horizon if me.species == HERBIVORE else BEHAV.carn_memory_horizon
    if now - me.memory.seen_at < horizon:
        return me.memory
    return None

# ---------------- utility scoring ----------------
def hunger_of(me: Animal) -> float:
    return 1.0 - clamp(me.energy / BEHAV.hunger_scale, 0.0, 1.0)

def can_mate(me: Animal) -> bool:
    return me.energy > REPRO.mate_energy and me.mate_cooldown <= 0 and me.age > REPRO.mate_min_age

def _seek_score(world: World, me: Animal, seen: Perception, hunger: float, cfg: ConfigSnapshot):
    """Returns (score, target) for seek_food."""
    if me.species == HERBIVORE:
        food = seen.plants
        base, prox_w = BEHAV.herb_seek_base, BEHAV.herb_seek_prox
        mem_score, wp_radius = BEHAV.herb_memory_score, BEHAV.herb_waypoint_radius
    else:
        food = seen.herbivores
        base, prox_w = BEHAV.carn_seek_base, BEHAV.carn_seek_prox
        mem_score, wp_radius = BEHAV.carn_memory_score, BEHAV.carn_waypoint_radius

    item, d = _nearest(me, food)
    if item is not None:
        prox = clamp(1.0 - d / (me.genes.vision + 1.0), 0.0, 1.0)
        return hunger * (base + prox_w * prox), item
    mem = recall(me, world.time, cfg)
    if mem is not None:
        return mem_score * hunger, Waypoint(x=mem.x, y=mem.y, radius=wp_radius)
    return BEHAV.blind_seek_score * hunger, None

def _patrol_score(me: Animal, cfg: ConfigSnapshot) -> float:
    if not cfg.territory or me.territory is None:
        return 0.0
    t = me.territory
    d = math.hypot(me.x - t.cx, me.y - t.cy)
    if d > t.radius * BEHAV.patrol_trigger:
        return BEHAV.patrol_base + d / (t.radius + 1.0)
    return BEHAV.patrol_idle

def score_states(world: World, me: Animal, seen: Perception, cfg: ConfigSnapshot):
    """
    Compute one utility per state, in STATES order.
    Returns (scores, seek_target) where scores is a list of (state, score).
    """
    hunger = hunger_of(me)
    age_factor = clamp(me.age / me.max_age, 0.0, 1.0)

    seek, target = _seek_score(world, me, seen, hunger, cfg)
    if me.species == HERBIVORE:
        fear = clamp(len(seen.carnivores) / BEHAV.fear_count, 0.0, 1.0)
        flee = fear * BEHAV.flee_weight
        patrol = 0.0
    else:
        flee = 0.0
        patrol = _patrol_score(me, cfg)

    mate = BEHAV.mate_weight * (1.0 - hunger) * (1.0 - age_factor) if can_mate(me) else 0.0
    rest = clamp(age_factor * BEHAV.rest_age_weight + hunger * BEHAV.rest_hunger_weight, 0.0, BEHAV.rest_cap)
    wander = BEHAV.wander_base + BEHAV.wander_bonus + world.rng.uniform(0.0, BEHAV.wander_noise)

    by_state = dict(wander=wander, seek_food=seek, flee=flee, mate=mate, rest=rest, patrol=patrol)
    return [(s, by_state[s]) for s in STATES], target

def choose_state(scores: Scores) -> str:
    """Argmax over the ordered pairs; strict '>' so the earlier state wins ties."""
    best_state, best_score = scores[0]
    for state, score in scores[1:]:
        if score > best_score:
            best_state, best_score = state, score
    return best_state

# ---------------- main decision ----------------
def decide(world: World, me: Animal, cfg: ConfigSnapshot) -> Perception:
    """
    Perceive, refresh memory, score every state and store the winner
    (and the seek target, if any) on the animal.
    Returns the perception so steering can reuse it this tick.
    """
    seen = perceive(world, me)
    if cfg.memory:
        update_memory(me, seen, world.time)
    scores, target = score_states(world, me, seen, cfg)
    me.state = choose_state(scores)
    me.target = target
    return seen
