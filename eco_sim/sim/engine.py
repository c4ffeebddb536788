# eco_sim/sim/engine.py
from __future__ import annotations
from typing import List, Optional, Tuple
import logging
import math

from .models import Animal, Plant, Waypoint, HERBIVORE, CARNIVORE
from .world import World, clamp
from .behaviors import decide, remember, Perception, _unit, _mul, _add
from .genetics import reproduce
from .config import WORLD, BEHAV, REPRO, ConfigSnapshot

logger = logging.getLogger(__name__)

Vec = Tuple[float, float]

# ---------------- clock / season ----------------
def clamp_dt(elapsed: float) -> float:
    return clamp(elapsed, 0.0, WORLD.max_dt)

def season_multiplier(t: float, enabled: bool) -> float:
    if not enabled:
        return 1.0
    phase = (t % WORLD.season_period) / WORLD.season_period
    return 1.0 + math.sin(phase * 2.0 * math.pi) * WORLD.season_amplitude

def regrow_plants(world: World, cfg: ConfigSnapshot, dt: float) -> int:
    """Advance the plant accumulator and spawn whole plants up to capacity."""
    world.plant_accumulator += cfg.plant_regen * season_multiplier(world.time, cfg.season) * dt
    spawned = 0
    while world.plant_accumulator >= 1.0 and len(world.plants) < cfg.plant_cap:
        world.add_plant(cfg)
        world.plant_accumulator -= 1.0
        spawned += 1
    return spawned

# ---------------- steering ----------------
def steer_towards(me: Animal, tx: float, ty: float, force: float) -> None:
    nx, ny = _unit((tx - me.x, ty - me.y))
    me.vx += nx * force
    me.vy += ny * force

def steer_away(me: Animal, tx: float, ty: float, force: float) -> None:
    nx, ny = _unit((me.x - tx, me.y - ty))
    me.vx += nx * force
    me.vy += ny * force

def flocking_vector(me: Animal, neighbors: List[Animal]) -> Vec:
    """Weighted cohesion + separation + alignment; zero for an empty neighbourhood."""
    if not neighbors:
        return (0.0, 0.0)
    cx = cy = 0.0
    sx = sy = 0.0
    ax = ay = 0.0
    for n in neighbors:
        cx += n.x; cy += n.y
        ax += n.vx; ay += n.vy
        d = math.hypot(me.x - n.x, me.y - n.y) or 1.0
        if d < BEHAV.separation_radius:
            sx += (me.x - n.x) / d
            sy += (me.y - n.y) / d
    cnt = len(neighbors)
    cohesion = (cx / cnt - me.x, cy / cnt - me.y)
    alignment = (ax / cnt - me.vx, ay / cnt - me.vy)
    v = _mul(cohesion, BEHAV.cohesion_weight)
    v = _add(v, _mul((sx, sy), BEHAV.separation_weight))
    return _add(v, _mul(alignment, BEHAV.alignment_weight))

def apply_flocking(world: World, me: Animal) -> None:
    r2 = BEHAV.flock_radius * BEHAV.flock_radius
    neigh = [a for a in world.animals
             if a is not me and a.alive and a.species == HERBIVORE and World.dist2(me, a) < r2]
    fx, fy = flocking_vector(me, neigh)
    me.vx += fx
    me.vy += fy

def find_partner(world: World, me: Animal) -> Tuple[Optional[Animal], float]:
    """Nearest same-species animal off cooldown, searched over the whole world."""
    best = None
    best_d2 = math.inf
    for o in world.animals:
        if o is me or not o.alive or o.species != me.species or o.mate_cooldown > 0:
            continue
        d2 = World.dist2(me, o)
        if d2 < best_d2:
            best, best_d2 = o, d2
    return best, math.sqrt(best_d2)

def _patrol(world: World, me: Animal) -> None:
    t = me.territory
    wp = me.patrol_target
    if wp is None or math.hypot(wp.x - me.x, wp.y - me.y) < BEHAV.patrol_reached:
        spread = t.radius * BEHAV.patrol_spread
        wp = Waypoint(x=t.cx + world.rng.symmetric(spread), y=t.cy + world.rng.symmetric(spread))
        me.patrol_target = wp
    steer_towards(me, wp.x, wp.y, BEHAV.patrol_force)

def apply_state(world: World, me: Animal, seen: Perception, cfg: ConfigSnapshot) -> Optional[Animal]:
    """State-driven steering. Returns a newborn when mating succeeded."""
    state = me.state
    if state == "seek_food":
        if me.target is not None:
            steer_towards(me, me.target.x, me.target.y, BEHAV.seek_force)
    elif state == "flee":
        threats = seen.carnivores
        if threats:
            cx = sum(a.x for a in threats) / len(threats)
            cy = sum(a.y for a in threats) / len(threats)
            steer_away(me, cx, cy, BEHAV.flee_force)
    elif state == "mate":
        partner, d = find_partner(world, me)
        if partner is not None:
            steer_towards(me, partner.x, partner.y, BEHAV.mate_force)
            if d < me.radius + partner.radius + REPRO.contact_margin:
                return reproduce(world, me, partner, cfg)
    elif state == "patrol":
        if me.territory is not None:
            _patrol(world, me)
    elif state == "rest":
        me.vx *= BEHAV.rest_damping
        me.vy *= BEHAV.rest_damping
    else:
        me.vx += world.rng.symmetric(BEHAV.wander_jitter)
        me.vy += world.rng.symmetric(BEHAV.wander_jitter)
    return None

# ---------------- movement ----------------
def clamp_speed(world: World, me: Animal) -> None:
    vmax = me.genes.speed + world.rng.symmetric(BEHAV.speed_jitter)
    spd = math.hypot(me.vx, me.vy)
    if spd > vmax:
        nx, ny = _unit((me.vx, me.vy))
        me.vx, me.vy = nx * vmax, ny * vmax

def apply_motion(world: World, me: Animal) -> None:
    # per-frame displacement, deliberately not scaled by dt
    me.x += me.vx
    me.y += me.vy
    world.bounce_inside(me, BEHAV.bounce)

# ---------------- metabolism ----------------
def apply_metabolism(me: Animal, cfg: ConfigSnapshot, dt: float) -> None:
    drain = BEHAV.base_drain + cfg.move_cost * (me.current_speed() * BEHAV.speed_drain)
    me.energy -= drain * dt
    me.age += dt
    me.mate_cooldown = max(0.0, me.mate_cooldown - dt)

# ---------------- feeding ----------------
def _graze(world: World, me: Animal) -> int:
    eaten: List[Plant] = []
    for p in reversed(world.plants):
        if World.dist(me, p) < me.radius + p.radius:
            me.energy = min(REPRO.plant_energy_cap, me.energy + p.energy)
            remember(me, p.x, p.y, world.time)
            eaten.append(p)
    world.remove_plants(eaten)
    return len(eaten)

def _hunt(world: World, me: Animal) -> int:
    kills = 0
    for prey in reversed(world.animals):
        if prey is me or not prey.alive or prey.species != HERBIVORE:
            continue
        if World.dist(me, prey) < me.radius + prey.radius:
            me.energy = min(REPRO.prey_energy_cap, me.energy + REPRO.prey_energy)
            remember(me, prey.x, prey.y, world.time)
            prey.alive = False
            kills += 1
            logger.debug("carnivore #%d ate herbivore #%d", me.id, prey.id)
    return kills

def feed(world: World, me: Animal) -> int:
    """Resolve every contact this tick; returns the number of items eaten."""
    if me.species == HERBIVORE:
        return _graze(world, me)
    if me.species == CARNIVORE:
        return _hunt(world, me)
    return 0

# ---------------- per-agent + per-tick ----------------
def act(world: World, me: Animal, cfg: ConfigSnapshot, dt: float) -> Optional[Animal]:
    """Perception -> decision -> steering/movement -> metabolism -> feeding."""
    seen = decide(world, me, cfg)
    if cfg.flocking and me.species == HERBIVORE:
        apply_flocking(world, me)
    child = apply_state(world, me, seen, cfg)
    clamp_speed(world, me)
    apply_motion(world, me)
    apply_metabolism(me, cfg, dt)
    feed(world, me)
    return child

def update_animals(world: World, cfg: ConfigSnapshot, dt: float) -> List[Animal]:
    """
    One agent pass. Newest animals act first; anything eaten or dead is
    flagged during the pass and compacted at the end. Children born this
    tick are appended and first act next tick. Returns the newborns.
    """
    born: List[Animal] = []
    for me in list(reversed(world.animals)):
        if not me.alive:
            continue
        child = act(world, me, cfg, dt)
        if child is not None:
            born.append(child)
        if me.is_dead():
            me.alive = False
            logger.debug("%s #%d died age=%.1f energy=%.1f", me.species, me.id, me.age, me.energy)
    # partners that already acted may have paid the mating cost afterwards
    for a in world.animals:
        if a.alive and a.is_dead():
            a.alive = False
    world.compact()
    return born

def simulate_tick(world: World, cfg: ConfigSnapshot, dt: float) -> None:
    """Clock, regrowth, then (unless paused) the agent pass."""
    dt = clamp_dt(dt)
    world.time += dt
    if world.running or cfg.regrow_while_paused:
        regrow_plants(world, cfg, dt)
    if world.running:
        update_animals(world, cfg, dt)
