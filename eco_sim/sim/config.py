# eco_sim/sim/config.py
from __future__ import annotations
from dataclasses import dataclass, asdict
from typing import Tuple
import math

# ------------------------------------------------------------
# WORLD / CLOCK
# ------------------------------------------------------------
@dataclass(frozen=True)
class WorldConfig:
    width: float = 980.0
    height: float = 680.0
    # absorbs long pauses of the driving timer
    max_dt: float = 0.05
    plant_margin: float = 12.0
    animal_margin: float = 20.0
    season_period: float = 60.0
    season_amplitude: float = 0.55

# ------------------------------------------------------------
# PLANTS
# ------------------------------------------------------------
@dataclass(frozen=True)
class PlantConfig:
    energy: float = 30.0
    radius: float = 5.0

# ------------------------------------------------------------
# ANIMALS (bodies, gene ranges, birth values)
# ------------------------------------------------------------
@dataclass(frozen=True)
class AnimalConfig:
    herbivore_radius: float = 9.0
    carnivore_radius: float = 10.5
    min_speed: float = 0.2
    max_speed: float = 5.0
    min_vision: float = 20.0
    max_vision: float = 260.0
    speed_jitter: float = 0.15
    vision_jitter: float = 8.0
    herbivore_energy: float = 100.0
    carnivore_energy: float = 120.0
    max_age_range: Tuple[float, float] = (70.0, 140.0)
    territory_offset: float = 80.0
    territory_radius_range: Tuple[float, float] = (80.0, 220.0)

# ------------------------------------------------------------
# BEHAVIOR TUNING (utility scores + steering forces)
# ------------------------------------------------------------
@dataclass(frozen=True)
class BehaviorConfig:
    hunger_scale: float = 150.0
    fear_count: float = 3.0
    # utility
    wander_base: float = 0.1
    wander_bonus: float = 0.15
    wander_noise: float = 0.05
    herb_seek_base: float = 0.6
    herb_seek_prox: float = 0.4
    carn_seek_base: float = 0.6
    carn_seek_prox: float = 0.6
    herb_memory_score: float = 0.35
    carn_memory_score: float = 0.3
    blind_seek_score: float = 0.25
    herb_memory_horizon: float = 15.0
    carn_memory_horizon: float = 20.0
    herb_waypoint_radius: float = 6.0
    carn_waypoint_radius: float = 8.0
    flee_weight: float = 1.2
    mate_weight: float = 0.45
    rest_age_weight: float = 0.6
    rest_hunger_weight: float = 0.2
    rest_cap: float = 0.9
    patrol_trigger: float = 0.9
    patrol_base: float = 0.6
    patrol_idle: float = 0.05
    # flocking
    flock_radius: float = 60.0
    separation_radius: float = 18.0
    cohesion_weight: float = 0.004
    separation_weight: float = 0.07
    alignment_weight: float = 0.01
    # steering forces
    seek_force: float = 0.16
    flee_force: float = 0.28
    mate_force: float = 0.14
    patrol_force: float = 0.10
    patrol_spread: float = 0.6
    patrol_reached: float = 12.0
    rest_damping: float = 0.94
    wander_jitter: float = 0.05
    speed_jitter: float = 1e-4
    bounce: float = 0.9
    # metabolism
    base_drain: float = 0.04
    speed_drain: float = 0.25

# ------------------------------------------------------------
# FEEDING / REPRODUCTION
# ------------------------------------------------------------
@dataclass(frozen=True)
class ReproConfig:
    plant_energy_cap: float = 150.0
    prey_energy: float = 70.0
    prey_energy_cap: float = 180.0
    mate_energy: float = 120.0
    mate_min_age: float = 8.0
    contact_margin: float = 2.0
    cost: float = 40.0
    cooldown: float = 6.0
    speed_noise: float = 0.12
    vision_noise: float = 6.0
    child_offset: float = 8.0

# ------------------------------------------------------------
# POPULATION STATS
# ------------------------------------------------------------
@dataclass(frozen=True)
class StatsConfig:
    interval: float = 0.5
    capacity: int = 120

# ------------------------------------------------------------
# RUNTIME SETTINGS (control panel values, sampled every tick)
# ------------------------------------------------------------
@dataclass(frozen=True)
class ConfigSnapshot:
    plant_regen: float
    plant_cap: int
    herb_speed: float
    carn_speed: float
    vision_range: float
    move_cost: float
    flocking: bool
    territory: bool
    memory: bool
    season: bool
    show_vision: bool
    show_targets: bool
    init_herbivores: int
    init_carnivores: int
    init_plants: int
    regrow_while_paused: bool


@dataclass(frozen=False)  # mutable so a UI or CLI can tweak values between ticks
class Settings:
    plant_regen: float = 2.0       # plants per simulated second
    plant_cap: int = 120
    herb_speed: float = 1.6
    carn_speed: float = 1.9
    vision_range: float = 110.0
    move_cost: float = 1.0
    flocking: bool = True
    territory: bool = True
    memory: bool = True
    season: bool = True
    show_vision: bool = False
    show_targets: bool = False
    init_herbivores: int = 30
    init_carnivores: int = 6
    init_plants: int = 60
    # False freezes the plant accumulator while the sim is stopped
    regrow_while_paused: bool = True

    def validate(self) -> None:
        """Raise ValueError listing every out-of-range field."""
        problems = []
        for name in ("plant_regen", "herb_speed", "carn_speed", "vision_range", "move_cost"):
            v = getattr(self, name)
            if not isinstance(v, (int, float)) or isinstance(v, bool) or not math.isfinite(v):
                problems.append(f"{name}={v!r} is not a finite number")
            elif v < 0:
                problems.append(f"{name}={v!r} must be >= 0")
        for name in ("plant_cap", "init_herbivores", "init_carnivores", "init_plants"):
            v = getattr(self, name)
            if not isinstance(v, int) or isinstance(v, bool) or v < 0:
                problems.append(f"{name}={v!r} must be a non-negative integer")
        if not problems:
            if not (ANIMAL.min_speed <= self.herb_speed <= ANIMAL.max_speed):
                problems.append(f"herb_speed={self.herb_speed} outside [{ANIMAL.min_speed}, {ANIMAL.max_speed}]")
            if not (ANIMAL.min_speed <= self.carn_speed <= ANIMAL.max_speed):
                problems.append(f"carn_speed={self.carn_speed} outside [{ANIMAL.min_speed}, {ANIMAL.max_speed}]")
            if not (ANIMAL.min_vision <= self.vision_range <= ANIMAL.max_vision):
                problems.append(f"vision_range={self.vision_range} outside [{ANIMAL.min_vision}, {ANIMAL.max_vision}]")
        if problems:
            raise ValueError("invalid settings: " + "; ".join(problems))

    def snapshot(self) -> ConfigSnapshot:
        self.validate()
        return ConfigSnapshot(**asdict(self))

# ------------------------------------------------------------
# HEADLESS SETTINGS
# ------------------------------------------------------------
@dataclass(frozen=False)
class SimConfig:
    seed: int = 42
    seconds: float = 120.0
    fps: int = 60
    print_every: int = 10          # stats samples between progress lines
    track_csv: str | None = "runs/history.csv"

# ------------------------------------------------------------
# EXPORT SINGLETONS
# ------------------------------------------------------------
WORLD = WorldConfig()
PLANT = PlantConfig()
ANIMAL = AnimalConfig()
BEHAV = BehaviorConfig()
REPRO = ReproConfig()
STATS = StatsConfig()
SETTINGS = Settings()
SIM = SimConfig()
