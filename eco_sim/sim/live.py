# eco_sim/sim/live.py
from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional, Tuple
import logging

from .models import Animal, Plant, HERBIVORE, CARNIVORE
from .world import World, clamp
from .engine import simulate_tick, clamp_dt
from .metrics import PopulationStats, PopulationSample
from .config import Settings, ConfigSnapshot, BEHAV, SIM

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlantView:
    x: float
    y: float
    radius: float


@dataclass(frozen=True)
class AnimalView:
    x: float
    y: float
    radius: float
    species: str
    energy_ratio: float
    vision: Optional[float] = None
    target: Optional[Tuple[float, float]] = None
    territory: Optional[Tuple[float, float, float]] = None


class LiveSim:
    """
    Frame-driven wrapper around one World: start/stop/reset, manual spawns,
    one `tick(now)` per animation frame, and read-only views for a renderer.
    """
    def __init__(self, settings: Settings | None = None, seed: int = SIM.seed, spawn: bool = True):
        self.settings = settings if settings is not None else Settings()
        self.world = World(seed=seed)
        self.stats = PopulationStats()
        self._last_ts: float | None = None
        # last snapshot taken; views read toggles from it
        self.cfg: ConfigSnapshot = self.settings.snapshot()
        if spawn:
            self.apply_initial_spawn()

    # ---------- controls ----------
    @property
    def running(self) -> bool:
        return self.world.running

    def start(self) -> None:
        self.world.running = True

    def stop(self) -> None:
        self.world.running = False

    def reset(self, keep_running: bool = False) -> None:
        self.world.clear()
        self.stats.clear()
        if not keep_running:
            self.world.running = False
        logger.info("reset (running=%s)", self.world.running)

    def apply_initial_spawn(self, herbivores: int | None = None, carnivores: int | None = None,
                            plants: int | None = None) -> None:
        self.reset(keep_running=True)
        self.cfg = self.settings.snapshot()
        h = self.cfg.init_herbivores if herbivores is None else herbivores
        c = self.cfg.init_carnivores if carnivores is None else carnivores
        p = self.cfg.init_plants if plants is None else plants
        for _ in range(h):
            self.spawn_herbivore()
        for _ in range(c):
            self.spawn_carnivore()
        for _ in range(p):
            self.spawn_plant()
        logger.info("initial spawn: %d herbivores, %d carnivores, %d plants",
                    h, c, len(self.world.plants))

    def spawn_plant(self) -> Optional[Plant]:
        return self.world.add_plant(self.settings.snapshot())

    def spawn_herbivore(self) -> Animal:
        return self.world.add_animal(HERBIVORE, self.settings.snapshot())

    def spawn_carnivore(self) -> Animal:
        return self.world.add_animal(CARNIVORE, self.settings.snapshot())

    # ---------- stepping ----------
    def step(self, dt: float) -> Optional[PopulationSample]:
        """Advance one tick by `dt` simulated seconds (clamped)."""
        self.cfg = self.settings.snapshot()
        dt = clamp_dt(dt)
        simulate_tick(self.world, self.cfg, dt)
        return self.stats.update(self.world, dt)

    def tick(self, now: float) -> Optional[PopulationSample]:
        """Timer callback entry point; `now` is a timestamp in seconds."""
        if self._last_ts is None:
            self._last_ts = now
        elapsed = now - self._last_ts
        self._last_ts = now
        return self.step(elapsed)

    # ---------- read surface ----------
    def plant_views(self) -> List[PlantView]:
        return [PlantView(p.x, p.y, p.radius) for p in self.world.plants]

    def animal_views(self) -> List[AnimalView]:
        cfg = self.cfg
        views = []
        for a in self.world.animals:
            target = None
            if cfg.show_targets and a.target is not None:
                target = (a.target.x, a.target.y)
            territory = None
            if cfg.territory and a.territory is not None:
                territory = (a.territory.cx, a.territory.cy, a.territory.radius)
            views.append(AnimalView(
                x=a.x, y=a.y, radius=a.radius, species=a.species,
                energy_ratio=clamp(a.energy / BEHAV.hunger_scale, 0.0, 1.0),
                vision=a.genes.vision if cfg.show_vision else None,
                target=target,
                territory=territory,
            ))
        return views

    def history(self) -> List[PopulationSample]:
        return self.stats.as_list()

    def counts(self) -> dict:
        return dict(
            herbivores=self.world.count(HERBIVORE),
            carnivores=self.world.count(CARNIVORE),
            plants=len(self.world.plants),
        )
