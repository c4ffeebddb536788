# eco_sim/sim/metrics.py
from __future__ import annotations
from collections import deque
from dataclasses import dataclass, asdict
from typing import Deque, Dict, List
import os
import csv
import uuid

import numpy as np

from .models import HERBIVORE, CARNIVORE
from .world import World
from .config import STATS


@dataclass(frozen=True)
class PopulationSample:
    time: float
    herbivores: int
    carnivores: int
    plants: int


class PopulationStats:
    """
    Bounded FIFO of population samples taken every `interval` simulated
    seconds on its own accumulator (independent of plant regrowth).
    """
    def __init__(self, interval: float = STATS.interval, capacity: int = STATS.capacity):
        self.interval = interval
        self.capacity = capacity
        self.history: Deque[PopulationSample] = deque(maxlen=capacity)
        self.accumulator: float = 0.0

    def clear(self) -> None:
        self.history.clear()
        self.accumulator = 0.0

    def sample(self, world: World) -> PopulationSample:
        s = PopulationSample(
            time=world.time,
            herbivores=world.count(HERBIVORE),
            carnivores=world.count(CARNIVORE),
            plants=len(world.plants),
        )
        # deque(maxlen) evicts the oldest sample on overflow
        self.history.append(s)
        return s

    def update(self, world: World, dt: float) -> PopulationSample | None:
        self.accumulator += dt
        if self.accumulator >= self.interval:
            self.accumulator = 0.0
            return self.sample(world)
        return None

    def latest(self) -> PopulationSample | None:
        return self.history[-1] if self.history else None

    def as_list(self) -> List[PopulationSample]:
        return list(self.history)


def _gene_means(world: World, species: str) -> Dict[str, float]:
    pop = world.live_animals(species)
    if not pop:
        return dict(speed=float("nan"), vision=float("nan"))
    genes = np.array([(a.genes.speed, a.genes.vision) for a in pop], dtype=float)
    speed, vision = genes.mean(axis=0)
    return dict(speed=float(speed), vision=float(vision))


def summarize_population(world: World) -> Dict[str, float]:
    herb = _gene_means(world, HERBIVORE)
    carn = _gene_means(world, CARNIVORE)
    return dict(
        time=world.time,
        herbivores=world.count(HERBIVORE),
        carnivores=world.count(CARNIVORE),
        plants=len(world.plants),
        avg_herb_speed=herb["speed"], avg_herb_vision=herb["vision"],
        avg_carn_speed=carn["speed"], avg_carn_vision=carn["vision"],
    )


def append_csv(path: str, row: Dict[str, float]) -> None:
    folder = os.path.dirname(path)
    if folder:
        os.makedirs(folder, exist_ok=True)
    write_header = not os.path.exists(path)
    with open(path, "a", newline="") as f:
        w = csv.DictWriter(f, fieldnames=list(row.keys()))
        if write_header:
            w.writeheader()
        w.writerow(row)


class HistoryCsvLogger:
    """
    Append one row per population sample, tagged with a per-run session_id
    so several runs can share one file and be told apart later.
    """
    def __init__(self, path: str = "runs/history.csv"):
        self.path = path
        self.session_id = uuid.uuid4().hex[:8]
        self.rows_written = 0

    def append_sample(self, world: World, sample: PopulationSample) -> Dict[str, float]:
        row = dict(session_id=self.session_id, **asdict(sample))
        summary = summarize_population(world)
        for key in ("avg_herb_speed", "avg_herb_vision", "avg_carn_speed", "avg_carn_vision"):
            row[key] = round(summary[key], 4)
        append_csv(self.path, row)
        self.rows_written += 1
        return row
