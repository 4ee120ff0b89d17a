import math
from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np

from ..config import WebSettings
from ..utilities.log import CORELOG
from .anchors import Anchor, AnchorBoard
from .spider import Spider, TraversalEngine, spider_population
from .web import MIN_ANCHORS_FOR_WEB, ThreadKind, Web, generate_web

FRAME_INTERVAL_MS = 16.67
MAX_FRAME_DELTA = 3.0
TIME_PER_FRAME = 0.016

# Render-time wind strength relative to frame threads
WIND_SCALE = {
    ThreadKind.FRAME: 1.0,
    ThreadKind.RADIAL: 0.8,
    ThreadKind.SPIRAL: 0.6,
}


@dataclass
class Wind:
    phase: float = 0.0
    x: float = 0.0
    y: float = 0.0

    def advance(self, dt: float) -> None:
        self.phase += dt * 0.01
        self.x = math.sin(self.phase) * 2
        self.y = math.cos(self.phase * 0.7) * 1


def wind_strength(tension: float, kind: ThreadKind = ThreadKind.FRAME) -> float:
    return (2 + (1 - tension) * 5) * WIND_SCALE[kind]


def wind_displacement(x, y, time: float, strength: float):
    """Sway applied to a drawn point. Never fed back into the simulation."""
    dx = np.sin(time * 0.8 + x * 0.003 + y * 0.002) * strength
    dy = np.cos(time * 1.1 + x * 0.002) * strength * 0.5
    return dx, dy


@dataclass(frozen=True)
class SpiderView:
    x: float
    y: float
    kind: ThreadKind
    trail: Tuple[Tuple[float, float], ...]


@dataclass(frozen=True)
class Snapshot:
    time: float
    wind: Tuple[float, float]
    anchors: Tuple[Tuple[float, float], ...]
    web: Optional[Web]
    spiders: Tuple[SpiderView, ...]
    missing_anchors: int

    @property
    def empty(self) -> bool:
        return self.web is None

    @property
    def hints(self) -> Tuple[str, ...]:
        """Guidance lines for an unfinished board, empty once a web exists."""
        if not self.anchors:
            return ("Click to place anchor points",
                    f"Place {MIN_ANCHORS_FOR_WEB} or more anchors to weave a web")
        if self.missing_anchors > 0:
            plural = "s" if self.missing_anchors > 1 else ""
            return (f"Place {self.missing_anchors} more anchor{plural} to begin weaving",)
        return ()


class Simulation:
    """Owns the anchors, the current web and its spiders, and the clock.

    The host calls ``tick`` once per display refresh with a millisecond
    timestamp. Any anchor change or density change throws away the web and
    every spider and builds them again from scratch.
    """

    def __init__(self, settings: Optional[WebSettings] = None, seed: Optional[int] = None,
                 rng: Optional[np.random.Generator] = None, width: float = 0.0, height: float = 0.0):
        self.settings = (settings or WebSettings()).clamped()
        self.rng = rng if rng is not None else np.random.default_rng(seed)
        self.engine = TraversalEngine(self.settings, self.rng)

        self.board = AnchorBoard()
        self.web: Optional[Web] = None
        self.spiders: List[Spider] = []

        self.width = width
        self.height = height

        self.time = 0.0
        self.frame = 0
        self.wind = Wind()
        self.last_timestamp: Optional[float] = None
        self.running = False

    # -- anchors -----------------------------------------------------------

    @property
    def anchors(self) -> List[Anchor]:
        return self.board.anchors

    def add_anchor(self, x: float, y: float) -> Anchor:
        anchor = self.board.add(x, y)
        self.rebuild()
        return anchor

    def remove_anchor(self, anchor: Anchor) -> bool:
        removed = self.board.remove(anchor)
        if removed:
            self.rebuild()
        return removed

    def remove_anchor_at(self, pos) -> Optional[Anchor]:
        anchor = self.board.find_at(pos)
        if anchor is not None:
            self.remove_anchor(anchor)
        return anchor

    def clear(self) -> None:
        self.board.clear()
        self.web = None
        self.spiders = []
        CORELOG.info("Cleared all anchors")

    def resize(self, width: float, height: float) -> None:
        old_w, old_h = self.width, self.height
        self.width, self.height = width, height
        if old_w > 0 and old_h > 0:
            self.board.rescale(width / old_w, height / old_h)
            CORELOG.info(f"Resized surface {old_w:g}x{old_h:g} -> {width:g}x{height:g}")
            self.rebuild()

    # -- settings ----------------------------------------------------------

    def update_settings(self, **changes) -> None:
        old_density = self.settings.density
        self.settings = self.settings.updated(**changes)
        self.engine.settings = self.settings
        if self.settings.density != old_density:
            self.rebuild()

    # -- topology ----------------------------------------------------------

    def rebuild(self) -> None:
        self.web = generate_web(self.board.anchors, self.settings.density)
        if self.web is None:
            self.spiders = []
            return
        self.spiders = self.engine.spawn(self.web, spider_population(len(self.board)))
        counts = self.web.counts()
        CORELOG.info(
            f"Generated web: {len(self.board)} anchors, {counts['frame']} frame, "
            f"{counts['radial']} radial, {counts['spiral']} spiral threads, {len(self.spiders)} spiders"
        )

    # -- clock -------------------------------------------------------------

    def start(self) -> None:
        if self.running:
            return
        self.running = True
        self.last_timestamp = None
        CORELOG.info("Simulation started")

    def stop(self) -> None:
        if not self.running:
            return
        self.running = False
        CORELOG.info(f"Simulation stopped after {self.frame} frames")

    def frame_delta(self, timestamp: float) -> float:
        if self.last_timestamp is None:
            return 1.0
        dt = (timestamp - self.last_timestamp) / FRAME_INTERVAL_MS
        return min(max(dt, 0.0), MAX_FRAME_DELTA)

    def tick(self, timestamp: float) -> float:
        """Advance one frame from a host timestamp in milliseconds."""
        if not self.running:
            return 0.0
        dt = self.frame_delta(timestamp)
        self.last_timestamp = timestamp
        self.step(dt)
        return dt

    def step(self, dt: float) -> None:
        self.time += dt * TIME_PER_FRAME
        self.frame += 1
        self.wind.advance(dt)

        web = self.web
        if web is None:
            return
        web.age += dt
        for spider in self.spiders:
            self.engine.update(spider, web, dt)

        if not web.built and web.is_complete():
            web.built = True
            CORELOG.info(f"Web fully woven after {web.age:.1f} frames")

    def run(self, frames: int, dt: float = 1.0) -> None:
        for _ in range(frames):
            self.step(dt)

    # -- output ------------------------------------------------------------

    def snapshot(self) -> Snapshot:
        return Snapshot(
            time=self.time,
            wind=(self.wind.x, self.wind.y),
            anchors=tuple((a.x, a.y) for a in self.board.anchors),
            web=self.web,
            spiders=tuple(
                SpiderView(x=s.x, y=s.y, kind=s.kind, trail=tuple(s.trail)) for s in self.spiders
            ),
            missing_anchors=max(0, MIN_ANCHORS_FOR_WEB - len(self.board)),
        )
