from collections import deque
from dataclasses import dataclass, field
from typing import List

import numpy as np

from ..config import WebSettings
from .geometry import distance, sag_magnitude, sag_point
from .web import ThreadKind, Web

TRAIL_LENGTH = 20

# Per-frame motion, tuned for 60 frames per second
FRAME_RATE = 60
WALK_RATE = 0.015
WEAVE_RATE = 0.02

# Chance that a wandering spider drops back onto the radials
WANDER_RADIAL_CHANCE = 0.3


def speed_multiplier(spider_speed: float) -> float:
    return 0.2 + spider_speed * 1.8


def spider_population(anchor_count: int) -> int:
    return max(1, int(anchor_count * 0.8))


@dataclass
class Spider:
    x: float
    y: float
    speed: float
    kind: ThreadKind = ThreadKind.FRAME
    index: int = 0
    thread_t: float = 0.0
    trail: deque = field(default_factory=lambda: deque(maxlen=TRAIL_LENGTH))

    @property
    def position(self):
        return (self.x, self.y)


class TraversalEngine:
    """Walks spiders along the threads of a web.

    Every spider starts on the frame, moves on to the radials, then the
    spiral rings, and afterwards wanders between radials and spirals for
    good. Walking a thread also advances that thread's ``progress``: this is
    the only place the build-out animation moves forward.
    """

    def __init__(self, settings: WebSettings, rng: np.random.Generator):
        self.settings = settings
        self.rng = rng

    def spawn(self, web: Web, count: int) -> List[Spider]:
        spiders = []
        for _ in range(count):
            spiders.append(Spider(
                x=web.center.x,
                y=web.center.y,
                speed=float(self.rng.uniform(0.3, 0.7)),
            ))
        return spiders

    def update(self, spider: Spider, web: Web, dt: float) -> None:
        threads = web.threads(spider.kind)
        if not threads:
            return

        step = spider.speed * speed_multiplier(self.settings.spider_speed) * dt * FRAME_RATE
        spider.thread_t += step * WALK_RATE

        thread = threads[spider.index]
        thread.advance(step * WEAVE_RATE)

        t = min(max(spider.thread_t, 0.0), 1.0)
        sag = sag_magnitude(distance(thread.start, thread.end), self.settings.tension)
        spider.x, spider.y = sag_point(thread.start, thread.end, t, sag)
        spider.trail.append((spider.x, spider.y))

        if spider.thread_t >= 1:
            spider.thread_t = 0.0
            self._next_thread(spider, web)

    def _next_thread(self, spider: Spider, web: Web) -> None:
        spider.index += 1
        if spider.index < len(web.threads(spider.kind)):
            return

        if spider.kind is ThreadKind.FRAME:
            spider.kind = ThreadKind.RADIAL
            spider.index = 0
        elif spider.kind is ThreadKind.RADIAL:
            spider.kind = ThreadKind.SPIRAL
            spider.index = 0
        else:
            if self.rng.random() < WANDER_RADIAL_CHANCE:
                spider.kind = ThreadKind.RADIAL
            else:
                spider.kind = ThreadKind.SPIRAL
            count = len(web.threads(spider.kind))
            spider.index = int(self.rng.integers(0, count)) if count else 0
