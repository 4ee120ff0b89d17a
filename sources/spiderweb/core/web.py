import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Sequence

from .geometry import MIN_LENGTH, Point, distance, lerp

MIN_ANCHORS_FOR_WEB = 3


class ThreadKind(Enum):
    FRAME = "frame"
    RADIAL = "radial"
    SPIRAL = "spiral"


@dataclass
class Thread:
    start: Point
    end: Point
    kind: ThreadKind
    progress: float = 0.0
    ring: Optional[int] = None

    @property
    def length(self) -> float:
        return distance(self.start, self.end)

    def advance(self, amount: float) -> None:
        if amount <= 0 or self.progress >= 1:
            return
        self.progress = min(1.0, self.progress + amount)


@dataclass
class Web:
    """One generated web. Endpoints are frozen at generation time."""

    center: Point
    anchors: list
    frames: List[Thread] = field(default_factory=list)
    radials: List[Thread] = field(default_factory=list)
    spirals: List[Thread] = field(default_factory=list)
    built: bool = False
    age: float = 0.0

    def threads(self, kind: ThreadKind) -> List[Thread]:
        if kind is ThreadKind.FRAME:
            return self.frames
        if kind is ThreadKind.RADIAL:
            return self.radials
        return self.spirals

    def all_threads(self) -> List[Thread]:
        return self.frames + self.radials + self.spirals

    def counts(self) -> Dict[str, int]:
        return {kind.value: len(self.threads(kind)) for kind in ThreadKind}

    @property
    def build_progress(self) -> float:
        threads = self.all_threads()
        if not threads:
            return 1.0
        return sum(t.progress for t in threads) / len(threads)

    def is_complete(self) -> bool:
        return all(t.progress >= 1 for t in self.all_threads())


def density_count(density: float) -> int:
    return int(math.floor(3 + density * 12))


def spiral_count(density: float) -> int:
    return int(math.floor(4 + density * 18))


def centroid(points: Sequence) -> Point:
    cx = 0.0
    cy = 0.0
    for p in points:
        cx += p[0]
        cy += p[1]
    return Point(cx / len(points), cy / len(points))


def as_point(p) -> Point:
    return Point(float(p[0]), float(p[1]))


def sort_by_angle(points: Sequence, center) -> list:
    cx, cy = center
    # sorted() is stable: anchors at equal angles keep placement order.
    return sorted(points, key=lambda p: math.atan2(p[1] - cy, p[0] - cx))


def build_frames(sorted_anchors: Sequence) -> List[Thread]:
    corners = [as_point(a) for a in sorted_anchors]
    n = len(corners)
    return [
        Thread(corners[i], corners[(i + 1) % n], ThreadKind.FRAME)
        for i in range(n)
    ]


def build_radials(sorted_anchors: Sequence, center: Point, density: float) -> List[Thread]:
    corners = [as_point(a) for a in sorted_anchors]
    n = len(corners)
    # Subdivisions are per anchor pair, so small webs get proportionally more.
    sub_count = density_count(density) // n
    radials = []
    for i, anchor in enumerate(corners):
        radials.append(Thread(center, anchor, ThreadKind.RADIAL))
        nxt = corners[(i + 1) % n]
        for s in range(1, sub_count + 1):
            t = s / (sub_count + 1)
            end = Point(lerp(anchor.x, nxt.x, t), lerp(anchor.y, nxt.y, t))
            radials.append(Thread(center, end, ThreadKind.RADIAL))
    return radials


def build_spirals(radials: List[Thread], max_radius: float, density: float) -> List[Thread]:
    rings = spiral_count(density)
    spirals = []
    for ring in range(1, rings + 1):
        r = max_radius * (ring / (rings + 1))
        points = []
        for radial in radials:
            dx = radial.end.x - radial.start.x
            dy = radial.end.y - radial.start.y
            radial_len = math.sqrt(dx * dx + dy * dy)
            if radial_len < MIN_LENGTH:
                continue
            t = min(r / radial_len, 1.0)
            points.append(Point(radial.start.x + dx * t, radial.start.y + dy * t))
        for i, a in enumerate(points):
            b = points[(i + 1) % len(points)]
            spirals.append(Thread(a, b, ThreadKind.SPIRAL, ring=ring))
    return spirals


def generate_web(anchors: Sequence, density: float) -> Optional[Web]:
    """Build frame, radial and spiral threads for an anchor set.

    Returns None when there are fewer than three anchors. The result is a
    pure function of the anchor coordinates (in placement order) and the
    density, so regenerating from the same input reproduces every endpoint
    bit for bit, with all progress back at zero.
    """
    if len(anchors) < MIN_ANCHORS_FOR_WEB:
        return None

    center = centroid(anchors)
    ordered = sort_by_angle(anchors, center)

    frames = build_frames(ordered)
    radials = build_radials(ordered, center, density)
    max_radius = max(distance(a, center) for a in ordered)
    spirals = build_spirals(radials, max_radius, density)

    return Web(center=center, anchors=ordered, frames=frames, radials=radials, spirals=spirals)
