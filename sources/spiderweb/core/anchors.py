from dataclasses import dataclass
from typing import Iterator, List, Optional

from .geometry import distance

ANCHOR_HIT_RADIUS = 18.0


@dataclass
class Anchor:
    id: int
    x: float
    y: float

    def __getitem__(self, i):
        return (self.x, self.y)[i]


class AnchorBoard:
    """User-placed anchors, in placement order, with stable ids."""

    def __init__(self):
        self.anchors: List[Anchor] = []
        self._next_id = 0

    def __len__(self) -> int:
        return len(self.anchors)

    def __iter__(self) -> Iterator[Anchor]:
        return iter(self.anchors)

    def add(self, x: float, y: float) -> Anchor:
        anchor = Anchor(id=self._next_id, x=float(x), y=float(y))
        self._next_id += 1
        self.anchors.append(anchor)
        return anchor

    def remove(self, anchor: Anchor) -> bool:
        before = len(self.anchors)
        self.anchors = [a for a in self.anchors if a.id != anchor.id]
        return len(self.anchors) != before

    def find_at(self, pos, radius: float = ANCHOR_HIT_RADIUS) -> Optional[Anchor]:
        # Newest anchors are drawn on top, so they win the hit test.
        for anchor in reversed(self.anchors):
            if distance(pos, anchor) < radius:
                return anchor
        return None

    def clear(self) -> None:
        self.anchors = []
        self._next_id = 0

    def rescale(self, sx: float, sy: float) -> None:
        for anchor in self.anchors:
            anchor.x *= sx
            anchor.y *= sy
