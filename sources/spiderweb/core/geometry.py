import math
from typing import NamedTuple, Union

import numpy as np

# Sag model constants
GRAVITY = 0.0004
SAG_SCALE = 800.0
TENSION_RELIEF = 0.9

# Shortest thread treated as non-degenerate
MIN_LENGTH = 1.0

Scalar = Union[float, np.ndarray]


class Point(NamedTuple):
    x: Scalar
    y: Scalar


def distance(p, q) -> float:
    return math.hypot(p[0] - q[0], p[1] - q[1])


def lerp(a: Scalar, b: Scalar, t: Scalar) -> Scalar:
    # Weighted form keeps both endpoints exact: t=0 gives a, t=1 gives b.
    return a * (1 - t) + b * t


def sag_point(start, end, t: Scalar, sag: float) -> Point:
    """Point on a sagging thread at parameter ``t``.

    The straight line from ``start`` to ``end`` is pushed down (positive y) by
    the parabola ``4 * sag * t * (1 - t)``, which vanishes at both ends and
    peaks at exactly ``sag`` in the middle.

    ``t`` may be a float or a numpy array; the renderer evaluates a whole
    curve in one call so drawn threads and spider feet share this primitive.
    """
    x = lerp(start[0], end[0], t)
    y = lerp(start[1], end[1], t)
    return Point(x, y + 4 * sag * t * (1 - t))


def sag_magnitude(length: float, tension: float) -> float:
    """Vertical sag of a thread of the given length.

    Full tension still leaves 10% of gravity's pull.
    """
    tension_factor = 1 - tension * TENSION_RELIEF
    return length * GRAVITY * tension_factor * SAG_SCALE


def sag_curve(start, end, progress: float, sag: float, step_len: float = 8.0) -> Point:
    """Sampled polyline of the drawn part of a thread, as two numpy arrays."""
    length = distance(start, end)
    steps = max(8, int(length // step_len))
    t = np.linspace(0.0, 1.0, steps + 1) * progress
    return sag_point(start, end, t, sag)
