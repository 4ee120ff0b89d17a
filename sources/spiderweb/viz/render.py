import numpy as np
import matplotlib.pyplot as plt
from matplotlib.patches import Circle
from typing import List, Optional, Tuple, TYPE_CHECKING

from ..core.geometry import distance, sag_curve, sag_magnitude
from ..core.simulation import wind_displacement, wind_strength
from ..core.web import ThreadKind

if TYPE_CHECKING:
    from ..core.simulation import Snapshot
    from ..config import WebSettings

BACKGROUND = "#0a0d14"
THREAD_ALPHA_BASE = 0.35
GLOW_ALPHA = 0.08
GLOW_WIDTH = 4.0
ANCHOR_RADIUS = 7.0
SPIDER_RADIUS = 3.5

# (glow, core, border)
ANCHOR_STYLE = ((0.7, 0.78, 1.0, 0.12), (0.78, 0.84, 1.0, 0.85), (0.63, 0.7, 0.86, 0.6))
HOVER_STYLE = ((1.0, 0.7, 0.39, 0.3), (1.0, 0.78, 0.47, 0.95), (1.0, 0.86, 0.59, 0.9))

THREAD_STYLE = {
    ThreadKind.FRAME: (THREAD_ALPHA_BASE * 1.2, 1.2),
    ThreadKind.RADIAL: (THREAD_ALPHA_BASE, 0.8),
    ThreadKind.SPIRAL: (THREAD_ALPHA_BASE * 0.7, 0.6),
}


def thread_polyline(thread, tension: float, time: float, strength: float):
    sag = sag_magnitude(distance(thread.start, thread.end), tension)
    xs, ys = sag_curve(thread.start, thread.end, thread.progress, sag)
    dx, dy = wind_displacement(xs, ys, time, strength)
    return xs + dx, ys + dy


def render_scene(snapshot: 'Snapshot', settings: 'WebSettings', ax=None,
                 width: float = 960, height: float = 600, title: Optional[str] = None,
                 hovered: Optional[Tuple[float, float]] = None) -> List:
    """Draw one frame; ``hovered`` is the position of the anchor under the pointer."""
    if ax is None:
        fig, ax = plt.subplots(figsize=(12, 7.5))
    else:
        ax.clear()

    ax.set_facecolor(BACKGROUND)
    lines = []

    web = snapshot.web
    if web is not None:
        for kind in ThreadKind:
            alpha, lw = THREAD_STYLE[kind]
            strength = wind_strength(settings.tension, kind)
            for thread in web.threads(kind):
                if thread.progress <= 0:
                    continue
                xs, ys = thread_polyline(thread, settings.tension, snapshot.time, strength)
                ax.plot(xs, ys, color=(0.78, 0.86, 1.0, alpha * GLOW_ALPHA), linewidth=lw + GLOW_WIDTH)
                line, = ax.plot(xs, ys, color=(0.86, 0.9, 1.0, alpha), linewidth=lw)
                lines.append(line)

    for x, y in snapshot.anchors:
        glow, face, edge = HOVER_STYLE if (x, y) == hovered else ANCHOR_STYLE
        ax.add_patch(Circle((x, y), ANCHOR_RADIUS * 3, color=glow))
        ax.add_patch(Circle((x, y), ANCHOR_RADIUS, facecolor=face, edgecolor=edge, linewidth=1.5))

    for spider in snapshot.spiders:
        if spider.trail:
            trail = np.asarray(spider.trail)
            alphas = np.arange(len(trail)) / len(trail) * 0.15
            colors = np.zeros((len(trail), 4))
            colors[:, 0] = 0.86
            colors[:, 1] = 0.24
            colors[:, 2] = 0.24
            colors[:, 3] = alphas
            ax.scatter(trail[:, 0], trail[:, 1], s=4, c=colors, linewidths=0)
        ax.add_patch(Circle((spider.x, spider.y), SPIDER_RADIUS * 4, color=(1.0, 0.31, 0.24, 0.3)))
        ax.add_patch(Circle((spider.x, spider.y), SPIDER_RADIUS, color=(0.82, 0.2, 0.2, 0.95)))

    hint_y = height / 2 if not snapshot.anchors else height - 30
    for i, hint in enumerate(snapshot.hints):
        ax.text(width / 2, hint_y + 28 * i, hint, color=(0.7, 0.78, 0.9, 0.5 if i == 0 else 0.3),
                ha="center", va="center", fontsize=13 if i == 0 else 11)

    # Canvas coordinates: y grows downward
    ax.set_xlim(0, width)
    ax.set_ylim(height, 0)
    ax.set_aspect('equal')
    if title:
        ax.set_title(title)
    ax.axis('off')
    return lines


def save_scene(snapshot: 'Snapshot', settings: 'WebSettings', save_path: str,
               width: float = 960, height: float = 600) -> None:
    fig, ax = plt.subplots(figsize=(12, 7.5))
    fig.patch.set_facecolor(BACKGROUND)
    render_scene(snapshot, settings, ax=ax, width=width, height=height)
    fig.savefig(save_path, dpi=100, bbox_inches='tight', facecolor=fig.get_facecolor())
    plt.close(fig)
