import sys
import os
import math
from collections import Counter

import numpy as np

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..', '..')))

from spiderweb.core.anchors import AnchorBoard
from spiderweb.core.geometry import distance
from spiderweb.core.web import ThreadKind, centroid, density_count, generate_web, spiral_count

TRIANGLE = [(0.0, 0.0), (100.0, 0.0), (50.0, 100.0)]


def endpoint_geometry(web):
    return [
        (t.kind, t.ring, t.start.x, t.start.y, t.end.x, t.end.y)
        for t in web.all_threads()
    ]


def test_too_few_anchors_is_empty():
    assert generate_web([], 0.5) is None
    assert generate_web([(1.0, 2.0)], 0.5) is None
    assert generate_web([(1.0, 2.0), (30.0, 40.0)], 0.5) is None

    print("✓ test_too_few_anchors_is_empty passed")


def test_triangle_scenario():
    web = generate_web(TRIANGLE, 0.5)
    assert web is not None

    assert density_count(0.5) == 9
    assert spiral_count(0.5) == 13

    assert len(web.frames) == 3
    # 3 main radials plus floor(9 / 3) = 3 subdivisions per anchor pair
    assert len(web.radials) == 12
    rings = {t.ring for t in web.spirals}
    assert rings == set(range(1, 14))
    assert len(web.spirals) == 13 * 12

    assert math.isclose(web.center.x, 50.0)
    assert math.isclose(web.center.y, 100.0 / 3)
    assert all(t.progress == 0.0 for t in web.all_threads())
    assert web.built is False

    print("✓ test_triangle_scenario passed")


def test_frame_forms_closed_cycle():
    rng = np.random.default_rng(7)
    for n in range(3, 12):
        anchors = [tuple(p) for p in rng.uniform(0, 500, size=(n, 2))]
        web = generate_web(anchors, float(rng.uniform()))

        assert len(web.frames) == n
        for a, b in zip(web.frames, web.frames[1:] + web.frames[:1]):
            assert a.end == b.start

        touches = Counter()
        for t in web.frames:
            touches[t.start] += 1
            touches[t.end] += 1
        assert len(touches) == n
        assert all(count == 2 for count in touches.values())

    print("✓ test_frame_forms_closed_cycle passed")


def test_anchors_sorted_by_angle():
    anchors = [(100.0, 0.0), (0.0, 100.0), (-100.0, 0.0), (0.0, -100.0), (70.0, 70.0)]
    web = generate_web(anchors, 0.3)
    cx, cy = web.center
    angles = [math.atan2(a[1] - cy, a[0] - cx) for a in web.anchors]
    assert angles == sorted(angles)

    print("✓ test_anchors_sorted_by_angle passed")


def test_subdivision_radials_lie_on_frame_edges():
    anchors = [(0.0, 0.0), (300.0, 0.0), (300.0, 300.0), (0.0, 300.0)]
    web = generate_web(anchors, 1.0)

    # densityCount = 15, so floor(15 / 4) = 3 subdivisions per pair
    assert len(web.radials) == 4 + 4 * 3
    for radial in web.radials:
        assert radial.start == web.center
        x, y = radial.end
        on_edge = x in (0.0, 300.0) or y in (0.0, 300.0)
        assert on_edge

    sub_ends = [r.end for r in web.radials[1:4]]
    first, nxt = web.anchors[0], web.anchors[1]
    for s, end in enumerate(sub_ends, start=1):
        t = s / 4
        assert math.isclose(end.x, first[0] + (nxt[0] - first[0]) * t)
        assert math.isclose(end.y, first[1] + (nxt[1] - first[1]) * t)

    print("✓ test_subdivision_radials_lie_on_frame_edges passed")


def test_subdivision_count_uses_per_pair_formula():
    anchors = [(math.cos(a) * 200, math.sin(a) * 200) for a in np.linspace(0, 2 * np.pi, 8, endpoint=False)]
    web = generate_web(anchors, 0.5)
    # floor(9 / 8) = 1 subdivision between every pair
    assert len(web.radials) == 16

    crowd = [(math.cos(a) * 200, math.sin(a) * 200) for a in np.linspace(0, 2 * np.pi, 10, endpoint=False)]
    web = generate_web(crowd, 0.0)
    # floor(3 / 10) = 0: only the main radials remain
    assert len(web.radials) == 10

    print("✓ test_subdivision_count_uses_per_pair_formula passed")


def test_spiral_points_clamped_to_radial():
    anchors = [(0.0, 0.0), (400.0, 0.0), (200.0, 40.0)]
    web = generate_web(anchors, 0.2)
    max_radius = max(distance(a, web.center) for a in web.anchors)

    outer_ring = max(t.ring for t in web.spirals)
    for t in web.spirals:
        r = distance(t.start, web.center)
        assert r <= max_radius + 1e-9
    outer = [t for t in web.spirals if t.ring == outer_ring]
    assert outer[-1].end == outer[0].start

    print("✓ test_spiral_points_clamped_to_radial passed")


def test_degenerate_radials_are_skipped():
    # Three anchors on top of each other: every radial is shorter than 1 unit
    web = generate_web([(50.0, 50.0), (50.2, 50.0), (50.0, 50.3)], 0.5)
    assert web is not None
    assert len(web.frames) == 3
    assert web.spirals == []

    # One anchor sitting on the centroid loses its spiral points only
    web = generate_web([(0.0, 0.0), (100.0, 0.0), (50.0, 150.0), (50.0, 50.0)], 0.0)
    radials_usable = sum(1 for r in web.radials if r.length >= 1)
    assert radials_usable == len(web.radials) - 1
    for ring in range(1, spiral_count(0.0) + 1):
        segments = [t for t in web.spirals if t.ring == ring]
        assert len(segments) == radials_usable
        assert segments[-1].end == segments[0].start

    print("✓ test_degenerate_radials_are_skipped passed")


def test_regeneration_is_reproducible():
    rng = np.random.default_rng(11)
    anchors = [tuple(p) for p in rng.uniform(-300, 300, size=(7, 2))]

    first = generate_web(anchors, 0.66)
    for t in first.all_threads():
        t.advance(0.4)
    second = generate_web(anchors, 0.66)

    assert first is not second
    assert first.center == second.center
    assert first.anchors == second.anchors
    assert endpoint_geometry(first) == endpoint_geometry(second)
    assert all(t.progress == 0.0 for t in second.all_threads())

    print("✓ test_regeneration_is_reproducible passed")


def test_thread_progress_is_monotonic_and_clamped():
    web = generate_web(TRIANGLE, 0.5)
    thread = web.frames[0]

    thread.advance(0.6)
    assert thread.progress == 0.6
    thread.advance(-0.5)
    assert thread.progress == 0.6
    thread.advance(0.7)
    assert thread.progress == 1.0
    assert web.is_complete() is False

    for t in web.all_threads():
        t.advance(2.0)
    assert web.is_complete()
    assert web.build_progress == 1.0

    print("✓ test_thread_progress_is_monotonic_and_clamped passed")


def test_anchor_board():
    board = AnchorBoard()
    a = board.add(10, 10)
    b = board.add(100, 100)
    c = board.add(105, 100)

    assert [x.id for x in board] == [0, 1, 2]
    assert board.find_at((12, 11)) is a
    # Overlapping hit areas: the newest anchor wins
    assert board.find_at((103, 100)) is c
    assert board.find_at((500, 500)) is None

    assert board.remove(b)
    assert not board.remove(b)
    d = board.add(1, 1)
    assert d.id == 3

    board.rescale(2.0, 0.5)
    assert (a.x, a.y) == (20.0, 5.0)

    web = generate_web(board.anchors, 0.5)
    assert centroid(board.anchors) == web.center

    board.clear()
    assert len(board) == 0
    assert board.add(0, 0).id == 0

    print("✓ test_anchor_board passed")


if __name__ == "__main__":
    test_too_few_anchors_is_empty()
    test_triangle_scenario()
    test_frame_forms_closed_cycle()
    test_anchors_sorted_by_angle()
    test_subdivision_radials_lie_on_frame_edges()
    test_subdivision_count_uses_per_pair_formula()
    test_spiral_points_clamped_to_radial()
    test_degenerate_radials_are_skipped()
    test_regeneration_is_reproducible()
    test_thread_progress_is_monotonic_and_clamped()
    test_anchor_board()

    print("\nAll web tests passed! ✓")
