import sys
import os
import math
from types import SimpleNamespace

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..', '..')))

from spiderweb.config import Config, WebSettings
from spiderweb.run import live_demo, sim


def make_demo(**settings):
    return live_demo.LiveDemo(WebSettings(**settings), seed=7, starter=False)


def click(demo, x, y, button=1, dblclick=False):
    demo.on_click(SimpleNamespace(inaxes=demo.ax_main, xdata=x, ydata=y, button=button, dblclick=dblclick))


def press(demo, key):
    demo.on_key(SimpleNamespace(key=key))


def test_entry_points_reject_bad_environment(monkeypatch):
    monkeypatch.setattr(sys, "argv", ["spiderweb-sim", "--frames", "1"])
    monkeypatch.setattr(Config, "WIDTH", -960.0)
    with pytest.raises(ValueError):
        sim.main()

    monkeypatch.setattr(Config, "WIDTH", 960.0)
    monkeypatch.setattr(Config, "DENSITY", 1.5)
    monkeypatch.setattr(sys, "argv", ["spiderweb-live", "--empty"])
    with pytest.raises(ValueError):
        live_demo.main()

    print("✓ test_entry_points_reject_bad_environment passed")


def test_keys_adjust_every_setting():
    demo = make_demo(density=0.5, tension=0.5, spider_speed=0.5)
    for x, y in [(100, 100), (500, 120), (300, 450)]:
        click(demo, x, y)
    web = demo.sim.web

    press(demo, 'T')
    assert math.isclose(demo.sim.settings.tension, 0.6)
    press(demo, 't')
    press(demo, 't')
    assert math.isclose(demo.sim.settings.tension, 0.4)

    press(demo, 'S')
    assert math.isclose(demo.sim.settings.spider_speed, 0.6)
    assert math.isclose(demo.sim.engine.settings.spider_speed, 0.6)
    for _ in range(10):
        press(demo, 's')
    assert demo.sim.settings.spider_speed == 0.0

    # Tension and speed leave the woven web alone
    assert demo.sim.web is web

    press(demo, '+')
    assert math.isclose(demo.sim.settings.density, 0.6)
    assert demo.sim.web is not web

    press(demo, 'c')
    assert demo.sim.anchors == []
    plt.close(demo.fig)

    print("✓ test_keys_adjust_every_setting passed")


def test_clicks_add_and_remove_anchors():
    demo = make_demo()
    click(demo, 100, 100)
    click(demo, 400, 100)
    assert len(demo.sim.anchors) == 2

    # A press on an existing anchor does not stack a new one on top
    click(demo, 402, 101)
    assert len(demo.sim.anchors) == 2

    # Double click arrives as a plain press followed by a dblclick press
    click(demo, 401, 99)
    click(demo, 401, 99, dblclick=True)
    assert [(a.x, a.y) for a in demo.sim.anchors] == [(100, 100)]

    click(demo, 100, 100, button=3)
    assert demo.sim.anchors == []

    demo.on_click(SimpleNamespace(inaxes=demo.ax_info, xdata=0.5, ydata=0.5, button=1, dblclick=False))
    demo.on_click(SimpleNamespace(inaxes=demo.ax_main, xdata=None, ydata=None, button=1, dblclick=False))
    assert demo.sim.anchors == []
    plt.close(demo.fig)

    print("✓ test_clicks_add_and_remove_anchors passed")


def test_pointer_tracks_hovered_anchor():
    demo = make_demo()
    click(demo, 100, 100)
    anchor = demo.sim.anchors[0]

    demo.on_move(SimpleNamespace(inaxes=demo.ax_main, xdata=110, ydata=105))
    assert demo.hovered is anchor
    demo.render_frame(0)

    demo.on_move(SimpleNamespace(inaxes=demo.ax_main, xdata=300, ydata=300))
    assert demo.hovered is None

    demo.on_move(SimpleNamespace(inaxes=demo.ax_main, xdata=100, ydata=100))
    demo.on_move(SimpleNamespace(inaxes=None, xdata=None, ydata=None))
    assert demo.hovered is None

    demo.on_move(SimpleNamespace(inaxes=demo.ax_main, xdata=100, ydata=100))
    click(demo, 100, 100, button=3)
    assert demo.hovered is None
    plt.close(demo.fig)

    print("✓ test_pointer_tracks_hovered_anchor passed")


if __name__ == "__main__":
    test_keys_adjust_every_setting()
    test_clicks_add_and_remove_anchors()
    test_pointer_tracks_hovered_anchor()

    print("\nAll run tests passed! ✓")
