import argparse
import time

import matplotlib.pyplot as plt
from matplotlib.animation import FuncAnimation

from ..config import Config, WebSettings
from ..core.simulation import Simulation
from ..utilities.log import CORELOG
from ..viz.render import BACKGROUND, render_scene

STARTER_WEB = [(300, 150), (680, 170), (740, 430), (420, 500), (220, 360)]
SETTING_STEP = 0.1


class LiveDemo:
    """Interactive weaving: left click places an anchor, right click removes one."""

    def __init__(self, settings: WebSettings, seed: int = 42, width: float = 960, height: float = 600,
                 starter: bool = True):
        self.width = width
        self.height = height
        self.sim = Simulation(settings=settings, seed=seed, width=width, height=height)

        if starter:
            for x, y in STARTER_WEB:
                self.sim.add_anchor(x * width / 960, y * height / 600)

        self.fig, (self.ax_main, self.ax_info) = plt.subplots(1, 2, figsize=(16, 8),
                                                              gridspec_kw={'width_ratios': [3, 1]})
        self.fig.patch.set_facecolor(BACKGROUND)
        self.fig.canvas.mpl_connect('button_press_event', self.on_click)
        self.fig.canvas.mpl_connect('key_press_event', self.on_key)
        self.fig.canvas.mpl_connect('motion_notify_event', self.on_move)
        self.hovered = None

        print(f"Live Demo Started: {len(self.sim.anchors)} anchors, surface {width:g}x{height:g}, seed={seed}")
        print("Left click: add anchor (double click on one removes it) | Right click: remove anchor | c: clear")
        print("+/-: density | t/T: tension | s/S: spider speed")

    def on_click(self, event):
        if event.inaxes is not self.ax_main or event.xdata is None:
            return
        pos = (event.xdata, event.ydata)
        if event.button == 3:
            self.sim.remove_anchor_at(pos)
            self.hovered = None
        elif event.button == 1:
            hit = self.sim.board.find_at(pos)
            if hit is None:
                self.sim.add_anchor(*pos)
            elif event.dblclick:
                self.sim.remove_anchor(hit)
                self.hovered = None

    def on_move(self, event):
        if event.inaxes is not self.ax_main or event.xdata is None:
            self.hovered = None
            return
        self.hovered = self.sim.board.find_at((event.xdata, event.ydata))

    def on_key(self, event):
        settings = self.sim.settings
        if event.key == 'c':
            self.sim.clear()
            self.hovered = None
        elif event.key in ('+', '='):
            self.sim.update_settings(density=settings.density + SETTING_STEP)
        elif event.key == '-':
            self.sim.update_settings(density=settings.density - SETTING_STEP)
        elif event.key == 'T':
            self.sim.update_settings(tension=settings.tension + SETTING_STEP)
        elif event.key == 't':
            self.sim.update_settings(tension=settings.tension - SETTING_STEP)
        elif event.key == 'S':
            self.sim.update_settings(spider_speed=settings.spider_speed + SETTING_STEP)
        elif event.key == 's':
            self.sim.update_settings(spider_speed=settings.spider_speed - SETTING_STEP)

    def render_frame(self, frame):
        self.sim.tick(time.perf_counter() * 1000.0)
        snapshot = self.sim.snapshot()

        hovered = (self.hovered.x, self.hovered.y) if self.hovered is not None else None
        render_scene(snapshot, self.sim.settings, ax=self.ax_main, width=self.width, height=self.height,
                     hovered=hovered)

        self.ax_info.clear()
        self.ax_info.axis('off')

        info_text = f"WEB STATUS\n"
        info_text += f"{'=' * 30}\n\n"
        info_text += f"Frame: {self.sim.frame}\n"
        info_text += f"Anchors: {len(snapshot.anchors)}\n"
        info_text += f"Spiders: {len(snapshot.spiders)}\n\n"

        if snapshot.web is not None:
            counts = snapshot.web.counts()
            info_text += f"THREADS\n"
            info_text += f"{'-' * 30}\n"
            for kind, n in counts.items():
                info_text += f"{kind:>8}: {n}\n"
            info_text += f"\nWoven: {snapshot.web.build_progress * 100:.0f}%\n\n"

        info_text += f"SETTINGS\n"
        info_text += f"{'-' * 30}\n"
        info_text += f"Density: {self.sim.settings.density:.2f}\n"
        info_text += f"Tension: {self.sim.settings.tension:.2f}\n"
        info_text += f"Speed:   {self.sim.settings.spider_speed:.2f}\n"

        self.ax_info.text(0.05, 0.95, info_text, transform=self.ax_info.transAxes,
                          fontsize=10, verticalalignment='top', fontfamily='monospace',
                          bbox=dict(boxstyle='round', facecolor='wheat', alpha=0.3))

        return self.ax_main, self.ax_info

    def run(self, interval: int = 16):
        self.sim.start()
        try:
            anim = FuncAnimation(self.fig, self.render_frame, interval=interval,
                                 blit=False, cache_frame_data=False)
            plt.tight_layout()
            plt.show()
        except KeyboardInterrupt:
            print(f"\nDemo stopped at frame {self.sim.frame}")
            plt.close()
        except Exception as e:
            print(f"Visualization error (running headless?): {e}")
            print("Continuing without visualization...")
        finally:
            self.sim.stop()
            CORELOG.sync()


def main():
    Config.validate()

    parser = argparse.ArgumentParser(description="Live spider web weaving demo")
    parser.add_argument("--density", type=float, default=Config.DENSITY,
                        help="Web density in [0, 1]")
    parser.add_argument("--tension", type=float, default=Config.TENSION,
                        help="Thread tension in [0, 1]")
    parser.add_argument("--speed", type=float, default=Config.SPIDER_SPEED,
                        help="Spider speed in [0, 1]")
    parser.add_argument("--seed", type=int, default=Config.SEED,
                        help="Random seed for reproducibility")
    parser.add_argument("--interval", type=int, default=16,
                        help="Animation interval in ms (default: 16)")
    parser.add_argument("--empty", action="store_true",
                        help="Start with no anchors")

    args = parser.parse_args()

    settings = WebSettings(density=args.density, tension=args.tension, spider_speed=args.speed).clamped()
    demo = LiveDemo(settings, seed=args.seed, width=Config.WIDTH, height=Config.HEIGHT,
                    starter=not args.empty)
    demo.run(interval=args.interval)


if __name__ == "__main__":
    main()
