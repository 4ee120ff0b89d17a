"""
Configuration for the web weaving simulation.

Defaults come from the environment (optionally a ``.env`` file next to the
working directory) so demos can be tuned without touching code.
"""
import os
from dataclasses import dataclass, replace

from dotenv import load_dotenv

load_dotenv()


def clamp(v, lo, hi):
    return lo if v < lo else hi if v > hi else v


class Config:
    # Slider defaults, all in [0, 1]
    DENSITY = float(os.getenv("SPIDERWEB_DENSITY", "0.5"))
    TENSION = float(os.getenv("SPIDERWEB_TENSION", "0.5"))
    SPIDER_SPEED = float(os.getenv("SPIDERWEB_SPIDER_SPEED", "0.5"))

    # Random source for spider speeds and wander choices
    SEED = int(os.getenv("SPIDERWEB_SEED", "42"))

    # Drawing surface size used by the demos
    WIDTH = float(os.getenv("SPIDERWEB_WIDTH", "960"))
    HEIGHT = float(os.getenv("SPIDERWEB_HEIGHT", "600"))

    LOG_LEVEL = os.getenv("SPIDERWEB_LOG_LEVEL", "INFO")

    @classmethod
    def validate(cls):
        for name in ("DENSITY", "TENSION", "SPIDER_SPEED"):
            value = getattr(cls, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"SPIDERWEB_{name} must be within [0, 1], got {value}")
        if cls.WIDTH <= 0 or cls.HEIGHT <= 0:
            raise ValueError(f"canvas size must be positive, got {cls.WIDTH}x{cls.HEIGHT}")
        return True


@dataclass
class WebSettings:
    density: float = 0.5
    tension: float = 0.5
    spider_speed: float = 0.5

    def clamped(self) -> "WebSettings":
        return WebSettings(
            density=clamp(float(self.density), 0.0, 1.0),
            tension=clamp(float(self.tension), 0.0, 1.0),
            spider_speed=clamp(float(self.spider_speed), 0.0, 1.0),
        )

    def updated(self, **changes) -> "WebSettings":
        return replace(self, **changes).clamped()

    @classmethod
    def from_config(cls) -> "WebSettings":
        Config.validate()
        return cls(density=Config.DENSITY, tension=Config.TENSION, spider_speed=Config.SPIDER_SPEED)
