"""Procedural spider web weaving: anchors in, threads and wandering spiders out."""
from .config import Config, WebSettings
from .core.anchors import Anchor, AnchorBoard
from .core.simulation import Simulation, Snapshot
from .core.spider import Spider, TraversalEngine
from .core.web import Thread, ThreadKind, Web, generate_web

__version__ = "0.1.0"
