"""Multi-source trend signal collection."""

from .base import PacedSource, SignalSource
from .engine import SignalEngine
from .static import StaticSource

__all__ = ["PacedSource", "SignalSource", "SignalEngine", "StaticSource"]
