"""Static signal source: serves a fixed list of signals."""

from ..models import RawSignal, SourceType
from .base import SignalSource


class StaticSource(SignalSource):
    """Replays pre-built signals, e.g. for demos or offline runs."""

    def __init__(self, signals: list[RawSignal], source_type: SourceType, name: str = "static"):
        self.signals = list(signals)
        self.source_type = source_type
        self.name = name

    def collect(self) -> list[RawSignal]:
        return list(self.signals)
