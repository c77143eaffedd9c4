"""SignalSource ABC and the paced per-item scan shared by network sources."""

from abc import ABC, abstractmethod

from ..config import SCAN_BUDGET, SOURCE_TIMEOUT
from ..errors import SourceUnavailable
from ..log import get_logger
from ..models import RawSignal, SourceType
from ..pacing import Pacer


class SignalSource(ABC):
    """Abstract base class for signal sources."""

    name: str = "unknown"
    source_type: SourceType
    call_timeout: float = SOURCE_TIMEOUT

    @abstractmethod
    def collect(self) -> list[RawSignal]:
        """Collect raw signals from this source."""
        ...

    @property
    def is_available(self) -> bool:
        """Check if this source is configured and available."""
        return True

    def scan_budget(self) -> float:
        """Upper bound, in seconds, on how long ``collect()`` can run."""
        return self.call_timeout


class PacedSource(SignalSource):
    """A source that makes paced external calls for each item it scans.

    Every call is bounded by ``call_timeout``. Once ``max_scan`` seconds have
    passed no new item is started and the signals gathered so far are
    returned, so a long item list never turns into a lost source.
    """

    calls_per_item = 1

    def __init__(self, pacer: Pacer, config: dict):
        self.pacer = pacer
        self.call_timeout = float(config.get("timeout", SOURCE_TIMEOUT))
        self.max_scan = float(config.get("scan_budget", SCAN_BUDGET))

    @property
    def items(self) -> list[str]:
        raise NotImplementedError

    def scan_budget(self) -> float:
        per_item = self.pacer.min_interval + self.calls_per_item * self.call_timeout
        full_scan = len(self.items) * per_item
        return min(full_scan, self.max_scan + per_item)

    def _fetch(self, item: str) -> list[RawSignal]:
        raise NotImplementedError

    def _scan(self) -> list[RawSignal]:
        logger = get_logger(f"sources.{self.name}")
        deadline = self.pacer.clock() + self.max_scan
        signals = []
        attempted = failures = 0

        for item in self.items:
            if self.pacer.clock() >= deadline:
                logger.warning(
                    "scan budget of %.0fs used, stopping after %d/%d items",
                    self.max_scan, attempted, len(self.items),
                )
                break
            self.pacer.wait()
            attempted += 1
            try:
                signals.extend(self._fetch(item))
            except Exception as e:
                failures += 1
                logger.debug("%s failed: %s", item, e)

        if attempted and failures == attempted:
            raise SourceUnavailable(f"all {failures} requests failed")
        return signals
