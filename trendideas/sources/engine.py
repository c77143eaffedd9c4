"""SignalEngine: loads enabled sources and collects from them concurrently."""

import concurrent.futures

from ..config import load_config
from ..errors import SourceUnavailable
from ..log import get_logger, log
from ..models import RawSignal, SourceType
from .base import SignalSource


class SignalEngine:
    """Collects from all enabled sources; one failing source never blocks the rest."""

    def __init__(self, sources: list[SignalSource] = None, config: dict = None):
        if sources is not None:
            self._sources = list(sources)
        else:
            self._sources = []
            self._load_sources(config if config is not None else load_config())

    @property
    def sources(self) -> list[SignalSource]:
        return list(self._sources)

    def _load_sources(self, config: dict):
        """Load enabled signal sources from config."""
        source_config = config.get("signal_sources", {})

        from .google_trends import GoogleTrendsSource
        from .reddit import RedditSource

        source_map = {
            "reddit": RedditSource,
            "google_trends": GoogleTrendsSource,
        }

        for name, cls in source_map.items():
            src_cfg = source_config.get(name, {})
            if src_cfg.get("enabled", True):
                try:
                    self._sources.append(cls(src_cfg))
                except Exception as e:
                    log(f"Failed to init source {name}: {e}")

    def collect(self, timeout: float = None) -> dict[SourceType, list[RawSignal]]:
        """Run every available source in parallel.

        Without ``timeout`` the engine waits as long as the slowest source's
        scan budget, which already covers its pacing and per-call timeouts.
        Results are merged in source registration order regardless of which
        source finished first.
        """
        available = [src for src in self._sources if src.is_available]
        if timeout is None:
            timeout = max((src.scan_budget() for src in available), default=0.0)
        results: dict[int, list[RawSignal]] = {}

        pool = concurrent.futures.ThreadPoolExecutor(max_workers=max(1, len(available)))
        try:
            futures = {pool.submit(src.collect): i for i, src in enumerate(available)}
            try:
                for future in concurrent.futures.as_completed(futures, timeout=timeout):
                    i = futures[future]
                    src = available[i]
                    try:
                        signals = future.result()
                    except Exception as e:
                        self._report(src, SourceUnavailable(str(e)))
                        continue
                    results[i] = signals
                    log(f"{src.name}: found {len(signals)} signals")
            except concurrent.futures.TimeoutError:
                for future, i in futures.items():
                    if not future.done():
                        self._report(available[i], SourceUnavailable(f"timed out after {timeout:.0f}s"))
        finally:
            pool.shutdown(wait=False, cancel_futures=True)

        signals_by_source: dict[SourceType, list[RawSignal]] = {}
        for i, src in enumerate(available):
            if i in results:
                signals_by_source.setdefault(src.source_type, []).extend(results[i])
        return signals_by_source

    @staticmethod
    def _report(src: SignalSource, error: SourceUnavailable):
        get_logger("sources").warning("%s: unavailable, %s", src.name, error)
