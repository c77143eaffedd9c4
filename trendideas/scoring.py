"""Per-source signal strength scoring, normalized to [0, 1]."""

import time
from abc import ABC, abstractmethod

from .models import CommunitySignal, RawSignal, SearchSignal, SourceType

HOUR = 3600
WEEK_HOURS = 168


def clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


class StrengthScorer(ABC):
    """Maps a raw signal of one source type to a strength in [0, 1]."""

    source_type: SourceType

    @abstractmethod
    def score(self, signal: RawSignal, now: float) -> float:
        ...


class CommunityStrengthScorer(StrengthScorer):
    """Engagement x age decay x keyword richness.

    Engagement is (upvotes + 2 * comments) / 100, decay falls linearly to a
    floor of 0.1 over one week, and posts with more than 3 distinct keywords
    get a 1.2x bonus.
    """

    source_type = SourceType.COMMUNITY

    def score(self, signal: CommunitySignal, now: float) -> float:
        hours_ago = (now - signal.timestamp) / HOUR
        age_multiplier = max(0.1, 1 - hours_ago / WEEK_HOURS)
        engagement = (signal.score + signal.num_comments * 2) / 100
        distinct = {k.lower() for k in signal.keywords}
        keyword_bonus = 1.2 if len(distinct) > 3 else 1.0
        return clamp(engagement * age_multiplier * keyword_bonus / 10)


class SearchStrengthScorer(StrengthScorer):
    """40% average interest, 60% positive growth, 1.1x for >3 related queries."""

    source_type = SourceType.SEARCH

    def score(self, signal: SearchSignal, now: float) -> float:
        interest = clamp(signal.average_interest / 100)
        growth = clamp(signal.growth / 100)
        related_bonus = 1.1 if len(signal.related_queries) > 3 else 1.0
        return clamp((interest * 0.4 + growth * 0.6) * related_bonus)


DEFAULT_SCORERS = {
    scorer.source_type: scorer
    for scorer in (CommunityStrengthScorer(), SearchStrengthScorer())
}


def score_signal(signal: RawSignal, scorers: dict = None, now: float = None) -> float:
    """Score a signal with the scorer registered for its source type."""
    scorers = DEFAULT_SCORERS if scorers is None else scorers
    now = time.time() if now is None else now
    try:
        scorer = scorers[signal.source_type]
    except KeyError:
        raise ValueError(f"No strength scorer registered for {signal.source_type!r}") from None
    return scorer.score(signal, now)
