"""Daily selection: score unpublished ideas and publish exactly one."""

from datetime import date, datetime

from .config import CANDIDATE_POOL_SIZE
from .log import get_logger, log
from .models import ContentArtifact, utcnow
from .repository import Repository

REVENUE_SCORES = {"high": 1.0, "medium": 0.7, "low": 0.4}
RECENCY_WINDOW_HOURS = 72


def score_idea(idea: ContentArtifact, now: datetime = None) -> float:
    """Weighted score in [0, 1]: 40% trend strength, 30% ease of build,
    20% revenue potential, 10% recency (linear decay over 3 days)."""
    now = now or utcnow()
    strength = idea.trend.strength if idea.trend else 0.0
    ease = (6 - idea.difficulty_score) / 5
    revenue = REVENUE_SCORES.get(idea.revenue_potential, REVENUE_SCORES["low"])
    hours_ago = (now - idea.created_at).total_seconds() / 3600
    recency = max(0.0, 1 - hours_ago / RECENCY_WINDOW_HOURS)
    return strength * 0.4 + ease * 0.3 + revenue * 0.2 + recency * 0.1


def select_best(candidates: list[ContentArtifact], now: datetime = None) -> ContentArtifact | None:
    """Highest-scoring candidate; on ties the earliest in input order wins."""
    if not candidates:
        return None
    now = now or utcnow()
    return max(candidates, key=lambda idea: score_idea(idea, now))


class DailySelector:
    def __init__(self, repository: Repository, pool_size: int = CANDIDATE_POOL_SIZE):
        self.repository = repository
        self.pool_size = pool_size

    def select_and_publish(self, candidates: list[ContentArtifact], today: date = None,
                           now: datetime = None) -> ContentArtifact | None:
        """Publish the best candidate for ``today``.

        Returns None for an empty pool without touching storage. If an idea
        is already published for ``today`` it is returned and nothing is
        written, so a date never holds more than one published idea.
        """
        if not candidates:
            log("No unpublished ideas available")
            return None

        now = now or utcnow()
        today = today or now.date()

        existing = self.repository.query_published_for_date(today)
        if existing is not None:
            log(f"Already published for {today}: \"{existing.title}\"")
            return existing

        winner = select_best(candidates, now)
        get_logger("selection").debug(
            "Scores: %s",
            ", ".join(f"{c.id}={score_idea(c, now):.3f}" for c in candidates),
        )
        self.repository.mark_published(winner.id, today)
        winner.publish(today)
        log(f"Published daily idea: \"{winner.title}\"")
        return winner

    def publish_daily(self, today: date = None, now: datetime = None) -> ContentArtifact | None:
        """Read the unpublished pool (most recent first) and publish one idea."""
        candidates = self.repository.query_unpublished(self.pool_size)
        return self.select_and_publish(candidates, today=today, now=now)
