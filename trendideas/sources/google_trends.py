"""Google Trends signal source via pytrends."""

import time

from ..config import SEARCH_SPACING
from ..log import get_logger
from ..models import SearchSignal, SourceType
from ..pacing import Pacer
from .base import PacedSource

# Pre-defined keywords monitored for app ideas
APP_IDEA_KEYWORDS = [
    # AI & tech
    "AI automation", "ChatGPT plugin", "Claude API", "voice AI",
    "AI writing tool", "AI image generator",
    # Productivity & business
    "no code app", "side hustle", "SaaS idea", "productivity app",
    "remote work tool", "team collaboration",
    # Niches
    "fitness tracker", "meal planning app", "budget tracker",
    "social media scheduler", "invoice generator", "password manager",
    # Platforms
    "Replit app", "Vercel deployment", "Supabase project", "Next.js template",
    "React component", "TypeScript starter",
]

PERIOD_POINTS = 10


def _mean(values) -> float:
    return sum(values) / len(values) if values else 0.0


def compute_growth(interest: list[float]) -> float:
    """Percent change of the last 10 points over the first 10 points."""
    earlier = _mean(interest[:PERIOD_POINTS])
    recent = _mean(interest[-PERIOD_POINTS:])
    if earlier <= 0:
        return 0.0
    return (recent - earlier) / earlier * 100


class GoogleTrendsSource(PacedSource):
    name = "google_trends"
    source_type = SourceType.SEARCH
    # token + interest over time, token + related queries
    calls_per_item = 4

    def __init__(self, config: dict = None, client=None, pacer: Pacer = None):
        config = config or {}
        super().__init__(pacer or Pacer(SEARCH_SPACING), config)
        self.geo = config.get("geo", "US")
        self.keywords = config.get("keywords", APP_IDEA_KEYWORDS)
        self._client = client

    @property
    def items(self) -> list[str]:
        return self.keywords

    @property
    def is_available(self) -> bool:
        if self._client is not None:
            return True
        try:
            from pytrends.request import TrendReq  # noqa: F401
            return True
        except ImportError:
            return False

    def _get_client(self):
        if self._client is None:
            from pytrends.request import TrendReq
            self._client = TrendReq(hl="en-US", tz=360, timeout=self.call_timeout)
        return self._client

    def collect(self) -> list[SearchSignal]:
        signals = self._scan()
        signals.sort(key=lambda s: s.growth, reverse=True)
        return signals

    def _fetch(self, keyword: str) -> list[SearchSignal]:
        client = self._get_client()
        client.build_payload([keyword], timeframe="today 3-m", geo=self.geo)
        frame = client.interest_over_time()
        if frame is None or frame.empty or keyword not in frame:
            return []

        interest = [float(v) for v in frame[keyword].tolist()]
        if not interest:
            return []

        return [SearchSignal(
            keywords=[keyword],
            timestamp=int(time.time()),
            interest=interest,
            average_interest=_mean(interest),
            growth=compute_growth(interest),
            related_queries=self._related_queries(client, keyword),
        )]

    def _related_queries(self, client, keyword: str) -> list[str]:
        try:
            client.build_payload([keyword], timeframe="today 1-m", geo=self.geo)
            top = (client.related_queries().get(keyword) or {}).get("top")
            if top is None or top.empty:
                return []
            return [str(q) for q in top["query"].head(5).tolist()]
        except Exception as e:
            get_logger("sources.google_trends").debug("No related queries for %r: %s", keyword, e)
            return []
