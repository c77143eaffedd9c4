"""Fan-in of raw signals into ranked, categorized trends."""

import time

from .config import MAX_TRENDS, MIN_TREND_STRENGTH
from .log import get_logger
from .models import AggregatedTrend, RawSignal, SourceType
from .scoring import DEFAULT_SCORERS, score_signal

# Checked in order; the first category with a matching term wins.
CATEGORY_TERMS = [
    ("AI/ML", ["ai", "ml", "gpt", "claude", "chatgpt", "artificial", "machine learning"]),
    ("Productivity", ["productivity", "workflow", "automation", "scheduling", "todo"]),
    ("Business", ["saas", "startup", "revenue", "business", "invoice", "crm"]),
    ("Social", ["social", "community", "networking", "messaging", "collaboration"]),
    ("Health", ["fitness", "health", "wellness", "medical", "mental health"]),
    ("Finance", ["finance", "budget", "crypto", "investment", "banking", "money"]),
    ("Development", ["code", "api", "development", "programming", "web", "mobile"]),
]
DEFAULT_CATEGORY = "General"
CATEGORIES = [name for name, _ in CATEGORY_TERMS] + [DEFAULT_CATEGORY]

SUGGESTION_RULES = [
    (("ai", "gpt"), ["AI-powered tool", "Automation service", "Content generator"]),
    (("productivity", "workflow"), ["Productivity app", "Team tool", "Process optimizer"]),
    (("social", "community"), ["Social platform", "Community tool", "Networking app"]),
    (("finance", "budget"), ["Financial tracker", "Budget app", "Investment tool"]),
    (("health", "fitness"), ["Health tracker", "Fitness app", "Wellness platform"]),
]
DEFAULT_SUGGESTIONS = ["Utility app", "SaaS tool", "Mobile app"]


def normalize_keyword(keyword: str) -> str:
    return keyword.strip().lower()


def categorize(keyword: str) -> str:
    word = keyword.lower()
    for category, terms in CATEGORY_TERMS:
        if any(term in word for term in terms):
            return category
    return DEFAULT_CATEGORY


def suggest_uses(keyword: str) -> list[str]:
    word = keyword.lower()
    for fragments, suggestions in SUGGESTION_RULES:
        if any(fragment in word for fragment in fragments):
            return list(suggestions)
    return list(DEFAULT_SUGGESTIONS)


class TrendAggregator:
    """Groups signals by normalized keyword and ranks the resulting trends.

    Each call to ``aggregate`` owns its own trend map; nothing is shared
    between runs. A trend's strength is the strongest single contributing
    signal, never a sum or average.
    """

    def __init__(self, scorers: dict = None, min_strength: float = MIN_TREND_STRENGTH,
                 max_trends: int = MAX_TRENDS):
        self.scorers = dict(DEFAULT_SCORERS if scorers is None else scorers)
        self.min_strength = min_strength
        self.max_trends = max_trends

    def aggregate(self, signals_by_source: dict[SourceType, list[RawSignal]],
                  now: float = None) -> list[AggregatedTrend]:
        now = time.time() if now is None else now
        trends: dict[str, AggregatedTrend] = {}
        total = 0

        for signals in signals_by_source.values():
            for signal in signals:
                total += 1
                strength = score_signal(signal, self.scorers, now)
                for keyword in signal.keywords:
                    self._add_or_update(trends, keyword, signal, strength)

        ranked = sorted(
            (t for t in trends.values() if t.overall_strength > self.min_strength),
            key=lambda t: t.overall_strength,
            reverse=True,
        )[: self.max_trends]

        get_logger("trends").debug(
            "Aggregated %d signals into %d trends, %d ranked",
            total, len(trends), len(ranked),
        )
        return ranked

    def _add_or_update(self, trends: dict, keyword: str, signal: RawSignal, strength: float):
        key = normalize_keyword(keyword)
        if not key:
            return
        trend = trends.get(key)
        if trend is None:
            # Category and suggestions are fixed by the first keyword seen for a key
            trend = AggregatedTrend(
                key=key,
                category=categorize(keyword),
                suggested_uses=suggest_uses(keyword),
            )
            trends[key] = trend
        trend.add_signal(keyword.strip(), signal, strength)
