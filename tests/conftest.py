"""Shared test fixtures."""

import json
from datetime import datetime, timedelta, timezone

import pytest

from trendideas.models import (
    CommunitySignal,
    ContentArtifact,
    IdeaContent,
    SearchSignal,
    TrendSnapshot,
)

NOW = 1_760_000_000.0
NOW_DT = datetime.fromtimestamp(NOW, tz=timezone.utc)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def now_dt():
    return NOW_DT


@pytest.fixture
def make_post():
    """Factory for community signals posted ``hours_ago`` before NOW."""
    def _make(keywords=("AI", "tool"), score=100, num_comments=50, hours_ago=0.0, **kw):
        return CommunitySignal(
            keywords=list(keywords),
            timestamp=int(NOW - hours_ago * 3600),
            score=score,
            num_comments=num_comments,
            **kw,
        )
    return _make


@pytest.fixture
def make_search():
    """Factory for search-interest signals."""
    def _make(keyword="AI automation", average_interest=50.0, growth=50.0, related=(), **kw):
        return SearchSignal(
            keywords=[keyword],
            timestamp=int(NOW),
            average_interest=average_interest,
            growth=growth,
            related_queries=list(related),
            **kw,
        )
    return _make


@pytest.fixture
def make_idea():
    """Factory for unpublished ideas created ``hours_ago`` before NOW."""
    def _make(title="Idea", strength=0.5, difficulty=3, revenue="medium",
              hours_ago=0.0, idea_id=None, with_trend=True):
        trend = TrendSnapshot(keywords=["ai"], category="AI/ML", strength=strength,
                              sources=["community"]) if with_trend else None
        return ContentArtifact(
            id=idea_id,
            title=title,
            description=f"{title} description",
            content=IdeaContent(title=title, description="", build_difficulty=difficulty),
            difficulty_score=difficulty,
            revenue_potential=revenue,
            trend=trend,
            created_at=NOW_DT - timedelta(hours=hours_ago),
        )
    return _make


@pytest.fixture
def idea_json():
    """A well-formed model response."""
    return json.dumps({
        "title": "Inbox Zero Bot",
        "description": "An AI assistant that triages your inbox.",
        "what_it_is": "Sorts email into actions.",
        "why_it_matters": "Everyone drowns in email.",
        "tools": ["Claude", "Supabase"],
        "mvp_features": ["Gmail sync", "Daily digest"],
        "monetization_ideas": ["Freemium subscription", "Team plan"],
        "build_difficulty": 2,
        "build_difficulty_reason": "Mostly API glue.",
        "variations": ["Slack version"],
        "tweetable_summary": "Inbox zero on autopilot.",
    })


class FakeClock:
    """Monotonic clock that only moves when the pacer sleeps."""

    def __init__(self):
        self.now = 0.0
        self.sleeps = []

    def __call__(self):
        return self.now

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds


class FakeSeries(list):
    def tolist(self):
        return list(self)


class FakeFrame(dict):
    empty = False

    def __getitem__(self, key):
        return FakeSeries(dict.__getitem__(self, key))


class FakeTrendsClient:
    """Answers every pytrends call instantly with a rising interest series."""

    def __init__(self):
        self.keyword = None

    def build_payload(self, keywords, timeframe, geo):
        self.keyword = keywords[0]

    def interest_over_time(self):
        return FakeFrame({self.keyword: [10.0] * 10 + [20.0] * 10})

    def related_queries(self):
        return {}


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def trends_client():
    return FakeTrendsClient()
