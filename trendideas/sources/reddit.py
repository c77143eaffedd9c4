"""Reddit .json API signal source (hot posts from builder subreddits)."""

import re

import requests

from ..config import COMMUNITY_SPACING
from ..models import CommunitySignal, SourceType
from ..pacing import Pacer
from .base import PacedSource

DEFAULT_SUBREDDITS = [
    "SideProject", "Entrepreneur", "nocode", "webdev", "MachineLearning",
    "artificial", "ChatGPT", "OpenAI", "selfhosted", "privacy", "productivity",
]

TECH_KEYWORDS = [
    "AI", "ML", "API", "SaaS", "app", "tool", "platform", "automation",
    "Claude", "GPT", "OpenAI", "Anthropic", "Replit", "Vercel", "Supabase",
    "React", "Next.js", "TypeScript", "Python", "JavaScript", "Node.js",
    "database", "webhook", "integration", "workflow", "dashboard", "analytics",
    "mobile", "iOS", "Android", "web", "browser", "extension", "plugin",
    "startup", "business", "revenue", "monetize", "subscription", "freemium",
]
_TECH_LOWER = [k.lower() for k in TECH_KEYWORDS]


def _is_tech_word(word: str) -> bool:
    for k in _TECH_LOWER:
        if word == k or word == k + "s":
            return True
        # short terms like "ai" or "app" only match whole words
        if len(k) > 3 and k in word:
            return True
    return False


def extract_keywords(text: str) -> list[str]:
    """Words of ``text`` that match the tech vocabulary, first spelling kept."""
    seen = set()
    keywords = []
    for word in re.findall(r"\b\w+\b", text):
        lower = word.lower()
        if lower not in seen and _is_tech_word(lower):
            seen.add(lower)
            keywords.append(word)
    return keywords


class RedditSource(PacedSource):
    name = "reddit"
    source_type = SourceType.COMMUNITY

    def __init__(self, config: dict = None, pacer: Pacer = None):
        config = config or {}
        super().__init__(pacer or Pacer(COMMUNITY_SPACING), config)
        self.subreddits = config.get("subreddits", DEFAULT_SUBREDDITS)
        self.per_subreddit = config.get("limit", 10)

    @property
    def items(self) -> list[str]:
        return self.subreddits

    def collect(self) -> list[CommunitySignal]:
        return self._scan()

    def _fetch(self, subreddit: str) -> list[CommunitySignal]:
        url = f"https://www.reddit.com/r/{subreddit}/hot.json"
        headers = {"User-Agent": "trend-ideas-pipeline/1.0"}
        r = requests.get(url, headers=headers, params={"limit": self.per_subreddit + 2},
                         timeout=self.call_timeout)
        r.raise_for_status()
        data = r.json()

        signals = []
        for post in data.get("data", {}).get("children", []):
            d = post.get("data", {})
            if d.get("stickied"):
                continue

            title = d.get("title", "")
            body = d.get("selftext", "")
            keywords = extract_keywords(f"{title} {body}")
            if not keywords:
                continue

            signals.append(CommunitySignal(
                keywords=keywords,
                timestamp=int(d.get("created_utc", 0)),
                title=title,
                body=body[:500],
                subreddit=d.get("subreddit", subreddit),
                url=f"https://reddit.com{d.get('permalink', '')}",
                score=d.get("score", 0),
                num_comments=d.get("num_comments", 0),
            ))

        return signals[:self.per_subreddit]
