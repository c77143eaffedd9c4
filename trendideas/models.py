"""Signal, trend, and idea records shared across the pipeline."""

from dataclasses import asdict, dataclass, field
from datetime import date, datetime, timezone
from enum import Enum
from typing import ClassVar

REVENUE_LEVELS = ("low", "medium", "high")


class SourceType(str, Enum):
    COMMUNITY = "community"  # discussion posts (Reddit)
    SEARCH = "search"  # search interest (Google Trends)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def parse_timestamp(value) -> datetime:
    """Parse an ISO timestamp from storage; naive values are taken as UTC."""
    if isinstance(value, datetime):
        dt = value
    else:
        dt = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


# ─────────────────────────────────────────────────────
# Raw signals: one tagged variant per source type
# ─────────────────────────────────────────────────────
@dataclass(frozen=True)
class RawSignal:
    """A single observation from one source. Immutable once produced."""
    keywords: tuple[str, ...]
    timestamp: int  # epoch seconds

    source_type: ClassVar[SourceType]

    def __post_init__(self):
        object.__setattr__(self, "keywords", tuple(self.keywords))
        if not self.keywords:
            raise ValueError(f"{type(self).__name__} needs at least one keyword")

    def to_dict(self) -> dict:
        data = asdict(self)
        data["source_type"] = self.source_type.value
        return data


@dataclass(frozen=True)
class CommunitySignal(RawSignal):
    title: str = ""
    body: str = ""
    subreddit: str = ""
    url: str = ""
    score: int = 0
    num_comments: int = 0

    source_type: ClassVar[SourceType] = SourceType.COMMUNITY


@dataclass(frozen=True)
class SearchSignal(RawSignal):
    interest: tuple[float, ...] = ()
    average_interest: float = 0.0
    growth: float = 0.0  # percent, recent vs. earlier period
    related_queries: tuple[str, ...] = ()

    source_type: ClassVar[SourceType] = SourceType.SEARCH

    def __post_init__(self):
        super().__post_init__()
        object.__setattr__(self, "interest", tuple(self.interest))
        object.__setattr__(self, "related_queries", tuple(self.related_queries))


# ─────────────────────────────────────────────────────
# Aggregated trends: owned by a single aggregation run
# ─────────────────────────────────────────────────────
@dataclass
class TrendSnapshot:
    """The trend data an idea keeps after the run that produced it."""
    keywords: list[str]
    category: str
    strength: float
    sources: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict | None):
        if not data:
            return None
        return cls(
            keywords=list(data.get("keywords", [])),
            category=data.get("category", "General"),
            strength=float(data.get("strength") or 0.0),
            sources=list(data.get("sources", [])),
        )


@dataclass
class AggregatedTrend:
    key: str
    category: str
    suggested_uses: list[str]
    keywords: list[str] = field(default_factory=list)
    signals: dict[SourceType, list[RawSignal]] = field(default_factory=dict)
    overall_strength: float = 0.0

    def add_signal(self, keyword: str, signal: RawSignal, strength: float):
        """Record a contributing signal; strength is the strongest seen so far.

        The signal is appended once per keyword that maps here, so a post
        matching a key under two spellings counts as two mentions.
        """
        if keyword not in self.keywords:
            self.keywords.append(keyword)
        self.signals.setdefault(signal.source_type, []).append(signal)
        self.overall_strength = max(self.overall_strength, strength)

    @property
    def source_names(self) -> list[str]:
        return [source_type.value for source_type in self.signals]

    @property
    def market_signals(self) -> dict:
        searches = self.signals.get(SourceType.SEARCH, [])
        posts = self.signals.get(SourceType.COMMUNITY, [])
        data = {}
        if searches:
            data["search_interest"] = round(max(s.average_interest for s in searches), 1)
        if posts:
            data["social_mentions"] = len(posts)
            data["social_engagement"] = sum(p.score + p.num_comments for p in posts)
        return data

    def snapshot(self) -> TrendSnapshot:
        return TrendSnapshot(
            keywords=list(self.keywords),
            category=self.category,
            strength=self.overall_strength,
            sources=self.source_names,
        )


# ─────────────────────────────────────────────────────
# Generated ideas
# ─────────────────────────────────────────────────────
@dataclass
class IdeaContent:
    """Structured payload produced by the generation step."""
    title: str
    description: str
    what_it_is: str = ""
    why_it_matters: str = ""
    tools: list[str] = field(default_factory=list)
    mvp_features: list[str] = field(default_factory=list)
    monetization_ideas: list[str] = field(default_factory=list)
    build_difficulty: int = 3
    build_difficulty_reason: str = ""
    variations: list[str] = field(default_factory=list)
    tweetable_summary: str = ""

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict):
        known = cls.__dataclass_fields__
        fields = {k: v for k, v in data.items() if k in known}
        fields.setdefault("title", "")
        fields.setdefault("description", "")
        return cls(**fields)


@dataclass
class ContentArtifact:
    title: str
    description: str
    content: IdeaContent
    difficulty_score: int
    revenue_potential: str
    build_time_estimate: str = ""
    tools_required: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    trend: TrendSnapshot | None = None
    created_at: datetime = field(default_factory=utcnow)
    is_published: bool = False
    published_date: date | None = None
    id: str | None = None

    def publish(self, day: date):
        """Unpublished -> Published. Published is terminal."""
        if self.is_published:
            raise ValueError(f"Idea {self.id} was already published on {self.published_date}")
        self.is_published = True
        self.published_date = day

    def to_record(self) -> dict:
        record = {
            "title": self.title,
            "description": self.description,
            "content": self.content.to_dict(),
            "difficulty_score": self.difficulty_score,
            "revenue_potential": self.revenue_potential,
            "build_time_estimate": self.build_time_estimate,
            "tools_required": list(self.tools_required),
            "tags": list(self.tags),
            "trend_signals": self.trend.to_dict() if self.trend else None,
            "created_at": self.created_at.isoformat(),
            "is_published": self.is_published,
            "published_date": self.published_date.isoformat() if self.published_date else None,
        }
        if self.id is not None:
            record["id"] = self.id
        return record

    @classmethod
    def from_record(cls, row: dict):
        published = row.get("published_date")
        return cls(
            id=str(row["id"]) if row.get("id") is not None else None,
            title=row.get("title", ""),
            description=row.get("description", ""),
            content=IdeaContent.from_dict(row.get("content") or {}),
            difficulty_score=int(row.get("difficulty_score") or 3),
            revenue_potential=row.get("revenue_potential") or "low",
            build_time_estimate=row.get("build_time_estimate") or "",
            tools_required=list(row.get("tools_required") or []),
            tags=list(row.get("tags") or []),
            trend=TrendSnapshot.from_dict(row.get("trend_signals")),
            created_at=parse_timestamp(row["created_at"]) if row.get("created_at") else utcnow(),
            is_published=bool(row.get("is_published")),
            published_date=date.fromisoformat(published) if published else None,
        )
