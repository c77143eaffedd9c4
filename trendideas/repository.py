"""Idea storage backends: Supabase, local JSON files, or in-memory."""

import copy
import json
import uuid
from abc import ABC, abstractmethod
from datetime import date, datetime
from pathlib import Path

from .config import (
    IDEAS_DIR,
    PERSISTENCE_TIMEOUT,
    get_supabase_key,
    get_supabase_url,
    is_supabase_configured,
    is_valid_key,
    is_valid_url,
    load_config,
)
from .errors import PersistenceUnavailable
from .log import get_logger, log
from .models import ContentArtifact, RawSignal, SourceType
from .scoring import score_signal

SIGNAL_TYPES = {
    SourceType.COMMUNITY: "discussion_post",
    SourceType.SEARCH: "search_volume",
}


def signal_records(signals_by_source: dict[SourceType, list[RawSignal]],
                   scorers: dict = None, now: float = None) -> list[dict]:
    """Flatten collected signals into raw-signal log rows."""
    rows = []
    for source_type, signals in signals_by_source.items():
        for signal in signals:
            rows.append({
                "source": source_type.value,
                "signal_type": SIGNAL_TYPES.get(source_type, "signal"),
                "keyword": ", ".join(signal.keywords),
                "data": signal.to_dict(),
                "strength_score": score_signal(signal, scorers, now),
            })
    return rows


class Repository(ABC):
    """Storage contract the pipeline depends on."""

    degraded = False

    @abstractmethod
    def insert(self, artifact: ContentArtifact) -> str:
        """Store an unpublished idea and return its id."""

    @abstractmethod
    def query_unpublished(self, limit: int) -> list[ContentArtifact]:
        """Unpublished ideas, most recently created first."""

    @abstractmethod
    def mark_published(self, idea_id: str, day: date):
        """Mark an idea published on ``day``; raises on failure."""

    @abstractmethod
    def query_published_for_date(self, day: date) -> ContentArtifact | None:
        ...

    @abstractmethod
    def store_signals(self, signals_by_source, scorers: dict = None, now: float = None) -> int:
        """Log raw signals; best effort, returns the number stored."""


def _newest_first(ideas) -> list[ContentArtifact]:
    return sorted(ideas, key=lambda a: a.created_at, reverse=True)


class InMemoryRepository(Repository):
    """Ephemeral store. With ``degraded=True`` it stands in for a missing backend."""

    def __init__(self, degraded: bool = False):
        self.degraded = degraded
        self._ideas: dict[str, ContentArtifact] = {}
        self.signals: list[dict] = []

    def insert(self, artifact: ContentArtifact) -> str:
        idea_id = artifact.id or uuid.uuid4().hex
        stored = copy.deepcopy(artifact)
        stored.id = idea_id
        self._ideas[idea_id] = stored
        if self.degraded:
            get_logger("repository").debug("Storage not configured, idea %s kept in memory only", idea_id)
        return idea_id

    def query_unpublished(self, limit: int) -> list[ContentArtifact]:
        pending = [a for a in self._ideas.values() if not a.is_published]
        return [copy.deepcopy(a) for a in _newest_first(pending)[:limit]]

    def mark_published(self, idea_id: str, day: date):
        idea = self._ideas.get(idea_id)
        if idea is None:
            raise KeyError(f"Unknown idea {idea_id}")
        if self.query_published_for_date(day) is not None:
            raise ValueError(f"An idea is already published for {day}")
        idea.publish(day)

    def query_published_for_date(self, day: date) -> ContentArtifact | None:
        for idea in self._ideas.values():
            if idea.is_published and idea.published_date == day:
                return copy.deepcopy(idea)
        return None

    def store_signals(self, signals_by_source, scorers: dict = None, now: float = None) -> int:
        rows = signal_records(signals_by_source, scorers, now)
        self.signals.extend(rows)
        return len(rows)


class JsonFileRepository(Repository):
    """One JSON file per idea under ``directory``; signals go to daily .jsonl logs."""

    def __init__(self, directory: Path = IDEAS_DIR):
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)

    def _path(self, idea_id: str) -> Path:
        return self.directory / f"{idea_id}.json"

    def _write(self, artifact: ContentArtifact):
        self._path(artifact.id).write_text(
            json.dumps(artifact.to_record(), indent=2, ensure_ascii=False)
        )

    def _load_all(self) -> list[ContentArtifact]:
        ideas = []
        for path in sorted(self.directory.glob("*.json")):
            try:
                ideas.append(ContentArtifact.from_record(json.loads(path.read_text())))
            except (ValueError, KeyError) as e:
                get_logger("repository").warning("Skipping unreadable idea file %s: %s", path.name, e)
        return ideas

    def insert(self, artifact: ContentArtifact) -> str:
        stored = copy.deepcopy(artifact)
        stored.id = artifact.id or uuid.uuid4().hex
        self._write(stored)
        return stored.id

    def query_unpublished(self, limit: int) -> list[ContentArtifact]:
        pending = [a for a in self._load_all() if not a.is_published]
        return _newest_first(pending)[:limit]

    def mark_published(self, idea_id: str, day: date):
        path = self._path(idea_id)
        if not path.exists():
            raise KeyError(f"Unknown idea {idea_id}")
        if self.query_published_for_date(day) is not None:
            raise ValueError(f"An idea is already published for {day}")
        idea = ContentArtifact.from_record(json.loads(path.read_text()))
        idea.publish(day)
        self._write(idea)

    def query_published_for_date(self, day: date) -> ContentArtifact | None:
        for idea in self._load_all():
            if idea.is_published and idea.published_date == day:
                return idea
        return None

    def store_signals(self, signals_by_source, scorers: dict = None, now: float = None) -> int:
        rows = signal_records(signals_by_source, scorers, now)
        log_path = self.directory / f"signals_{datetime.now():%Y%m%d}.jsonl"
        try:
            with log_path.open("a", encoding="utf-8") as f:
                for row in rows:
                    f.write(json.dumps(row, ensure_ascii=False) + "\n")
        except OSError as e:
            get_logger("repository").warning("Failed to write raw signals to %s: %s", log_path.name, e)
            return 0
        return len(rows)


class SupabaseRepository(Repository):
    """``ideas`` and ``trend_signals`` tables in a Supabase project."""

    def __init__(self, client=None, url: str = None, key: str = None,
                 timeout: int = PERSISTENCE_TIMEOUT):
        if client is None:
            url = url or get_supabase_url()
            key = key or get_supabase_key()
            if not (is_valid_url(url) and is_valid_key(key)):
                raise PersistenceUnavailable("Supabase URL or service role key is not configured")
            from supabase import ClientOptions, create_client
            client = create_client(url, key, options=ClientOptions(postgrest_client_timeout=timeout))
        self.client = client

    def insert(self, artifact: ContentArtifact) -> str:
        record = artifact.to_record()
        record.pop("id", None)
        result = self.client.table("ideas").insert(record).execute()
        return str(result.data[0]["id"])

    def query_unpublished(self, limit: int) -> list[ContentArtifact]:
        result = (
            self.client.table("ideas")
            .select("*")
            .eq("is_published", False)
            .order("created_at", desc=True)
            .limit(limit)
            .execute()
        )
        return [ContentArtifact.from_record(row) for row in result.data or []]

    def mark_published(self, idea_id: str, day: date):
        (
            self.client.table("ideas")
            .update({"is_published": True, "published_date": day.isoformat()})
            .eq("id", idea_id)
            .execute()
        )

    def query_published_for_date(self, day: date) -> ContentArtifact | None:
        result = (
            self.client.table("ideas")
            .select("*")
            .eq("is_published", True)
            .eq("published_date", day.isoformat())
            .limit(1)
            .execute()
        )
        rows = result.data or []
        return ContentArtifact.from_record(rows[0]) if rows else None

    def store_signals(self, signals_by_source, scorers: dict = None, now: float = None) -> int:
        rows = signal_records(signals_by_source, scorers, now)
        if not rows:
            return 0
        try:
            self.client.table("trend_signals").insert(rows).execute()
        except Exception as e:
            get_logger("repository").warning("Failed to store raw signals: %s", e)
            return 0
        return len(rows)


def get_repository(config: dict = None) -> Repository:
    """Pick the storage backend once; fall back to degraded in-memory storage."""
    config = load_config() if config is None else config
    storage = config.get("storage") or ("supabase" if is_supabase_configured() else "")

    try:
        if storage == "supabase":
            return SupabaseRepository()
        if storage == "json":
            return JsonFileRepository(Path(config.get("ideas_dir", IDEAS_DIR)))
        if storage == "memory":
            return InMemoryRepository()
        if storage:
            raise ValueError(f"Unknown storage backend: {storage!r}")
        raise PersistenceUnavailable("No storage backend configured")
    except PersistenceUnavailable as e:
        log(f"{e}, ideas will be kept in memory for this run")
        return InMemoryRepository(degraded=True)
