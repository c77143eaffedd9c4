"""Daily run: collect signals -> rank trends -> generate ideas -> publish one."""

import time
from dataclasses import dataclass, field
from datetime import date

from .config import IDEAS_PER_RUN, RUNS_DIR
from .generate import IdeaGenerator, mock_idea
from .log import get_logger, log
from .models import (
    AggregatedTrend,
    CommunitySignal,
    ContentArtifact,
    SearchSignal,
    SourceType,
    utcnow,
)
from .repository import Repository, get_repository
from .selection import DailySelector
from .sources import SignalEngine
from .state import RunState
from .trends import TrendAggregator


@dataclass
class RunResult:
    run_id: str
    trends: list[AggregatedTrend] = field(default_factory=list)
    ideas: list[ContentArtifact] = field(default_factory=list)
    published: ContentArtifact | None = None
    state: RunState | None = None


def demo_trend(now: float = None) -> AggregatedTrend:
    """A fixed trend used by the demo run."""
    now = time.time() if now is None else now
    post = CommunitySignal(
        keywords=["AI productivity", "automation", "no-code"],
        timestamp=int(now),
        title="Best AI productivity tools",
        subreddit="productivity",
        score=150,
        num_comments=45,
    )
    search = SearchSignal(
        keywords=["AI productivity"],
        timestamp=int(now),
        average_interest=60,
        growth=25,
    )
    return AggregatedTrend(
        key="ai productivity",
        category="Productivity",
        suggested_uses=["AI-powered tool", "Automation service"],
        keywords=list(post.keywords),
        signals={SourceType.COMMUNITY: [post], SourceType.SEARCH: [search]},
        overall_strength=0.75,
    )


class TrendPipeline:
    """Wires the collaborators together; each one can be injected for tests."""

    def __init__(self, engine: SignalEngine = None, aggregator: TrendAggregator = None,
                 generator: IdeaGenerator = None, repository: Repository = None,
                 selector: DailySelector = None, runs_dir=RUNS_DIR):
        self.engine = engine or SignalEngine()
        self.aggregator = aggregator or TrendAggregator()
        self.generator = generator or IdeaGenerator.from_config(allow_degraded=False)
        self.repository = repository or get_repository()
        self.selector = selector or DailySelector(self.repository)
        self.runs_dir = runs_dir

    def discover(self, timeout: float = None, now: float = None) -> list[AggregatedTrend]:
        """Collect and rank trends without generating anything."""
        signals = self.engine.collect(timeout=timeout)
        return self.aggregator.aggregate(signals, now=now)

    def run_daily(self, dry_run: bool = False, timeout: float = None,
                  today: date = None) -> RunResult:
        run_id = str(int(time.time()))
        state = RunState(run_id)
        result = RunResult(run_id=run_id, state=state)
        now = time.time()
        log("Starting daily trend analysis...")

        try:
            signals = self.engine.collect(timeout=timeout)
            counts = {st.value: len(s) for st, s in signals.items()}
            state.complete_stage("collect", {"signals": counts})
            stored = self.repository.store_signals(signals, self.aggregator.scorers, now)
            get_logger("pipeline").debug("Stored %d raw signals", stored)

            try:
                result.trends = self.aggregator.aggregate(signals, now=now)
            except Exception as e:
                state.fail_stage("aggregate", str(e))
                raise
            state.complete_stage("aggregate", {
                "trends": [f"{t.key} ({t.overall_strength:.2f})" for t in result.trends],
            })
            log(f"Found {len(result.trends)} ranked trends")

            if not result.trends:
                log("No trends found, stopping")
                for stage in ("generate", "store", "select"):
                    state.skip_stage(stage, "no trends")
                return result
            if dry_run:
                for stage in ("generate", "store", "select"):
                    state.skip_stage(stage, "dry run")
                return result

            result.ideas = self.generator.generate_daily(result.trends, limit=IDEAS_PER_RUN)
            state.complete_stage("generate", {"ideas": [i.title for i in result.ideas]})

            result.ideas = self._store_ideas(result.ideas)
            state.complete_stage("store", {"ids": [i.id for i in result.ideas]})

            try:
                result.published = self.selector.publish_daily(today=today)
            except Exception as e:
                get_logger("pipeline").warning("Publishing failed: %s", e)
                state.fail_stage("select", str(e))
                return result
            if result.published is None:
                state.skip_stage("select", "no candidates")
            else:
                state.complete_stage("select", {
                    "id": result.published.id,
                    "title": result.published.title,
                })
            log("Daily trend analysis completed")
            return result
        finally:
            state.save(self.runs_dir / f"{run_id}.json")
            get_logger("pipeline").debug("Run %s:\n%s", run_id, state.summary())

    def _store_ideas(self, ideas: list[ContentArtifact]) -> list[ContentArtifact]:
        """Insert each idea; a failed write drops that idea only."""
        stored = []
        for idea in ideas:
            try:
                idea.id = self.repository.insert(idea)
            except Exception as e:
                get_logger("pipeline").warning("Failed to store idea %r: %s", idea.title, e)
                continue
            stored.append(idea)
        if len(stored) < len(ideas):
            log(f"Stored {len(stored)}/{len(ideas)} ideas")
        return stored

    def run_demo(self) -> dict:
        """Generate one idea from a fixed trend; falls back to the mock idea."""
        trend = demo_trend()
        log(f"Using demo trend: {', '.join(trend.keywords)}")

        if self.generator.degraded:
            return {
                "success": True,
                "idea": mock_idea(trend.snapshot()),
                "message": "Demo idea (mock mode, configure Claude access for real generation)",
            }

        idea = self.generator.generate(trend)
        if idea is None:
            return {
                "success": True,
                "idea": mock_idea(trend.snapshot()),
                "message": "Demo idea from fallback (generation failed)",
            }
        return {"success": True, "idea": idea, "message": "Demo idea generated"}

    def get_todays_idea(self, today: date = None) -> ContentArtifact | None:
        today = today or utcnow().date()
        idea = self.repository.query_published_for_date(today)
        if idea is None and self.repository.degraded:
            log("Storage not configured, returning mock idea")
            return mock_idea()
        if idea is None:
            log(f"No idea published for {today} yet")
        return idea
