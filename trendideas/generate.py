"""Claude app-idea generation from ranked trends."""

import json
import re
import subprocess

import anthropic

from .config import (
    CLAUDE_MODEL,
    GENERATION_SPACING,
    IDEAS_PER_RUN,
    call_claude_cli,
    get_anthropic_client,
    get_claude_backend,
)
from .errors import GenerationFailure, PipelineError
from .log import get_logger, log
from .models import AggregatedTrend, ContentArtifact, IdeaContent, TrendSnapshot
from .pacing import Pacer
from .retry import with_retry

REVENUE_KEYWORDS = ["subscription", "premium", "enterprise", "api", "marketplace"]

BUILD_TIME_ESTIMATES = {
    1: "1-2 days",
    2: "3-5 days",
    3: "1-2 weeks",
    4: "2-4 weeks",
    5: "1-2 months",
}

_LIST_FIELDS = ["tools", "mvp_features", "monetization_ideas", "variations"]
_STR_FIELDS = ["description", "what_it_is", "why_it_matters",
               "build_difficulty_reason", "tweetable_summary"]

# Transient failures worth another attempt. Bad requests and auth errors are not.
RETRYABLE_ERRORS = (
    anthropic.APIConnectionError,
    anthropic.RateLimitError,
    anthropic.InternalServerError,
    subprocess.TimeoutExpired,
    RuntimeError,  # claude CLI exited non-zero
)


@with_retry(max_retries=2, base_delay=3.0, retry_on=RETRYABLE_ERRORS)
def _call_claude(prompt: str) -> str:
    """Call Claude via API key or CLI (Claude Max)."""
    backend = get_claude_backend()

    if backend == "api":
        client = get_anthropic_client()
        msg = client.messages.create(
            model=CLAUDE_MODEL,
            max_tokens=4000,
            temperature=0.8,
            messages=[{"role": "user", "content": prompt}],
        )
        return msg.content[0].text.strip()
    if backend == "cli":
        log("Using Claude Max (CLI) for idea generation...")
        return call_claude_cli(prompt)
    raise PipelineError("No Claude access configured")


def build_prompt(trend: AggregatedTrend) -> str:
    market = json.dumps(trend.market_signals, indent=2)
    return f"""You are powering a platform that gives users one high-signal, highly buildable app idea per day for "vibecoders": non-technical indie hackers, creators, and solo builders using AI tools like Claude, Replit, Bolt, Lovable, and low-code platforms.

Based on this trending signal data:
- Keywords: {", ".join(trend.keywords)}
- Category: {trend.category}
- Strength: {trend.overall_strength:.2f}
- Suggested app types: {", ".join(trend.suggested_uses)}
- Market signals: {market}

Generate ONE specific, buildable app idea that is:
- specific and shippable (not vague)
- slightly clever or unexpected
- useful or monetizable
- backed by the trend data provided
- written in a fun, smart, punchy voice

Respond with ONLY valid JSON, no other text:
{{
  "title": "Catchy, tweetable title",
  "description": "1-2 sentence description focusing on vibe and value",
  "what_it_is": "What the app does in 1-2 clear sentences",
  "why_it_matters": "The problem, trend, or use case this taps into",
  "tools": ["Claude", "Replit", "Supabase"],
  "mvp_features": ["Feature 1", "Feature 2", "Feature 3", "Feature 4", "Feature 5"],
  "monetization_ideas": ["Revenue idea 1", "Revenue idea 2"],
  "build_difficulty": 3,
  "build_difficulty_reason": "Why this difficulty rating (1 = trivial, 5 = hard)",
  "variations": ["Variation 1", "Variation 2", "Variation 3"],
  "tweetable_summary": "One bold takeaway in tweet style"
}}"""


def _string_list(data: dict, key: str) -> list[str]:
    value = data.get(key)
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if not isinstance(value, list):
        raise GenerationFailure(f"{key} must be a list, got {type(value).__name__}")
    return [str(v) for v in value]


def parse_idea_response(raw: str) -> IdeaContent:
    """Extract and validate the idea JSON from a model response.

    Raises GenerationFailure when the response holds no usable idea.
    """
    text = raw.strip()
    if text.startswith("```"):
        text = text.split("```")[1]
        if text.startswith("json"):
            text = text[4:]
    text = re.sub(r"<[^>]*>", "", text)
    text = text.replace("“", '"').replace("”", '"')
    text = text.replace("‘", "'").replace("’", "'")

    start, end = text.find("{"), text.rfind("}")
    if start < 0 or end <= start:
        raise GenerationFailure("No JSON object found in response")
    try:
        data = json.loads(text[start:end + 1])
    except json.JSONDecodeError as e:
        raise GenerationFailure(f"Invalid JSON: {e}") from e
    if not isinstance(data, dict):
        raise GenerationFailure("Response JSON is not an object")

    title = data.get("title")
    if not isinstance(title, str) or not title.strip():
        raise GenerationFailure("Idea has no title")

    try:
        difficulty = int(data.get("build_difficulty"))
    except (TypeError, ValueError):
        raise GenerationFailure(f"Bad build_difficulty: {data.get('build_difficulty')!r}") from None
    if not 1 <= difficulty <= 5:
        raise GenerationFailure(f"build_difficulty out of range: {difficulty}")

    fields = {key: str(data.get(key) or "") for key in _STR_FIELDS}
    fields.update({key: _string_list(data, key) for key in _LIST_FIELDS})
    return IdeaContent(title=title.strip(), build_difficulty=difficulty, **fields)


def revenue_potential(monetization_ideas: list[str]) -> str:
    """'high' on a revenue keyword, else 'medium' for several ideas, else 'low'."""
    if any(kw in idea.lower() for idea in monetization_ideas for kw in REVENUE_KEYWORDS):
        return "high"
    if len(monetization_ideas) > 1:
        return "medium"
    return "low"


def estimate_build_time(difficulty: int) -> str:
    return BUILD_TIME_ESTIMATES.get(difficulty, "1-2 weeks")


def derive_tags(trend: TrendSnapshot, difficulty: int) -> list[str]:
    tags = []
    if trend.category != "General":
        tags.append(trend.category.lower().replace("/", "-"))
    tags.append("trend-backed")
    if difficulty <= 2:
        tags.append("easy-build")
    elif difficulty >= 4:
        tags.append("advanced")
    tags.append("revenue-ready")
    if "community" in trend.sources:
        tags.append("community-driven")
    if "search" in trend.sources:
        tags.append("search-trending")
    return tags


def build_artifact(content: IdeaContent, trend: TrendSnapshot) -> ContentArtifact:
    """Wrap generated content into an unpublished idea with derived fields."""
    difficulty = content.build_difficulty
    return ContentArtifact(
        title=content.title,
        description=content.description,
        content=content,
        difficulty_score=difficulty,
        revenue_potential=revenue_potential(content.monetization_ideas),
        build_time_estimate=estimate_build_time(difficulty),
        tools_required=list(content.tools),
        tags=derive_tags(trend, difficulty),
        trend=trend,
    )


def mock_idea(trend: TrendSnapshot = None) -> ContentArtifact:
    """Synthetic idea used when generation or storage is unavailable."""
    trend = trend or TrendSnapshot(keywords=["demo"], category="Demo", strength=1.0)
    content = IdeaContent(
        title="Smart Workflow Builder for No-Code Teams",
        description="Drag-and-drop automation platform that connects your favorite tools "
                    "without writing a single line of code.",
        what_it_is="A visual workflow builder that lets non-technical teams automate work "
                   "across Notion, Airtable, Slack, and email, with AI-suggested flows.",
        why_it_matters="Teams lose hours a day to repetitive tasks, and current automation "
                       "tools are still too complex for most people.",
        tools=["Claude API", "Replit", "Supabase", "React Flow", "Stripe"],
        mvp_features=[
            "Visual drag-and-drop workflow designer",
            "Pre-built connectors for 20+ popular apps",
            "AI-powered workflow suggestions",
            "One-click template gallery",
            "Real-time testing and debugging",
        ],
        monetization_ideas=[
            "Freemium with premium connectors ($9/month)",
            "Team plans with collaboration features ($29/month)",
        ],
        build_difficulty=3,
        build_difficulty_reason="Several API integrations and a visual editor, "
                                "achievable with modern no-code tools",
        variations=[
            "Focus on specific verticals (marketing or sales teams)",
            "Add AI workflow optimization",
            "White-label for agencies",
        ],
        tweetable_summary="Zapier is too complex. Most teams need automation that's as easy "
                          "as drawing on a whiteboard.",
    )
    return build_artifact(content, trend)


class IdeaGenerator:
    """Generates one idea per trend, sequentially and paced.

    In degraded mode (no Claude backend) every trend yields the synthetic
    mock idea instead of a model call.
    """

    def __init__(self, call=None, pacer: Pacer = None, degraded: bool = False):
        self._call = call or _call_claude
        self.pacer = pacer or Pacer(GENERATION_SPACING)
        self.degraded = degraded

    @classmethod
    def from_config(cls, allow_degraded: bool = True, **kwargs):
        if get_claude_backend():
            return cls(**kwargs)
        if not allow_degraded:
            raise RuntimeError(
                "No Claude access found. Either:\n"
                "  1. Set ANTHROPIC_API_KEY in env or ~/.trend-ideas-pipeline/config.json\n"
                "  2. Log in to the claude CLI with a Claude Max subscription"
            )
        get_logger("generate").warning("No Claude access configured, generating mock ideas")
        return cls(degraded=True, **kwargs)

    def generate(self, trend: AggregatedTrend) -> ContentArtifact | None:
        """Return an unpublished idea for ``trend``, or None on failure."""
        snapshot = trend.snapshot()
        if self.degraded:
            return mock_idea(snapshot)

        try:
            raw = self._call(build_prompt(trend))
        except Exception as e:
            get_logger("generate").warning("Generation failed for %r: %s", trend.key, e)
            return None

        try:
            content = parse_idea_response(raw)
        except GenerationFailure as e:
            get_logger("generate").warning("Unusable idea for %r: %s", trend.key, e)
            get_logger("generate").debug("Raw response: %s", raw[:2000])
            return None

        return build_artifact(content, snapshot)

    def generate_daily(self, trends: list[AggregatedTrend],
                       limit: int = IDEAS_PER_RUN) -> list[ContentArtifact]:
        ideas = []
        for trend in trends[:limit]:
            if not self.degraded:
                self.pacer.wait()
            idea = self.generate(trend)
            if idea is not None:
                ideas.append(idea)
                log(f"Idea: {idea.title} [{trend.key}]")
        log(f"Generated {len(ideas)} ideas from {min(limit, len(trends))} trends")
        return ideas
