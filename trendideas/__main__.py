"""CLI entry point: python -m trendideas."""

import argparse
import sys

from .config import run_setup
from .log import log, set_verbose


def _print_idea(idea, heading: str):
    print(f"\n  {heading}: {idea.title}")
    print(f"  {idea.description}")
    print(f"\n  Difficulty: {idea.difficulty_score}/5 ({idea.build_time_estimate})")
    print(f"  Revenue potential: {idea.revenue_potential}")
    if idea.tags:
        print(f"  Tags: {', '.join(idea.tags)}")
    if idea.content.mvp_features:
        print("\n  MVP features:")
        for feature in idea.content.mvp_features:
            print(f"    - {feature}")


def _pipeline(allow_degraded: bool):
    from .generate import IdeaGenerator
    from .pipeline import TrendPipeline

    return TrendPipeline(generator=IdeaGenerator.from_config(allow_degraded=allow_degraded))


def cmd_run(args):
    try:
        pipeline = _pipeline(allow_degraded=args.dry_run)
    except RuntimeError as e:
        print(f"  {e}")
        sys.exit(1)

    result = pipeline.run_daily(dry_run=args.dry_run)

    state = result.state
    print(f"\n  Run {result.run_id}:")
    print(state.summary())

    counts = state.get_artifact("collect", "signals", {})
    print(f"\n  Signals: {', '.join(f'{k}={v}' for k, v in counts.items()) or 'none'}")
    if args.dry_run:
        print("  Dry run, skipped generation and publishing")
    if state.is_failed("select"):
        print(f"  Publishing failed: {state.state['select']['error']}")
    elif state.is_done("select"):
        _print_idea(result.published, "Today's idea")
    return result


def cmd_trends(args):
    from .sources import SignalEngine
    from .trends import TrendAggregator

    signals = SignalEngine().collect()
    trends = TrendAggregator().aggregate(signals)[: args.limit]

    if not trends:
        print("  No trends found from enabled sources.")
        return

    print(f"\n  Ranked trends ({len(trends)}):\n")
    for i, trend in enumerate(trends, 1):
        sources = ", ".join(trend.source_names)
        print(f"  {i:2d}. {trend.key} [{trend.overall_strength:.2f}] {trend.category} ({sources})")
        print(f"      {', '.join(trend.suggested_uses)}")


def cmd_demo(args):
    result = _pipeline(allow_degraded=True).run_demo()
    log(result["message"])
    _print_idea(result["idea"], "Demo idea")


def cmd_today(args):
    idea = _pipeline(allow_degraded=True).get_todays_idea()
    if idea is None:
        print("  No idea published for today yet.")
        return
    _print_idea(idea, "Today's idea")


def cmd_publish(args):
    from .repository import get_repository
    from .selection import DailySelector

    idea = DailySelector(get_repository()).publish_daily()
    if idea is None:
        print("  Nothing to publish.")
        return
    _print_idea(idea, "Published")


def main():
    parser = argparse.ArgumentParser(
        description="Trend Ideas Pipeline: one trend-backed app idea per day",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="cmd")

    p_run = sub.add_parser("run", help="Full pipeline: collect -> rank -> generate -> publish")
    p_run.add_argument("--dry-run", action="store_true", help="Collect and rank only")

    p_trends = sub.add_parser("trends", help="Collect signals and show ranked trends")
    p_trends.add_argument("--limit", type=int, default=20, help="Max trends to show")

    sub.add_parser("demo", help="Generate one idea from a fixed demo trend")
    sub.add_parser("today", help="Show today's published idea")
    sub.add_parser("publish", help="Select and publish today's idea from stored ideas")
    sub.add_parser("setup", help="Configure API keys and storage")

    args = parser.parse_args()

    if args.verbose:
        set_verbose(True)

    if not args.cmd:
        parser.print_help()
        return

    if args.cmd == "run":
        cmd_run(args)
    elif args.cmd == "trends":
        cmd_trends(args)
    elif args.cmd == "demo":
        cmd_demo(args)
    elif args.cmd == "today":
        cmd_today(args)
    elif args.cmd == "publish":
        cmd_publish(args)
    elif args.cmd == "setup":
        run_setup()


if __name__ == "__main__":
    main()
