"""Tests for trendideas/selection.py: idea scoring and daily publishing."""

from datetime import date
from unittest.mock import MagicMock

import pytest

from trendideas.repository import InMemoryRepository
from trendideas.selection import DailySelector, score_idea, select_best

TODAY = date(2025, 10, 9)


class TestScoreIdea:
    def test_worked_example_a(self, make_idea, now_dt):
        a = make_idea(strength=0.8, difficulty=2, revenue="high", hours_ago=0)
        assert score_idea(a, now_dt) == pytest.approx(0.86)

    def test_worked_example_b(self, make_idea, now_dt):
        b = make_idea(strength=0.9, difficulty=5, revenue="low", hours_ago=80)
        assert score_idea(b, now_dt) == pytest.approx(0.50)

    def test_missing_trend_counts_zero_strength(self, make_idea, now_dt):
        idea = make_idea(with_trend=False, difficulty=1, revenue="medium", hours_ago=36)
        # 0 + 1.0*0.3 + 0.7*0.2 + 0.5*0.1
        assert score_idea(idea, now_dt) == pytest.approx(0.49)

    def test_score_in_unit_interval(self, make_idea, now_dt):
        for strength in (0.0, 0.5, 1.0):
            for difficulty in range(1, 6):
                for revenue in ("low", "medium", "high"):
                    for hours in (0, 24, 100):
                        idea = make_idea(strength=strength, difficulty=difficulty,
                                         revenue=revenue, hours_ago=hours)
                        assert 0.0 <= score_idea(idea, now_dt) <= 1.0


class TestSelectBest:
    def test_picks_highest(self, make_idea, now_dt):
        a = make_idea("A", strength=0.8, difficulty=2, revenue="high", hours_ago=0)
        b = make_idea("B", strength=0.9, difficulty=5, revenue="low", hours_ago=80)
        assert select_best([b, a], now_dt) is a

    def test_tie_keeps_input_order(self, make_idea, now_dt):
        first = make_idea("first")
        second = make_idea("second")
        assert select_best([first, second], now_dt) is first
        assert select_best([second, first], now_dt) is second

    def test_empty(self, now_dt):
        assert select_best([], now_dt) is None


class TestDailySelector:
    def test_publishes_winner(self, make_idea, now_dt):
        repo = MagicMock()
        repo.query_published_for_date.return_value = None
        a = make_idea("A", strength=0.8, difficulty=2, revenue="high", idea_id="a")
        b = make_idea("B", strength=0.9, difficulty=5, revenue="low", hours_ago=80, idea_id="b")

        winner = DailySelector(repo).select_and_publish([b, a], today=TODAY, now=now_dt)

        assert winner is a
        assert winner.is_published is True
        assert winner.published_date == TODAY
        repo.mark_published.assert_called_once_with("a", TODAY)
        assert b.is_published is False

    def test_empty_pool_no_writes(self):
        repo = MagicMock()
        assert DailySelector(repo).select_and_publish([]) is None
        assert repo.method_calls == []

    def test_already_published_today(self, make_idea, now_dt):
        existing = make_idea("Earlier", idea_id="old")
        existing.publish(TODAY)
        repo = MagicMock()
        repo.query_published_for_date.return_value = existing

        result = DailySelector(repo).select_and_publish([make_idea("New", idea_id="new")],
                                                        today=TODAY, now=now_dt)

        assert result is existing
        repo.mark_published.assert_not_called()

    def test_publish_daily_reads_pool(self, make_idea, now_dt):
        repo = InMemoryRepository()
        repo.insert(make_idea("Old", strength=0.9, hours_ago=10))
        repo.insert(make_idea("Easy", strength=0.9, difficulty=1, revenue="high", hours_ago=5))

        winner = DailySelector(repo).publish_daily(today=TODAY, now=now_dt)

        assert winner.title == "Easy"
        assert repo.query_published_for_date(TODAY).title == "Easy"
        assert [i.title for i in repo.query_unpublished(5)] == ["Old"]

    def test_one_idea_per_day(self, make_idea, now_dt):
        repo = InMemoryRepository()
        repo.insert(make_idea("One", hours_ago=2))
        repo.insert(make_idea("Two", hours_ago=1))
        selector = DailySelector(repo)

        first = selector.publish_daily(today=TODAY, now=now_dt)
        second = selector.publish_daily(today=TODAY, now=now_dt)

        assert second.id == first.id
        assert len(repo.query_unpublished(5)) == 1

    def test_pool_size_limits_query(self):
        repo = MagicMock()
        repo.query_unpublished.return_value = []
        assert DailySelector(repo, pool_size=3).publish_daily() is None
        repo.query_unpublished.assert_called_once_with(3)
