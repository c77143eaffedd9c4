"""Tests for trendideas/retry.py: exponential backoff decorator."""

from unittest.mock import patch

import pytest

from trendideas.retry import with_retry


class TestWithRetry:
    def test_succeeds_first_try(self):
        @with_retry(max_retries=3, base_delay=0.01)
        def always_works():
            return "success"

        assert always_works() == "success"

    @patch("trendideas.retry.time.sleep")
    def test_retries_on_failure(self, mock_sleep):
        call_count = 0

        @with_retry(max_retries=3, base_delay=0.01)
        def fails_twice():
            nonlocal call_count
            call_count += 1
            if call_count < 3:
                raise ValueError("not yet")
            return "success"

        assert fails_twice() == "success"
        assert call_count == 3
        assert mock_sleep.call_count == 2

    @patch("trendideas.retry.time.sleep")
    def test_raises_after_max_retries(self, mock_sleep):
        @with_retry(max_retries=2, base_delay=0.01)
        def always_fails():
            raise RuntimeError("permanent failure")

        with pytest.raises(RuntimeError, match="permanent failure"):
            always_fails()
        assert mock_sleep.call_count == 2

    @patch("trendideas.retry.time.sleep")
    def test_exponential_backoff(self, mock_sleep):
        @with_retry(max_retries=3, base_delay=1.0)
        def fails_all():
            raise ValueError("fail")

        with pytest.raises(ValueError):
            fails_all()

        delays = [call[0][0] for call in mock_sleep.call_args_list]
        assert delays == pytest.approx([1.0, 2.0, 4.0])

    @patch("trendideas.retry.time.sleep")
    def test_other_exceptions_not_retried(self, mock_sleep):
        calls = []

        @with_retry(max_retries=3, base_delay=1.0, retry_on=(ConnectionError,))
        def bad_input():
            calls.append(1)
            raise KeyError("title")

        with pytest.raises(KeyError):
            bad_input()
        assert len(calls) == 1
        mock_sleep.assert_not_called()
