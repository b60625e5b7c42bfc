"""Tests for the progress reporters."""

from unittest.mock import patch

from bitrise_publisher.transfer.progress import NullProgress, TqdmProgress


class TestNullProgress:
    def test_accepts_all_calls(self):
        progress = NullProgress()
        progress.start(3)
        progress.increment(2)
        progress.stop()


class TestTqdmProgress:
    def test_start_creates_bar_with_total(self):
        with patch("bitrise_publisher.transfer.progress.tqdm") as mock_tqdm:
            progress = TqdmProgress(desc="fetch")
            progress.start(1)

        kwargs = mock_tqdm.call_args.kwargs
        assert kwargs["total"] == 1
        assert kwargs["desc"] == "fetch"

    def test_increment_and_stop(self):
        with patch("bitrise_publisher.transfer.progress.tqdm") as mock_tqdm:
            progress = TqdmProgress()
            progress.start(1)
            progress.increment(1)
            progress.stop()

        bar = mock_tqdm.return_value
        bar.update.assert_called_once_with(1)
        bar.close.assert_called_once()

    def test_increment_before_start_is_ignored(self):
        progress = TqdmProgress(disable=True)
        progress.increment(1)
        progress.stop()

    def test_real_bar_runs_disabled(self):
        progress = TqdmProgress(disable=True)
        progress.start(2)
        progress.increment(2)
        progress.stop()
