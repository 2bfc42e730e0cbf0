from __future__ import annotations

from pathlib import Path
from unittest.mock import Mock, patch

from grade_report.services.progress import ProgressTracker, is_tty_enabled


def test_is_tty_enabled_returns_stdout_isatty():
    with patch('sys.stdout.isatty', return_value=True):
        assert is_tty_enabled() is True

    with patch('sys.stdout.isatty', return_value=False):
        assert is_tty_enabled() is False


class TestProgressTracker:
    """ProgressTracker with and without a TTY."""

    def test_init_with_tty_enabled(self):
        with patch('grade_report.services.progress.is_tty_enabled', return_value=True), \
             patch('grade_report.services.progress.tqdm') as mock_tqdm:

            tracker = ProgressTracker(5, description="Reports")

            assert tracker.total_files == 5
            assert tracker.enabled is True
            mock_tqdm.assert_called_once_with(
                total=5,
                desc="Reports",
                unit="file",
                disable=False,
                leave=True,
                position=0,
                ncols=80,
                ascii=True,
            )

    def test_init_with_tty_disabled(self):
        with patch('grade_report.services.progress.is_tty_enabled', return_value=False):
            tracker = ProgressTracker(5)
            assert tracker.enabled is False
            assert tracker.pbar is None
            tracker.start_file(Path("grades.csv"))
            tracker.set_postfix(success=1)
            tracker.finish_file(success=True)
            tracker.close()
            assert tracker.current_file == 1

    def test_file_lifecycle_updates_bar(self):
        mock_pbar = Mock()

        with patch('grade_report.services.progress.is_tty_enabled', return_value=True), \
             patch('grade_report.services.progress.tqdm', return_value=mock_pbar):

            tracker = ProgressTracker(3, description="Building reports")
            tracker.start_file(Path("term1.xlsx"))
            mock_pbar.set_description.assert_called_with("Building reports (term1.xlsx)")
            tracker.set_postfix(success=1, failed=0, rows=40)
            mock_pbar.set_postfix.assert_called_once_with(success=1, failed=0, rows=40)
            tracker.finish_file(success=True)
            mock_pbar.update.assert_called_once_with(1)
            mock_pbar.set_description.assert_called_with("Building reports")

    def test_context_manager_closes(self):
        mock_pbar = Mock()

        with patch('grade_report.services.progress.is_tty_enabled', return_value=True), \
             patch('grade_report.services.progress.tqdm', return_value=mock_pbar):

            with ProgressTracker(3) as tracker:
                assert isinstance(tracker, ProgressTracker)

            mock_pbar.close.assert_called_once()
            assert tracker.pbar is None
