"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/progress.py
Whole-number percent tracking and elapsed-time summaries.
"""

import logging
from typing import Optional

from treesum.core.models import ProgressState
from treesum.core.interfaces import ProgressSink
from treesum.utils.convert_utils import ConvertUtils

logger = logging.getLogger(__name__)


class ProgressTracker:
    """
    Emits a percent only when it differs from the last emitted one.
    The underlying ProgressState is immutable and replaced on every update.
    """

    def __init__(self, total_count: int = 0):
        self.state = ProgressState(total_count=total_count)

    def update(self, processed_count: int, total_count: Optional[int] = None) -> Optional[int]:
        if total_count is not None and total_count != self.state.total_count:
            if self.state.last_emitted_percent != -1:
                raise ValueError("Total count is fixed once progress has been reported")
            self.state = ProgressState(total_count=total_count)
        self.state, percent = self.state.advance(processed_count)
        return percent

    @staticmethod
    def summarize(start_epoch: float, end_epoch: float) -> str:
        return ConvertUtils.seconds_to_human(int(end_epoch) - int(start_epoch))


class NullProgressSink(ProgressSink):
    def on_percent(self, percent: int) -> None:
        pass

    def on_summary(self, summary: str) -> None:
        pass


class LoggingProgressSink(ProgressSink):
    """Reports progress through the logging module (default for library use)."""

    def __init__(self, log: logging.Logger = None):
        self.log = log or logger

    def on_percent(self, percent: int) -> None:
        self.log.debug(f"{percent}% complete")

    def on_summary(self, summary: str) -> None:
        self.log.info(summary)
