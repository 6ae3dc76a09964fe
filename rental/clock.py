"""
clock.py - Simulated Day Counter

The clock is the only trigger for settlement: advancing it runs a settlement
sweep for the new day before returning. There is no background timer.
"""

from __future__ import annotations
from typing import Optional

from .core import InvalidDayAdvance, SettlementReport
from .settlement import SettlementEngine


class Clock:
    """
    Monotonically increasing day counter starting at 0.

    Example:
        clock = Clock(engine)
        report = clock.advance_days(7)   # day 7, contracts ending <= 7 settled
    """

    def __init__(self, engine: Optional[SettlementEngine] = None, verbose: bool = False):
        self.engine = engine
        self.verbose = verbose
        self._current_day = 0

    @property
    def current_day(self) -> int:
        """Current simulated day."""
        return self._current_day

    def get_current_day(self) -> int:
        return self._current_day

    def advance_days(self, days: int) -> SettlementReport:
        """
        Move the clock forward and settle everything now due.

        Zero is allowed and simply re-runs the sweep for the current day.

        Args:
            days: Number of days to advance (>= 0)

        Returns:
            Report of the sweep run for the new day (empty if no engine is attached)

        Raises:
            InvalidDayAdvance: If days is negative
        """
        if days < 0:
            raise InvalidDayAdvance(f"Days to advance cannot be negative, got {days}")
        self._current_day += days
        if self.verbose:
            print(f"Current day has been advanced to: {self._current_day}")
        if self.engine is None:
            return SettlementReport(day=self._current_day)
        return self.engine.process_due_contracts(self._current_day)

    def reset(self) -> None:
        """Set the day back to 0. Used only when initializing a system."""
        self._current_day = 0
