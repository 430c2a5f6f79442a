"""Calendar navigation: view mode and paging over the requested date window."""

from datetime import date, timedelta
from enum import Enum
from typing import List, Optional, Tuple

from dateutil.relativedelta import relativedelta

from .vehicle import Vehicle


class ViewMode(Enum):
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    QUARTER = "quarter"


_STEPS = {
    ViewMode.DAY: relativedelta(days=1),
    ViewMode.WEEK: relativedelta(weeks=1),
    ViewMode.MONTH: relativedelta(months=1),
    ViewMode.QUARTER: relativedelta(months=3),
}


class CalendarNavigator:
    """
    Holds the calendar position and view mode and derives the date window.

    Every operation returns the new (start, end) window, inclusive. No
    business rules live here: the window and the vehicle filter are handed
    to the engine by the caller.
    """

    def __init__(
        self,
        view_mode: str = "month",
        today: Optional[date] = None,
        search: str = "",
    ):
        self.view_mode = ViewMode(view_mode)
        self.anchor = today or date.today()
        self.search = search

    @property
    def month(self) -> int:
        return self.anchor.month

    @property
    def year(self) -> int:
        return self.anchor.year

    @property
    def window(self) -> Tuple[date, date]:
        """Inclusive (start, end) dates for the current view."""
        anchor = self.anchor
        if self.view_mode == ViewMode.DAY:
            return anchor, anchor
        if self.view_mode == ViewMode.WEEK:
            # Weeks run Monday to Sunday
            start = anchor - timedelta(days=anchor.weekday())
            return start, start + timedelta(days=6)
        if self.view_mode == ViewMode.MONTH:
            start = anchor.replace(day=1)
            return start, start + relativedelta(months=1, days=-1)
        first_month = 3 * ((anchor.month - 1) // 3) + 1
        start = date(anchor.year, first_month, 1)
        return start, start + relativedelta(months=3, days=-1)

    def next_period(self) -> Tuple[date, date]:
        self.anchor = self.anchor + _STEPS[self.view_mode]
        return self.window

    def prev_period(self) -> Tuple[date, date]:
        self.anchor = self.anchor - _STEPS[self.view_mode]
        return self.window

    def go_to_today(self, today: Optional[date] = None) -> Tuple[date, date]:
        self.anchor = today or date.today()
        return self.window

    def set_view_mode(self, view_mode: str) -> Tuple[date, date]:
        self.view_mode = ViewMode(view_mode)
        return self.window

    def set_month(self, month: int) -> Tuple[date, date]:
        """Jump to a month of the current year, keeping the day where possible."""
        if not 1 <= month <= 12:
            raise ValueError(f"Month must be 1-12, got {month}")
        self.anchor = self.anchor + relativedelta(month=month)
        return self.window

    def set_year(self, year: int) -> Tuple[date, date]:
        self.anchor = self.anchor + relativedelta(year=year)
        return self.window

    def set_search_filter(self, text: Optional[str]) -> Tuple[date, date]:
        self.search = text or ""
        return self.window

    def filter_vehicles(self, vehicles: List[Vehicle]) -> List[Vehicle]:
        """Vehicles whose name contains the search text (case-insensitive)."""
        return [v for v in vehicles if v.matches(self.search)]

    def select_vehicle_ids(
        self, vehicles: List[Vehicle], requested: Optional[List[str]] = None
    ) -> List[str]:
        """
        Ids to hand to the engine.

        Requested ids keep their order and are narrowed by the search text.
        Ids missing from vehicles stay in so the engine can report them.
        Without requested ids, every vehicle matching the search is selected.
        """
        if not requested:
            return [v.id for v in self.filter_vehicles(vehicles)]
        by_id = {v.id: v for v in vehicles}
        return [i for i in requested if i not in by_id or by_id[i].matches(self.search)]
