"""Budget period enumeration."""

from datetime import UTC, datetime, timedelta
from enum import Enum


class BudgetPeriod(str, Enum):
    """Recurrence window of a budget."""

    WEEKLY = "weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"
    CUSTOM = "custom"

    def window(self, now: datetime | None = None) -> tuple[datetime, datetime]:
        """Compute the period containing ``now``.

        Weeks start on Monday. The end is the last instant of the final day.
        CUSTOM spans from now to one month ahead.

        Args:
            now: Reference instant (defaults to current UTC time).

        Returns:
            (start, end) inclusive bounds in UTC.

        Example:
            >>> BudgetPeriod.MONTHLY.window(datetime(2024, 2, 10, tzinfo=UTC))
            (datetime(2024, 2, 1, 0, 0, tzinfo=UTC), datetime(2024, 2, 29, 23, 59, 59, 999999, tzinfo=UTC))
        """
        now = now or datetime.now(UTC)
        day_start = now.replace(hour=0, minute=0, second=0, microsecond=0)
        match self:
            case BudgetPeriod.WEEKLY:
                start = day_start - timedelta(days=day_start.weekday())
                end = start + timedelta(days=7)
            case BudgetPeriod.MONTHLY:
                start = day_start.replace(day=1)
                end = add_months(start, 1)
            case BudgetPeriod.QUARTERLY:
                first_month = (now.month - 1) // 3 * 3 + 1
                start = day_start.replace(month=first_month, day=1)
                end = add_months(start, 3)
            case BudgetPeriod.YEARLY:
                start = day_start.replace(month=1, day=1)
                end = start.replace(year=start.year + 1)
            case BudgetPeriod.CUSTOM:
                return now, add_months(now, 1)
        return start, end - timedelta(microseconds=1)


def add_months(moment: datetime, months: int) -> datetime:
    """Shift a datetime by whole calendar months, clamping the day."""
    month_index = moment.month - 1 + months
    year = moment.year + month_index // 12
    month = month_index % 12 + 1
    # Clamp the day for shorter months (Jan 31 + 1 month -> Feb 29/28)
    for day in (moment.day, 30, 29, 28):
        try:
            return moment.replace(year=year, month=month, day=day)
        except ValueError:
            continue
    raise ValueError(f"Cannot shift {moment} by {months} months")
