"""Forecast enumerations."""

from datetime import timedelta
from enum import Enum


class ForecastDirection(str, Enum):
    """Which side of the ledger a forecast projects."""

    INCOME = "income"
    EXPENSE = "expense"


class ForecastMethod(str, Enum):
    """Estimator that produced a forecast amount."""

    MOVING_AVERAGE = "moving_average"
    TREND_ANALYSIS = "trend_analysis"
    PATTERN_RECOGNITION = "pattern_recognition"
    CATEGORY_BASED = "category_based"
    COMBINED = "combined"
    INSUFFICIENT_DATA = "insufficient_data"


class ForecastPeriod(str, Enum):
    """Horizon a forecast is labelled with."""

    NEXT_WEEK = "next_week"
    NEXT_MONTH = "next_month"
    NEXT_QUARTER = "next_quarter"
    NEXT_YEAR = "next_year"

    @property
    def horizon(self) -> timedelta:
        """Approximate length of the period."""
        return {
            ForecastPeriod.NEXT_WEEK: timedelta(days=7),
            ForecastPeriod.NEXT_MONTH: timedelta(days=30),
            ForecastPeriod.NEXT_QUARTER: timedelta(days=90),
            ForecastPeriod.NEXT_YEAR: timedelta(days=365),
        }[self]
