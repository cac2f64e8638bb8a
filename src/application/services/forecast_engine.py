"""Forecast engine.

Projects next-period income or expense from synchronized transactions by
blending independent estimators:

    Income:  moving average, trend, pattern
    Expense: moving average, trend, category-based

The combined amount and confidence are the arithmetic mean of the component
estimators. An estimator without input yields amount 0 and confidence 0
tagged INSUFFICIENT_DATA, and still takes part in the mean.

All amounts are magnitudes; expense amounts (stored negative) are aggregated
as absolute values.

Usage:
    engine = ForecastEngine()
    forecast = engine.forecast(transactions, ForecastDirection.EXPENSE)
    forecast.amount, forecast.confidence, forecast.components
"""

import calendar
from collections import defaultdict
from datetime import UTC, datetime
from decimal import ROUND_HALF_UP, Decimal

import structlog

from src.domain.entities import Transaction
from src.domain.enums import (
    ForecastDirection,
    ForecastMethod,
    ForecastPeriod,
    TransactionCategory,
)
from src.domain.enums.budget_period import add_months
from src.domain.value_objects import Forecast

logger = structlog.get_logger(__name__)

MOVING_AVERAGE_MONTHS = 3
TREND_MONTHS = 6
TREND_MAX_CONFIDENCE = 0.9
PATTERN_HEAD_DAYS = 5
PATTERN_TAIL_DAYS = 6
PATTERN_CONFIDENCE = 0.6
TOP_CATEGORY_COUNT = 5
CATEGORY_MAX_CONFIDENCE = 0.8
PER_CATEGORY_CONFIDENCE = 0.7

_CENT = Decimal("0.01")


class ForecastEngine:
    """Blends simple estimators into income and expense projections."""

    def forecast(
        self,
        transactions: list[Transaction],
        direction: ForecastDirection,
        period: ForecastPeriod = ForecastPeriod.NEXT_MONTH,
        now: datetime | None = None,
    ) -> Forecast:
        """Project the next period for one direction.

        Only completed transactions of the matching direction are used.

        Args:
            transactions: Candidate transactions (any direction/status).
            direction: Income or expense.
            period: Horizon the result is labelled with.
            now: Reference instant (defaults to current UTC time).

        Returns:
            Combined forecast carrying its component estimates, or an
            INSUFFICIENT_DATA forecast when nothing matches.
        """
        now = now or datetime.now(UTC)
        matching = [t for t in transactions if _matches(t, direction)]

        if not matching:
            logger.debug("forecast_insufficient_data", direction=direction.value)
            return _insufficient(direction, period)

        # Income swaps the category estimator for pay-cycle days
        if direction == ForecastDirection.EXPENSE:
            third = self._category_based(matching, direction, period)
        else:
            third = self._pattern(matching, direction, period)

        components = [
            self._moving_average(matching, direction, period, now),
            self._trend(matching, direction, period, now),
            third,
        ]

        amount = sum((c.amount for c in components), Decimal("0")) / len(components)
        confidence = sum(c.confidence for c in components) / len(components)

        result = Forecast(
            amount=_money(amount),
            confidence=confidence,
            method=ForecastMethod.COMBINED,
            direction=direction,
            period=period,
            components=tuple(components),
        )
        logger.debug(
            "forecast_computed",
            direction=direction.value,
            amount=str(result.amount),
            confidence=round(result.confidence, 3),
            transactions=len(matching),
        )
        return result

    def forecast_income(
        self,
        transactions: list[Transaction],
        period: ForecastPeriod = ForecastPeriod.NEXT_MONTH,
        now: datetime | None = None,
    ) -> Forecast:
        """Project next-period income."""
        return self.forecast(transactions, ForecastDirection.INCOME, period, now)

    def forecast_expenses(
        self,
        transactions: list[Transaction],
        period: ForecastPeriod = ForecastPeriod.NEXT_MONTH,
        now: datetime | None = None,
    ) -> Forecast:
        """Project next-period expenses."""
        return self.forecast(transactions, ForecastDirection.EXPENSE, period, now)

    def forecast_by_category(
        self,
        transactions: list[Transaction],
        period: ForecastPeriod = ForecastPeriod.NEXT_MONTH,
        now: datetime | None = None,
    ) -> list[Forecast]:
        """Run the expense forecast independently per category.

        Uncategorized expenses are grouped under OTHER_EXPENSE. Every
        per-category result carries a flat confidence.

        Returns:
            One forecast per category, largest amount first.
        """
        groups: dict[TransactionCategory, list[Transaction]] = defaultdict(list)
        for transaction in transactions:
            if transaction.is_expense:
                groups[transaction.category or TransactionCategory.OTHER_EXPENSE].append(
                    transaction
                )

        results = []
        for category, group in groups.items():
            inner = self.forecast(group, ForecastDirection.EXPENSE, period, now)
            results.append(
                Forecast(
                    amount=inner.amount,
                    confidence=PER_CATEGORY_CONFIDENCE,
                    method=inner.method,
                    direction=ForecastDirection.EXPENSE,
                    period=period,
                    category=category.value,
                    components=inner.components,
                )
            )
        return sorted(results, key=lambda f: f.amount, reverse=True)

    # =========================================================================
    # Estimators
    # =========================================================================

    def _moving_average(
        self,
        transactions: list[Transaction],
        direction: ForecastDirection,
        period: ForecastPeriod,
        now: datetime,
    ) -> Forecast:
        since = add_months(now, -MOVING_AVERAGE_MONTHS)
        totals = _monthly_totals(t for t in transactions if t.transaction_date >= since)
        if not totals:
            return _insufficient(direction, period)

        average = sum(totals.values(), Decimal("0")) / len(totals)
        return Forecast(
            amount=_money(average),
            confidence=min(len(totals) / MOVING_AVERAGE_MONTHS, 1.0),
            method=ForecastMethod.MOVING_AVERAGE,
            direction=direction,
            period=period,
        )

    def _trend(
        self,
        transactions: list[Transaction],
        direction: ForecastDirection,
        period: ForecastPeriod,
        now: datetime,
    ) -> Forecast:
        since = add_months(now, -TREND_MONTHS)
        totals = _monthly_totals(t for t in transactions if t.transaction_date >= since)
        if len(totals) < 2:
            return _insufficient(direction, period)

        # Ordinary least squares over (month index, monthly total)
        ys = [totals[key] for key in sorted(totals)]
        n = len(ys)
        sum_x = Decimal(sum(range(n)))
        sum_y = sum(ys, Decimal("0"))
        sum_xy = sum((Decimal(x) * y for x, y in enumerate(ys)), Decimal("0"))
        sum_x2 = Decimal(sum(x * x for x in range(n)))

        slope = (n * sum_xy - sum_x * sum_y) / (n * sum_x2 - sum_x * sum_x)
        intercept = (sum_y - slope * sum_x) / n
        projected = max(Decimal("0"), intercept + slope * n)

        return Forecast(
            amount=_money(projected),
            confidence=min(n / TREND_MONTHS, TREND_MAX_CONFIDENCE),
            method=ForecastMethod.TREND_ANALYSIS,
            direction=direction,
            period=period,
        )

    def _pattern(
        self,
        transactions: list[Transaction],
        direction: ForecastDirection,
        period: ForecastPeriod,
    ) -> Forecast:
        amounts = [t.magnitude for t in transactions if _is_cycle_day(t.transaction_date)]
        if not amounts:
            return _insufficient(direction, period)

        return Forecast(
            amount=_money(sum(amounts, Decimal("0")) / len(amounts)),
            confidence=PATTERN_CONFIDENCE,
            method=ForecastMethod.PATTERN_RECOGNITION,
            direction=direction,
            period=period,
        )

    def _category_based(
        self,
        transactions: list[Transaction],
        direction: ForecastDirection,
        period: ForecastPeriod,
    ) -> Forecast:
        totals: dict[TransactionCategory, Decimal] = defaultdict(Decimal)
        for transaction in transactions:
            totals[transaction.category or TransactionCategory.OTHER_EXPENSE] += (
                transaction.magnitude
            )
        if not totals:
            return _insufficient(direction, period)

        top = sorted(totals.values(), reverse=True)[:TOP_CATEGORY_COUNT]
        return Forecast(
            amount=_money(sum(top, Decimal("0"))),
            confidence=min(len(top) / TOP_CATEGORY_COUNT, CATEGORY_MAX_CONFIDENCE),
            method=ForecastMethod.CATEGORY_BASED,
            direction=direction,
            period=period,
        )


def _matches(transaction: Transaction, direction: ForecastDirection) -> bool:
    if not transaction.is_completed:
        return False
    if direction == ForecastDirection.INCOME:
        return transaction.is_income
    return transaction.is_expense


def _monthly_totals(transactions) -> dict[tuple[int, int], Decimal]:
    totals: dict[tuple[int, int], Decimal] = defaultdict(Decimal)
    for transaction in transactions:
        moment = transaction.transaction_date
        totals[(moment.year, moment.month)] += transaction.magnitude
    return dict(totals)


def _is_cycle_day(moment: datetime) -> bool:
    """First five or last six days of the calendar month."""
    days_in_month = calendar.monthrange(moment.year, moment.month)[1]
    return moment.day <= PATTERN_HEAD_DAYS or moment.day > days_in_month - PATTERN_TAIL_DAYS


def _insufficient(direction: ForecastDirection, period: ForecastPeriod) -> Forecast:
    return Forecast(
        amount=Decimal("0"),
        confidence=0.0,
        method=ForecastMethod.INSUFFICIENT_DATA,
        direction=direction,
        period=period,
    )


def _money(value: Decimal) -> Decimal:
    return value.quantize(_CENT, rounding=ROUND_HALF_UP)
