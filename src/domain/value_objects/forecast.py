"""Forecast result value object."""

from dataclasses import dataclass, field
from decimal import Decimal

from src.domain.enums import ForecastDirection, ForecastMethod, ForecastPeriod


@dataclass(frozen=True, kw_only=True)
class Forecast:
    """Projected income or expense magnitude for a period.

    Attributes:
        amount: Projected magnitude (never negative).
        confidence: Confidence in [0, 1].
        method: Estimator that produced the amount.
        direction: Income or expense.
        period: Horizon the projection is labelled with.
        category: Category for per-category forecasts.
        components: Estimator results averaged into a combined forecast.
    """

    amount: Decimal
    confidence: float
    method: ForecastMethod
    direction: ForecastDirection
    period: ForecastPeriod = ForecastPeriod.NEXT_MONTH
    category: str | None = None
    components: tuple["Forecast", ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        """Validate confidence range."""
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(f"Confidence must be within [0, 1]: {self.confidence}")

    @property
    def is_insufficient(self) -> bool:
        """Whether no data backed this estimate."""
        return self.method == ForecastMethod.INSUFFICIENT_DATA
