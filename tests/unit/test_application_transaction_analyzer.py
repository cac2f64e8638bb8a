"""Unit tests for TransactionAnalyzer.

Tests for:
- Keyword categorization (ordered, case-insensitive, fallbacks by type)
- Category totals and averages
- Top expense categories
- Anomaly detection
"""

from decimal import Decimal

import pytest

from src.application.services import TransactionAnalyzer
from src.domain.enums import TransactionCategory, TransactionType
from tests.conftest import make_transaction, utc


@pytest.fixture
def analyzer() -> TransactionAnalyzer:
    """Stateless analyzer."""
    return TransactionAnalyzer()


@pytest.mark.unit
class TestCategorize:
    """Tests for keyword categorization."""

    @pytest.mark.parametrize(
        ("description", "expected"),
        [
            ("Зарплата за январь", TransactionCategory.SALARY),
            ("Супермаркет Перекрёсток", TransactionCategory.FOOD),
            ("Яндекс.Такси", TransactionCategory.TRANSPORT),
            ("Оплата ЖКХ", TransactionCategory.UTILITIES),
            ("NETFLIX.COM", TransactionCategory.SUBSCRIPTIONS),
            ("Аптека 36.6", TransactionCategory.HEALTH),
            ("Online course", TransactionCategory.EDUCATION),
        ],
    )
    def test_keyword_match(self, analyzer, description, expected):
        """Descriptions are matched case-insensitively."""
        assert analyzer.categorize(description, None, TransactionType.EXPENSE) == expected

    def test_earlier_category_wins(self, analyzer):
        """"магазин" is listed under food before shopping."""
        result = analyzer.categorize("Магазин у дома", None, TransactionType.EXPENSE)

        assert result == TransactionCategory.FOOD

    def test_merchant_name_is_searched(self, analyzer):
        """Keywords in the merchant name count too."""
        result = analyzer.categorize("POS 1234", "Cinema Movie Park", TransactionType.EXPENSE)

        assert result == TransactionCategory.ENTERTAINMENT

    def test_fallbacks_by_type(self, analyzer):
        """Unmatched text falls back by type; transfers stay untagged."""
        assert (
            analyzer.categorize("xyz", None, TransactionType.INCOME)
            == TransactionCategory.OTHER_INCOME
        )
        assert (
            analyzer.categorize(None, None, TransactionType.EXPENSE)
            == TransactionCategory.OTHER_EXPENSE
        )
        assert analyzer.categorize("xyz", None, TransactionType.TRANSFER) is None


@pytest.mark.unit
class TestAggregates:
    """Tests for totals, averages and rankings."""

    def test_total_by_category_uses_magnitudes_and_period(self, analyzer):
        """Expenses add as positive values within the period."""
        transactions = [
            make_transaction("-500", utc(2024, 1, 5), category=TransactionCategory.FOOD),
            make_transaction("-1000", utc(2024, 1, 20), category=TransactionCategory.FOOD),
            make_transaction("-300", utc(2024, 2, 2), category=TransactionCategory.FOOD),
            make_transaction("-50", utc(2024, 1, 7), category=TransactionCategory.TRANSPORT),
        ]

        total = analyzer.total_by_category(
            transactions, TransactionCategory.FOOD, utc(2024, 1, 1), utc(2024, 1, 31)
        )

        assert total == Decimal("1500")

    def test_average_by_category(self, analyzer):
        """Average of magnitudes; zero when the category is absent."""
        transactions = [
            make_transaction("-100", utc(2024, 1, 5), category=TransactionCategory.FOOD),
            make_transaction("-300", utc(2024, 1, 6), category=TransactionCategory.FOOD),
        ]

        assert analyzer.average_by_category(transactions, TransactionCategory.FOOD) == Decimal(
            "200"
        )
        assert analyzer.average_by_category(transactions, TransactionCategory.HEALTH) == 0

    def test_top_expense_categories(self, analyzer):
        """Categories are ranked by total, income ignored."""
        transactions = [
            make_transaction("-100", utc(2024, 1, 5), category=TransactionCategory.FOOD),
            make_transaction("-150", utc(2024, 1, 6), category=TransactionCategory.FOOD),
            make_transaction("-400", utc(2024, 1, 7), category=TransactionCategory.BILLS),
            make_transaction("-20", utc(2024, 1, 8), category=TransactionCategory.TRANSPORT),
            make_transaction("90000", utc(2024, 1, 9), category=TransactionCategory.SALARY),
        ]

        top = analyzer.top_expense_categories(transactions, limit=2)

        assert [(t.category, t.total, t.count) for t in top] == [
            (TransactionCategory.BILLS, Decimal("400"), 1),
            (TransactionCategory.FOOD, Decimal("250"), 2),
        ]


@pytest.mark.unit
class TestDetectAnomalies:
    """Tests for anomaly detection."""

    def test_needs_more_than_five_expenses(self, analyzer):
        """Five expenses are not enough for a baseline."""
        transactions = [make_transaction("-100", utc(2024, 1, d)) for d in range(1, 5)]
        transactions.append(make_transaction("-10000", utc(2024, 1, 6)))

        assert analyzer.detect_anomalies(transactions) == []

    def test_flags_expense_above_three_times_average(self, analyzer):
        """An expense over 3x the average magnitude is flagged."""
        transactions = [make_transaction("-100", utc(2024, 1, d)) for d in range(1, 10)]
        outlier = make_transaction("-5000", utc(2024, 1, 15))
        transactions.append(outlier)

        assert analyzer.detect_anomalies(transactions) == [outlier]
