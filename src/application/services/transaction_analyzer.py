"""Transaction analyzer.

Keyword categorization and read-side aggregates over ingested transactions.
Used by SyncOrchestrator to tag transactions the provider left uncategorized,
and by callers that need per-category spending summaries.

Aggregates use magnitudes: an expense of -1200 contributes 1200.

Usage:
    analyzer = TransactionAnalyzer()
    category = analyzer.categorize("Супермаркет Пятёрочка", None, TransactionType.EXPENSE)
    top = analyzer.top_expense_categories(transactions, limit=3)
"""

from collections import defaultdict
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from src.domain.entities import Transaction
from src.domain.enums import TransactionCategory, TransactionType

# Checked in order; the first category with a matching keyword wins.
CATEGORY_KEYWORDS: tuple[tuple[TransactionCategory, tuple[str, ...]], ...] = (
    (TransactionCategory.SALARY, ("зарплата", "salary", "зп")),
    (TransactionCategory.BONUS, ("премия", "bonus")),
    (
        TransactionCategory.FOOD,
        (
            "магазин",
            "store",
            "супермаркет",
            "supermarket",
            "продукты",
            "еда",
            "кафе",
            "ресторан",
            "restaurant",
            "cafe",
        ),
    ),
    (
        TransactionCategory.TRANSPORT,
        (
            "транспорт",
            "transport",
            "метро",
            "metro",
            "автобус",
            "bus",
            "такси",
            "taxi",
            "uber",
            "яндекс.такси",
        ),
    ),
    (
        TransactionCategory.UTILITIES,
        (
            "коммунальные",
            "utilities",
            "жкх",
            "электричество",
            "газ",
            "вода",
            "electricity",
            "gas",
            "water",
        ),
    ),
    (
        TransactionCategory.SHOPPING,
        ("покупка", "shopping", "магазин", "store", "интернет-магазин"),
    ),
    (
        TransactionCategory.ENTERTAINMENT,
        ("кино", "movie", "театр", "theater", "развлечения", "entertainment", "игра", "game"),
    ),
    (
        TransactionCategory.HEALTH,
        (
            "больница",
            "hospital",
            "клиника",
            "clinic",
            "врач",
            "doctor",
            "аптека",
            "pharmacy",
            "медицина",
        ),
    ),
    (
        TransactionCategory.EDUCATION,
        (
            "образование",
            "education",
            "курс",
            "course",
            "школа",
            "school",
            "университет",
            "university",
        ),
    ),
    (
        TransactionCategory.SUBSCRIPTIONS,
        ("подписка", "subscription", "netflix", "spotify", "яндекс.плюс", "youtube"),
    ),
    (TransactionCategory.BILLS, ("счет", "bill", "платеж", "payment")),
)

ANOMALY_MIN_EXPENSES = 5
ANOMALY_FACTOR = Decimal("3")


@dataclass(frozen=True)
class CategoryTotal:
    """Spending summary for one category.

    Attributes:
        category: Expense category.
        total: Sum of magnitudes.
        count: Number of transactions.
    """

    category: TransactionCategory
    total: Decimal
    count: int


class TransactionAnalyzer:
    """Stateless categorization and aggregation helpers."""

    def categorize(
        self,
        description: str | None,
        merchant_name: str | None,
        transaction_type: TransactionType,
    ) -> TransactionCategory | None:
        """Guess a category from free text.

        Matches keywords against the lowercased description and merchant name.
        Falls back to OTHER_INCOME / OTHER_EXPENSE by type; transfers without
        a keyword match stay uncategorized.

        Args:
            description: Transaction description.
            merchant_name: Merchant name.
            transaction_type: Direction of the transaction.

        Returns:
            Guessed category, or None for unmatched transfers.
        """
        text = " ".join(part for part in (description, merchant_name) if part).lower()

        if text:
            for category, keywords in CATEGORY_KEYWORDS:
                if any(keyword in text for keyword in keywords):
                    return category

        match transaction_type:
            case TransactionType.INCOME:
                return TransactionCategory.OTHER_INCOME
            case TransactionType.EXPENSE:
                return TransactionCategory.OTHER_EXPENSE
            case _:
                return None

    def total_by_category(
        self,
        transactions: list[Transaction],
        category: TransactionCategory,
        start: datetime | None = None,
        end: datetime | None = None,
    ) -> Decimal:
        """Sum magnitudes of one category, optionally within [start, end]."""
        return sum(
            (
                t.magnitude
                for t in _in_period(transactions, start, end)
                if t.category == category
            ),
            Decimal("0"),
        )

    def average_by_category(
        self,
        transactions: list[Transaction],
        category: TransactionCategory,
    ) -> Decimal:
        """Average magnitude of one category (0 when absent)."""
        amounts = [t.magnitude for t in transactions if t.category == category]
        if not amounts:
            return Decimal("0")
        return sum(amounts, Decimal("0")) / len(amounts)

    def top_expense_categories(
        self,
        transactions: list[Transaction],
        limit: int = 5,
    ) -> list[CategoryTotal]:
        """Largest expense categories by total magnitude, descending.

        Args:
            transactions: Transactions to aggregate.
            limit: Maximum categories returned.

        Returns:
            Up to ``limit`` category totals.
        """
        totals: dict[TransactionCategory, Decimal] = defaultdict(Decimal)
        counts: dict[TransactionCategory, int] = defaultdict(int)

        for transaction in transactions:
            if not transaction.is_expense or transaction.category is None:
                continue
            totals[transaction.category] += transaction.magnitude
            counts[transaction.category] += 1

        ranked = sorted(
            (CategoryTotal(category=c, total=totals[c], count=counts[c]) for c in totals),
            key=lambda item: item.total,
            reverse=True,
        )
        return ranked[:limit]

    def detect_anomalies(self, transactions: list[Transaction]) -> list[Transaction]:
        """Flag unusually large expenses.

        Needs more than five expenses to establish a baseline. An expense is
        anomalous when its magnitude exceeds three times the average magnitude.

        Args:
            transactions: Transactions to inspect.

        Returns:
            Anomalous expenses in input order.
        """
        expenses = [t for t in transactions if t.is_expense]
        if len(expenses) <= ANOMALY_MIN_EXPENSES:
            return []

        average = sum((t.magnitude for t in expenses), Decimal("0")) / len(expenses)
        threshold = average * ANOMALY_FACTOR
        return [t for t in expenses if t.magnitude > threshold]


def _in_period(
    transactions: list[Transaction],
    start: datetime | None,
    end: datetime | None,
) -> list[Transaction]:
    return [
        t
        for t in transactions
        if (start is None or t.transaction_date >= start)
        and (end is None or t.transaction_date <= end)
    ]
