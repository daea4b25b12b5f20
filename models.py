from dataclasses import dataclass as std_dataclass, field
from enum import Enum

from pydantic.dataclasses import dataclass

from constants import WINDOW_LABELS


@dataclass(frozen=True)
class Expense:
    """A persisted expense row."""

    id: int
    amount: float
    category: str
    note: str | None
    date: str

    @classmethod
    def from_row(cls, row) -> "Expense":
        """Create an Expense from a database row (tuple or aiosqlite.Row)."""
        return cls(
            id=row[0],
            amount=row[1],
            category=row[2],
            note=row[3],
            date=row[4],
        )


class Window(str, Enum):
    """Time range used to filter expenses for the summary."""

    ALL = "ALL"
    WEEK = "WEEK"
    MONTH = "MONTH"

    @property
    def label(self) -> str:
        return WINDOW_LABELS[self.value]


@std_dataclass(frozen=True)
class ExpenseInput:
    """Validated form values ready to be written to the store."""

    amount: float
    category: str
    note: str | None = None


@std_dataclass(frozen=True)
class CategoryTotals:
    total: float = 0
    by_category: dict[str, float] = field(default_factory=dict)


@std_dataclass(frozen=True)
class Summary:
    """Expenses of one window together with their totals."""

    window: Window
    records: list[Expense] = field(default_factory=list)
    total: float = 0
    by_category: dict[str, float] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not self.by_category
